"""
archmarket command-line interface.

Usage:
    archmarket serve
    archmarket init-db
    archmarket seed --author <admin-id>
    archmarket keygen --out keys.json
    archmarket issue-token <subject> --role admin
"""

__version__ = "1.0.0"
__cli_name__ = "archmarket"


def main():
    """Wrapper to avoid eager import of __main__ which causes warnings with -m."""
    from .__main__ import main as _main
    return _main()
