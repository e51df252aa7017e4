"""
archmarket - Architecture design marketplace API.

Customers browse and buy architectural designs, leave reviews, read the
blog and commission custom work; admins run the catalogue and the order
lifecycle.

Quick start:
    from archmarket import create_app

    app = create_app()          # ASGI application, mount with uvicorn
"""

from .config import ConfigError, ConfigLoader
from .server import API_MOUNT, ArchmarketServer, create_app

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "API_MOUNT",
    "ArchmarketServer",
    "ConfigError",
    "ConfigLoader",
    "create_app",
]
