"""archmarket CLI - Main Entry Point.

Commands:
    serve        - Run the API under uvicorn
    init-db      - Create the document store schema
    seed         - Load the sample design catalogue
    keygen       - Write a fresh signing key ring
    issue-token  - Print a bearer token for a subject
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from . import __cli_name__, __version__
from .output import _CHECK, _CROSS, error, info, kv, success, warning

logger = logging.getLogger("archmarket.cli")


def _load_config(config_path: Optional[str]):
    from archmarket.config import ConfigLoader

    return ConfigLoader.load(paths=[config_path] if config_path else None)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


# ═══════════════════════════════════════════════════════════════════════════
# Root group
# ═══════════════════════════════════════════════════════════════════════════


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx, verbose: bool):
    """Architecture design marketplace API.

    \b
    Quick start:
      archmarket keygen --out keys.json
      archmarket init-db
      archmarket seed --author admin
      archmarket serve
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


# ============================================================================
# Commands
# ============================================================================

@cli.command('serve')
@click.option('--host', type=str, default=None, help='Bind host (default: server.host)')
@click.option('--port', type=int, default=None, help='Bind port (default: server.port)')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='YAML config file')
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], config_path: Optional[str]):
    """
    Start the API server.

    Examples:
      archmarket serve
      archmarket serve --port=8080
      archmarket serve --config=production.yaml
    """
    import uvicorn

    from archmarket.server import create_app

    try:
        config = _load_config(config_path)
        level = "DEBUG" if ctx.obj['verbose'] else config.get("logging.level")
        _setup_logging(level)

        host = host or config.get("server.host")
        port = port or config.get("server.port")
        app = create_app(config)

        logger.info(f"Starting uvicorn server on {host}:{port}")
        uvicorn.run(app, host=host, port=port, log_level=level.lower())

    except KeyboardInterrupt:
        click.echo()
        info(f"  {_CHECK} Server stopped")
    except Exception as e:
        error(f"  {_CROSS} Server error: {e}")
        sys.exit(1)


@cli.command('init-db')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='YAML config file')
def init_db(config_path: Optional[str]):
    """
    Create the document store schema.

    Examples:
      archmarket init-db
      ARCHMARKET_DATABASE__URL=sqlite:///prod.db archmarket init-db
    """
    from archmarket.db import create_store

    try:
        config = _load_config(config_path)
        url = config.get("database.url")
        store = create_store(url)

        async def _init():
            await store.connect()
            await store.close()

        asyncio.run(_init())
        success(f"  {_CHECK} Schema ready")
        kv("Database", url)

    except Exception as e:
        error(f"  {_CROSS} Failed to initialise database: {e}")
        sys.exit(1)


@cli.command('seed')
@click.option('--author', type=str, default='admin', help='Author id recorded on seeded designs')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='YAML config file')
@click.pass_context
def seed(ctx, author: str, config_path: Optional[str]):
    """
    Load the sample design catalogue.

    Designs whose title already exists are skipped.

    Examples:
      archmarket seed
      archmarket seed --author=5f2b0c
    """
    from archmarket.db import create_store
    from archmarket.modules.designs import DesignService, seed_designs

    try:
        config = _load_config(config_path)
        if ctx.obj['verbose']:
            _setup_logging("DEBUG")
        store = create_store(config.get("database.url"))

        async def _seed():
            await store.connect()
            try:
                return await seed_designs(DesignService(store), author)
            finally:
                await store.close()

        inserted, skipped = asyncio.run(_seed())
        success(f"  {_CHECK} Seeding complete")
        kv("Inserted", inserted)
        kv("Skipped", skipped)

    except Exception as e:
        error(f"  {_CROSS} Seeding failed: {e}")
        sys.exit(1)


@cli.command('keygen')
@click.option('--out', type=click.Path(dir_okay=False), default='keys.json', help='Key ring file')
@click.option('--force', is_flag=True, help='Overwrite an existing file')
def keygen(out: str, force: bool):
    """
    Write a fresh Ed25519 signing key ring.

    Point ``auth.keys_file`` at the result so tokens survive restarts.
    """
    from archmarket.auth import KeyRing

    path = Path(out)
    if path.exists() and not force:
        error(f"  {_CROSS} {path} already exists (use --force to overwrite)")
        sys.exit(1)

    KeyRing.generate().to_file(path)
    success(f"  {_CHECK} Wrote key ring")
    kv("File", str(path))


@cli.command('issue-token')
@click.argument('subject')
@click.option('--role', 'roles', multiple=True, help='Role claim (repeatable, default: customer)')
@click.option('--ttl', type=int, default=None, help='Lifetime in seconds')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='YAML config file')
def issue_token(subject: str, roles: Tuple[str, ...], ttl: Optional[int], config_path: Optional[str]):
    """
    Print a bearer token for SUBJECT.

    Examples:
      archmarket issue-token 5f2b0c
      archmarket issue-token admin --role admin --ttl 600
    """
    from archmarket.auth import KeyRing, TokenConfig, TokenManager

    config = _load_config(config_path)
    keys_file = config.get("auth.keys_file")
    if not keys_file or not Path(keys_file).exists():
        error(f"  {_CROSS} auth.keys_file is not set or missing; run `archmarket keygen` first")
        sys.exit(1)

    manager = TokenManager(
        KeyRing.from_file(Path(keys_file)),
        TokenConfig(
            issuer=config.get("auth.issuer"),
            audience=config.get("auth.audience"),
            access_token_ttl=config.get("auth.access_token_ttl"),
        ),
    )
    if not roles:
        warning("No --role given; issuing a customer token")
    click.echo(manager.issue_access_token(subject, roles=list(roles) or None, ttl=ttl))


def main():
    """Entry point for `archmarket` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
