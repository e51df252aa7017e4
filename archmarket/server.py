"""
ArchmarketServer - application assembly.

``create_app`` wires configuration, the document store, token handling
and every module's services into one container, compiles the controller
routes under ``/api`` and returns the ASGI application.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .asgi import ASGIAdapter
from .auth import AuthMiddleware, KeyRing, TokenConfig, TokenManager
from .config import ConfigLoader
from .controller import ControllerEngine, ControllerRouter
from .db import DocumentStore, create_store
from .di import Container
from .faults import FaultEngine
from .modules import CONTROLLERS
from .modules.blog import BlogService
from .modules.custom_requests import CustomRequestService
from .modules.designs import DesignService
from .modules.orders import OrderService
from .modules.reviews import ReviewService

API_MOUNT = "/api"

logger = logging.getLogger("archmarket.server")


def load_key_ring(config: ConfigLoader) -> KeyRing:
    """Key ring from ``auth.keys_file``, or a fresh in-memory ring."""
    keys_file = config.get("auth.keys_file")
    if keys_file and Path(keys_file).exists():
        logger.info(f"Loading signing keys from {keys_file}")
        return KeyRing.from_file(Path(keys_file))
    logger.warning("No auth.keys_file configured; tokens signed with an ephemeral key")
    return KeyRing.generate()


class ArchmarketServer:
    """
    Owns the app container and the store lifecycle.

    ``startup`` / ``shutdown`` are idempotent and run from ASGI lifespan.
    """

    def __init__(self, config: ConfigLoader, container: Container, store: DocumentStore):
        self.config = config
        self.container = container
        self.store = store
        self.router = ControllerRouter(mount=API_MOUNT)
        self._startup_complete = False
        self._startup_lock = asyncio.Lock()

        for controller_class in CONTROLLERS:
            self.router.add_controller(controller_class)

    async def startup(self):
        async with self._startup_lock:
            if self._startup_complete:
                return
            await self.store.connect()
            self._startup_complete = True
            logger.info(f"archmarket ready with {len(self.router.routes())} routes under {API_MOUNT}")

    async def shutdown(self):
        async with self._startup_lock:
            if not self._startup_complete:
                return
            await self.store.close()
            self._startup_complete = False
            logger.info("archmarket shut down")


def build_container(
    config: ConfigLoader,
    store: DocumentStore,
    key_ring: KeyRing,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    container = Container()
    container.register_value(ConfigLoader, config)
    container.register_value(DocumentStore, store)

    token_manager = TokenManager(
        key_ring,
        TokenConfig(
            issuer=config.get("auth.issuer"),
            audience=config.get("auth.audience"),
            access_token_ttl=config.get("auth.access_token_ttl"),
        ),
    )
    container.register_value(TokenManager, token_manager)
    container.register_value(AuthMiddleware, AuthMiddleware(token_manager))

    tax_rate = config.tax_rate()
    container.register_factory(DesignService, lambda c: DesignService(store))
    container.register_factory(
        OrderService, lambda c: OrderService(store, tax_rate=tax_rate, clock=clock)
    )

    async def review_service(c: Container) -> ReviewService:
        return ReviewService(store, await c.resolve_async(DesignService))

    container.register_factory(ReviewService, review_service)
    container.register_factory(BlogService, lambda c: BlogService(store, clock=clock))
    container.register_factory(CustomRequestService, lambda c: CustomRequestService(store, clock=clock))
    return container


def create_app(
    config: Optional[ConfigLoader] = None,
    *,
    store: Optional[DocumentStore] = None,
    key_ring: Optional[KeyRing] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ASGIAdapter:
    """
    Build the ASGI application.

    Args:
        config: Loaded configuration (``ConfigLoader.load()`` when omitted)
        store: Document store; built from ``database.url`` when omitted
        key_ring: Signing keys; loaded from ``auth.keys_file`` when omitted
        clock: Time source for order numbering and timestamps
    """
    config = config or ConfigLoader.load()
    store = store or create_store(config.get("database.url"), clock)
    key_ring = key_ring or load_key_ring(config)

    container = build_container(config, store, key_ring, clock)
    server = ArchmarketServer(config, container, store)
    app = ASGIAdapter(
        router=server.router,
        engine=ControllerEngine(container),
        auth=container.resolve(AuthMiddleware),
        fault_engine=FaultEngine(),
        server=server,
        request_timeout=config.request_timeout(),
    )
    return app
