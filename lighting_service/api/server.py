"""
FastAPI server for the lighting service.
"""

import errno
import logging
import socket
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
import uvicorn

from .. import __version__
from ..config import Config, get_config
from ..registry.devices import DeviceRegistry
from .middleware import MiddlewarePipeline, default_pipeline

logger = logging.getLogger(__name__)

ANY_IPV6 = "::"
ANY_IPV4 = "0.0.0.0"

_IPV6_UNAVAILABLE = (errno.EAFNOSUPPORT, errno.EADDRNOTAVAIL)


class ServerBindError(RuntimeError):
    """The listening port could not be acquired."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: Config = app.state.config

    logger.info(f"Lighting service is listening on {config.server.port}")

    yield

    logger.info("Lighting service stopped")


def create_app(
    config: Optional[Config] = None,
    registry: Optional[DeviceRegistry] = None,
    pipeline: Optional[MiddlewarePipeline] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    The app owns its device registry; pass one in to share or inspect
    it, otherwise a freshly seeded registry is created.
    """
    from .routes import router

    config = config or get_config()

    app = FastAPI(
        title="Lighting Service",
        description="Example lighting device backend for tutorials",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry if registry is not None else DeviceRegistry()

    # CORS, access log and simulated latency
    app.add_middleware(
        BaseHTTPMiddleware,
        dispatch=pipeline or default_pipeline(config.server),
    )

    app.include_router(router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def _open_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)

    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if host == ANY_IPV6:
            # Accept IPv4 clients too
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        sock.bind((host, port))
    except (OSError, OverflowError):
        sock.close()
        raise

    return sock


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Acquire the listening socket before the server starts.

    ``::`` listens on IPv6 and IPv4 at once; on hosts without IPv6 it
    falls back to ``0.0.0.0``.
    """
    try:
        sock = _open_socket(host, port)
    except (OSError, OverflowError) as e:
        if host == ANY_IPV6 and getattr(e, "errno", None) in _IPV6_UNAVAILABLE:
            logger.warning(f"IPv6 is not available ({e}), listening on {ANY_IPV4} only")
            return bind_socket(ANY_IPV4, port)

        logger.error(f"Lighting service could not start on {host}:{port}: {e}")
        raise ServerBindError(f"Could not bind {host}:{port}: {e}") from e

    sock.set_inheritable(True)
    return sock


def run_server(config: Optional[Config] = None) -> None:
    """Run the server with uvicorn."""
    config = config or get_config()

    sock = bind_socket(config.server.host, config.server.port)
    app = create_app(config)

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            log_level="info",
            access_log=False,  # Requests are logged by the pipeline
        )
    )
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()
