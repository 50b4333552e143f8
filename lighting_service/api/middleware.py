"""
Request pipeline for the lighting service.

Every request passes through an ordered list of stages. A stage receives
the request and a ``call_next`` callable; it either returns a response of
its own or awaits ``call_next`` to hand the request to the next stage.
The last stage forwards to the application's routes.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence

from starlette.requests import Request
from starlette.responses import Response

from ..config import ServerConfig

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]
Stage = Callable[[Request, CallNext], Awaitable[Response]]


class MiddlewarePipeline:
    """Runs a request through a fixed sequence of stages."""

    def __init__(self, stages: Sequence[Stage]):
        self.stages: List[Stage] = list(stages)

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        return await self._dispatch(0, request, call_next)

    async def _dispatch(self, index: int, request: Request, call_next: CallNext) -> Response:
        if index >= len(self.stages):
            return await call_next(request)

        stage = self.stages[index]

        async def forward(req: Request) -> Response:
            return await self._dispatch(index + 1, req, call_next)

        return await stage(request, forward)


def cors_headers(allow_origin: str, allow_headers: str) -> Stage:
    """Add permissive cross-origin headers to every response."""

    async def stage(request: Request, call_next: CallNext) -> Response:
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = allow_origin
        response.headers["Access-Control-Allow-Headers"] = allow_headers
        return response

    return stage


async def access_log(request: Request, call_next: CallNext) -> Response:
    """Log status, method and URL once the response is ready."""
    response = await call_next(request)
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    logger.info(f"{response.status_code} {request.method} {url}")
    return response


def artificial_delay(seconds: float, sleep=asyncio.sleep) -> Stage:
    """Pause before routing so clients can show their loading states."""

    async def stage(request: Request, call_next: CallNext) -> Response:
        if seconds > 0:
            await sleep(seconds)
        return await call_next(request)

    return stage


def default_pipeline(server: ServerConfig) -> MiddlewarePipeline:
    """Build the standard pipeline: CORS, access log, delay."""
    return MiddlewarePipeline([
        cors_headers(server.allow_origin, server.allow_headers),
        access_log,
        artificial_delay(server.delay_seconds),
    ])
