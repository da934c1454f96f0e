"""HTTP transport — REST projection of the tool catalog plus a JSON-RPC endpoint.

Routes::

    GET  /health          liveness, no credentials required
    GET  /tools           the tool registry
    POST /tools/{name}    run one tool; the JSON body is its arguments
    POST /mcp             JSON-RPC envelope or batch
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from accessaudit.config import ServerSettings
from accessaudit.errors import AuditError, BadInputError, NotFoundError
from accessaudit.tools.models import ToolCall
from accessaudit.transports.auth import is_authorized

if TYPE_CHECKING:
    from accessaudit.protocol.router import ProtocolRouter

logger = logging.getLogger(__name__)


class Unauthorized(Exception):
    """Raised by the credential dependency; rendered as a 401."""


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(router: ProtocolRouter, settings: ServerSettings | None = None) -> FastAPI:
    """Build the FastAPI application serving *router*."""
    settings = settings or ServerSettings()
    app = FastAPI(title=settings.name, version=settings.version)

    if not settings.api_key:
        logger.warning("No API key configured; the HTTP server accepts every request")

    async def authenticate(request: Request) -> None:
        if settings.api_key and not is_authorized(request.headers, settings.api_key):
            raise Unauthorized

    @app.exception_handler(Unauthorized)
    async def _unauthorized(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content={"error": "Unauthorized", "message": "Invalid or missing API key"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.name, "version": settings.version}

    @app.get("/tools", dependencies=[Depends(authenticate)])
    async def list_tools() -> dict[str, Any]:
        return {"tools": [tool.to_json() for tool in router.dispatcher.all_tools()]}

    @app.post("/tools/{tool_name}", dependencies=[Depends(authenticate)])
    async def call_tool(tool_name: str, request: Request) -> Response:
        raw = await request.body()
        try:
            arguments = json.loads(raw) if raw.strip() else {}
        except (ValueError, RecursionError) as exc:
            return _error(400, f"Request body must be JSON: {exc}")
        if not isinstance(arguments, dict):
            return _error(400, "Request body must be a JSON object")

        try:
            result = await router.dispatcher.execute(ToolCall(name=tool_name, arguments=arguments))
        except BadInputError as exc:
            return _error(400, str(exc))
        except NotFoundError as exc:
            return _error(404, str(exc))
        except AuditError as exc:
            logger.error("Tool %s failed: %s", tool_name, exc)
            return _error(500, str(exc))
        except Exception as exc:
            logger.exception("Error executing tool %s", tool_name)
            return _error(500, str(exc) or exc.__class__.__name__)
        return JSONResponse(content=result)

    @app.post("/mcp", dependencies=[Depends(authenticate)])
    async def rpc(request: Request) -> Response:
        reply = await router.handle_text(await request.body())
        if reply is None:
            return Response(status_code=204)
        return JSONResponse(content=reply)

    return app


def serve_http(router: ProtocolRouter, settings: ServerSettings) -> None:
    """Run the app under uvicorn until interrupted."""
    import uvicorn

    logger.info("HTTP server listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(
        create_app(router, settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
