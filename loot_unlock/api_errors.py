import traceback
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


def install_error_handlers(app: FastAPI, debug_trace: bool = False) -> None:
    @app.exception_handler(Exception)
    async def _unhandled_exception(request: Request, exc: Exception):
        payload: Dict[str, Any] = {
            "ok": False,
            "error": type(exc).__name__,
            "message": str(exc),
            "path": request.url.path,
        }

        if debug_trace:
            payload["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

        return JSONResponse(status_code=500, content=payload)
