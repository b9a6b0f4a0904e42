from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from app.errors import SavingsCoachError


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe(err: dict) -> str:
    path = ".".join(str(p) for p in err["loc"] if p != "body")
    return f"{path}: {err['msg']}" if path else err["msg"]


async def pipeline_error(request: Request, exc: SavingsCoachError):
    logger.error("Error in chat pipeline: {}", exc.message)
    return _error(exc.status_code, exc.message)


async def validation_error(request: Request, exc: RequestValidationError):
    details = "; ".join(_describe(err) for err in exc.errors())
    logger.warning("Rejected {} {}: {}", request.method, request.url.path, details)
    return _error(422, details or "Invalid request")


async def unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on {} {}", request.method, request.url.path)
    return _error(500, str(exc) or "Unknown error")


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as ``{"error": message}``."""
    app.add_exception_handler(SavingsCoachError, pipeline_error)
    app.add_exception_handler(RequestValidationError, validation_error)
    app.add_exception_handler(Exception, unexpected_error)
