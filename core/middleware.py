from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger
from schemas.common import error_response, ApiStatus

log = get_logger("middleware")

STATUS_BY_CODE = {
    400: ApiStatus.VALIDATION_ERROR,
    401: ApiStatus.AUTHENTICATION_ERROR,
    403: ApiStatus.AUTHORIZATION_ERROR,
    404: ApiStatus.NOT_FOUND,
    409: ApiStatus.CONFLICT,
    422: ApiStatus.VALIDATION_ERROR,
    429: ApiStatus.RATE_LIMITED,
}


def setup_middleware(app: FastAPI, frontend_url: str):
    """Setup CORS and global exception handlers"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log.info("request_validation_failed", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response(
                message="Request validation failed",
                status=ApiStatus.VALIDATION_ERROR,
                error_code="VALIDATION_ERROR",
                data={"errors": jsonable_errors(exc)},
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        status = STATUS_BY_CODE.get(
            exc.status_code,
            ApiStatus.SERVER_ERROR if exc.status_code >= 500 else ApiStatus.ERROR,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(message=str(exc.detail), status=status),
            headers=getattr(exc, "headers", None),
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in frontend_url.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Strip non-serializable context (e.g. raised exceptions) from pydantic errors."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
