from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status

from app.routes.backend import router as backend_router
from app.routes.regions import router as regions_router
from app.routes.settings import router as settings_router
from app.services.errors import (
    ProviderError,
    ProvisioningError,
    SettingsNotFoundError,
    SettingsStoreError,
    SettingsValidationError,
)


_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _ensure_logging() -> None:
    level = os.getenv("SCIA_LOG_LEVEL", "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_LOG_FORMAT)
        return
    # Root already configured (e.g. by the server); keep its handlers, swap the format.
    root.setLevel(level)
    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in root.handlers:
        handler.setFormatter(formatter)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _ensure_logging()
    yield


app = FastAPI(lifespan=lifespan)

app.include_router(backend_router)
app.include_router(regions_router)
app.include_router(settings_router)


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Map AWS call failures to a consistent HTTP response.

    Returns:
        502 Bad Gateway with a JSON body: {"detail": "..."}
    """
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


@app.exception_handler(ProvisioningError)
async def provisioning_error_handler(request: Request, exc: ProvisioningError) -> JSONResponse:
    """Report which state bucket step failed.

    The bucket may be half configured; calling the endpoint again converges it.

    Returns:
        502 Bad Gateway with a JSON body: {"detail": "...", "step": "..."}
    """
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc), "step": exc.step.value},
    )


@app.exception_handler(SettingsValidationError)
async def settings_validation_error_handler(request: Request, exc: SettingsValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.reason, "field": exc.field},
    )


@app.exception_handler(SettingsNotFoundError)
async def settings_not_found_handler(request: Request, exc: SettingsNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(SettingsStoreError)
async def settings_store_error_handler(request: Request, exc: SettingsStoreError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


@app.get("/")
async def root():
    return {"message": "SCIA state backend service is running."}
