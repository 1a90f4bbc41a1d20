import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger("fxrates.errors")


class RateServiceError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error interno"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class CurrencyNotFound(RateServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Divisa no encontrada"


class InvalidInput(RateServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Parametros invalidos"


class StoreUnavailable(RateServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Base de datos no disponible"


class StoreTimeout(StoreUnavailable):
    default_message = "Tiempo de espera agotado para obtener conexion"


class UpstreamFetchFailed(RateServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "No se pudo obtener tasas del proveedor"


def rate_service_error_handler(request: Request, exc: RateServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Parametros invalidos"},
    )


def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Error interno"},
    )
