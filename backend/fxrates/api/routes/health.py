from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette import status

from fxrates.api.deps import get_store
from fxrates.schemas.currency import HealthResponse
from fxrates.services.queries import health
from fxrates.services.store import RateStore


router = APIRouter()


@router.get(
    "/check",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
def check(store: RateStore = Depends(get_store)) -> JSONResponse:
    connected, payload = health(store)
    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=payload.model_dump(mode="json"),
    )
