from fastapi import APIRouter

from fxrates.api.routes import health, rates


api_router = APIRouter()
api_router.include_router(rates.router, tags=["Rates"])
api_router.include_router(health.router, tags=["Health"])
