from fastapi import Request

from fxrates.core.config import Settings
from fxrates.services.store import RateStore


def get_store(request: Request) -> RateStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
