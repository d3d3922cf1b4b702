from __future__ import annotations

from functools import lru_cache

from app.core.settings import get_settings
from app.services.bigmodel_client import BigModelClient


@lru_cache
def get_bigmodel_client() -> BigModelClient:
    return BigModelClient(settings=get_settings())
