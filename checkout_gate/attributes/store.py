"""
Order Attribute Stores
----------------------
Async key/value stores the synchronizer writes captured contact data into.

- RedisAttributeStore: attributes kept in a per-order Redis hash.
- HttpAttributeStore: attributes pushed to an external order service over HTTP.

Every failure surfaces as AttributeStoreError so the synchronizer has one thing to contain.
"""
from abc import ABC, abstractmethod
from typing import Dict, List

import httpx

from checkout_gate.core.errors import AttributeStoreError
from checkout_gate.observability.logging import log
from checkout_gate.settings import settings
from checkout_gate.store.redis_conn import get_async_redis


class AttributeStore(ABC):
    session_id: str

    @abstractmethod
    async def update_attribute(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def get_attributes(self) -> List[Dict[str, str]]:
        ...

    def can_update_attributes(self) -> bool:
        return True


class RedisAttributeStore(AttributeStore):
    def __init__(self, session_id: str):
        self.session_id = session_id

    @property
    def key(self) -> str:
        return f"{settings.ATTRIBUTE_KEY_PREFIX}{self.session_id}:attributes"

    async def update_attribute(self, key: str, value: str) -> None:
        try:
            async with get_async_redis() as r:
                await r.hset(self.key, key, value)
        except Exception as e:
            raise AttributeStoreError(key, f"{type(e).__name__}:{str(e)[:200]}") from e

    async def get_attributes(self) -> List[Dict[str, str]]:
        async with get_async_redis() as r:
            raw = await r.hgetall(self.key) or {}
        return [{"key": k, "value": v} for k, v in sorted(raw.items())]


class HttpAttributeStore(AttributeStore):
    def __init__(self, session_id: str, base_url: str = "", timeout: float = 0.0):
        self.session_id = session_id
        self.base_url = (base_url or settings.ATTRIBUTE_STORE_URL or "").rstrip("/")
        self.timeout = float(timeout or settings.ATTRIBUTE_STORE_TIMEOUT_SEC or 5.0)

    @property
    def url(self) -> str:
        return f"{self.base_url}/orders/{self.session_id}/attributes"

    def can_update_attributes(self) -> bool:
        return bool(self.base_url)

    async def update_attribute(self, key: str, value: str) -> None:
        if not self.base_url:
            raise AttributeStoreError(key, "ATTRIBUTE_STORE_URL is not set")
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.url, json={"key": key, "value": value})
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise AttributeStoreError(key, f"{type(e).__name__}:{str(e)[:200]}") from e

        if not (200 <= resp.status_code < 300):
            raise AttributeStoreError(key, f"non_2xx:{resp.status_code}", status_code=resp.status_code)

    async def get_attributes(self) -> List[Dict[str, str]]:
        if not self.base_url:
            return []
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(self.url)
        resp.raise_for_status()
        data = resp.json()
        items = data.get("attributes", []) if isinstance(data, dict) else data
        return [{"key": str(a.get("key")), "value": str(a.get("value"))} for a in (items or []) if isinstance(a, dict)]


BACKENDS = {
    "redis": RedisAttributeStore,
    "http": HttpAttributeStore,
}


def get_attribute_store(session_id: str) -> AttributeStore:
    backend = BACKENDS.get(settings.ATTRIBUTE_STORE_BACKEND)
    if backend is None:
        raise RuntimeError(f"Unsupported ATTRIBUTE_STORE_BACKEND: {settings.ATTRIBUTE_STORE_BACKEND}")
    return backend(session_id)


def probe_capability() -> bool:
    """
    Startup capability probe: the deployment flag AND the configured backend must both
    allow attribute changes. Evaluated once; the result is held by the app.
    """
    try:
        backend_ok = get_attribute_store("probe").can_update_attributes()
    except RuntimeError as e:
        log(event="capability_probe", ok=False, error=str(e))
        return False
    ok = bool(settings.CAN_UPDATE_ATTRIBUTES) and bool(backend_ok)
    log(event="capability_probe", ok=ok, backend=settings.ATTRIBUTE_STORE_BACKEND)
    return ok
