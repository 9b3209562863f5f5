import json
import time
import inspect
from dataclasses import asdict
from typing import Optional

from checkout_gate.settings import settings
from checkout_gate.store.redis_conn import get_redis
from checkout_gate.store.models import CheckoutSession, CapturedSubmission, SyncOutcome

PREFIX = "checkout:"


def _key(session_id: str) -> str:
    return f"{PREFIX}{session_id}"


def _filter_kwargs(cls, data: dict) -> dict:
    """
    Drop unknown fields so cls(**kwargs) never explodes on older records
    """
    sig = inspect.signature(cls)
    allowed = set(sig.parameters.keys())
    return {k: v for k, v in data.items() if k in allowed}


def _rehydrate_captured(raw) -> Optional[CapturedSubmission]:
    if not isinstance(raw, dict):
        return None
    return CapturedSubmission(**_filter_kwargs(CapturedSubmission, raw))


def _rehydrate_sync(raw) -> Optional[SyncOutcome]:
    if not isinstance(raw, dict):
        return None
    return SyncOutcome(**_filter_kwargs(SyncOutcome, raw))


def load_session(session_id: str) -> CheckoutSession:
    r = get_redis()
    raw = r.get(_key(session_id))
    if not raw:
        s = CheckoutSession(sessionId=session_id)
        s.lastUpdatedAtEpoch = int(time.time())
        return s

    data = json.loads(raw)
    data["captured"] = _rehydrate_captured(data.get("captured"))
    data["lastSync"] = _rehydrate_sync(data.get("lastSync"))
    data = _filter_kwargs(CheckoutSession, data)
    data["sessionId"] = session_id
    return CheckoutSession(**data)


def save_session(session: CheckoutSession) -> None:
    r = get_redis()
    session.lastUpdatedAtEpoch = int(time.time())
    ttl = int(getattr(settings, "SESSION_TTL_SEC", 0) or 0)
    payload = json.dumps(asdict(session), ensure_ascii=False)
    if ttl > 0:
        r.set(_key(session.sessionId), payload, ex=ttl)
    else:
        r.set(_key(session.sessionId), payload)
