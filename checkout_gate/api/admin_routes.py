from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Header
from checkout_gate.settings import settings
from checkout_gate.store.session_repo import load_session
import checkout_gate.observability.metrics as metrics

router = APIRouter(prefix="/admin", tags=["admin"])

def require_admin(x_admin_key: str = Header(default="", alias="x-admin-key")):
    if not settings.ADMIN_RBAC_ENABLED:
        return
    # Secure default: if enabled but no key configured, reject all.
    if not settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Admin access disabled (no key configured)")
    if x_admin_key != settings.ADMIN_API_KEY:
        raise HTTPException(status_code=403, detail="Invalid admin key")

@router.get("/session/{session_id}")
def get_session_snapshot(session_id: str, _=Depends(require_admin)):
    """Compact session snapshot. Buyer values are reported as present/absent only."""
    s = load_session(session_id)
    return {
        "sessionId": s.sessionId,
        "state": s.state,
        "attemptedSubmit": bool(s.attemptedSubmit),
        "fieldsFilled": {
            "firstName": bool(s.firstName),
            "lastName": bool(s.lastName),
            "phone": bool(s.phone),
        },
        "captureSeq": int(s.captureSeq or 0),
        "capturedAtMs": int(s.captured.capturedAtMs) if s.captured else None,
        "lastSync": asdict(s.lastSync) if s.lastSync else None,
        "lastUpdatedAtEpoch": s.lastUpdatedAtEpoch,
    }

@router.get("/sync")
def get_sync_metrics(_=Depends(require_admin)):
    """
    Synchronization counters backed by Redis.
    """
    return metrics.get_sync_snapshot()
