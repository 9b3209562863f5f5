from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from checkout_gate.api.auth import require_api_key
from checkout_gate.api.schemas import FieldChange, InterceptRequest, InterceptResponse, SubmitRequest
from checkout_gate.core.errors import CapabilityUnavailable
from checkout_gate.core.orchestrator import (
    handle_field_change,
    handle_intercept,
    handle_submit,
    load_form,
    warning_banner,
)
from checkout_gate.core.validation import FIELD_ORDER

router = APIRouter(prefix="/api/checkout", dependencies=[Depends(require_api_key)])


def _capability(request: Request) -> bool:
    # Probed once at startup (see main.py)
    return bool(getattr(request.app.state, "can_update_attributes", True))


def _unavailable() -> JSONResponse:
    return JSONResponse(status_code=409, content=warning_banner())


@router.get("/{session_id}")
async def get_form(session_id: str, request: Request):
    """Form view: field values, visible errors, capture state and current order attributes."""
    return await load_form(session_id, can_update_attributes=_capability(request))


@router.put("/{session_id}/fields/{field}")
async def put_field(session_id: str, field: str, body: FieldChange, request: Request):
    if field not in FIELD_ORDER:
        raise HTTPException(status_code=404, detail=f"Unknown field: {field}")
    try:
        return handle_field_change(session_id, field, body.value, can_update_attributes=_capability(request))
    except CapabilityUnavailable:
        return _unavailable()


@router.post("/{session_id}/submit")
async def submit(session_id: str, request: Request, background_tasks: BackgroundTasks, body: Optional[SubmitRequest] = None):
    """
    Explicit submit. A rejected submit answers 200 with accepted=false and the
    first failing field; validation problems are inline errors, not HTTP errors.
    """
    values = body.provided() if body is not None else None
    try:
        return handle_submit(
            session_id,
            values,
            background_tasks.add_task,
            can_update_attributes=_capability(request),
        )
    except CapabilityUnavailable:
        return _unavailable()


@router.post(
    "/{session_id}/intercept",
    response_model=InterceptResponse,
    response_model_exclude_none=True,
)
async def intercept(session_id: str, body: InterceptRequest, request: Request):
    """Host progression hook: allow, or block with a buyer-facing message."""
    return handle_intercept(session_id, body.canBlockProgress, can_update_attributes=_capability(request))
