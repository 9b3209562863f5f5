from dataclasses import asdict
from typing import Any, Callable, Dict, Optional

from checkout_gate.attributes.store import get_attribute_store
from checkout_gate.attributes.synchronizer import AttributeSynchronizer
from checkout_gate.core import messages
from checkout_gate.core import state_machine as sm
from checkout_gate.core.errors import CapabilityUnavailable
from checkout_gate.core.gate import ALLOW, GateDecision, ProgressGate
from checkout_gate.core.submission import SubmissionController
from checkout_gate.core.validation import FIELD_ORDER
from checkout_gate.observability.logging import log
from checkout_gate.store.models import CapturedSubmission, CheckoutSession, SyncOutcome
from checkout_gate.store.session_repo import load_session, save_session
from checkout_gate.utils.time import elapsed_ms
import checkout_gate.observability.metrics as metrics

# schedule(fn, *args): e.g. FastAPI BackgroundTasks.add_task
Scheduler = Callable[..., Any]


def _require_capability(can_update_attributes: bool) -> None:
    if not can_update_attributes:
        raise CapabilityUnavailable(messages.ATTRIBUTE_CHANGES_NOT_SUPPORTED)


def warning_banner() -> Dict[str, Any]:
    return {
        "status": "warning",
        "banner": {
            "title": messages.BANNER_TITLE,
            "status": "warning",
            "message": messages.ATTRIBUTE_CHANGES_NOT_SUPPORTED,
        },
    }


def build_form_view(session: CheckoutSession) -> Dict[str, Any]:
    controller = SubmissionController(session)
    return {
        "status": "ok",
        "sessionId": session.sessionId,
        "state": session.state,
        "fields": {name: getattr(session, name) or "" for name in FIELD_ORDER},
        "errors": controller.field_errors(),
        "attemptedSubmit": bool(session.attemptedSubmit),
        "captured": session.captured is not None,
        "lastSync": asdict(session.lastSync) if session.lastSync else None,
    }


async def load_form(session_id: str, *, can_update_attributes: bool = True) -> Dict[str, Any]:
    if not can_update_attributes:
        return warning_banner()

    view = build_form_view(load_session(session_id))
    try:
        view["attributes"] = await get_attribute_store(session_id).get_attributes()
    except Exception as e:
        # Listing is informational; the form stays usable without it
        log(event="attribute_list_failed", sessionId=session_id, errorType=type(e).__name__, error=str(e)[:300])
        view["attributes"] = []
    return view


def handle_field_change(session_id: str, field: str, value: str, *, can_update_attributes: bool = True) -> Dict[str, Any]:
    _require_capability(can_update_attributes)
    session = load_session(session_id)
    SubmissionController(session).update_field(field, value)
    save_session(session)
    return build_form_view(session)


def handle_submit(
    session_id: str,
    values: Optional[Dict[str, str]],
    schedule: Scheduler,
    *,
    can_update_attributes: bool = True,
) -> Dict[str, Any]:
    """
    Apply an explicit submit. On acceptance exactly one synchronization run is
    handed to `schedule`; it starts only after the session has been saved.
    """
    _require_capability(can_update_attributes)
    session = load_session(session_id)

    def _on_capture(captured: CapturedSubmission) -> None:
        session.lastSync = SyncOutcome(seq=captured.seq, status=sm.SYNC_PENDING)
        schedule(run_attribute_sync, session_id, captured)

    controller = SubmissionController(session, on_capture=_on_capture)
    for name, value in (values or {}).items():
        controller.update_field(name, value)
    result = controller.submit_current()
    save_session(session)

    view = build_form_view(session)
    view.update({
        "accepted": result.accepted,
        "field": result.field,
        "error": result.error,
        "seq": int(result.captured.seq) if result.captured else 0,
    })
    return view


def handle_intercept(session_id: str, can_block_progress: bool, *, can_update_attributes: bool = True) -> Dict[str, Any]:
    # Without the capability the contact block is never mounted, so nothing intercepts progression.
    if not can_update_attributes:
        return GateDecision(behavior=ALLOW).to_dict()

    session = load_session(session_id)
    decision = ProgressGate(session).decide(can_block_progress)
    if can_block_progress:
        save_session(session)
    return decision.to_dict()


# ---------------------------------------------------------------------------
# Synchronization run (background task)
# ---------------------------------------------------------------------------
def _is_current(session_id: str, seq: int) -> bool:
    try:
        s = load_session(session_id)
    except Exception as e:
        # Cannot read the session: keep writing rather than drop a possibly current capture
        log(event="attribute_sync_token_unreadable", sessionId=session_id, seq=seq, error=str(e)[:300])
        return True
    return s.captured is not None and int(s.captured.seq) == int(seq)


def _record_metrics(session_id: str, outcome: SyncOutcome) -> None:
    if outcome.status == sm.SYNC_SUCCEEDED:
        metrics.increment_sync_succeeded()
        metrics.record_sync_latency(elapsed_ms(outcome.startedAtMs, outcome.finishedAtMs))
    elif outcome.reason == sm.SYNC_REASON_SUPERSEDED:
        metrics.increment_sync_superseded()
    else:
        metrics.record_sync_failure(session_id)


def _record_outcome(session_id: str, outcome: SyncOutcome) -> None:
    try:
        s = load_session(session_id)
        # A newer capture owns lastSync now
        if s.captured is not None and int(s.captured.seq) == int(outcome.seq):
            s.lastSync = outcome
            save_session(s)
        _record_metrics(session_id, outcome)
    except Exception as e:
        log(event="attribute_sync_outcome_unrecorded", sessionId=session_id, seq=outcome.seq,
            status=outcome.status, error=str(e)[:300])


async def run_attribute_sync(session_id: str, captured: CapturedSubmission) -> SyncOutcome:
    try:
        metrics.increment_sync_attempt()
    except Exception as e:
        log(event="metrics_unavailable", sessionId=session_id, error=str(e)[:300])

    synchronizer = AttributeSynchronizer(
        get_attribute_store(session_id),
        is_current=lambda seq: _is_current(session_id, seq),
        on_outcome=lambda outcome: _record_outcome(session_id, outcome),
    )
    return await synchronizer.run(captured)
