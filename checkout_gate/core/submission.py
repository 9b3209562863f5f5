"""
Submission Controller
---------------------
Owns the capture state machine of one checkout session:

    IDLE --submit(all valid)--> CAPTURED --submit(all valid)--> CAPTURED (fresh snapshot)

A rejected submit changes nothing and schedules nothing. There is no way back to IDLE.
Every accepted submit hands the new snapshot to `on_capture` exactly once; the caller
decides how the synchronization run gets scheduled.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from checkout_gate.core.validation import (
    FIELD_ORDER,
    VALIDATORS,
    display_error,
    first_error,
)
from checkout_gate.observability.logging import log
from checkout_gate.store.models import CapturedSubmission, CheckoutSession
from checkout_gate.utils.time import now_ms


@dataclass
class SubmitResult:
    accepted: bool
    captured: Optional[CapturedSubmission] = None
    field: Optional[str] = None
    error: Optional[str] = None


class SubmissionController:
    def __init__(self, session: CheckoutSession, on_capture: Optional[Callable[[CapturedSubmission], None]] = None):
        self.session = session
        self._on_capture = on_capture

    @property
    def state(self) -> str:
        return self.session.state

    @property
    def captured(self) -> Optional[CapturedSubmission]:
        return self.session.captured

    def update_field(self, name: str, value: str) -> None:
        if name not in VALIDATORS:
            raise ValueError(f"Unknown field: {name}")
        setattr(self.session, name, value or "")
        log(event="field_updated", sessionId=self.session.sessionId, field=name, value=value or "")

    def field_errors(self) -> Dict[str, Optional[str]]:
        out = {}
        for name in FIELD_ORDER:
            value = getattr(self.session, name) or ""
            out[name] = display_error(value, VALIDATORS[name](value), self.session.attemptedSubmit)
        return out

    def submit(self, first_name: str, last_name: str, phone: str) -> SubmitResult:
        failed = first_error(first_name, last_name, phone)
        if failed is not None:
            field, error = failed
            log(event="submit_rejected", sessionId=self.session.sessionId, field=field, state=self.session.state)
            return SubmitResult(accepted=False, captured=self.session.captured, field=field, error=error)

        s = self.session
        s.captureSeq = int(s.captureSeq or 0) + 1
        snapshot = CapturedSubmission(
            firstName=first_name,
            lastName=last_name,
            phone=phone,
            seq=s.captureSeq,
            capturedAtMs=now_ms(),
        )
        s.captured = snapshot
        log(event="submission_captured", sessionId=s.sessionId, seq=snapshot.seq)

        if self._on_capture is not None:
            self._on_capture(snapshot)
        return SubmitResult(accepted=True, captured=snapshot)

    def submit_current(self) -> SubmitResult:
        """Submit whatever the input widgets last reported."""
        s = self.session
        return self.submit(s.firstName or "", s.lastName or "", s.phone or "")
