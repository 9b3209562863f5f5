"""
Attribute Synchronizer
----------------------
Pushes one captured submission into the order attribute store as three strictly
sequential writes: customer_first_name, customer_last_name, customer_phone.

- Each write is awaited before the next one starts.
- The first failing write ends the run; later keys are never attempted.
- Failures are logged and contained here. They never reach the submission
  controller or the progression gate, which has already latched open.
- Before every write the run checks that its capture is still the session's
  current one; a newer capture supersedes it and the old run stops.

No retry, no backoff.
"""
from typing import Callable, Optional

from checkout_gate.attributes.store import AttributeStore
from checkout_gate.core import state_machine as sm
from checkout_gate.observability.logging import log
from checkout_gate.store.models import CapturedSubmission, SyncOutcome
from checkout_gate.utils.time import elapsed_ms, now_ms


class AttributeSynchronizer:
    def __init__(
        self,
        store: AttributeStore,
        is_current: Optional[Callable[[int], bool]] = None,
        on_outcome: Optional[Callable[[SyncOutcome], None]] = None,
    ):
        self.store = store
        self._is_current = is_current
        self._on_outcome = on_outcome

    def _still_current(self, seq: int) -> bool:
        if self._is_current is None:
            return True
        return bool(self._is_current(seq))

    async def run(self, captured: CapturedSubmission) -> SyncOutcome:
        session_id = getattr(self.store, "session_id", "")
        outcome = SyncOutcome(seq=captured.seq, status=sm.SYNC_PENDING, startedAtMs=now_ms())
        log(event="attribute_sync_start", sessionId=session_id, seq=captured.seq)

        for key, value in captured.attribute_updates():
            if not self._still_current(captured.seq):
                outcome.status = sm.SYNC_FAILED
                outcome.reason = sm.SYNC_REASON_SUPERSEDED
                log(event="attribute_sync_superseded", sessionId=session_id, seq=captured.seq,
                    completedKeys=list(outcome.completedKeys))
                break

            try:
                await self.store.update_attribute(key, value)
            except Exception as e:
                outcome.status = sm.SYNC_FAILED
                outcome.reason = f"{key}:{type(e).__name__}:{str(e)[:200]}"
                log(event="attribute_sync_failed", sessionId=session_id, seq=captured.seq,
                    key=key, errorType=type(e).__name__, error=str(e)[:500],
                    completedKeys=list(outcome.completedKeys))
                break

            outcome.completedKeys.append(key)
            log(event="attribute_sync_step", sessionId=session_id, seq=captured.seq, key=key)
        else:
            outcome.status = sm.SYNC_SUCCEEDED

        outcome.finishedAtMs = now_ms()
        if outcome.status == sm.SYNC_SUCCEEDED:
            log(event="attribute_sync_succeeded", sessionId=session_id, seq=captured.seq,
                elapsedMs=elapsed_ms(outcome.startedAtMs, outcome.finishedAtMs))

        if self._on_outcome is not None:
            self._on_outcome(outcome)
        return outcome
