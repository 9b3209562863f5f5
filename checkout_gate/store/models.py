from dataclasses import dataclass, field
from typing import List, Optional

from checkout_gate.core import state_machine as sm

# Order attribute keys, in the order a synchronization run writes them
ATTR_FIRST_NAME = "customer_first_name"
ATTR_LAST_NAME = "customer_last_name"
ATTR_PHONE = "customer_phone"


@dataclass(frozen=True)
class CapturedSubmission:
    firstName: str
    lastName: str
    phone: str
    # Monotonic per session; a run whose seq is no longer current stops writing
    seq: int = 0
    capturedAtMs: int = 0

    def attribute_updates(self):
        return [
            (ATTR_FIRST_NAME, self.firstName),
            (ATTR_LAST_NAME, self.lastName),
            (ATTR_PHONE, self.phone),
        ]


@dataclass
class SyncOutcome:
    seq: int = 0
    status: str = sm.SYNC_PENDING  # PENDING/SUCCEEDED/FAILED
    reason: Optional[str] = None
    # Keys written before the run ended
    completedKeys: List[str] = field(default_factory=list)
    startedAtMs: int = 0
    finishedAtMs: int = 0


@dataclass
class CheckoutSession:
    sessionId: str = ""

    # Raw field values as typed by the buyer
    firstName: str = ""
    lastName: str = ""
    phone: str = ""

    # Latched by the first blocking-capable progression check; enables error display for empty fields
    attemptedSubmit: bool = False

    # Capture state is derived from the snapshot, see `state`
    captured: Optional[CapturedSubmission] = None
    captureSeq: int = 0

    # Last synchronization run (observability only; never feeds the gate)
    lastSync: Optional[SyncOutcome] = None

    lastUpdatedAtEpoch: Optional[int] = None

    @property
    def state(self) -> str:
        return sm.CAPTURED if self.captured is not None else sm.IDLE
