from dataclasses import dataclass, field
from typing import Any, Dict, List

from checkout_gate.core import messages
from checkout_gate.observability.logging import log
from checkout_gate.store.models import CheckoutSession

ALLOW = "allow"
BLOCK = "block"


@dataclass
class GateDecision:
    behavior: str
    errors: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if self.behavior == ALLOW:
            return {"behavior": ALLOW}
        return {"behavior": self.behavior, "errors": list(self.errors)}


class ProgressGate:
    """
    Answers the host's "may the buyer proceed?" check for one checkout session.

    The answer depends only on whether a validated submission has been captured.
    Once captured the gate stays open, whatever happens to attribute synchronization.
    """

    def __init__(self, session: CheckoutSession):
        self.session = session

    def decide(self, can_block_progress: bool) -> GateDecision:
        if not can_block_progress:
            return GateDecision(behavior=ALLOW)

        self.session.attemptedSubmit = True

        if self.session.captured is None:
            log(event="gate_decision", sessionId=self.session.sessionId, behavior=BLOCK)
            return GateDecision(behavior=BLOCK, errors=[{"message": messages.GATE_REQUIRED_DATA}])

        log(event="gate_decision", sessionId=self.session.sessionId, behavior=ALLOW,
            seq=int(self.session.captured.seq))
        return GateDecision(behavior=ALLOW)
