class CapabilityUnavailable(RuntimeError):
    """The checkout cannot accept order attribute changes; the contact form is disabled."""


class AttributeStoreError(RuntimeError):
    """An attribute store call failed. Contained inside a synchronization run."""

    def __init__(self, key: str, reason: str, status_code: int = 0):
        super().__init__(f"attribute update failed for {key}: {reason}")
        self.key = key
        self.reason = reason
        self.status_code = status_code
