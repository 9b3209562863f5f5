# Minimal state constants (kept for clarity)

# Capture state: no validated submission yet, the progression gate blocks
IDLE = "IDLE"

# Capture state: a validated snapshot exists, the progression gate is latched open.
# Re-entered (never left) by every later valid submit.
CAPTURED = "CAPTURED"


# Synchronization outcomes (one per synchronization run, never retried)

# Run scheduled or in flight
SYNC_PENDING = "PENDING"

# All three attributes written
SYNC_SUCCEEDED = "SUCCEEDED"

# A store call failed or the run was superseded by a newer capture
SYNC_FAILED = "FAILED"

SYNC_REASON_SUPERSEDED = "superseded"
