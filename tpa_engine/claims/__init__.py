"""
Claim lifecycle state machine.
"""

from tpa_engine.claims.state_machine import (
    EDITABLE_STATUSES,
    TRANSITIONS,
    ClaimStateMachine,
    transition_hint,
)

__all__ = [
    "ClaimStateMachine",
    "EDITABLE_STATUSES",
    "TRANSITIONS",
    "transition_hint",
]
