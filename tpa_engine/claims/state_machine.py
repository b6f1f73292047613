"""
Claim lifecycle state machine.

Gates claim status changes against a fixed transition table with
actor-role requirements. The host must serialize writes per claim before
calling ``apply_transition``; no locking happens here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from tpa_engine.config.models import ClaimWorkflowConfig
from tpa_engine.domain.claims import Claim
from tpa_engine.domain.enums import ActorRole, ClaimStatus
from tpa_engine.exceptions import InvalidTransitionError, TransitionRequirementError
from tpa_engine.repository.protocol import ClaimTransitionPort
from tpa_engine.utils.logging import DecisionLogger

# (from, to) -> roles allowed to perform the transition
TRANSITIONS: dict[tuple[ClaimStatus, ClaimStatus], tuple[ActorRole, ...]] = {
    (ClaimStatus.DRAFT, ClaimStatus.SUBMITTED): (ActorRole.EMPLOYER, ActorRole.INSURANCE),
    (ClaimStatus.SUBMITTED, ClaimStatus.UNDER_REVIEW): (ActorRole.INSURANCE, ActorRole.REVIEWER),
    (ClaimStatus.UNDER_REVIEW, ClaimStatus.APPROVED): (ActorRole.INSURANCE, ActorRole.REVIEWER),
    (ClaimStatus.UNDER_REVIEW, ClaimStatus.REJECTED): (ActorRole.INSURANCE, ActorRole.REVIEWER),
    (ClaimStatus.UNDER_REVIEW, ClaimStatus.RETURNED_FOR_INFO): (ActorRole.REVIEWER,),
    (ClaimStatus.RETURNED_FOR_INFO, ClaimStatus.SUBMITTED): (ActorRole.EMPLOYER, ActorRole.INSURANCE),
    (ClaimStatus.APPROVED, ClaimStatus.SETTLED): (ActorRole.INSURANCE,),
}

EDITABLE_STATUSES = frozenset({ClaimStatus.DRAFT, ClaimStatus.RETURNED_FOR_INFO})

# Statuses that record a reviewer decision time
_REVIEWED_STATUSES = frozenset({ClaimStatus.APPROVED, ClaimStatus.REJECTED, ClaimStatus.SETTLED})


def transition_hint(from_status: ClaimStatus, to_status: ClaimStatus) -> Optional[str]:
    """Human-readable explanation for a transition missing from the table."""
    if from_status.is_terminal:
        return f"{from_status.value} is a terminal state; the claim is immutable."
    if from_status == ClaimStatus.DRAFT and to_status != ClaimStatus.SUBMITTED:
        return "Claims must be submitted before review."
    if from_status == ClaimStatus.SUBMITTED and to_status != ClaimStatus.UNDER_REVIEW:
        return "Submitted claims must be taken under review."
    if from_status == ClaimStatus.APPROVED and to_status != ClaimStatus.SETTLED:
        return "Approved claims can only be settled."
    return None


class ClaimStateMachine:
    """
    Validates and applies claim status transitions.

    Usage:
        machine = ClaimStateMachine(transitions=port)
        machine.validate_transition(ClaimStatus.DRAFT, ClaimStatus.SUBMITTED, ActorRole.EMPLOYER)
        claim = machine.apply_transition(claim, ClaimStatus.SUBMITTED, ActorRole.EMPLOYER)
    """

    def __init__(
        self,
        transitions: Optional[ClaimTransitionPort] = None,
        config: Optional[ClaimWorkflowConfig] = None,
    ):
        """
        Initialize the state machine.

        Args:
            transitions: Port notified of every applied transition
            config: Claim workflow configuration (defaults used if None)
        """
        self.transitions = transitions
        self.config = config or ClaimWorkflowConfig()
        self._logger = DecisionLogger(component="claims")

    def can_transition(
        self,
        from_status: ClaimStatus,
        to_status: ClaimStatus,
        role: ActorRole,
    ) -> bool:
        """Check a transition without side effects."""
        allowed = TRANSITIONS.get((from_status, to_status))
        if allowed is None:
            return False
        if role in allowed:
            return True
        return role == ActorRole.SUPER_ADMIN and self.config.super_admin_bypass

    def validate_transition(
        self,
        from_status: ClaimStatus,
        to_status: ClaimStatus,
        role: ActorRole,
    ) -> None:
        """
        Validate a transition.

        Raises:
            InvalidTransitionError: If the transition does not exist or the
                role may not perform it
        """
        allowed = TRANSITIONS.get((from_status, to_status))
        if allowed is None:
            hint = transition_hint(from_status, to_status)
            self._logger.transition_rejected(
                from_status.value, to_status.value, role=role.value, reason="not_in_table"
            )
            raise InvalidTransitionError(from_status, to_status, hint=hint)

        if not self.can_transition(from_status, to_status, role):
            required = " or ".join(r.value for r in allowed)
            self._logger.transition_rejected(
                from_status.value,
                to_status.value,
                role=role.value,
                reason="role_not_allowed",
                required_role=required,
            )
            raise InvalidTransitionError(from_status, to_status, required_role=required)

    def available_transitions(
        self, status: ClaimStatus, role: ActorRole
    ) -> list[ClaimStatus]:
        """Target statuses the role may move a claim to from ``status``."""
        return [
            to_status
            for (from_status, to_status) in TRANSITIONS
            if from_status == status and self.can_transition(from_status, to_status, role)
        ]

    @staticmethod
    def can_edit(status: ClaimStatus) -> bool:
        """Whether claim content may still be changed in this status."""
        return status in EDITABLE_STATUSES

    def apply_transition(
        self,
        claim: Claim,
        to_status: ClaimStatus,
        role: ActorRole,
        *,
        approved_amount: Optional[Decimal] = None,
        reviewer_comment: Optional[str] = None,
        actor: Optional[str] = None,
    ) -> Claim:
        """
        Validate and apply a transition.

        Must run in the same transaction as any financial side effects.

        Args:
            claim: Claim to transition
            to_status: Target status
            role: Role of the acting user
            approved_amount: Required when approving
            reviewer_comment: Required when rejecting
            actor: Identifier recorded in ``updated_by``; defaults to the role

        Returns:
            Updated copy of the claim

        Raises:
            InvalidTransitionError: If the transition is not allowed
            TransitionRequirementError: If required data is missing
        """
        from_status = claim.status
        self.validate_transition(from_status, to_status, role)

        updates: dict = {"status": to_status, "updated_by": actor or role.value}

        if to_status == ClaimStatus.APPROVED:
            amount = approved_amount if approved_amount is not None else claim.approved_amount
            if amount is None or amount <= 0:
                raise TransitionRequirementError(
                    to_status,
                    "approved_amount",
                    "Approved amount must be greater than zero to approve a claim",
                )
            updates["approved_amount"] = amount

        comment = reviewer_comment if reviewer_comment is not None else claim.reviewer_comment
        if to_status == ClaimStatus.REJECTED and not (comment and comment.strip()):
            raise TransitionRequirementError(
                to_status,
                "reviewer_comment",
                "A reviewer comment is required to reject a claim",
            )
        if reviewer_comment is not None:
            updates["reviewer_comment"] = reviewer_comment

        if to_status in _REVIEWED_STATUSES:
            updates["reviewed_at"] = datetime.now()

        updated = claim.model_copy(update=updates)

        if self.transitions is not None:
            self.transitions.persist_transition(claim.claim_id, to_status)

        self._logger.transition_applied(
            claim.claim_id,
            from_status.value,
            to_status.value,
            role=role.value,
            updated_by=updates["updated_by"],
        )
        return updated
