"""
Enumeration types for the TPA decision engine domain models.
"""

from enum import Enum


class MemberStatus(str, Enum):
    """Member lifecycle status."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    TERMINATED = "TERMINATED"


class CardStatus(str, Enum):
    """Membership card status."""
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"
    INACTIVE = "INACTIVE"


class PolicyStatus(str, Enum):
    """Benefit policy status."""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class RuleOutcome(str, Enum):
    """Outcome of a single eligibility rule."""
    PASS = "PASS"
    FAIL = "FAIL"


class VerdictStatus(str, Enum):
    """Overall eligibility status."""
    ELIGIBLE = "ELIGIBLE"
    WARNING = "WARNING"          # Eligible, but soft rules reported issues
    NOT_ELIGIBLE = "NOT_ELIGIBLE"


class CoverageRuleType(str, Enum):
    """Which kind of policy rule produced a coverage decision."""
    SERVICE = "SERVICE"
    CATEGORY = "CATEGORY"


class ActorRole(str, Enum):
    """Role of the user requesting a claim transition."""
    EMPLOYER = "EMPLOYER"
    INSURANCE = "INSURANCE"
    REVIEWER = "REVIEWER"
    SUPER_ADMIN = "SUPER_ADMIN"


class ClaimStatus(str, Enum):
    """
    Claim lifecycle status.

    REJECTED and SETTLED are terminal.
    """
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    RETURNED_FOR_INFO = "RETURNED_FOR_INFO"
    SETTLED = "SETTLED"

    @property
    def is_terminal(self) -> bool:
        return self in (ClaimStatus.REJECTED, ClaimStatus.SETTLED)

    @classmethod
    def from_legacy(cls, value: str | None) -> "ClaimStatus":
        """
        Map a status from the older claim workflow onto the current one.

        Unknown or missing values map to DRAFT.
        """
        if value is None:
            return cls.DRAFT
        normalized = value.strip().upper()
        if normalized in cls.__members__:
            return cls[normalized]
        return _LEGACY_CLAIM_STATUS.get(normalized, cls.DRAFT)


_LEGACY_CLAIM_STATUS = {
    "PENDING_REVIEW": ClaimStatus.SUBMITTED,
    "PREAPPROVED": ClaimStatus.SUBMITTED,
    "PARTIALLY_APPROVED": ClaimStatus.APPROVED,
    "CANCELLED": ClaimStatus.REJECTED,
}


class EligibilityReason(str, Enum):
    """
    Closed set of eligibility reason codes.

    Each member carries an English message and whether a failure with this
    reason denies eligibility. Soft reasons are reported as warnings even
    when raised by a hard rule.
    """

    # Member
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    MEMBER_INACTIVE = "MEMBER_INACTIVE"
    MEMBER_SUSPENDED = "MEMBER_SUSPENDED"
    MEMBER_TERMINATED = "MEMBER_TERMINATED"
    MEMBER_CARD_BLOCKED = "MEMBER_CARD_BLOCKED"
    MEMBER_CARD_EXPIRED = "MEMBER_CARD_EXPIRED"
    MEMBER_NOT_IN_SCOPE = "MEMBER_NOT_IN_SCOPE"

    # Policy
    POLICY_NOT_FOUND = "POLICY_NOT_FOUND"
    POLICY_INACTIVE = "POLICY_INACTIVE"
    POLICY_SUSPENDED = "POLICY_SUSPENDED"
    POLICY_EXPIRED = "POLICY_EXPIRED"
    POLICY_CANCELLED = "POLICY_CANCELLED"
    POLICY_NOT_YET_EFFECTIVE = "POLICY_NOT_YET_EFFECTIVE"

    # Coverage period and enrollment
    SERVICE_DATE_BEFORE_COVERAGE = "SERVICE_DATE_BEFORE_COVERAGE"
    SERVICE_DATE_AFTER_COVERAGE = "SERVICE_DATE_AFTER_COVERAGE"
    SERVICE_DATE_BEFORE_ENROLLMENT = "SERVICE_DATE_BEFORE_ENROLLMENT"
    MEMBER_NOT_ENROLLED = "MEMBER_NOT_ENROLLED"
    WAITING_PERIOD_NOT_SATISFIED = "WAITING_PERIOD_NOT_SATISFIED"

    # Service coverage
    COVERAGE_LIMIT_EXHAUSTED = "COVERAGE_LIMIT_EXHAUSTED"
    SERVICE_NOT_COVERED = "SERVICE_NOT_COVERED"
    SERVICE_EXCLUDED = "SERVICE_EXCLUDED"

    # Provider
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PROVIDER_NOT_IN_NETWORK = "PROVIDER_NOT_IN_NETWORK"
    PROVIDER_INACTIVE = "PROVIDER_INACTIVE"
    PROVIDER_CONTRACT_EXPIRED = "PROVIDER_CONTRACT_EXPIRED"

    # Employer
    EMPLOYER_NOT_FOUND = "EMPLOYER_NOT_FOUND"
    EMPLOYER_INACTIVE = "EMPLOYER_INACTIVE"
    EMPLOYER_CONTRACT_SUSPENDED = "EMPLOYER_CONTRACT_SUSPENDED"

    # System
    SYSTEM_ERROR = "SYSTEM_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    SERVICE_DATE_INVALID = "SERVICE_DATE_INVALID"
    SERVICE_DATE_IN_FUTURE = "SERVICE_DATE_IN_FUTURE"

    # Success
    ELIGIBLE = "ELIGIBLE"
    ELIGIBLE_WITH_WARNINGS = "ELIGIBLE_WITH_WARNINGS"

    @property
    def code(self) -> str:
        return self.value

    @property
    def message_en(self) -> str:
        return _REASON_MESSAGES[self]

    @property
    def hard_failure(self) -> bool:
        return self not in _SOFT_REASONS


_SOFT_REASONS = frozenset({
    EligibilityReason.SERVICE_DATE_IN_FUTURE,
    EligibilityReason.PROVIDER_NOT_IN_NETWORK,
    EligibilityReason.PROVIDER_CONTRACT_EXPIRED,
    EligibilityReason.ELIGIBLE,
    EligibilityReason.ELIGIBLE_WITH_WARNINGS,
})

_REASON_MESSAGES = {
    EligibilityReason.MEMBER_NOT_FOUND: "Member not found",
    EligibilityReason.MEMBER_INACTIVE: "Member is not active",
    EligibilityReason.MEMBER_SUSPENDED: "Member is suspended",
    EligibilityReason.MEMBER_TERMINATED: "Member coverage has been terminated",
    EligibilityReason.MEMBER_CARD_BLOCKED: "Member card is blocked",
    EligibilityReason.MEMBER_CARD_EXPIRED: "Member card has expired",
    EligibilityReason.MEMBER_NOT_IN_SCOPE: "Member is outside the caller's scope",
    EligibilityReason.POLICY_NOT_FOUND: "No policy found for member",
    EligibilityReason.POLICY_INACTIVE: "Policy is not active",
    EligibilityReason.POLICY_SUSPENDED: "Policy is suspended",
    EligibilityReason.POLICY_EXPIRED: "Policy has expired",
    EligibilityReason.POLICY_CANCELLED: "Policy has been cancelled",
    EligibilityReason.POLICY_NOT_YET_EFFECTIVE: "Policy is not yet effective",
    EligibilityReason.SERVICE_DATE_BEFORE_COVERAGE: "Service date is before coverage start",
    EligibilityReason.SERVICE_DATE_AFTER_COVERAGE: "Service date is after coverage end",
    EligibilityReason.SERVICE_DATE_BEFORE_ENROLLMENT: "Service date is before enrollment date",
    EligibilityReason.MEMBER_NOT_ENROLLED: "Member is not enrolled in the policy",
    EligibilityReason.WAITING_PERIOD_NOT_SATISFIED: "Waiting period has not been satisfied",
    EligibilityReason.COVERAGE_LIMIT_EXHAUSTED: "Coverage limit has been exhausted",
    EligibilityReason.SERVICE_NOT_COVERED: "Service is not covered by the policy",
    EligibilityReason.SERVICE_EXCLUDED: "Service is excluded from coverage",
    EligibilityReason.PROVIDER_NOT_FOUND: "Provider not found",
    EligibilityReason.PROVIDER_NOT_IN_NETWORK: "Provider is not in the network",
    EligibilityReason.PROVIDER_INACTIVE: "Provider is not active",
    EligibilityReason.PROVIDER_CONTRACT_EXPIRED: "Provider contract has expired",
    EligibilityReason.EMPLOYER_NOT_FOUND: "Employer not found",
    EligibilityReason.EMPLOYER_INACTIVE: "Employer is not active",
    EligibilityReason.EMPLOYER_CONTRACT_SUSPENDED: "Employer contract is suspended",
    EligibilityReason.SYSTEM_ERROR: "A system error occurred during eligibility check",
    EligibilityReason.INVALID_REQUEST: "Invalid eligibility request",
    EligibilityReason.SERVICE_DATE_INVALID: "Service date is invalid",
    EligibilityReason.SERVICE_DATE_IN_FUTURE: "Service date is in the future",
    EligibilityReason.ELIGIBLE: "Member is eligible",
    EligibilityReason.ELIGIBLE_WITH_WARNINGS: "Member is eligible with warnings",
}
