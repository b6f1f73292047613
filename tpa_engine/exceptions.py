"""
Typed errors raised by the TPA decision engine.

Eligibility denials are never raised; they are returned as verdict entries.
Everything here carries structured fields so the host can render a
localized, role-appropriate message.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Stable error codes exposed to the host."""
    NOT_FOUND = "NOT_FOUND"
    BUSINESS_RULE_VIOLATION = "BUSINESS_RULE_VIOLATION"
    POLICY_NOT_ACTIVE = "POLICY_NOT_ACTIVE"
    COVERAGE_VALIDATION_FAILED = "COVERAGE_VALIDATION_FAILED"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    TRANSITION_REQUIREMENT_MISSING = "TRANSITION_REQUIREMENT_MISSING"


class CoverageIssue(str, Enum):
    """Kinds of coverage validation failure."""
    NO_ACTIVE_POLICY = "NO_ACTIVE_POLICY"
    POLICY_EXPIRED = "POLICY_EXPIRED"
    POLICY_NOT_STARTED = "POLICY_NOT_STARTED"
    SERVICE_NOT_COVERED = "SERVICE_NOT_COVERED"
    WAITING_PERIOD_NOT_MET = "WAITING_PERIOD_NOT_MET"
    SERVICE_BEFORE_ENROLLMENT = "SERVICE_BEFORE_ENROLLMENT"
    AMOUNT_LIMIT_EXCEEDED = "AMOUNT_LIMIT_EXCEEDED"
    TIMES_LIMIT_EXCEEDED = "TIMES_LIMIT_EXCEEDED"
    PRE_APPROVAL_REQUIRED = "PRE_APPROVAL_REQUIRED"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, date)):
        return str(value)
    return value


class TPAEngineError(Exception):
    """Base class for all engine errors."""

    error_code: ErrorCode = ErrorCode.BUSINESS_RULE_VIOLATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        """Structured fields specific to the error type."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for the host application."""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            **{k: _plain(v) for k, v in self.details().items()},
        }


class NotFoundError(TPAEngineError):
    """An entity referenced by id does not exist."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity, "entity_id": self.entity_id}


class BusinessRuleError(TPAEngineError):
    """A business rule was violated; maps to a user-facing rejection."""

    error_code = ErrorCode.BUSINESS_RULE_VIOLATION


class PolicyNotActiveError(BusinessRuleError):
    """The policy cannot be used on the requested date."""

    error_code = ErrorCode.POLICY_NOT_ACTIVE

    def __init__(
        self,
        policy_id: Any,
        policy_code: Optional[str],
        requested_date: Optional[date],
        reason: str = "Policy is not active",
    ):
        label = policy_code or policy_id
        when = f" on {requested_date.isoformat()}" if requested_date else ""
        super().__init__(f"{reason}: {label}{when}")
        self.policy_id = policy_id
        self.policy_code = policy_code
        self.requested_date = requested_date

    def details(self) -> dict[str, Any]:
        return {
            "policy_id": self.policy_id,
            "policy_code": self.policy_code,
            "requested_date": self.requested_date,
        }


class CoverageValidationError(BusinessRuleError):
    """Coverage validation failed for a claim."""

    error_code = ErrorCode.COVERAGE_VALIDATION_FAILED

    def __init__(
        self,
        issue: CoverageIssue,
        message: str,
        member_id: Any = None,
        policy_id: Any = None,
        service_id: Any = None,
    ):
        super().__init__(message)
        self.issue = issue
        self.member_id = member_id
        self.policy_id = policy_id
        self.service_id = service_id

    def details(self) -> dict[str, Any]:
        return {
            "issue": self.issue,
            "member_id": self.member_id,
            "policy_id": self.policy_id,
            "service_id": self.service_id,
        }


class LimitExceededError(CoverageValidationError):
    """A policy-level amount limit would be exceeded."""

    def __init__(
        self,
        limit_type: str,
        requested: Decimal,
        remaining: Decimal,
        limit: Decimal,
        used: Decimal,
        member_id: Any = None,
        policy_id: Any = None,
        currency: str = "LYD",
    ):
        message = (
            f"{limit_type} limit exceeded. Requested: {requested} {currency}, "
            f"Remaining: {remaining} {currency}, Limit: {limit} {currency}, "
            f"Used: {used} {currency}"
        )
        super().__init__(
            CoverageIssue.AMOUNT_LIMIT_EXCEEDED,
            message,
            member_id=member_id,
            policy_id=policy_id,
        )
        self.limit_type = limit_type
        self.requested = requested
        self.remaining = remaining
        self.limit = limit
        self.used = used

    def details(self) -> dict[str, Any]:
        return {
            **super().details(),
            "limit_type": self.limit_type,
            "requested": self.requested,
            "remaining": self.remaining,
            "limit": self.limit,
            "used": self.used,
        }


class WaitingPeriodNotSatisfiedError(CoverageValidationError):
    """The member has not been enrolled long enough for the service."""

    def __init__(
        self,
        elapsed_days: int,
        required_days: int,
        eligible_date: date,
        service_name: Optional[str] = None,
        member_id: Any = None,
        policy_id: Any = None,
        service_id: Any = None,
    ):
        target = f" for {service_name}" if service_name else ""
        message = (
            f"Waiting period not satisfied{target}. Required: {required_days} days, "
            f"Elapsed: {elapsed_days} days, Eligible from: {eligible_date.isoformat()}"
        )
        super().__init__(
            CoverageIssue.WAITING_PERIOD_NOT_MET,
            message,
            member_id=member_id,
            policy_id=policy_id,
            service_id=service_id,
        )
        self.elapsed_days = elapsed_days
        self.required_days = required_days
        self.eligible_date = eligible_date
        self.service_name = service_name

    def details(self) -> dict[str, Any]:
        return {
            **super().details(),
            "elapsed_days": self.elapsed_days,
            "required_days": self.required_days,
            "eligible_date": self.eligible_date,
            "service_name": self.service_name,
        }


class ServiceBeforeEnrollmentError(CoverageValidationError):
    """The service date precedes the member's enrollment."""

    def __init__(
        self,
        enrollment_date: date,
        service_date: date,
        member_id: Any = None,
        policy_id: Any = None,
    ):
        message = (
            f"Service date {service_date.isoformat()} is before enrollment "
            f"date {enrollment_date.isoformat()}"
        )
        super().__init__(
            CoverageIssue.SERVICE_BEFORE_ENROLLMENT,
            message,
            member_id=member_id,
            policy_id=policy_id,
        )
        self.enrollment_date = enrollment_date
        self.service_date = service_date

    def details(self) -> dict[str, Any]:
        return {
            **super().details(),
            "enrollment_date": self.enrollment_date,
            "service_date": self.service_date,
        }


class InvalidTransitionError(BusinessRuleError):
    """A claim status change is not allowed."""

    error_code = ErrorCode.INVALID_STATE_TRANSITION

    def __init__(
        self,
        from_status: Any,
        to_status: Any,
        required_role: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        message = f"Invalid state transition: {_plain(from_status)} → {_plain(to_status)}."
        if required_role:
            message += f" Required role: {required_role}."
        if hint:
            message += f" {hint}"
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status
        self.required_role = required_role
        self.hint = hint

    def details(self) -> dict[str, Any]:
        return {
            "from_status": self.from_status,
            "to_status": self.to_status,
            "required_role": self.required_role,
            "hint": self.hint,
        }


class TransitionRequirementError(BusinessRuleError):
    """A transition is allowed but its required data is missing."""

    error_code = ErrorCode.TRANSITION_REQUIREMENT_MISSING

    def __init__(self, to_status: Any, field: str, message: str):
        super().__init__(message)
        self.to_status = to_status
        self.field = field

    def details(self) -> dict[str, Any]:
        return {"to_status": self.to_status, "field": self.field}
