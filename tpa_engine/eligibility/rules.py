"""
Eligibility rules.

Each rule is a stateless predicate over an EligibilityContext, tagged with
a priority (lower runs first) and a hard/soft classification. The rule set
is a closed, explicit list built by ``default_rules``.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tpa_engine.config.models import EligibilityConfig
from tpa_engine.domain.eligibility import EligibilityContext, RuleResult
from tpa_engine.domain.enums import (
    CardStatus,
    EligibilityReason,
    MemberStatus,
    PolicyStatus,
)
from tpa_engine.utils.time_conversion import add_days, add_years


class EligibilityRule(ABC):
    """
    Abstract base class for eligibility rules.

    Subclasses set the class attributes and implement ``evaluate``.

    Usage:
        class MyRule(EligibilityRule):
            rule_code = "MY_RULE"
            name = "My rule"
            priority = 80

            def evaluate(self, context: EligibilityContext) -> RuleResult:
                ...
    """

    rule_code: str = ""
    name: str = ""
    priority: int = 100
    is_hard_rule: bool = True

    def is_applicable(self, context: EligibilityContext) -> bool:
        """Whether this rule should run for the context. Defaults to always."""
        return True

    @abstractmethod
    def evaluate(self, context: EligibilityContext) -> RuleResult:
        """
        Evaluate the rule.

        Args:
            context: Eligibility context snapshot

        Returns:
            PASS, or FAIL with a reason and detail
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.rule_code}, priority={self.priority})"


class ServiceDateValidRule(EligibilityRule):
    """Service date must be present and inside the allowed window."""

    rule_code = "SERVICE_DATE_VALID"
    name = "Service date valid"
    priority = 5

    def __init__(self, max_future_days: int = 90, max_past_years: int = 2):
        self.max_future_days = max_future_days
        self.max_past_years = max_past_years

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        service_date = context.service_date
        if service_date is None:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_INVALID, "Service date is required"
            )

        today = context.today
        earliest = add_years(today, -self.max_past_years)
        if service_date < earliest:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_INVALID,
                f"Service date {service_date.isoformat()} is more than "
                f"{self.max_past_years} years in the past",
            )

        latest = add_days(today, self.max_future_days)
        if service_date > latest:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_INVALID,
                f"Service date {service_date.isoformat()} is too far in the future "
                f"(max {self.max_future_days} days)",
            )

        if service_date > today:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_IN_FUTURE,
                f"Service date {service_date.isoformat()} is in the future "
                "(accepted for pre-authorization)",
            )

        return RuleResult.pass_()


class MemberExistsRule(EligibilityRule):
    """Member must be resolved."""

    rule_code = "MEMBER_EXISTS"
    name = "Member exists"
    priority = 10

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        if not context.has_member:
            return RuleResult.fail(
                EligibilityReason.MEMBER_NOT_FOUND,
                f"Member ID: {context.member_id}",
            )
        return RuleResult.pass_()


class MemberActiveRule(EligibilityRule):
    """Member lifecycle status must be ACTIVE."""

    rule_code = "MEMBER_ACTIVE"
    name = "Member active"
    priority = 20

    _STATUS_REASONS = {
        MemberStatus.SUSPENDED: EligibilityReason.MEMBER_SUSPENDED,
        MemberStatus.TERMINATED: EligibilityReason.MEMBER_TERMINATED,
    }

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.has_member

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        status = context.member.status
        if status == MemberStatus.ACTIVE:
            return RuleResult.pass_()
        reason = self._STATUS_REASONS.get(status, EligibilityReason.MEMBER_INACTIVE)
        label = status.value if status else "UNKNOWN"
        return RuleResult.fail(reason, f"Member status: {label}")


class MemberCardValidRule(EligibilityRule):
    """Membership card must not be blocked, expired or inactive."""

    rule_code = "MEMBER_CARD_VALID"
    name = "Member card valid"
    priority = 25

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.has_member

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        member = context.member
        card_status = member.card_status

        # Members migrated from the older system have no card record
        if card_status is None:
            return RuleResult.pass_("Card status not set (legacy member)")

        if card_status == CardStatus.ACTIVE:
            return RuleResult.pass_()
        if card_status == CardStatus.BLOCKED:
            return RuleResult.fail(
                EligibilityReason.MEMBER_CARD_BLOCKED,
                member.blocked_reason or f"Card number: {member.card_number}",
            )
        if card_status == CardStatus.EXPIRED:
            return RuleResult.fail(
                EligibilityReason.MEMBER_CARD_EXPIRED,
                f"Card number: {member.card_number}",
            )
        return RuleResult.fail(
            EligibilityReason.MEMBER_INACTIVE,
            f"Card status: {card_status.value}",
        )


class PolicyExistsRule(EligibilityRule):
    """A benefit policy must be resolved for the member."""

    rule_code = "POLICY_EXISTS"
    name = "Policy exists"
    priority = 30

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        if context.has_benefit_policy:
            return RuleResult.pass_()
        if context.has_legacy_policy:
            return RuleResult.fail(
                EligibilityReason.POLICY_NOT_FOUND,
                f"Only legacy policy {context.legacy_policy.policy_number} found; "
                "member must be migrated to a benefit policy",
            )
        return RuleResult.fail(
            EligibilityReason.POLICY_NOT_FOUND,
            f"No policy assigned to member {context.member_id}",
        )


class PolicyActiveRule(EligibilityRule):
    """Benefit policy must be active."""

    rule_code = "POLICY_ACTIVE"
    name = "Policy active"
    priority = 40

    _STATUS_REASONS = {
        PolicyStatus.SUSPENDED: EligibilityReason.POLICY_SUSPENDED,
        PolicyStatus.EXPIRED: EligibilityReason.POLICY_EXPIRED,
        PolicyStatus.CANCELLED: EligibilityReason.POLICY_CANCELLED,
    }

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.has_benefit_policy

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        policy = context.benefit_policy
        if not policy.active:
            return RuleResult.fail(
                EligibilityReason.POLICY_INACTIVE,
                f"Policy {policy.policy_code or policy.policy_id} is deactivated",
            )
        if policy.status == PolicyStatus.ACTIVE:
            return RuleResult.pass_()
        reason = self._STATUS_REASONS.get(policy.status, EligibilityReason.POLICY_INACTIVE)
        return RuleResult.fail(reason, f"Policy status: {policy.status.value}")


class PolicyCoveragePeriodRule(EligibilityRule):
    """Service date must fall inside the policy period."""

    rule_code = "POLICY_COVERAGE_PERIOD"
    name = "Policy coverage period"
    priority = 50

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.has_benefit_policy and context.service_date is not None

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        policy = context.benefit_policy
        service_date = context.service_date
        if policy.start_date is None or policy.end_date is None:
            return RuleResult.fail(
                EligibilityReason.POLICY_INACTIVE, "Policy dates not configured"
            )
        if service_date < policy.start_date:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_BEFORE_COVERAGE,
                f"Coverage starts: {policy.start_date.isoformat()}",
            )
        if service_date > policy.end_date:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_AFTER_COVERAGE,
                f"Coverage ended: {policy.end_date.isoformat()}",
            )
        return RuleResult.pass_()


class MemberEnrollmentRule(EligibilityRule):
    """Member must be enrolled in the resolved benefit policy."""

    rule_code = "MEMBER_ENROLLMENT"
    name = "Member enrollment"
    priority = 60

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.has_member

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        member = context.member
        if member.benefit_policy_id is None:
            return RuleResult.fail(
                EligibilityReason.MEMBER_NOT_ENROLLED,
                "Member has no benefit policy assigned",
            )

        policy = context.benefit_policy
        if policy is None:
            return RuleResult.pass_()

        if policy.policy_id != member.benefit_policy_id:
            return RuleResult.fail(
                EligibilityReason.MEMBER_NOT_ENROLLED,
                f"Member is assigned to policy {member.benefit_policy_id}, "
                f"not {policy.policy_id}",
            )
        if policy.status != PolicyStatus.ACTIVE:
            return RuleResult.fail(
                EligibilityReason.POLICY_INACTIVE,
                f"Assigned policy status: {policy.status.value}",
            )
        return RuleResult.pass_()


class WaitingPeriodRule(EligibilityRule):
    """Enough days must have elapsed since enrollment."""

    rule_code = "WAITING_PERIOD"
    name = "Waiting period"
    priority = 70

    def is_applicable(self, context: EligibilityContext) -> bool:
        return context.effective_waiting_period_days > 0

    def evaluate(self, context: EligibilityContext) -> RuleResult:
        enrolled = context.enrollment_date
        days_elapsed = context.days_since_enrollment
        if enrolled is None or days_elapsed is None:
            return RuleResult.pass_("No enrollment date; waiting period not checked")

        if days_elapsed < 0:
            return RuleResult.fail(
                EligibilityReason.SERVICE_DATE_BEFORE_ENROLLMENT,
                f"Enrolled: {enrolled.isoformat()}, "
                f"Service date: {context.service_date.isoformat()}",
            )

        required = context.effective_waiting_period_days
        if days_elapsed < required:
            return RuleResult.fail(
                EligibilityReason.WAITING_PERIOD_NOT_SATISFIED,
                f"Enrolled: {enrolled.isoformat()}, Required: {required} days, "
                f"Days elapsed: {days_elapsed}",
            )
        return RuleResult.pass_()


def default_rules(config: Optional[EligibilityConfig] = None) -> list[EligibilityRule]:
    """
    Build the standard rule set.

    Args:
        config: Eligibility configuration (defaults used if None)

    Returns:
        Rule instances in registration order
    """
    config = config or EligibilityConfig()
    return [
        ServiceDateValidRule(
            max_future_days=config.max_future_days,
            max_past_years=config.max_past_years,
        ),
        MemberExistsRule(),
        MemberActiveRule(),
        MemberCardValidRule(),
        PolicyExistsRule(),
        PolicyActiveRule(),
        PolicyCoveragePeriodRule(),
        MemberEnrollmentRule(),
        WaitingPeriodRule(),
    ]
