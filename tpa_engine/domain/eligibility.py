"""
Eligibility domain models: evaluation context, rule results and verdicts.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tpa_engine.domain.enums import EligibilityReason, RuleOutcome, VerdictStatus
from tpa_engine.domain.member import Member
from tpa_engine.domain.policy import BenefitPolicy, LegacyPolicy


class EligibilityContext(BaseModel):
    """
    Immutable snapshot of everything an eligibility check needs.

    Built once per request; rules only read from it.
    """

    model_config = ConfigDict(frozen=True)

    member_id: Optional[int] = None
    member: Optional[Member] = None
    benefit_policy: Optional[BenefitPolicy] = None
    legacy_policy: Optional[LegacyPolicy] = None
    service_date: Optional[date] = None

    request_id: Optional[str] = None
    service_code: Optional[str] = None
    provider_id: Optional[int] = None
    check_timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def today(self) -> date:
        return self.check_timestamp.date()

    @property
    def has_member(self) -> bool:
        return self.member is not None

    @property
    def has_benefit_policy(self) -> bool:
        return self.benefit_policy is not None

    @property
    def has_legacy_policy(self) -> bool:
        return self.legacy_policy is not None

    @property
    def has_any_policy(self) -> bool:
        return self.has_benefit_policy or self.has_legacy_policy

    @property
    def effective_waiting_period_days(self) -> int:
        """Benefit policy default, else the legacy general waiting period, else 0."""
        if self.benefit_policy and self.benefit_policy.default_waiting_period_days is not None:
            return self.benefit_policy.default_waiting_period_days
        if self.legacy_policy and self.legacy_policy.general_waiting_period_days is not None:
            return self.legacy_policy.general_waiting_period_days
        return 0

    @property
    def enrollment_date(self) -> Optional[date]:
        if self.member is None:
            return None
        return self.member.enrollment_date

    @property
    def days_since_enrollment(self) -> Optional[int]:
        enrolled = self.enrollment_date
        if enrolled is None or self.service_date is None:
            return None
        return (self.service_date - enrolled).days


class RuleResult(BaseModel):
    """Outcome of evaluating one eligibility rule."""

    model_config = ConfigDict(frozen=True)

    outcome: RuleOutcome
    reason: Optional[EligibilityReason] = None
    detail: Optional[str] = None

    @classmethod
    def pass_(cls, detail: Optional[str] = None) -> "RuleResult":
        return cls(outcome=RuleOutcome.PASS, detail=detail)

    @classmethod
    def fail(cls, reason: EligibilityReason, detail: Optional[str] = None) -> "RuleResult":
        return cls(outcome=RuleOutcome.FAIL, reason=reason, detail=detail)

    @property
    def passed(self) -> bool:
        return self.outcome == RuleOutcome.PASS


class ReasonDetail(BaseModel):
    """A failure or warning entry in a verdict."""

    model_config = ConfigDict(frozen=True)

    rule_code: str
    reason_code: EligibilityReason
    detail: Optional[str] = None
    hard_failure: bool

    @property
    def message_en(self) -> str:
        return self.reason_code.message_en


class EligibilityVerdict(BaseModel):
    """Aggregated result of running the eligibility rule chain."""

    model_config = ConfigDict(frozen=True)

    eligible: bool
    status: VerdictStatus
    failures: tuple[ReasonDetail, ...] = ()
    warnings: tuple[ReasonDetail, ...] = ()
    rules_evaluated: tuple[str, ...] = ()

    request_id: Optional[str] = None
    member_id: Optional[int] = None
    service_date: Optional[date] = None

    @property
    def reason(self) -> EligibilityReason:
        """Headline reason: the first hard failure, or the success code."""
        if self.failures:
            return self.failures[0].reason_code
        if self.warnings:
            return EligibilityReason.ELIGIBLE_WITH_WARNINGS
        return EligibilityReason.ELIGIBLE
