"""
Eligibility service.

Builds an EligibilityContext from the read ports, runs the rule chain and
writes an audit log entry for every check.
"""

from datetime import date, datetime
from typing import Optional
from uuid import uuid4

from tpa_engine.config.models import EngineConfig
from tpa_engine.domain.eligibility import EligibilityContext, EligibilityVerdict
from tpa_engine.eligibility.evaluator import RuleChainEvaluator
from tpa_engine.eligibility.rules import default_rules
from tpa_engine.repository.protocol import (
    BenefitPolicyRepository,
    LegacyPolicyRepository,
    MemberRepository,
)
from tpa_engine.utils.logging import DecisionLogger


class EligibilityService:
    """
    Entry point for eligibility checks.

    Usage:
        service = EligibilityService(members, policies)
        verdict = service.check(member_id=42, service_date=date(2024, 3, 1))
    """

    def __init__(
        self,
        members: MemberRepository,
        policies: BenefitPolicyRepository,
        legacy_policies: Optional[LegacyPolicyRepository] = None,
        config: Optional[EngineConfig] = None,
        evaluator: Optional[RuleChainEvaluator] = None,
    ):
        self.members = members
        self.policies = policies
        self.legacy_policies = legacy_policies
        self.config = config or EngineConfig()
        self.evaluator = evaluator or RuleChainEvaluator(default_rules(self.config.eligibility))
        self._logger = DecisionLogger(component="eligibility")

    def build_context(
        self,
        member_id: int,
        service_date: Optional[date],
        request_id: Optional[str] = None,
        service_code: Optional[str] = None,
        provider_id: Optional[int] = None,
        check_timestamp: Optional[datetime] = None,
    ) -> EligibilityContext:
        """Resolve member and policies by id into an immutable context."""
        member = self.members.get_member(member_id)

        benefit_policy = None
        if member is not None and member.benefit_policy_id is not None:
            benefit_policy = self.policies.get_policy(member.benefit_policy_id)

        legacy_policy = None
        if self.legacy_policies is not None:
            legacy_policy = self.legacy_policies.get_legacy_policy_for_member(member_id)

        return EligibilityContext(
            member_id=member_id,
            member=member,
            benefit_policy=benefit_policy,
            legacy_policy=legacy_policy,
            service_date=service_date,
            request_id=request_id or str(uuid4()),
            service_code=service_code,
            provider_id=provider_id,
            check_timestamp=check_timestamp or datetime.now(),
        )

    def evaluate(self, context: EligibilityContext) -> EligibilityVerdict:
        """Run the rule chain on a prepared context and log the outcome."""
        verdict = self.evaluator.evaluate(context)
        self._logger.eligibility_checked(
            verdict.request_id,
            verdict.member_id,
            verdict.eligible,
            verdict.status.value,
            reason=verdict.reason.value,
            service_date=context.service_date.isoformat() if context.service_date else None,
            policy_id=context.benefit_policy.policy_id if context.benefit_policy else None,
            failures=[f.reason_code.value for f in verdict.failures],
            warnings=[w.reason_code.value for w in verdict.warnings],
            rules_evaluated=len(verdict.rules_evaluated),
        )
        return verdict

    def check(
        self,
        member_id: int,
        service_date: Optional[date],
        request_id: Optional[str] = None,
        service_code: Optional[str] = None,
        provider_id: Optional[int] = None,
        check_timestamp: Optional[datetime] = None,
    ) -> EligibilityVerdict:
        """Build the context for a member and evaluate it."""
        context = self.build_context(
            member_id,
            service_date,
            request_id=request_id,
            service_code=service_code,
            provider_id=provider_id,
            check_timestamp=check_timestamp,
        )
        return self.evaluate(context)
