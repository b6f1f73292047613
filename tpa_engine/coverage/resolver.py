"""
Coverage resolver.

Picks the policy rule that applies to a service (a service rule beats a
category rule), computes covered and patient amounts per claim line, and
validates policy-level amount limits and waiting periods.
"""

from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from tpa_engine.config.models import CoverageConfig
from tpa_engine.domain.claims import ClaimLine
from tpa_engine.domain.coverage import CoverageBreakdown, CoverageRule, LineCoverage
from tpa_engine.domain.enums import CoverageRuleType
from tpa_engine.domain.member import Member
from tpa_engine.domain.policy import BenefitPolicy, BenefitPolicyRule, MedicalService
from tpa_engine.exceptions import (
    CoverageIssue,
    CoverageValidationError,
    LimitExceededError,
    NotFoundError,
    PolicyNotActiveError,
    ServiceBeforeEnrollmentError,
    WaitingPeriodNotSatisfiedError,
)
from tpa_engine.repository.protocol import (
    BenefitPolicyRepository,
    ClaimHistoryRepository,
    MedicalServiceRepository,
)
from tpa_engine.utils.logging import DecisionLogger
from tpa_engine.utils.time_conversion import add_days, days_between

ZERO = Decimal("0")


class CoverageResolver:
    """
    Resolves coverage rules and computes claim coverage.

    Holds only references to the read ports; every call is independent.

    Usage:
        resolver = CoverageResolver(policies, services, claims)
        rule = resolver.resolve_coverage(policy_id=1, service_id=7)
        breakdown = resolver.compute_claim_coverage(policy, lines, service_date)
    """

    def __init__(
        self,
        policies: BenefitPolicyRepository,
        services: MedicalServiceRepository,
        claims: Optional[ClaimHistoryRepository] = None,
        config: Optional[CoverageConfig] = None,
    ):
        """
        Initialize the resolver.

        Args:
            policies: Benefit policy and rule lookup
            services: Medical service catalogue lookup
            claims: Claim history, required for amount limit checks
            config: Coverage configuration (defaults used if None)
        """
        self.policies = policies
        self.services = services
        self.claims = claims
        self.config = config or CoverageConfig()
        self._quantum = Decimal(1).scaleb(-self.config.amount_places)
        self._logger = DecisionLogger(component="coverage")

    # =========================================================================
    # Rule resolution
    # =========================================================================

    def resolve_coverage(self, policy_id: int, service_id: int) -> Optional[CoverageRule]:
        """
        Find the coverage rule that applies to a service under a policy.

        Args:
            policy_id: Benefit policy id
            service_id: Medical service id

        Returns:
            The applicable rule, or None if the service is not covered

        Raises:
            NotFoundError: If the policy or service does not exist
        """
        policy = self.policies.get_policy(policy_id)
        if policy is None:
            raise NotFoundError("BenefitPolicy", policy_id)
        service = self.services.get_service(service_id)
        if service is None:
            raise NotFoundError("MedicalService", service_id)

        rule = self._find_best_rule(policy.policy_id, service)
        if rule is None:
            self._logger.debug(
                "service_not_covered", policy_id=policy_id, service_id=service_id
            )
            return None

        coverage = self._to_coverage_rule(rule, policy, service)
        if coverage.requires_pre_approval:
            self._logger.warning(
                "pre_approval_required",
                policy_id=policy_id,
                service_id=service_id,
                rule_id=rule.rule_id,
            )
        return coverage

    def coverage_percent_for_service(self, policy_id: int, service_id: int) -> int:
        """Effective coverage percent for a service, 0 if not covered."""
        coverage = self.resolve_coverage(policy_id, service_id)
        return coverage.coverage_percent if coverage else 0

    def requires_pre_approval(self, policy_id: int, service_id: int) -> bool:
        coverage = self.resolve_coverage(policy_id, service_id)
        return bool(coverage and coverage.requires_pre_approval)

    def validate_service_coverage(self, policy_id: int, service_id: int) -> CoverageRule:
        """
        Resolve coverage for a service, raising if it is not covered.

        Raises:
            NotFoundError: If the policy or service does not exist
            CoverageValidationError: If no rule covers the service
        """
        coverage = self.resolve_coverage(policy_id, service_id)
        if coverage is None:
            raise CoverageValidationError(
                CoverageIssue.SERVICE_NOT_COVERED,
                f"Service {service_id} is not covered by policy {policy_id}",
                policy_id=policy_id,
                service_id=service_id,
            )
        return coverage

    def validate_service_coverage_by_code(self, policy_id: int, service_code: str) -> CoverageRule:
        """Same as validate_service_coverage, looking the service up by code."""
        service = self.services.find_by_code(service_code)
        if service is None:
            raise NotFoundError("MedicalService", service_code)
        return self.validate_service_coverage(policy_id, service.service_id)

    def _find_best_rule(
        self, policy_id: int, service: MedicalService
    ) -> Optional[BenefitPolicyRule]:
        rule = self.policies.find_active_service_rule(policy_id, service.service_id)
        if rule is not None:
            return rule
        if service.category_id is None:
            return None
        return self.policies.find_active_category_rule(policy_id, service.category_id)

    def _to_coverage_rule(
        self,
        rule: BenefitPolicyRule,
        policy: BenefitPolicy,
        service: MedicalService,
    ) -> CoverageRule:
        percent = rule.effective_coverage_percent(
            policy, self.config.system_default_coverage_percent
        )
        warnings: list[str] = []
        if rule.requires_pre_approval:
            warnings.append(
                f"Pre-approval required for {service.name or service.code or service.service_id}"
            )

        if rule.is_service_rule:
            return CoverageRule(
                rule_id=rule.rule_id,
                rule_type=CoverageRuleType.SERVICE,
                coverage_percent=percent,
                amount_limit=rule.amount_limit,
                times_limit=rule.times_limit,
                waiting_period_days=rule.waiting_period_days,
                requires_pre_approval=rule.requires_pre_approval,
                service_id=service.service_id,
                service_name=service.name,
                category_id=service.category_id,
                warnings=tuple(warnings),
            )

        category = self.services.get_category(rule.medical_category_id)
        return CoverageRule(
            rule_id=rule.rule_id,
            rule_type=CoverageRuleType.CATEGORY,
            coverage_percent=percent,
            amount_limit=rule.amount_limit,
            times_limit=rule.times_limit,
            waiting_period_days=rule.waiting_period_days,
            requires_pre_approval=rule.requires_pre_approval,
            service_id=service.service_id,
            service_name=service.name,
            category_id=rule.medical_category_id,
            category_name=category.name if category else None,
            warnings=tuple(warnings),
        )

    def _resolve_line_service(self, line: ClaimLine) -> Optional[MedicalService]:
        if line.service_id is not None:
            service = self.services.get_service(line.service_id)
            if service is not None:
                return service
        if line.service_code:
            return self.services.find_by_code(line.service_code)
        return None

    # =========================================================================
    # Claim coverage
    # =========================================================================

    def compute_claim_coverage(
        self,
        policy: BenefitPolicy,
        lines: Iterable[ClaimLine],
        service_date: date,
    ) -> CoverageBreakdown:
        """
        Compute covered and patient amounts for each claim line.

        Args:
            policy: Benefit policy the claim is made against
            lines: Claim lines
            service_date: Date the services were provided

        Returns:
            Per-line and total coverage

        Raises:
            PolicyNotActiveError: If the policy is inactive or not effective
                on the service date
        """
        self._require_usable_policy(policy, service_date)

        line_results: list[LineCoverage] = []
        warnings: list[str] = []
        errors: list[str] = []

        for line in lines:
            service = self._resolve_line_service(line)
            if service is None:
                label = line.service_code or line.service_id
                errors.append(f"Service not found: {label}")
                line_results.append(self._uncovered(line, None, f"Service not found: {label}"))
                continue

            rule = self._find_best_rule(policy.policy_id, service)
            label = service.name or service.code or str(service.service_id)
            if rule is None:
                errors.append(f"Service not covered: {label}")
                line_results.append(
                    self._uncovered(line, service, f"Service not covered: {label}")
                )
                continue

            percent = rule.effective_coverage_percent(
                policy, self.config.system_default_coverage_percent
            )
            covered_amount = self._round(line.amount * Decimal(percent) / Decimal(100))

            limit_applied = False
            if rule.amount_limit is not None:
                # Clamp never rounds past the limit
                cap = rule.amount_limit.quantize(self._quantum, rounding=ROUND_DOWN)
                if covered_amount > cap:
                    warnings.append(
                        f"Amount limit applied for {label}: covered amount reduced from "
                        f"{covered_amount} to {cap} {self.config.currency}"
                    )
                    covered_amount = cap
                    limit_applied = True

            if rule.requires_pre_approval:
                warnings.append(f"Pre-approval required for {label}")

            line_results.append(
                LineCoverage(
                    service_id=service.service_id,
                    service_code=service.code,
                    service_name=service.name,
                    amount=line.amount,
                    covered=True,
                    coverage_percent=percent,
                    covered_amount=covered_amount,
                    patient_amount=line.amount - covered_amount,
                    rule_id=rule.rule_id,
                    rule_type=(
                        CoverageRuleType.SERVICE
                        if rule.is_service_rule
                        else CoverageRuleType.CATEGORY
                    ),
                    limit_applied=limit_applied,
                    requires_pre_approval=rule.requires_pre_approval,
                )
            )

        breakdown = CoverageBreakdown(
            policy_id=policy.policy_id,
            covered=not errors,
            lines=tuple(line_results),
            total_requested=sum((lc.amount for lc in line_results), ZERO),
            total_covered=sum((lc.covered_amount for lc in line_results), ZERO),
            total_patient=sum((lc.patient_amount for lc in line_results), ZERO),
            warnings=tuple(warnings),
            errors=tuple(errors),
        )
        self._logger.coverage_computed(
            policy.policy_id,
            breakdown.covered,
            breakdown.total_requested,
            breakdown.total_covered,
            lines=len(line_results),
            warnings=len(warnings),
        )
        return breakdown

    def _uncovered(
        self,
        line: ClaimLine,
        service: Optional[MedicalService],
        reason: str,
    ) -> LineCoverage:
        return LineCoverage(
            service_id=service.service_id if service else line.service_id,
            service_code=service.code if service else line.service_code,
            service_name=service.name if service else line.description,
            amount=line.amount,
            covered=False,
            covered_amount=ZERO,
            patient_amount=line.amount,
            reason=reason,
        )

    def _round(self, amount: Decimal) -> Decimal:
        return amount.quantize(self._quantum, rounding=ROUND_HALF_UP)

    # =========================================================================
    # Policy checks
    # =========================================================================

    def _require_usable_policy(self, policy: BenefitPolicy, on: date) -> None:
        if not policy.is_usable:
            raise PolicyNotActiveError(policy.policy_id, policy.policy_code, on)
        if not policy.is_effective_on(on):
            raise PolicyNotActiveError(
                policy.policy_id,
                policy.policy_code,
                on,
                reason="Policy is not effective",
            )

    def validate_member_has_active_policy(
        self, member: Member, service_date: date
    ) -> BenefitPolicy:
        """
        Return the member's benefit policy if it covers the service date.

        Raises:
            CoverageValidationError: If the member has no policy, or the date
                is outside the policy period
            PolicyNotActiveError: If the policy is not active or has no
                coverage period
        """
        if member.benefit_policy_id is None:
            raise CoverageValidationError(
                CoverageIssue.NO_ACTIVE_POLICY,
                f"Member {member.member_id} has no benefit policy assigned",
                member_id=member.member_id,
            )
        policy = self.policies.get_policy(member.benefit_policy_id)
        if policy is None:
            raise CoverageValidationError(
                CoverageIssue.NO_ACTIVE_POLICY,
                f"Benefit policy {member.benefit_policy_id} not found",
                member_id=member.member_id,
                policy_id=member.benefit_policy_id,
            )
        if not policy.is_usable:
            raise PolicyNotActiveError(policy.policy_id, policy.policy_code, service_date)
        if policy.start_date is not None and service_date < policy.start_date:
            raise CoverageValidationError(
                CoverageIssue.POLICY_NOT_STARTED,
                f"Policy starts on {policy.start_date.isoformat()}",
                member_id=member.member_id,
                policy_id=policy.policy_id,
            )
        if policy.end_date is not None and service_date > policy.end_date:
            raise CoverageValidationError(
                CoverageIssue.POLICY_EXPIRED,
                f"Policy ended on {policy.end_date.isoformat()}",
                member_id=member.member_id,
                policy_id=policy.policy_id,
            )
        if not policy.is_effective_on(service_date):
            raise PolicyNotActiveError(
                policy.policy_id,
                policy.policy_code,
                service_date,
                reason="Policy has no coverage period",
            )
        return policy

    def has_active_policy(self, member: Member, service_date: date) -> bool:
        try:
            self.validate_member_has_active_policy(member, service_date)
        except (CoverageValidationError, PolicyNotActiveError):
            return False
        return True

    # =========================================================================
    # Amount limits
    # =========================================================================

    def _approved_amounts(self, member_id: int, year: Optional[int] = None) -> Decimal:
        if self.claims is None:
            return ZERO
        total = ZERO
        for claim in self.claims.find_by_member(member_id):
            if claim.approved_amount is None:
                continue
            if year is not None and (claim.visit_date is None or claim.visit_date.year != year):
                continue
            total += claim.approved_amount
        return total

    def validate_amount_limits(
        self,
        member_id: int,
        policy: BenefitPolicy,
        requested_amount: Optional[Decimal],
        service_date: date,
    ) -> None:
        """
        Check a requested amount against the annual and per-member limits.

        Limits that are unset or not positive are not enforced.

        Raises:
            LimitExceededError: If either limit would be exceeded
        """
        if requested_amount is None or requested_amount <= 0:
            return

        if policy.annual_limit is not None and policy.annual_limit > 0:
            used = self._approved_amounts(member_id, year=service_date.year)
            self._check_limit(
                "Annual", requested_amount, policy.annual_limit, used, member_id, policy
            )

        if policy.per_member_limit is not None and policy.per_member_limit > 0:
            used = self._approved_amounts(member_id)
            self._check_limit(
                "Per-member", requested_amount, policy.per_member_limit, used, member_id, policy
            )

    def _check_limit(
        self,
        limit_type: str,
        requested: Decimal,
        limit: Decimal,
        used: Decimal,
        member_id: int,
        policy: BenefitPolicy,
    ) -> None:
        remaining = limit - used
        if requested <= remaining:
            return
        self._logger.limit_exceeded(
            limit_type,
            requested,
            remaining,
            limit,
            used=str(used),
            member_id=member_id,
            policy_id=policy.policy_id,
        )
        raise LimitExceededError(
            limit_type,
            requested,
            remaining,
            limit,
            used,
            member_id=member_id,
            policy_id=policy.policy_id,
            currency=self.config.currency,
        )

    def remaining_annual_coverage(
        self, member_id: int, policy: BenefitPolicy, as_of: date
    ) -> Optional[Decimal]:
        """Annual limit left for the year of ``as_of``; None if unlimited."""
        if policy.annual_limit is None or policy.annual_limit <= 0:
            return None
        used = self._approved_amounts(member_id, year=as_of.year)
        return max(ZERO, policy.annual_limit - used)

    # =========================================================================
    # Waiting periods
    # =========================================================================

    def validate_waiting_periods(
        self,
        member: Member,
        policy: BenefitPolicy,
        lines: Iterable[ClaimLine],
        service_date: date,
    ) -> None:
        """
        Check the policy and per-service waiting periods for a claim.

        Raises:
            ServiceBeforeEnrollmentError: If the service predates enrollment
            WaitingPeriodNotSatisfiedError: If a waiting period has not elapsed
        """
        enrolled = member.enrollment_date
        if enrolled is None:
            self._logger.debug(
                "waiting_period_check_skipped",
                member_id=member.member_id,
                reason="no enrollment date",
            )
            return

        elapsed = days_between(enrolled, service_date)
        if elapsed < 0:
            raise ServiceBeforeEnrollmentError(
                enrolled,
                service_date,
                member_id=member.member_id,
                policy_id=policy.policy_id,
            )

        default_days = policy.default_waiting_period_days
        if default_days and elapsed < default_days:
            raise WaitingPeriodNotSatisfiedError(
                elapsed,
                default_days,
                add_days(enrolled, default_days),
                member_id=member.member_id,
                policy_id=policy.policy_id,
            )

        for line in lines:
            service = self._resolve_line_service(line)
            if service is None:
                self._logger.debug(
                    "waiting_period_line_skipped",
                    service_id=line.service_id,
                    service_code=line.service_code,
                )
                continue
            rule = self._find_best_rule(policy.policy_id, service)
            if rule is None or not rule.waiting_period_days:
                continue
            if elapsed < rule.waiting_period_days:
                raise WaitingPeriodNotSatisfiedError(
                    elapsed,
                    rule.waiting_period_days,
                    add_days(enrolled, rule.waiting_period_days),
                    service_name=service.name or service.code,
                    member_id=member.member_id,
                    policy_id=policy.policy_id,
                    service_id=service.service_id,
                )
