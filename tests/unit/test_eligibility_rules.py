"""
Unit tests for individual eligibility rules.
"""

from datetime import date

import pytest

from tpa_engine.config.models import EligibilityConfig
from tpa_engine.domain.enums import (
    CardStatus,
    EligibilityReason,
    MemberStatus,
    PolicyStatus,
    RuleOutcome,
)
from tpa_engine.domain.policy import LegacyPolicy
from tpa_engine.eligibility.rules import (
    MemberActiveRule,
    MemberCardValidRule,
    MemberEnrollmentRule,
    MemberExistsRule,
    PolicyActiveRule,
    PolicyCoveragePeriodRule,
    PolicyExistsRule,
    ServiceDateValidRule,
    WaitingPeriodRule,
    default_rules,
)


class TestServiceDateValidRule:
    """Tests for the service date window."""

    def test_missing_date_fails(self, make_context):
        """A missing service date is invalid."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=None))
        assert result.outcome == RuleOutcome.FAIL
        assert result.reason == EligibilityReason.SERVICE_DATE_INVALID

    def test_past_date_inside_window_passes(self, make_context):
        """A recent past date passes."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2024, 6, 1)))
        assert result.passed

    def test_today_passes(self, make_context, today):
        """The check date itself is not in the future."""
        assert ServiceDateValidRule().evaluate(make_context(service_date=today)).passed

    def test_oldest_allowed_date_passes(self, make_context):
        """Exactly two years before today is still allowed."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2022, 6, 15)))
        assert result.passed

    def test_too_old_date_fails(self, make_context):
        """Dates older than two years are rejected."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2022, 6, 14)))
        assert result.reason == EligibilityReason.SERVICE_DATE_INVALID
        assert "2 years" in result.detail

    def test_near_future_is_soft_warning(self, make_context):
        """Future dates inside the horizon are flagged for pre-authorization."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2024, 6, 16)))
        assert result.outcome == RuleOutcome.FAIL
        assert result.reason == EligibilityReason.SERVICE_DATE_IN_FUTURE
        assert result.reason.hard_failure is False

    def test_horizon_boundary_is_soft(self, make_context):
        """today + 90 days is the last accepted date."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2024, 9, 13)))
        assert result.reason == EligibilityReason.SERVICE_DATE_IN_FUTURE

    def test_beyond_horizon_fails(self, make_context):
        """Dates beyond the horizon are hard failures."""
        result = ServiceDateValidRule().evaluate(make_context(service_date=date(2024, 9, 14)))
        assert result.reason == EligibilityReason.SERVICE_DATE_INVALID
        assert "too far in the future" in result.detail

    def test_configured_horizon(self, make_context):
        """The horizon comes from configuration."""
        rule = ServiceDateValidRule(max_future_days=10)
        result = rule.evaluate(make_context(service_date=date(2024, 6, 30)))
        assert result.reason == EligibilityReason.SERVICE_DATE_INVALID


class TestMemberRules:
    """Tests for member existence, status and card rules."""

    def test_member_exists_passes(self, make_context):
        """A resolved member passes."""
        assert MemberExistsRule().evaluate(make_context()).passed

    def test_member_missing_fails(self, make_context):
        """An unresolved member fails with the id in the detail."""
        result = MemberExistsRule().evaluate(make_context(member=None, member_id=999))
        assert result.reason == EligibilityReason.MEMBER_NOT_FOUND
        assert "999" in result.detail

    @pytest.mark.parametrize(
        "status,reason",
        [
            (MemberStatus.SUSPENDED, EligibilityReason.MEMBER_SUSPENDED),
            (MemberStatus.TERMINATED, EligibilityReason.MEMBER_TERMINATED),
            (MemberStatus.PENDING, EligibilityReason.MEMBER_INACTIVE),
            (None, EligibilityReason.MEMBER_INACTIVE),
        ],
    )
    def test_member_status_reasons(self, make_context, member, status, reason):
        """Each non-active member status maps to its reason."""
        context = make_context(member=member.model_copy(update={"status": status}))
        result = MemberActiveRule().evaluate(context)
        assert result.reason == reason

    def test_member_active_not_applicable_without_member(self, make_context):
        """Status and card rules only run when a member is resolved."""
        context = make_context(member=None)
        assert MemberActiveRule().is_applicable(context) is False
        assert MemberCardValidRule().is_applicable(context) is False

    def test_card_status_none_passes_with_note(self, make_context, member):
        """Legacy members without a card record pass."""
        context = make_context(member=member.model_copy(update={"card_status": None}))
        result = MemberCardValidRule().evaluate(context)
        assert result.passed
        assert "legacy" in result.detail

    def test_blocked_card_uses_blocked_reason(self, make_context, member):
        """A blocked card reports the recorded reason."""
        blocked = member.model_copy(
            update={"card_status": CardStatus.BLOCKED, "blocked_reason": "Reported stolen"}
        )
        result = MemberCardValidRule().evaluate(make_context(member=blocked))
        assert result.reason == EligibilityReason.MEMBER_CARD_BLOCKED
        assert result.detail == "Reported stolen"

    def test_blocked_card_without_reason_uses_card_number(self, make_context, member):
        """Without a reason, the card number is reported."""
        blocked = member.model_copy(update={"card_status": CardStatus.BLOCKED})
        result = MemberCardValidRule().evaluate(make_context(member=blocked))
        assert "CARD-100" in result.detail

    def test_expired_card(self, make_context, member):
        """An expired card fails."""
        expired = member.model_copy(update={"card_status": CardStatus.EXPIRED})
        result = MemberCardValidRule().evaluate(make_context(member=expired))
        assert result.reason == EligibilityReason.MEMBER_CARD_EXPIRED

    def test_inactive_card(self, make_context, member):
        """An inactive card reports the member as inactive."""
        inactive = member.model_copy(update={"card_status": CardStatus.INACTIVE})
        result = MemberCardValidRule().evaluate(make_context(member=inactive))
        assert result.reason == EligibilityReason.MEMBER_INACTIVE


class TestPolicyRules:
    """Tests for policy existence, status and coverage period."""

    def test_benefit_policy_passes(self, make_context):
        """A resolved benefit policy passes."""
        assert PolicyExistsRule().evaluate(make_context()).passed

    def test_no_policy_fails(self, make_context):
        """No policy at all fails."""
        result = PolicyExistsRule().evaluate(make_context(benefit_policy=None))
        assert result.reason == EligibilityReason.POLICY_NOT_FOUND

    def test_legacy_only_policy_fails_with_migration_note(self, make_context):
        """A legacy policy alone is not accepted."""
        legacy = LegacyPolicy(policy_id=5, policy_number="LP-5")
        result = PolicyExistsRule().evaluate(
            make_context(benefit_policy=None, legacy_policy=legacy)
        )
        assert result.reason == EligibilityReason.POLICY_NOT_FOUND
        assert "LP-5" in result.detail
        assert "migrated" in result.detail

    def test_deactivated_policy(self, make_context, policy):
        """The active flag is checked before status."""
        context = make_context(benefit_policy=policy.model_copy(update={"active": False}))
        result = PolicyActiveRule().evaluate(context)
        assert result.reason == EligibilityReason.POLICY_INACTIVE

    @pytest.mark.parametrize(
        "status,reason",
        [
            (PolicyStatus.SUSPENDED, EligibilityReason.POLICY_SUSPENDED),
            (PolicyStatus.EXPIRED, EligibilityReason.POLICY_EXPIRED),
            (PolicyStatus.CANCELLED, EligibilityReason.POLICY_CANCELLED),
            (PolicyStatus.DRAFT, EligibilityReason.POLICY_INACTIVE),
        ],
    )
    def test_policy_status_reasons(self, make_context, policy, status, reason):
        """Each non-active policy status maps to its reason."""
        context = make_context(benefit_policy=policy.model_copy(update={"status": status}))
        assert PolicyActiveRule().evaluate(context).reason == reason

    def test_before_coverage_start(self, make_context, policy):
        """Service before the policy start fails."""
        later = policy.model_copy(update={"start_date": date(2024, 7, 1)})
        result = PolicyCoveragePeriodRule().evaluate(make_context(benefit_policy=later))
        assert result.reason == EligibilityReason.SERVICE_DATE_BEFORE_COVERAGE
        assert "2024-07-01" in result.detail

    def test_after_coverage_end(self, make_context, policy):
        """Service after the policy end fails."""
        ended = policy.model_copy(update={"end_date": date(2024, 5, 31)})
        result = PolicyCoveragePeriodRule().evaluate(make_context(benefit_policy=ended))
        assert result.reason == EligibilityReason.SERVICE_DATE_AFTER_COVERAGE

    def test_missing_policy_dates(self, make_context, policy):
        """A policy without dates cannot cover anything."""
        undated = policy.model_copy(update={"end_date": None})
        result = PolicyCoveragePeriodRule().evaluate(make_context(benefit_policy=undated))
        assert result.reason == EligibilityReason.POLICY_INACTIVE

    def test_coverage_period_needs_service_date(self, make_context):
        """The period rule is skipped without a service date."""
        assert PolicyCoveragePeriodRule().is_applicable(make_context(service_date=None)) is False


class TestMemberEnrollmentRule:
    """Tests for member-to-policy enrollment."""

    def test_enrolled_member_passes(self, make_context):
        """A member assigned to the resolved policy passes."""
        assert MemberEnrollmentRule().evaluate(make_context()).passed

    def test_member_without_policy(self, make_context, member):
        """A member with no assigned policy is not enrolled."""
        context = make_context(member=member.model_copy(update={"benefit_policy_id": None}))
        result = MemberEnrollmentRule().evaluate(context)
        assert result.reason == EligibilityReason.MEMBER_NOT_ENROLLED

    def test_member_assigned_elsewhere(self, make_context, member):
        """A member assigned to another policy is not enrolled in this one."""
        context = make_context(member=member.model_copy(update={"benefit_policy_id": 2}))
        result = MemberEnrollmentRule().evaluate(context)
        assert result.reason == EligibilityReason.MEMBER_NOT_ENROLLED

    def test_assigned_policy_not_active(self, make_context, policy):
        """Enrollment in a non-active policy fails."""
        context = make_context(
            benefit_policy=policy.model_copy(update={"status": PolicyStatus.SUSPENDED})
        )
        result = MemberEnrollmentRule().evaluate(context)
        assert result.reason == EligibilityReason.POLICY_INACTIVE


class TestWaitingPeriodRule:
    """Tests for the waiting period rule."""

    def test_not_applicable_without_waiting_period(self, make_context):
        """No waiting period configured means the rule is skipped."""
        assert WaitingPeriodRule().is_applicable(make_context()) is False

    def test_legacy_waiting_period_fallback(self, make_context, policy):
        """The legacy general waiting period applies when the policy has none."""
        legacy = LegacyPolicy(policy_id=5, general_waiting_period_days=30)
        context = make_context(legacy_policy=legacy)
        assert context.effective_waiting_period_days == 30
        assert WaitingPeriodRule().is_applicable(context) is True

    def test_benefit_policy_waiting_period_wins(self, make_context, policy):
        """The benefit policy default takes precedence over the legacy value."""
        context = make_context(
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 60}),
            legacy_policy=LegacyPolicy(policy_id=5, general_waiting_period_days=30),
        )
        assert context.effective_waiting_period_days == 60

    def test_waiting_period_not_satisfied(self, make_context, policy):
        """31 days elapsed of a required 90 fails with both numbers."""
        context = make_context(
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 90}),
            service_date=date(2024, 2, 1),
        )
        result = WaitingPeriodRule().evaluate(context)
        assert result.reason == EligibilityReason.WAITING_PERIOD_NOT_SATISFIED
        assert result.detail == "Enrolled: 2024-01-01, Required: 90 days, Days elapsed: 31"

    def test_waiting_period_satisfied(self, make_context, policy):
        """Exactly the required number of days passes."""
        context = make_context(
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 90}),
            service_date=date(2024, 3, 31),
        )
        assert context.days_since_enrollment == 90
        assert WaitingPeriodRule().evaluate(context).passed

    def test_service_before_enrollment_is_distinct(self, make_context, member, policy):
        """A service before enrollment has its own hard reason."""
        context = make_context(
            member=member.model_copy(update={"start_date": date(2024, 3, 1)}),
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 30}),
            service_date=date(2024, 2, 1),
        )
        result = WaitingPeriodRule().evaluate(context)
        assert result.reason == EligibilityReason.SERVICE_DATE_BEFORE_ENROLLMENT
        assert result.reason != EligibilityReason.WAITING_PERIOD_NOT_SATISFIED
        assert result.reason.hard_failure is True

    def test_join_date_used_when_no_start_date(self, make_context, member, policy):
        """The join date is the enrollment fallback."""
        context = make_context(
            member=member.model_copy(
                update={"start_date": None, "join_date": date(2024, 1, 15)}
            ),
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 30}),
            service_date=date(2024, 2, 1),
        )
        assert context.enrollment_date == date(2024, 1, 15)
        assert context.days_since_enrollment == 17
        assert WaitingPeriodRule().evaluate(context).reason == (
            EligibilityReason.WAITING_PERIOD_NOT_SATISFIED
        )

    def test_no_enrollment_date_passes(self, make_context, member, policy):
        """Without any enrollment date the check is skipped."""
        context = make_context(
            member=member.model_copy(update={"start_date": None}),
            benefit_policy=policy.model_copy(update={"default_waiting_period_days": 30}),
        )
        assert context.days_since_enrollment is None
        assert WaitingPeriodRule().evaluate(context).passed


class TestDefaultRules:
    """Tests for the standard rule set."""

    def test_priorities(self):
        """The standard rules carry the documented priorities."""
        priorities = {rule.rule_code: rule.priority for rule in default_rules()}
        assert priorities == {
            "SERVICE_DATE_VALID": 5,
            "MEMBER_EXISTS": 10,
            "MEMBER_ACTIVE": 20,
            "MEMBER_CARD_VALID": 25,
            "POLICY_EXISTS": 30,
            "POLICY_ACTIVE": 40,
            "POLICY_COVERAGE_PERIOD": 50,
            "MEMBER_ENROLLMENT": 60,
            "WAITING_PERIOD": 70,
        }

    def test_all_rules_are_hard(self):
        """Every standard rule is a hard rule."""
        assert all(rule.is_hard_rule for rule in default_rules())

    def test_config_is_applied(self):
        """Service date limits come from the eligibility config."""
        rules = default_rules(EligibilityConfig(max_future_days=30, max_past_years=3))
        date_rule = rules[0]
        assert isinstance(date_rule, ServiceDateValidRule)
        assert date_rule.max_future_days == 30
        assert date_rule.max_past_years == 3


class TestEligibilityReason:
    """Tests for the reason enumeration metadata."""

    def test_soft_reasons(self):
        """Only the documented reasons are soft."""
        soft = {r for r in EligibilityReason if not r.hard_failure}
        assert soft == {
            EligibilityReason.SERVICE_DATE_IN_FUTURE,
            EligibilityReason.PROVIDER_NOT_IN_NETWORK,
            EligibilityReason.PROVIDER_CONTRACT_EXPIRED,
            EligibilityReason.ELIGIBLE,
            EligibilityReason.ELIGIBLE_WITH_WARNINGS,
        }

    def test_every_reason_has_message(self):
        """Every reason carries an English message and its code."""
        for reason in EligibilityReason:
            assert reason.message_en
            assert reason.code == reason.value
