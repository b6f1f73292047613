"""
Shared test fixtures for TPA decision engine tests.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from tpa_engine.config.models import CoverageConfig, EngineConfig
from tpa_engine.coverage.resolver import CoverageResolver
from tpa_engine.domain.claims import Claim, ClaimLine
from tpa_engine.domain.eligibility import EligibilityContext
from tpa_engine.domain.enums import CardStatus, ClaimStatus, MemberStatus, PolicyStatus
from tpa_engine.domain.member import Member
from tpa_engine.domain.policy import (
    BenefitPolicy,
    BenefitPolicyRule,
    MedicalCategory,
    MedicalService,
)
from tpa_engine.repository.memory import (
    InMemoryBenefitPolicyRepository,
    InMemoryClaimHistoryRepository,
    InMemoryMedicalServiceRepository,
    InMemoryMemberRepository,
    InMemoryTransitionRecorder,
)


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def check_time() -> datetime:
    """Fixed 'now' for eligibility checks."""
    return datetime(2024, 6, 15, 10, 30)


@pytest.fixture
def today(check_time: datetime) -> date:
    return check_time.date()


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def coverage_config() -> CoverageConfig:
    return CoverageConfig()


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def policy() -> BenefitPolicy:
    """Active 2024 benefit policy with limits."""
    return BenefitPolicy(
        policy_id=1,
        name="Gold Corporate",
        policy_code="GOLD-2024",
        status=PolicyStatus.ACTIVE,
        active=True,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        default_coverage_percent=80,
        annual_limit=Decimal("10000.00"),
        per_member_limit=Decimal("50000.00"),
        employer_id=500,
    )


@pytest.fixture
def member() -> Member:
    """Active member enrolled in the test policy."""
    return Member(
        member_id=100,
        full_name="Test Member",
        status=MemberStatus.ACTIVE,
        card_number="CARD-100",
        card_status=CardStatus.ACTIVE,
        start_date=date(2024, 1, 1),
        employer_id=500,
        benefit_policy_id=1,
    )


@pytest.fixture
def categories() -> list[MedicalCategory]:
    return [
        MedicalCategory(category_id=10, code="GEN", name="General Practice"),
        MedicalCategory(category_id=20, code="IMG", name="Imaging"),
        MedicalCategory(category_id=30, code="OPT", name="Optical"),
    ]


@pytest.fixture
def services() -> list[MedicalService]:
    """
    Service catalogue.

    - 7 Consultation: own service rule
    - 8 Blood test: only its category (General Practice) has a rule
    - 9 MRI scan: service rule requiring pre-approval with a waiting period
    - 11 Eye test: Optical category, no rule at all
    """
    return [
        MedicalService(service_id=7, code="CONS", name="Consultation", category_id=10),
        MedicalService(service_id=8, code="BLOOD", name="Blood test", category_id=10),
        MedicalService(service_id=9, code="MRI", name="MRI scan", category_id=20),
        MedicalService(service_id=11, code="EYE", name="Eye test", category_id=30),
    ]


@pytest.fixture
def policy_rules() -> list[BenefitPolicyRule]:
    return [
        BenefitPolicyRule(
            rule_id=1,
            policy_id=1,
            medical_service_id=7,
            coverage_percent=80,
            amount_limit=Decimal("500.00"),
        ),
        BenefitPolicyRule(
            rule_id=2,
            policy_id=1,
            medical_category_id=10,
            coverage_percent=70,
        ),
        BenefitPolicyRule(
            rule_id=3,
            policy_id=1,
            medical_service_id=9,
            coverage_percent=90,
            requires_pre_approval=True,
            waiting_period_days=90,
        ),
    ]


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def member_repo(member: Member) -> InMemoryMemberRepository:
    return InMemoryMemberRepository([member])


@pytest.fixture
def policy_repo(
    policy: BenefitPolicy, policy_rules: list[BenefitPolicyRule]
) -> InMemoryBenefitPolicyRepository:
    return InMemoryBenefitPolicyRepository([policy], policy_rules)


@pytest.fixture
def service_repo(
    services: list[MedicalService], categories: list[MedicalCategory]
) -> InMemoryMedicalServiceRepository:
    return InMemoryMedicalServiceRepository(services, categories)


@pytest.fixture
def claim_history() -> InMemoryClaimHistoryRepository:
    """Empty claim history; tests add committed claims as needed."""
    return InMemoryClaimHistoryRepository()


@pytest.fixture
def transition_recorder() -> InMemoryTransitionRecorder:
    return InMemoryTransitionRecorder()


@pytest.fixture
def resolver(
    policy_repo: InMemoryBenefitPolicyRepository,
    service_repo: InMemoryMedicalServiceRepository,
    claim_history: InMemoryClaimHistoryRepository,
) -> CoverageResolver:
    """Coverage resolver wired to the in-memory repositories."""
    return CoverageResolver(policy_repo, service_repo, claim_history)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_context(member: Member, policy: BenefitPolicy, check_time: datetime):
    """Build an eligibility context, overriding any field by keyword."""

    def _make(**overrides) -> EligibilityContext:
        values = {
            "member_id": member.member_id,
            "member": member,
            "benefit_policy": policy,
            "service_date": date(2024, 6, 1),
            "request_id": "req-test",
            "check_timestamp": check_time,
        }
        values.update(overrides)
        return EligibilityContext(**values)

    return _make


@pytest.fixture
def make_claim():
    """Build a claim, overriding any field by keyword."""

    def _make(**overrides) -> Claim:
        values = {
            "claim_id": 1,
            "member_id": 100,
            "status": ClaimStatus.DRAFT,
            "requested_amount": Decimal("1000.00"),
            "visit_date": date(2024, 6, 1),
            "lines": (ClaimLine(service_id=7, amount=Decimal("1000.00")),),
        }
        values.update(overrides)
        return Claim(**values)

    return _make
