"""
Domain models for the TPA decision engine.
"""

from tpa_engine.domain.enums import (
    ActorRole,
    CardStatus,
    ClaimStatus,
    CoverageRuleType,
    EligibilityReason,
    MemberStatus,
    PolicyStatus,
    RuleOutcome,
    VerdictStatus,
)
from tpa_engine.domain.member import Member
from tpa_engine.domain.policy import (
    BenefitPolicy,
    BenefitPolicyRule,
    LegacyPolicy,
    MedicalCategory,
    MedicalService,
)
from tpa_engine.domain.claims import Claim, ClaimLine
from tpa_engine.domain.eligibility import (
    EligibilityContext,
    EligibilityVerdict,
    ReasonDetail,
    RuleResult,
)
from tpa_engine.domain.coverage import CoverageBreakdown, CoverageRule, LineCoverage

__all__ = [
    # Enums
    "ActorRole",
    "CardStatus",
    "ClaimStatus",
    "CoverageRuleType",
    "EligibilityReason",
    "MemberStatus",
    "PolicyStatus",
    "RuleOutcome",
    "VerdictStatus",
    # Member
    "Member",
    # Policy
    "BenefitPolicy",
    "BenefitPolicyRule",
    "LegacyPolicy",
    "MedicalCategory",
    "MedicalService",
    # Claims
    "Claim",
    "ClaimLine",
    # Eligibility
    "EligibilityContext",
    "EligibilityVerdict",
    "ReasonDetail",
    "RuleResult",
    # Coverage
    "CoverageBreakdown",
    "CoverageRule",
    "LineCoverage",
]
