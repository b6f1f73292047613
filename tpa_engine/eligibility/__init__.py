"""
Eligibility decision engine.

Provides:
- Eligibility rules and the default rule set
- Rule chain evaluator
- Eligibility service wired to the read ports
"""

from tpa_engine.eligibility.rules import (
    EligibilityRule,
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
from tpa_engine.eligibility.evaluator import RuleChainEvaluator
from tpa_engine.eligibility.service import EligibilityService

__all__ = [
    "EligibilityRule",
    "MemberActiveRule",
    "MemberCardValidRule",
    "MemberEnrollmentRule",
    "MemberExistsRule",
    "PolicyActiveRule",
    "PolicyCoveragePeriodRule",
    "PolicyExistsRule",
    "ServiceDateValidRule",
    "WaitingPeriodRule",
    "default_rules",
    "RuleChainEvaluator",
    "EligibilityService",
]
