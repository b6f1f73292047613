"""
Read ports consumed by the decision engine, plus in-memory implementations.
"""

from tpa_engine.repository.protocol import (
    BenefitPolicyRepository,
    ClaimHistoryRepository,
    ClaimTransitionPort,
    LegacyPolicyRepository,
    MedicalServiceRepository,
    MemberRepository,
)
from tpa_engine.repository.memory import (
    InMemoryBenefitPolicyRepository,
    InMemoryClaimHistoryRepository,
    InMemoryLegacyPolicyRepository,
    InMemoryMedicalServiceRepository,
    InMemoryMemberRepository,
    InMemoryTransitionRecorder,
)

__all__ = [
    # Protocols
    "BenefitPolicyRepository",
    "ClaimHistoryRepository",
    "ClaimTransitionPort",
    "LegacyPolicyRepository",
    "MedicalServiceRepository",
    "MemberRepository",
    # In-memory implementations
    "InMemoryBenefitPolicyRepository",
    "InMemoryClaimHistoryRepository",
    "InMemoryLegacyPolicyRepository",
    "InMemoryMedicalServiceRepository",
    "InMemoryMemberRepository",
    "InMemoryTransitionRecorder",
]
