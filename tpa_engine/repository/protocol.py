"""
Protocol definitions for the read ports the engine consumes.

The engine never talks to storage directly; the host supplies objects that
satisfy these protocols.
"""

from typing import Optional, Protocol, runtime_checkable

from tpa_engine.domain.claims import Claim
from tpa_engine.domain.enums import ClaimStatus
from tpa_engine.domain.member import Member
from tpa_engine.domain.policy import (
    BenefitPolicy,
    BenefitPolicyRule,
    LegacyPolicy,
    MedicalCategory,
    MedicalService,
)


@runtime_checkable
class MemberRepository(Protocol):
    """Member lookup by id."""

    def get_member(self, member_id: int) -> Optional[Member]:
        """Return the member, or None if unknown."""
        ...


@runtime_checkable
class BenefitPolicyRepository(Protocol):
    """Benefit policy and policy rule lookup."""

    def get_policy(self, policy_id: int) -> Optional[BenefitPolicy]:
        """Return the policy, or None if unknown."""
        ...

    def find_active_service_rule(
        self, policy_id: int, service_id: int
    ) -> Optional[BenefitPolicyRule]:
        """Active rule of the policy targeting exactly this service."""
        ...

    def find_active_category_rule(
        self, policy_id: int, category_id: int
    ) -> Optional[BenefitPolicyRule]:
        """Active category-level rule of the policy for this category."""
        ...


@runtime_checkable
class LegacyPolicyRepository(Protocol):
    """Lookup of policies from the older policy table."""

    def get_legacy_policy_for_member(self, member_id: int) -> Optional[LegacyPolicy]:
        ...


@runtime_checkable
class MedicalServiceRepository(Protocol):
    """Medical service and category catalogue lookup."""

    def get_service(self, service_id: int) -> Optional[MedicalService]:
        ...

    def find_by_code(self, code: str) -> Optional[MedicalService]:
        ...

    def get_category(self, category_id: int) -> Optional[MedicalCategory]:
        ...


@runtime_checkable
class ClaimHistoryRepository(Protocol):
    """Historical claims for limit sums; must reflect committed claims only."""

    def find_by_member(self, member_id: int) -> list[Claim]:
        ...


@runtime_checkable
class ClaimTransitionPort(Protocol):
    """The single mutating call: record a claim's new status."""

    def persist_transition(self, claim_id: int, new_status: ClaimStatus) -> None:
        ...
