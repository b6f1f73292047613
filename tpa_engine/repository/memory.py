"""
In-memory port implementations for testing and embedding hosts.
"""

from typing import Iterable, Optional

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


class InMemoryMemberRepository:
    """Members keyed by id."""

    def __init__(self, members: Iterable[Member] = ()) -> None:
        self._members: dict[int, Member] = {m.member_id: m for m in members}

    def get_member(self, member_id: int) -> Optional[Member]:
        return self._members.get(member_id)

    def add(self, member: Member) -> None:
        self._members[member.member_id] = member


class InMemoryBenefitPolicyRepository:
    """Benefit policies and their rules."""

    def __init__(
        self,
        policies: Iterable[BenefitPolicy] = (),
        rules: Iterable[BenefitPolicyRule] = (),
    ) -> None:
        self._policies: dict[int, BenefitPolicy] = {p.policy_id: p for p in policies}
        self._rules: list[BenefitPolicyRule] = list(rules)

    def get_policy(self, policy_id: int) -> Optional[BenefitPolicy]:
        return self._policies.get(policy_id)

    def find_active_service_rule(
        self, policy_id: int, service_id: int
    ) -> Optional[BenefitPolicyRule]:
        for rule in self._rules:
            if (
                rule.active
                and rule.policy_id == policy_id
                and rule.medical_service_id == service_id
            ):
                return rule
        return None

    def find_active_category_rule(
        self, policy_id: int, category_id: int
    ) -> Optional[BenefitPolicyRule]:
        for rule in self._rules:
            if (
                rule.active
                and rule.policy_id == policy_id
                and rule.medical_service_id is None
                and rule.medical_category_id == category_id
            ):
                return rule
        return None

    def add_policy(self, policy: BenefitPolicy) -> None:
        self._policies[policy.policy_id] = policy

    def add_rule(self, rule: BenefitPolicyRule) -> None:
        self._rules.append(rule)


class InMemoryLegacyPolicyRepository:
    """Legacy policies keyed by member id."""

    def __init__(self, policies_by_member: Optional[dict[int, LegacyPolicy]] = None) -> None:
        self._by_member: dict[int, LegacyPolicy] = dict(policies_by_member or {})

    def get_legacy_policy_for_member(self, member_id: int) -> Optional[LegacyPolicy]:
        return self._by_member.get(member_id)


class InMemoryMedicalServiceRepository:
    """Medical services and categories."""

    def __init__(
        self,
        services: Iterable[MedicalService] = (),
        categories: Iterable[MedicalCategory] = (),
    ) -> None:
        self._services: dict[int, MedicalService] = {s.service_id: s for s in services}
        self._categories: dict[int, MedicalCategory] = {
            c.category_id: c for c in categories
        }

    def get_service(self, service_id: int) -> Optional[MedicalService]:
        return self._services.get(service_id)

    def find_by_code(self, code: str) -> Optional[MedicalService]:
        for service in self._services.values():
            if service.code == code:
                return service
        return None

    def get_category(self, category_id: int) -> Optional[MedicalCategory]:
        return self._categories.get(category_id)


class InMemoryClaimHistoryRepository:
    """Committed claims grouped by member."""

    def __init__(self, claims: Iterable[Claim] = ()) -> None:
        self._claims: list[Claim] = list(claims)

    def find_by_member(self, member_id: int) -> list[Claim]:
        return [c for c in self._claims if c.member_id == member_id]

    def add(self, claim: Claim) -> None:
        self._claims.append(claim)


class InMemoryTransitionRecorder:
    """
    Records persisted transitions for inspection.

    NOT thread-safe; intended for single-threaded test use.
    """

    def __init__(self) -> None:
        self._transitions: list[tuple[int, ClaimStatus]] = []

    def persist_transition(self, claim_id: int, new_status: ClaimStatus) -> None:
        self._transitions.append((claim_id, new_status))

    # ---- Test helpers ----

    @property
    def transitions(self) -> list[tuple[int, ClaimStatus]]:
        """All recorded (claim_id, new_status) pairs."""
        return list(self._transitions)

    def clear(self) -> None:
        self._transitions.clear()
