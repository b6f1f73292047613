"""
Policy and medical catalogue domain models for the TPA decision engine.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tpa_engine.domain.enums import PolicyStatus
from tpa_engine.utils.time_conversion import in_date_range


class BenefitPolicy(BaseModel):
    """Canonical insurance contract assigned to members through their employer."""

    model_config = ConfigDict(frozen=True)

    policy_id: int
    name: Optional[str] = Field(None, max_length=200)
    policy_code: Optional[str] = Field(None, max_length=50)
    status: PolicyStatus = PolicyStatus.ACTIVE
    active: bool = True

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    default_coverage_percent: Optional[int] = Field(80, ge=0, le=100)
    annual_limit: Optional[Decimal] = Field(None, ge=0)
    per_member_limit: Optional[Decimal] = Field(None, ge=0)
    per_family_limit: Optional[Decimal] = Field(None, ge=0)
    default_waiting_period_days: Optional[int] = Field(None, ge=0)

    employer_id: Optional[int] = None

    @model_validator(mode="after")
    def check_period(self) -> "BenefitPolicy":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        return self

    @property
    def is_usable(self) -> bool:
        """Active flag set and status ACTIVE."""
        return self.active and self.status == PolicyStatus.ACTIVE

    def is_effective_on(self, on: date) -> bool:
        """Check whether the policy period covers the given date."""
        if self.start_date is None or self.end_date is None:
            return False
        return in_date_range(on, self.start_date, self.end_date)


class LegacyPolicy(BaseModel):
    """
    Policy record from the older policy table.

    Kept only as a fallback source for the general waiting period while
    members are migrated to benefit policies.
    """

    model_config = ConfigDict(frozen=True)

    policy_id: int
    policy_number: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    general_waiting_period_days: Optional[int] = Field(None, ge=0)


class BenefitPolicyRule(BaseModel):
    """Coverage override for exactly one medical category or one medical service."""

    model_config = ConfigDict(frozen=True)

    rule_id: int
    policy_id: int
    medical_category_id: Optional[int] = None
    medical_service_id: Optional[int] = None

    coverage_percent: Optional[int] = Field(None, ge=0, le=100)
    amount_limit: Optional[Decimal] = Field(None, ge=0)
    times_limit: Optional[int] = Field(None, ge=0)
    waiting_period_days: Optional[int] = Field(None, ge=0)
    requires_pre_approval: bool = False
    active: bool = True

    @model_validator(mode="after")
    def check_target(self) -> "BenefitPolicyRule":
        """A rule targets a category or a service, never both and never neither."""
        has_category = self.medical_category_id is not None
        has_service = self.medical_service_id is not None
        if has_category == has_service:
            raise ValueError(
                "Rule must target exactly one of medical_category_id or medical_service_id"
            )
        return self

    @property
    def is_category_rule(self) -> bool:
        return self.medical_category_id is not None

    @property
    def is_service_rule(self) -> bool:
        return self.medical_service_id is not None

    def effective_coverage_percent(
        self,
        policy: Optional[BenefitPolicy],
        system_default: int = 80,
    ) -> int:
        """Rule percent, else the policy default, else the system default."""
        if self.coverage_percent is not None:
            return self.coverage_percent
        if policy is not None and policy.default_coverage_percent is not None:
            return policy.default_coverage_percent
        return system_default


class MedicalCategory(BaseModel):
    """Grouping of medical services (e.g. dental, optical)."""

    model_config = ConfigDict(frozen=True)

    category_id: int
    code: Optional[str] = None
    name: Optional[str] = None


class MedicalService(BaseModel):
    """Billable medical service from the catalogue."""

    model_config = ConfigDict(frozen=True)

    service_id: int
    code: Optional[str] = None
    name: Optional[str] = None
    category_id: Optional[int] = None
