"""
Coverage resolution result models.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from tpa_engine.domain.enums import CoverageRuleType


class CoverageRule(BaseModel):
    """The policy rule that applies to a service, with its effective percent."""

    model_config = ConfigDict(frozen=True)

    rule_id: int
    rule_type: CoverageRuleType
    coverage_percent: int
    amount_limit: Optional[Decimal] = None
    times_limit: Optional[int] = None
    waiting_period_days: Optional[int] = None
    requires_pre_approval: bool = False

    service_id: Optional[int] = None
    service_name: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None

    warnings: tuple[str, ...] = ()


class LineCoverage(BaseModel):
    """Coverage outcome for one claim line."""

    model_config = ConfigDict(frozen=True)

    service_id: Optional[int] = None
    service_code: Optional[str] = None
    service_name: Optional[str] = None
    amount: Decimal
    covered: bool
    coverage_percent: int = 0
    covered_amount: Decimal
    patient_amount: Decimal
    rule_id: Optional[int] = None
    rule_type: Optional[CoverageRuleType] = None
    limit_applied: bool = False
    requires_pre_approval: bool = False
    reason: Optional[str] = None


class CoverageBreakdown(BaseModel):
    """Aggregate coverage outcome for a claim."""

    model_config = ConfigDict(frozen=True)

    policy_id: int
    covered: bool
    lines: tuple[LineCoverage, ...] = ()
    total_requested: Decimal = Decimal("0.00")
    total_covered: Decimal = Decimal("0.00")
    total_patient: Decimal = Decimal("0.00")
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
