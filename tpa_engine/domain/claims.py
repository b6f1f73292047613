"""
Claim domain models for the TPA decision engine.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tpa_engine.domain.enums import ClaimStatus


class ClaimLine(BaseModel):
    """One billed service on a claim."""

    model_config = ConfigDict(frozen=True)

    service_id: Optional[int] = None
    service_code: Optional[str] = None
    description: Optional[str] = None
    amount: Decimal = Field(..., ge=0)


class Claim(BaseModel):
    """
    Claim as handled by the lifecycle state machine and limit validation.

    Instances are immutable; transitions return an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    claim_id: int
    member_id: int
    status: ClaimStatus = ClaimStatus.DRAFT
    requested_amount: Decimal = Decimal("0")
    approved_amount: Optional[Decimal] = None
    visit_date: Optional[date] = None
    lines: tuple[ClaimLine, ...] = ()

    # Review
    reviewer_comment: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    updated_by: Optional[str] = None
