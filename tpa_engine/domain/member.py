"""
Member domain model for the TPA decision engine.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tpa_engine.domain.enums import CardStatus, MemberStatus


class Member(BaseModel):
    """
    Insured member as seen by the decision engine.

    Only the fields the eligibility rules and coverage validation read are
    modelled; relationships are held as ids.
    """

    model_config = ConfigDict(frozen=True)

    member_id: int
    full_name: Optional[str] = Field(None, max_length=200)
    status: Optional[MemberStatus] = MemberStatus.ACTIVE

    # Card
    card_number: Optional[str] = Field(None, max_length=50)
    card_status: Optional[CardStatus] = None
    blocked_reason: Optional[str] = None

    # Enrollment
    start_date: Optional[date] = None
    join_date: Optional[date] = None

    # References
    employer_id: Optional[int] = None
    benefit_policy_id: Optional[int] = None

    @property
    def enrollment_date(self) -> Optional[date]:
        """Coverage start date, falling back to the join date."""
        return self.start_date or self.join_date
