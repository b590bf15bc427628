"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, Field

from loan_gateway.domain.models import LoanRequest, LoanResponse, ResultCode


class LoanApplicationRequest(BaseModel):
    """Request body for POST /loan/apply"""

    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2, description="Requested loan amount")
    term: int = Field(..., gt=0, description="Loan term in months")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    personal_id: str = Field(..., min_length=1, max_length=64, description="Applicant identity number")

    def to_domain(self) -> LoanRequest:
        return LoanRequest(
            amount=self.amount,
            term=self.term,
            first_name=self.first_name,
            last_name=self.last_name,
            personal_id=self.personal_id,
        )


class LoanResponseSchema(BaseModel):
    """Envelope returned by every /loan endpoint"""

    status: ResultCode
    payload: str

    @classmethod
    def from_domain(cls, response: LoanResponse) -> "LoanResponseSchema":
        return cls(status=response.status, payload=response.payload)
