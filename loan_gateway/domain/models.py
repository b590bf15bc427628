"""Domain models - pure Python dataclasses representing business entities"""

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


class ResultCode(str, enum.Enum):
    """Status tag of every response envelope"""

    OK = "OK"
    FAIL = "FAIL"


class AdmissionState(str, enum.Enum):
    """Stages a loan request passes through before it becomes a loan"""

    START = "start"
    COUNTRY_RESOLVED = "country_resolved"
    RATE_CHECKED = "rate_checked"
    BLACKLIST_CHECKED = "blacklist_checked"
    ADMITTED = "admitted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class LoanRequest:
    """Incoming loan application, not persisted as-is"""

    amount: Decimal
    term: int  # months
    first_name: str
    last_name: str
    personal_id: str


@dataclass(frozen=True)
class Loan:
    """Admitted loan"""

    amount: Decimal
    term: int
    first_name: str
    last_name: str
    personal_id: str
    country_code: str

    @classmethod
    def from_request(cls, request: LoanRequest, country_code: str) -> "Loan":
        return cls(
            amount=request.amount,
            term=request.term,
            first_name=request.first_name,
            last_name=request.last_name,
            personal_id=request.personal_id,
            country_code=country_code,
        )


@dataclass(frozen=True)
class LoanApplicationAttempt:
    """Timestamped marker counted by the per-country rate window"""

    country_code: str
    timestamp: datetime


@dataclass(frozen=True)
class BlacklistEntry:
    """Person who must never be granted a loan"""

    personal_id: str


@dataclass(frozen=True)
class LoanSummary:
    """Externally visible projection of a loan"""

    amount: Decimal
    term: int
    personal_id: str
    country_code: str

    @classmethod
    def from_loan(cls, loan: Loan) -> "LoanSummary":
        return cls(
            amount=loan.amount,
            term=loan.term,
            personal_id=loan.personal_id,
            country_code=loan.country_code,
        )


@dataclass(frozen=True)
class LoanResponse:
    """Uniform result envelope: status tag plus string payload"""

    status: ResultCode
    payload: str

    @classmethod
    def ok(cls, payload: str) -> "LoanResponse":
        return cls(status=ResultCode.OK, payload=payload)

    @classmethod
    def fail(cls, payload: str) -> "LoanResponse":
        return cls(status=ResultCode.FAIL, payload=payload)
