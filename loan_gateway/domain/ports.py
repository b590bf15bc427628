"""Collaborator interfaces consumed by the admission core.

The domain layer only talks to storage and to the country lookup service
through these abstract classes. SQLAlchemy repositories and the HTTP GeoIP
client implement them in production; tests swap in in-memory fakes.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from loan_gateway.domain.models import BlacklistEntry, Loan


class LoanStore(ABC):
    """Write-once store of admitted loans"""

    @abstractmethod
    def save_loan(self, loan: Loan) -> None:
        """Persist an admitted loan.

        Raises:
            StorageError: If the record could not be written
        """

    @abstractmethod
    def find_all_loans(self) -> List[Loan]:
        """Return every stored loan in insertion order"""

    @abstractmethod
    def find_loans_by_last_name(self, last_name: str) -> List[Loan]:
        """Return loans whose last name matches exactly"""


class AttemptStore(ABC):
    """Append-only log of loan application attempts per country"""

    @abstractmethod
    def save_attempt(self, country_code: str, timestamp: datetime) -> None:
        """Durably record one attempt.

        The record must be visible to other sessions once this returns,
        otherwise concurrent counts for the same country under-count.
        """

    @abstractmethod
    def count_attempts_from(self, country_code: str, timestamp: datetime) -> int:
        """Count attempts for a country at or after ``timestamp``"""


class BlacklistStore(ABC):
    """Read-only view of the blacklist"""

    @abstractmethod
    def find_blacklist_entry(self, personal_id: str) -> Optional[BlacklistEntry]:
        """Exact-match lookup, None when the person is not blacklisted"""


class CountryLookup(ABC):
    """External service mapping a network address to a country code"""

    @abstractmethod
    async def lookup_country(self, address: str) -> str:
        """
        Resolve the country of an IP address.

        Raises:
            CountryLookupError: On timeout, transport errors, or unusable response
        """
