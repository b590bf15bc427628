"""Pytest fixtures for testing"""

import os

# Must be set before loan_gateway.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from datetime import datetime
from typing import Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from loan_gateway.api.main import create_app
from loan_gateway.api.dependencies import get_geoip_client
from loan_gateway.domain.exceptions import CountryLookupError
from loan_gateway.domain.models import BlacklistEntry, Loan, LoanApplicationAttempt
from loan_gateway.domain.ports import AttemptStore, BlacklistStore, CountryLookup, LoanStore
from loan_gateway.infrastructure.database.models import Base
from loan_gateway.infrastructure.database.session import SessionLocal, engine, get_db


class InMemoryAttemptStore(AttemptStore):
    def __init__(self):
        self.attempts: List[LoanApplicationAttempt] = []

    def save_attempt(self, country_code: str, timestamp: datetime) -> None:
        self.attempts.append(LoanApplicationAttempt(country_code=country_code, timestamp=timestamp))

    def count_attempts_from(self, country_code: str, timestamp: datetime) -> int:
        return sum(1 for a in self.attempts if a.country_code == country_code and a.timestamp >= timestamp)


class InMemoryBlacklistStore(BlacklistStore):
    def __init__(self):
        self.personal_ids = set()

    def find_blacklist_entry(self, personal_id: str) -> Optional[BlacklistEntry]:
        if personal_id in self.personal_ids:
            return BlacklistEntry(personal_id=personal_id)
        return None


class InMemoryLoanStore(LoanStore):
    def __init__(self):
        self.loans: List[Loan] = []

    def save_loan(self, loan: Loan) -> None:
        self.loans.append(loan)

    def find_all_loans(self) -> List[Loan]:
        return list(self.loans)

    def find_loans_by_last_name(self, last_name: str) -> List[Loan]:
        return [loan for loan in self.loans if loan.last_name == last_name]


class StubCountryLookup(CountryLookup):
    """Returns a fixed country code, or raises when ``error`` is set"""

    def __init__(self, country_code: Optional[str] = "LV"):
        self.country_code = country_code
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    async def lookup_country(self, address: str) -> str:
        self.calls.append(address)
        if self.error is not None:
            raise self.error
        return self.country_code


@pytest.fixture
def attempt_store() -> InMemoryAttemptStore:
    return InMemoryAttemptStore()


@pytest.fixture
def blacklist_store() -> InMemoryBlacklistStore:
    return InMemoryBlacklistStore()


@pytest.fixture
def loan_store() -> InMemoryLoanStore:
    return InMemoryLoanStore()


@pytest.fixture
def country_lookup() -> StubCountryLookup:
    return StubCountryLookup()


@pytest.fixture
def failing_lookup() -> StubCountryLookup:
    lookup = StubCountryLookup()
    lookup.error = CountryLookupError("GeoIP timeout after 3.0s")
    return lookup


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, country_lookup: StubCountryLookup) -> TestClient:
    """Create FastAPI test client with test database and a stubbed GeoIP service"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_geoip_client] = lambda: country_lookup
    return TestClient(app)
