"""Data access layer for loan intake entities"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from loan_gateway.infrastructure.database.models import LoanRecord, LoanApplicationRecord, BlacklistRecord
from loan_gateway.domain.exceptions import StorageError
from loan_gateway.domain.models import BlacklistEntry, Loan
from loan_gateway.domain.ports import AttemptStore, BlacklistStore, LoanStore


def _to_loan(record: LoanRecord) -> Loan:
    return Loan(
        amount=record.amount,
        term=record.term,
        first_name=record.first_name,
        last_name=record.last_name,
        personal_id=record.personal_id,
        country_code=record.country_code,
    )


class LoanRepository(LoanStore):
    """Repository for admitted loans"""

    def __init__(self, db: Session):
        self.db = db

    def save_loan(self, loan: Loan) -> None:
        """Persist and commit an admitted loan"""
        try:
            self.db.add(
                LoanRecord(
                    amount=loan.amount,
                    term=loan.term,
                    first_name=loan.first_name,
                    last_name=loan.last_name,
                    personal_id=loan.personal_id,
                    country_code=loan.country_code,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to save loan") from e

    def find_all_loans(self) -> List[Loan]:
        """Fetch every loan in insertion order"""
        try:
            records = self.db.query(LoanRecord).order_by(LoanRecord.id).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to load loans") from e
        return [_to_loan(r) for r in records]

    def find_loans_by_last_name(self, last_name: str) -> List[Loan]:
        """Fetch loans by exact last name"""
        try:
            records = (
                self.db.query(LoanRecord)
                .filter(LoanRecord.last_name == last_name)
                .order_by(LoanRecord.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to load loans") from e
        return [_to_loan(r) for r in records]


class LoanApplicationRepository(AttemptStore):
    """Repository for loan application attempts"""

    def __init__(self, db: Session):
        self.db = db

    def save_attempt(self, country_code: str, timestamp: datetime) -> None:
        """Append an attempt and commit it right away.

        Attempts outlive the request: a later rejection must not roll them back,
        and concurrent sessions counting the same country must see them.
        """
        try:
            self.db.add(LoanApplicationRecord(country_code=country_code, created_at=timestamp))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to record loan application") from e

    def count_attempts_from(self, country_code: str, timestamp: datetime) -> int:
        """Count attempts for a country at or after timestamp"""
        try:
            return (
                self.db.query(func.count(LoanApplicationRecord.id))
                .filter(
                    LoanApplicationRecord.country_code == country_code,
                    LoanApplicationRecord.created_at >= timestamp,
                )
                .scalar()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to count loan applications") from e


class BlacklistRepository(BlacklistStore):
    """Read-only access to the blacklist"""

    def __init__(self, db: Session):
        self.db = db

    def find_blacklist_entry(self, personal_id: str) -> Optional[BlacklistEntry]:
        try:
            record = (
                self.db.query(BlacklistRecord)
                .filter(BlacklistRecord.personal_id == personal_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("Failed to check blacklist") from e
        return BlacklistEntry(personal_id=record.personal_id) if record else None
