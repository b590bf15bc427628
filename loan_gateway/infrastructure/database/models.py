"""SQLAlchemy ORM models for loans, application attempts and the blacklist"""

from sqlalchemy import Column, String, Integer, Numeric, DateTime, Index, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LoanRecord(Base):
    """Admitted loan"""

    __tablename__ = "loan"

    id = Column(Integer, primary_key=True, autoincrement=True)
    amount = Column(Numeric(14, 2), nullable=False)
    term = Column(Integer, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False, index=True)
    personal_id = Column(String(64), nullable=False, index=True)
    country_code = Column(String(8), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


class LoanApplicationRecord(Base):
    """One loan application attempt, counted by the per-country rate window"""

    __tablename__ = "loan_application"
    __table_args__ = (Index("ix_loan_application_country_created", "country_code", "created_at"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    country_code = Column(String(8), nullable=False)
    created_at = Column(DateTime, nullable=False)  # naive UTC


class BlacklistRecord(Base):
    """Blacklisted person, maintained outside this service"""

    __tablename__ = "blacklist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    personal_id = Column(String(64), nullable=False, unique=True)
