"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from loan_gateway.config import settings
from loan_gateway.domain.admission import AdmissionController
from loan_gateway.domain.blacklist import BlacklistGate
from loan_gateway.domain.country import CountryResolver, extract_origin_address
from loan_gateway.domain.rate_window import RateWindowLimiter
from loan_gateway.infrastructure.clients.geoip import GeoIPClient
from loan_gateway.infrastructure.database.repositories import (
    BlacklistRepository,
    LoanApplicationRepository,
    LoanRepository,
)
from loan_gateway.infrastructure.database.session import get_db
from loan_gateway.utils.date_utils import millis

FORWARDED_FOR_HEADER = "X-Forwarded-For"


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_origin_address(request: Request) -> Optional[str]:
    """Client address: forwarding header first, then the socket peer"""
    remote_addr = request.client.host if request.client else None
    return extract_origin_address(request.headers.get(FORWARDED_FOR_HEADER), remote_addr)


def get_geoip_client() -> GeoIPClient:
    """Provide GeoIP lookup client instance"""
    return GeoIPClient()


def get_admission_controller(
    db: Session = Depends(get_db),
    geoip_client: GeoIPClient = Depends(get_geoip_client),
) -> AdmissionController:
    """Wire the admission pipeline to this request's database session"""
    return AdmissionController(
        resolver=CountryResolver(geoip_client, settings.default_country_code),
        limiter=RateWindowLimiter(
            LoanApplicationRepository(db),
            window=millis(settings.application_period_ms),
            count_limit=settings.country_count_limit,
        ),
        gate=BlacklistGate(BlacklistRepository(db)),
        loans=LoanRepository(db),
    )
