"""Admission control - core business logic for loan intake"""

import asyncio
import json
import logging
import time
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from loan_gateway.domain.blacklist import BlacklistGate
from loan_gateway.domain.country import CountryResolver
from loan_gateway.domain.exceptions import AdmissionRejected, StorageError
from loan_gateway.domain.models import AdmissionState, Loan, LoanRequest, LoanResponse, LoanSummary
from loan_gateway.domain.ports import LoanStore
from loan_gateway.domain.rate_window import RateWindowLimiter
from loan_gateway.infrastructure.observability.logging import log_admission
from loan_gateway.infrastructure.observability.metrics import record_admission
from loan_gateway.utils.date_utils import utc_now

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def loans_to_json(loans: Iterable[Loan]) -> str:
    """Serialize loans as a JSON array of their external summaries"""
    summaries = [asdict(LoanSummary.from_loan(loan)) for loan in loans]
    return json.dumps(summaries, default=_json_default)


class AdmissionController:
    """
    Runs a loan request through the admission pipeline.

    Flow:
    1. Resolve the country from the origin address
    2. Record the attempt and check the country's rate window
    3. Check the blacklist
    4. Persist the loan

    Every failure is turned into a FAIL envelope here; nothing raised by the
    pipeline reaches the transport layer. The attempt recorded in step 2 is
    kept even when a later step rejects the request.

    Steps 2-4 block on storage, so they run in the default executor. This
    keeps the event loop free and lets the per-country lock in the limiter
    serialize concurrent requests.
    """

    def __init__(
        self,
        resolver: CountryResolver,
        limiter: RateWindowLimiter,
        gate: BlacklistGate,
        loans: LoanStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.resolver = resolver
        self.limiter = limiter
        self.gate = gate
        self.loans = loans
        self.clock = clock

    async def apply_for_loan(
        self,
        request: LoanRequest,
        origin_address: Optional[str],
        request_id: str = "unknown",
    ) -> LoanResponse:
        """Admit or reject a loan request; returns the personal id on success"""
        start_time = time.time()
        state = AdmissionState.START
        country_code = None
        loop = asyncio.get_running_loop()

        try:
            country_code = await self.resolver.resolve(origin_address)
            state = AdmissionState.COUNTRY_RESOLVED

            await loop.run_in_executor(None, self.limiter.admit, country_code, self.clock())
            state = AdmissionState.RATE_CHECKED

            await loop.run_in_executor(None, self.gate.check, request.personal_id)
            state = AdmissionState.BLACKLIST_CHECKED

            loan = Loan.from_request(request, country_code)
            await loop.run_in_executor(None, self.loans.save_loan, loan)
            state = AdmissionState.ADMITTED
            response = LoanResponse.ok(loan.personal_id)
            outcome = "admitted"

        except AdmissionRejected as e:
            last_state, state = state, AdmissionState.REJECTED
            logger.warning(
                f"Loan request rejected: {e}",
                extra={"request_id": request_id, "state": state.value, "last_state": last_state.value},
            )
            response = LoanResponse.fail(str(e))
            outcome = e.reason

        except StorageError as e:
            last_state, state = state, AdmissionState.REJECTED
            logger.error(
                f"Storage error: {e}",
                extra={"request_id": request_id, "state": state.value, "last_state": last_state.value},
            )
            response = LoanResponse.fail(str(e))
            outcome = "storage_error"

        except Exception as e:
            last_state, state = state, AdmissionState.REJECTED
            logger.exception(
                f"Unexpected error: {e}",
                extra={"request_id": request_id, "state": state.value, "last_state": last_state.value},
            )
            response = LoanResponse.fail(INTERNAL_ERROR_MESSAGE)
            outcome = "error"

        duration_ms = (time.time() - start_time) * 1000
        record_admission(outcome)
        log_admission(request_id, request.personal_id, country_code, outcome, duration_ms)
        return response

    def list_all(self) -> LoanResponse:
        """Every stored loan as a JSON array of summaries"""
        return self._list(self.loans.find_all_loans)

    def list_by_last_name(self, last_name: str) -> LoanResponse:
        """Loans whose last name matches exactly"""
        return self._list(lambda: self.loans.find_loans_by_last_name(last_name))

    def _list(self, query: Callable[[], Iterable[Loan]]) -> LoanResponse:
        try:
            return LoanResponse.ok(loans_to_json(query()))
        except StorageError as e:
            logger.error(f"Storage error: {e}")
            return LoanResponse.fail(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error: {e}")
            return LoanResponse.fail(INTERNAL_ERROR_MESSAGE)
