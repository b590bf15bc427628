"""Country resolution from the request's origin address"""

import logging
from typing import Optional

from loan_gateway.domain.exceptions import AddressUnavailableError, CountryLookupError
from loan_gateway.domain.ports import CountryLookup
from loan_gateway.infrastructure.observability.metrics import country_lookup_fallback_counter

logger = logging.getLogger(__name__)


def extract_origin_address(forwarded_for: Optional[str], remote_addr: Optional[str]) -> Optional[str]:
    """
    Pick the client address for a request.

    The X-Forwarded-For header takes precedence over the direct connection
    address. For a proxy chain ("client, proxy1, proxy2") the left-most entry
    is the originating client. Blank values count as absent.
    """
    if forwarded_for and forwarded_for.strip():
        client = forwarded_for.split(",")[0].strip()
        if client:
            return client
    if remote_addr and remote_addr.strip():
        return remote_addr.strip()
    return None


class CountryResolver:
    """Best-effort country resolution with a fixed fallback code"""

    def __init__(self, lookup: CountryLookup, default_country_code: str):
        self.lookup = lookup
        self.default_country_code = default_country_code

    async def resolve(self, origin_address: Optional[str]) -> str:
        """
        Resolve the country code for an origin address.

        Lookup failures and blank or non-string answers never propagate: the
        configured default country code is returned instead.

        Codes from the lookup are stripped and lower-cased, so a service
        answer of "LV" is stored as "lv" and shares the default code's rate
        window. The stored code therefore differs in case from the raw
        lookup answer.

        Raises:
            AddressUnavailableError: When no address is available at all
        """
        if origin_address is None or not origin_address.strip():
            raise AddressUnavailableError()

        try:
            country_code = await self.lookup.lookup_country(origin_address)
        except CountryLookupError as e:
            logger.error(f"Getting country error for ip: {origin_address!r}", extra={"error": str(e)})
            country_lookup_fallback_counter.labels(reason="lookup_error").inc()
            return self.default_country_code
        except Exception:
            # Any lookup failure falls back to the default code
            logger.exception(f"Unexpected country lookup error for ip: {origin_address!r}")
            country_lookup_fallback_counter.labels(reason="unexpected_error").inc()
            return self.default_country_code

        if not isinstance(country_code, str) or not country_code.strip():
            logger.warning(f"Unusable country code {country_code!r} for ip: {origin_address!r}")
            country_lookup_fallback_counter.labels(reason="empty_code").inc()
            return self.default_country_code

        return country_code.strip().lower()
