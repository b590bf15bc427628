"""GeoIP HTTP client for resolving a client address to a country code"""

import ipaddress
import httpx
from loan_gateway.domain.exceptions import CountryLookupError
from loan_gateway.domain.ports import CountryLookup
from loan_gateway.config import settings
from loan_gateway.infrastructure.observability.metrics import country_lookup_latency_histogram


class GeoIPClient(CountryLookup):
    """Client for an ip-api.com compatible JSON lookup service"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.geoip_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def lookup_country(self, address: str) -> str:
        """
        Fetch the country code of an IP address.

        Expected response: {"status": "success", "countryCode": "LV"}

        Raises:
            CountryLookupError: On a malformed address, timeout, HTTP errors, failed lookup, or invalid response
        """
        try:
            ip = ipaddress.ip_address(address)
        except ValueError as e:
            raise CountryLookupError(f"Not an IP address: {address!r}") from e

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with country_lookup_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}/json/{ip}",
                        params={"fields": "status,message,countryCode"},
                    )
                response.raise_for_status()
                data = response.json()

                if data.get("status") != "success":
                    raise CountryLookupError(f"Lookup failed for {address}: {data.get('message', 'unknown')}")
                country_code = data["countryCode"]
                if not isinstance(country_code, str):
                    raise CountryLookupError(f"Invalid GeoIP response: countryCode is {type(country_code).__name__}")
                return country_code

            except httpx.TimeoutException as e:
                raise CountryLookupError(f"GeoIP timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise CountryLookupError(f"GeoIP error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise CountryLookupError(f"GeoIP unreachable: {e}") from e
            except httpx.InvalidURL as e:
                raise CountryLookupError(f"Invalid GeoIP request URL: {e}") from e
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                raise CountryLookupError(f"Invalid GeoIP response: {e}") from e
