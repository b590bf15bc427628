"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AdmissionRejected(DomainException):
    """Loan request did not pass one of the admission gates"""

    reason = "rejected"


class AddressUnavailableError(AdmissionRejected):
    """Neither a forwarded nor a direct client address is available"""

    reason = "address_unavailable"

    def __init__(self, message: str = "Unknown IP address"):
        super().__init__(message)


class RateExceededError(AdmissionRejected):
    """Too many loan applications from one country inside the window"""

    reason = "rate_exceeded"

    def __init__(self, country_code: str):
        self.country_code = country_code
        super().__init__(f"Loan application limit is exceeded for the country ({country_code})")


class BlacklistedError(AdmissionRejected):
    """Applicant's personal id is on the blacklist"""

    reason = "blacklisted"

    def __init__(self, personal_id: str):
        self.personal_id = personal_id
        super().__init__(f"Person ({personal_id}) is in blacklist!")


class CountryLookupError(DomainException):
    """Country lookup service failed or returned unusable data"""

    pass


class StorageError(DomainException):
    """Record store rejected a read or write"""

    pass
