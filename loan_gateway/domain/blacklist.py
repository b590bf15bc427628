"""Blacklist admission gate"""

from loan_gateway.domain.exceptions import BlacklistedError
from loan_gateway.domain.ports import BlacklistStore


class BlacklistGate:
    """Rejects applicants whose personal id is on the blacklist"""

    def __init__(self, blacklist: BlacklistStore):
        self.blacklist = blacklist

    def check(self, personal_id: str) -> None:
        """Raises BlacklistedError on an exact personal id match"""
        if self.blacklist.find_blacklist_entry(personal_id) is not None:
            raise BlacklistedError(personal_id)
