"""Account domain entity"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AccountEntity:
    """Registered account

    The password is kept verbatim; accounts are never mutated after
    registration.
    """

    username: str
    password: str
    cell_number: str

    def matches_credentials(self, username: str, password: str) -> bool:
        """Check a login attempt against this account"""
        return self.username == username and self.password == password
