"""Authentication use cases"""

import logging

from quickchat.core.exceptions import InvalidCredentialsError
from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.domain.validators import (
    ensure_valid_cell_number,
    ensure_valid_password,
    ensure_valid_username,
)

logger = logging.getLogger(__name__)


class RegisterAccountUseCase:
    """Use case for account registration"""

    def __init__(self, record_store: RecordStoreInterface):
        self.record_store = record_store

    def execute(self, username: str, password: str, cell_number: str) -> AccountEntity:
        """Register a new account"""
        # Validate account data
        ensure_valid_username(username)
        ensure_valid_password(password)
        ensure_valid_cell_number(cell_number)

        account = AccountEntity(username=username, password=password, cell_number=cell_number)

        # Store rejects duplicate usernames
        self.record_store.insert_account(account)
        logger.info(f"Registered account {username}")
        return account


class LoginAccountUseCase:
    """Use case for account login"""

    def __init__(self, record_store: RecordStoreInterface):
        self.record_store = record_store

    def execute(self, username: str, password: str) -> AccountEntity:
        """Authenticate and return the matching account"""
        account = self.record_store.find_account(username)
        if account is None or not account.matches_credentials(username, password):
            logger.info(f"Failed login attempt for {username!r}")
            raise InvalidCredentialsError()

        return account
