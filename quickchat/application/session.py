"""Interactive session workflow"""

import logging
from typing import List, Optional

from quickchat.application.use_cases.auth_use_cases import (
    LoginAccountUseCase,
    RegisterAccountUseCase,
)
from quickchat.application.use_cases.message_use_cases import (
    ComposeMessageUseCase,
    ListMessagesUseCase,
    StoreMessageUseCase,
)
from quickchat.core.exceptions import NotAuthenticatedError, StoreWriteError
from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.domain.services.fingerprint_generator import FingerprintGenerator

logger = logging.getLogger(__name__)


class ChatSession:
    """One user's register/login/send/view workflow over a record store

    ``sent_count`` counts messages sent through this session object and is
    never persisted. Records that fail to save are kept in
    ``unsaved_records`` and retried before the next send and on close.
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        generator: FingerprintGenerator,
        unique_message_ids: bool = False,
    ) -> None:
        self.store = store
        self.generator = generator
        self.unique_message_ids = unique_message_ids
        self.current_account: Optional[AccountEntity] = None
        self.sent_count = 0
        self.unsaved_records: List[DispatchRecordEntity] = []

    @property
    def is_authenticated(self) -> bool:
        return self.current_account is not None

    def register(self, username: str, password: str, cell_number: str) -> AccountEntity:
        """Register a new account; does not log it in"""
        return RegisterAccountUseCase(self.store).execute(username, password, cell_number)

    def login(self, username: str, password: str) -> AccountEntity:
        """Log in and remember the account for this session"""
        account = LoginAccountUseCase(self.store).execute(username, password)
        self.current_account = account
        logger.info(f"{account.username} logged in")
        return account

    def logout(self) -> None:
        if self.current_account is not None:
            logger.info(f"{self.current_account.username} logged out")
        self.current_account = None

    def send_message(self, recipient: str, body: str) -> DispatchRecordEntity:
        """Create and store one message

        Raises ``StoreWriteError`` with the record in ``pending`` if it was
        sent but could not be saved.
        """
        if not self.is_authenticated:
            raise NotAuthenticatedError()

        try:
            self.flush()
        except StoreWriteError as e:
            logger.warning(f"{len(self.unsaved_records)} message(s) still unsaved: {e}")

        record = ComposeMessageUseCase(
            self.store, self.generator, unique_message_ids=self.unique_message_ids
        ).execute(recipient, body, unsaved_ids=[r.message_id for r in self.unsaved_records])
        self.sent_count += 1

        try:
            StoreMessageUseCase(self.store).execute(record)
        except StoreWriteError as e:
            self.unsaved_records.append(record)
            raise StoreWriteError(e.message, pending=[record]) from e

        return record

    def list_messages(self) -> List[DispatchRecordEntity]:
        """Stored messages followed by any not yet saved"""
        if not self.is_authenticated:
            raise NotAuthenticatedError()

        return ListMessagesUseCase(self.store).execute() + list(self.unsaved_records)

    def flush(self) -> None:
        """Retry saving records that previously failed to save"""
        while self.unsaved_records:
            record = self.unsaved_records[0]
            try:
                self.store.insert_record(record)
            except StoreWriteError as e:
                raise StoreWriteError(e.message, pending=self.unsaved_records) from e
            self.unsaved_records.pop(0)
            logger.info(f"Saved previously unsaved message {record.message_id}")

    def close(self) -> None:
        """Flush unsaved records and log out"""
        try:
            self.flush()
        finally:
            self.logout()
