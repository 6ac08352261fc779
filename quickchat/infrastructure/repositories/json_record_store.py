"""JSON file record store implementation"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, List

from pydantic import TypeAdapter
from pydantic import ValidationError as DocumentValidationError

from quickchat.core.exceptions import DuplicateUsernameError, StoreReadError, StoreWriteError
from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.infrastructure.repositories.documents import (
    AccountDocument,
    AccountDocumentList,
    DispatchRecordDocument,
    DispatchRecordDocumentList,
)

logger = logging.getLogger(__name__)


class JsonRecordStore(RecordStoreInterface):
    """Stores accounts and records as two pretty-printed JSON documents

    Every save writes a temporary file next to the target and renames it
    into place, so a reader sees either the old or the new document.
    """

    def __init__(self, users_path: Path, messages_path: Path) -> None:
        self.users_path = Path(users_path)
        self.messages_path = Path(messages_path)

    def load_accounts(self) -> List[AccountEntity]:
        """Load all accounts"""
        try:
            documents = self._read(self.users_path, AccountDocumentList)
        except StoreReadError as e:
            logger.warning(f"Could not load accounts, starting empty: {e}")
            return []
        return [document.to_entity() for document in documents]

    def save_accounts(self, accounts: List[AccountEntity]) -> None:
        """Replace the account document"""
        documents = [AccountDocument.from_entity(account) for account in accounts]
        self._write(self.users_path, AccountDocumentList, documents, "users")

    def load_records(self) -> List[DispatchRecordEntity]:
        """Load all dispatch records"""
        try:
            documents = self._read(self.messages_path, DispatchRecordDocumentList)
        except StoreReadError as e:
            logger.warning(f"Could not load messages, starting empty: {e}")
            return []
        return [document.to_entity() for document in documents]

    def save_records(self, records: List[DispatchRecordEntity]) -> None:
        """Replace the message document"""
        documents = [DispatchRecordDocument.from_entity(record) for record in records]
        self._write(self.messages_path, DispatchRecordDocumentList, documents, "messages")

    def insert_account(self, account: AccountEntity) -> AccountEntity:
        """Append a new account

        Refuses to write when the existing document cannot be read, so an
        unreadable file is never replaced by the new account alone.
        """
        documents = self._read_for_update(self.users_path, AccountDocumentList, "users")
        accounts = [document.to_entity() for document in documents]
        if any(existing.username == account.username for existing in accounts):
            raise DuplicateUsernameError(account.username)

        self.save_accounts(accounts + [account])
        return account

    def insert_record(self, record: DispatchRecordEntity) -> DispatchRecordEntity:
        """Append a dispatch record, refusing to write over an unreadable document"""
        documents = self._read_for_update(self.messages_path, DispatchRecordDocumentList, "messages")
        self.save_records([document.to_entity() for document in documents] + [record])
        return record

    def _read_for_update(self, path: Path, adapter: TypeAdapter, label: str) -> List[Any]:
        try:
            return self._read(path, adapter)
        except StoreReadError as e:
            logger.error(f"Not saving {label}, existing document is unreadable: {e}")
            raise StoreWriteError(f"Error saving {label}: {e.message}") from e

    def _read(self, path: Path, adapter: TypeAdapter) -> List[Any]:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StoreReadError(f"Error reading {path}: {e}") from e

        # Empty and null documents hold no data
        if raw.strip() in (b"", b"null"):
            return []

        try:
            return adapter.validate_json(raw)
        except DocumentValidationError as e:
            raise StoreReadError(f"Malformed document {path}: {e}") from e

    def _write(self, path: Path, adapter: TypeAdapter, documents: List[Any], label: str) -> None:
        payload = adapter.dump_json(documents, by_alias=True, indent=2)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        except OSError as e:
            logger.error(f"Error saving {label}: {e}")
            raise StoreWriteError(f"Error saving {label}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning(f"Could not remove temporary file {tmp_name}")
            logger.error(f"Error saving {label}: {e}")
            raise StoreWriteError(f"Error saving {label}: {e}") from e

        logger.debug(f"Saved {len(documents)} {label} to {path}")
