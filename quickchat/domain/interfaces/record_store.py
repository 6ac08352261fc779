"""Record store interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity


class RecordStoreInterface(ABC):
    """Durable storage for accounts and dispatch records

    Loads never raise: unreadable state is logged and treated as empty.
    Saves replace the whole collection atomically and raise
    ``StoreWriteError`` on failure. No cross-process locking is provided;
    two processes sharing one store can overwrite each other's writes.
    """

    @abstractmethod
    def load_accounts(self) -> List[AccountEntity]:
        """Load all accounts, or an empty list"""
        pass

    @abstractmethod
    def save_accounts(self, accounts: List[AccountEntity]) -> None:
        """Replace the persisted accounts"""
        pass

    @abstractmethod
    def load_records(self) -> List[DispatchRecordEntity]:
        """Load all dispatch records in insertion order, or an empty list"""
        pass

    @abstractmethod
    def save_records(self, records: List[DispatchRecordEntity]) -> None:
        """Replace the persisted dispatch records"""
        pass

    @abstractmethod
    def insert_account(self, account: AccountEntity) -> AccountEntity:
        """Append an account, raising DuplicateUsernameError on conflict"""
        pass

    @abstractmethod
    def insert_record(self, record: DispatchRecordEntity) -> DispatchRecordEntity:
        """Append a dispatch record"""
        pass

    def find_account(self, username: str) -> Optional[AccountEntity]:
        """Get account by username"""
        for account in self.load_accounts():
            if account.username == username:
                return account
        return None
