"""Relational record store implementation"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quickchat.core.exceptions import DuplicateUsernameError, StoreWriteError
from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.infrastructure.database.connection import create_session_factory, create_tables
from quickchat.infrastructure.database.models import Message, User

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStoreInterface):
    """SQLAlchemy implementation of the record store

    The schema is bootstrapped once on construction. Each operation opens
    its own session and closes it before returning.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        create_tables(engine)
        self.session_factory = create_session_factory(engine)

    def load_accounts(self) -> List[AccountEntity]:
        """Load all accounts"""
        try:
            with self.session_factory() as session:
                rows = session.execute(select(User).order_by(User.username)).scalars().all()
                return [self._to_account(row) for row in rows]
        except SQLAlchemyError as e:
            logger.warning(f"Could not load accounts, starting empty: {e}")
            return []

    def save_accounts(self, accounts: List[AccountEntity]) -> None:
        """Replace all account rows in one transaction"""
        try:
            with self.session_factory() as session, session.begin():
                session.execute(delete(User))
                session.add_all([self._to_user_row(account) for account in accounts])
        except SQLAlchemyError as e:
            logger.error(f"Error saving users: {e}")
            raise StoreWriteError(f"Error saving users: {e}") from e

    def load_records(self) -> List[DispatchRecordEntity]:
        """Load all dispatch records in insertion order"""
        try:
            with self.session_factory() as session:
                rows = session.execute(select(Message).order_by(Message.seq)).scalars().all()
                return [self._to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.warning(f"Could not load messages, starting empty: {e}")
            return []

    def save_records(self, records: List[DispatchRecordEntity]) -> None:
        """Replace all message rows in one transaction"""
        try:
            with self.session_factory() as session, session.begin():
                session.execute(delete(Message))
                session.add_all([self._to_message_row(record) for record in records])
        except SQLAlchemyError as e:
            logger.error(f"Error saving messages: {e}")
            raise StoreWriteError(f"Error saving messages: {e}") from e

    def insert_account(self, account: AccountEntity) -> AccountEntity:
        """Insert a new account row"""
        try:
            with self.session_factory() as session, session.begin():
                session.add(self._to_user_row(account))
        except IntegrityError:
            raise DuplicateUsernameError(account.username)
        except SQLAlchemyError as e:
            logger.error(f"Error saving users: {e}")
            raise StoreWriteError(f"Error saving users: {e}") from e
        return account

    def insert_record(self, record: DispatchRecordEntity) -> DispatchRecordEntity:
        """Insert a new message row"""
        try:
            with self.session_factory() as session, session.begin():
                session.add(self._to_message_row(record))
        except SQLAlchemyError as e:
            logger.error(f"Error saving messages: {e}")
            raise StoreWriteError(f"Error saving messages: {e}") from e
        return record

    def find_account(self, username: str) -> Optional[AccountEntity]:
        """Get account by username"""
        try:
            with self.session_factory() as session:
                row = session.get(User, username)
                return self._to_account(row) if row else None
        except SQLAlchemyError as e:
            logger.warning(f"Could not look up account {username}: {e}")
            return None

    def _to_account(self, row: User) -> AccountEntity:
        """Convert database model to domain entity"""
        return AccountEntity(
            username=row.username,
            password=row.password or "",
            cell_number=row.cell or "",
        )

    def _to_record(self, row: Message) -> DispatchRecordEntity:
        """Convert database model to domain entity"""
        return DispatchRecordEntity(
            message_id=row.id,
            recipient=row.recipient or "",
            body=row.message or "",
            fingerprint=row.hash or "",
            date=row.date or "",
            time=row.time or "",
        )

    def _to_user_row(self, account: AccountEntity) -> User:
        return User(
            username=account.username,
            password=account.password,
            cell=account.cell_number,
        )

    def _to_message_row(self, record: DispatchRecordEntity) -> Message:
        return Message(
            id=record.message_id,
            recipient=record.recipient,
            message=record.body,
            hash=record.fingerprint,
            date=record.date,
            time=record.time,
        )
