"""Messaging use cases"""

from typing import Iterable, List

from quickchat.domain.entities.dispatch_record import DispatchRecordEntity
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.domain.services.fingerprint_generator import FingerprintGenerator
from quickchat.domain.validators import ensure_valid_message_body, ensure_valid_recipient


class ComposeMessageUseCase:
    """Use case for building a new dispatch record"""

    def __init__(
        self,
        record_store: RecordStoreInterface,
        generator: FingerprintGenerator,
        unique_message_ids: bool = False,
    ):
        self.record_store = record_store
        self.generator = generator
        self.unique_message_ids = unique_message_ids

    def execute(
        self, recipient: str, body: str, unsaved_ids: Iterable[str] = ()
    ) -> DispatchRecordEntity:
        """Validate input and create a record; nothing is persisted yet"""
        ensure_valid_recipient(recipient)
        ensure_valid_message_body(body)

        taken_ids = None
        if self.unique_message_ids:
            taken_ids = {record.message_id for record in self.record_store.load_records()}
            taken_ids.update(unsaved_ids)

        return self.generator.create(recipient, body, taken_ids=taken_ids)


class StoreMessageUseCase:
    """Use case for persisting a composed record"""

    def __init__(self, record_store: RecordStoreInterface):
        self.record_store = record_store

    def execute(self, record: DispatchRecordEntity) -> DispatchRecordEntity:
        """Append the record to the store"""
        return self.record_store.insert_record(record)


class ListMessagesUseCase:
    """Use case for listing stored messages"""

    def __init__(self, record_store: RecordStoreInterface):
        self.record_store = record_store

    def execute(self) -> List[DispatchRecordEntity]:
        """Get all stored messages in insertion order"""
        return self.record_store.load_records()
