"""Wiring of stores, generators and sessions from settings"""

import logging
import random
from typing import Optional

from quickchat.application.session import ChatSession
from quickchat.core.config import Settings, settings
from quickchat.domain.interfaces.record_store import RecordStoreInterface
from quickchat.domain.services.fingerprint_generator import FingerprintGenerator
from quickchat.domain.value_objects.fingerprint import FingerprintScheme
from quickchat.infrastructure.database.connection import create_db_engine
from quickchat.infrastructure.repositories.json_record_store import JsonRecordStore
from quickchat.infrastructure.repositories.sql_record_store import SqlRecordStore

logger = logging.getLogger(__name__)


def get_record_store(config: Settings = settings) -> RecordStoreInterface:
    """Build the store backend selected in settings"""
    if config.store_backend == "sql":
        logger.info(f"Using relational store at {config.database_url}")
        engine = create_db_engine(config.database_url, echo=config.debug)
        return SqlRecordStore(engine)

    logger.info(f"Using JSON store in {config.data_dir}")
    return JsonRecordStore(config.users_path, config.messages_path)


def get_fingerprint_generator(
    config: Settings = settings, rng: Optional[random.Random] = None
) -> FingerprintGenerator:
    """Build the fingerprint generator for the configured scheme"""
    return FingerprintGenerator(
        scheme=FingerprintScheme(config.fingerprint_scheme),
        rng=rng,
        max_attempts=config.message_id_attempts,
    )


def create_chat_session(
    config: Settings = settings, store: Optional[RecordStoreInterface] = None
) -> ChatSession:
    """Create a session over the configured store"""
    return ChatSession(
        store=store or get_record_store(config),
        generator=get_fingerprint_generator(config),
        unique_message_ids=config.unique_message_ids,
    )
