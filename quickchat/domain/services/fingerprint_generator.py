"""Message identity and fingerprint generation"""

import logging
import random
from datetime import datetime
from typing import Callable, Collection, Optional

from quickchat.core.exceptions import HashComputationError, ValidationError
from quickchat.domain.entities.dispatch_record import DATE_FORMAT, TIME_FORMAT, DispatchRecordEntity
from quickchat.domain.value_objects.fingerprint import Fingerprint, FingerprintScheme
from quickchat.domain.value_objects.message_id import MessageId

logger = logging.getLogger(__name__)


class FingerprintGenerator:
    """Builds new dispatch records with an ID, timestamp and fingerprint

    IDs are random draws. Without ``taken_ids`` nothing stops two records
    from sharing an ID; pass the IDs already in use to have the generator
    redraw on collision.
    """

    def __init__(
        self,
        scheme: FingerprintScheme = FingerprintScheme.SHA256,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        max_attempts: int = 10,
    ) -> None:
        self.scheme = scheme
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        self.max_attempts = max_attempts

    def next_message_id(self, taken_ids: Optional[Collection[str]] = None) -> MessageId:
        """Draw a message ID, avoiding ``taken_ids`` when given"""
        if taken_ids is None:
            return MessageId.generate(self.rng)

        for _ in range(self.max_attempts):
            candidate = MessageId.generate(self.rng)
            if candidate.value not in taken_ids:
                return candidate
            logger.info(f"Message ID {candidate} already in use, drawing again")

        raise ValidationError(
            f"Could not find a free message ID after {self.max_attempts} attempts",
            field="message_id",
        )

    def fingerprint_for(
        self, message_id: str, recipient: str, body: str, date: str, time: str
    ) -> Fingerprint:
        """Compute the fingerprint, falling back to the sentinel on hash failure"""
        try:
            return Fingerprint.compute(self.scheme, message_id, recipient, body, date, time)
        except HashComputationError as e:
            logger.warning(f"Falling back to sentinel fingerprint: {e}")
            return Fingerprint.sentinel()

    def create(
        self, recipient: str, body: str, taken_ids: Optional[Collection[str]] = None
    ) -> DispatchRecordEntity:
        """Create a new record for an already validated recipient and body"""
        now = self.clock()
        date = now.strftime(DATE_FORMAT)
        time = now.strftime(TIME_FORMAT)
        message_id = self.next_message_id(taken_ids).value

        fingerprint = self.fingerprint_for(message_id, recipient, body, date, time)

        return DispatchRecordEntity(
            message_id=message_id,
            recipient=recipient,
            body=body,
            fingerprint=fingerprint.value,
            date=date,
            time=time,
        )
