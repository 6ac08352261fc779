"""Dispatch record domain entity"""

from dataclasses import dataclass
from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


@dataclass(frozen=True)
class DispatchRecordEntity:
    """A sent message

    The recipient is a bare cell number, not a reference to an account.
    The fingerprint is computed once when the record is created.
    """

    message_id: str
    recipient: str
    body: str
    fingerprint: str
    date: str
    time: str

    @property
    def sent_at(self) -> datetime:
        """Local timestamp the record was created at"""
        return datetime.strptime(f"{self.date} {self.time}", f"{DATE_FORMAT} {TIME_FORMAT}")
