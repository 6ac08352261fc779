"""Document schemas for the JSON record store"""

from typing import List

from pydantic import BaseModel, Field, TypeAdapter

from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity


class AccountDocument(BaseModel):
    """Account as stored in users.json"""

    username: str
    password: str
    cell_number: str = Field(..., alias="cellNumber")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"username": "ab_c", "password": "Passw0rd!", "cellNumber": "+27831234567"}
        }

    @classmethod
    def from_entity(cls, account: AccountEntity) -> "AccountDocument":
        return cls(
            username=account.username,
            password=account.password,
            cell_number=account.cell_number,
        )

    def to_entity(self) -> AccountEntity:
        return AccountEntity(
            username=self.username,
            password=self.password,
            cell_number=self.cell_number,
        )


class DispatchRecordDocument(BaseModel):
    """Dispatch record as stored in messages.json"""

    message_id: str = Field(..., alias="messageID")
    recipient: str
    message_text: str = Field(..., alias="messageText")
    message_hash: str = Field(..., alias="messageHash")
    date: str
    time: str

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "messageID": "0012345678",
                "recipient": "+27831234567",
                "messageText": "Hello there",
                "messageHash": "3f1a9c0b7d2e",
                "date": "2024-01-01",
                "time": "12:00:00",
            }
        }

    @classmethod
    def from_entity(cls, record: DispatchRecordEntity) -> "DispatchRecordDocument":
        return cls(
            message_id=record.message_id,
            recipient=record.recipient,
            message_text=record.body,
            message_hash=record.fingerprint,
            date=record.date,
            time=record.time,
        )

    def to_entity(self) -> DispatchRecordEntity:
        return DispatchRecordEntity(
            message_id=self.message_id,
            recipient=self.recipient,
            body=self.message_text,
            fingerprint=self.message_hash,
            date=self.date,
            time=self.time,
        )


AccountDocumentList = TypeAdapter(List[AccountDocument])
DispatchRecordDocumentList = TypeAdapter(List[DispatchRecordDocument])
