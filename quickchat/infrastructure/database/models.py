"""SQLAlchemy database models"""

from sqlalchemy import Column, Integer, String

from quickchat.infrastructure.database.connection import Base


class User(Base):
    """Account model"""

    __tablename__ = "users"

    username = Column(String(5), primary_key=True)
    password = Column(String(255), nullable=False)
    cell = Column(String(13))


class Message(Base):
    """Dispatch record model

    ``id`` is not unique: message IDs are random draws and the store
    accepts every insert. ``seq`` keeps insertion order.
    """

    __tablename__ = "messages"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(10), index=True, nullable=False)
    recipient = Column(String(13))
    message = Column(String(250))
    hash = Column(String(12))
    date = Column(String(10))
    time = Column(String(8))
