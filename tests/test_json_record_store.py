"""Tests for the JSON file record store"""

import json
from pathlib import Path

import pytest

from quickchat.core.exceptions import DuplicateUsernameError, StoreWriteError
from quickchat.domain.entities.account import AccountEntity
from quickchat.domain.entities.dispatch_record import DispatchRecordEntity
from quickchat.infrastructure.repositories.json_record_store import JsonRecordStore


@pytest.fixture
def store(tmp_path: Path) -> JsonRecordStore:
    """Store writing into a temporary directory"""
    return JsonRecordStore(tmp_path / "users.json", tmp_path / "messages.json")


def sample_account(username: str = "ab_c") -> AccountEntity:
    return AccountEntity(username=username, password="Passw0rd!", cell_number="+27831234567")


def sample_record(message_id: str = "0000000042", body: str = "Hello there") -> DispatchRecordEntity:
    return DispatchRecordEntity(
        message_id=message_id,
        recipient="+27831234567",
        body=body,
        fingerprint="2a70f7191476",
        date="2024-01-02",
        time="12:30:45",
    )


def test_missing_files_load_as_empty(store: JsonRecordStore) -> None:
    """No prior store means empty collections"""
    assert store.load_accounts() == []
    assert store.load_records() == []


def test_corrupt_files_load_as_empty(store: JsonRecordStore) -> None:
    """Unparseable documents degrade to empty instead of raising"""
    store.users_path.write_text("{not json", encoding="utf-8")
    store.messages_path.write_text('[{"messageID": 1}]', encoding="utf-8")

    assert store.load_accounts() == []
    assert store.load_records() == []


def test_null_document_loads_as_empty(store: JsonRecordStore) -> None:
    """A document containing null is treated as empty"""
    store.users_path.write_text("null", encoding="utf-8")

    assert store.load_accounts() == []


def test_inserts_refuse_to_overwrite_unreadable_documents(store: JsonRecordStore) -> None:
    """A truncated document is left untouched instead of being replaced"""
    store.save_accounts([sample_account()])
    store.save_records([sample_record()])
    truncated_users = store.users_path.read_bytes()[:-3]
    truncated_messages = store.messages_path.read_bytes()[:-3]
    store.users_path.write_bytes(truncated_users)
    store.messages_path.write_bytes(truncated_messages)

    with pytest.raises(StoreWriteError):
        store.insert_account(sample_account("x_y"))
    with pytest.raises(StoreWriteError):
        store.insert_record(sample_record("0000000043"))

    assert store.users_path.read_bytes() == truncated_users
    assert store.messages_path.read_bytes() == truncated_messages


def test_inserts_into_null_document(store: JsonRecordStore) -> None:
    """Empty and null documents hold nothing, so inserts may replace them"""
    store.users_path.write_text("null", encoding="utf-8")
    store.messages_path.write_text("", encoding="utf-8")

    store.insert_account(sample_account())
    store.insert_record(sample_record())

    assert store.load_accounts() == [sample_account()]
    assert store.load_records() == [sample_record()]


def test_account_document_shape(store: JsonRecordStore) -> None:
    """Accounts are stored as username, password and cellNumber"""
    store.save_accounts([sample_account()])

    document = json.loads(store.users_path.read_text(encoding="utf-8"))

    assert document == [
        {"username": "ab_c", "password": "Passw0rd!", "cellNumber": "+27831234567"}
    ]


def test_record_document_shape(store: JsonRecordStore) -> None:
    """Records are stored with the message field names"""
    store.save_records([sample_record()])

    document = json.loads(store.messages_path.read_text(encoding="utf-8"))

    assert document == [
        {
            "messageID": "0000000042",
            "recipient": "+27831234567",
            "messageText": "Hello there",
            "messageHash": "2a70f7191476",
            "date": "2024-01-02",
            "time": "12:30:45",
        }
    ]


def test_accounts_round_trip(store: JsonRecordStore) -> None:
    """Saved accounts load back unchanged"""
    accounts = [sample_account("ab_c"), sample_account("x_y")]
    store.save_accounts(accounts)

    assert store.load_accounts() == accounts


def test_records_round_trip_in_order(store: JsonRecordStore) -> None:
    """Saved records load back unchanged and in order"""
    records = [sample_record("0000000002", "second"), sample_record("0000000001", "first")]
    store.save_records(records)

    assert store.load_records() == records


def test_resaving_loaded_state_is_byte_identical(store: JsonRecordStore) -> None:
    """save(load()) leaves the documents unchanged"""
    store.save_accounts([sample_account("ab_c"), sample_account("x_y")])
    store.save_records([sample_record(body="héllo ✓")])
    users_before = store.users_path.read_bytes()
    messages_before = store.messages_path.read_bytes()

    store.save_accounts(store.load_accounts())
    store.save_records(store.load_records())

    assert store.users_path.read_bytes() == users_before
    assert store.messages_path.read_bytes() == messages_before


def test_insert_account_rejects_duplicates(store: JsonRecordStore) -> None:
    """Duplicate usernames fail and leave the store unchanged"""
    store.insert_account(sample_account("ab_c"))
    before = store.users_path.read_bytes()

    with pytest.raises(DuplicateUsernameError) as exc_info:
        store.insert_account(
            AccountEntity(username="ab_c", password="Other1!xx", cell_number="+27820000000")
        )

    assert exc_info.value.username == "ab_c"
    assert store.users_path.read_bytes() == before
    assert store.load_accounts() == [sample_account("ab_c")]


def test_insert_record_accepts_duplicate_ids(store: JsonRecordStore) -> None:
    """Records are appended without any uniqueness check"""
    store.insert_record(sample_record("0000000042", "one"))
    store.insert_record(sample_record("0000000042", "two"))

    assert [record.body for record in store.load_records()] == ["one", "two"]


def test_find_account(store: JsonRecordStore) -> None:
    """Accounts can be looked up by username"""
    store.insert_account(sample_account("ab_c"))

    assert store.find_account("ab_c") == sample_account("ab_c")
    assert store.find_account("zz_z") is None


def test_save_leaves_no_temporary_files(store: JsonRecordStore, tmp_path: Path) -> None:
    """The temporary file is renamed into place"""
    store.save_accounts([sample_account()])
    store.save_records([sample_record()])

    assert sorted(path.name for path in tmp_path.iterdir()) == ["messages.json", "users.json"]


def test_save_failure_raises_store_write_error(tmp_path: Path) -> None:
    """Unwritable targets report a StoreWriteError"""
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = JsonRecordStore(blocker / "users.json", blocker / "messages.json")

    with pytest.raises(StoreWriteError):
        store.save_accounts([sample_account()])


def test_failed_save_keeps_previous_document(store: JsonRecordStore, monkeypatch: pytest.MonkeyPatch) -> None:
    """A failed rename leaves the previous document intact"""
    store.save_accounts([sample_account("ab_c")])
    before = store.users_path.read_bytes()

    def failing_replace(src: str, dst: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("quickchat.infrastructure.repositories.json_record_store.os.replace", failing_replace)

    with pytest.raises(StoreWriteError):
        store.save_accounts([sample_account("ab_c"), sample_account("x_y")])

    assert store.users_path.read_bytes() == before
    assert [path.name for path in store.users_path.parent.iterdir() if path.suffix == ".tmp"] == []
