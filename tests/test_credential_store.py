import threading

import pytest

from rhythmflow.auth.credential_store import CredentialStore
from rhythmflow.storage.json_storage import JsonFileStorage, MemoryStorage
from rhythmflow.utils.exceptions import (
    AccountNotFoundError,
    ConflictError,
    CredentialMismatchError,
    InvalidCredentialsError,
    StoreIOError,
)


@pytest.fixture
def store():
    return CredentialStore(MemoryStorage(), bcrypt_rounds=4)


def test_register_twice_conflicts(store):
    store.register("a@x.com", "pw123")
    with pytest.raises(ConflictError, match="User already exists"):
        store.register("a@x.com", "another")


def test_secret_is_not_stored_in_plain_form(store):
    account = store.register("a@x.com", "pw123")
    assert account.credential_hash != "pw123"
    assert account.credential_hash.startswith("$2")


def test_verify_registered_secret(store):
    store.register("a@x.com", "pw123")
    account = store.verify("a@x.com", "pw123")
    assert account.identifier == "a@x.com"


def test_wrong_secret_and_unknown_identifier_look_the_same(store):
    store.register("a@x.com", "pw123")

    with pytest.raises(CredentialMismatchError) as wrong:
        store.verify("a@x.com", "nope")
    with pytest.raises(AccountNotFoundError) as unknown:
        store.verify("nobody@x.com", "pw123")

    assert isinstance(wrong.value, InvalidCredentialsError)
    assert isinstance(unknown.value, InvalidCredentialsError)
    assert str(wrong.value) == str(unknown.value) == "Invalid credentials"
    assert wrong.value.status_code == unknown.value.status_code == 401


def test_identifiers_are_case_sensitive(store):
    store.register("a@x.com", "pw123")
    store.register("A@x.com", "other")
    with pytest.raises(AccountNotFoundError):
        store.verify("A@X.COM", "pw123")
    assert store.verify("A@x.com", "other").identifier == "A@x.com"


def test_accounts_persist_to_file(tmp_path):
    path = tmp_path / "accounts.json"
    CredentialStore(JsonFileStorage(path), bcrypt_rounds=4).register("a@x.com", "pw123")

    reopened = CredentialStore(JsonFileStorage(path), bcrypt_rounds=4)
    assert reopened.verify("a@x.com", "pw123").identifier == "a@x.com"
    assert "pw123" not in path.read_text(encoding="utf-8")


def test_concurrent_registrations_do_not_lose_updates(tmp_path):
    # Two store objects on the same file share one lock; no registration may be dropped.
    path = tmp_path / "accounts.json"
    stores = [
        CredentialStore(JsonFileStorage(path), bcrypt_rounds=4),
        CredentialStore(JsonFileStorage(path), bcrypt_rounds=4),
    ]
    errors = []

    def worker(i: int) -> None:
        try:
            stores[i % 2].register(f"user{i}@x.com", "pw")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    for i in range(8):
        assert stores[0].get(f"user{i}@x.com") is not None


def test_corrupt_file_raises_store_error(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text("{not json", encoding="utf-8")
    store = CredentialStore(JsonFileStorage(path), bcrypt_rounds=4)
    with pytest.raises(StoreIOError):
        store.verify("a@x.com", "pw123")


def test_invalid_record_shape_raises_store_error(tmp_path):
    path = tmp_path / "accounts.json"
    path.write_text('{"a@x.com": {"identifier": "a@x.com"}}', encoding="utf-8")
    store = CredentialStore(JsonFileStorage(path), bcrypt_rounds=4)
    with pytest.raises(StoreIOError, match="corrupt"):
        store.get("a@x.com")


def test_unknown_identifier_still_runs_bcrypt_check(store, monkeypatch):
    import rhythmflow.auth.credential_store as credential_store

    calls = []
    real_verify = credential_store.verify_password

    def counting_verify(password, password_hash):
        calls.append(password_hash)
        return real_verify(password, password_hash)

    monkeypatch.setattr(credential_store, "verify_password", counting_verify)

    with pytest.raises(AccountNotFoundError):
        store.verify("ghost@x.com", "pw123")
    assert len(calls) == 1
    assert calls[0].startswith("$2")


def test_failed_write_leaves_no_temp_file(tmp_path):
    storage = JsonFileStorage(tmp_path / "accounts.json")
    document = {}
    document["self"] = document

    with pytest.raises(StoreIOError, match="Failed to save accounts.json"):
        storage.save(document)
    assert list(tmp_path.iterdir()) == []
