import os

import pytest

from core.storage import LocalFileStore


@pytest.fixture
def store(tmp_path):
    return LocalFileStore(str(tmp_path / "files"))


def test_save_read_and_exists(store):
    key = store.save(b"a,b\n1,2\n", "My Data.CSV")

    assert key.startswith("excelFile-")
    assert key.endswith(".csv")
    assert store.exists(key)
    assert store.read(key) == b"a,b\n1,2\n"


def test_copy_writes_new_file(store):
    key = store.save(b"payload", "data.xlsx")

    copied = store.copy(key)

    assert copied != key
    assert "-copy-" in copied
    assert store.read(copied) == b"payload"
    assert os.path.dirname(os.path.join(store.root, copied)) == store.root


def test_delete_tolerates_missing_file(store):
    key = store.save(b"x", "data.csv")

    assert store.delete(key) is True
    assert not store.exists(key)
    assert store.delete(key) is False


def test_keys_cannot_escape_root(store):
    assert not store.exists("../etc/passwd")
    assert store.delete("../outside.txt") is False
    with pytest.raises(ValueError):
        store.read("nested/file.csv")


def test_copies_never_share_a_key(store):
    key = store.save(b"payload", "data.xlsx")

    copies = [store.copy(key) for _ in range(20)]

    assert len(set(copies)) == 20
    store.delete(copies[0])
    assert all(store.read(k) == b"payload" for k in copies[1:])
