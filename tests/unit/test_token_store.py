"""Unit tests for napalm_ngplus.client.token_store."""

from __future__ import annotations

import os
import pathlib
import stat
from concurrent.futures import ThreadPoolExecutor

import pytest

from napalm_ngplus.client.errors import TokenCorruptError
from napalm_ngplus.client.token_store import (
    FileTokenStore,
    MemoryTokenStore,
    TokenRecord,
    TokenStore,
    default_cache_dir,
    fnv1a_32,
)
from napalm_ngplus.vendor.netgear.models import HardwareFamily

HOST = "192.168.0.2"
RECORD_30X = TokenRecord(family=HardwareFamily.GS30X, token="abc123")
RECORD_316 = TokenRecord(family=HardwareFamily.GS316, token="KJHfo9ByVJL0xAbq")


@pytest.fixture(params=["memory", "file"])
def store(request: pytest.FixtureRequest, tmp_path: pathlib.Path) -> TokenStore:
    if request.param == "memory":
        return MemoryTokenStore()
    return FileTokenStore(tmp_path / "tokens")


# ---------------------------------------------------------------------------
# Common TokenStore behaviour
# ---------------------------------------------------------------------------

def test_get_missing_returns_none(store: TokenStore) -> None:
    assert store.get(HOST) is None


def test_store_then_get(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    assert store.get(HOST) == RECORD_30X


def test_store_replaces_previous_record(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    store.store(HOST, RECORD_316)
    assert store.get(HOST) == RECORD_316


def test_hosts_are_isolated(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    store.store("192.168.0.3", RECORD_316)
    assert store.get(HOST) == RECORD_30X
    assert store.get("192.168.0.3") == RECORD_316
    assert len(store.hosts()) == 2


def test_delete_is_idempotent(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    store.delete(HOST)
    store.delete(HOST)
    assert store.get(HOST) is None


def test_clear_alias(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    store.clear(HOST)
    assert store.get(HOST) is None


def test_clear_all(store: TokenStore) -> None:
    store.store(HOST, RECORD_30X)
    store.store("192.168.0.3", RECORD_316)
    store.clear_all()
    assert store.hosts() == []
    assert store.get(HOST) is None


def test_record_repr_hides_token() -> None:
    assert "abc123" not in repr(RECORD_30X)
    assert "GS30xEPx" in repr(RECORD_30X)


# ---------------------------------------------------------------------------
# FNV-1a / cache dir
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("data", "expected"),
    [
        ("", 0x811C9DC5),
        ("a", 0xE40C292C),
        ("foobar", 0xBF9CF968),
    ],
)
def test_fnv1a_32_reference_values(data: str, expected: int) -> None:
    assert fnv1a_32(data) == expected


def test_default_cache_dir_honours_xdg(
    monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path
) -> None:
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert default_cache_dir() == tmp_path / "napalm-ngplus"


def test_default_cache_dir_falls_back_to_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    assert default_cache_dir().name == "napalm-ngplus"


# ---------------------------------------------------------------------------
# FileTokenStore specifics
# ---------------------------------------------------------------------------

def test_file_name_is_fnv_hash(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    assert fs.path_for(HOST).name == f"token-{fnv1a_32(HOST):08x}"
    assert FileTokenStore.key_for(HOST) == f"{fnv1a_32(HOST):08x}"


def test_file_content_format(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    fs.store(HOST, RECORD_316)
    assert fs.path_for(HOST).read_text() == "GS316EPx:KJHfo9ByVJL0xAbq"


def test_file_and_dir_permissions(tmp_path: pathlib.Path) -> None:
    cache_dir = tmp_path / "tokens"
    fs = FileTokenStore(cache_dir)
    fs.store(HOST, RECORD_30X)
    assert stat.S_IMODE(os.stat(cache_dir).st_mode) == 0o700
    assert stat.S_IMODE(os.stat(fs.path_for(HOST)).st_mode) == 0o600


def test_store_leaves_no_temp_files(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    fs.store(HOST, RECORD_30X)
    fs.store(HOST, RECORD_316)
    assert [p.name for p in tmp_path.iterdir()] == [fs.path_for(HOST).name]


def test_records_survive_new_instance(tmp_path: pathlib.Path) -> None:
    FileTokenStore(tmp_path).store(HOST, RECORD_30X)
    assert FileTokenStore(tmp_path).get(HOST) == RECORD_30X


def test_hosts_returns_hash_keys(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    fs.store(HOST, RECORD_30X)
    assert fs.hosts() == [FileTokenStore.key_for(HOST)]


def test_hosts_on_missing_dir(tmp_path: pathlib.Path) -> None:
    assert FileTokenStore(tmp_path / "nope").hosts() == []


def test_model_name_in_file_maps_to_family(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    fs.path_for(HOST).write_text("GS308EPP:abc123")
    assert fs.get(HOST) == RECORD_30X


@pytest.mark.parametrize(
    "content",
    [
        "no-separator-here",
        "GS108Ev3:abc123",
        "GS30xEPx:",
        "GS30xEPx:   ",
    ],
)
def test_corrupt_file_raises(tmp_path: pathlib.Path, content: str) -> None:
    fs = FileTokenStore(tmp_path)
    fs.path_for(HOST).write_text(content)
    with pytest.raises(TokenCorruptError):
        fs.get(HOST)


def test_concurrent_store_and_get(tmp_path: pathlib.Path) -> None:
    fs = FileTokenStore(tmp_path)
    shared = "10.0.0.1"

    def worker(n: int) -> list[TokenRecord | None]:
        own = f"10.0.1.{n}"
        seen: list[TokenRecord | None] = []
        for i in range(50):
            record = TokenRecord(family=HardwareFamily.GS316, token=f"t{n}-{i}")
            fs.store(own, record)
            fs.store(shared, record)
            assert fs.get(own) == record
            seen.append(fs.get(shared))
        return seen

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(worker, range(8)))

    valid = {f"t{n}-{i}" for n in range(8) for i in range(50)}
    for seen in results:
        assert len(seen) == 50
        for record in seen:
            assert record is not None
            assert record.token in valid
    for n in range(8):
        assert fs.get(f"10.0.1.{n}") == TokenRecord(family=HardwareFamily.GS316, token=f"t{n}-49")
    assert not list(tmp_path.glob(".token-*"))
