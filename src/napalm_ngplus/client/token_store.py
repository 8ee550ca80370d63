"""Session token persistence, keyed by switch host.

A :class:`TokenRecord` always pairs the token with the hardware family that
issued it, because the token alone does not say how it must be sent.
Records are only ever stored or deleted whole.
"""

from __future__ import annotations

import abc
import logging
import os
import pathlib
import tempfile
import threading
from dataclasses import dataclass

from napalm_ngplus.client.errors import TokenCorruptError
from napalm_ngplus.vendor.netgear.models import HardwareFamily, parse_family

logger = logging.getLogger(__name__)

_SEPARATOR: str = ":"
_FILE_PREFIX: str = "token-"
_DIR_MODE: int = 0o700
_FILE_MODE: int = 0o600

_FNV32_OFFSET: int = 0x811C9DC5
_FNV32_PRIME: int = 0x01000193


@dataclass(frozen=True)
class TokenRecord:
    """An authenticated session for one switch.

    Attributes:
        family: Hardware family the token was issued by.
        token: Opaque session token (``SID`` cookie or Gambit value).
    """

    family: HardwareFamily
    token: str

    def __repr__(self) -> str:
        return f"TokenRecord(family={self.family.value!r}, token=<redacted>)"


class TokenStore(abc.ABC):
    """Storage for :class:`TokenRecord` objects keyed by host string."""

    @abc.abstractmethod
    def get(self, host: str) -> TokenRecord | None:
        """Return the record for *host*, or ``None`` if none is stored.

        Raises:
            TokenCorruptError: If a stored record cannot be decoded.
        """

    @abc.abstractmethod
    def store(self, host: str, record: TokenRecord) -> None:
        """Store *record* for *host*, replacing any previous record."""

    @abc.abstractmethod
    def delete(self, host: str) -> None:
        """Delete the record for *host*; a no-op if none exists."""

    @abc.abstractmethod
    def hosts(self) -> list[str]:
        """Return the keys of all stored records."""

    @abc.abstractmethod
    def clear_all(self) -> None:
        """Delete every stored record."""

    def clear(self, host: str) -> None:
        """Alias of :meth:`delete` for cache administration."""
        self.delete(host)


class MemoryTokenStore(TokenStore):
    """Process-local token store; records vanish when the process exits."""

    def __init__(self) -> None:
        self._records: dict[str, TokenRecord] = {}
        self._lock = threading.Lock()

    def get(self, host: str) -> TokenRecord | None:
        with self._lock:
            return self._records.get(host)

    def store(self, host: str, record: TokenRecord) -> None:
        with self._lock:
            self._records[host] = record

    def delete(self, host: str) -> None:
        with self._lock:
            self._records.pop(host, None)

    def hosts(self) -> list[str]:
        with self._lock:
            return sorted(self._records)

    def clear_all(self) -> None:
        with self._lock:
            self._records.clear()


def fnv1a_32(data: str) -> int:
    """Return the 32-bit FNV-1a hash of the UTF-8 encoding of *data*."""
    h = _FNV32_OFFSET
    for byte in data.encode("utf-8"):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def default_cache_dir() -> pathlib.Path:
    """Return the default token cache directory.

    ``$XDG_CACHE_HOME/napalm-ngplus`` if set, else ``~/.cache/napalm-ngplus``,
    else a directory under the system temp dir.
    """
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return pathlib.Path(xdg) / "napalm-ngplus"
    try:
        return pathlib.Path.home() / ".cache" / "napalm-ngplus"
    except RuntimeError:
        return pathlib.Path(tempfile.gettempdir()) / "napalm-ngplus"


class FileTokenStore(TokenStore):
    """Token store with one owner-only file per host.

    The file for a host is named ``token-<hash>`` where ``<hash>`` is the
    8-digit hex FNV-1a hash of the host string, and contains a single
    ``FAMILY:token`` line.  Hash collisions only cause cache misses: a
    lookup reads exactly the file selected by the caller's own host string.

    Args:
        cache_dir: Directory holding the token files.  Defaults to
            :func:`default_cache_dir`.
    """

    def __init__(self, cache_dir: str | os.PathLike[str] | None = None) -> None:
        self.cache_dir = (
            pathlib.Path(cache_dir) if cache_dir is not None else default_cache_dir()
        )
        self._lock = threading.Lock()

    @staticmethod
    def key_for(host: str) -> str:
        """Return the cache key (hex hash) used for *host*."""
        return f"{fnv1a_32(host):08x}"

    def path_for(self, host: str) -> pathlib.Path:
        """Return the token file path for *host*."""
        return self.cache_dir / f"{_FILE_PREFIX}{self.key_for(host)}"

    def get(self, host: str) -> TokenRecord | None:
        path = self.path_for(host)
        with self._lock:
            try:
                content = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return None
            except OSError as exc:
                raise TokenCorruptError(f"Cannot read token file {path}: {exc}") from exc
        return _decode(content, path)

    def store(self, host: str, record: TokenRecord) -> None:
        path = self.path_for(host)
        content = f"{record.family.value}{_SEPARATOR}{record.token}"
        with self._lock:
            self.cache_dir.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", dir=self.cache_dir
            )
            try:
                os.fchmod(fd, _FILE_MODE)
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                pathlib.Path(tmp_name).unlink(missing_ok=True)
                raise
        logger.debug("Stored %s token for %s in %s", record.family.value, host, path)

    def delete(self, host: str) -> None:
        path = self.path_for(host)
        with self._lock:
            path.unlink(missing_ok=True)
        logger.debug("Deleted token file %s", path)

    def hosts(self) -> list[str]:
        with self._lock:
            if not self.cache_dir.is_dir():
                return []
            return sorted(
                p.name[len(_FILE_PREFIX):]
                for p in self.cache_dir.glob(f"{_FILE_PREFIX}*")
                if p.is_file()
            )

    def clear_all(self) -> None:
        with self._lock:
            if not self.cache_dir.is_dir():
                return
            for p in self.cache_dir.glob(f"{_FILE_PREFIX}*"):
                p.unlink(missing_ok=True)
        logger.info("Cleared all cached tokens in %s", self.cache_dir)


def _decode(content: str, path: pathlib.Path) -> TokenRecord:
    """Decode a ``FAMILY:token`` file body into a :class:`TokenRecord`."""
    if _SEPARATOR not in content:
        raise TokenCorruptError(f"Malformed token file {path}: missing separator")
    family_str, token = (part.strip() for part in content.split(_SEPARATOR, 1))
    try:
        family = parse_family(family_str)
    except ValueError as exc:
        raise TokenCorruptError(
            f"Unknown model {family_str!r} in token file {path}"
        ) from exc
    if not token:
        raise TokenCorruptError(f"Empty token in token file {path}")
    return TokenRecord(family=family, token=token)
