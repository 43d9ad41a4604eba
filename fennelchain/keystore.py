"""Public keys announced by accounts, and the encryption keys they issue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable

from .runtime import (
    ROCKS_DB_WEIGHT,
    DbWeight,
    DispatchError,
    Origin,
    Runtime,
    Weight,
    bounded_bytes,
    ensure_signed,
)

DEFAULT_MAX_SIZE = 1024
ENCRYPTION_KEY_LENGTH = 32

# Key announcements and revocations read and write one entry of a map
# whose entries take at most this many bytes of proof.
_KEY_PROOF = 5581


class KeyExists(DispatchError):
    """The specified key already exists."""


class KeyDoesNotExist(DispatchError):
    """The specified key does not exist."""


@dataclass(frozen=True)
class _KeyEvent:
    key: bytes
    who: Hashable


class KeyAnnounced(_KeyEvent):
    """An account broadcast a new key."""


class KeyRevoked(_KeyEvent):
    """An account revoked one of its keys."""


@dataclass(frozen=True)
class EncryptionKeyIssued:
    who: Hashable


class WeightInfo:
    """Benchmarked weights of the keystore calls."""

    def __init__(self, db_weight: DbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _key_access(self, ref_time: int) -> Weight:
        return Weight.from_parts(ref_time, _KEY_PROOF).saturating_add(
            self.db_weight.reads_writes(1, 1)
        )

    def _blind_write(self, ref_time: int) -> Weight:
        return Weight.from_parts(ref_time, 0).saturating_add(self.db_weight.writes(1))

    def announce_key(self) -> Weight:
        return self._key_access(32_480_000)

    def announce_a_whole_lotta_keys(self) -> Weight:
        return self._key_access(75_428_000)

    def announce_key_with_long_vectors(self) -> Weight:
        return self._key_access(22_436_000)

    def announce_a_bunch_of_long_keys(self) -> Weight:
        return self._key_access(84_066_000)

    def revoke_key(self) -> Weight:
        return self._key_access(19_152_000)

    def revoke_one_of_many_keys(self) -> Weight:
        return self._key_access(69_051_000)

    def issue_encryption_key(self) -> Weight:
        return self._blind_write(10_548_000)

    def issue_a_ton_of_encryption_keys(self) -> Weight:
        return self._blind_write(18_492_000)


class KeystorePallet:
    """Maps accounts to the keys they have announced and not revoked."""

    def __init__(self, runtime: Runtime, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self.runtime = runtime
        self.max_size = max_size
        self.weights = WeightInfo()
        self._issued_keys: dict[tuple[Hashable, bytes], bytes] = {}
        self._encryption_keys: dict[Hashable, bytes] = {}
        runtime.register(self)

    def announce_key(self, origin: Origin, fingerprint: bytes | str, location: bytes | str) -> None:
        """Record that the signer published the key ``fingerprint`` at ``location``."""
        fingerprint = bounded_bytes(fingerprint, self.max_size)
        location = bounded_bytes(location, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            if (who, fingerprint) in self._issued_keys:
                raise KeyExists(f"{who!r} already announced key {fingerprint!r}")
            self._issued_keys[(who, fingerprint)] = location
            self.runtime.deposit_event(KeyAnnounced(key=fingerprint, who=who))

    def revoke_key(self, origin: Origin, key_index: bytes | str) -> None:
        """Remove the signer's key ``key_index`` from circulation."""
        key_index = bounded_bytes(key_index, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            if self._issued_keys.pop((who, key_index), None) is None:
                raise KeyDoesNotExist(f"{who!r} has no key {key_index!r}")
            self.runtime.deposit_event(KeyRevoked(key=key_index, who=who))

    def issue_encryption_key(self, origin: Origin, key: bytes | str) -> None:
        """Announce the signer's 32-byte encryption key, replacing any earlier one."""
        raw = bytes(key.encode() if isinstance(key, str) else key)
        if len(raw) != ENCRYPTION_KEY_LENGTH:
            raise ValueError(f"encryption key must be {ENCRYPTION_KEY_LENGTH} bytes")
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._encryption_keys[who] = raw
            self.runtime.deposit_event(EncryptionKeyIssued(who=who))

    def key(self, who: Hashable, fingerprint: bytes | str) -> bytes | None:
        """The location of ``who``'s key ``fingerprint``, or None."""
        return self._issued_keys.get((who, bounded_bytes(fingerprint, self.max_size)))

    def encryption_key(self, who: Hashable) -> bytes | None:
        """The encryption key issued by ``who``, or None."""
        return self._encryption_keys.get(who)

    def _snapshot(self) -> Any:
        return dict(self._issued_keys), dict(self._encryption_keys)

    def _restore(self, state: Any) -> None:
        self._issued_keys, self._encryption_keys = state