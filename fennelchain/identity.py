"""Numbered identities owned by accounts, each carrying key/value traits."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator

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

U32_MAX = 2**32 - 1
DEFAULT_MAX_SIZE = 1024

BytesLike = bytes | bytearray | str | Iterable[int]

# Storage footprints measured for the identity calls.
_LIST_PROOF = 3517
_TRAIT_PROOF = 5553


class StorageOverflow(DispatchError):
    """The provided value is too large."""


class IdentityNotOwned(DispatchError):
    """The current account does not own the identity."""


@dataclass(frozen=True)
class _IdentityEvent:
    identity_id: int
    owner: Hashable


class IdentityCreated(_IdentityEvent):
    """A new identity was announced."""


class IdentityRevoked(_IdentityEvent):
    """An identity was revoked."""


class IdentityUpdated(_IdentityEvent):
    """An identity's traits changed."""


class WeightInfo:
    """Benchmarked weights of the identity calls."""

    def __init__(self, db_weight: DbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _measured(
        self, ref_time: int, proof_size: int, accesses: tuple[int, int], per_byte: int = 0, length: int = 0
    ) -> Weight:
        return (
            Weight.from_parts(ref_time, proof_size)
            .saturating_add(Weight.from_parts(per_byte, 0).saturating_mul(length))
            .saturating_add(self.db_weight.reads_writes(*accesses))
        )

    def create_identity(self) -> Weight:
        return self._measured(17_073_000, _LIST_PROOF, (2, 2))

    def revoke_identity(self) -> Weight:
        return self._measured(17_001_000, _LIST_PROOF, (1, 1))

    def add_or_update_identity_trait(self, length: int) -> Weight:
        return self._measured(19_555_962, _TRAIT_PROOF, (2, 1), per_byte=3_852, length=length)

    def remove_identity_trait(self, length: int) -> Weight:
        return self._measured(20_651_638, _LIST_PROOF, (1, 1), per_byte=782, length=length)

    def revoke_identity_heavy_storage(self) -> Weight:
        return self._measured(43_092_000, _LIST_PROOF, (1, 1))

    def add_or_update_long_identity_trait(self) -> Weight:
        return self._measured(22_958_000, _TRAIT_PROOF, (2, 1))

    def add_or_update_many_identity_traits(self) -> Weight:
        return self._measured(67_841_000, _TRAIT_PROOF, (2, 1))

    def remove_identity_trait_heavy_storage(self) -> Weight:
        return self._measured(56_402_000, _LIST_PROOF, (1, 1))

    def remove_long_identity_trait(self) -> Weight:
        return self._measured(23_436_000, _LIST_PROOF, (1, 1))


class IdentityPallet:
    """Issues identity numbers to accounts and stores their traits."""

    def __init__(self, runtime: Runtime, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self.runtime = runtime
        self.max_size = max_size
        self.weights = WeightInfo()
        self._identity_number = 0
        self._signal_count = 0
        self._identities: dict[int, Hashable] = {}
        self._traits: dict[tuple[int, bytes], bytes] = {}
        runtime.register(self)

    @contextmanager
    def _as_owner(self, origin: Origin, identity_id: int) -> Iterator[Hashable]:
        """Run a call that only the owner of ``identity_id`` may make."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            if self._identities.get(identity_id, _MISSING) != who:
                raise IdentityNotOwned(f"{who!r} does not own identity {identity_id}")
            yield who

    def create_identity(self, origin: Origin) -> None:
        """Create a new identity owned by the signer."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            current_id = self._identity_number
            if current_id + 1 > U32_MAX:
                raise StorageOverflow("identity number overflowed")
            if current_id in self._identities:
                raise StorageOverflow(f"identity {current_id} is already in use")
            self._identities[current_id] = who
            self._identity_number = current_id + 1
            self.runtime.deposit_event(IdentityCreated(identity_id=current_id, owner=who))

    def revoke_identity(self, origin: Origin, identity_id: int) -> None:
        """Revoke ``identity_id`` if the signer owns it."""
        with self._as_owner(origin, identity_id) as who:
            del self._identities[identity_id]
            self.runtime.deposit_event(IdentityRevoked(identity_id=identity_id, owner=who))

    def add_or_update_identity_trait(
        self, origin: Origin, identity_id: int, key: BytesLike, value: BytesLike
    ) -> None:
        """Set the trait ``key`` of ``identity_id`` to ``value``."""
        key = bounded_bytes(key, self.max_size)
        value = bounded_bytes(value, self.max_size)
        with self._as_owner(origin, identity_id) as who:
            self._traits[(identity_id, key)] = value
            self.runtime.deposit_event(IdentityUpdated(identity_id=identity_id, owner=who))

    def remove_identity_trait(self, origin: Origin, identity_id: int, key: BytesLike) -> None:
        """Remove the trait ``key`` from ``identity_id``."""
        key = bounded_bytes(key, self.max_size)
        with self._as_owner(origin, identity_id) as who:
            self._traits.pop((identity_id, key), None)
            self.runtime.deposit_event(IdentityUpdated(identity_id=identity_id, owner=who))

    def identity_number(self) -> int:
        """The next identity number to be issued."""
        return self._identity_number

    def set_identity_number(self, value: int) -> None:
        if not 0 <= value <= U32_MAX:
            raise ValueError("identity number must fit in 32 bits")
        self._identity_number = value

    def signal_count(self) -> int:
        return self._signal_count

    def identity_list(self, identity_id: int) -> Hashable | None:
        """The owner of ``identity_id``, or None if it does not exist."""
        return self._identities.get(identity_id)

    def identity_trait_list(self, identity_id: int, key: BytesLike) -> bytes:
        """The value of trait ``key``; empty when unset."""
        return self._traits.get((identity_id, bounded_bytes(key, self.max_size)), b"")

    def _snapshot(self) -> Any:
        return (
            self._identity_number,
            self._signal_count,
            dict(self._identities),
            dict(self._traits),
        )

    def _restore(self, state: Any) -> None:
        (
            self._identity_number,
            self._signal_count,
            self._identities,
            self._traits,
        ) = state


_MISSING = object()