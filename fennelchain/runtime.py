"""Runtime primitives shared by the pallets: weights, origins, balances and events."""

from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Iterable, Iterator

U64_MAX = 2**64 - 1
LOCK_ID_LENGTH = 8


def _saturate(value: int) -> int:
    return max(0, min(U64_MAX, value))


@dataclass(frozen=True)
class Weight:
    """Two-dimensional execution weight: computation time and proof size."""

    ref_time: int = 0
    proof_size: int = 0

    @classmethod
    def from_parts(cls, ref_time: int, proof_size: int) -> "Weight":
        return cls(_saturate(ref_time), _saturate(proof_size))

    def saturating_add(self, other: "Weight") -> "Weight":
        return Weight(
            _saturate(self.ref_time + other.ref_time),
            _saturate(self.proof_size + other.proof_size),
        )

    def saturating_mul(self, factor: int) -> "Weight":
        return Weight(
            _saturate(self.ref_time * factor),
            _saturate(self.proof_size * factor),
        )


@dataclass(frozen=True)
class DbWeight:
    """Cost of a single storage read and write, in reference time."""

    read: int = 0
    write: int = 0

    def reads(self, n: int) -> Weight:
        return Weight.from_parts(self.read * n, 0)

    def writes(self, n: int) -> Weight:
        return Weight.from_parts(self.write * n, 0)

    def reads_writes(self, reads: int, writes: int) -> Weight:
        return self.reads(reads).saturating_add(self.writes(writes))


ROCKS_DB_WEIGHT = DbWeight(read=25_000_000, write=100_000_000)


class DispatchError(Exception):
    """Raised when a dispatchable call fails."""


class BadOrigin(DispatchError):
    """The call was made from an origin that is not allowed."""


class BoundTooLong(DispatchError, ValueError):
    """A bounded byte sequence exceeds its maximum size."""


class OriginKind(Enum):
    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Where a call comes from."""

    kind: OriginKind
    who: Hashable | None = None

    @classmethod
    def signed(cls, who: Hashable) -> "Origin":
        return cls(OriginKind.SIGNED, who)

    @classmethod
    def root(cls) -> "Origin":
        return cls(OriginKind.ROOT)

    @classmethod
    def none(cls) -> "Origin":
        return cls(OriginKind.NONE)


def ensure_signed(origin: Origin) -> Hashable:
    """Return the signing account of ``origin`` or raise BadOrigin."""
    if origin.kind is not OriginKind.SIGNED:
        raise BadOrigin(f"expected a signed origin, got {origin.kind.value}")
    return origin.who


def bounded_bytes(data: bytes | bytearray | str | Iterable[int], max_size: int) -> bytes:
    """Convert ``data`` to bytes, rejecting anything longer than ``max_size``."""
    if isinstance(data, str):
        raw = data.encode()
    else:
        raw = bytes(data)
    if len(raw) > max_size:
        raise BoundTooLong(f"length {len(raw)} exceeds bound {max_size}")
    return raw


def _check_lock_id(lock_id: bytes) -> bytes:
    lock_id = bytes(lock_id)
    if len(lock_id) != LOCK_ID_LENGTH:
        raise ValueError(f"lock identifier must be {LOCK_ID_LENGTH} bytes")
    return lock_id


class Balances:
    """Account balances with named locks."""

    def __init__(self, existential_deposit: int = 1) -> None:
        self.existential_deposit = existential_deposit
        self._free: dict[Hashable, int] = {}
        self._locks: dict[Hashable, dict[bytes, int]] = {}

    def minimum_balance(self) -> int:
        return self.existential_deposit

    def deposit_creating(self, who: Hashable, amount: int) -> int:
        """Credit ``amount`` to ``who``, creating the account if needed.

        Returns the amount actually deposited: nothing when a new account
        would fall below the existential deposit.
        """
        if amount <= 0:
            return 0
        if who not in self._free and amount < self.existential_deposit:
            return 0
        self._free[who] = self._free.get(who, 0) + amount
        return amount

    def make_free_balance_be(self, who: Hashable, amount: int) -> None:
        if amount < 0:
            raise ValueError("balance cannot be negative")
        if amount == 0:
            self._free.pop(who, None)
        else:
            self._free[who] = amount

    def total_balance(self, who: Hashable) -> int:
        return self._free.get(who, 0)

    def free_balance(self, who: Hashable) -> int:
        return self._free.get(who, 0)

    def set_lock(self, lock_id: bytes, who: Hashable, amount: int) -> None:
        """Place or replace the lock ``lock_id`` on ``who``."""
        lock_id = _check_lock_id(lock_id)
        if amount <= 0:
            self.remove_lock(lock_id, who)
            return
        self._locks.setdefault(who, {})[lock_id] = amount

    def remove_lock(self, lock_id: bytes, who: Hashable) -> None:
        lock_id = _check_lock_id(lock_id)
        account_locks = self._locks.get(who)
        if account_locks is None:
            return
        account_locks.pop(lock_id, None)
        if not account_locks:
            del self._locks[who]

    def locks(self, who: Hashable) -> dict[bytes, int]:
        return dict(self._locks.get(who, {}))

    def _snapshot(self) -> Any:
        return dict(self._free), copy.deepcopy(self._locks)

    def _restore(self, state: Any) -> None:
        self._free, self._locks = state


class Runtime:
    """A chain state holding balances, events and the registered pallets."""

    def __init__(self, existential_deposit: int = 1) -> None:
        self.block_number = 0
        self.balances = Balances(existential_deposit)
        self._events: list[Any] = []
        self._pallets: list[Any] = []

    def set_block_number(self, number: int) -> None:
        if number < 0:
            raise ValueError("block number cannot be negative")
        self.block_number = number

    def register(self, pallet: Any) -> Any:
        """Attach a pallet whose storage takes part in transactions."""
        self._pallets.append(pallet)
        return pallet

    def deposit_event(self, event: Any) -> None:
        """Record ``event``; events at the genesis block are not kept."""
        if self.block_number == 0:
            return
        self._events.append(event)

    def events(self) -> list[Any]:
        return list(self._events)

    def last_event(self) -> Any | None:
        return self._events[-1] if self._events else None

    @contextmanager
    def transaction(self) -> Iterator["Runtime"]:
        """Roll back every state change if the block raises."""
        events = list(self._events)
        balances = self.balances._snapshot()
        pallets = [pallet._snapshot() for pallet in self._pallets]
        try:
            yield self
        except BaseException:
            self._events = events
            self.balances._restore(balances)
            for pallet, state in zip(self._pallets, pallets):
                pallet._restore(state)
            raise