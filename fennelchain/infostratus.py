"""Submissions of online information for community verification, and their assignments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable

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

ASSIGNMENT_EXISTS = True
ASSIGNMENT_DOES_NOT_EXIST = False
DEFAULT_MAX_SIZE = 1024
DEFAULT_LOCK_ID = b"infolock"
DEFAULT_LOCK_PRICE = 10

BytesLike = bytes | bytearray | str | Iterable[int]


class SubmissionDoesNotExist(DispatchError):
    """The poster has no submission at that resource location."""


class SubmissionExists(DispatchError):
    """The submission already exists."""


class SubmissionAlreadyAssigned(DispatchError):
    """The submission has already been assigned to a verifier."""


class InsufficientBalance(DispatchError):
    """The account holds less than the minimum balance."""


class CannotAssignOwnSubmission(DispatchError):
    """An account may not verify its own submission."""


@dataclass(frozen=True)
class SubmissionSent:
    who: Hashable
    resource_location: bytes


@dataclass(frozen=True)
class SubmissionAssigned:
    resource_location: bytes
    who: Hashable


@dataclass(frozen=True)
class InfostratusLock:
    account: Hashable
    amount: int


@dataclass(frozen=True)
class InfostratusUnlock:
    account: Hashable
    amount: int


class WeightInfo:
    """Benchmarked weights of the infostratus calls."""

    def __init__(self, db_weight: DbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _weight(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        return (
            Weight.from_parts(ref_time, proof_size)
            .saturating_add(self.db_weight.reads(reads))
            .saturating_add(self.db_weight.writes(writes))
        )

    def create_submission_entry(self) -> Weight:
        return self._weight(49_851_000, 4764, 3, 2)

    def create_submission_entry_heavy_storage(self) -> Weight:
        return self._weight(102_626_000, 4764, 3, 2)

    def request_submission_assignment(self) -> Weight:
        return self._weight(76_958_000, 4764, 4, 3)

    def request_submission_assignment_heavy_storage(self) -> Weight:
        return self._weight(152_604_000, 4764, 4, 3)


class InfostratusPallet:
    """Tracks submissions per poster and the assignments taken by verifiers."""

    def __init__(
        self,
        runtime: Runtime,
        max_size: int = DEFAULT_MAX_SIZE,
        lock_id: bytes = DEFAULT_LOCK_ID,
        lock_price: int = DEFAULT_LOCK_PRICE,
    ) -> None:
        self.runtime = runtime
        self.max_size = max_size
        self.lock_id = lock_id
        self.lock_price = lock_price
        self.weights = WeightInfo()
        self._submissions: dict[tuple[Hashable, bytes], bool] = {}
        self._assignments: dict[tuple[Hashable, bytes], bool] = {}
        runtime.register(self)

    def _bound(self, data: BytesLike) -> bytes:
        return bounded_bytes(data, self.max_size)

    def _ensure_funded(self, who: Hashable) -> None:
        balances = self.runtime.balances
        if balances.total_balance(who) < balances.minimum_balance():
            raise InsufficientBalance(f"account {who!r} is below the minimum balance")

    def _lock(self, who: Hashable) -> None:
        balances = self.runtime.balances
        balances.set_lock(self.lock_id, who, self.lock_price)
        self.runtime.deposit_event(
            InfostratusLock(account=who, amount=balances.free_balance(who))
        )

    def create_submission_entry(self, origin: Origin, resource_location: BytesLike) -> None:
        """Announce that the signer wants ``resource_location`` verified."""
        resource_location = self._bound(resource_location)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if (who, resource_location) in self._submissions:
                raise SubmissionExists(f"{who!r} already submitted {resource_location!r}")
            self._lock(who)
            self._submissions[(who, resource_location)] = ASSIGNMENT_DOES_NOT_EXIST
            self.runtime.deposit_event(
                SubmissionSent(who=who, resource_location=resource_location)
            )

    def request_submission_assignment(
        self, origin: Origin, poster: Hashable, resource_location: BytesLike
    ) -> None:
        """Assign the poster's submission at ``resource_location`` to the signer."""
        resource_location = self._bound(resource_location)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if who == poster:
                raise CannotAssignOwnSubmission(f"{who!r} cannot verify its own submission")
            if (poster, resource_location) not in self._submissions:
                raise SubmissionDoesNotExist(
                    f"{poster!r} has no submission at {resource_location!r}"
                )
            if self._submissions[(poster, resource_location)]:
                raise SubmissionAlreadyAssigned(
                    f"submission {resource_location!r} of {poster!r} is already assigned"
                )
            self._lock(who)
            self._assignments[(who, resource_location)] = ASSIGNMENT_EXISTS
            self._submissions[(poster, resource_location)] = ASSIGNMENT_EXISTS
            self.runtime.deposit_event(
                SubmissionAssigned(resource_location=resource_location, who=who)
            )

    def submissions_list(self, who: Hashable, resource_location: BytesLike) -> bool:
        """Whether ``who``'s submission at the location has been assigned."""
        return self._submissions.get((who, self._bound(resource_location)), False)

    def assignments_list(self, who: Hashable, resource_location: BytesLike) -> bool:
        """Whether ``who`` holds an assignment for the location."""
        return self._assignments.get((who, self._bound(resource_location)), False)

    def has_submission(self, who: Hashable, resource_location: BytesLike) -> bool:
        """Whether ``who`` has any submission entry at the location."""
        return (who, self._bound(resource_location)) in self._submissions

    def has_assignment(self, who: Hashable, resource_location: BytesLike) -> bool:
        """Whether ``who`` has any assignment entry for the location."""
        return (who, self._bound(resource_location)) in self._assignments

    def _snapshot(self) -> Any:
        return dict(self._submissions), dict(self._assignments)

    def _restore(self, state: Any) -> None:
        self._submissions, self._assignments = state