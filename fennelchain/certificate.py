"""Certificates sent from one account to another, backed by a balance lock."""

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
    ensure_signed,
)

CERTIFICATE_EXISTS = True
DEFAULT_LOCK_ID = b"certlock"
DEFAULT_LOCK_PRICE = 10

# Every certificate call touches the same storage: three reads, two writes.
_PROOF_SIZE = 4764
_READS, _WRITES = 3, 2


class CertificateNotOwned(DispatchError):
    """The current account does not own the certificate."""


class CertificateExists(DispatchError):
    """The certificate already exists."""


class InsufficientBalance(DispatchError):
    """The account holds less than the minimum balance."""


@dataclass(frozen=True)
class _PairEvent:
    sender: Hashable
    recipient: Hashable


class CertificateSent(_PairEvent):
    """A certificate was sent."""


class CertificateRevoked(_PairEvent):
    """A certificate was revoked."""


@dataclass(frozen=True)
class _LockEvent:
    account: Hashable
    amount: int


class CertificateLock(_LockEvent):
    """Funds were locked for a certificate."""


class CertificateUnlock(_LockEvent):
    """The certificate lock was released."""


class WeightInfo:
    """Benchmarked weights of the certificate calls."""

    def __init__(self, db_weight: DbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _measured(self, ref_time: int) -> Weight:
        return Weight.from_parts(ref_time, _PROOF_SIZE).saturating_add(
            self.db_weight.reads_writes(_READS, _WRITES)
        )

    def send_certificate(self) -> Weight:
        return self._measured(49_661_000)

    def revoke_certificate(self) -> Weight:
        return self._measured(51_129_000)

    def send_certificate_heavy_storage(self) -> Weight:
        return self._measured(93_159_000)

    def revoke_certificate_heavy_storage(self) -> Weight:
        return self._measured(96_624_000)


class CertificatePallet:
    """Stores which sender has issued a certificate to which recipient."""

    def __init__(
        self,
        runtime: Runtime,
        lock_id: bytes = DEFAULT_LOCK_ID,
        lock_price: int = DEFAULT_LOCK_PRICE,
    ) -> None:
        self.runtime = runtime
        self.lock_id = lock_id
        self.lock_price = lock_price
        self.weights = WeightInfo()
        self._certificates: dict[tuple[Hashable, Hashable], bool] = {}
        runtime.register(self)

    def _funded_signer(self, origin: Origin) -> Hashable:
        who = ensure_signed(origin)
        balances = self.runtime.balances
        if balances.total_balance(who) < balances.minimum_balance():
            raise InsufficientBalance(f"account {who!r} is below the minimum balance")
        return who

    def _record(
        self,
        who: Hashable,
        recipient: Hashable,
        live: bool,
        lock_event: type[_LockEvent],
        event: type[_PairEvent],
    ) -> None:
        amount = self.runtime.balances.free_balance(who)
        self.runtime.deposit_event(lock_event(account=who, amount=amount))
        self._certificates[(who, recipient)] = live
        self.runtime.deposit_event(event(sender=who, recipient=recipient))

    def send_certificate(self, origin: Origin, recipient: Hashable) -> None:
        """Issue a certificate from the signer to ``recipient`` and lock funds."""
        with self.runtime.transaction():
            who = self._funded_signer(origin)
            if (who, recipient) in self._certificates:
                raise CertificateExists(f"{who!r} already certified {recipient!r}")
            self.runtime.balances.set_lock(self.lock_id, who, self.lock_price)
            self._record(who, recipient, CERTIFICATE_EXISTS, CertificateLock, CertificateSent)

    def revoke_certificate(self, origin: Origin, recipient: Hashable) -> None:
        """Revoke the signer's certificate to ``recipient`` and release the lock."""
        with self.runtime.transaction():
            who = self._funded_signer(origin)
            if (who, recipient) not in self._certificates:
                raise CertificateNotOwned(f"{who!r} holds no certificate for {recipient!r}")
            self.runtime.balances.remove_lock(self.lock_id, who)
            self._record(
                who, recipient, not CERTIFICATE_EXISTS, CertificateUnlock, CertificateRevoked
            )

    def certificate_list(self, sender: Hashable, recipient: Hashable) -> bool:
        """Whether ``sender`` holds a live certificate for ``recipient``."""
        return self._certificates.get((sender, recipient), False)

    def has_certificate_entry(self, sender: Hashable, recipient: Hashable) -> bool:
        """Whether any entry, live or revoked, exists for the pair."""
        return (sender, recipient) in self._certificates

    def _snapshot(self) -> Any:
        return dict(self._certificates)

    def _restore(self, state: Any) -> None:
        self._certificates = state