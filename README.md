# fennelchain

In-memory state machines for a small ledger protocol: certificates between
accounts, numbered identities with key/value traits, submissions awaiting
community verification, and announced keys. Each module runs on a shared
`Runtime`, which keeps account balances and locks, records events, and
undoes every change a failing call made.

No third-party libraries are needed.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `fennelchain.runtime`

- `Runtime(existential_deposit=1)`: holds `block_number`, a `Balances`
  instance as `balances`, and the recorded events. `set_block_number`,
  `events()`, `last_event()`, `deposit_event(event)` and `register(pallet)`.
  Events deposited while the block number is 0 are not kept, so set a block
  number first if you want to see them. `transaction()` is a context manager
  that restores events, balances and the storage of every registered pallet
  if its block raises.
- `Balances`: `deposit_creating`, `make_free_balance_be`, `total_balance`,
  `free_balance`, `minimum_balance`, and named locks via `set_lock`,
  `remove_lock` and `locks(who)`. A lock identifier must be exactly 8 bytes.
- `Origin.signed(who)`, `Origin.root()`, `Origin.none()` and
  `ensure_signed(origin)`, which returns the signing account or raises
  `BadOrigin`.
- `bounded_bytes(data, max_size)`: turns bytes, a string or an iterable of
  ints into `bytes`, raising `BoundTooLong` if it is longer than `max_size`.
- `Weight` (`from_parts`, `saturating_add`, `saturating_mul`) and `DbWeight`
  (`reads`, `writes`, `reads_writes`).
- `DispatchError`, the base of every error a call raises; `BadOrigin` and
  `BoundTooLong` derive from it.

### `fennelchain.certificate`

`CertificatePallet(runtime, lock_id=b"certlock", lock_price=10)`.
`send_certificate(origin, recipient)` and `revoke_certificate(origin, recipient)`
both need the sender's balance to be at least the existential deposit
(`InsufficientBalance` otherwise). Sending sets a lock of `lock_price` on the
sender and raises `CertificateExists` if an entry for the pair is already
there, live or revoked. Revoking removes the lock and raises
`CertificateNotOwned` if there is no entry. `certificate_list(sender, recipient)`
tells whether a live certificate exists; `has_certificate_entry` tells whether
any entry exists. Events: `CertificateLock`, `CertificateSent`,
`CertificateUnlock`, `CertificateRevoked`.

### `fennelchain.identity`

`IdentityPallet(runtime, max_size=1024)`. `create_identity(origin)` gives the
signer the next identity number, starting at 0; `revoke_identity`,
`add_or_update_identity_trait` and `remove_identity_trait` raise
`IdentityNotOwned` unless the signer owns the identity. `identity_number()`,
`set_identity_number(value)`, `signal_count()`, `identity_list(identity_id)`
(the owner or `None`) and `identity_trait_list(identity_id, key)` (the value,
or `b""` when unset). Creation raises `StorageOverflow` when the counter would
pass 2**32 - 1. Events: `IdentityCreated`, `IdentityRevoked`, `IdentityUpdated`.

### `fennelchain.infostratus`

`InfostratusPallet(runtime, max_size=1024, lock_id=b"infolock", lock_price=10)`.
`create_submission_entry(origin, resource_location)` records a submission;
`request_submission_assignment(origin, poster, resource_location)` assigns it
to the signer. Both need a funded signer and set a lock on it. Errors:
`InsufficientBalance`, `SubmissionExists`, `CannotAssignOwnSubmission`,
`SubmissionDoesNotExist`, `SubmissionAlreadyAssigned`. Queries:
`submissions_list`, `assignments_list`, `has_submission`, `has_assignment`.
Events: `InfostratusLock`, `SubmissionSent`, `SubmissionAssigned`.

### `fennelchain.keystore`

`KeystorePallet(runtime, max_size=1024)`. `announce_key(origin, fingerprint, location)`
(`KeyExists` if already announced), `revoke_key(origin, key_index)`
(`KeyDoesNotExist` if absent) and `issue_encryption_key(origin, key)`, which
replaces any earlier key and raises `ValueError` unless the key is exactly
32 bytes. `key(who, fingerprint)` and `encryption_key(who)` return the stored
value or `None`. Events: `KeyAnnounced`, `KeyRevoked`, `EncryptionKeyIssued`.

Each of the four modules also has a `WeightInfo` class giving the benchmarked
`Weight` of each call; every pallet holds one as its `weights` attribute.

## Example

```python
from fennelchain.runtime import Runtime, Origin
from fennelchain.certificate import CertificatePallet, CertificateSent

runtime = Runtime(existential_deposit=1)
certificates = CertificatePallet(runtime, lock_id=b"certlock", lock_price=10)

runtime.set_block_number(1)
runtime.balances.deposit_creating(1, 100)
certificates.send_certificate(Origin.signed(1), 2)

assert certificates.certificate_list(1, 2) is True
assert runtime.balances.locks(1) == {b"certlock": 10}
assert runtime.last_event() == CertificateSent(sender=1, recipient=2)
```

A call that fails raises a subclass of `DispatchError`, such as
`CertificateExists` or `IdentityNotOwned`, and leaves storage, balances and
events as they were before the call.

## What this package does not do

Everything lives in memory in a single process. There is no block
production, networking, consensus, persistent storage, command line or RPC
server. Weights are figures you can read; calls do not charge fees for them.
Locks are recorded on the account but do not reduce its free balance, and
there are no transfers for them to restrict.