import pytest

from fennelchain.certificate import (
    CertificateExists,
    CertificateLock,
    CertificateNotOwned,
    CertificatePallet,
    CertificateRevoked,
    CertificateSent,
    CertificateUnlock,
    InsufficientBalance,
    WeightInfo,
)
from fennelchain.runtime import BadOrigin, DbWeight, Origin, Runtime, Weight


@pytest.fixture
def chain():
    rt = Runtime(existential_deposit=1)
    rt.set_block_number(1)
    certificates = CertificatePallet(rt, lock_id=b"certlock", lock_price=10)
    for account in (1, 2):
        rt.balances.deposit_creating(account, 100)
    return rt, certificates


@pytest.fixture
def sent(chain):
    rt, certificates = chain
    certificates.send_certificate(Origin.signed(1), 1)
    assert rt.last_event() == CertificateSent(sender=1, recipient=1)
    return rt, certificates


def test_send_certificate(sent):
    _, certificates = sent
    assert certificates.certificate_list(1, 1) is True


@pytest.mark.parametrize(
    "call, signer, error",
    [
        ("send_certificate", 1, CertificateExists),
        ("revoke_certificate", 2, CertificateNotOwned),
    ],
)
def test_failing_call_changes_nothing(sent, call, signer, error):
    rt, certificates = sent
    events_before = rt.events()
    with pytest.raises(error):
        getattr(certificates, call)(Origin.signed(signer), 1)
    assert rt.events() == events_before
    assert certificates.certificate_list(1, 1) is True


def test_revoke_certificate(sent):
    rt, certificates = sent
    certificates.revoke_certificate(Origin.signed(1), 1)
    assert rt.last_event() == CertificateRevoked(sender=1, recipient=1)
    assert certificates.certificate_list(1, 1) is False
    assert certificates.has_certificate_entry(1, 1) is True


@pytest.mark.parametrize("call", ["send_certificate", "revoke_certificate"])
def test_call_without_balance_fails(chain, call):
    _, certificates = chain
    with pytest.raises(InsufficientBalance):
        getattr(certificates, call)(Origin.signed(3), 1)
    assert certificates.has_certificate_entry(3, 1) is False


def test_unsigned_origin_rejected(chain):
    with pytest.raises(BadOrigin):
        chain[1].send_certificate(Origin.root(), 1)


def test_lock_follows_send_and_revoke(chain):
    rt, certificates = chain
    certificates.send_certificate(Origin.signed(1), 2)
    assert rt.balances.locks(1) == {b"certlock": 10}
    certificates.revoke_certificate(Origin.signed(1), 2)
    assert rt.balances.locks(1) == {}
    assert rt.events() == [
        CertificateLock(account=1, amount=100),
        CertificateSent(sender=1, recipient=2),
        CertificateUnlock(account=1, amount=100),
        CertificateRevoked(sender=1, recipient=2),
    ]


def test_failed_send_leaves_no_lock(sent):
    rt, certificates = sent
    certificates.revoke_certificate(Origin.signed(1), 1)
    with pytest.raises(CertificateExists):
        certificates.send_certificate(Origin.signed(1), 1)
    assert rt.balances.locks(1) == {}


def test_unknown_pair_defaults_to_false(chain):
    certificates = chain[1]
    assert (certificates.certificate_list(5, 6), certificates.has_certificate_entry(5, 6)) == (
        False,
        False,
    )


@pytest.mark.parametrize(
    "name, ref_time",
    [
        ("send_certificate", 49_661_000),
        ("revoke_certificate", 51_129_000),
        ("send_certificate_heavy_storage", 93_159_000),
        ("revoke_certificate_heavy_storage", 96_624_000),
    ],
)
def test_base_weights(name, ref_time):
    assert getattr(WeightInfo(DbWeight()), name)() == Weight.from_parts(ref_time, 4764)


@pytest.mark.parametrize("read, write, extra", [(1, 0, 3), (0, 1, 2)])
def test_weights_count_db_access(read, write, extra):
    base = WeightInfo(DbWeight()).send_certificate()
    measured = WeightInfo(DbWeight(read=read, write=write)).send_certificate()
    assert measured.ref_time - base.ref_time == extra
    assert measured.proof_size == base.proof_size


def test_default_weights_exceed_base():
    default = WeightInfo().send_certificate().ref_time
    assert default > WeightInfo(DbWeight()).send_certificate().ref_time