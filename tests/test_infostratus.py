import pytest

from fennelchain.infostratus import (
    CannotAssignOwnSubmission,
    InfostratusLock,
    InfostratusPallet,
    InsufficientBalance,
    SubmissionAlreadyAssigned,
    SubmissionAssigned,
    SubmissionDoesNotExist,
    SubmissionExists,
    SubmissionSent,
    WeightInfo,
)
from fennelchain.runtime import BadOrigin, BoundTooLong, DbWeight, Origin, Runtime

RESOURCE = b"TEST"


@pytest.fixture
def runtime():
    rt = Runtime(existential_deposit=1)
    rt.set_block_number(1)
    return rt


@pytest.fixture
def pallet(runtime):
    return InfostratusPallet(runtime)


def test_create_submission_entry_works_and_emits_event(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.last_event() == SubmissionSent(who=1, resource_location=RESOURCE)
    assert pallet.has_submission(1, RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is False


def test_create_submission_places_lock_and_emits_lock_event(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.balances.locks(1) == {b"infolock": 10}
    assert runtime.events()[0] == InfostratusLock(account=1, amount=100)


def test_cannot_create_duplicate_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    before = runtime.events()
    with pytest.raises(SubmissionExists):
        pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.events() == before


def test_request_submission_assignment_works_and_emits_event(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    runtime.balances.deposit_creating(2, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    assert runtime.last_event() == SubmissionAssigned(resource_location=RESOURCE, who=2)
    assert pallet.assignments_list(2, RESOURCE) is True
    assert pallet.has_assignment(2, RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is True


def test_cannot_assign_nonexistent_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    runtime.balances.deposit_creating(2, 100)
    with pytest.raises(SubmissionDoesNotExist):
        pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    assert runtime.events() == []
    assert runtime.balances.locks(2) == {}


def test_cannot_assign_already_assigned_submission(runtime, pallet):
    for who in (1, 2, 3):
        runtime.balances.deposit_creating(who, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    before = runtime.events()
    with pytest.raises(SubmissionAlreadyAssigned):
        pallet.request_submission_assignment(Origin.signed(3), 1, RESOURCE)
    assert runtime.events() == before
    assert pallet.has_assignment(3, RESOURCE) is False


def test_cannot_assign_own_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    with pytest.raises(CannotAssignOwnSubmission):
        pallet.request_submission_assignment(Origin.signed(1), 1, RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is False


def test_unfunded_account_cannot_submit(runtime, pallet):
    with pytest.raises(InsufficientBalance):
        pallet.create_submission_entry(Origin.signed(7), RESOURCE)
    assert pallet.has_submission(7, RESOURCE) is False


def test_unfunded_account_cannot_request_assignment(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    with pytest.raises(InsufficientBalance):
        pallet.request_submission_assignment(Origin.signed(9), 1, RESOURCE)


def test_unsigned_origin_rejected(pallet):
    with pytest.raises(BadOrigin):
        pallet.create_submission_entry(Origin.root(), RESOURCE)


def test_resource_longer_than_bound_rejected(runtime):
    small = InfostratusPallet(runtime, max_size=4)
    runtime.balances.deposit_creating(1, 100)
    with pytest.raises(BoundTooLong):
        small.create_submission_entry(Origin.signed(1), b"TOOLONG")


def test_string_and_bytes_locations_are_equivalent(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), "TEST")
    assert pallet.has_submission(1, b"TEST")


def test_weights_without_db_cost():
    weights = WeightInfo(DbWeight(read=0, write=0))
    assert weights.create_submission_entry().ref_time == 49_851_000
    assert weights.create_submission_entry_heavy_storage().ref_time == 102_626_000
    assert weights.request_submission_assignment().ref_time == 76_958_000
    assert weights.request_submission_assignment_heavy_storage().ref_time == 152_604_000
    assert weights.request_submission_assignment().proof_size == 4764


def test_weights_include_db_cost():
    free = WeightInfo(DbWeight(read=0, write=0))
    costly = WeightInfo(DbWeight(read=1, write=10))
    diff = costly.request_submission_assignment().ref_time - free.request_submission_assignment().ref_time
    assert diff == 4 * 1 + 3 * 10