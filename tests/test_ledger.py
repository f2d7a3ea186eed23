from lifetrack.domain import EmergencyTransaction, SavingsBucket, SavingsTransaction
from lifetrack.ledger import (
    bucket_balance,
    bucket_summaries,
    emergency_balance,
    emergency_summary,
    history,
    running_balance,
    target_progress,
    total_savings,
)


def make_em(id, amount, type_, date="2024-01-01"):
    return EmergencyTransaction(id=id, amount=amount, date=date, type=type_)


def make_st(id, bucket_id, amount, type_, date="2024-01-01"):
    return SavingsTransaction(id=id, bucket_id=bucket_id, amount=amount, date=date, type=type_)


def test_emergency_balance_end_to_end():
    trans = (
        make_em("t1", 500, "Add"),
        make_em("t2", -200, "Withdraw"),
        make_em("t3", 50, "Add"),
    )
    assert running_balance(trans) == 350
    assert emergency_balance(trans) == 350


def test_running_balance_is_additive_over_splits():
    trans = (
        make_em("t1", 500, "Add"),
        make_em("t2", 120, "Withdraw"),
        make_em("t3", 80, "Add"),
        make_em("t4", 30, "Withdraw"),
    )
    whole = running_balance(trans)
    for k in range(len(trans) + 1):
        assert running_balance(trans[:k]) + running_balance(trans[k:]) == whole


def test_running_balance_empty():
    assert running_balance(()) == 0


def test_bucket_balance_scoped_by_bucket():
    trans = (
        make_st("t1", "b1", 1000, "Add"),
        make_st("t2", "b1", 300, "Withdraw"),
        make_st("t3", "b2", 50, "Add"),
    )
    assert bucket_balance(trans, "b1") == 700
    assert bucket_balance(trans, "b2") == 50
    assert bucket_balance(trans, "nope") == 0


def test_target_progress():
    assert target_progress(250, 1000) == 25
    assert target_progress(1500, 1000) == 100
    assert target_progress(100, None) is None
    assert target_progress(100, 0) is None


def test_bucket_summaries_and_total_ignore_orphans():
    buckets = (SavingsBucket("b1", "Holiday", 2000), SavingsBucket("b2", "Laptop"))
    trans = (
        make_st("t1", "b1", 500, "Add"),
        make_st("t2", "b2", 100, "Add"),
        make_st("t3", "deleted", 900, "Add"),
    )
    rows = bucket_summaries(buckets, trans)
    assert rows[0].progress == 25
    assert rows[1].progress is None
    assert total_savings(buckets, trans) == 600


def test_emergency_summary():
    summary = emergency_summary((make_em("t1", 2500, "Add"),), 10000)
    assert summary.balance == 2500
    assert summary.progress == 25
    assert summary.remaining == 7500

    no_target = emergency_summary((), 0)
    assert no_target.progress is None


def test_history_newest_first():
    trans = (
        make_em("t1", 1, "Add", "2024-01-01"),
        make_em("t2", 1, "Add", "2024-03-01"),
        make_em("t3", 1, "Add", "2024-02-01"),
    )
    assert [t.id for t in history(trans)] == ["t2", "t3", "t1"]
