import pytest

from lifetrack.domain import (
    AppData,
    Asset,
    Deposit,
    EmergencyTransaction,
    SavingsBucket,
    SavingsTransaction,
    Settings,
    Snapshot,
)
from lifetrack.errors import CurrencyMismatchError
from lifetrack.money import Money, convert, eur, ron, total
from lifetrack.networth import money_status, net_worth


def make_data(rate=5.0):
    return AppData(
        assets=(Asset("a1", "VWCE", "ETF"),),
        deposits=(Deposit("d1", "a1", "2024-03-05", 1000),),
        snapshots=(Snapshot("s1", "a1", "2024-03-10", 1200),),
        savings_buckets=(SavingsBucket("b1", "Holiday"),),
        savings_transactions=(SavingsTransaction("t1", "b1", 1000, "2024-01-01", "Add"),),
        emergency_transactions=(EmergencyTransaction("e1", 500, "2024-01-01", "Add"),),
        settings=Settings(eur_rate=rate),
    )


def test_money_refuses_mixed_currencies():
    with pytest.raises(CurrencyMismatchError):
        eur(10) + ron(10)
    assert eur(10) + eur(5) == Money(15, "EUR")
    assert (ron(10) - ron(4)).amount == 6


def test_convert_both_directions():
    assert convert(eur(10), "RON", 5.0) == ron(50)
    assert convert(ron(50), "EUR", 5.0) == eur(10)
    assert convert(ron(50), "RON", 5.0) == ron(50)
    with pytest.raises(ValueError):
        convert(ron(1), "USD", 5.0)


def test_convert_falls_back_on_bad_rate():
    assert convert(eur(1), "RON", 0).amount == pytest.approx(4.97)


def test_total_in_single_currency():
    assert total((ron(1), ron(2)), "RON") == ron(3)
    with pytest.raises(CurrencyMismatchError):
        total((ron(1), eur(2)), "RON")


def test_net_worth_in_ron():
    nw = net_worth(make_data(), "RON")
    assert nw.investments == ron(6000)
    assert nw.savings == ron(1000)
    assert nw.emergency == ron(500)
    assert nw.total == ron(7500)


def test_net_worth_in_eur():
    nw = net_worth(make_data(), "EUR")
    assert nw.investments == eur(1200)
    assert nw.total.amount == pytest.approx(1500)
    assert nw.total.currency == "EUR"


def test_money_status():
    deposits = make_data().deposits
    assert money_status(deposits, 2024, 2) == "good"
    assert money_status(deposits, 2024, 3) == "neutral"
