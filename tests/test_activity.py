import pytest

from lifetrack.activity import (
    NEW_SPEND_LABEL,
    category_breakdown,
    end_of_month_portfolio_value,
    expense_comparison,
    expense_total,
    expense_trend,
    frequent_categories,
    investment_comparison,
    month_activity,
    month_over_month,
    monthly_flow,
    top_movers,
    trend,
)
from lifetrack.domain import Asset, Deposit, Expense, Snapshot


def make_expense(id, amount, date, category="Groceries"):
    return Expense(id=id, amount=amount, date=date, category=category, merchant="Shop")


def make_assets():
    return (
        Asset("a1", "VWCE", "ETF"),
        Asset("a2", "BTC", "Crypto"),
        Asset("a3", "AAPL", "Stock"),
    )


def test_monthly_flow_splits_directions():
    deposits = (
        Deposit("d1", "a1", "2024-03-01", 500),
        Deposit("d2", "a2", "2024-03-15", -200),
        Deposit("d3", "a1", "2024-03-31", 100),
        Deposit("d4", "a1", "2024-04-01", 999),
        Deposit("d5", "a1", "bad-date", 999),
    )
    flow = monthly_flow(deposits, 2024, 2)
    assert flow.deposited == 600
    assert flow.withdrawn == 200
    assert flow.net_flow == 400


def test_end_of_month_value_replays_history():
    assets = make_assets()[:2]
    deposits = (
        Deposit("d1", "a1", "2024-01-05", 1000),
        Deposit("d2", "a2", "2024-01-20", 300),
        Deposit("d3", "a2", "2024-02-02", 200),
    )
    snapshots = (
        Snapshot("s1", "a1", "2024-01-31", 1050),
        Snapshot("s2", "a1", "2024-02-01", 1100),
    )
    # January: a1 priced at 1050, a2 falls back to 300 invested
    assert end_of_month_portfolio_value(assets, deposits, snapshots, 2024, 0) == 1350
    # February: a1 at 1100, a2 invested 500
    assert end_of_month_portfolio_value(assets, deposits, snapshots, 2024, 1) == 1600
    # before anything happened
    assert end_of_month_portfolio_value(assets, deposits, snapshots, 2023, 11) == 0


def test_month_over_month_percent():
    c = month_over_month(120, 100)
    assert c.diff == 20
    assert c.percent == pytest.approx(20.0)
    assert c.percent_str == "+20%"
    assert c.is_new is False


def test_month_over_month_negative_previous_uses_magnitude():
    c = month_over_month(-50, -100)
    assert c.diff == 50
    assert c.percent == pytest.approx(50.0)
    assert c.percent_str == "+50%"


def test_month_over_month_decrease():
    assert month_over_month(80, 100).percent_str == "-20%"


def test_month_over_month_rounds_ties_away_from_zero():
    assert month_over_month(205, 200).percent_str == "+3%"
    assert month_over_month(195, 200).percent_str == "-3%"
    assert month_over_month(201, 200).percent_str == "+1%"


def test_month_over_month_zero_previous():
    new = month_over_month(40, 0)
    assert new.is_new is True
    assert new.percent is None
    assert new.percent_str == "New"

    flat = month_over_month(0, 0)
    assert flat.is_new is False
    assert flat.percent_str == "0%"


def test_expense_comparison_against_december():
    expenses = (
        make_expense("e1", 70, "2024-01-03"),
        make_expense("e2", 50, "2024-01-31"),
        make_expense("e3", 100, "2023-12-20"),
    )
    c = expense_comparison(expenses, 2024, 0)
    assert c.diff == 20
    assert c.percent_str == "+20%"


def test_expense_comparison_new_spend():
    c = expense_comparison((make_expense("e1", 70, "2024-01-03"),), 2024, 0)
    assert c.percent_str == NEW_SPEND_LABEL


def test_trend_series_ends_at_anchor():
    values = {(2023, 11): 10.0, (2024, 0): -30.0, (2024, 1): 5.0}
    t = trend(4, 2024, 1, lambda y, m: values.get((y, m), 0.0))

    assert [p.label for p in t] == ["Nov", "Dec", "Jan", "Feb"]
    assert [p.value for p in t] == [0.0, 10.0, -30.0, 5.0]
    assert [p.is_anchor for p in t] == [False, False, False, True]
    assert t.max_value == 30.0
    assert t.anchor.month0 == 1
    # restartable
    assert list(t) == list(t)


def test_expense_trend_totals():
    expenses = (
        make_expense("e1", 100, "2024-01-03"),
        make_expense("e2", 20, "2024-03-03"),
    )
    t = expense_trend(expenses, 2024, 2, n=3)
    assert [p.value for p in t] == [100, 0, 20]
    assert t.max_value == 100


def test_top_movers():
    assets = make_assets()
    deposits = (
        Deposit("d1", "a1", "2024-03-01", 100),
        Deposit("d2", "a2", "2024-03-02", 500),
        Deposit("d3", "a3", "2024-03-03", 50),
        Deposit("d4", "a3", "2024-03-04", -50),
        Deposit("d5", "a1", "2024-03-05", -300),
        Deposit("d6", "gone", "2024-03-05", 9999),
        Deposit("d7", "a3", "2024-04-01", 700),
    )
    movers = top_movers(deposits, 2024, 2, assets)
    assert [(m.name, m.amount) for m in movers] == [("BTC", 500), ("VWCE", -200)]
    assert len(top_movers(deposits, 2024, 2, assets, limit=1)) == 1


def test_investment_comparison_uses_net_flow():
    deposits = (
        Deposit("d1", "a1", "2024-02-01", 100),
        Deposit("d2", "a1", "2024-03-01", 300),
        Deposit("d3", "a1", "2024-03-02", -50),
    )
    c = investment_comparison(deposits, 2024, 2)
    assert c.current == 250
    assert c.previous == 100
    assert c.percent_str == "+150%"


def test_month_activity_bundles_views():
    assets = make_assets()[:1]
    deposits = (Deposit("d1", "a1", "2024-02-05", 1000),)
    snapshots = (Snapshot("s1", "a1", "2024-03-10", 1100),)
    act = month_activity(assets, deposits, snapshots, 2024, 2, trend_months=3)

    assert act.end_value == 1100
    assert act.previous_end_value == 1000
    assert act.value_change == 100
    assert act.flow.net_flow == 0
    assert len(act.trend) == 3
    assert act.movers == ()


def test_category_breakdown_and_total():
    expenses = (
        make_expense("e1", 100, "2024-03-01", "Groceries"),
        make_expense("e2", 300, "2024-03-02", "Rent / Mortgage"),
        make_expense("e3", 50, "2024-03-03", "Groceries"),
        make_expense("e4", 999, "2024-02-03", "Travel"),
    )
    assert expense_total(expenses, 2024, 2) == 450
    assert category_breakdown(expenses, 2024, 2) == (("Rent / Mortgage", 300), ("Groceries", 150))
    assert category_breakdown(expenses, 2024, 2, limit=1) == (("Rent / Mortgage", 300),)


def test_frequent_categories_keeps_settings_order_on_ties():
    categories = ("Groceries", "Car", "Transport", "Other")
    expenses = (
        make_expense("e1", 1, "2024-03-01", "Transport"),
        make_expense("e2", 1, "2024-03-01", "Car"),
        make_expense("e3", 1, "2024-03-01", "Transport"),
        make_expense("e4", 1, "2024-03-01", "Unlisted"),
    )
    assert frequent_categories(categories, expenses) == ("Transport", "Car")
