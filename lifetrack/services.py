import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from lifetrack import activity, health, ledger
from lifetrack.config import EngineSettings, get_settings
from lifetrack.domain import AppData
from lifetrack.networth import money_status, net_worth
from lifetrack.valuation import portfolio_valuation

logger = logging.getLogger(__name__)

Calculator = Callable[[AppData, int, int, Dict[str, Any]], Dict[str, Any]]

HIGH_SPEND_RON = 2000


class DashboardService:
    """Facade building the dashboard report from injected calculators.

    calculators: sequence of functions taking (data, year, month0, acc) -> dict.
    Each sees the partial results of the ones before it through `acc`.
    """

    def __init__(self, calculators: Sequence[Calculator]):
        self.calculators = calculators

    def report(self, data: AppData, year: int, month0: int) -> Dict[str, Any]:
        report = {"year": year, "month0": month0, "steps": [], "errors": [], "result": {}}

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            name = getattr(calc, "__name__", str(calc))
            try:
                out = calc(data, year, month0, acc)
            except Exception as e:
                logger.warning("Calculator %s failed: %s", name, e, exc_info=True)
                report["errors"].append({"calculator": name, "error": str(e)})
                continue
            report["steps"].append({"calculator": name, "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def coaching_message(days_since_weight: Optional[int], month_expenses: float) -> str:
    if days_since_weight is not None and 5 < days_since_weight < 14:
        return "You haven't logged weight in a while. Consistency is key."
    if month_expenses > HIGH_SPEND_RON:
        return "High spending month. Check your subscriptions?"
    return "You're on track! Keep going."


def default_calculators(settings: EngineSettings, today: date) -> Sequence[Calculator]:

    def net_worth_calc(data, year, month0, acc):
        return {"net_worth": net_worth(data, settings.net_worth_currency)}

    def portfolio_calc(data, year, month0, acc):
        return {"portfolio": portfolio_valuation(data.assets, data.deposits, data.snapshots)}

    def investments_calc(data, year, month0, acc):
        return {
            "investments": activity.month_activity(
                data.assets, data.deposits, data.snapshots, year, month0,
                trend_months=settings.trend_months,
                movers_limit=settings.top_movers_limit,
            ),
            "money_status": money_status(data.deposits, year, month0),
        }

    def expenses_calc(data, year, month0, acc):
        return {
            "expense_total": activity.expense_total(data.expenses, year, month0),
            "expense_comparison": activity.expense_comparison(data.expenses, year, month0),
            "expense_trend": activity.expense_trend(data.expenses, year, month0, settings.trend_months),
            "top_categories": activity.category_breakdown(
                data.expenses, year, month0, settings.top_categories_limit
            ),
        }

    def savings_calc(data, year, month0, acc):
        return {
            "savings": ledger.bucket_summaries(data.savings_buckets, data.savings_transactions),
            "emergency": ledger.emergency_summary(
                data.emergency_transactions, data.settings.emergency_target
            ),
        }

    def health_calc(data, year, month0, acc):
        days = health.days_since_last_weight(data.health_logs, today)
        return {
            "weight": health.weight_summary(
                data.health_logs, data.settings,
                window_size=settings.weight_window,
                periods=settings.projection_periods,
            ),
            "days_since_weight": days,
            "health_status": health.health_status(days),
        }

    def coaching_calc(data, year, month0, acc):
        return {
            "coaching": coaching_message(acc.get("days_since_weight"), acc.get("expense_total", 0.0)),
        }

    return (
        net_worth_calc,
        portfolio_calc,
        investments_calc,
        expenses_calc,
        savings_calc,
        health_calc,
        coaching_calc,
    )


def default_dashboard(settings: Optional[EngineSettings] = None, today: Optional[date] = None) -> DashboardService:
    return DashboardService(default_calculators(settings or get_settings(), today or date.today()))
