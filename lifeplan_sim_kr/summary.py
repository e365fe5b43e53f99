"""Summary metrics over a yearly snapshot sequence."""

from dataclasses import dataclass

FI_MULTIPLIER = 25  # 4% 룰: 연간 지출의 25배


@dataclass(frozen=True)
class Summary:
    current_net_worth: float = 0.0
    retirement_net_worth: float = 0.0
    peak_net_worth: float = 0.0
    peak_net_worth_year: int | None = None
    trough_net_worth: float = 0.0
    trough_net_worth_year: int | None = None
    fi_target: float = 0.0
    fi_year: int | None = None
    years_to_fi: int | None = None
    bankruptcy_year: int | None = None


def annual_expense(snapshot) -> float:
    """Expense of a snapshot scaled to 12 months (the first year may be partial)."""
    months = getattr(snapshot, "months", 12) or 12
    return snapshot.total_expense * 12 / months


def build_summary(snapshots, start_year: int | None = None, retirement_year: int | None = None) -> Summary:
    """Reduce yearly snapshots to summary metrics in one pass.

    FI target = 25 × the first year's annualised expense; the FI year is the
    first year net worth reaches it. The bankruptcy year is the first year
    financial assets are negative.
    """
    if not snapshots:
        return Summary()

    first = snapshots[0]
    if start_year is None:
        start_year = first.year
    fi_target = annual_expense(first) * FI_MULTIPLIER

    retirement_net_worth = first.net_worth
    peak, trough = first, first
    fi_year = None
    bankruptcy_year = None
    for s in snapshots:
        if s.year == retirement_year:
            retirement_net_worth = s.net_worth
        if s.net_worth > peak.net_worth:
            peak = s
        if s.net_worth < trough.net_worth:
            trough = s
        if fi_year is None and s.net_worth >= fi_target:
            fi_year = s.year
        if bankruptcy_year is None and s.financial_assets < 0:
            bankruptcy_year = s.year

    return Summary(
        current_net_worth=first.net_worth,
        retirement_net_worth=retirement_net_worth,
        peak_net_worth=peak.net_worth,
        peak_net_worth_year=peak.year,
        trough_net_worth=trough.net_worth,
        trough_net_worth_year=trough.year,
        fi_target=fi_target,
        fi_year=fi_year,
        years_to_fi=fi_year - start_year if fi_year is not None else None,
        bankruptcy_year=bankruptcy_year,
    )
