"""Chart generation for household projection results."""

import platform
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from lifeplan_sim_kr.rates import AVERAGE, OPTIMISTIC, PESSIMISTIC, SCENARIO_LABELS
from lifeplan_sim_kr.simulation import SimulationResult

# Scenario color mapping
SCENARIO_COLORS = {
    OPTIMISTIC: "#2ca02c",   # green
    AVERAGE: "#1f77b4",      # blue
    PESSIMISTIC: "#d62728",  # red
}

DEFAULT_COLOR = "#7f7f7f"

ASSET_COLORS = {
    "financial": "#66c2a5",
    "pension": "#8da0cb",
    "real_estate": "#fc8d62",
    "physical": "#e5c494",
}


def _setup_korean_font():
    """Configure matplotlib to use a Korean font."""
    system = platform.system()
    if system == "Darwin":
        font_family = "AppleGothic"
    elif system == "Linux":
        font_family = "NanumGothic"
    elif system == "Windows":
        font_family = "Malgun Gothic"
    else:
        font_family = "sans-serif"
    plt.rcParams["font.family"] = [font_family, "Noto Sans CJK KR", "sans-serif"]
    plt.rcParams["axes.unicode_minus"] = False


def _format_eok_axis(ax: plt.Axes):
    """Add 억원 labels on Y axis (secondary tick labels)."""
    ax.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    )
    ax_right = ax.secondary_yaxis("right")
    ax_right.yaxis.set_major_formatter(
        ticker.FuncFormatter(lambda x, _: f"{x / 10000:.1f}억" if x != 0 else "0")
    )
    ax_right.set_ylabel("")


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def _mark_milestones(ax: plt.Axes, result: SimulationResult):
    """Vertical markers for the retirement and bankruptcy years."""
    y_hi = ax.get_ylim()[1]
    if result.start_year <= result.retirement_year <= result.end_year:
        ax.axvline(result.retirement_year, color="#888888", linewidth=1, linestyle=":")
        ax.annotate(
            "은퇴", xy=(result.retirement_year, y_hi * 0.95),
            fontsize=10, ha="center", va="top",
            bbox=dict(boxstyle="round,pad=0.3", fc="white", ec="#888888", alpha=0.9),
        )
    bankruptcy_year = result.summary.bankruptcy_year
    if bankruptcy_year is not None:
        ax.axvline(bankruptcy_year, color="#d62728", linewidth=2, linestyle=":")
        ax.annotate(
            f"{bankruptcy_year}년 자산 고갈", xy=(bankruptcy_year, y_hi * 0.85),
            fontsize=11, fontweight="bold", color="#d62728", ha="right",
            bbox=dict(boxstyle="round,pad=0.3", fc="white", ec="#d62728", alpha=0.9),
        )


def plot_trajectory(result: SimulationResult, output_path: Path, name: str = "") -> Path:
    """Generate net-worth trajectory over the asset composition.

    Args:
        result: simulate() return value.
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "avg" → "trajectory-avg.png").

    Returns:
        Path to the generated PNG file.
    """
    _setup_korean_font()
    if not result.snapshots:
        raise ValueError("No snapshots for trajectory chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    years = [s.year for s in result.snapshots]
    ax.stackplot(
        years,
        [max(0.0, s.financial_assets) for s in result.snapshots],
        [s.pension_assets for s in result.snapshots],
        [s.real_estate_value for s in result.snapshots],
        [s.physical_asset_value for s in result.snapshots],
        labels=["금융자산", "연금자산", "부동산", "실물자산"],
        colors=[ASSET_COLORS["financial"], ASSET_COLORS["pension"],
                ASSET_COLORS["real_estate"], ASSET_COLORS["physical"]],
        alpha=0.75,
    )
    ax.fill_between(
        years, [-s.total_debts for s in result.snapshots], 0,
        color="#999999", alpha=0.4, label="부채",
    )
    ax.plot(years, [s.net_worth for s in result.snapshots], color="black", linewidth=2, label="순자산")
    ax.axhline(0, color="black", linewidth=1.0)
    _mark_milestones(ax, result)

    ax.set_xlabel("연도")
    ax.set_ylabel("자산 (만원)")
    ax.set_title("순자산 추이와 자산 구성")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_eok_axis(ax)
    return _save(fig, output_path, "trajectory", name)


def plot_cashflow(result: SimulationResult, output_path: Path, name: str = "") -> Path:
    """Generate yearly income / expense / tax bars with the net cash flow line."""
    _setup_korean_font()
    if not result.snapshots:
        raise ValueError("No snapshots for cashflow chart")

    fig, ax = plt.subplots(figsize=(16, 7))
    years = [s.year for s in result.snapshots]
    width = 0.4
    ax.bar([y - width / 2 for y in years], [s.total_income for s in result.snapshots],
           width=width, color="#1f77b4", label="수입")
    ax.bar([y + width / 2 for y in years], [-s.total_expense for s in result.snapshots],
           width=width, color="#fc8d62", label="지출")
    ax.bar([y + width / 2 for y in years], [-s.tax_paid for s in result.snapshots],
           bottom=[-s.total_expense for s in result.snapshots],
           width=width, color="#e78ac3", label="세금")
    ax.plot(years, [s.net_cash_flow for s in result.snapshots],
            color="#d62728", linewidth=1.8, linestyle="--", label="순현금흐름")
    ax.axhline(0, color="black", linewidth=2.0, zorder=5)
    _mark_milestones(ax, result)

    ax.set_xlabel("연도")
    ax.set_ylabel("연간 현금흐름 (만원)")
    ax.set_title("연간 현금흐름")
    ax.legend(loc="upper right", fontsize=9)
    ax.grid(True, alpha=0.3)
    return _save(fig, output_path, "cashflow", name)


def plot_scenario_comparison(
    all_results: dict[str, SimulationResult], output_path: Path, name: str = "",
) -> Path:
    """Generate one net-worth line per scenario."""
    _setup_korean_font()
    if not all_results:
        raise ValueError("No results for scenario chart")

    fig, ax = plt.subplots(figsize=(14, 8))
    for mode, result in all_results.items():
        years = [s.year for s in result.snapshots]
        ax.plot(
            years, [s.net_worth for s in result.snapshots],
            label=SCENARIO_LABELS.get(mode, mode),
            color=SCENARIO_COLORS.get(mode, DEFAULT_COLOR), linewidth=2,
        )
        if result.summary.fi_year is not None:
            ax.axhline(result.summary.fi_target, color=SCENARIO_COLORS.get(mode, DEFAULT_COLOR),
                       linewidth=0.8, linestyle=":", alpha=0.6)
    ax.axhline(0, color="black", linewidth=1.0)

    ax.set_xlabel("연도")
    ax.set_ylabel("순자산 (만원)")
    ax.set_title("시나리오별 순자산 추이")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_eok_axis(ax)
    return _save(fig, output_path, "scenarios", name)
