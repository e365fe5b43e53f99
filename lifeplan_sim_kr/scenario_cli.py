"""CLI entry point for scenario comparison."""

import sys

from lifeplan_sim_kr.config import build_simulation_inputs, parse_args
from lifeplan_sim_kr.rates import BASE_RATE_KEY, INCOME, INFLATION, INVESTMENT, REAL_ESTATE, SCENARIO_LABELS, SCENARIO_PRESETS
from lifeplan_sim_kr.scenarios import SCENARIO_ORDER, run_scenarios


def print_parameters():
    """Print scenario parameters"""
    print("=" * 120)
    print("【3개 시나리오 비교】")
    print("=" * 120)
    print()

    print("【시나리오 가정】")
    print("-" * 120)
    print(f"{'시나리오':<12} {'물가상승률':>10} {'소득증가율':>10} {'투자수익률':>10} {'부동산상승률':>12} {'기준금리':>10}")
    print("-" * 120)
    for mode in SCENARIO_ORDER:
        preset = SCENARIO_PRESETS[mode]
        print(
            f"{SCENARIO_LABELS[mode]:<12} "
            f"{preset[INFLATION]:>9.1f}% "
            f"{preset[INCOME]:>9.1f}% "
            f"{preset[INVESTMENT]:>9.1f}% "
            f"{preset[REAL_ESTATE]:>11.1f}% "
            f"{preset[BASE_RATE_KEY]:>9.1f}%"
        )
    print("-" * 120)
    print("  * 'fixed' 카테고리 항목은 시나리오와 무관하게 입력 금리를 사용합니다.")
    print()


def _format_year(year: int | None) -> str:
    return f"{year}년" if year is not None else "---"


def print_results(all_results: dict):
    """Print one row per scenario with the summary metrics"""
    print("=" * 120)
    print("【시나리오별 결과】")
    print("=" * 120)
    print(
        f"{'시나리오':<12} {'은퇴시 순자산':>14} {'최고 순자산':>14} {'최종 순자산':>14}"
        f" {'FI 목표':>12} {'FI 달성':>10} {'자산 고갈':>10}"
    )
    print("-" * 120)
    for mode in SCENARIO_ORDER:
        result = all_results[mode]
        summary = result.summary
        final = result.snapshots[-1].net_worth if result.snapshots else 0.0
        warning = " ⚠" if summary.bankruptcy_year is not None else ""
        print(
            f"{SCENARIO_LABELS[mode]:<12} "
            f"{summary.retirement_net_worth:>13,.0f}만 "
            f"{summary.peak_net_worth:>13,.0f}만 "
            f"{final:>13,.0f}만 "
            f"{summary.fi_target:>11,.0f}만 "
            f"{_format_year(summary.fi_year):>10} "
            f"{_format_year(summary.bankruptcy_year):>10}{warning}"
        )
    print("-" * 120)
    print()


def main():
    r, config, _ = parse_args("3개 시나리오 비교 시뮬레이션")
    try:
        inputs = build_simulation_inputs(r, config)
        profile = inputs.pop("profile")
        items = inputs.pop("items")
        assumptions = inputs.pop("assumptions")
        rules = inputs.pop("rules")
        results = run_scenarios(profile, items, assumptions, rules, **inputs)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    print_parameters()
    print_results(results)


if __name__ == "__main__":
    main()
