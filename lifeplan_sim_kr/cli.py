"""CLI entry point for a single household projection."""

import argparse
import sys

from lifeplan_sim_kr.config import build_simulation_inputs, parse_args
from lifeplan_sim_kr.rates import SCENARIO_LABELS
from lifeplan_sim_kr.simulation import SimulationResult, simulate


def _add_cli_args(parser: argparse.ArgumentParser):
    parser.add_argument("--step", type=int, default=5, help="연간 표를 몇 년 간격으로 출력할지 (default: 5)")
    parser.add_argument("--events", action="store_true", help="연도별 이벤트 목록 출력")


def _eok(value: float) -> str:
    """만원 → 억원 표기"""
    return f"{value / 10000:.2f}억"


def _print_header(inputs: dict, result: SimulationResult):
    profile = inputs["profile"]
    assumptions = inputs["assumptions"]
    years = result.end_year - result.start_year + 1
    print("=" * 100)
    print(f"가계 재무 시뮬레이션 ({result.start_year}년-{result.end_year}년, {years}년간)")
    print(
        f"  출생: {profile.birth_year}년 {profile.birth_month}월 / 은퇴: {profile.retirement_age}세"
        f" ({result.retirement_year}년) / 기대수명: {assumptions.life_expectancy}세"
    )
    if profile.has_spouse:
        spouse_age = profile.spouse_retirement_age or profile.retirement_age
        print(f"  배우자: {profile.spouse_birth_year}년생 / 은퇴 {spouse_age}세")
    print(
        f"  시나리오: {SCENARIO_LABELS.get(assumptions.scenario_mode, assumptions.scenario_mode)}"
        f" / 시작 현금: {inputs['initial_cash']:.0f}만원 / 항목 {len(inputs['items'])}개"
        f" / 잉여금 규칙 {len(inputs['rules'])}개"
    )
    print("=" * 100)
    print()


def _print_yearly_table(result: SimulationResult, step: int):
    print("【연간 추이】")
    print("-" * 100)
    print(
        f"{'연도':<6} {'나이':>4} {'수입':>10} {'지출':>10} {'세금':>8} {'순현금흐름':>10}"
        f" {'금융자산':>12} {'연금자산':>10} {'부동산':>12} {'부채':>10} {'순자산':>12}"
    )
    print("-" * 100)
    snapshots = result.snapshots
    for i, s in enumerate(snapshots):
        if i % step != 0 and i != len(snapshots) - 1:
            continue
        print(
            f"{s.year:<6} {s.age:>4} "
            f"{s.total_income:>10,.0f} "
            f"{s.total_expense:>10,.0f} "
            f"{s.tax_paid:>8,.0f} "
            f"{s.net_cash_flow:>10,.0f} "
            f"{s.financial_assets:>12,.0f} "
            f"{s.pension_assets:>10,.0f} "
            f"{s.real_estate_value + s.physical_asset_value:>12,.0f} "
            f"{s.total_debts:>10,.0f} "
            f"{s.net_worth:>12,.0f}"
        )
    print("-" * 100)
    print("  (단위: 만원)")


def _print_summary(result: SimulationResult):
    summary = result.summary
    print("\n" + "=" * 100)
    print("【요약】")
    print("=" * 100)
    print(f"  현재 순자산:   {summary.current_net_worth:>12,.0f}만원 ({_eok(summary.current_net_worth)})")
    print(f"  은퇴시 순자산: {summary.retirement_net_worth:>12,.0f}만원 ({_eok(summary.retirement_net_worth)})")
    print(
        f"  최고 순자산:   {summary.peak_net_worth:>12,.0f}만원 ({summary.peak_net_worth_year}년)"
    )
    print(
        f"  최저 순자산:   {summary.trough_net_worth:>12,.0f}만원 ({summary.trough_net_worth_year}년)"
    )
    print(f"  경제적 자립 목표: {summary.fi_target:>9,.0f}만원 (연간 지출 × 25)")
    if summary.fi_year is not None:
        print(f"    → {summary.fi_year}년 달성 ({summary.years_to_fi}년 후)")
    else:
        print("    → 기간 내 미달성")
    if summary.bankruptcy_year is not None:
        print(f"  ⚠ {summary.bankruptcy_year}년 금융자산 고갈 (현금 부족)")


def _print_events(result: SimulationResult):
    print("\n【이벤트】")
    for s in result.snapshots:
        for event in s.events:
            print(f"  {s.year}년 ({s.age}세): {event}")


def main():
    """Run one projection from the household file and print the report."""
    r, config, args = parse_args("가계 재무 시뮬레이션", _add_cli_args)
    try:
        inputs = build_simulation_inputs(r, config)
        result = simulate(**inputs)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    _print_header(inputs, result)
    _print_yearly_table(result, max(1, args.step))
    _print_summary(result)
    if args.events:
        _print_events(result)


if __name__ == "__main__":
    main()
