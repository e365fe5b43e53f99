"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from lifeplan_sim_kr.charts import plot_cashflow, plot_scenario_comparison, plot_trajectory
from lifeplan_sim_kr.config import build_simulation_inputs, create_parser, load_config, resolve
from lifeplan_sim_kr.scenarios import run_scenarios
from lifeplan_sim_kr.simulation import simulate


def _build_parser():
    parser = create_parser("가계 재무 시뮬레이션 차트 생성")
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="출력 디렉터리 (default: reports/charts)",
    )
    parser.add_argument(
        "--no-scenarios", action="store_true",
        help="시나리오 비교 차트를 생성하지 않음",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="출력 파일명 접미사 (예: a → trajectory-a.png)",
    )
    return parser


def main():
    parser = _build_parser()
    args = parser.parse_args()
    config = load_config(args.config)
    r = resolve(args, config)
    output_dir = args.output

    try:
        inputs = build_simulation_inputs(r, config)
        print("시뮬레이션 실행 중...", file=sys.stderr)
        result = simulate(**inputs)
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        raise SystemExit(1)

    path = plot_trajectory(result, output_dir, name=args.name)
    print(f"  → {path}", file=sys.stderr)
    path = plot_cashflow(result, output_dir, name=args.name)
    print(f"  → {path}", file=sys.stderr)

    if not args.no_scenarios:
        print("시나리오 비교 실행 중...", file=sys.stderr)
        profile = inputs.pop("profile")
        items = inputs.pop("items")
        assumptions = inputs.pop("assumptions")
        rules = inputs.pop("rules")
        all_results = run_scenarios(profile, items, assumptions, rules, **inputs)
        path = plot_scenario_comparison(all_results, output_dir, name=args.name)
        print(f"  → {path}", file=sys.stderr)

    print("완료", file=sys.stderr)


if __name__ == "__main__":
    main()
