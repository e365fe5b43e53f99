"""TOML household loader with CLI > config > default resolution."""

import argparse
import dataclasses
import sys
import tomllib
from pathlib import Path
from typing import Callable

from lifeplan_sim_kr.items import (
    HOUSING_TYPE_ALIASES,
    Debt,
    Expense,
    Income,
    LoanTerms,
    NationalPension,
    PersonalPension,
    PhysicalAsset,
    RealEstate,
    RetirementPension,
    Savings,
)
from lifeplan_sim_kr.loan import REPAYMENT_ALIASES
from lifeplan_sim_kr.params import DEFAULT_CASH_FLOW_RULES, Assumptions, CashFlowRule, Profile
from lifeplan_sim_kr.rates import SCENARIO_MODES

DEFAULT_CONFIG_PATH = Path("household.toml")

DEFAULTS = {
    "birth_year": 1990,
    "birth_month": 1,
    "retirement_age": 60,
    "scenario": "individual",
    "life_expectancy": 100,
    "start_year": None,  # None → 올해
    "start_month": 1,
    "cash": 0.0,
    "emergency_fund_months": 0.0,
    "years": None,       # None → 기대수명까지
}

# TOML array-of-tables name → item class
SECTIONS: dict[str, type] = {
    "incomes": Income,
    "expenses": Expense,
    "savings": Savings,
    "debts": Debt,
    "real_estates": RealEstate,
    "physical_assets": PhysicalAsset,
    "national_pensions": NationalPension,
    "retirement_pensions": RetirementPension,
    "personal_pensions": PersonalPension,
}

# "YYYY-MM" keys → (year field, month field)
_DATE_KEYS = {
    "start": ("start_year", "start_month"),
    "end": ("end_year", "end_month"),
    "maturity": ("maturity_year", "maturity_month"),
}


def load_config(path: Path | None = None) -> dict:
    """Load TOML household file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"설정 파일을 읽지 못했습니다: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    # Lift profile/assumption scalars to the top level so they resolve like CLI flags
    profile = raw.get("profile", {})
    for key in ("birth_year", "birth_month", "retirement_age"):
        if key in profile:
            raw.setdefault(key, profile[key])
    assumptions = raw.get("assumptions", {})
    if "scenario_mode" in assumptions:
        raw.setdefault("scenario", assumptions["scenario_mode"])
    if "life_expectancy" in assumptions:
        raw.setdefault("life_expectancy", assumptions["life_expectancy"])
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared simulation flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="가계 설정 파일 경로 (default: household.toml)")
    parser.add_argument("--birth-year", type=int, default=None, help=f"출생연도 (default: {d['birth_year']})")
    parser.add_argument("--birth-month", type=int, default=None, help=f"출생월 (default: {d['birth_month']})")
    parser.add_argument("--retirement-age", type=int, default=None, help=f"은퇴 나이 (default: {d['retirement_age']})")
    parser.add_argument("--scenario", type=str, default=None, choices=SCENARIO_MODES, help=f"금리 시나리오 (default: {d['scenario']})")
    parser.add_argument("--life-expectancy", type=int, default=None, help=f"기대수명 (default: {d['life_expectancy']})")
    parser.add_argument("--start-year", type=int, default=None, help="시작연도 (default: 올해)")
    parser.add_argument("--start-month", type=int, default=None, help=f"시작월 (default: {d['start_month']})")
    parser.add_argument("--cash", type=float, default=None, help=f"시작 현금·만원 (default: {d['cash']:.0f})")
    parser.add_argument("--emergency-fund-months", type=float, default=None, help="비상금으로 남길 현금 (월 지출의 몇 개월분)")
    parser.add_argument("--years", type=int, default=None, help="시뮬레이션 기간·년 (default: 기대수명까지)")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > household file > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    return resolved


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
) -> tuple[dict, dict, argparse.Namespace]:
    """Parse CLI args, load the household file, resolve values.

    Returns (resolved_dict, config, namespace).
    namespace: raw argparse.Namespace (for extra CLI args added via add_args_fn).
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args()
    config = load_config(args.config)
    return resolve(args, config), config, args


def parse_year_month(value, where: str) -> tuple[int, int | None]:
    """Parse "YYYY-MM" (or a bare year) → (year, month)."""
    message = f"{where}: 날짜는 'YYYY-MM' 형식이어야 합니다: {value!r}"
    if isinstance(value, int) and not isinstance(value, bool):
        return value, None
    if not isinstance(value, str):
        raise ValueError(message)
    parts = value.strip().split("-")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise ValueError(message) from None
    if len(numbers) == 1:
        return numbers[0], None
    if len(numbers) != 2 or not 1 <= numbers[1] <= 12:
        raise ValueError(message)
    return numbers[0], numbers[1]


def _normalize_entry(entry: dict, where: str) -> dict:
    """Expand date strings and Korean aliases of one TOML table."""
    data = dict(entry)
    for key, (year_field, month_field) in _DATE_KEYS.items():
        if key in data:
            year, month = parse_year_month(data.pop(key), f"{where}.{key}")
            data[year_field] = year
            if month is not None:
                data[month_field] = month
    if "repayment" in data:
        data["repayment"] = REPAYMENT_ALIASES.get(data["repayment"], data["repayment"])
    if "housing_type" in data:
        data["housing_type"] = HOUSING_TYPE_ALIASES.get(data["housing_type"], data["housing_type"])
    return data


def _construct(cls, data: dict, where: str):
    names = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(data) - names)
    if unknown:
        raise ValueError(f"{where}: 알 수 없는 키 {', '.join(unknown)}")
    return cls(**data)


def build_items(config: dict) -> list:
    """Build financial items from the household file's item tables."""
    items = []
    for section, cls in SECTIONS.items():
        for i, entry in enumerate(config.get(section, [])):
            where = f"[[{section}]] #{i + 1}"
            data = _normalize_entry(entry, where)
            if "loan" in data:
                data["loan"] = _construct(LoanTerms, _normalize_entry(data["loan"], f"{where}.loan"), f"{where}.loan")
            items.append(_construct(cls, data, where))
    return items


def build_profile(r: dict, config: dict) -> Profile:
    """Build Profile from resolved values plus the [profile] spouse fields."""
    profile = config.get("profile", {})
    return Profile(
        birth_year=r["birth_year"],
        birth_month=r["birth_month"],
        retirement_age=r["retirement_age"],
        spouse_birth_year=profile.get("spouse_birth_year"),
        spouse_birth_month=profile.get("spouse_birth_month", 1),
        spouse_retirement_age=profile.get("spouse_retirement_age"),
    )


def build_assumptions(r: dict, config: dict) -> Assumptions:
    """Build Assumptions from the [assumptions] table and resolved scenario."""
    data = dict(config.get("assumptions", {}))
    data["scenario_mode"] = r["scenario"]
    data["life_expectancy"] = r["life_expectancy"]
    if "custom_rates" in data:
        data["custom_rates"] = {**Assumptions().custom_rates, **data["custom_rates"]}
    return _construct(Assumptions, data, "[assumptions]")


def build_rules(config: dict) -> list[CashFlowRule]:
    """Cash-flow rules from the file; the default rule set if it names none."""
    if "cash_flow_rules" not in config:
        return list(DEFAULT_CASH_FLOW_RULES)
    rules = []
    for i, entry in enumerate(config["cash_flow_rules"]):
        where = f"[[cash_flow_rules]] #{i + 1}"
        rules.append(_construct(CashFlowRule, _normalize_entry(entry, where), where))
    return rules


def build_simulation_inputs(r: dict, config: dict) -> dict:
    """Keyword arguments for simulate() from resolved values and the household file."""
    return {
        "profile": build_profile(r, config),
        "items": build_items(config),
        "assumptions": build_assumptions(r, config),
        "rules": build_rules(config),
        "start_year": r["start_year"],
        "start_month": r["start_month"],
        "years": r["years"],
        "initial_cash": r["cash"],
        "emergency_fund_months": r["emergency_fund_months"],
    }
