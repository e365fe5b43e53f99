"""Rate categories, scenario presets and effective-rate resolution."""

# Rate categories
FIXED = "fixed"
INFLATION = "inflation"
INCOME = "income"
INVESTMENT = "investment"
REAL_ESTATE = "real_estate"
RATE_CATEGORIES = (FIXED, INFLATION, INCOME, INVESTMENT, REAL_ESTATE)

# Scenario modes
INDIVIDUAL = "individual"  # 항목별 입력 금리 그대로
CUSTOM = "custom"          # 사용자 지정 전역 금리
OPTIMISTIC = "optimistic"
AVERAGE = "average"
PESSIMISTIC = "pessimistic"
SCENARIO_MODES = (INDIVIDUAL, CUSTOM, OPTIMISTIC, AVERAGE, PESSIMISTIC)

BASE_RATE_KEY = "base_rate"  # 변동금리 대출의 기준금리

# 시나리오 프리셋 (연 %)
SCENARIO_PRESETS: dict[str, dict[str, float]] = {
    OPTIMISTIC: {
        INFLATION: 2.0,
        INCOME: 5.0,
        INVESTMENT: 8.0,
        REAL_ESTATE: 4.0,
        BASE_RATE_KEY: 2.5,
    },
    AVERAGE: {
        INFLATION: 2.5,
        INCOME: 3.0,
        INVESTMENT: 5.0,
        REAL_ESTATE: 2.5,
        BASE_RATE_KEY: 3.5,
    },
    PESSIMISTIC: {
        INFLATION: 4.0,
        INCOME: 1.0,
        INVESTMENT: 2.0,
        REAL_ESTATE: 0.5,
        BASE_RATE_KEY: 5.0,
    },
}

SCENARIO_LABELS = {
    INDIVIDUAL: "개별",
    CUSTOM: "사용자 지정",
    OPTIMISTIC: "낙관",
    AVERAGE: "평균",
    PESSIMISTIC: "비관",
}


def effective_rate(base_rate: float, rate_category: str, assumptions) -> float:
    """Resolve the rate an item actually uses under the selected scenario.

    fixed → base_rate regardless of scenario; individual → base_rate;
    custom → the user's global rate for the category; presets → the table
    value. Unknown categories and modes fall back to base_rate.
    """
    if rate_category == FIXED or rate_category not in RATE_CATEGORIES:
        return base_rate
    mode = assumptions.scenario_mode
    if mode == CUSTOM:
        return assumptions.custom_rates.get(rate_category, base_rate)
    if mode in SCENARIO_PRESETS:
        return SCENARIO_PRESETS[mode].get(rate_category, base_rate)
    return base_rate


def global_rate(rate_category: str, assumptions) -> float:
    """Household-level rate for a category, used where an item has no rate of its own."""
    own = {
        INFLATION: assumptions.inflation,
        INCOME: assumptions.income_growth,
        INVESTMENT: assumptions.investment_return,
        REAL_ESTATE: assumptions.real_estate_growth,
    }
    if rate_category not in own:
        return 0.0
    return effective_rate(own[rate_category], rate_category, assumptions)


def base_interest_rate(assumptions) -> float:
    """Base rate for floating-rate loans under the selected scenario."""
    mode = assumptions.scenario_mode
    if mode == CUSTOM:
        return assumptions.custom_rates.get(BASE_RATE_KEY, assumptions.base_rate)
    if mode in SCENARIO_PRESETS:
        return SCENARIO_PRESETS[mode][BASE_RATE_KEY]
    return assumptions.base_rate


def to_monthly_rate(annual_pct: float) -> float:
    """Monthly rate equivalent to an annual percent under monthly compounding."""
    return (1 + annual_pct / 100) ** (1 / 12) - 1
