"""Household profile, scenario assumptions and cash-flow rules."""

from dataclasses import dataclass, field

from lifeplan_sim_kr.activation import age_at, retirement_year_month
from lifeplan_sim_kr.rates import (
    BASE_RATE_KEY,
    INDIVIDUAL,
    INCOME,
    INFLATION,
    INVESTMENT,
    REAL_ESTATE,
)

SELF = "self"
SPOUSE = "spouse"
COMMON = "common"
OWNERS = (SELF, SPOUSE, COMMON)

OWNER_LABELS = {SELF: "본인", SPOUSE: "배우자", COMMON: "공동"}


@dataclass
class Profile:
    birth_year: int
    retirement_age: int
    birth_month: int = 1
    spouse_birth_year: int | None = None
    spouse_retirement_age: int | None = None
    spouse_birth_month: int = 1

    @property
    def has_spouse(self) -> bool:
        return self.spouse_birth_year is not None

    def birth_of(self, owner: str) -> tuple[int, int]:
        """(birth_year, birth_month) of an owner; common items follow the household head."""
        if owner == SPOUSE and self.spouse_birth_year is not None:
            return self.spouse_birth_year, self.spouse_birth_month
        return self.birth_year, self.birth_month

    def retirement_age_of(self, owner: str) -> int:
        if owner == SPOUSE and self.spouse_retirement_age is not None:
            return self.spouse_retirement_age
        return self.retirement_age

    def age_of(self, owner: str, year: int, month: int = 12) -> int:
        birth_year, birth_month = self.birth_of(owner)
        return age_at(birth_year, birth_month, year, month)

    def retirement_of(self, owner: str) -> tuple[int, int]:
        """Owner's last working (year, month)."""
        birth_year, birth_month = self.birth_of(owner)
        return retirement_year_month(birth_year, birth_month, self.retirement_age_of(owner))

    @property
    def retirement_year(self) -> int:
        return self.birth_year + self.retirement_age


@dataclass
class Assumptions:
    """Scenario selection plus the household's global rate assumptions (연 %)."""

    scenario_mode: str = INDIVIDUAL
    inflation: float = 2.5
    income_growth: float = 3.3
    investment_return: float = 5.0
    savings_growth: float = 2.5
    real_estate_growth: float = 2.4
    debt_interest: float = 3.5
    base_rate: float = 3.5
    life_expectancy: int = 100
    custom_rates: dict[str, float] = field(
        default_factory=lambda: {
            INFLATION: 2.5,
            INCOME: 3.3,
            INVESTMENT: 5.0,
            REAL_ESTATE: 2.4,
            BASE_RATE_KEY: 3.5,
        }
    )


# Surplus allocation types
FIXED_AMOUNT = "fixed"
PERCENTAGE = "percentage"
REMAINDER = "remainder"
ALLOCATION_TYPES = (FIXED_AMOUNT, PERCENTAGE, REMAINDER)

# Rule targets (account types)
PENSION_SAVINGS = "pension_savings"  # 연금저축
IRP = "irp"
ISA = "isa"
SAVINGS_ACCOUNT = "savings"          # 비상금/적금
CHECKING = "checking"                # 입출금 (유동 현금)
DEBT = "debt"                        # 대출 조기상환 (target_id 필수)
RULE_ACCOUNT_TYPES = (PENSION_SAVINGS, IRP, ISA, SAVINGS_ACCOUNT, CHECKING, DEBT)

# Rule modes
ALLOCATE = "allocate"                  # 적립: allocation_type에 따라 배분
MAINTAIN_BALANCE = "maintain_balance"  # 잔액 유지: target_balance까지만 채움
RULE_MODES = (ALLOCATE, MAINTAIN_BALANCE)


@dataclass
class CashFlowRule:
    """One sink in the monthly surplus priority list.

    start/end bound the months the rule applies (None → unbounded), the
    same way item windows do.
    """

    account_type: str
    name: str = ""
    priority: int = 1
    allocation_type: str = FIXED_AMOUNT
    monthly_amount: float = 0.0
    percentage: float = 0.0
    annual_limit: float | None = None
    is_enabled: bool = True
    target_id: str | None = None  # None → first account of account_type
    mode: str = ALLOCATE
    target_balance: float | None = None
    start_year: int | None = None
    start_month: int | None = None
    end_year: int | None = None
    end_month: int | None = None


DEFAULT_CASH_FLOW_RULES: tuple[CashFlowRule, ...] = (
    CashFlowRule(PENSION_SAVINGS, "연금저축", 1, FIXED_AMOUNT, monthly_amount=50, annual_limit=600),
    CashFlowRule(IRP, "IRP", 2, FIXED_AMOUNT, monthly_amount=25, annual_limit=300),
    CashFlowRule(ISA, "ISA", 3, FIXED_AMOUNT, monthly_amount=167, annual_limit=2000),
    CashFlowRule(SAVINGS_ACCOUNT, "비상금", 4, FIXED_AMOUNT, monthly_amount=50),
    CashFlowRule(CHECKING, "입출금 통장", 99, REMAINDER),
)
