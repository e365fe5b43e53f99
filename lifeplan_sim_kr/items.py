"""Financial item kinds, retirement-window resolution and input validation."""

import dataclasses
from dataclasses import dataclass
from typing import ClassVar

from lifeplan_sim_kr.loan import (
    EQUAL_INSTALLMENT,
    FIXED_RATE,
    FLOATING_RATE,
    REPAYMENT_TYPES,
)
from lifeplan_sim_kr.params import OWNERS, SELF, SPOUSE, Assumptions, Profile
from lifeplan_sim_kr.pension import DEFAULT_RECEIVING_YEARS
from lifeplan_sim_kr.rates import (
    FIXED,
    INCOME,
    INFLATION,
    INVESTMENT,
    RATE_CATEGORIES,
    REAL_ESTATE,
    SCENARIO_MODES,
)

MONTHLY = "monthly"
YEARLY = "yearly"
FREQUENCIES = (MONTHLY, YEARLY)

# Savings kinds, in the order a deficit draws on them (유동성 순서)
WITHDRAWAL_ORDER = (
    "checking",
    "savings",
    "deposit",
    "housing",
    "other",
    "fund",
    "bond",
    "domestic_stock",
    "foreign_stock",
    "crypto",
)

# Housing types
OWN = "own"                    # 자가
JEONSE = "jeonse"              # 전세
MONTHLY_RENT = "monthly_rent"  # 월세
HOUSING_TYPES = (OWN, JEONSE, MONTHLY_RENT)
LEASE_TYPES = (JEONSE, MONTHLY_RENT)

HOUSING_TYPE_ALIASES = {"자가": OWN, "전세": JEONSE, "월세": MONTHLY_RENT}

# Pension receive types
ANNUITY = "annuity"
LUMP_SUM = "lump_sum"

# Retirement pension types
DC = "dc"
DB = "db"

# Personal pension accounts and ISA maturity strategies
PENSION_SAVINGS = "pension_savings"
IRP = "irp"
ISA = "isa"
MATURITY_TO_CASH = "cash"

MIN_RETIREMENT_AGE = 40
MAX_RETIREMENT_AGE = 80


@dataclass
class FinancialItem:
    """Fields every item kind shares: identity, owner, window, rate category."""

    id: str = ""
    title: str = ""
    owner: str = SELF
    start_year: int | None = None
    start_month: int | None = None
    end_year: int | None = None
    end_month: int | None = None
    until_retirement: bool = False
    rate_category: str = FIXED

    KIND: ClassVar[str] = ""

    @property
    def label(self) -> str:
        return self.title or self.id or self.KIND


@dataclass
class Income(FinancialItem):
    amount: float = 0.0
    frequency: str = MONTHLY
    growth_rate: float = 0.0
    type: str = "labor"
    base_year: int | None = None  # 금액 기준년도 (없으면 시작월부터 복리)
    rate_category: str = INCOME

    KIND: ClassVar[str] = "income"


@dataclass
class Expense(FinancialItem):
    amount: float = 0.0
    frequency: str = MONTHLY
    growth_rate: float = 0.0
    type: str = "living"
    base_year: int | None = None
    rate_category: str = INFLATION

    KIND: ClassVar[str] = "expense"


@dataclass
class Savings(FinancialItem):
    kind: str = "savings"
    current_balance: float = 0.0
    monthly_contribution: float = 0.0
    interest_rate: float = 0.0
    is_tax_free: bool = False

    KIND: ClassVar[str] = "savings"


@dataclass
class Debt(FinancialItem):
    principal: float = 0.0
    interest_rate: float | None = None
    rate_type: str = FIXED_RATE
    spread: float = 0.0
    repayment: str = EQUAL_INSTALLMENT
    grace_months: int = 0

    KIND: ClassVar[str] = "debt"


@dataclass
class LoanTerms:
    """Loan attached to a real estate or physical asset."""

    principal: float = 0.0
    interest_rate: float | None = None
    rate_type: str = FIXED_RATE
    spread: float = 0.0
    repayment: str = EQUAL_INSTALLMENT
    grace_months: int | None = None  # None → default grace for graduated loans
    start_year: int | None = None    # None → the owning item's start
    start_month: int | None = None
    maturity_year: int | None = None
    maturity_month: int | None = None


@dataclass
class RealEstate(FinancialItem):
    housing_type: str = OWN
    current_value: float = 0.0
    purchase_price: float = 0.0
    growth_rate: float = 0.0
    is_primary_residence: bool = False
    deposit: float = 0.0
    monthly_rent: float = 0.0
    maintenance_fee: float = 0.0
    rental_income: float = 0.0  # 임대소득 (월)
    include_in_cashflow: bool = True
    loan: LoanTerms | None = None
    rate_category: str = REAL_ESTATE

    KIND: ClassVar[str] = "real_estate"

    @property
    def is_lease(self) -> bool:
        return self.housing_type in LEASE_TYPES


@dataclass
class PhysicalAsset(FinancialItem):
    current_value: float = 0.0
    purchase_price: float = 0.0
    annual_rate: float = 0.0  # 음수 = 감가상각
    include_in_cashflow: bool = True
    loan: LoanTerms | None = None

    KIND: ClassVar[str] = "physical_asset"


@dataclass
class NationalPension(FinancialItem):
    expected_monthly_amount: float = 0.0  # 현재가치 기준
    start_age: int = 65
    end_age: int | None = None
    rate_category: str = INFLATION

    KIND: ClassVar[str] = "national_pension"


@dataclass
class RetirementPension(FinancialItem):
    pension_type: str = DC
    current_balance: float = 0.0
    employer_contribution: float = 0.0  # DC 사용자 부담금 (월)
    monthly_salary: float = 0.0         # DB 퇴직금 산정 기준
    years_of_service: int = 0
    return_rate: float = 0.0
    receive_type: str = ANNUITY
    start_age: int | None = None        # None → 은퇴 나이
    receiving_years: int = DEFAULT_RECEIVING_YEARS
    rate_category: str = INVESTMENT

    KIND: ClassVar[str] = "retirement_pension"


@dataclass
class PersonalPension(FinancialItem):
    account_type: str = PENSION_SAVINGS
    current_balance: float = 0.0
    monthly_contribution: float = 0.0
    return_rate: float = 0.0
    receive_type: str = ANNUITY
    start_age: int | None = None
    receiving_years: int = DEFAULT_RECEIVING_YEARS
    # ISA only
    maturity_year: int | None = None
    maturity_month: int | None = None
    maturity_strategy: str = MATURITY_TO_CASH
    is_seomin: bool = False
    rate_category: str = INVESTMENT

    KIND: ClassVar[str] = "personal_pension"


ITEM_TYPES: tuple[type, ...] = (
    Income,
    Expense,
    Savings,
    Debt,
    RealEstate,
    PhysicalAsset,
    NationalPension,
    RetirementPension,
    PersonalPension,
)


def resolve_retirement_windows(items, profile: Profile) -> list:
    """Replace "until retirement" ends with the owner's last working month.

    Returns new items; the inputs are left untouched.
    """
    resolved = []
    for item in items:
        if item.until_retirement:
            end_year, end_month = profile.retirement_of(item.owner)
            item = dataclasses.replace(
                item, end_year=end_year, end_month=end_month, until_retirement=False,
            )
        resolved.append(item)
    return resolved


def _validate_loan_fields(name: str, rate_type: str, repayment: str) -> list[str]:
    errors = []
    if rate_type not in (FIXED_RATE, FLOATING_RATE):
        errors.append(f"{name}: 알 수 없는 금리 유형 '{rate_type}'")
    if repayment not in REPAYMENT_TYPES:
        errors.append(f"{name}: 알 수 없는 상환방식 '{repayment}'")
    return errors


def validate_inputs(profile: Profile | None, items, assumptions: Assumptions | None = None) -> list[str]:
    """Check the input set before a run. Returns list of error messages.

    Degenerate amounts (zero principal, missing maturity, …) are not errors;
    the engine resolves them to zero.
    """
    if profile is None:
        return ["프로필이 없습니다"]
    errors = []
    if not profile.birth_year or profile.birth_year <= 0:
        errors.append(f"출생연도 {profile.birth_year}가 올바르지 않습니다")
    if not MIN_RETIREMENT_AGE <= profile.retirement_age <= MAX_RETIREMENT_AGE:
        errors.append(
            f"은퇴 나이 {profile.retirement_age}세는 대상 외입니다"
            f" ({MIN_RETIREMENT_AGE}-{MAX_RETIREMENT_AGE}세)"
        )
    if profile.spouse_retirement_age is not None and not profile.has_spouse:
        errors.append("배우자 은퇴 나이가 있지만 배우자 출생연도가 없습니다")

    if assumptions is not None:
        if assumptions.scenario_mode not in SCENARIO_MODES:
            errors.append(f"알 수 없는 시나리오 '{assumptions.scenario_mode}'")
        if assumptions.life_expectancy <= profile.retirement_age:
            errors.append(
                f"기대수명 {assumptions.life_expectancy}세가 은퇴 나이 {profile.retirement_age}세 이하입니다"
            )

    seen = set()
    for item in items:
        if not isinstance(item, ITEM_TYPES):
            errors.append(f"지원하지 않는 항목 유형: {type(item).__name__}")
            continue
        name = item.label
        if item.id:
            if item.id in seen:
                errors.append(f"{name}: 중복된 id '{item.id}'")
            seen.add(item.id)
        if item.owner not in OWNERS:
            errors.append(f"{name}: 알 수 없는 소유자 '{item.owner}'")
        if item.owner == SPOUSE and not profile.has_spouse:
            if item.until_retirement or isinstance(item, (NationalPension, RetirementPension, PersonalPension)):
                errors.append(f"{name}: 배우자 항목이지만 배우자 정보가 없습니다")
        if item.rate_category not in RATE_CATEGORIES:
            errors.append(f"{name}: 알 수 없는 금리 카테고리 '{item.rate_category}'")
        for month in (item.start_month, item.end_month):
            if month is not None and not 1 <= month <= 12:
                errors.append(f"{name}: 월 {month}은 1-12 범위여야 합니다")
        if isinstance(item, (Income, Expense)) and item.frequency not in FREQUENCIES:
            errors.append(f"{name}: 알 수 없는 주기 '{item.frequency}'")
        if isinstance(item, Debt):
            errors.extend(_validate_loan_fields(name, item.rate_type, item.repayment))
        if isinstance(item, (RealEstate, PhysicalAsset)) and item.loan is not None:
            errors.extend(_validate_loan_fields(name, item.loan.rate_type, item.loan.repayment))
        if isinstance(item, RealEstate) and item.housing_type not in HOUSING_TYPES:
            errors.append(f"{name}: 알 수 없는 주거 유형 '{item.housing_type}'")
    return errors
