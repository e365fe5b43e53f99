"""Loan amortization: payments, closed-form balances and yearly splits."""

from dataclasses import dataclass
from datetime import date

from lifeplan_sim_kr.activation import month_index

# Repayment schemes
BULLET = "bullet"                        # 만기일시상환
EQUAL_INSTALLMENT = "equal_installment"  # 원리금균등상환
EQUAL_PRINCIPAL = "equal_principal"      # 원금균등상환
GRADUATED = "graduated"                  # 거치식상환
REPAYMENT_TYPES = (BULLET, EQUAL_INSTALLMENT, EQUAL_PRINCIPAL, GRADUATED)

REPAYMENT_ALIASES = {
    "만기일시상환": BULLET,
    "원리금균등상환": EQUAL_INSTALLMENT,
    "원금균등상환": EQUAL_PRINCIPAL,
    "거치식상환": GRADUATED,
}

REPAYMENT_LABELS = {v: k for k, v in REPAYMENT_ALIASES.items()}

# Rate types
FIXED_RATE = "fixed"
FLOATING_RATE = "floating"

DEFAULT_DEBT_RATE = 3.5   # 고정금리 미입력 시 (%)
DEFAULT_BASE_RATE = 3.5   # 기준금리 (%)
DEFAULT_GRACE_RATIO = 0.3  # 거치기간 미입력 부동산 대출: 대출기간의 30%


@dataclass(frozen=True)
class Loan:
    """Resolved loan terms. annual_rate is a percent, already fixed/floating-resolved."""

    principal: float
    annual_rate: float
    start_year: int
    start_month: int
    maturity_year: int | None
    maturity_month: int | None
    repayment: str = EQUAL_INSTALLMENT
    grace_months: int = 0

    @property
    def monthly_rate(self) -> float:
        return (self.annual_rate or 0) / 100 / 12

    @property
    def total_months(self) -> int:
        if not self.maturity_year:
            return 0
        return months_between(
            (self.start_year, self.start_month),
            (self.maturity_year, self.maturity_month or 12),
        )

    @property
    def effective_grace(self) -> int:
        if self.repayment != GRADUATED:
            return 0
        return max(0, min(self.grace_months, self.total_months - 1))

    def elapsed_months(self, year: int, month: int) -> int:
        """Payments made by the end of (year, month), clipped to the term."""
        k = months_between((self.start_year, self.start_month), (year, month))
        return max(0, min(k, self.total_months))


@dataclass(frozen=True)
class LoanPayment:
    monthly_payment: float
    total_interest: float
    total_months: int


@dataclass(frozen=True)
class LoanBalance:
    remaining_principal: float
    months_remaining: int
    elapsed_months: int


def months_between(start: tuple[int, int], end: tuple[int, int]) -> int:
    return month_index(*end) - month_index(*start)


def build_loan(
    principal: float,
    annual_rate: float,
    maturity: tuple[int, int] | None,
    repayment: str = EQUAL_INSTALLMENT,
    grace_months: int = 0,
    start: tuple[int, int] | None = None,
) -> Loan:
    """Build a Loan; the start defaults to the current month."""
    if start is None:
        today = date.today()
        start = (today.year, today.month)
    maturity_year, maturity_month = maturity if maturity else (None, None)
    return Loan(
        principal=principal or 0.0,
        annual_rate=annual_rate or 0.0,
        start_year=start[0],
        start_month=start[1],
        maturity_year=maturity_year,
        maturity_month=maturity_month,
        repayment=repayment,
        grace_months=grace_months or 0,
    )


def effective_debt_rate(
    rate_type: str,
    rate: float | None,
    spread: float = 0.0,
    base_rate: float | None = None,
) -> float:
    """Annual rate (%) after fixed/floating resolution.

    floating = base rate + spread; fixed = stored rate (3.5% if missing).
    """
    if rate_type == FLOATING_RATE:
        base = DEFAULT_BASE_RATE if base_rate is None else base_rate
        return base + (spread or 0)
    return DEFAULT_DEBT_RATE if rate is None else rate


def default_grace_months(total_months: int) -> int:
    return int(total_months * DEFAULT_GRACE_RATIO)


def _equal_payment(principal: float, monthly_rate: float, months: int) -> float:
    """Monthly payment for equal installments (원리금균등)"""
    if months <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / months
    r = monthly_rate
    n = months
    return principal * r * (1 + r) ** n / ((1 + r) ** n - 1)


def calc_monthly_payment(loan: Loan) -> LoanPayment:
    """Rated monthly payment and total interest for the loan's scheme.

    Equal principal reports the analytic average payment over the term.
    """
    n = loan.total_months
    principal = loan.principal
    if not principal or principal <= 0 or n <= 0:
        return LoanPayment(0, 0, max(0, n))
    r = loan.monthly_rate

    if loan.repayment == BULLET:
        payment = principal * r
        return LoanPayment(round(payment), round(payment * n), n)

    if loan.repayment == EQUAL_PRINCIPAL:
        avg_interest = principal * r * (n + 1) / 2 / n
        total_interest = principal * r * (n + 1) / 2
        return LoanPayment(round(principal / n + avg_interest), round(total_interest), n)

    if loan.repayment == GRADUATED:
        grace = loan.effective_grace
        grace_interest = principal * r * grace
        payment = _equal_payment(principal, r, n - grace)
        amortization_interest = payment * (n - grace) - principal
        return LoanPayment(round(payment), round(grace_interest + amortization_interest), n)

    if loan.repayment == EQUAL_INSTALLMENT:
        payment = _equal_payment(principal, r, n)
        return LoanPayment(round(payment), round(payment * n - principal), n)

    return LoanPayment(0, 0, n)


def _installment_balance(principal: float, r: float, n: int, k: int) -> float:
    if r == 0:
        return principal * (n - k) / n
    f = 1 + r
    return principal * (f ** n - f ** k) / (f ** n - 1)


def balance_after(loan: Loan, k: int) -> float:
    """Outstanding principal after k payments (closed form, unrounded)."""
    n = loan.total_months
    principal = loan.principal
    if not principal or principal <= 0 or n <= 0 or k >= n:
        return 0.0
    k = max(0, k)
    r = loan.monthly_rate

    if loan.repayment == BULLET:
        return principal
    if loan.repayment == EQUAL_PRINCIPAL:
        return principal * (n - k) / n
    if loan.repayment == GRADUATED:
        grace = loan.effective_grace
        if k <= grace:
            return principal
        return _installment_balance(principal, r, n - grace, k - grace)
    if loan.repayment == EQUAL_INSTALLMENT:
        return _installment_balance(principal, r, n, k)
    return 0.0


def calc_remaining_balance(loan: Loan, year: int, month: int) -> LoanBalance:
    """Remaining principal after the payment of (year, month)."""
    n = loan.total_months
    if not loan.principal or loan.principal <= 0 or n <= 0:
        return LoanBalance(0, 0, 0)
    elapsed = loan.elapsed_months(year, month)
    return LoanBalance(round(balance_after(loan, elapsed)), n - elapsed, elapsed)


def calc_month_repayment(loan: Loan, year: int, month: int) -> tuple[float, float]:
    """(principal, interest) paid in (year, month); zero outside the term."""
    k = months_between((loan.start_year, loan.start_month), (year, month))
    if k < 1 or k > loan.total_months:
        return 0.0, 0.0
    before = balance_after(loan, k - 1)
    after = balance_after(loan, k)
    return before - after, before * loan.monthly_rate


def calc_yearly_repayment(loan: Loan, year: int) -> tuple[float, float]:
    """(principal, interest) paid during the year.

    Principal is the balance drop across the year's payments; interest is
    the sum of balance-before-payment × monthly rate for the same months,
    so partial first and last years stay consistent with the balances.
    """
    principal = 0.0
    interest = 0.0
    for month in range(1, 13):
        p, i = calc_month_repayment(loan, year, month)
        principal += p
        interest += i
    return principal, interest
