"""Pension annuity math and accrual/receiving phase state."""

from dataclasses import dataclass

from lifeplan_sim_kr.rates import to_monthly_rate

ACCRUAL = "accrual"      # 적립기
RECEIVING = "receiving"  # 수령기
CLOSED = "closed"        # 수령 완료/해지

DEFAULT_RECEIVING_YEARS = 20
DEFAULT_PENSION_RETURN = 3.0  # %

_EXHAUSTED = 1e-6  # 잔액 0 판정 (만원)


def calc_pmt(present_value: float, periods: int, rate_pct: float) -> float:
    """Level payment that amortizes present_value over periods at rate_pct per period."""
    if periods <= 0:
        return 0.0
    r = rate_pct / 100
    if r == 0:
        return present_value / periods
    return present_value * r * (1 + r) ** periods / ((1 + r) ** periods - 1)


def calc_annual_pension_withdrawal(
    balance: float, receiving_years: int, return_rate: float = DEFAULT_PENSION_RETURN,
) -> float:
    """Annual withdrawal (만원/년) that exhausts balance over receiving_years."""
    if balance <= 0 or receiving_years <= 0:
        return 0
    return round(calc_pmt(balance, receiving_years, return_rate))


def calc_monthly_pension_withdrawal(
    balance: float, receiving_years: int, annual_return_pct: float,
) -> float:
    """Monthly withdrawal over receiving_years*12 months at the monthly-equivalent rate."""
    if balance <= 0 or receiving_years <= 0:
        return 0.0
    monthly_pct = to_monthly_rate(annual_return_pct) * 100
    return calc_pmt(balance, receiving_years * 12, monthly_pct)


def calc_accrued_balance(
    balance: float, monthly_contribution: float, annual_return_pct: float, months: int,
) -> float:
    """Balance after months of contributions, each made before that month's growth."""
    if months <= 0:
        return balance
    r = to_monthly_rate(annual_return_pct)
    if r == 0:
        return balance + monthly_contribution * months
    growth = (1 + r) ** months
    return balance * growth + monthly_contribution * (growth - 1) / r * (1 + r)


@dataclass
class PensionAccount:
    """Balance of one pension through its accrual and receiving phases.

    The level withdrawal and the rate it compounds at are fixed when
    receiving starts; later rate changes do not touch them.
    """

    title: str
    balance: float = 0.0
    total_principal: float = 0.0
    phase: str = ACCRUAL
    monthly_withdrawal: float = 0.0
    receiving_monthly_rate: float = 0.0
    receiving_months: int = 0
    months_received: int = 0

    @property
    def is_open(self) -> bool:
        return self.phase != CLOSED

    def contribute(self, amount: float) -> float:
        """Add a contribution during accrual. Returns the amount accepted."""
        if self.phase != ACCRUAL or amount <= 0:
            return 0.0
        self.balance += amount
        self.total_principal += amount
        return amount

    def grow(self, annual_return_pct: float):
        if self.phase == ACCRUAL:
            self.balance *= 1 + to_monthly_rate(annual_return_pct)

    def start_receiving(self, receiving_years: int, annual_return_pct: float) -> float:
        """Switch to receiving and fix the monthly withdrawal from the current balance."""
        if self.phase != ACCRUAL:
            return self.monthly_withdrawal
        self.phase = RECEIVING
        self.receiving_months = max(1, receiving_years * 12)
        self.receiving_monthly_rate = to_monthly_rate(annual_return_pct)
        self.monthly_withdrawal = calc_monthly_pension_withdrawal(
            self.balance, max(1, receiving_years), annual_return_pct,
        )
        if self.balance <= _EXHAUSTED:
            self.phase = CLOSED
        return self.monthly_withdrawal

    def withdraw(self) -> float:
        """Grow one month at the frozen rate, then pay the fixed withdrawal."""
        if self.phase != RECEIVING:
            return 0.0
        grown = self.balance * (1 + self.receiving_monthly_rate)
        self.months_received += 1
        if self.months_received >= self.receiving_months:
            amount = grown
        else:
            amount = min(self.monthly_withdrawal, grown)
        self.balance = grown - amount
        if self.balance <= _EXHAUSTED:
            self.balance = 0.0
            self.phase = CLOSED
        return amount

    def take_lump_sum(self) -> float:
        amount = self.balance
        self.balance = 0.0
        self.phase = CLOSED
        return amount

    def deposit(self, amount: float) -> bool:
        """Transfer in (e.g. ISA maturity). Only accounts still accruing accept it."""
        if self.phase != ACCRUAL:
            return False
        self.balance += amount
        self.total_principal += amount
        return True
