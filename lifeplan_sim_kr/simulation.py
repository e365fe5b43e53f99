"""Core simulation engine."""

from dataclasses import dataclass, field
from datetime import date

from lifeplan_sim_kr.activation import age_at, is_active_at, is_single_month, month_index, window_bounds
from lifeplan_sim_kr.items import (
    DB,
    ISA,
    LUMP_SUM,
    MATURITY_TO_CASH,
    MONTHLY_RENT,
    WITHDRAWAL_ORDER,
    YEARLY,
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
    resolve_retirement_windows,
    validate_inputs,
)
from lifeplan_sim_kr.loan import (
    BULLET,
    GRADUATED,
    Loan,
    balance_after,
    build_loan,
    calc_month_repayment,
    default_grace_months,
    effective_debt_rate,
    months_between,
)
from lifeplan_sim_kr.params import (
    ALLOCATION_TYPES,
    CHECKING,
    DEBT,
    FIXED_AMOUNT,
    MAINTAIN_BALANCE,
    PERCENTAGE,
    REMAINDER,
    RULE_ACCOUNT_TYPES,
    RULE_MODES,
    SAVINGS_ACCOUNT,
    Assumptions,
    CashFlowRule,
    Profile,
)
from lifeplan_sim_kr.pension import ACCRUAL, RECEIVING, PensionAccount
from lifeplan_sim_kr.rates import INCOME, base_interest_rate, effective_rate, global_rate, to_monthly_rate
from lifeplan_sim_kr.summary import Summary, build_summary
from lifeplan_sim_kr.tax import (
    calc_acquisition_tax,
    calc_capital_gains_tax,
    calc_interest_income_tax,
    calc_isa_tax,
    calc_pension_income_tax,
)

OVERDRAFT_LABEL = "마이너스 통장"  # 음수 현금 상환분의 배분 항목명


@dataclass(frozen=True)
class MonthlySnapshot:
    year: int
    month: int
    age: int
    income: float
    expense: float
    tax: float
    net_cash_flow: float
    cash: float
    financial_assets: float
    pension_assets: float
    real_estate_value: float
    physical_asset_value: float
    total_debts: float
    net_worth: float
    debt_service: float = 0.0
    contributions: float = 0.0
    income_breakdown: dict[str, float] = field(default_factory=dict)
    expense_breakdown: dict[str, float] = field(default_factory=dict)
    tax_breakdown: dict[str, float] = field(default_factory=dict)
    withdrawals: dict[str, float] = field(default_factory=dict)
    allocations: dict[str, float] = field(default_factory=dict)
    events: tuple[str, ...] = ()


@dataclass(frozen=True)
class YearlySnapshot:
    year: int
    age: int
    total_income: float
    total_expense: float
    debt_service: float
    tax_paid: float
    net_cash_flow: float
    contributions: float
    cash: float
    financial_assets: float
    pension_assets: float
    real_estate_value: float
    physical_asset_value: float
    total_assets: float
    total_debts: float
    net_worth: float
    months: int = 12
    income_breakdown: dict[str, float] = field(default_factory=dict)
    expense_breakdown: dict[str, float] = field(default_factory=dict)
    tax_breakdown: dict[str, float] = field(default_factory=dict)
    withdrawals: dict[str, float] = field(default_factory=dict)
    allocations: dict[str, float] = field(default_factory=dict)
    asset_breakdown: dict[str, float] = field(default_factory=dict)
    debt_breakdown: dict[str, float] = field(default_factory=dict)
    pension_breakdown: dict[str, float] = field(default_factory=dict)
    events: tuple[str, ...] = ()


@dataclass
class SimulationResult:
    start_year: int
    end_year: int
    retirement_year: int
    snapshots: list[YearlySnapshot]
    monthly_snapshots: list[MonthlySnapshot]
    summary: Summary


def _add(d: dict[str, float], key: str, amount: float):
    d[key] = d.get(key, 0.0) + amount


@dataclass
class _MonthFlows:
    """Flows accumulated while one month is processed."""

    income: float = 0.0
    expense: float = 0.0
    tax: float = 0.0
    debt_service: float = 0.0
    contributions: float = 0.0
    income_breakdown: dict[str, float] = field(default_factory=dict)
    expense_breakdown: dict[str, float] = field(default_factory=dict)
    tax_breakdown: dict[str, float] = field(default_factory=dict)
    withdrawals: dict[str, float] = field(default_factory=dict)
    allocations: dict[str, float] = field(default_factory=dict)
    events: list[str] = field(default_factory=list)

    def add_income(self, label: str, amount: float):
        self.income += amount
        _add(self.income_breakdown, label, amount)

    def add_expense(self, label: str, amount: float):
        self.expense += amount
        _add(self.expense_breakdown, label, amount)

    def add_tax(self, label: str, amount: float):
        if amount <= 0:
            return
        self.tax += amount
        _add(self.tax_breakdown, label, amount)


@dataclass
class _RecurringFlow:
    item: Income | Expense
    monthly_rate: float
    base_index: int


@dataclass
class _SavingsState:
    item: Savings
    balance: float
    total_principal: float
    monthly_rate: float
    is_open: bool = False
    is_matured: bool = False

    @property
    def is_live(self) -> bool:
        return self.is_open and not self.is_matured


@dataclass
class _LoanState:
    """Closed-form loan plus the principal already prepaid out of surplus.

    A prepayment shortens the loan: the schedule is kept and the prepaid
    amount is subtracted from every scheduled balance.
    """

    title: str
    loan: Loan
    start_index: int
    disburse: bool
    id: str = ""
    prepaid: float = 0.0
    is_paid_off: bool = False

    def balance_at(self, year: int, month: int) -> float:
        if self.is_paid_off or month_index(year, month) < self.start_index:
            return 0.0
        return max(0.0, balance_after(self.loan, self.loan.elapsed_months(year, month)) - self.prepaid)

    def repayment(self, year: int, month: int) -> tuple[float, float]:
        principal, interest = calc_month_repayment(self.loan, year, month)
        if self.prepaid <= 0 or principal + interest <= 0:
            return principal, interest
        k = self.loan.elapsed_months(year, month)
        before = max(0.0, balance_after(self.loan, k - 1) - self.prepaid)
        return min(principal, before), before * self.loan.monthly_rate


@dataclass
class _HoldingState:
    item: RealEstate | PhysicalAsset
    value: float
    monthly_rate: float
    acquire_index: int | None  # None → already held at simulation start
    held_since: int
    sell_index: int | None
    loan: _LoanState | None = None
    is_held: bool = False
    is_sold: bool = False


@dataclass
class _PensionState:
    item: RetirementPension | PersonalPension
    account: PensionAccount
    annual_return: float
    start_age: int


class _Household:
    """Mutable state of one run. Built fresh per call; inputs are never modified."""

    def __init__(
        self,
        profile: Profile,
        items: list,
        assumptions: Assumptions,
        rules,
        start_year: int,
        start_month: int,
        initial_cash: float,
        emergency_fund_months: float,
    ):
        self.profile = profile
        self.assumptions = assumptions
        self.rules = sorted((r for r in rules if r.is_enabled), key=lambda r: r.priority)
        self.start_index = month_index(start_year, start_month)
        self.start_year = start_year
        self.cash = initial_cash
        self.emergency_fund_months = emergency_fund_months
        self.in_shortfall = False
        self.rule_allocated: dict[int, float] = {}

        self.incomes: list[_RecurringFlow] = []
        self.expenses: list[_RecurringFlow] = []
        self.savings: list[_SavingsState] = []
        self.loans: list[_LoanState] = []
        self.holdings: list[_HoldingState] = []
        self.national_pensions: list[NationalPension] = []
        self.pensions: list[_PensionState] = []
        self.national_started: set[int] = set()

        for item in items:
            self._add_item(item)

    # ---- setup ----

    def _growth_base_index(self, item) -> int:
        if item.base_year:
            return month_index(item.base_year, 1)
        if item.start_year:
            return month_index(item.start_year, item.start_month or 1)
        return self.start_index

    def _item_start(self, item) -> tuple[int, int]:
        """Item's window start; a missing start means the simulation start."""
        if item.start_year:
            return item.start_year, item.start_month or 1
        return (self.start_index - 1) // 12, (self.start_index - 1) % 12 + 1

    def _build_loan_state(self, item_id: str, title: str, terms, start: tuple[int, int], maturity) -> _LoanState:
        rate = effective_debt_rate(
            terms.rate_type, terms.interest_rate, terms.spread, base_interest_rate(self.assumptions),
        )
        grace = terms.grace_months
        if grace is None:
            if terms.repayment == GRADUATED and maturity:
                grace = default_grace_months(months_between(start, maturity))
            else:
                grace = 0
        loan = build_loan(terms.principal, rate, maturity, terms.repayment, grace, start=start)
        start_index = month_index(*start)
        return _LoanState(title, loan, start_index, disburse=start_index > self.start_index, id=item_id)

    def _add_item(self, item):
        a = self.assumptions
        if isinstance(item, (Income, Expense)):
            rate = effective_rate(item.growth_rate, item.rate_category, a)
            flow = _RecurringFlow(item, to_monthly_rate(rate), self._growth_base_index(item))
            (self.incomes if isinstance(item, Income) else self.expenses).append(flow)
        elif isinstance(item, Savings):
            rate = effective_rate(item.interest_rate, item.rate_category, a)
            self.savings.append(
                _SavingsState(item, item.current_balance, item.current_balance, to_monthly_rate(rate))
            )
        elif isinstance(item, Debt):
            maturity = (item.end_year, item.end_month or 12) if item.end_year else None
            self.loans.append(self._build_loan_state(item.id, item.label, item, self._item_start(item), maturity))
        elif isinstance(item, (RealEstate, PhysicalAsset)):
            self.holdings.append(self._build_holding(item))
        elif isinstance(item, NationalPension):
            self.national_pensions.append(item)
        elif isinstance(item, (RetirementPension, PersonalPension)):
            account = PensionAccount(item.label, item.current_balance, item.current_balance)
            start_age = item.start_age or self.profile.retirement_age_of(item.owner)
            rate = effective_rate(item.return_rate, item.rate_category, a)
            self.pensions.append(_PensionState(item, account, rate, start_age))
        else:
            raise TypeError(f"unsupported item kind: {type(item).__name__}")

    def _build_holding(self, item: RealEstate | PhysicalAsset) -> _HoldingState:
        start, end = window_bounds(item)
        if isinstance(item, RealEstate):
            rate = effective_rate(item.growth_rate, item.rate_category, self.assumptions)
        else:
            rate = effective_rate(item.annual_rate, item.rate_category, self.assumptions)
        acquired_later = item.start_year is not None and start > self.start_index
        already_gone = item.end_year is not None and end < self.start_index
        value = item.current_value
        if isinstance(item, RealEstate) and item.is_lease:
            value = item.deposit
        holding = _HoldingState(
            item=item,
            value=value,
            monthly_rate=to_monthly_rate(rate),
            acquire_index=start if acquired_later else None,
            held_since=start if item.start_year else self.start_index,
            sell_index=end if item.end_year else None,
            is_held=not acquired_later and not already_gone,
        )
        # a loan on a holding sold before the start was settled at that sale
        if item.loan is not None and not already_gone:
            terms: LoanTerms = item.loan
            if terms.start_year:
                loan_start = (terms.start_year, terms.start_month or 1)
            else:
                loan_start = self._item_start(item)
            maturity = (terms.maturity_year, terms.maturity_month or 12) if terms.maturity_year else None
            holding.loan = self._build_loan_state(item.id, f"{item.label} 대출", terms, loan_start, maturity)
            self.loans.append(holding.loan)
        return holding

    # ---- monthly steps ----

    def recurring_flows(self, year: int, month: int, flows: _MonthFlows):
        idx = month_index(year, month)
        for f in self.incomes:
            item = f.item
            if not is_active_at(item, year, month):
                continue
            base = item.amount / 12 if item.frequency == YEARLY else item.amount
            amount = base * (1 + f.monthly_rate) ** max(0, idx - f.base_index)
            self.cash += amount
            flows.add_income(item.label, amount)
        for f in self.expenses:
            item = f.item
            if not is_active_at(item, year, month):
                continue
            if item.frequency == YEARLY and not is_single_month(item):
                base = item.amount / 12
            else:
                base = item.amount
            amount = base * (1 + f.monthly_rate) ** max(0, idx - f.base_index)
            self.cash -= amount
            flows.add_expense(item.label, amount)

    def national_pension_income(self, year: int, month: int, flows: _MonthFlows):
        for i, item in enumerate(self.national_pensions):
            age = self.profile.age_of(item.owner, year, month)
            if age < item.start_age or (item.end_age is not None and age > item.end_age):
                continue
            inflation = global_rate(item.rate_category, self.assumptions)
            amount = item.expected_monthly_amount * (1 + inflation / 100) ** max(0, year - self.start_year)
            if i not in self.national_started:
                self.national_started.add(i)
                flows.events.append(f"{item.label} 수령 개시 (월 {amount:.0f}만원)")
            self.cash += amount
            flows.add_income(item.label, amount)

    def acquisitions(self, year: int, month: int, flows: _MonthFlows):
        idx = month_index(year, month)
        for h in self.holdings:
            if h.acquire_index != idx or h.is_held or h.is_sold:
                continue
            item = h.item
            h.is_held = True
            if isinstance(item, RealEstate) and item.is_lease:
                h.value = item.deposit
                self.cash -= item.deposit
                flows.events.append(f"{item.label} 입주 (보증금 {item.deposit:.0f}만원)")
                continue
            price = item.purchase_price or item.current_value
            h.value = price
            if item.include_in_cashflow:
                self.cash -= price
                if isinstance(item, RealEstate):
                    tax = calc_acquisition_tax(price)
                    self.cash -= tax
                    flows.add_tax(f"{item.label} 취득세", tax)
            flows.events.append(f"{item.label} 취득 ({price:.0f}만원)")

    def housing_flows(self, year: int, month: int, flows: _MonthFlows):
        for h in self.holdings:
            item = h.item
            if not h.is_held or not isinstance(item, RealEstate):
                continue
            if item.housing_type == MONTHLY_RENT and item.monthly_rent > 0:
                self.cash -= item.monthly_rent
                flows.add_expense(f"{item.label} 월세", item.monthly_rent)
            if item.maintenance_fee > 0:
                self.cash -= item.maintenance_fee
                flows.add_expense(f"{item.label} 관리비", item.maintenance_fee)
            if item.rental_income > 0:
                self.cash += item.rental_income
                flows.add_income(f"{item.label} 임대소득", item.rental_income)

    def debt_service(self, year: int, month: int, flows: _MonthFlows):
        idx = month_index(year, month)
        for s in self.loans:
            if s.is_paid_off:
                continue
            if s.disburse and idx == s.start_index and s.loan.principal > 0:
                self.cash += s.loan.principal
                flows.events.append(f"{s.title} 실행 ({s.loan.principal:.0f}만원)")
            principal, interest = s.repayment(year, month)
            payment = principal + interest
            if payment > 0:
                self.cash -= payment
                flows.add_expense(f"{s.title} 상환", payment)
                flows.debt_service += payment
            if s.loan.total_months > 0 and idx - s.start_index == s.loan.total_months:
                s.is_paid_off = True
                if s.loan.repayment == BULLET:
                    flows.events.append(f"{s.title} 만기상환")
                else:
                    flows.events.append(f"{s.title} 상환 완료")
            elif s.prepaid > 0 and idx >= s.start_index and s.balance_at(year, month) <= 0:
                s.is_paid_off = True
                flows.events.append(f"{s.title} 상환 완료")

    def savings_contributions(self, year: int, month: int, flows: _MonthFlows):
        for s in self.savings:
            item = s.item
            if s.is_matured or not is_active_at(item, year, month):
                continue
            if not s.is_open:
                s.is_open = True
                if month_index(year, month) > self.start_index and s.balance > 0:
                    self.cash -= s.balance
            if item.monthly_contribution > 0:
                self.cash -= item.monthly_contribution
                s.balance += item.monthly_contribution
                s.total_principal += item.monthly_contribution
                flows.contributions += item.monthly_contribution

    def pension_flows(self, year: int, month: int, flows: _MonthFlows):
        for p in self.pensions:
            item = p.item
            account = p.account
            if not account.is_open:
                continue
            age = self.profile.age_of(item.owner, year, month)
            if isinstance(item, PersonalPension) and item.account_type == ISA:
                self._isa_maturity(p, year, month, flows)
                if account.is_open and is_active_at(item, year, month):
                    flows.contributions += self._pay_in(account, item.monthly_contribution)
                continue

            if account.phase == ACCRUAL:
                if isinstance(item, RetirementPension):
                    self._retirement_accrual(p, year, month, flows)
                elif age < p.start_age and is_active_at(item, year, month):
                    flows.contributions += self._pay_in(account, item.monthly_contribution)
                if age >= p.start_age:
                    if item.receive_type == LUMP_SUM:
                        amount = account.take_lump_sum()
                        self.cash += amount
                        flows.add_income(f"{item.label} 일시금", amount)
                        flows.events.append(f"{item.label} 일시금 수령 ({amount:.0f}만원)")
                        continue
                    withdrawal = account.start_receiving(item.receiving_years, p.annual_return)
                    flows.events.append(f"{item.label} 연금 수령 개시 (월 {withdrawal:.0f}만원)")

            if account.phase == RECEIVING:
                amount = account.withdraw()
                tax = calc_pension_income_tax(amount, age)
                self.cash += amount - tax
                flows.add_income(item.label, amount)
                flows.add_tax(f"{item.label} 연금소득세", tax)
                if not account.is_open:
                    flows.events.append(f"{item.label} 수령 종료")

    def _pay_in(self, account: PensionAccount, amount: float) -> float:
        accepted = account.contribute(amount)
        self.cash -= accepted
        return accepted

    def _retirement_accrual(self, p: _PensionState, year: int, month: int, flows: _MonthFlows):
        item: RetirementPension = p.item
        idx = month_index(year, month)
        ret_index = month_index(*self.profile.retirement_of(item.owner))
        if item.pension_type == DB:
            if idx == ret_index + 1 and idx > self.start_index:
                amount = self._db_severance(item)
                if amount > 0:
                    p.account.deposit(amount)
                    flows.events.append(f"{item.label} 퇴직금 적립 ({amount:.0f}만원)")
        elif idx <= ret_index and item.employer_contribution > 0:
            p.account.contribute(item.employer_contribution)

    def _db_severance(self, item: RetirementPension) -> float:
        """DB/퇴직금: projected final salary × years of service at retirement."""
        ret_year, _ = self.profile.retirement_of(item.owner)
        years_left = max(0, ret_year - self.start_year)
        growth = global_rate(INCOME, self.assumptions)
        salary = item.monthly_salary * (1 + growth / 100) ** years_left
        return salary * max(0, item.years_of_service + years_left)

    def _isa_maturity(self, p: _PensionState, year: int, month: int, flows: _MonthFlows):
        item: PersonalPension = p.item
        if not item.maturity_year or (year, month) != (item.maturity_year, item.maturity_month or 12):
            return
        account = p.account
        gain = account.balance - account.total_principal
        tax = calc_isa_tax(gain, item.is_seomin)
        net = account.take_lump_sum() - tax
        flows.add_tax(f"{item.label} ISA 세금", tax)
        if item.maturity_strategy != MATURITY_TO_CASH:
            for target in self.pensions:
                t = target.item
                if (isinstance(t, PersonalPension) and t.account_type == item.maturity_strategy
                        and t.owner == item.owner and target.account.deposit(net)):
                    flows.events.append(f"{item.label} 만기 → {t.label} 이전 ({net:.0f}만원)")
                    return
        self.cash += net
        flows.events.append(f"{item.label} 만기 → 현금 수령 ({net:.0f}만원)")

    def sales(self, year: int, month: int, flows: _MonthFlows):
        idx = month_index(year, month)
        for h in self.holdings:
            if not h.is_held or h.sell_index != idx:
                continue
            item = h.item
            h.is_held = False
            h.is_sold = True
            loan_balance = 0.0
            if h.loan is not None:
                loan_balance = h.loan.balance_at(year, month)
                h.loan.is_paid_off = True
            if isinstance(item, RealEstate) and item.is_lease:
                self.cash += item.deposit - loan_balance
                flows.events.append(f"{item.label} 종료 (보증금 {item.deposit:.0f}만원 반환)")
                continue
            sale_price = h.value
            tax = 0.0
            if isinstance(item, RealEstate):
                purchase = item.purchase_price or item.current_value
                tax = calc_capital_gains_tax(
                    sale_price, purchase, (idx - h.held_since) / 12, item.is_primary_residence,
                )
                flows.add_tax(f"{item.label} 양도소득세", tax)
            self.cash += sale_price - tax - loan_balance
            flows.events.append(f"{item.label} 매각 ({sale_price:.0f}만원, 세금 {tax:.0f}만원)")

    def growth(self):
        for s in self.savings:
            if s.is_live:
                s.balance *= 1 + s.monthly_rate
        for p in self.pensions:
            p.account.grow(p.annual_return)
        for h in self.holdings:
            if not h.is_held:
                continue
            if isinstance(h.item, RealEstate) and h.item.is_lease:
                continue
            h.value = max(0.0, h.value * (1 + h.monthly_rate))

    def savings_maturity(self, year: int, month: int, flows: _MonthFlows):
        for s in self.savings:
            item = s.item
            if not s.is_live or not item.end_year:
                continue
            if (year, month) != (item.end_year, item.end_month or 12):
                continue
            gain = s.balance - s.total_principal
            tax = calc_interest_income_tax(gain, item.is_tax_free)
            payout = s.balance - tax
            self.cash += payout
            flows.add_tax(f"{item.label} 이자소득세", tax)
            flows.events.append(f"{item.label} 만기 ({payout:.0f}만원, 세금 {tax:.0f}만원)")
            s.balance = 0.0
            s.is_matured = True

    # ---- cash settlement ----

    def _rule_target(self, rule: CashFlowRule):
        if rule.account_type == DEBT:
            for s in self.loans:
                if s.id == rule.target_id and not s.is_paid_off:
                    return s
            return None
        if rule.account_type == CHECKING and rule.target_id is None:
            return None
        if rule.target_id is not None:
            for s in self.savings:
                if s.item.id == rule.target_id and s.is_live:
                    return s
            for p in self.pensions:
                if p.item.id == rule.target_id and p.account.phase == ACCRUAL:
                    return p
            return None
        if rule.account_type == SAVINGS_ACCOUNT:
            for s in self.savings:
                if s.item.kind == SAVINGS_ACCOUNT and s.is_live:
                    return s
            return None
        for p in self.pensions:
            item = p.item
            if (isinstance(item, PersonalPension) and item.account_type == rule.account_type
                    and p.account.phase == ACCRUAL):
                return p
        return None

    def cover_deficit(self, flows: _MonthFlows):
        """Draw a negative cash balance from savings; what is left stays negative."""
        ordered: list[_SavingsState] = []
        for rule in reversed(self.rules):
            target = self._rule_target(rule)
            if isinstance(target, _SavingsState) and target not in ordered:
                ordered.append(target)
        for kind in WITHDRAWAL_ORDER:
            same_kind = [s for s in self.savings if s.item.kind == kind and s not in ordered]
            ordered.extend(sorted(same_kind, key=lambda s: s.balance, reverse=True))
        ordered.extend(s for s in self.savings if s not in ordered)

        for s in ordered:
            if self.cash >= 0:
                break
            if not s.is_live or s.balance <= 0:
                continue
            withdrawal = min(s.balance, -self.cash)
            s.balance -= withdrawal
            s.total_principal = max(0.0, s.total_principal - withdrawal)
            self.cash += withdrawal
            _add(flows.withdrawals, s.item.label, withdrawal)

    def _rule_amount(self, i: int, rule: CashFlowRule, target, available: float, month_surplus: float) -> float:
        if rule.mode == MAINTAIN_BALANCE:
            balance = target.balance if isinstance(target, _SavingsState) else target.account.balance
            return min(available, rule.target_balance - balance)
        if rule.allocation_type == FIXED_AMOUNT:
            amount = min(rule.monthly_amount, available)
        elif rule.allocation_type == PERCENTAGE:
            amount = min(month_surplus * rule.percentage / 100, available)
        else:
            amount = available
        if rule.annual_limit is not None:
            amount = min(amount, max(0.0, rule.annual_limit - self.rule_allocated.get(i, 0.0)))
        return amount

    def allocate_surplus(self, year: int, month: int, flows: _MonthFlows, overdraft_repaid: float):
        """Keep the cash buffer, then route the excess through the rule list.

        Percentage rules take their share of this month's net flow left
        after the overdraft repayment, not of cash carried over.
        """
        buffer_target = self.emergency_fund_months * flows.expense
        available = self.cash - buffer_target
        month_surplus = flows.income - flows.expense - flows.tax - overdraft_repaid
        month_surplus = max(0.0, min(month_surplus, available))
        for i, rule in enumerate(self.rules):
            if available <= 0:
                break
            if not is_active_at(rule, year, month):
                continue
            target = self._rule_target(rule)
            if target is None:
                if rule.account_type == CHECKING and rule.allocation_type == REMAINDER:
                    break
                continue
            amount = self._rule_amount(i, rule, target, available, month_surplus)
            if isinstance(target, _LoanState):
                amount = min(amount, target.balance_at(year, month))
            if amount <= 0:
                continue
            if isinstance(target, _LoanState):
                target.prepaid += amount
                label = target.title
                if target.balance_at(year, month) <= 0:
                    target.is_paid_off = True
                    flows.events.append(f"{target.title} 조기상환")
            elif isinstance(target, _SavingsState):
                target.balance += amount
                target.total_principal += amount
                label = target.item.label
            else:
                amount = target.account.contribute(amount)
                label = target.item.label
            self.cash -= amount
            available -= amount
            self.rule_allocated[i] = self.rule_allocated.get(i, 0.0) + amount
            _add(flows.allocations, label, amount)

    def settle(self, year: int, month: int, flows: _MonthFlows, opening_cash: float):
        """Repay a negative opening balance first, then cover a deficit or allocate the surplus."""
        overdraft_repaid = 0.0
        if opening_cash < 0 and self.cash > opening_cash:
            overdraft_repaid = min(self.cash, 0.0) - opening_cash
            _add(flows.allocations, OVERDRAFT_LABEL, overdraft_repaid)
        if self.cash < 0:
            self.cover_deficit(flows)
        else:
            self.allocate_surplus(year, month, flows, overdraft_repaid)
        if self.cash < 0:
            if not self.in_shortfall:
                flows.events.append(f"현금 부족 ({-self.cash:.0f}만원)")
            self.in_shortfall = True
        else:
            self.in_shortfall = False

    def new_year(self):
        self.rule_allocated = {}

    # ---- balances ----

    def balances(self, year: int, month: int) -> dict:
        financial = self.cash + sum(s.balance for s in self.savings if s.is_live)
        pension = sum(p.account.balance for p in self.pensions if p.account.is_open)
        real_estate = 0.0
        physical = 0.0
        for h in self.holdings:
            if not h.is_held:
                continue
            if isinstance(h.item, RealEstate):
                real_estate += h.value
            else:
                physical += h.value
        debts = sum(s.balance_at(year, month) for s in self.loans)
        return {
            "cash": self.cash,
            "financial_assets": financial,
            "pension_assets": pension,
            "real_estate_value": real_estate,
            "physical_asset_value": physical,
            "total_debts": debts,
            "net_worth": financial + pension + real_estate + physical - debts,
        }

    def asset_breakdown(self) -> dict[str, float]:
        assets = {}
        if self.cash:
            _add(assets, "현금", self.cash)
        for s in self.savings:
            if s.is_live and s.balance > 0:
                _add(assets, s.item.label, s.balance)
        for h in self.holdings:
            if h.is_held:
                _add(assets, h.item.label, h.value)
        return assets

    def debt_breakdown(self, year: int, month: int) -> dict[str, float]:
        debts = {}
        for s in self.loans:
            balance = s.balance_at(year, month)
            if balance > 0:
                _add(debts, s.title, balance)
        return debts

    def pension_breakdown(self) -> dict[str, float]:
        pensions = {}
        for p in self.pensions:
            if p.account.is_open and p.account.balance > 0:
                _add(pensions, p.item.label, p.account.balance)
        return pensions


def _step_month(hh: _Household, year: int, month: int) -> MonthlySnapshot:
    flows = _MonthFlows()
    opening_cash = hh.cash
    hh.recurring_flows(year, month, flows)
    hh.national_pension_income(year, month, flows)
    hh.acquisitions(year, month, flows)
    hh.housing_flows(year, month, flows)
    hh.debt_service(year, month, flows)
    hh.savings_contributions(year, month, flows)
    hh.pension_flows(year, month, flows)
    hh.sales(year, month, flows)
    hh.growth()
    hh.savings_maturity(year, month, flows)
    hh.settle(year, month, flows, opening_cash)

    b = hh.balances(year, month)
    p = hh.profile
    return MonthlySnapshot(
        year=year,
        month=month,
        age=age_at(p.birth_year, p.birth_month, year, month),
        income=flows.income,
        expense=flows.expense,
        tax=flows.tax,
        net_cash_flow=flows.income - flows.expense - flows.tax,
        debt_service=flows.debt_service,
        contributions=flows.contributions,
        income_breakdown=flows.income_breakdown,
        expense_breakdown=flows.expense_breakdown,
        tax_breakdown=flows.tax_breakdown,
        withdrawals=flows.withdrawals,
        allocations=flows.allocations,
        events=tuple(flows.events),
        **b,
    )


def _merge(months: list[MonthlySnapshot], attr: str) -> dict[str, float]:
    merged: dict[str, float] = {}
    for m in months:
        for key, amount in getattr(m, attr).items():
            _add(merged, key, amount)
    return merged


def _close_year(hh: _Household, year: int, months: list[MonthlySnapshot]) -> YearlySnapshot:
    last = months[-1]
    total_income = sum(m.income for m in months)
    total_expense = sum(m.expense for m in months)
    tax_paid = sum(m.tax for m in months)
    total_assets = (
        last.financial_assets + last.pension_assets + last.real_estate_value + last.physical_asset_value
    )
    events = tuple(e for m in months for e in m.events)
    return YearlySnapshot(
        year=year,
        age=year - hh.profile.birth_year,
        total_income=total_income,
        total_expense=total_expense,
        debt_service=sum(m.debt_service for m in months),
        tax_paid=tax_paid,
        net_cash_flow=total_income - total_expense - tax_paid,
        contributions=sum(m.contributions for m in months),
        cash=last.cash,
        financial_assets=last.financial_assets,
        pension_assets=last.pension_assets,
        real_estate_value=last.real_estate_value,
        physical_asset_value=last.physical_asset_value,
        total_assets=total_assets,
        total_debts=last.total_debts,
        net_worth=last.net_worth,
        months=len(months),
        income_breakdown=_merge(months, "income_breakdown"),
        expense_breakdown=_merge(months, "expense_breakdown"),
        tax_breakdown=_merge(months, "tax_breakdown"),
        withdrawals=_merge(months, "withdrawals"),
        allocations=_merge(months, "allocations"),
        asset_breakdown=hh.asset_breakdown(),
        debt_breakdown=hh.debt_breakdown(year, last.month),
        pension_breakdown=hh.pension_breakdown(),
        events=events,
    )


def _validate_run(
    profile: Profile | None,
    items,
    assumptions: Assumptions,
    rules,
    start_year: int,
    start_month: int,
    years: int | None,
) -> list[str]:
    errors = validate_inputs(profile, items, assumptions)
    if not 1 <= start_month <= 12:
        errors.append(f"시작월 {start_month}은 1-12 범위여야 합니다")
    if years is not None and years <= 0:
        errors.append(f"시뮬레이션 기간 {years}년은 1년 이상이어야 합니다")
    if profile is not None and years is None and profile.birth_year + assumptions.life_expectancy < start_year:
        errors.append(f"기대수명 {assumptions.life_expectancy}세가 이미 지났습니다 (시작 {start_year}년)")
    for rule in rules:
        if rule.account_type not in RULE_ACCOUNT_TYPES:
            errors.append(f"잉여금 규칙 '{rule.name}': 알 수 없는 계좌 유형 '{rule.account_type}'")
        if rule.allocation_type not in ALLOCATION_TYPES:
            errors.append(f"잉여금 규칙 '{rule.name}': 알 수 없는 배분 방식 '{rule.allocation_type}'")
        if rule.mode not in RULE_MODES:
            errors.append(f"잉여금 규칙 '{rule.name}': 알 수 없는 모드 '{rule.mode}'")
        if rule.mode == MAINTAIN_BALANCE:
            if rule.target_balance is None:
                errors.append(f"잉여금 규칙 '{rule.name}': 잔액 유지 모드에는 목표 잔액이 필요합니다")
            if rule.account_type in (CHECKING, DEBT):
                errors.append(f"잉여금 규칙 '{rule.name}': 잔액 유지 모드는 저축·연금 계좌에만 쓸 수 있습니다")
        if rule.account_type == DEBT and not rule.target_id:
            errors.append(f"잉여금 규칙 '{rule.name}': 대출 상환 규칙에는 target_id가 필요합니다")
        for m in (rule.start_month, rule.end_month):
            if m is not None and not 1 <= m <= 12:
                errors.append(f"잉여금 규칙 '{rule.name}': 적용 월 {m}은 1-12 범위여야 합니다")
    return errors


def simulate(
    profile: Profile,
    items,
    assumptions: Assumptions | None = None,
    rules=(),
    start_year: int | None = None,
    start_month: int = 1,
    years: int | None = None,
    initial_cash: float = 0.0,
    emergency_fund_months: float = 0.0,
    include_monthly: bool = False,
) -> SimulationResult:
    """Project the household month by month to the end of life expectancy.

    years: cap the horizon at this many calendar years (None = to life expectancy).
    emergency_fund_months: cash kept before the surplus rules apply, in months of expense.
    include_monthly: also return the monthly snapshots.
    Raises ValueError listing every problem in a malformed input set.
    """
    if assumptions is None:
        assumptions = Assumptions()
    if start_year is None:
        start_year = date.today().year
    rules = list(rules)
    items = list(items)

    errors = _validate_run(profile, items, assumptions, rules, start_year, start_month, years)
    if errors:
        raise ValueError("시뮬레이션 불가:\n" + "\n".join(f"  ✗ {e}" for e in errors))

    resolved = resolve_retirement_windows(items, profile)
    hh = _Household(
        profile, resolved, assumptions, rules, start_year, start_month,
        initial_cash, emergency_fund_months,
    )

    if years is not None:
        end_year = start_year + years - 1
    else:
        end_year = profile.birth_year + assumptions.life_expectancy

    snapshots: list[YearlySnapshot] = []
    monthly_snapshots: list[MonthlySnapshot] = []
    for year in range(start_year, end_year + 1):
        hh.new_year()
        first_month = start_month if year == start_year else 1
        months = [_step_month(hh, year, month) for month in range(first_month, 13)]
        snapshots.append(_close_year(hh, year, months))
        if include_monthly:
            monthly_snapshots.extend(months)

    retirement_year = profile.retirement_year
    return SimulationResult(
        start_year=start_year,
        end_year=end_year,
        retirement_year=retirement_year,
        snapshots=snapshots,
        monthly_snapshots=monthly_snapshots,
        summary=build_summary(snapshots, start_year, retirement_year),
    )
