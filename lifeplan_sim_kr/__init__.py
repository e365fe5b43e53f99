"""Household Life-Plan Projection Package."""

from lifeplan_sim_kr.params import (
    Profile,
    Assumptions,
    CashFlowRule,
    DEFAULT_CASH_FLOW_RULES,
)
from lifeplan_sim_kr.items import (
    Income,
    Expense,
    Savings,
    Debt,
    LoanTerms,
    RealEstate,
    PhysicalAsset,
    NationalPension,
    RetirementPension,
    PersonalPension,
    resolve_retirement_windows,
    validate_inputs,
)
from lifeplan_sim_kr.activation import is_active_at, is_active_in_year
from lifeplan_sim_kr.rates import effective_rate, SCENARIO_PRESETS
from lifeplan_sim_kr.loan import (
    Loan,
    build_loan,
    calc_monthly_payment,
    calc_remaining_balance,
    calc_yearly_repayment,
)
from lifeplan_sim_kr.pension import (
    PensionAccount,
    calc_annual_pension_withdrawal,
    calc_monthly_pension_withdrawal,
)
from lifeplan_sim_kr.tax import (
    calc_interest_income_tax,
    calc_capital_gains_tax,
    calc_isa_tax,
    calc_pension_income_tax,
)
from lifeplan_sim_kr.simulation import (
    simulate,
    MonthlySnapshot,
    YearlySnapshot,
    SimulationResult,
)
from lifeplan_sim_kr.summary import Summary, build_summary
from lifeplan_sim_kr.scenarios import run_scenarios, SCENARIO_ORDER

__all__ = [
    "Profile",
    "Assumptions",
    "CashFlowRule",
    "DEFAULT_CASH_FLOW_RULES",
    "Income",
    "Expense",
    "Savings",
    "Debt",
    "LoanTerms",
    "RealEstate",
    "PhysicalAsset",
    "NationalPension",
    "RetirementPension",
    "PersonalPension",
    "resolve_retirement_windows",
    "validate_inputs",
    "is_active_at",
    "is_active_in_year",
    "effective_rate",
    "SCENARIO_PRESETS",
    "Loan",
    "build_loan",
    "calc_monthly_payment",
    "calc_remaining_balance",
    "calc_yearly_repayment",
    "PensionAccount",
    "calc_annual_pension_withdrawal",
    "calc_monthly_pension_withdrawal",
    "calc_interest_income_tax",
    "calc_capital_gains_tax",
    "calc_isa_tax",
    "calc_pension_income_tax",
    "simulate",
    "MonthlySnapshot",
    "YearlySnapshot",
    "SimulationResult",
    "Summary",
    "build_summary",
    "run_scenarios",
    "SCENARIO_ORDER",
]
