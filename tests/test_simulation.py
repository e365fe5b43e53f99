"""Tests for simulate() end to end."""

import pytest
from lifeplan_sim_kr import (
    Assumptions,
    CashFlowRule,
    Debt,
    Expense,
    Income,
    LoanTerms,
    NationalPension,
    PersonalPension,
    PhysicalAsset,
    Profile,
    RealEstate,
    RetirementPension,
    Savings,
    calc_monthly_pension_withdrawal,
    simulate,
)
from lifeplan_sim_kr.items import DB, IRP, ISA, JEONSE, LUMP_SUM, PENSION_SAVINGS
from lifeplan_sim_kr.loan import BULLET, EQUAL_INSTALLMENT, EQUAL_PRINCIPAL
from lifeplan_sim_kr.params import (
    CHECKING,
    DEBT,
    FIXED_AMOUNT,
    MAINTAIN_BALANCE,
    PERCENTAGE,
    REMAINDER,
    SAVINGS_ACCOUNT,
)
from lifeplan_sim_kr.rates import FIXED, INVESTMENT, OPTIMISTIC, PESSIMISTIC
from lifeplan_sim_kr.simulation import OVERDRAFT_LABEL


def _monthly(result, year, month):
    return next(m for m in result.monthly_snapshots if (m.year, m.month) == (year, month))


def _events(result):
    return [e for s in result.snapshots for e in s.events]


class TestValidation:
    def test_retirement_age_out_of_range(self):
        with pytest.raises(ValueError, match="은퇴 나이 30세"):
            simulate(Profile(birth_year=1990, retirement_age=30), [], start_year=2025)

    def test_bad_start_month(self):
        with pytest.raises(ValueError, match="시작월"):
            simulate(Profile(birth_year=1990, retirement_age=60), [], start_year=2025, start_month=13)

    def test_non_positive_years(self):
        with pytest.raises(ValueError, match="시뮬레이션 기간"):
            simulate(Profile(birth_year=1990, retirement_age=60), [], start_year=2025, years=0)

    def test_duplicate_ids(self):
        items = [Income(id="x", amount=1), Expense(id="x", amount=1)]
        with pytest.raises(ValueError, match="중복된 id"):
            simulate(Profile(birth_year=1990, retirement_age=60), items, start_year=2025)

    def test_life_expectancy_already_passed(self):
        """1930년생, 기대수명 90세 → 2025년 시작 시 이미 경과"""
        profile = Profile(birth_year=1930, retirement_age=60)
        with pytest.raises(ValueError, match="기대수명 90세가 이미 지났습니다"):
            simulate(profile, [], Assumptions(life_expectancy=90), start_year=2025)

    def test_life_expectancy_before_retirement(self):
        with pytest.raises(ValueError, match="은퇴 나이 60세 이하"):
            simulate(Profile(birth_year=1990, retirement_age=60), [],
                     Assumptions(life_expectancy=60), start_year=2025)

    def test_capped_horizon_skips_life_expectancy_check(self):
        profile = Profile(birth_year=1930, retirement_age=60)
        result = simulate(profile, [], Assumptions(life_expectancy=90), start_year=2025, years=1)
        assert len(result.snapshots) == 1

    def test_bad_rule(self):
        with pytest.raises(ValueError, match="잉여금 규칙"):
            simulate(
                Profile(birth_year=1990, retirement_age=60), [],
                rules=[CashFlowRule("bitcoin")], start_year=2025,
            )

    @pytest.mark.parametrize("rule, message", [
        (CashFlowRule(SAVINGS_ACCOUNT, "비상금", mode="hold"), "알 수 없는 모드 'hold'"),
        (CashFlowRule(SAVINGS_ACCOUNT, "비상금", mode=MAINTAIN_BALANCE), "목표 잔액이 필요합니다"),
        (CashFlowRule(CHECKING, "입출금", mode=MAINTAIN_BALANCE, target_balance=100), "저축·연금 계좌에만"),
        (CashFlowRule(DEBT, "조기상환", monthly_amount=100), "target_id가 필요합니다"),
        (CashFlowRule(SAVINGS_ACCOUNT, "적금", start_year=2025, start_month=13), "적용 월 13"),
    ])
    def test_bad_rule_settings(self, rule, message):
        with pytest.raises(ValueError, match=message):
            simulate(Profile(birth_year=1990, retirement_age=60), [], rules=[rule], start_year=2025)


class TestHorizon:
    def setup_method(self):
        self.profile = Profile(birth_year=1990, retirement_age=60)

    def test_to_life_expectancy(self):
        result = simulate(self.profile, [], Assumptions(life_expectancy=80), start_year=2025)
        assert result.end_year == 2070
        assert len(result.snapshots) == 46
        assert result.retirement_year == 2050

    def test_partial_first_year(self):
        result = simulate(self.profile, [], start_year=2025, start_month=7, years=2)
        assert result.snapshots[0].months == 6
        assert result.snapshots[1].months == 12

    def test_monthly_snapshots_only_on_request(self):
        assert simulate(self.profile, [], start_year=2025, years=1).monthly_snapshots == []
        result = simulate(self.profile, [], start_year=2025, years=1, include_monthly=True)
        assert len(result.monthly_snapshots) == 12

    def test_ages(self):
        result = simulate(self.profile, [], start_year=2025, years=2)
        assert [s.age for s in result.snapshots] == [35, 36]


class TestLaborIncome:
    """근로소득 500만/월, 3% 성장, 소비 없음"""

    def setup_method(self):
        # 1월생 → 마지막 근무월은 2054년 12월
        self.profile = Profile(birth_year=1995, retirement_age=60)
        self.items = [Income(id="salary", title="근로소득", amount=500, growth_rate=3.0,
                             start_year=2025, until_retirement=True)]
        self.result = simulate(self.profile, self.items, start_year=2025, years=30, include_monthly=True)

    def test_thirty_snapshots(self):
        assert len(self.result.snapshots) == 30
        assert self.result.snapshots[-1].year == 2054

    def test_income_strictly_increasing(self):
        incomes = [s.total_income for s in self.result.snapshots]
        assert all(a < b for a, b in zip(incomes, incomes[1:]))

    def test_net_worth_non_decreasing(self):
        worth = [s.net_worth for s in self.result.snapshots]
        assert all(a <= b for a, b in zip(worth, worth[1:]))

    def test_first_month_is_base_amount(self):
        assert self.result.monthly_snapshots[0].income == pytest.approx(500)

    def test_income_stops_after_retirement(self):
        result = simulate(self.profile, self.items, start_year=2025, years=31)
        assert result.snapshots[-1].total_income == 0

    def test_inputs_unmodified(self):
        assert self.items[0].until_retirement is True
        assert self.items[0].end_year is None


class TestDebt:
    def test_equal_principal_midpoint(self):
        """원금균등 12000, 0%, 120개월 → 60개월 시점 잔액 6000"""
        debt = Debt(id="loan", title="신용대출", principal=12000, interest_rate=0.0,
                    repayment=EQUAL_PRINCIPAL, start_year=2025, start_month=1,
                    end_year=2035, end_month=1)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [debt],
                          start_year=2025, years=11, initial_cash=20000, include_monthly=True)
        assert _monthly(result, 2030, 1).total_debts == pytest.approx(6000)
        assert result.snapshots[0].debt_service == pytest.approx(1100)
        assert _monthly(result, 2035, 1).total_debts == 0
        assert "신용대출 상환 완료" in _events(result)

    def test_future_loan_disbursed(self):
        debt = Debt(id="loan", title="자동차 할부", principal=1200, interest_rate=0.0,
                    repayment=EQUAL_INSTALLMENT, start_year=2026, start_month=1,
                    end_year=2027, end_month=1)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [debt],
                          start_year=2025, years=3)
        assert result.snapshots[0].total_debts == 0
        assert result.snapshots[1].total_debts == pytest.approx(100)
        assert result.snapshots[1].cash == pytest.approx(100)
        assert "자동차 할부 실행 (1200만원)" in result.snapshots[1].events

    def test_bullet_maturity(self):
        debt = Debt(id="loan", title="전세대출", principal=1000, interest_rate=6.0,
                    repayment=BULLET, start_year=2025, start_month=1, end_year=2026, end_month=1)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [debt],
                          start_year=2025, years=2, initial_cash=5000)
        assert result.snapshots[0].total_debts == 1000
        assert result.snapshots[0].debt_service == pytest.approx(55)
        assert result.snapshots[1].total_debts == 0
        assert "전세대출 만기상환" in result.snapshots[1].events

    def test_prepayment_from_surplus(self):
        """원금균등 1200, 0%: 매월 10 상환 + 잉여금 300 조기상환 → 4월 완납"""
        debt = Debt(id="loan", title="신용대출", principal=1200, interest_rate=0.0,
                    repayment=EQUAL_PRINCIPAL, start_year=2025, start_month=1,
                    end_year=2035, end_month=1)
        items = [Income(id="i", amount=1000, rate_category=FIXED), debt]
        rules = [CashFlowRule(DEBT, "조기상환", 1, FIXED_AMOUNT, monthly_amount=300, target_id="loan")]
        result = simulate(Profile(birth_year=1990, retirement_age=60), items, rules=rules,
                          start_year=2025, years=1, include_monthly=True)
        year = result.snapshots[0]
        assert year.allocations == {"신용대출": pytest.approx(1170)}
        assert year.debt_service == pytest.approx(30)
        assert year.total_debts == 0
        assert year.cash == pytest.approx(10800)
        assert _monthly(result, 2025, 3).total_debts == pytest.approx(280)
        assert "신용대출 조기상환" in _monthly(result, 2025, 4).events
        assert _monthly(result, 2025, 5).debt_service == 0


class TestPensionPhases:
    def setup_method(self):
        # 1965년 1월생 → 2025년 1월에 60세
        self.profile = Profile(birth_year=1965, retirement_age=60)

    def _run(self, mode, rate_category=FIXED):
        pension = PersonalPension(id="p", title="연금저축", current_balance=24000, return_rate=4.0,
                                  receiving_years=20, start_age=60, rate_category=rate_category)
        return simulate(self.profile, [pension], Assumptions(scenario_mode=mode),
                        start_year=2025, years=5, include_monthly=True)

    def test_level_withdrawal(self):
        """수령기 월 인출액은 일정"""
        expected = calc_monthly_pension_withdrawal(24000, 20, 4.0)
        result = self._run(OPTIMISTIC)
        amounts = [m.income_breakdown["연금저축"] for m in result.monthly_snapshots]
        assert amounts == pytest.approx([expected] * 60)
        assert any("연금저축 연금 수령 개시" in e for e in result.snapshots[0].events)

    def test_withdrawal_independent_of_scenario(self):
        optimistic = self._run(OPTIMISTIC).monthly_snapshots[0].income
        pessimistic = self._run(PESSIMISTIC).monthly_snapshots[0].income
        assert optimistic == pytest.approx(pessimistic)

    def test_scenario_rate_fixed_at_transition(self):
        result = self._run(PESSIMISTIC, rate_category=INVESTMENT)
        amounts = [m.income for m in result.monthly_snapshots]
        assert amounts == pytest.approx([amounts[0]] * 60)
        assert amounts[0] == pytest.approx(calc_monthly_pension_withdrawal(24000, 20, 2.0))

    def test_pension_income_tax(self):
        """60대 연금소득세 5.5%"""
        result = self._run(OPTIMISTIC)
        first = result.monthly_snapshots[0]
        assert first.tax == round(first.income * 0.055)

    def test_db_lump_sum_at_retirement(self):
        profile = Profile(birth_year=1966, retirement_age=60)  # 마지막 근무월 2025년 12월
        db = RetirementPension(id="db", title="퇴직금", pension_type=DB, monthly_salary=400,
                               years_of_service=10, receive_type=LUMP_SUM)
        result = simulate(profile, [db], start_year=2025, years=2)
        assert result.snapshots[0].pension_assets == 0
        assert result.snapshots[1].income_breakdown["퇴직금 일시금"] == pytest.approx(4000)
        assert result.snapshots[1].cash == pytest.approx(4000)

    def test_dc_employer_contribution(self):
        dc = RetirementPension(id="dc", title="DC", employer_contribution=10)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [dc], start_year=2025, years=1)
        assert result.snapshots[0].pension_assets == pytest.approx(120)
        assert result.snapshots[0].cash == 0

    def test_national_pension_indexed(self):
        nps = NationalPension(id="nps", title="국민연금", expected_monthly_amount=100, start_age=65)
        result = simulate(Profile(birth_year=1960, retirement_age=60), [nps],
                          Assumptions(inflation=2.0), start_year=2025, years=2)
        assert result.snapshots[0].total_income == pytest.approx(1200)
        assert result.snapshots[1].total_income == pytest.approx(1224)
        assert any("국민연금 수령 개시" in e for e in result.snapshots[0].events)

    def test_isa_maturity_transfer(self):
        isa = PersonalPension(id="isa", title="ISA", account_type=ISA, current_balance=1000,
                              maturity_year=2025, maturity_month=6, maturity_strategy=PENSION_SAVINGS)
        savings = PersonalPension(id="ps", title="연금저축", account_type=PENSION_SAVINGS, start_age=65)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [isa, savings],
                          start_year=2025, years=1)
        assert result.snapshots[0].pension_breakdown == {"연금저축": pytest.approx(1000)}
        assert "ISA 만기 → 연금저축 이전 (1000만원)" in result.snapshots[0].events

    def test_isa_maturity_to_cash(self):
        isa = PersonalPension(id="isa", title="ISA", account_type=ISA, current_balance=1000,
                              maturity_year=2025, maturity_month=6)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [isa], start_year=2025, years=1)
        assert result.snapshots[0].cash == pytest.approx(1000)
        assert result.snapshots[0].pension_assets == 0


class TestCashSettlement:
    def setup_method(self):
        self.profile = Profile(birth_year=1990, retirement_age=60)

    def _tuition(self):
        return Expense(id="tuition", title="등록금", amount=100, rate_category=FIXED,
                       start_year=2025, start_month=1, end_year=2025, end_month=1)

    def test_deficit_withdrawal_order(self):
        """부족분은 유동성 순서(입출금 → 예금 → … → 코인)로 인출"""
        items = [
            self._tuition(),
            Savings(id="c", title="crypto", kind="crypto", current_balance=1000),
            Savings(id="d", title="deposit", kind="deposit", current_balance=1000),
            Savings(id="k", title="checking", kind="checking", current_balance=50),
        ]
        result = simulate(self.profile, items, start_year=2025, years=1, include_monthly=True)
        first = result.monthly_snapshots[0]
        assert first.withdrawals == {"checking": 50, "deposit": 50}
        assert first.cash == 0

    def test_rule_target_drawn_first(self):
        items = [
            self._tuition(),
            Savings(id="d", title="deposit", kind="deposit", current_balance=1000),
            Savings(id="k", title="checking", kind="checking", current_balance=500),
        ]
        rules = [CashFlowRule(SAVINGS_ACCOUNT, "비상금", 4, FIXED_AMOUNT, monthly_amount=50, target_id="d")]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1, include_monthly=True)
        assert result.monthly_snapshots[0].withdrawals == {"deposit": 100}

    def test_annual_limit(self):
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            PersonalPension(id="irp", title="IRP", account_type=IRP, start_age=65),
        ]
        rules = [
            CashFlowRule(IRP, "IRP", 1, FIXED_AMOUNT, monthly_amount=100, annual_limit=300),
            CashFlowRule(CHECKING, "입출금", 99, REMAINDER),
        ]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=2)
        assert result.snapshots[0].allocations == {"IRP": 300}
        assert result.snapshots[1].allocations == {"IRP": 300}
        assert result.snapshots[1].pension_assets == pytest.approx(600)
        assert result.snapshots[0].cash == pytest.approx(11700)

    def test_disabled_rule_skipped(self):
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            PersonalPension(id="irp", title="IRP", account_type=IRP, start_age=65),
        ]
        rules = [CashFlowRule(IRP, "IRP", 1, FIXED_AMOUNT, monthly_amount=100, is_enabled=False)]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1)
        assert result.snapshots[0].allocations == {}

    def test_emergency_fund_kept_in_cash(self):
        items = [
            Income(id="i", amount=500, rate_category=FIXED),
            Expense(id="e", amount=100, rate_category=FIXED),
            Savings(id="s", title="비상금", kind="savings"),
        ]
        rules = [CashFlowRule(SAVINGS_ACCOUNT, "적금", 1, FIXED_AMOUNT, monthly_amount=1000)]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1,
                          emergency_fund_months=6, include_monthly=True)
        months = result.monthly_snapshots
        assert months[0].allocations == {}
        assert months[1].allocations == {"비상금": pytest.approx(200)}
        assert months[2].allocations == {"비상금": pytest.approx(400)}
        assert months[2].cash == pytest.approx(600)

    def test_shortfall_event_and_bankruptcy(self):
        items = [Expense(id="e", title="생활비", amount=100, rate_category=FIXED)]
        result = simulate(self.profile, items, start_year=2025, years=3)
        shortfalls = [e for e in _events(result) if e.startswith("현금 부족")]
        assert shortfalls == ["현금 부족 (100만원)"]
        assert result.summary.bankruptcy_year == 2025
        assert result.snapshots[-1].cash == pytest.approx(-3600)

    def test_percentage_of_month_surplus(self):
        """비율 배분은 이월 현금이 아닌 당월 순현금흐름 기준"""
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            Savings(id="s", title="적금", kind="savings"),
        ]
        rules = [
            CashFlowRule(SAVINGS_ACCOUNT, "적금", 1, PERCENTAGE, percentage=10, target_id="s"),
            CashFlowRule(CHECKING, "입출금", 99, REMAINDER),
        ]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1, include_monthly=True)
        assert [m.allocations.get("적금") for m in result.monthly_snapshots] == pytest.approx([100] * 12)
        assert result.snapshots[0].cash == pytest.approx(10800)

    def test_overdraft_repaid_before_allocation(self):
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            Expense(id="e", title="수술비", amount=3000, rate_category=FIXED,
                    start_year=2025, start_month=1, end_year=2025, end_month=1),
            Savings(id="s", title="적금", kind="savings"),
        ]
        rules = [CashFlowRule(SAVINGS_ACCOUNT, "적금", 1, FIXED_AMOUNT, monthly_amount=500, target_id="s")]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1, include_monthly=True)
        months = result.monthly_snapshots
        assert months[0].cash == pytest.approx(-2000)
        assert months[1].allocations == {OVERDRAFT_LABEL: pytest.approx(1000)}
        assert months[2].allocations == {OVERDRAFT_LABEL: pytest.approx(1000)}
        assert months[2].cash == pytest.approx(0)
        assert months[3].allocations == {"적금": pytest.approx(500)}

    def test_maintain_balance(self):
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            Savings(id="e", title="비상금", kind="savings"),
        ]
        rules = [CashFlowRule(SAVINGS_ACCOUNT, "비상금", 1, mode=MAINTAIN_BALANCE,
                              target_balance=2500, target_id="e")]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1, include_monthly=True)
        months = result.monthly_snapshots
        assert [m.allocations.get("비상금", 0) for m in months[:4]] == pytest.approx([1000, 1000, 500, 0])
        assert result.snapshots[0].allocations == {"비상금": pytest.approx(2500)}
        assert result.snapshots[0].cash == pytest.approx(9500)

    def test_rule_period(self):
        """7-9월에만 적용되는 IRP 규칙"""
        items = [
            Income(id="i", amount=1000, rate_category=FIXED),
            PersonalPension(id="irp", title="IRP", account_type=IRP, start_age=65),
        ]
        rules = [CashFlowRule(IRP, "IRP", 1, FIXED_AMOUNT, monthly_amount=100,
                              start_year=2025, start_month=7, end_year=2025, end_month=9)]
        result = simulate(self.profile, items, rules=rules, start_year=2025, years=1, include_monthly=True)
        funded = [m.month for m in result.monthly_snapshots if m.allocations]
        assert funded == [7, 8, 9]
        assert result.snapshots[0].allocations == {"IRP": pytest.approx(300)}


class TestHoldings:
    def setup_method(self):
        self.profile = Profile(birth_year=1970, retirement_age=60)

    def test_sale_with_capital_gains_tax(self):
        """10년 보유 일반 주택 매각: 차익 2억, 장기보유공제 20%"""
        home = RealEstate(id="apt", title="아파트", current_value=50000, purchase_price=30000,
                          start_year=2015, start_month=1, end_year=2025, end_month=1)
        result = simulate(self.profile, [home], start_year=2025, years=1)
        year = result.snapshots[0]
        assert year.tax_breakdown == {"아파트 양도소득세": 4390}
        assert year.cash == pytest.approx(45610)
        assert year.real_estate_value == 0
        assert any(e.startswith("아파트 매각") for e in year.events)

    def test_primary_residence_exempt(self):
        home = RealEstate(id="apt", title="아파트", current_value=100000, purchase_price=30000,
                          is_primary_residence=True, start_year=2015, end_year=2025, end_month=6)
        result = simulate(self.profile, [home], start_year=2025, years=1)
        assert result.snapshots[0].tax_paid == 0
        assert result.snapshots[0].cash == pytest.approx(100000)

    def test_purchase_with_loan(self):
        home = RealEstate(id="home", title="집", purchase_price=50000, current_value=50000,
                          is_primary_residence=True, start_year=2026, start_month=1,
                          loan=LoanTerms(principal=30000, interest_rate=4.0, repayment=EQUAL_INSTALLMENT,
                                         maturity_year=2056, maturity_month=1))
        result = simulate(self.profile, [home], start_year=2025, years=2, initial_cash=25000)
        before, after = result.snapshots
        assert before.real_estate_value == 0
        assert after.real_estate_value == pytest.approx(50000)
        assert after.tax_breakdown == {"집 취득세": 550}
        assert 0 < after.total_debts < 30000
        assert "집 취득 (50000만원)" in after.events
        assert "집 대출 실행 (30000만원)" in after.events

    def test_loan_on_home_sold_before_start(self):
        """2020년 매각된 주택의 대출은 시작 시점에 남아 있지 않음"""
        home = RealEstate(id="apt", title="아파트", current_value=50000,
                          start_year=2015, start_month=1, end_year=2020, end_month=6,
                          loan=LoanTerms(principal=30000, interest_rate=4.0, repayment=EQUAL_INSTALLMENT,
                                         maturity_year=2045, maturity_month=1))
        result = simulate(self.profile, [home], start_year=2025, years=1)
        year = result.snapshots[0]
        assert year.total_debts == 0
        assert year.debt_service == 0
        assert year.real_estate_value == 0
        assert year.cash == 0

    def test_jeonse_deposit_round_trip(self):
        lease = RealEstate(id="j", title="전세", housing_type=JEONSE, deposit=30000,
                           start_year=2025, start_month=3, end_year=2026, end_month=2)
        result = simulate(self.profile, [lease], start_year=2025, years=2, initial_cash=40000)
        first, second = result.snapshots
        assert first.real_estate_value == 30000
        assert first.cash == pytest.approx(10000)
        assert second.real_estate_value == 0
        assert second.cash == pytest.approx(40000)
        assert first.net_worth == second.net_worth == pytest.approx(40000)

    def test_depreciating_asset(self):
        car = PhysicalAsset(id="car", title="자동차", current_value=3000, annual_rate=-10.0)
        result = simulate(self.profile, [car], start_year=2025, years=1)
        assert result.snapshots[0].physical_asset_value == pytest.approx(2700)


class TestSavings:
    def test_maturity_interest_tax(self):
        deposit = Savings(id="s", title="정기예금", kind="deposit", current_balance=1000,
                          interest_rate=12.0, end_year=2025, end_month=12)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [deposit], start_year=2025, years=1)
        year = result.snapshots[0]
        assert year.tax_breakdown == {"정기예금 이자소득세": 18}
        assert year.cash == pytest.approx(1102)
        assert year.financial_assets == pytest.approx(1102)

    def test_future_account_funded_from_cash(self):
        account = Savings(id="s", title="적금", current_balance=500, monthly_contribution=10,
                          start_year=2025, start_month=7)
        result = simulate(Profile(birth_year=1990, retirement_age=60), [account],
                          start_year=2025, years=1, initial_cash=1000)
        year = result.snapshots[0]
        assert year.contributions == pytest.approx(60)
        assert year.cash == pytest.approx(440)
        assert year.financial_assets == pytest.approx(1000)
