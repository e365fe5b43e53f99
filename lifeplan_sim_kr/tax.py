"""Simplified Korean tax rules (interest, capital gains, ISA, pension, acquisition)."""

INTEREST_INCOME_TAX_RATE = 0.154  # 이자소득세 14% + 지방소득세 1.4%

# 양도소득세 누진세율표 (과세표준 상한·만원, 세율, 누진공제·만원)
_CAPITAL_GAINS_BRACKETS: tuple[tuple[float, float, float], ...] = (
    (1400, 0.06, 0),
    (5000, 0.15, 126),
    (8800, 0.24, 576),
    (15000, 0.35, 1544),
    (30000, 0.38, 1994),
    (50000, 0.40, 2594),
    (100000, 0.42, 3594),
    (float("inf"), 0.45, 6594),
)

LOCAL_TAX_SURCHARGE = 0.10  # 지방소득세 (산출세액의 10%)
PRIMARY_RESIDENCE_EXEMPTION = 120000  # 1세대1주택 비과세 기준 12억
CAPITAL_GAINS_BASIC_DEDUCTION = 250   # 양도소득 기본공제

# 장기보유특별공제
HOLDING_DEDUCTION_MIN_YEARS = 3
_PRIMARY_HOLDING_RATE = 0.08   # 1세대1주택: 연 8%
_PRIMARY_HOLDING_CAP = 0.80
_GENERAL_HOLDING_RATE = 0.02   # 일반: 연 2%
_GENERAL_HOLDING_CAP = 0.30

# ISA 비과세 한도 및 분리과세율
ISA_EXEMPTION_GENERAL = 200
ISA_EXEMPTION_SEOMIN = 400  # 서민형
ISA_TAX_RATE = 0.099

# 연금소득세 (수령 나이별)
_PENSION_TAX_BANDS: tuple[tuple[int, float], ...] = (
    (80, 0.033),
    (70, 0.044),
    (0, 0.055),
)

# 취득세 (주택, 지방교육세 포함 근사)
_ACQUISITION_TAX_BRACKETS: tuple[tuple[float, float], ...] = (
    (60000, 0.011),
    (90000, 0.022),
    (float("inf"), 0.033),
)


def calc_interest_income_tax(gain: float, is_tax_free: bool = False) -> float:
    """Flat 15.4% on a positive interest gain; zero for tax-free accounts."""
    if is_tax_free or gain <= 0:
        return 0
    return round(gain * INTEREST_INCOME_TAX_RATE)


def calc_long_term_holding_deduction_rate(holding_years: float, is_primary_residence: bool) -> float:
    """Deduction ratio for long-term holding (장기보유특별공제), pro rata for partial years."""
    if holding_years < HOLDING_DEDUCTION_MIN_YEARS:
        return 0.0
    if is_primary_residence:
        return min(_PRIMARY_HOLDING_CAP, holding_years * _PRIMARY_HOLDING_RATE)
    return min(_GENERAL_HOLDING_CAP, holding_years * _GENERAL_HOLDING_RATE)


def _progressive_tax(taxable: float) -> float:
    for upper, rate, deduction in _CAPITAL_GAINS_BRACKETS:
        if taxable <= upper:
            return taxable * rate - deduction
    return 0.0  # pragma: no cover


def calc_capital_gains_tax(
    sale_price: float,
    purchase_price: float,
    holding_years: float,
    is_primary_residence: bool = False,
) -> float:
    """Real-estate capital gains tax including the 10% local surcharge (만원).

    1세대1주택 ≤ 12억 is exempt; above it only the (sale - 12억) / sale share
    of the gain is taxable. Then the holding deduction, the 250 basic
    deduction and the progressive table apply.
    """
    gain = sale_price - purchase_price
    if gain <= 0:
        return 0
    if is_primary_residence:
        if sale_price <= PRIMARY_RESIDENCE_EXEMPTION:
            return 0
        taxable_gain = gain * (sale_price - PRIMARY_RESIDENCE_EXEMPTION) / sale_price
    else:
        taxable_gain = gain
    taxable_gain *= 1 - calc_long_term_holding_deduction_rate(holding_years, is_primary_residence)
    tax_base = max(0, taxable_gain - CAPITAL_GAINS_BASIC_DEDUCTION)
    if tax_base <= 0:
        return 0
    tax = max(0, _progressive_tax(tax_base))
    return round(tax * (1 + LOCAL_TAX_SURCHARGE))


def calc_isa_tax(gain: float, is_seomin: bool = False) -> float:
    """ISA maturity tax: 9.9% on the gain above the exemption (200, 서민형 400)."""
    exemption = ISA_EXEMPTION_SEOMIN if is_seomin else ISA_EXEMPTION_GENERAL
    return round(max(0, gain - exemption) * ISA_TAX_RATE)


def pension_income_tax_rate(age: int) -> float:
    for min_age, rate in _PENSION_TAX_BANDS:
        if age >= min_age:
            return rate
    return _PENSION_TAX_BANDS[-1][1]  # pragma: no cover


def calc_pension_income_tax(monthly_amount: float, age: int) -> float:
    """Tax withheld on one month's private pension withdrawal."""
    if monthly_amount <= 0:
        return 0
    return round(monthly_amount * pension_income_tax_rate(age))


def calc_acquisition_tax(price: float) -> float:
    """Housing acquisition tax (취득세) by price tier."""
    if price <= 0:
        return 0
    for upper, rate in _ACQUISITION_TAX_BRACKETS:
        if price <= upper:
            return round(price * rate)
    return 0  # pragma: no cover
