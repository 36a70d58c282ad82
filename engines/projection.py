"""
Financial Projection Engine

Discounted-cash-flow view of the portfolio:
  - Scenario analysis: expected benefit, NPV per scenario profile
  - Multi-year projection: NPV, approximate IRR, payback, cumulative benefit

The cohort's total expected value is treated as a flat annuity over the
planning horizon. Initial investment is not modelled bottom-up; it is
estimated as a fixed share (investmentPct) of first-year benefit.
"""
import math

from engines.assumptions import PROFILE_ORDER, get_profile, resolve_params
from engines.benefits import benefit_amount, recalculate_benefits
from engines.currency import format_currency, format_percent


def calculate_npv(annual_benefit, years=3, discount_rate=0.10, initial_investment=0.0):
    npv = -initial_investment
    for t in range(1, years + 1):
        npv += annual_benefit / (1 + discount_rate) ** t
    return npv


def approximate_irr(annual_benefit, years=3, initial_investment=0.0):
    """
    Average annual return on the investment, used in place of a solved IRR:
    (annual benefit - investment / years) / investment. Returns a fraction.
    """
    if initial_investment <= 0 or years <= 0:
        return 0.0
    return (annual_benefit - initial_investment / years) / initial_investment


def calculate_payback_months(annual_benefit, initial_investment=0.0):
    if annual_benefit <= 0 or initial_investment <= 0:
        return 0
    return math.ceil(initial_investment / (annual_benefit / 12))


def total_expected_value(benefits):
    return sum(benefit_amount(b, 'expected') for b in benefits)


# ══════════════════════════════════════════════════════════════
#  SCENARIO ANALYSIS
# ══════════════════════════════════════════════════════════════

def generate_scenario_analysis(benefits, profiles=None, params=None):
    """
    Re-run the benefit calculator under each profile (default: conservative,
    base, optimistic) and compare the totals. Investment is anchored on the
    base-profile total so every scenario is measured against the same spend.
    Scenario-level payback is not computed and is reported as 0.
    """
    p = resolve_params(params)
    profs = [get_profile(x) for x in (profiles or PROFILE_ORDER)]

    base_total = total_expected_value(recalculate_benefits(benefits, 'base'))
    investment = base_total * p['investmentPct']

    analysis = {}
    for prof in profs:
        total = total_expected_value(recalculate_benefits(benefits, prof))
        analysis[prof.name] = {
            'label': prof.name.capitalize(),
            'annualBenefit': format_currency(total),
            'npv': format_currency(calculate_npv(total, int(p['horizon']), p['discountRate'], investment)),
            'paybackMonths': 0,
            '_annualBenefit': total,
        }
    return analysis


# ══════════════════════════════════════════════════════════════
#  MULTI-YEAR PROJECTION
# ══════════════════════════════════════════════════════════════

def generate_multi_year_projection(benefits, params=None):
    """Projection over the planning horizon from already-calculated benefits."""
    p = resolve_params(params)
    horizon = int(p['horizon'])
    rate = p['discountRate']

    total_annual = total_expected_value(benefits)
    investment = total_annual * p['investmentPct']
    npv = calculate_npv(total_annual, horizon, rate, investment)
    irr = approximate_irr(total_annual, horizon, investment)

    yearly = []
    cum = 0.0
    for yr in range(1, horizon + 1):
        cum += total_annual
        yearly.append({
            'year': yr,
            'benefit': round(total_annual),
            'discountedBenefit': round(total_annual / (1 + rate) ** yr),
            'cumulativeBenefit': round(cum),
            'cumulativeNet': round(cum - investment),
        })

    return {
        'irr': format_percent(irr),
        'npv': format_currency(npv),
        'paybackMonths': calculate_payback_months(total_annual, investment),
        'totalBenefitOverPeriod': format_currency(total_annual * horizon),
        'initialInvestment': format_currency(investment),
        'yearly': yearly,
    }
