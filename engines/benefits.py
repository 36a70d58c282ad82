"""
Benefit Calculator

Converts the labelled formula components entered per use case into four
dollarized benefit categories, applies a scenario profile and derives
total annual value and expected value.

  Cost       = Hours Saved × Loaded Rate × Benefits Loading × Adoption × Data Maturity
  Revenue    = Uplift % × Revenue at Risk × Realization × Data Maturity
  Risk       = Risk Reduction % × Risk Exposure × Realization × Data Maturity
  Cash Flow  = Annual Revenue × (Days Improved / 365) × Cost of Capital × Realization × Data Maturity

A category needs at least two components to be computed; otherwise it is 0.
"""
from engines.assumptions import clamp_input, get_profile
from engines.currency import coerce_number, format_currency, parse_currency_string

MIN_COMPONENTS = 2

CATEGORY_KEYS = {
    # category -> (component set key, output key)
    'cost':     ('costFormulaLabels', 'costBenefit'),
    'revenue':  ('revenueFormulaLabels', 'revenueBenefit'),
    'risk':     ('riskFormulaLabels', 'riskBenefit'),
    'cashFlow': ('cashFlowFormulaLabels', 'cashFlowBenefit'),
}

COST_DEFAULTS = {'Benefits Loading': 1.35, 'Adoption Rate': 0.90, 'Data Maturity': 0.75}
REVENUE_DEFAULTS = {'Realization Factor': 0.95, 'Data Maturity': 0.75}
RISK_DEFAULTS = {'Realization Factor': 0.80, 'Data Maturity': 0.75}
CASH_FLOW_DEFAULTS = {'Cost of Capital': 0.08, 'Realization Factor': 0.85, 'Data Maturity': 0.75}

# Cross-validation guardrails
BENEFITS_CAP_PCT = 0.50
REVENUE_WARNING_PCT = 0.30
FTE_WARNING_PCT = 0.20
ANNUAL_HOURS_PER_FTE = 2080


# ══════════════════════════════════════════════════════════════
#  FORMULAS
# ══════════════════════════════════════════════════════════════

def calculate_cost_benefit(hours_saved, loaded_rate, benefits_loading, adoption_rate, data_maturity):
    return hours_saved * loaded_rate * benefits_loading * adoption_rate * data_maturity


def calculate_revenue_benefit(uplift_pct, revenue_at_risk, realization, data_maturity):
    return uplift_pct * revenue_at_risk * realization * data_maturity


def calculate_risk_benefit(reduction_pct, risk_exposure, realization, data_maturity):
    return reduction_pct * risk_exposure * realization * data_maturity


def calculate_cash_flow_benefit(annual_revenue, days_improved, cost_of_capital, realization, data_maturity):
    # working capital released by collecting `days_improved` sooner, priced at the cost of capital
    return annual_revenue * (days_improved / 365) * cost_of_capital * realization * data_maturity


# ══════════════════════════════════════════════════════════════
#  COMPONENT LOOKUP
# ══════════════════════════════════════════════════════════════

def _components(benefit, key):
    labels = benefit.get(key) or {}
    return labels.get('components') or []


def _lookup(components, label, default=0.0):
    """First component with this label; a missing or zero value takes the default."""
    for c in components:
        if c.get('label') == label:
            return coerce_number(c.get('value')) or default
    return default


def _bounded(components, label, default=0.0):
    return clamp_input(label, _lookup(components, label, default))


def _cost(components):
    inputs = {
        'hoursSaved': _bounded(components, 'Hours Saved'),
        'loadedRate': _bounded(components, 'Loaded Hourly Rate'),
        'benefitsLoading': _bounded(components, 'Benefits Loading', COST_DEFAULTS['Benefits Loading']),
        'adoptionRate': _bounded(components, 'Adoption Rate', COST_DEFAULTS['Adoption Rate']),
        'dataMaturity': _bounded(components, 'Data Maturity', COST_DEFAULTS['Data Maturity']),
    }
    value = calculate_cost_benefit(*inputs.values())
    return value, {
        'formula': 'HoursSaved × LoadedRate × BenefitsLoading × AdoptionRate × DataMaturity',
        'inputs': inputs, 'output': value,
    }


def _revenue(components):
    inputs = {
        'revenueUpliftPct': _bounded(components, 'Revenue Uplift %'),
        'revenueAtRisk': _bounded(components, 'Revenue at Risk'),
        'realizationFactor': _bounded(components, 'Realization Factor', REVENUE_DEFAULTS['Realization Factor']),
        'dataMaturity': _bounded(components, 'Data Maturity', REVENUE_DEFAULTS['Data Maturity']),
    }
    value = calculate_revenue_benefit(*inputs.values())
    return value, {
        'formula': 'UpliftPct × RevenueAtRisk × RealizationFactor × DataMaturity',
        'inputs': inputs, 'output': value,
    }


def _risk(components):
    inputs = {
        'riskReductionPct': _bounded(components, 'Risk Reduction %'),
        'riskExposure': _bounded(components, 'Risk Exposure'),
        'realizationFactor': _bounded(components, 'Realization Factor', RISK_DEFAULTS['Realization Factor']),
        'dataMaturity': _bounded(components, 'Data Maturity', RISK_DEFAULTS['Data Maturity']),
    }
    value = calculate_risk_benefit(*inputs.values())
    return value, {
        'formula': 'RiskReductionPct × RiskExposure × RealizationFactor × DataMaturity',
        'inputs': inputs, 'output': value,
    }


def _cash_flow(components):
    inputs = {
        'annualRevenue': _bounded(components, 'Annual Revenue'),
        'daysImproved': _bounded(components, 'Days Improved'),
        'costOfCapital': _bounded(components, 'Cost of Capital', CASH_FLOW_DEFAULTS['Cost of Capital']),
        'realizationFactor': _bounded(components, 'Realization Factor', CASH_FLOW_DEFAULTS['Realization Factor']),
        'dataMaturity': _bounded(components, 'Data Maturity', CASH_FLOW_DEFAULTS['Data Maturity']),
    }
    value = calculate_cash_flow_benefit(*inputs.values())
    return value, {
        'formula': 'AnnualRevenue × (DaysImproved / 365) × CostOfCapital × RealizationFactor × DataMaturity',
        'inputs': inputs,
        'intermediates': {'workingCapitalFreed': inputs['annualRevenue'] * (inputs['daysImproved'] / 365)},
        'output': value,
    }


CATEGORY_FORMULAS = {'cost': _cost, 'revenue': _revenue, 'risk': _risk, 'cashFlow': _cash_flow}


# ══════════════════════════════════════════════════════════════
#  MAIN: RECALCULATE BENEFITS
# ══════════════════════════════════════════════════════════════

def recalculate_benefits(benefits, profile=None):
    """
    Recompute every benefit record under a scenario profile (default: base).

    Returns new records; the four category strings, totalAnnualValue,
    expectedValue and probabilityOfSuccess are overwritten, and the unrounded
    amounts plus per-category formula traces are attached as _amounts/_traces.
    """
    prof = get_profile(profile)
    results = []
    for b in benefits:
        amounts = {}
        traces = {}
        for cat, (comp_key, _) in CATEGORY_KEYS.items():
            comps = _components(b, comp_key)
            if len(comps) < MIN_COMPONENTS:
                amounts[cat] = 0.0
                continue
            value, trace = CATEGORY_FORMULAS[cat](comps)
            amounts[cat] = value * prof.benefit_multiplier
            traces[cat] = trace

        total = amounts['cost'] + amounts['revenue'] + amounts['risk'] + amounts['cashFlow']
        prob = max(0.0, min(1.0, coerce_number(b.get('probabilityOfSuccess'), 1.0) * prof.probability_multiplier))
        expected = total * prob

        out = dict(b)
        for cat, (_, out_key) in CATEGORY_KEYS.items():
            out[out_key] = format_currency(amounts[cat])
        out['totalAnnualValue'] = format_currency(total)
        out['expectedValue'] = format_currency(expected)
        out['probabilityOfSuccess'] = prob
        out['_amounts'] = {**amounts, 'total': total, 'expected': expected}
        out['_traces'] = traces
        out['_profile'] = prof.name
        results.append(out)
    return results


def benefit_amount(benefit, category):
    """
    Numeric amount for a category ('cost', 'revenue', 'risk', 'cashFlow',
    'total', 'expected'), read from the serialized string field so every
    consumer sees the same value the report shows.
    """
    field = {
        'total': 'totalAnnualValue', 'expected': 'expectedValue',
        **{cat: keys[1] for cat, keys in CATEGORY_KEYS.items()},
    }[category]
    return parse_currency_string(benefit.get(field))


# ══════════════════════════════════════════════════════════════
#  CROSS-VALIDATION GUARDRAILS
# ══════════════════════════════════════════════════════════════

def cross_validate_benefits(benefits, annual_revenue, total_employees):
    """
    Sanity-check a cohort of calculated benefits against company size.
    Flags likely double-counting and reports the scale factor that would cap
    total benefits at 50% of annual revenue. Zero revenue / headcount
    disables the corresponding check.
    """
    annual_revenue = coerce_number(annual_revenue)
    total_employees = coerce_number(total_employees)

    totals = {cat: sum(benefit_amount(b, cat) for b in benefits) for cat in CATEGORY_KEYS}
    total_hours = sum(_lookup(_components(b, 'costFormulaLabels'), 'Hours Saved') for b in benefits)
    total_benefits = sum(totals.values())

    benefits_ratio = total_benefits / annual_revenue if annual_revenue > 0 else 0
    revenue_ratio = totals['revenue'] / annual_revenue if annual_revenue > 0 else 0
    fte_equivalent = total_hours / ANNUAL_HOURS_PER_FTE
    fte_ratio = fte_equivalent / total_employees if total_employees > 0 else 0

    warnings = []
    if annual_revenue > 0 and benefits_ratio > BENEFITS_CAP_PCT:
        warnings.append(
            f"Total benefits ({format_currency(total_benefits)}) exceed {BENEFITS_CAP_PCT:.0%} of annual "
            f"revenue. Benefits may be proportionally scaled.")
    if annual_revenue > 0 and revenue_ratio > REVENUE_WARNING_PCT:
        warnings.append(
            f"Revenue benefits ({format_currency(totals['revenue'])}) exceed {REVENUE_WARNING_PCT:.0%} of "
            f"annual revenue. Possible double-counting across use cases.")
    if total_employees > 0 and fte_ratio > FTE_WARNING_PCT:
        warnings.append(
            f"Hours saved ({total_hours:,.0f}) implies {fte_equivalent:.0f} FTEs, more than "
            f"{FTE_WARNING_PCT:.0%} of {total_employees:,.0f} employees. Verify for double-counting.")

    cap = annual_revenue * BENEFITS_CAP_PCT if annual_revenue > 0 else None
    scale_factor = cap / total_benefits if cap is not None and total_benefits > cap else 1.0

    return {
        'warnings': warnings,
        'metrics': {
            'totalBenefitsVsRevenue': benefits_ratio,
            'revenueRatio': revenue_ratio,
            'fteRatio': fte_ratio,
            'benefitsCapped': scale_factor < 1.0,
            'scaleFactor': scale_factor,
        },
    }
