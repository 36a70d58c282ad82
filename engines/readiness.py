"""
Readiness Scoring Engine

Computes a composite 0–10 readiness score per use case from four dimension
ratings, and the usage-volume cost model:
  1. Composite Readiness = mean(Data, Technical, Organizational, Governance)
  2. Monthly Tokens      = runs/month × (input + output tokens per run)
  3. Annual Token Cost   = 12 × (input tokens × input price + output tokens × output price)
"""
from engines.assumptions import clamp, resolve_params
from engines.currency import coerce_number, format_currency

# ══════════════════════════════════════════════════════════════
#  DIMENSIONS
# ══════════════════════════════════════════════════════════════

READINESS_DIMENSIONS = {
    'dataAvailability':        {'label': 'Data Availability',        'weight': 0.25},
    'technicalInfrastructure': {'label': 'Technical Infrastructure', 'weight': 0.25},
    'organizationalCapacity':  {'label': 'Organizational Capacity',  'weight': 0.25},
    'governance':              {'label': 'Governance',               'weight': 0.25},
}

SCORE_MIN, SCORE_MAX = 0.0, 10.0


def calculate_readiness_score(data, technical, organizational, governance):
    """Arithmetic mean of the four dimensions, each bounded to 0–10."""
    dims = [clamp(coerce_number(v), SCORE_MIN, SCORE_MAX)
            for v in (data, technical, organizational, governance)]
    return sum(dims) / len(dims)


def calculate_monthly_tokens(runs_per_month, input_tokens, output_tokens):
    return runs_per_month * (input_tokens + output_tokens)


def calculate_annual_token_cost(runs_per_month, input_tokens, output_tokens, params=None):
    p = resolve_params(params)
    input_price = p['inputTokenPricePerMillion'] / 1_000_000
    output_price = p['outputTokenPricePerMillion'] / 1_000_000
    monthly = runs_per_month * input_tokens * input_price + runs_per_month * output_tokens * output_price
    return monthly * 12


# ══════════════════════════════════════════════════════════════
#  MAIN: RECALCULATE READINESS
# ══════════════════════════════════════════════════════════════

def recalculate_readiness(readiness, params=None):
    """Fill readinessScore, monthlyTokens and annualTokenCost on copies of the records."""
    results = []
    for r in readiness:
        dims = {k: clamp(coerce_number(r.get(k)), SCORE_MIN, SCORE_MAX) for k in READINESS_DIMENSIONS}
        score = calculate_readiness_score(*dims.values())

        runs = max(0.0, coerce_number(r.get('runsPerMonth')))
        inp = max(0.0, coerce_number(r.get('inputTokensPerRun')))
        outp = max(0.0, coerce_number(r.get('outputTokensPerRun')))
        annual_cost = calculate_annual_token_cost(runs, inp, outp, params)
        monthly = calculate_monthly_tokens(runs, inp, outp)

        out = dict(r)
        out['readinessScore'] = round(score, 1)
        out['monthlyTokens'] = int(monthly) if float(monthly).is_integer() else monthly
        out['annualTokenCost'] = format_currency(annual_cost)
        out['_annualTokenCost'] = annual_cost
        out['_traces'] = {
            'readiness': {
                'formula': 'mean(Data, Tech, Org, Gov)',
                'inputs': dims,
                'intermediates': {f'{k}Weighted': v * READINESS_DIMENSIONS[k]['weight'] for k, v in dims.items()},
                'output': score,
            },
        }
        results.append(out)
    return results
