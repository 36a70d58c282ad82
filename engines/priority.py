"""
Priority Scoring Engine

Combines cohort-relative value, readiness and time-to-value into a single
0–10 priority score per use case, then buckets it into a value/readiness
quadrant (tier) and a recommended delivery phase.

Value scores are normalised against the largest expected value in the batch,
so the full cohort for a scenario must be passed in together.
"""
from engines.assumptions import clamp, resolve_params
from engines.benefits import benefit_amount
from engines.currency import coerce_number

PRIORITY_WEIGHTS = {'value': 0.50, 'readiness': 0.30, 'ttv': 0.20}

# TTV decays linearly to zero at 18 months; anything under 10 months gets a bonus
TTV_HORIZON_MONTHS = 18
TTV_FAST_MONTHS = 10
TTV_FAST_BONUS = 0.25

TIERS = {
    # quadrant key -> label
    'champions':  'Tier 1 - Champions',
    'quick_wins': 'Tier 2 - Quick Wins',
    'strategic':  'Tier 3 - Strategic',
    'foundation': 'Tier 4 - Foundation',
}

PHASE_THRESHOLDS = [
    # (min priority score, phase)
    (7.0, 'Q1'),
    (5.5, 'Q2'),
    (4.0, 'Q3'),
]


def calculate_value_score(expected_value, max_expected_value):
    if max_expected_value <= 0:
        return 0.0
    return clamp(expected_value / max_expected_value * 10, 0.0, 10.0)


def calculate_ttv_score(time_to_value):
    base = max(0.0, (TTV_HORIZON_MONTHS - time_to_value) / TTV_HORIZON_MONTHS)
    bonus = TTV_FAST_BONUS if time_to_value < TTV_FAST_MONTHS else 0.0
    return min(1.0, base + bonus)


def calculate_priority_score(value_score, readiness_score, ttv_score):
    w = PRIORITY_WEIGHTS
    return value_score * w['value'] + readiness_score * w['readiness'] + ttv_score * 10 * w['ttv']


def determine_quadrant(value_score, readiness_score, threshold=5.0):
    high_value = value_score >= threshold
    high_readiness = readiness_score >= threshold
    if high_value and high_readiness:
        return 'champions'
    if high_value:
        return 'strategic'
    if high_readiness:
        return 'quick_wins'
    return 'foundation'


def determine_priority_tier(value_score, readiness_score, threshold=5.0):
    return TIERS[determine_quadrant(value_score, readiness_score, threshold)]


def determine_phase(priority_score):
    for min_score, phase in PHASE_THRESHOLDS:
        if priority_score >= min_score:
            return phase
    return 'Q4'


# ══════════════════════════════════════════════════════════════
#  MAIN: RECALCULATE PRIORITIES
# ══════════════════════════════════════════════════════════════

def recalculate_priorities(benefits, readiness, params=None):
    """One PriorityScore per benefit record, in the order of `benefits`."""
    p = resolve_params(params)
    expected_values = [benefit_amount(b, 'expected') for b in benefits]
    max_ev = max(expected_values, default=0.0)

    readiness_by_uc = {}
    for r in readiness:
        readiness_by_uc.setdefault(r.get('useCaseId'), r)

    results = []
    for b, ev in zip(benefits, expected_values):
        r = readiness_by_uc.get(b.get('useCaseId'))
        readiness_score = clamp(coerce_number((r or {}).get('readinessScore'), p['defaultReadiness']), 0.0, 10.0)
        ttv = max(0.0, coerce_number((r or {}).get('timeToValue'), p['defaultTimeToValue']))

        value_score = calculate_value_score(ev, max_ev)
        ttv_score = calculate_ttv_score(ttv)
        priority = calculate_priority_score(value_score, readiness_score, ttv_score)
        quadrant = determine_quadrant(value_score, readiness_score, p['tierThreshold'])

        results.append({
            'id': b.get('useCaseId'),
            'useCaseId': b.get('useCaseId'),
            'useCaseName': b.get('useCaseName'),
            'strategicTheme': b.get('strategicTheme'),
            'valueScore': round(value_score, 2),
            'readinessScore': round(readiness_score, 2),
            'ttvScore': round(ttv_score, 2),
            'priorityScore': round(priority, 2),
            'priorityTier': TIERS[quadrant],
            'quadrant': quadrant,
            'recommendedPhase': determine_phase(priority),
        })
    return results


def rank_priorities(priorities):
    """Descending by priority score; equal scores keep their input order."""
    return sorted(priorities, key=lambda x: x.get('priorityScore', 0), reverse=True)
