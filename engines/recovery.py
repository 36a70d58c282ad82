"""
Friction Recovery Mapper

Reconciles each friction point's annual cost against the expected value of
the use case built to address it:
  recovery     = min(expected value, friction cost)
  unrecovered  = max(0, friction cost - recovery)
  additional   = max(0, expected value - friction cost)

Use cases are joined to friction points on exact text equality of
useCase.targetFriction and frictionPoint.frictionPoint. That join lives in
find_matching_use_case only; every consumer goes through
map_friction_to_recovery.
"""
from engines.benefits import benefit_amount
from engines.currency import format_currency, parse_currency_string

STATUS_FULL_PCT = 100
STATUS_PARTIAL_PCT = 50

ADDITIONAL_SOURCES = [
    # (benefit category, explanation phrase)
    ('revenue', 'revenue uplift'),
    ('risk', 'risk mitigation'),
    ('cashFlow', 'cash flow improvement'),
]

UNMAPPED_EXPLANATION = ('No use case currently addresses this friction point; potential gap. '
                        'Consider adding a targeted AI use case.')
UNMAPPED_METHODOLOGY = 'Unmapped: no direct use case mapping'
NO_ADDITIONAL_EXPLANATION = ('Recovery amount is at or below friction cost; '
                             'no additional benefits above friction basis')


def find_matching_use_case(friction_point, use_cases):
    """First use case whose targetFriction is exactly the friction description."""
    text = friction_point.get('frictionPoint')
    for uc in use_cases:
        if uc.get('targetFriction') == text:
            return uc
    return None


def classify_recovery(matched, recovery_pct):
    if not matched:
        return 'unmapped'
    if recovery_pct >= STATUS_FULL_PCT:
        return 'full'
    if recovery_pct >= STATUS_PARTIAL_PCT:
        return 'partial'
    return 'low'


def _explain(additional, breakdown):
    if additional <= 0:
        return NO_ADDITIONAL_EXPLANATION
    parts = [f"{phrase} ({format_currency(breakdown[cat])})"
             for cat, phrase in ADDITIONAL_SOURCES if breakdown[cat] > 0]
    if not parts:
        return 'Benefits exceed friction cost basis'
    return (f"Added benefits from {', '.join(parts)}; these exceed the friction cost basis "
            f"because they capture value beyond labor-hour recovery")


def build_recovery_row(friction_point, use_cases, benefits_by_uc):
    friction_cost = parse_currency_string(friction_point.get('estimatedAnnualCost'))
    uc = find_matching_use_case(friction_point, use_cases)
    benefit = benefits_by_uc.get(uc.get('id')) if uc else None

    breakdown = {cat: benefit_amount(benefit, cat) if benefit else 0.0
                 for cat in ('cost', 'revenue', 'risk', 'cashFlow')}
    expected = benefit_amount(benefit, 'expected') if benefit else 0.0

    recovery = min(expected, friction_cost)
    recovery_pct = recovery / friction_cost * 100 if friction_cost > 0 else 0
    unrecovered = max(0.0, friction_cost - recovery)
    additional = max(0.0, expected - friction_cost)
    status = classify_recovery(uc is not None, recovery_pct)

    if uc is None:
        explanation = UNMAPPED_EXPLANATION
        methodology = UNMAPPED_METHODOLOGY
    else:
        explanation = _explain(additional, breakdown)
        methodology = f"{uc.get('id')}: {format_currency(recovery)} ({recovery_pct:.1f}% of friction)"

    return {
        'id': friction_point.get('id'),
        'frictionPoint': friction_point.get('frictionPoint'),
        'frictionCost': friction_cost,
        'useCaseId': uc.get('id') if uc else None,
        'useCaseName': uc.get('name') if uc else None,
        'expectedValue': expected,
        'recoveryAmount': recovery,
        'recoveryPct': recovery_pct,
        'unrecoveredCost': unrecovered,
        'additionalValue': additional,
        'status': status,
        'explanation': explanation,
        'methodology': methodology,
        'severity': friction_point.get('severity'),
        'function': friction_point.get('function'),
        'subFunction': friction_point.get('subFunction'),
        'strategicTheme': friction_point.get('strategicTheme'),
        'costBenefit': breakdown['cost'],
        'revenueBenefit': breakdown['revenue'],
        'riskBenefit': breakdown['risk'],
        'cashFlowBenefit': breakdown['cashFlow'],
    }


# ══════════════════════════════════════════════════════════════
#  MAIN: MAP FRICTION TO RECOVERY
# ══════════════════════════════════════════════════════════════

def map_friction_to_recovery(friction_points, use_cases, benefits):
    """One row per friction point (largest cost first) plus portfolio totals."""
    benefits_by_uc = {}
    for b in benefits:
        benefits_by_uc.setdefault(b.get('useCaseId'), b)

    rows = [build_recovery_row(fp, use_cases, benefits_by_uc) for fp in friction_points]
    rows.sort(key=lambda x: x['frictionCost'], reverse=True)

    total_friction = sum(r['frictionCost'] for r in rows)
    total_recovery = sum(r['recoveryAmount'] for r in rows)
    return {
        'rows': rows,
        'totalFrictionCost': total_friction,
        'totalRecovery': total_recovery,
        'totalUnrecovered': sum(r['unrecoveredCost'] for r in rows),
        'totalAdditional': sum(r['additionalValue'] for r in rows),
        'overallRecoveryRate': total_recovery / total_friction * 100 if total_friction > 0 else 0,
        'mappedCount': sum(1 for r in rows if r['status'] != 'unmapped'),
        'unmappedCount': sum(1 for r in rows if r['status'] == 'unmapped'),
        'fullyRecoveredCount': sum(1 for r in rows if r['status'] == 'full'),
    }
