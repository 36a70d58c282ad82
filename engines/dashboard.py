"""
Executive Dashboard
Ranked use-case list plus portfolio totals per benefit category and the
value-per-million-tokens efficiency metric.
"""
from engines.benefits import benefit_amount
from engines.currency import coerce_number
from engines.priority import rank_priorities


def generate_executive_dashboard(benefits, readiness, priorities, top_n=None):
    benefit_by_uc = {}
    for b in benefits:
        benefit_by_uc.setdefault(b.get('useCaseId'), b)
    readiness_by_uc = {}
    for r in readiness:
        readiness_by_uc.setdefault(r.get('useCaseId'), r)

    ranked = []
    for i, p in enumerate(rank_priorities(priorities)):
        b = benefit_by_uc.get(p.get('useCaseId'))
        r = readiness_by_uc.get(p.get('useCaseId'))
        ranked.append({
            'rank': i + 1,
            'useCaseId': p.get('useCaseId'),
            'useCase': p.get('useCaseName'),
            'annualValue': benefit_amount(b, 'total') if b else 0.0,
            'monthlyTokens': coerce_number(r.get('monthlyTokens')) if r else 0,
            'priorityScore': p.get('priorityScore', 0),
        })

    total_annual = sum(u['annualValue'] for u in ranked)
    total_tokens = sum(coerce_number(r.get('monthlyTokens')) for r in readiness)

    return {
        'topUseCases': ranked[:top_n] if top_n else ranked,
        'totalAnnualValue': total_annual,
        'totalCostBenefit': sum(benefit_amount(b, 'cost') for b in benefits),
        'totalRevenueBenefit': sum(benefit_amount(b, 'revenue') for b in benefits),
        'totalRiskBenefit': sum(benefit_amount(b, 'risk') for b in benefits),
        'totalCashFlowBenefit': sum(benefit_amount(b, 'cashFlow') for b in benefits),
        'totalMonthlyTokens': total_tokens,
        'valuePerMillionTokens': round(total_annual / (total_tokens / 1_000_000)) if total_tokens > 0 else 0,
    }
