"""
Full recompute for one scenario, run on every "Calculate" action.
Chain: readiness → benefits → priorities → scenarios → multi-year →
dashboard → friction recovery. Nothing is cached between runs.
"""
from engines.assumptions import resolve_params
from engines.benefits import recalculate_benefits
from engines.dashboard import generate_executive_dashboard
from engines.priority import recalculate_priorities
from engines.projection import generate_multi_year_projection, generate_scenario_analysis
from engines.readiness import recalculate_readiness
from engines.recovery import map_friction_to_recovery


def run_all(scenario, profile=None, params=None):
    p = resolve_params(params)
    raw_benefits = scenario.get('benefits') or []
    friction_points = scenario.get('frictionPoints') or []
    use_cases = scenario.get('useCases') or []

    readiness = recalculate_readiness(scenario.get('readiness') or [], p)
    benefits = recalculate_benefits(raw_benefits, profile)
    priorities = recalculate_priorities(benefits, readiness, p)

    result = {
        'benefits': benefits,
        'readiness': readiness,
        'priorities': priorities,
        # profiles are applied to the raw inputs so multipliers never compound
        'scenarioAnalysis': generate_scenario_analysis(raw_benefits, params=p),
        'multiYear': generate_multi_year_projection(benefits, p),
        'executiveDashboard': generate_executive_dashboard(benefits, readiness, priorities, p['topN']),
        'frictionRecovery': None,
    }
    if friction_points:
        result['frictionRecovery'] = map_friction_to_recovery(friction_points, use_cases, benefits)
    return result
