"""
Assumptions & Configuration

Scenario multiplier profiles, input bounds for benefit formula components,
and the engine-wide default parameters. Parameters can be overridden per
engagement from data/config/parameters.xlsx (Parameter / Value columns);
without that file the defaults below apply.
"""
import os
import logging
from collections import namedtuple
from types import MappingProxyType

import openpyxl

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'data')
PARAMETERS_PATH = os.path.join(DATA_DIR, 'config', 'parameters.xlsx')

# ══════════════════════════════════════════════════════════════
#  SCENARIO MULTIPLIER PROFILES
# ══════════════════════════════════════════════════════════════

ScenarioProfile = namedtuple('ScenarioProfile', ['name', 'benefit_multiplier', 'probability_multiplier'])

SCENARIO_PROFILES = MappingProxyType({
    'conservative': ScenarioProfile('conservative', 0.6, 0.85),
    'base':         ScenarioProfile('base', 1.0, 1.0),
    'optimistic':   ScenarioProfile('optimistic', 1.3, 1.0),
})

PROFILE_ORDER = ('conservative', 'base', 'optimistic')


def get_profile(profile=None):
    """Resolve a profile name (or pass a ScenarioProfile through). Unknown names fall back to base."""
    if isinstance(profile, ScenarioProfile):
        return profile
    if profile is None:
        return SCENARIO_PROFILES['base']
    key = str(profile).strip().lower()
    if key not in SCENARIO_PROFILES:
        logging.warning(f"get_profile: unknown scenario profile '{profile}', using base")
        return SCENARIO_PROFILES['base']
    return SCENARIO_PROFILES[key]


# ══════════════════════════════════════════════════════════════
#  INPUT BOUNDS (formula component label -> (min, max))
# ══════════════════════════════════════════════════════════════

INPUT_BOUNDS = {
    'Hours Saved':        (0, 500_000),
    'Loaded Hourly Rate': (25, 500),
    'Revenue Uplift %':   (0, 0.5),
    'Revenue at Risk':    (0, 500_000_000_000),
    'Annual Revenue':     (0, 500_000_000_000),
    'Days Improved':      (0, 365),
    'Cost of Capital':    (0.01, 0.25),
}


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def clamp_input(label, value):
    bound = INPUT_BOUNDS.get(label)
    if not bound:
        return value
    return clamp(value, bound[0], bound[1])


# ══════════════════════════════════════════════════════════════
#  PARAMETERS
# ══════════════════════════════════════════════════════════════

PARAM_MAP = {
    'Discount Rate': 'discountRate',
    'Planning Horizon': 'horizon',
    'Investment % of Annual Benefit': 'investmentPct',
    'Input Token Price (per 1M)': 'inputTokenPricePerMillion',
    'Output Token Price (per 1M)': 'outputTokenPricePerMillion',
    'Default Readiness Score': 'defaultReadiness',
    'Default Time to Value (months)': 'defaultTimeToValue',
    'Tier Threshold': 'tierThreshold',
    'Dashboard Top N': 'topN',
}

INT_PARAMS = ('horizon', 'topN')


def _default_params():
    return {
        'discountRate': 0.10, 'horizon': 3,
        # initial investment estimated as a share of first-year benefit
        'investmentPct': 0.20,
        'inputTokenPricePerMillion': 3.0, 'outputTokenPricePerMillion': 15.0,
        'defaultReadiness': 5.0, 'defaultTimeToValue': 12,
        'tierThreshold': 5.0, 'topN': 10,
    }


def resolve_params(params=None):
    """Defaults overlaid with whatever the caller supplies."""
    p = _default_params()
    if params:
        p.update({k: v for k, v in params.items() if v is not None})
    return p


def read_xlsx_sheet(filepath, sheet_name=None):
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.active
    rows = list(ws.iter_rows(values_only=True))
    wb.close()
    if len(rows) < 2:
        return []
    headers = [str(h).strip() if h else f'col_{i}' for i, h in enumerate(rows[0])]
    return [dict(zip(headers, row)) for row in rows[1:]]


def load_parameters(path=None):
    """Load engine parameters from an xlsx workbook, falling back to defaults."""
    path = path or PARAMETERS_PATH
    p = _default_params()
    if not os.path.exists(path):
        return p
    applied = 0
    for row in read_xlsx_sheet(path):
        key = str(row.get('Parameter') or '').strip()
        val = row.get('Value')
        if not key or val is None:
            continue
        mapped = PARAM_MAP.get(key)
        if not mapped:
            logging.warning(f"load_parameters: ignoring unknown parameter '{key}' in {path}")
            continue
        try:
            val = float(val)
        except (TypeError, ValueError):
            logging.warning(f"load_parameters: non-numeric value {val!r} for '{key}', keeping default")
            continue
        p[mapped] = int(val) if mapped in INT_PARAMS else val
        applied += 1
    logging.info(f"load_parameters: {applied} override(s) applied from {path}")
    return p
