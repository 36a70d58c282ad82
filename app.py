"""
Initiative Valuation — Flask API Server
Stateless JSON endpoints over the calculation engines. Every request carries
its own records and gets freshly computed records back; nothing is stored.
"""
import os
import traceback
from flask import Flask, jsonify, request
from engines.assumptions import load_parameters
from engines.benefits import recalculate_benefits, cross_validate_benefits
from engines.dashboard import generate_executive_dashboard
from engines.pipeline import run_all
from engines.priority import recalculate_priorities
from engines.projection import generate_multi_year_projection, generate_scenario_analysis
from engines.readiness import recalculate_readiness
from engines.recovery import map_friction_to_recovery

app = Flask(__name__)

PARAMS = load_parameters(os.environ.get('PARAMETERS_XLSX'))


class BadRequest(ValueError):
    pass


def _body():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise BadRequest('Request body must be a JSON object')
    return body


def _records(body, key, required=True):
    val = body.get(key)
    if val is None and not required:
        return []
    if not isinstance(val, list):
        raise BadRequest(f"'{key}' must be a list of records")
    return val


def _top_n(body):
    val = body.get('topN')
    if val is None:
        return None
    whole = isinstance(val, int) or (isinstance(val, float) and val.is_integer())
    if isinstance(val, bool) or not whole or val < 0:
        raise BadRequest("'topN' must be a non-negative integer")
    return int(val)


def _profiles(body):
    val = body.get('profiles')
    if val is None:
        return None
    if not isinstance(val, list) or not all(isinstance(x, str) for x in val):
        raise BadRequest("'profiles' must be a list of profile names")
    return val


def _error(e):
    if isinstance(e, BadRequest):
        return jsonify({'status': 'error', 'message': str(e)}), 400
    traceback.print_exc()
    return jsonify({'status': 'error', 'message': str(e)}), 500


@app.route('/api/parameters')
def api_parameters():
    return jsonify(PARAMS)


@app.route('/api/calculate/benefits', methods=['POST'])
def api_calculate_benefits():
    try:
        body = _body()
        return jsonify(recalculate_benefits(_records(body, 'benefits'), body.get('scenarioType')))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/readiness', methods=['POST'])
def api_calculate_readiness():
    try:
        return jsonify(recalculate_readiness(_records(_body(), 'readiness'), PARAMS))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/priorities', methods=['POST'])
def api_calculate_priorities():
    try:
        body = _body()
        return jsonify(recalculate_priorities(_records(body, 'benefits'), _records(body, 'readiness'), PARAMS))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/scenarios', methods=['POST'])
def api_calculate_scenarios():
    try:
        body = _body()
        return jsonify(generate_scenario_analysis(_records(body, 'benefits'), _profiles(body), PARAMS))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/multi-year', methods=['POST'])
def api_calculate_multi_year():
    try:
        return jsonify(generate_multi_year_projection(_records(_body(), 'benefits'), PARAMS))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/dashboard', methods=['POST'])
def api_calculate_dashboard():
    try:
        body = _body()
        return jsonify(generate_executive_dashboard(
            _records(body, 'benefits'), _records(body, 'readiness'), _records(body, 'priorities'),
            _top_n(body)))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/friction-recovery', methods=['POST'])
def api_calculate_friction_recovery():
    try:
        body = _body()
        return jsonify(map_friction_to_recovery(
            _records(body, 'frictionPoints'), _records(body, 'useCases'), _records(body, 'benefits')))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/validate', methods=['POST'])
def api_calculate_validate():
    try:
        body = _body()
        return jsonify(cross_validate_benefits(
            _records(body, 'benefits'), body.get('annualRevenue'), body.get('totalEmployees')))
    except Exception as e:
        return _error(e)


@app.route('/api/calculate/all', methods=['POST'])
def api_calculate_all():
    """Full recompute of one scenario: the "Calculate" button."""
    try:
        body = _body()
        scenario = {k: _records(body, k, required=False)
                    for k in ('benefits', 'readiness', 'frictionPoints', 'useCases')}
        return jsonify({'status': 'ok', **run_all(scenario, body.get('scenarioType'), PARAMS)})
    except Exception as e:
        return _error(e)


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
