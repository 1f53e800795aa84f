from __future__ import annotations
from typing import Any
from flask import Flask, request, jsonify, Response

import os
import time
from collections import deque, defaultdict

from riskpaths.api.orchestrator import (
    analyze_upload,
    generate_client_analysis,
    generate_materiality_report,
)
from riskpaths.config.env import get_report_store_config
from riskpaths.exports.writers import write_matches
from riskpaths.matching.engine import MatchedPathway
from riskpaths.reports.client import ClientProfile, MaterialityDecision
from riskpaths.reports.generator import GenerationError, MistralGenerator
from riskpaths.reports.store import FileReportStore, InvalidUserId, NotAuthenticated, ReportNotFound
from riskpaths.taxonomy.store import default_store

app = Flask(__name__)

PROTECTED_PREFIXES = ('/materiality', '/reports', '/clients')

# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return os.environ.get('API_KEY')


def _get_rate_limit() -> tuple[int, float]:
    n = app.config.get('RATE_LIMIT_N')
    w = app.config.get('RATE_LIMIT_WINDOW_SEC')
    if n is None:
        n = int(os.environ.get('RATE_LIMIT_N', '5'))
    if w is None:
        w = float(os.environ.get('RATE_LIMIT_WINDOW_SEC', '1.0'))
    return int(n), float(w)


# Collaborators are built once and shared; the taxonomy store is read-only

def _taxonomy():
    store = app.config.get('TAXONOMY_STORE')
    if store is None:
        store = app.config['TAXONOMY_STORE'] = default_store()
    return store


def _report_store() -> FileReportStore:
    store = app.config.get('REPORT_STORE')
    if store is None:
        store = app.config['REPORT_STORE'] = FileReportStore(get_report_store_config().root)
    return store


def _generator():
    gen = app.config.get('TEXT_GENERATOR')
    if gen is None:
        gen = app.config['TEXT_GENERATOR'] = MistralGenerator()
    return gen


_recent: dict[str, deque[float]] = defaultdict(lambda: deque(maxlen=100))


def _client_ip() -> str:
    xff = request.headers.get('X-Forwarded-For')
    if xff:
        return xff.split(',')[0].strip()
    return request.remote_addr or 'anon'


def _user_id() -> str:
    return (request.headers.get('X-User-Id') or '').strip()


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


def _check_rate_limit(ip: str):
    # Allow if rate limiting disabled or N <= 0
    n, window = _get_rate_limit()
    if n <= 0:
        return None
    now = time.time()
    dq = _recent[ip]
    while dq and now - dq[0] > window:
        dq.popleft()
    if len(dq) >= n:
        retry = max(0.0, window - (now - dq[0]))
        resp = jsonify({'error': 'rate_limited'})
        resp.status_code = 429
        resp.headers['Retry-After'] = f"{retry:.2f}"
        return resp
    dq.append(now)
    return None


@app.before_request
def _auth_and_rate_limit():
    if request.path.startswith(PROTECTED_PREFIXES):
        unauthorized = _check_api_key()
        if unauthorized is not None:
            return unauthorized
        if request.method == 'POST':
            rl = _check_rate_limit(_client_ip())
            if rl is not None:
                return rl
    return None


@app.errorhandler(NotAuthenticated)
def _not_authenticated(e):
    return jsonify({'error': 'not_authenticated'}), 401


@app.errorhandler(InvalidUserId)
def _invalid_user(e):
    return jsonify({'error': 'invalid_user_id', 'message': str(e)}), 400


@app.errorhandler(GenerationError)
def _generation_failed(e):
    return jsonify({'error': 'generation_failed', 'message': str(e)}), 502


@app.errorhandler(ReportNotFound)
def _report_not_found(e):
    return jsonify({'error': 'not_found'}), 404


@app.get('/taxonomy')
def get_taxonomy():
    return jsonify({'pathways': [p.to_dict() for p in _taxonomy()]})


@app.get('/taxonomy/hierarchy')
def get_taxonomy_hierarchy():
    return jsonify({'categories': [c.to_dict() for c in _taxonomy().hierarchy]})


def _analyze_request():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return None, (jsonify({'error': 'file is required'}), 400)
    analysis = analyze_upload(upload.filename, upload.read, _taxonomy())
    if analysis.rejected:
        status = 415 if analysis.error_code == 'unsupported_format' else 400
        return analysis, (jsonify(analysis.to_dict()), status)
    return analysis, None


@app.post('/materiality/match')
def post_match():
    analysis, err = _analyze_request()
    if err is not None:
        return err
    return jsonify(analysis.to_dict())


@app.post('/materiality/export.csv')
def post_export_csv():
    analysis, err = _analyze_request()
    if err is not None:
        return err
    return Response(write_matches(analysis.matches), mimetype='text/csv', headers={
        'Content-Disposition': 'attachment; filename="matched_pathways.csv"'
    })


@app.post('/reports')
def post_report():
    payload: dict[str, Any] = request.get_json(force=True, silent=True) or {}
    client_name = (payload.get('client_name') or '').strip()
    if not client_name:
        return jsonify({'error': 'client_name is required'}), 400
    try:
        matches = [MatchedPathway.from_dict(m) for m in payload.get('reportInputData') or []]
    except (KeyError, ValueError, TypeError, AttributeError):
        return jsonify({'error': 'invalid reportInputData'}), 400
    try:
        report = generate_materiality_report(
            _user_id(), client_name, matches, _generator(), _report_store(),
            nace_code=payload.get('nace_code'), title=payload.get('title'),
        )
    except InvalidUserId:
        raise
    except ValueError as e:
        return jsonify({'error': 'invalid_request', 'message': str(e)}), 400
    return jsonify(report.to_dict()), 201


@app.post('/clients/analysis')
def post_client_analysis():
    payload: dict[str, Any] = request.get_json(force=True, silent=True) or {}
    client_name = (payload.get('client_name') or '').strip()
    if not client_name:
        return jsonify({'error': 'client_name is required'}), 400
    client = ClientProfile(
        client_name=client_name,
        nace_code=payload.get('nace_code') or '',
        has_financial_statements=bool(payload.get('financial_statements')),
        has_climate_reports=bool(payload.get('climate_reports')),
    )
    try:
        decisions = [
            MaterialityDecision(
                dependency_id=d['dependency_id'],
                selected=bool(d.get('selected', True)),
                rationale=d.get('rationale') or '',
                approved_by=d.get('approved_by') or '',
            )
            for d in payload.get('decisions') or []
        ]
    except (KeyError, TypeError, AttributeError):
        return jsonify({'error': 'invalid decisions'}), 400
    try:
        report = generate_client_analysis(
            _user_id(), client, decisions, _taxonomy(), _generator(), _report_store(),
        )
    except InvalidUserId:
        raise
    except ValueError as e:
        return jsonify({'error': 'invalid_request', 'message': str(e)}), 400
    return jsonify(report.to_dict()), 201


@app.get('/reports')
def list_reports():
    reports = _report_store().list(
        _user_id(),
        search_term=request.args.get('search') or None,
        report_type=request.args.get('type') or None,
    )
    return jsonify({'reports': [r.to_dict() for r in reports]})


@app.get('/reports/<rid>')
def get_report(rid: str):
    report = _report_store().get(_user_id(), rid)
    if report is None:
        return jsonify({'error': 'not_found'}), 404
    return jsonify(report.to_dict())


@app.patch('/reports/<rid>')
def patch_report(rid: str):
    changes = request.get_json(force=True, silent=True) or {}
    if not isinstance(changes, dict):
        return jsonify({'error': 'invalid_request'}), 400
    try:
        report = _report_store().update(_user_id(), rid, **changes)
    except InvalidUserId:
        raise
    except ValueError as e:
        return jsonify({'error': 'invalid_request', 'message': str(e)}), 400
    return jsonify(report.to_dict())


@app.delete('/reports/<rid>')
def delete_report(rid: str):
    if not _report_store().delete(_user_id(), rid):
        return jsonify({'error': 'not_found'}), 404
    return Response(status=204)


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000)
