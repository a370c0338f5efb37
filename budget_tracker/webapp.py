"""Flask JSON API for Budget Tracker.

The caller's identity is supplied by an upstream auth layer through a
request header (``X-User-Email`` by default); this app only scopes data by it.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from .aggregator import summarize
from .config import AppConfig
from .data_loader import TransactionType, ValidationError, coerce_transaction
from .models import TransactionRecord, db
from .periods import Granularity
from .reports import CENT, summary_to_dict

logger = logging.getLogger(__name__)


def _error(message: str, status: int, **extra: Any):
    body: Dict[str, Any] = {"error": message}
    body.update(extra)
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapped_view(**kwargs):
        if not g.user_email:
            return _error("Not authenticated", 401)
        return view(**kwargs)

    return wrapped_view


def _fetch_records(user_email: str):
    return (
        TransactionRecord.query.filter_by(user_email=user_email)
        .order_by(TransactionRecord.date, TransactionRecord.id)
        .all()
    )


def create_app(config: Optional[AppConfig] = None, test_config: Optional[Dict[str, Any]] = None) -> Flask:
    cfg = config or AppConfig.load()
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = cfg.database_uri
    app.config["BUDGET_TRACKER"] = cfg
    if test_config:
        app.config.update(test_config)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    @app.before_request
    def _load_user_email() -> None:
        value = request.headers.get(cfg.user_header, "").strip()
        g.user_email = value or None

    @app.errorhandler(Exception)
    def _handle_exception(exc: Exception):
        if isinstance(exc, HTTPException):
            return _error(exc.description or exc.name, exc.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(str(exc), 500)

    @app.route("/api/financial/summary")
    @login_required
    def api_summary():
        freq = request.args.get("freq") or cfg.default_frequency.value
        try:
            granularity = Granularity.parse(freq)
        except ValueError as exc:
            return _error(str(exc), 400)
        records = [r.to_transaction() for r in _fetch_records(g.user_email)]
        summary = summarize(records, granularity, cfg.error_policy)
        return jsonify({
            "freq": granularity.value,
            "summary": summary_to_dict(summary),
            "errors": [e.to_dict() for e in summary.errors],
        })

    @app.route("/api/financial/transactions")
    @login_required
    def api_transactions():
        rows = _fetch_records(g.user_email)
        return jsonify({"transactions": [r.to_dict() for r in rows]})

    def _insert(txn_type: TransactionType):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Expected a JSON object body", 400)
        data = dict(data)
        data["type"] = txn_type.value
        try:
            txn = coerce_transaction(data)
        except ValidationError as exc:
            return _error(exc.reason, 400, field=exc.field)
        # amount column holds whole cents
        if txn.amount != txn.amount.quantize(CENT):
            return _error(f"Amount must not have more than two decimal places: {txn.amount}", 400, field="amount")
        record = TransactionRecord.from_transaction(g.user_email, txn)
        db.session.add(record)
        db.session.commit()
        logger.info("Recorded %s of %s for %s", txn_type.value, txn.amount, g.user_email)
        return jsonify({"insertedId": record.id}), 201

    @app.route("/api/income", methods=["POST"])
    @login_required
    def api_income():
        return _insert(TransactionType.INCOME)

    @app.route("/api/expense", methods=["POST"])
    @login_required
    def api_expense():
        return _insert(TransactionType.EXPENSE)

    return app
