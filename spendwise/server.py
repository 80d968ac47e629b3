"""HTTP service exposing the relational store.

A single endpoint, ``/backend``, dispatches on the ``action`` query
parameter.  Mutating actions read their fields from the POSTed form.
Every response is a small JSON envelope with a ``status`` of
``"success"``, ``"error"`` or ``"invalid-action"``; the HTTP status code is
always 200 so clients only need to inspect the envelope.

Run it with ``python scripts/serve_backend.py`` or any WSGI server
pointed at :func:`create_app`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request

from . import db
from .errors import ValidationError
from .models import coerce_timestamp, validate_amount, validate_category, validate_name

logger = logging.getLogger(__name__)

Handler = Callable[[Optional[Path]], Dict[str, Any]]


def _error(message: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": "error"}
    if message:
        payload["message"] = message
    return payload


def _positive_id(raw: Any) -> Optional[int]:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _expense_fields() -> Dict[str, Any]:
    return {
        "name": validate_name(request.values.get("name")),
        "amount": validate_amount(request.values.get("amount")),
        "category": validate_category(request.values.get("category")),
    }


def get_data(db_path: Optional[Path]) -> Dict[str, Any]:
    return {
        "status": "success",
        "income": db.fetch_latest_income(db_path),
        "expenses": db.fetch_expenses(db_path=db_path),
    }


def get_expenses(db_path: Optional[Path]) -> Dict[str, Any]:
    try:
        expenses = db.fetch_expenses(request.values.get("month") or None, db_path=db_path)
    except ValidationError as e:
        return _error(str(e))
    return {"status": "success", "expenses": expenses}


def set_income(db_path: Optional[Path]) -> Dict[str, Any]:
    try:
        amount = validate_amount(request.values.get("amount"))
    except ValidationError as e:
        return _error(str(e))
    db.insert_income(amount, db_path)
    logger.info("Income set to %.2f", amount)
    return {"status": "success"}


def reset_income(db_path: Optional[Path]) -> Dict[str, Any]:
    db.insert_income(0.0, db_path)
    logger.info("Income reset to 0")
    return {"status": "success"}


def add_expense(db_path: Optional[Path]) -> Dict[str, Any]:
    try:
        fields = _expense_fields()
        raw_ts = request.values.get("timestamp")
        timestamp = coerce_timestamp(raw_ts).isoformat() if raw_ts else None
    except ValidationError as e:
        return _error(str(e))
    expense_id = db.insert_expense(timestamp=timestamp, db_path=db_path, **fields)
    logger.info("Added expense %d '%s'", expense_id, fields["name"])
    return {"status": "success", "id": expense_id}


def edit_expense(db_path: Optional[Path]) -> Dict[str, Any]:
    expense_id = _positive_id(request.values.get("id"))
    if expense_id is None:
        return _error("Invalid ID")
    try:
        fields = _expense_fields()
    except ValidationError as e:
        return _error(str(e))
    if not db.update_expense(expense_id, db_path=db_path, **fields):
        return _error("Expense not found")
    logger.info("Edited expense %d", expense_id)
    return {"status": "success"}


def delete_expense(db_path: Optional[Path]) -> Dict[str, Any]:
    expense_id = _positive_id(request.values.get("id"))
    if expense_id is None:
        return _error("Invalid ID")
    if not db.delete_expense(expense_id, db_path):
        return _error("Expense not found")
    logger.info("Deleted expense %d", expense_id)
    return {"status": "success"}


ACTIONS: Dict[str, Handler] = {
    "get-data": get_data,
    "get-expenses": get_expenses,
    "set-income": set_income,
    "reset-income": reset_income,
    "add-expense": add_expense,
    "edit-expense": edit_expense,
    "delete-expense": delete_expense,
}


def create_app(db_path: Optional[Path] = None) -> Flask:
    """Build the Flask app.  ``db_path`` defaults to ``config.DB_PATH``."""
    app = Flask(__name__)
    app.config["SPENDWISE_DB_PATH"] = db_path
    db.init_db(db_path)

    @app.route("/backend", methods=["GET", "POST"])
    def backend():
        action = request.args.get("action", "")
        handler = ACTIONS.get(action)
        if handler is None:
            logger.warning("Rejected unknown action %r", action)
            return jsonify({"status": "invalid-action"})
        return jsonify(handler(app.config["SPENDWISE_DB_PATH"]))

    return app
