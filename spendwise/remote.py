"""Storage backend that talks to the SpendWise HTTP service.

Requests go through ``urllib`` when a ``base_url`` is given, or through
any object with Flask test-client style ``get``/``post`` methods when a
``client`` is given (the tests pass ``app.test_client()``).

``save`` is a last-write-wins overwrite of the remote data: income is
set (or reset when it is 0), the local collection is added with its
original timestamps and then the previous remote rows are deleted.  Remote ids
are therefore reassigned on every save; the store renumbers on load.
"""

from __future__ import annotations

import json
import logging
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional, Tuple

from .config import REMOTE_TIMEOUT, REMOTE_URL
from .errors import PersistenceError, ValidationError
from .models import Expense

logger = logging.getLogger(__name__)

ENDPOINT = "/backend"


class RemoteBackend:
    """Backend contract (``load``/``save``) over the action-keyed service."""

    def __init__(self, base_url: Optional[str] = None, client: Any = None, timeout: float = REMOTE_TIMEOUT):
        self.base_url = (base_url or REMOTE_URL).rstrip("/")
        self.client = client
        self.timeout = timeout

    def _send(self, params: Dict[str, str], data: Optional[Dict[str, str]]) -> Dict[str, Any]:
        if self.client is not None:
            if data is None:
                response = self.client.get(ENDPOINT, query_string=params)
            else:
                response = self.client.post(ENDPOINT, query_string=params, data=data)
            payload = response.get_json(silent=True)
            if payload is None:
                raise PersistenceError(f"Service returned a non-JSON response ({response.status_code})")
            return payload

        url = f"{self.base_url}{ENDPOINT}?{urllib.parse.urlencode(params)}"
        body = urllib.parse.urlencode(data).encode("utf-8") if data is not None else None
        try:
            with urllib.request.urlopen(url, data=body, timeout=self.timeout) as response:
                return json.loads(response.read().decode("utf-8"))
        except OSError as e:
            raise PersistenceError(f"Could not reach {self.base_url}: {e}") from e
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Service at {self.base_url} returned invalid JSON: {e}") from e

    def _call(
        self,
        action: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Invoke ``action`` and return the payload, raising unless it succeeded."""
        query = {"action": action}
        query.update({k: str(v) for k, v in (params or {}).items()})
        form = {k: str(v) for k, v in data.items()} if data is not None else None
        payload = self._send(query, form)
        status = payload.get("status") if isinstance(payload, dict) else None
        if status != "success":
            message = payload.get("message", "") if isinstance(payload, dict) else ""
            raise PersistenceError(f"Action '{action}' failed with status {status!r} {message}".rstrip())
        return payload

    def load(self) -> Tuple[float, List[Expense]]:
        try:
            payload = self._call("get-data")
        except PersistenceError as e:
            logger.warning("Remote load failed, starting empty: %s", e)
            return 0.0, []

        try:
            income = max(float(payload.get("income") or 0), 0.0)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid remote income %r", payload.get("income"))
            income = 0.0

        expenses: List[Expense] = []
        for entry in payload.get("expenses") or []:
            try:
                expenses.append(Expense.from_dict(entry))
            except ValidationError as e:
                logger.warning("Skipping invalid remote expense %r: %s", entry, e)
        return income, expenses

    def save(self, income: float, expenses: List[Expense]) -> None:
        """Replace the remote income and expenses with ``income`` and ``expenses``.

        New rows are added before the stale ones are deleted, so a failure
        part way leaves the previous collection on the server (plus any rows
        already added) and a later save converges.
        """
        if income > 0:
            self._call("set-income", {"amount": income})
        else:
            self._call("reset-income", {})

        stale_ids = [entry["id"] for entry in self._call("get-data").get("expenses") or []]

        for expense in expenses:
            self._call(
                "add-expense",
                {
                    "name": expense.name,
                    "amount": expense.amount,
                    "category": expense.category,
                    "timestamp": expense.timestamp.isoformat(),
                },
            )
        for stale_id in stale_ids:
            self._call("delete-expense", {"id": stale_id})
        logger.info("Pushed income and %d expenses to %s", len(expenses), self.base_url)
