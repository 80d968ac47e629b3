"""Top-level package for SpendWise, a personal monthly budgeting tool.

The primary modules are:

* ``controller`` - the session state owner every interface talks to
* ``derivation`` - totals, balance and the per-category/per-day series
* ``visualization`` - functions that generate Plotly figures
* ``dashboard`` - a Streamlit app that ties everything together
* ``server`` - the Flask service behind the remote backend

To run the dashboard from the command line you can execute:

```bash
streamlit run spendwise/dashboard.py
```
"""

from . import derivation  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .controller import BudgetController  # noqa: F401
from .errors import NotFoundError, PersistenceError, SpendWiseError, ValidationError  # noqa: F401

# Streamlit may not be installed everywhere (e.g. on the service host or
# during unit testing).
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore

__version__ = "0.1.0"

__all__ = [
    "BudgetController",
    "NotFoundError",
    "PersistenceError",
    "SpendWiseError",
    "ValidationError",
    "dashboard",
    "derivation",
    "visualization",
]
