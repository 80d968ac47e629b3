"""Category suggestions from expense names.

The keyword map ships with the package in
``resources/category_keywords.json``.  A category matches when any of its
keywords appears (case-insensitively) inside the expense name; categories
are tried in the canonical order of :data:`~spendwise.models.CATEGORIES`.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from .config import RESOURCES_DIR
from .models import CATEGORIES

logger = logging.getLogger(__name__)

KEYWORDS_FILE = RESOURCES_DIR / "category_keywords.json"


@lru_cache(maxsize=1)
def _get_keywords() -> Dict[str, List[str]]:
    """Load the keyword map, keyed by canonical category name."""
    try:
        with KEYWORDS_FILE.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load category keywords from %s: %s", KEYWORDS_FILE, e)
        return {}
    return {
        category: [kw.lower() for kw in raw.get(category, [])]
        for category in CATEGORIES
    }


def guess_category(name: Optional[str]) -> Optional[str]:
    """Return the first category whose keyword occurs in ``name``.

    Example:
        >>> guess_category('Swiggy dinner')
        'Food'
        >>> guess_category('Birthday cake') is None
        True
    """
    if not name or not name.strip():
        return None
    name_lower = name.lower()
    for category, keywords in _get_keywords().items():
        for keyword in keywords:
            if keyword in name_lower:
                return category
    return None


def suggest_categories(name: Optional[str], limit: int = 5) -> List[str]:
    """Categories to offer for ``name``, best guess first.

    An empty name yields no suggestions.
    """
    if not name or not name.strip():
        return []
    guess = guess_category(name)
    ordered = ([guess] if guess else []) + [c for c in CATEGORIES if c != guess]
    return ordered[:max(limit, 0)]
