"""Naming conventions used to derive default table and column names."""

from __future__ import annotations

import re
from collections.abc import Callable

Tableizer = Callable[[str], str]

_CAPITAL_AFTER_WORD = re.compile(r"(?<=\w)([A-Z])")


def tableize(class_name: str) -> str:
    """
    Convert a class name to its table/column form.

    Examples
    --------
    >>> tableize("BlogPost")
    'blog_post'
    >>> tableize("User")
    'user'
    """
    return _CAPITAL_AFTER_WORD.sub(r"_\1", class_name).lower()
