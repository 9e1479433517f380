"""Route param normalization.

URL params arrive as strings (``"1"``) while programmatic navigation
passes whatever the caller has (``1``, ``True``). Both sides meet here so
that comparisons and rendered URLs agree.
"""

from collections.abc import Mapping
from typing import Any


def format_param(value: Any) -> str:
    """Render a bound param value as it appears in a URL.

    Booleans render lowercase (``true`` / ``false``); everything else
    goes through ``str()``. ``None`` is the caller's job to skip.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_param(value: Any) -> str | None:
    """Normalize a param value for equality checks.

    ``None`` (and a missing key) stays ``None``; anything else is
    compared in its URL form, so ``1 == "1"`` and ``False == "false"``.
    """
    if value is None:
        return None
    return format_param(value)


def params_equal(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    names: tuple[str, ...],
) -> bool:
    """True if every param in *names* has the same normalized value."""
    return all(normalize_param(old.get(name)) == normalize_param(new.get(name)) for name in names)
