"""Identifier normalisation for package names."""

from __future__ import annotations

import re

# ASCII word class so results only ever contain [a-z0-9_-].
_NON_WORD_RE = re.compile(r"\W+", re.ASCII)
_SEPARATOR = "-"


def normalize_identifier(value: str) -> str:
    """Return a lowercase, dash-separated identifier derived from ``value``.

    ``@scope/My Package`` becomes ``scope-my-package``. Repeated application is
    a no-op and input made only of symbols collapses to an empty string.
    """
    collapsed = _NON_WORD_RE.sub(_SEPARATOR, value)
    return collapsed.lower().strip(_SEPARATOR)


__all__ = ["normalize_identifier"]
