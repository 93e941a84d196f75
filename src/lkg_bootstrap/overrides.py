"""Operator overrides read from the process environment."""

from __future__ import annotations

import os
from collections.abc import Mapping


class EnvironmentOverrides:
    """``OverrideSource`` over an environment mapping.

    An empty value counts as unset.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ: Mapping[str, str] = os.environ if environ is None else environ

    def lookup(self, variable: str) -> str | None:
        return self._environ.get(variable) or None
