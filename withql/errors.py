"""Exception type for withQL.

Every failure surfaced by the composer, whether a validation problem, a
missing parameter or an unexpected internal error, is raised as a
:class:`BuildError` so callers only ever need one ``except`` clause.
"""
from __future__ import annotations


class BuildError(Exception):
    """Raised when a statement cannot be composed.

    Args:
        message: Human-readable description.
        stage: The pipeline step that failed (``"validate"``, ``"with"``,
            ``"rewrite"``, ``"parse"``, ``"paginate"``), when known.
    """

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        self.stage = stage
