"""Composer configuration.

``ComposerConfig`` selects the dialect compiler and names the synthetic
pagination columns.  Build it directly or through the fluent builder::

    from withql import ComposerConfig

    config = (
        ComposerConfig.builder()
        .target("postgres")
        .pagination_columns(num="row_num", remaining="rows_left")
        .build()
    )
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from withql.compile.identifiers import is_plain_identifier
from withql.errors import BuildError


class ComposerConfig(BaseModel):
    """Settings shared by every composition made with one composer.

    Attributes:
        target: Name of a dialect registered in
            :class:`~withql.compile.registry.CompilerFactory`.
        num_column: Name of the running row-number column.
        remaining_column: Name of the rows-remaining column.
        pagination_columns: When False, the two window columns are never
            added, even for ordered and paginated requests.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    target: str = "sqlite"
    num_column: str = "_num"
    remaining_column: str = "_remaining"
    pagination_columns: bool = True

    @field_validator("num_column", "remaining_column")
    @classmethod
    def _identifier_only(cls, value: str) -> str:
        if not is_plain_identifier(value):
            raise ValueError(f"'{value}' is not a plain SQL identifier")
        return value

    @classmethod
    def builder(cls) -> ComposerConfigBuilder:
        """Return a fluent :class:`ComposerConfigBuilder`."""
        return ComposerConfigBuilder()


class ComposerConfigBuilder:
    """Fluent builder for :class:`ComposerConfig`."""

    def __init__(self) -> None:
        self._values: dict[str, object] = {}

    def target(self, name: str) -> ComposerConfigBuilder:
        self._values["target"] = name
        return self

    def pagination_columns(
        self, num: str = "_num", remaining: str = "_remaining"
    ) -> ComposerConfigBuilder:
        self._values["num_column"] = num
        self._values["remaining_column"] = remaining
        self._values["pagination_columns"] = True
        return self

    def without_pagination_columns(self) -> ComposerConfigBuilder:
        self._values["pagination_columns"] = False
        return self

    def build(self) -> ComposerConfig:
        """Validate and return the config.

        Raises:
            BuildError: If a value is rejected.
        """
        try:
            return ComposerConfig.model_validate(self._values)
        except ValueError as exc:
            raise BuildError(f"Invalid composer configuration: {exc}") from exc
