"""Request validation.

``QueryValidator`` checks a :class:`~withql.schema.query.Query` and its
:class:`~withql.schema.query.CompositionOptions` for structural completeness
before any SQL is assembled.

Checks run in a fixed order and stop at the first failure:

1. source presence (exactly one of table / source query)
2. alias presence
3. at least one field, every field name usable as an identifier
4. ``page >= 0``
5. ``page_size > 0``
6. every subquery: required attributes, join kind, then identifiers

An identifier is usable when sanitizing leaves at least one character.

:meth:`QueryValidator.check` returns a :class:`ValidationResult`;
:meth:`QueryValidator.validate` raises :class:`~withql.errors.BuildError`
from a failed result.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from withql.compile.identifiers import has_identifier_chars
from withql.errors import BuildError
from withql.schema.query import JOIN_KINDS, CompositionOptions, Query


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :meth:`QueryValidator.check`.

    Attributes:
        valid: Discriminator; True on success.
        message: Description of the first violated rule, ``None`` on success.
    """

    valid: bool
    message: str | None = None

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def failure(cls, message: str) -> ValidationResult:
        return cls(valid=False, message=message)

    def raise_for_failure(self) -> None:
        """Raise :class:`BuildError` if this result is a failure."""
        if not self.valid:
            raise BuildError(self.message or "Invalid query", stage="validate")


def _is_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


class QueryValidator:
    """Validates a composition request against its presence rules."""

    def check(
        self, query: Query, options: CompositionOptions | None = None
    ) -> ValidationResult:
        """Run every check in order and return the first failure, if any."""
        options = options or CompositionOptions()
        for rule in self._rules():
            message = rule(query, options)
            if message is not None:
                return ValidationResult.failure(message)
        return ValidationResult.ok()

    def validate(
        self, query: Query, options: CompositionOptions | None = None
    ) -> None:
        """Validate the request and raise on the first violation.

        Raises:
            BuildError: Describing the first violated rule.
        """
        self.check(query, options).raise_for_failure()

    # ------------------------------------------------------------------
    # Rules, in check order
    # ------------------------------------------------------------------

    def _rules(self) -> Iterator[Callable[[Query, CompositionOptions], str | None]]:
        yield self._check_source
        yield self._check_alias
        yield self._check_fields
        yield self._check_page
        yield self._check_page_size
        yield self._check_subqueries

    @staticmethod
    def _check_source(query: Query, options: CompositionOptions) -> str | None:
        has_table = _is_text(query.source_table)
        has_query = _is_text(query.source_query)
        if has_table and has_query:
            return "Only one of source_table or source_query may be provided"
        if not has_table and not has_query:
            if query.source_table is not None:
                return "sourceTable is required and must be a string"
            return "sourceQuery is required and must be a string"
        if has_table and not has_identifier_chars(query.source_table):
            return "sourceTable has no valid identifier characters"
        return None

    @staticmethod
    def _check_alias(query: Query, options: CompositionOptions) -> str | None:
        if not _is_text(query.alias):
            return "alias is required and must be a string"
        if not has_identifier_chars(query.alias):
            return "alias has no valid identifier characters"
        return None

    @staticmethod
    def _check_fields(query: Query, options: CompositionOptions) -> str | None:
        if not query.fields:
            return "fields must contain at least one field definition"
        for name in query.fields:
            if not has_identifier_chars(name):
                return f"Field name '{name}' has no valid identifier characters"
        return None

    @staticmethod
    def _check_page(query: Query, options: CompositionOptions) -> str | None:
        if options.page is not None and options.page < 0:
            return "page must be a non-negative number"
        return None

    @staticmethod
    def _check_page_size(query: Query, options: CompositionOptions) -> str | None:
        if options.page_size is not None and options.page_size <= 0:
            return "page_size must be a positive number"
        return None

    @staticmethod
    def _check_subqueries(query: Query, options: CompositionOptions) -> str | None:
        for sub in query.subqueries:
            required = (sub.name, sub.alias, sub.query, sub.join_type, sub.join_on)
            if not all(_is_text(value) for value in required):
                return "Invalid subquery configuration: missing required fields"
            if sub.join_type not in JOIN_KINDS:
                return f"Invalid join type: {sub.join_type}"
            if not (has_identifier_chars(sub.name) and has_identifier_chars(sub.alias)):
                return "Invalid subquery configuration: name and alias need identifier characters"
            for name in sub.fields:
                if not has_identifier_chars(name):
                    return f"Field name '{name}' has no valid identifier characters"
        return None
