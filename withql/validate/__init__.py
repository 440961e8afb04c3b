"""withQL request validation."""
from withql.validate.validator import QueryValidator, ValidationResult

__all__ = ["QueryValidator", "ValidationResult"]
