"""withQL schema models: Query, SubqueryComponent, ViewDefinition, ComposerConfig."""
from withql.schema.config import ComposerConfig, ComposerConfigBuilder
from withql.schema.query import (
    JOIN_KINDS,
    CompositionOptions,
    Query,
    SubqueryComponent,
    ViewDefinition,
)

__all__ = [
    "ComposerConfig",
    "ComposerConfigBuilder",
    "JOIN_KINDS",
    "CompositionOptions",
    "Query",
    "SubqueryComponent",
    "ViewDefinition",
]
