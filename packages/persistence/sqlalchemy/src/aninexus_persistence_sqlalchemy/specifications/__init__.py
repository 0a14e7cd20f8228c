"""
Predicate-to-SQLAlchemy compilation.

Public API:
    - ``build_sqla_filter(model, data)``: compile a predicate dict to a
      ``ColumnElement[bool]``
    - ``compile_predicate(model, predicate)``: the same, from a
      ``Predicate``
    - ``build_loader_option(model, path, strategy)``: eager-load option
      for a dotted include path
    - ``DEFAULT_SQLA_REGISTRY``: the default operator registry
    - ``SQLAlchemyOperator`` / ``SQLAlchemyOperatorRegistry``: extension
      points for custom operators
"""

from .compiler import build_sqla_filter, compile_predicate
from .loading import LoaderStrategy, build_loader_option
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    "build_sqla_filter",
    "compile_predicate",
    "build_loader_option",
    "LoaderStrategy",
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
]
