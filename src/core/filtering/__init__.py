"""Allow-listed filter and sort translation onto query builders."""

from .expressions import StringExpressionBuilder
from .interfaces import ExpressionBuilder, QueryBuilder
from .operators import FilterOperator, SortDirection
from .sqlalchemy_builder import SelectQueryBuilder
from .translator import FilterSortTranslator

__all__ = [
    "ExpressionBuilder",
    "FilterOperator",
    "FilterSortTranslator",
    "QueryBuilder",
    "SelectQueryBuilder",
    "SortDirection",
    "StringExpressionBuilder",
]
