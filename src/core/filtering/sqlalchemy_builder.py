import re
from collections.abc import Callable
from typing import Any

from sqlalchemy import Select, func, select, text
from sqlalchemy.sql.elements import TextClause

from src.core.filtering.expressions import StringExpressionBuilder

# Same rule SQLAlchemy's text() uses to spot ":name" bind parameters.
_BIND_PARAM = re.compile(r"(?<![:\w\$\x5c]):([\w\$]+)(?![:\w\$])")


class TextClauseExpressionBuilder(StringExpressionBuilder):
    """Renders literals as ``:name`` placeholders registered through ``bind``."""

    def __init__(self, bind: Callable[[Any], str]) -> None:
        self._bind = bind

    def literal(self, value: Any) -> str:
        return f":{self._bind(value)}"


class SelectQueryBuilder:
    """
    :class:`~src.core.filtering.interfaces.QueryBuilder` over a SQLAlchemy ``Select``.

    Predicates and ordering are collected as SQL text and applied when
    :attr:`statement` is read, so the column expressions must match the
    aliases used in the wrapped select (``select(aliased(User, name="d"))``).
    Values passed through :meth:`expr` ``.literal()`` are bound as
    ``literal_<n>`` parameters.
    """

    def __init__(self, statement: Select[Any]) -> None:
        self._statement = statement
        self._predicates: list[str] = []
        self._parameters: dict[str, Any] = {}
        self._order_by: list[tuple[str, str]] = []
        self._literal_count = 0
        self._expr = TextClauseExpressionBuilder(self._bind_literal)

    def _bind_literal(self, value: Any) -> str:
        while True:
            self._literal_count += 1
            name = f"literal_{self._literal_count}"
            if name not in self._parameters:
                break
        self._parameters[name] = value
        return name

    def and_where(self, predicate: str) -> "SelectQueryBuilder":
        self._predicates.append(predicate)
        return self

    def set_parameter(self, name: str, value: Any) -> "SelectQueryBuilder":
        self._parameters[name] = value
        return self

    def add_order_by(self, column: str, direction: str) -> "SelectQueryBuilder":
        self._order_by.append((column, direction))
        return self

    def expr(self) -> TextClauseExpressionBuilder:
        return self._expr

    @property
    def predicates(self) -> list[str]:
        return list(self._predicates)

    @property
    def parameters(self) -> dict[str, Any]:
        return dict(self._parameters)

    def _where_clause(self, predicate: str) -> TextClause:
        clause = text(predicate)
        names = set(_BIND_PARAM.findall(predicate))
        bound = {k: v for k, v in self._parameters.items() if k in names}
        return clause.bindparams(**bound) if bound else clause

    def filtered_statement(self) -> Select[Any]:
        statement = self._statement
        for predicate in self._predicates:
            statement = statement.where(self._where_clause(predicate))
        return statement

    @property
    def statement(self) -> Select[Any]:
        statement = self.filtered_statement()
        if self._order_by:
            statement = statement.order_by(
                *(text(f"{column} {direction}") for column, direction in self._order_by)
            )
        return statement

    def count_statement(self) -> Select[Any]:
        subquery = self.filtered_statement().order_by(None).subquery()
        return select(func.count()).select_from(subquery)
