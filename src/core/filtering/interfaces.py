from typing import Any, Protocol


class ExpressionBuilder(Protocol):
    """Builds SQL predicate fragments as text."""

    def eq(self, x: str, y: str) -> str: ...

    def like(self, x: str, y: str) -> str: ...

    def literal(self, value: Any) -> str: ...

    def orx(self, *parts: str) -> str: ...


class QueryBuilder(Protocol):
    """Minimal mutable query surface the filter/sort translator writes to."""

    def and_where(self, predicate: str) -> Any: ...

    def set_parameter(self, name: str, value: Any) -> Any: ...

    def add_order_by(self, column: str, direction: str) -> Any: ...

    def expr(self) -> ExpressionBuilder: ...
