from typing import Any


class StringExpressionBuilder:
    """SQL text expression builder.

    eq("d.name", "'x'")     -> "d.name = 'x'"
    like("d.name", "'%x%'") -> "d.name LIKE '%x%'"
    orx("a", "b")           -> "(a OR b)"
    """

    def eq(self, x: str, y: str) -> str:
        return f"{x} = {y}"

    def like(self, x: str, y: str) -> str:
        return f"{x} LIKE {y}"

    def literal(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int | float):
            return str(value)
        escaped = str(value).replace("'", "''")
        return f"'{escaped}'"

    def orx(self, *parts: str) -> str:
        parts = tuple(part for part in parts if part)
        if len(parts) == 1:
            return parts[0]
        return "(" + " OR ".join(parts) + ")"
