"""
WHERE-clause construction for job listings.

Each supported option key has a rule turning its value into one comparison
clause and, when the clause needs one, one bound value. Active clauses are
joined with AND; placeholders are numbered ``:p1, :p2, ...`` in the order
they appear in the fragment, and the parameter list follows that order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

PARAM_MARKER = "{param}"


@dataclass(frozen=True)
class FilterClause:
    template: str
    value: Any = None
    binds_value: bool = True


FilterRule = Callable[[Any], FilterClause | None]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def title_rule(value: Any) -> FilterClause:
    return FilterClause(
        template=f"LOWER(title) LIKE {PARAM_MARKER} ESCAPE '\\'",
        value=f"%{_escape_like(value.lower())}%",
    )


def min_salary_rule(value: Any) -> FilterClause:
    return FilterClause(template=f"salary >= {PARAM_MARKER}", value=value)


def has_equity_rule(value: Any) -> FilterClause | None:
    if value is not True:
        return None
    return FilterClause(template="CAST(equity AS NUMERIC) > 0", binds_value=False)


FILTER_RULES: tuple[tuple[str, FilterRule], ...] = (
    ("title", title_rule),
    ("min_salary", min_salary_rule),
    ("has_equity", has_equity_rule),
)

FILTER_KEYS = frozenset(key for key, _ in FILTER_RULES)


def has_filters(options: Mapping[str, Any]) -> bool:
    return any(options.get(key) is not None for key in FILTER_KEYS)


def build_filter(options: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Return ``(fragment, params)``; an empty fragment means no constraint.

    Keys outside ``FILTER_KEYS`` and keys whose value is ``None`` are ignored.
    Values are not type-checked here.
    """
    clauses: list[str] = []
    params: list[Any] = []

    for key, rule in FILTER_RULES:
        value = options.get(key)
        if value is None:
            continue

        clause = rule(value)
        if clause is None:
            continue

        if clause.binds_value:
            params.append(clause.value)
            clauses.append(clause.template.format(param=f":p{len(params)}"))
        else:
            clauses.append(clause.template)

    return " AND ".join(clauses), params


def bind_parameters(params: list[Any]) -> dict[str, Any]:
    return {f"p{position}": value for position, value in enumerate(params, start=1)}
