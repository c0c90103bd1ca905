from __future__ import annotations

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

_QUERY_ROOTS = (exp.Select, exp.With, exp.Union, exp.Intersect, exp.Except)


def sql_tags(query: str) -> dict:
    """Summarize an example SQL pattern for display.

    Returns ``{}`` when the text is empty or does not parse.
    """
    if not (query or "").strip():
        return {}
    try:
        ast = sqlglot.parse_one(query)
    except SqlglotError:
        return {}
    if ast is None:
        return {}

    tables: list[str] = []
    for t in ast.find_all(exp.Table):
        if t.name and t.name not in tables:
            tables.append(t.name)

    aggregates: list[str] = []
    for fn in ast.find_all(exp.AggFunc):
        name = fn.key.upper()
        if name not in aggregates:
            aggregates.append(name)

    group = ast.args.get("group")
    return {
        "tables": tables,
        "aggregates": aggregates,
        "group_by": [g.sql() for g in group.expressions] if group else [],
        "read_only": isinstance(ast, _QUERY_ROOTS),
    }
