"""Dialect-aware SQL expressions shared by the repositories."""

from sqlalchemy import String, func, literal_column
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement


class utc_day(FunctionElement):
    """Calendar day (``YYYY-MM-DD``, UTC) of a timestamp column, as text.

    Format arguments are rendered as literals rather than bound parameters
    so that the same expression can appear in both SELECT and GROUP BY.
    """

    type = String()
    name = "utc_day"
    inherit_cache = True


@compiles(utc_day)
def _compile_utc_day(element, compiler, **kw):
    (column,) = element.clauses
    expr = func.to_char(
        func.timezone(literal_column("'UTC'"), column),
        literal_column("'YYYY-MM-DD'"),
    )
    return compiler.process(expr, **kw)


@compiles(utc_day, "sqlite")
def _compile_utc_day_sqlite(element, compiler, **kw):
    # SQLite stores timestamps as naive UTC text
    (column,) = element.clauses
    expr = func.strftime(literal_column("'%Y-%m-%d'"), column)
    return compiler.process(expr, **kw)
