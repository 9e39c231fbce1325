"""
Typed filter predicates for record store queries.

A filter is ``(field, operator, value)``; a query ANDs its filters together.
"""
import operator as _op
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping


class Operator(str, Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="


# Work on plain values and on SQLAlchemy columns alike
OPERATOR_FUNCS: Dict[Operator, Callable[[Any, Any], Any]] = {
    Operator.EQ: _op.eq,
    Operator.NE: _op.ne,
    Operator.LT: _op.lt,
    Operator.LTE: _op.le,
    Operator.GT: _op.gt,
    Operator.GTE: _op.ge,
}


@dataclass(frozen=True)
class Filter:
    field: str
    operator: Operator
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        actual = record.get(self.field)
        if self.operator in (Operator.EQ, Operator.NE):
            return bool(OPERATOR_FUNCS[self.operator](actual, self.value))
        if actual is None or self.value is None:
            return False
        return bool(OPERATOR_FUNCS[self.operator](actual, self.value))

    def __str__(self) -> str:
        return f"{self.field} {self.operator.value} {self.value!r}"


def eq(field: str, value: Any) -> Filter:
    return Filter(field, Operator.EQ, value)


def ne(field: str, value: Any) -> Filter:
    return Filter(field, Operator.NE, value)


def lt(field: str, value: Any) -> Filter:
    return Filter(field, Operator.LT, value)


def lte(field: str, value: Any) -> Filter:
    return Filter(field, Operator.LTE, value)


def gt(field: str, value: Any) -> Filter:
    return Filter(field, Operator.GT, value)


def gte(field: str, value: Any) -> Filter:
    return Filter(field, Operator.GTE, value)
