"""
QTI value types exchanged between the assessment runtime and the operator.

Only what the Korekton operator needs is modeled: a tagged operand value
coming in, and a single float score going out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Cardinality(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ORDERED = "ordered"
    RECORD = "record"


class BaseType(str, Enum):
    IDENTIFIER = "identifier"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    POINT = "point"
    PAIR = "pair"
    DIRECTED_PAIR = "directedPair"
    DURATION = "duration"
    FILE = "file"
    URI = "uri"
    INT_OR_IDENTIFIER = "intOrIdentifier"


@dataclass(frozen=True)
class Operand:
    """A candidate-response value tagged with its cardinality and base type."""

    value: Any = ""
    cardinality: Cardinality = Cardinality.SINGLE
    base_type: BaseType = BaseType.STRING

    @classmethod
    def string(cls, value: Any) -> "Operand":
        return cls(value, Cardinality.SINGLE, BaseType.STRING)

    @classmethod
    def identifier(cls, value: Any) -> "Operand":
        return cls(value, Cardinality.SINGLE, BaseType.IDENTIFIER)

    def __str__(self) -> str:
        if self.value is None:
            return ""
        return str(self.value)


@dataclass(frozen=True)
class ScoreResult:
    """Score returned to the runtime: single cardinality, float base type."""

    value: float

    @property
    def cardinality(self) -> Cardinality:
        return Cardinality.SINGLE

    @property
    def base_type(self) -> BaseType:
        return BaseType.FLOAT

    def __float__(self) -> float:
        return self.value
