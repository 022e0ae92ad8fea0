"""Kutimo: QTI custom operators for remote scoring."""

__version__ = "1.0.0"

from .config import EndpointConfig
from .errors import (
    ConfigError,
    InsufficientOperandsError,
    OperatorProcessingError,
    ScoringServiceError,
    TooManyOperandsError,
    WrongBaseTypeError,
    WrongCardinalityError,
)
from .korekton import KorektonOperator, evaluate
from .values import BaseType, Cardinality, Operand, ScoreResult
