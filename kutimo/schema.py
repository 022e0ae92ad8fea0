from typing import Optional, Sequence

from .errors import (
    InsufficientOperandsError,
    TooManyOperandsError,
    WrongBaseTypeError,
    WrongCardinalityError,
)
from .values import BaseType, Cardinality, Operand

ACCEPTED_BASE_TYPES = (BaseType.STRING, BaseType.IDENTIFIER)


def _as_cardinality(v) -> Optional[Cardinality]:
    try:
        return Cardinality(v)
    except (ValueError, TypeError):
        return None


def _as_base_type(v) -> Optional[BaseType]:
    try:
        return BaseType(v)
    except (ValueError, TypeError):
        return None


def validate_operands(operands: Sequence[Optional[Operand]]) -> Operand:
    """
    Check the operator's operands and return the single operand to score.

    Checks run in order and stop at the first failure: operand count,
    then cardinality, then base type. A null operand becomes an empty
    string before the type checks.
    """
    count = len(operands)
    if count == 0:
        raise InsufficientOperandsError()
    if count > 1:
        raise TooManyOperandsError(count)

    operand = operands[0]
    if operand is None:
        operand = Operand.string("")

    if _as_cardinality(operand.cardinality) is not Cardinality.SINGLE:
        raise WrongCardinalityError(operand.cardinality)
    if _as_base_type(operand.base_type) not in ACCEPTED_BASE_TYPES:
        raise WrongBaseTypeError(operand.base_type)

    return operand
