"""
Error taxonomy for the Korekton operator.

Every failure derives from OperatorProcessingError so the assessment runtime
can catch a single type and inspect ``code`` to tell them apart.
"""

from typing import Optional

OPERATOR_CLASS = "oat.kutimo.model.Korekton"


class OperatorProcessingError(Exception):
    """Raised when the operator cannot produce a score."""

    code = "OPERATOR_PROCESSING_ERROR"


class InsufficientOperandsError(OperatorProcessingError):
    code = "NOT_ENOUGH_OPERANDS"

    def __init__(self):
        super().__init__(
            f"The '{OPERATOR_CLASS}' custom operator takes one sub-expression as a parameter, none given."
        )


class TooManyOperandsError(OperatorProcessingError):
    code = "TOO_MUCH_OPERANDS"

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"The '{OPERATOR_CLASS}' custom operator takes only one sub-expression as a parameter, {count} given."
        )


class WrongCardinalityError(OperatorProcessingError):
    code = "WRONG_CARDINALITY"

    def __init__(self, cardinality):
        self.cardinality = cardinality
        super().__init__(
            f"The '{OPERATOR_CLASS}' custom operator only accepts a first operand with single cardinality, "
            f"'{getattr(cardinality, 'value', cardinality)}' given."
        )


class WrongBaseTypeError(OperatorProcessingError):
    code = "WRONG_BASETYPE"

    def __init__(self, base_type):
        self.base_type = base_type
        super().__init__(
            f"The '{OPERATOR_CLASS}' custom operator only accepts a first operand with string or identifier baseType, "
            f"'{getattr(base_type, 'value', base_type)}' given."
        )


class ScoringServiceError(OperatorProcessingError):
    """The remote call failed or its reply could not be turned into a score.

    The underlying exception, when there is one, is kept on ``cause``.
    """

    code = "SCORING_SERVICE_FAILURE"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ConfigError(ValueError):
    """Invalid or incomplete endpoint configuration."""
    pass
