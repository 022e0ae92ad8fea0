"""Custom operator lookup by the class name used in QTI customOperator elements."""

from typing import Callable, Dict

from .config import EndpointConfig
from .errors import OPERATOR_CLASS
from .korekton import KorektonOperator

OPERATORS: Dict[str, Callable[..., KorektonOperator]] = {
    OPERATOR_CLASS: KorektonOperator,
}


class UnknownOperatorError(KeyError):
    """No operator is registered under the requested class name."""
    pass


def resolve_operator(class_name: str, config: EndpointConfig, session=None) -> KorektonOperator:
    """Instantiate the operator registered for ``class_name``."""
    try:
        factory = OPERATORS[class_name]
    except KeyError:
        known = ", ".join(sorted(OPERATORS))
        raise UnknownOperatorError(f"Unknown custom operator '{class_name}'. Known: {known}") from None
    return factory(config, session=session)
