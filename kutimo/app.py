import argparse
import os

from . import __version__
from .config import ENV_VARS, ENDPOINT_KEY, PASSWORD_KEY, TIMEOUT_KEY, USER_KEY, EndpointConfig
from .env import load_env
from .errors import OPERATOR_CLASS, ConfigError, OperatorProcessingError, ScoringServiceError
from .korekton import build_request_body
from .logger import get_logger
from .registry import resolve_operator
from .values import BaseType, Cardinality, Operand

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_config(args: argparse.Namespace) -> EndpointConfig:
    """Environment (and .env) settings, overridden by command-line flags."""
    load_env()
    settings = {key: os.environ.get(var) for key, var in ENV_VARS.items()}
    overrides = {
        ENDPOINT_KEY: getattr(args, "endpoint", None),
        TIMEOUT_KEY: getattr(args, "timeout", None),
        USER_KEY: getattr(args, "user", None),
        PASSWORD_KEY: getattr(args, "password", None),
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return EndpointConfig.from_mapping(settings)
    except ConfigError as e:
        if not settings.get(ENDPOINT_KEY):
            raise SystemExit(f"Configuration error: {e}. Set {ENV_VARS[ENDPOINT_KEY]} or pass --endpoint.")
        raise SystemExit(f"Configuration error: {e}")


def _operand_from_args(args: argparse.Namespace) -> Operand:
    return Operand(args.response, Cardinality(args.cardinality), BaseType(args.base_type))


def cmd_score(args: argparse.Namespace) -> None:
    config = load_config(args)
    operator = resolve_operator(OPERATOR_CLASS, config)
    try:
        result = operator.evaluate([_operand_from_args(args)], args.item)
    except ScoringServiceError as e:
        print(f"[error] {e}")
        raise SystemExit(1)
    except OperatorProcessingError as e:
        print(f"[invalid] {e}")
        raise SystemExit(2)
    finally:
        if args.metrics:
            operator.logger.log_metrics_summary()
    print(f"Item: {args.item}")
    print(f"Score: {result.value}")


def cmd_request(args: argparse.Namespace) -> None:
    print(build_request_body(args.item, args.response).decode("utf-8"))


def cmd_config(args: argparse.Namespace) -> None:
    config = load_config(args)
    for key, value in config.masked().items():
        print(f"{key} = {value}")


def _add_endpoint_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--endpoint", help=f"Korekton base URL (or set {ENV_VARS[ENDPOINT_KEY]})")
    p.add_argument("--timeout", type=int, help=f"HTTP timeout in seconds (or set {ENV_VARS[TIMEOUT_KEY]})")
    p.add_argument("--user", help=f"Basic auth user (or set {ENV_VARS[USER_KEY]})")
    p.add_argument("--password", help=f"Basic auth password (or set {ENV_VARS[PASSWORD_KEY]})")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="kutimo", description="Kutimo remote scoring operators")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS, help="Console log level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command")

    scr = subparsers.add_parser("score", help="Score a candidate response with the Korekton service")
    scr.add_argument("--item", required=True, help="Identifier of the assessment item")
    scr.add_argument("--response", default="", help="Candidate response (default: empty)")
    scr.add_argument("--base-type", default=BaseType.STRING.value, choices=[b.value for b in BaseType], help="Operand base type (default: string)")
    scr.add_argument("--cardinality", default=Cardinality.SINGLE.value, choices=[c.value for c in Cardinality], help="Operand cardinality (default: single)")
    scr.add_argument("--metrics", action="store_true", help="Log a metrics summary after scoring (visible with --log-level INFO)")
    _add_endpoint_args(scr)
    scr.set_defaults(func=cmd_score)

    req = subparsers.add_parser("request", help="Print the scoreItem request body without sending it")
    req.add_argument("--item", required=True, help="Identifier of the assessment item")
    req.add_argument("--response", default="", help="Candidate response (default: empty)")
    req.set_defaults(func=cmd_request)

    cfg = subparsers.add_parser("config", help="Show the effective endpoint configuration")
    _add_endpoint_args(cfg)
    cfg.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        get_logger(level=args.log_level, enable_file=False)
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
