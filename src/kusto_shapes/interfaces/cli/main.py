import argparse
import json
import logging
from pathlib import Path
from typing import Any, Optional

import colorlog

from kusto_shapes.config import DEFAULT_CONFIG, ParserConfig, load_config
from kusto_shapes.core.errors import ResponseParserError
from kusto_shapes.core.models import results_to_dicts

try:
    # Prefer package-defined version
    from kusto_shapes import __version__ as _PACKAGE_VERSION
except ImportError:  # pragma: no cover
    _PACKAGE_VERSION = None  # type: ignore[assignment]
    try:
        from importlib.metadata import version as _pkg_version, PackageNotFoundError

        _PACKAGE_VERSION = _pkg_version("kusto-shapes")  # type: ignore[assignment]
    except PackageNotFoundError:
        _PACKAGE_VERSION = "unknown"  # type: ignore[assignment]


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = (
        "%(asctime)s:%(levelname)s:%(name)s in %(filename)s:%(funcName)s:%(lineno)d: %(message)s"
    )
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _resolve_config(args: argparse.Namespace) -> Optional[ParserConfig]:
    config_path = getattr(args, "config", None)
    if not config_path:
        return DEFAULT_CONFIG
    try:
        return load_config(Path(config_path))
    except (FileNotFoundError, ValueError) as e:
        logging.error("Invalid parser config %s: %s", config_path, e)
        return None


def _read_json(path_arg: Optional[str]) -> Any:
    """Return the parsed JSON document, or raise OSError/ValueError."""
    if not path_arg:
        raise FileNotFoundError("--input is required")
    path = Path(path_arg)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(payload: Any, output_arg: Optional[str]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output_arg:
        out_path = Path(output_arg)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        logging.info("Output saved: %s", out_path)
    else:
        print(text)


def _load_input(args: argparse.Namespace) -> Any:
    try:
        return _read_json(getattr(args, "input", None))
    except (OSError, ValueError) as e:
        logging.error("Cannot read input: %s", e)
        return None


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse query result blocks into series buckets and tables.

    Returns:
        0 on success
        1 if the input could not be read
        2 if the input is malformed or a time series block has no time column
    """
    from kusto_shapes.parsing.parser import ResponseParser

    config = _resolve_config(args)
    if config is None:
        return 2
    raw = _load_input(args)
    if raw is None:
        return 1

    try:
        results = ResponseParser(raw, config=config).parse_query_result()
    except ResponseParserError as e:
        logging.error("Failed to parse query results: %s", e)
        return 2

    logging.info("Parsed %d results", len(results))
    _write_json(results_to_dicts(results), getattr(args, "output", None))
    return 0


def cmd_variables(args: argparse.Namespace) -> int:
    """Flatten parsed query results into variable candidates.

    Exit codes match cmd_parse.
    """
    from kusto_shapes.parsing.parser import ResponseParser

    config = _resolve_config(args)
    if config is None:
        return 2
    raw = _load_input(args)
    if raw is None:
        return 1

    try:
        variables = ResponseParser(raw, config=config).parse_to_variables()
    except ResponseParserError as e:
        logging.error("Failed to extract variables: %s", e)
        return 2

    logging.info("Extracted %d variables", len(variables))
    _write_json(results_to_dicts(variables), getattr(args, "output", None))
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Synthesize a schema document from a metadata description.

    Returns:
        0 on success
        1 if the input could not be read
        2 if the metadata is malformed or references an unknown property
    """
    from kusto_shapes.schema.synthesizer import parse_schema_result

    raw = _load_input(args)
    if raw is None:
        return 1

    try:
        document = parse_schema_result(raw)
    except ResponseParserError as e:
        logging.error("Failed to synthesize schema: %s", e)
        return 2

    db_count = len(document.databases)
    logging.info("Synthesized schema with %d database(s)", db_count)
    _write_json(document.to_dict(), getattr(args, "output", None))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="kusto-shapes",
        description="Convert Kusto query results to time series, tables, variables and schema",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Only show warnings and errors",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Only show errors",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a parser YAML config overriding column type vocabularies",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_PACKAGE_VERSION}",
    )
    sub = p.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse query result blocks into series and tables")
    p_parse.add_argument("--input", required=True, help="Path to the query results JSON file")
    p_parse.add_argument(
        "--output",
        default=None,
        help="Write parsed results to this JSON file (defaults to stdout)",
    )
    p_parse.set_defaults(func=cmd_parse)

    p_vars = sub.add_parser("variables", help="Flatten query results into variable values")
    p_vars.add_argument("--input", required=True, help="Path to the query results JSON file")
    p_vars.add_argument(
        "--output",
        default=None,
        help="Write variables to this JSON file (defaults to stdout)",
    )
    p_vars.set_defaults(func=cmd_variables)

    p_schema = sub.add_parser("schema", help="Synthesize a schema document from metadata")
    p_schema.add_argument("--input", required=True, help="Path to the metadata JSON file")
    p_schema.add_argument(
        "--output",
        default=None,
        help="Write the schema document to this JSON file (defaults to stdout)",
    )
    p_schema.set_defaults(func=cmd_schema)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
