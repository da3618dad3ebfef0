"""Main entry point for the xtrax command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__, data_processing, pcre_utils, template_engine
from .data_processing import SchemaValidator, load_json_file
from .exceptions import XtraxError
from .logging_utils import setup_logging
from .pcre_utils import get_pcre_pattern_from_data, substitute_editions
from .template_engine import extract_variable_references, process_variables_with_result

logger = logging.getLogger(__name__)

SAMPLE_TEMPLATE = "Hello ${name}, welcome to ${place}!"


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Enable debug level logging.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS,
        help="Write detailed debug logs to this file (with --debug).",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments for the xtrax CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    parser = argparse.ArgumentParser(description="xtrax pattern and data utilities")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"xtrax {__version__}",
        help="Show the version number and exit.",
    )
    _add_common_flags(parser)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="List the available helpers and run a quick self-check.")
    _add_common_flags(check_parser)

    variables_parser = subparsers.add_parser("variables", help="Resolve a variables file and print the result as JSON.")
    variables_parser.add_argument("path", type=Path, help="Path to the variables JSON file.")
    variables_parser.add_argument("--max-depth", type=int, default=100, help="Maximum substitution passes per variable (default: 100).")
    variables_parser.add_argument("--stats", action="store_true", help="Log processing statistics.")
    _add_common_flags(variables_parser)

    pattern_parser = subparsers.add_parser("pattern", help="Print the expanded pattern at a dotted path in a regex data file.")
    pattern_parser.add_argument("data", type=Path, help="Path to the regex data JSON file.")
    pattern_parser.add_argument("template_path", help="Dotted path of the template, e.g. 'law.section'.")
    pattern_parser.add_argument(
        "-s",
        "--sub",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Extra substitution applied after the built-in ones. May be repeated.",
    )
    pattern_parser.add_argument("--edition", help="Expand $edition into this edition and its variations.")
    pattern_parser.add_argument("--variations", type=Path, help="JSON file mapping variant spellings to canonical editions.")
    _add_common_flags(pattern_parser)

    validate_parser = subparsers.add_parser("validate", help="Validate a data file against a JSON Schema file.")
    validate_parser.add_argument("data", type=Path, help="Path to the data file.")
    validate_parser.add_argument("schema", type=Path, help="Path to the JSON Schema file.")
    _add_common_flags(validate_parser)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        sys.exit(1)
    return args


def _parse_substitutions(pairs: list[str]) -> dict[str, str]:
    """Turn ``NAME=VALUE`` strings into a mapping."""
    substitutions = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            msg = f"Invalid substitution '{pair}'. Expected NAME=VALUE."
            raise ValueError(msg)
        substitutions[name] = value
    return substitutions


def _write_json(data: object) -> None:
    sys.stdout.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def _run_check() -> int:
    """Log the public helpers of each area and try a reference extraction."""
    for name, module in (
        ("pcre_utils", pcre_utils),
        ("template_engine", template_engine),
        ("data_processing", data_processing),
    ):
        logger.info("%s: %s", name, ", ".join(module.__all__))

    references = extract_variable_references(SAMPLE_TEMPLATE)
    logger.info("Template variable extraction works: %s", references)
    return 0 if references == ["name", "place"] else 1


def _run_variables(path: Path, max_depth: int, *, stats: bool) -> int:
    tree = load_json_file(path)
    if not isinstance(tree, dict):
        logger.error("Variables file must contain a JSON object: %s", path)
        return 1
    result = process_variables_with_result(tree, max_depth)
    if stats:
        logger.info(
            "Processed %d variable(s) into %d entries (%d optional) in %.2f ms.",
            result.stats.original_variable_count,
            result.stats.processed_variable_count,
            result.stats.optional_variables_added,
            result.stats.processing_time_ms,
        )
    _write_json(result.variables)
    return 0


def _run_pattern(args: argparse.Namespace) -> int:
    regex_data = load_json_file(args.data)
    pattern = get_pcre_pattern_from_data(regex_data, args.template_path, _parse_substitutions(args.sub))
    if args.edition:
        variations = load_json_file(args.variations) if args.variations else {}
        if not isinstance(variations, dict):
            logger.error("Variations file must contain a JSON object: %s", args.variations)
            return 1
        pattern = substitute_editions(pattern, args.edition, variations)[0]
    sys.stdout.write(pattern + "\n")
    return 0


def _run_validate(data_path: Path, schema_path: Path) -> int:
    data = load_json_file(data_path)
    result = SchemaValidator(schema_path).validate(data)
    if result.is_valid:
        logger.info("%s is valid.", data_path)
        return 0
    for issue in result.errors:
        logger.error("%s: %s", issue.instance_path or "(root)", issue.message)
    logger.error("%s failed validation with %d error(s).", data_path, len(result.errors))
    return 1


def _dispatch(args: argparse.Namespace) -> int:
    if args.command == "check":
        return _run_check()
    if args.command == "variables":
        return _run_variables(args.path, args.max_depth, stats=args.stats)
    if args.command == "pattern":
        return _run_pattern(args)
    return _run_validate(args.data, args.schema)


def main(argv: list[str] | None = None) -> None:
    """
    Run the xtrax command-line interface.

    Parses the arguments, configures logging, and runs the selected command.
    Exits with status 1 on failure.
    """
    args = _parse_args(argv)
    setup_logging(
        version=__version__,
        debug=getattr(args, "debug", False),
        log_file=getattr(args, "log_file", None),
    )

    try:
        exit_code = _dispatch(args)
    except (XtraxError, ValueError):
        logger.exception("Command '%s' failed", args.command)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
