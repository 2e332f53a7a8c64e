"""CLI entrypoint for converting legacy schema files into mapping metadata."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from pydantic import ValidationError

from schemabridge.config.models import (
    ConverterConfig,
    ExportConfig,
    LoaderConfig,
    SchemaBridgeConfig,
)
from schemabridge.export.mapping_export import dump_mappings, write_mappings
from schemabridge.ingestion.schema_loader import load_from_config
from schemabridge.mapping.converter import SchemaConverter
from schemabridge.mapping.types import TypeRegistry
from schemabridge.services.errors import ProblemError, log_problem, problem

LOG = logging.getLogger("schemabridge.cli")

CommandHandler = Callable[[argparse.Namespace], int]


# ---------------------------------------------------------------------------
# Argument parsing / logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure logging based on -v/--verbose count.

    0 -> WARNING, 1 -> INFO, 2+ -> DEBUG.
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _parse_alias(value: str) -> tuple[str, str]:
    legacy, sep, current = value.partition("=")
    if not sep or not legacy.strip() or not current.strip():
        message = f"Expected LEGACY=TARGET, got '{value}'"
        raise argparse.ArgumentTypeError(message)
    return legacy.strip(), current.strip()


def _add_convert_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p_convert = subparsers.add_parser(
        "convert",
        help="Convert legacy schema files into mapping metadata",
    )
    p_convert.add_argument(
        "sources",
        nargs="*",
        type=Path,
        help="Schema files or directories of *.yml files",
    )
    p_convert.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (command-line values take precedence)",
    )
    p_convert.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    p_convert.add_argument(
        "--format",
        choices=("yaml", "json"),
        default=None,
        help="Output format (default: yaml)",
    )
    p_convert.add_argument(
        "--alias",
        action="append",
        type=_parse_alias,
        default=[],
        metavar="LEGACY=TARGET",
        help="Additional legacy type alias (repeatable)",
    )
    p_convert.add_argument(
        "--keep-going",
        action="store_true",
        help="Convert remaining classes when one fails (exit code stays 1)",
    )
    p_convert.set_defaults(func=_cmd_convert)


def _add_types_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    p_types = subparsers.add_parser("types", help="List target types and legacy aliases")
    p_types.add_argument("--json", dest="output_json", action="store_true", help="Emit JSON")
    p_types.set_defaults(func=_cmd_types)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemabridge",
        description="Convert legacy declarative schema files into ORM mapping metadata",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_convert_subparser(subparsers)
    _add_types_subparser(subparsers)
    return parser


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def _build_config_from_args(args: argparse.Namespace) -> SchemaBridgeConfig:
    if args.config is not None:
        cfg = SchemaBridgeConfig.from_yaml(args.config)
        loader = LoaderConfig(sources=args.sources, patterns=cfg.loader.patterns) if args.sources else cfg.loader
    else:
        cfg = None
        loader = LoaderConfig(sources=args.sources)

    aliases = dict(cfg.converter.legacy_type_aliases) if cfg is not None else {}
    aliases.update(dict(args.alias))
    base_converter = cfg.converter if cfg is not None else ConverterConfig()
    converter = base_converter.model_copy(
        update={"legacy_type_aliases": ConverterConfig(legacy_type_aliases=aliases).legacy_type_aliases}
    )

    base_export = cfg.export if cfg is not None else ExportConfig()
    export = ExportConfig(
        output=args.output if args.output is not None else base_export.output,
        format=args.format or base_export.format,
    )
    return SchemaBridgeConfig(loader=loader, converter=converter, export=export)


def _cmd_convert(args: argparse.Namespace) -> int:
    cfg = _build_config_from_args(args)
    LOG.info(
        "cli.convert sources=%s output=%s format=%s keep_going=%s",
        [str(src) for src in cfg.loader.sources],
        cfg.export.output or "-",
        cfg.export.format,
        args.keep_going,
    )

    document = load_from_config(cfg.loader)
    converter = SchemaConverter(config=cfg.converter)
    report = converter.convert_document(document, fail_fast=not args.keep_going)

    if cfg.export.output is not None:
        write_mappings(report.metadata, cfg.export.output, cfg.export.format)
    else:
        sys.stdout.write(dump_mappings(report.metadata, cfg.export.format))

    if not report.ok:
        LOG.error("Failed to convert: %s", ", ".join(sorted(report.failures)))
        return 1
    return 0


def _cmd_types(args: argparse.Namespace) -> int:
    registry = TypeRegistry()
    aliases = ConverterConfig().legacy_type_aliases
    names = list(registry.names())
    if args.output_json:
        sys.stdout.write(json.dumps({"types": names, "aliases": aliases}, indent=2))
        sys.stdout.write("\n")
    else:
        for name in names:
            sys.stdout.write(f"{name}\n")
        for legacy, current in sorted(aliases.items()):
            sys.stdout.write(f"{legacy} -> {current}\n")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """
    CLI entrypoint for schemabridge.

    Parameters
    ----------
    argv:
        Optional argument list (defaults to sys.argv).

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _make_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    _setup_logging(args.verbose)

    try:
        func: CommandHandler = args.func
        return int(func(args))
    except ProblemError as exc:
        log_problem(LOG, exc.problem_detail)
        return 1
    except ValidationError as exc:
        pd = problem(
            code="cli.invalid_config",
            title="Invalid configuration",
            detail=str(exc),
            extras={"command": args.command},
        )
        log_problem(LOG, pd)
        return 1
    except Exception as exc:  # noqa: BLE001
        pd = problem(
            code="cli.failure",
            title="CLI command failed",
            detail=str(exc),
            extras={"command": args.command, "error": type(exc).__name__},
        )
        log_problem(LOG, pd)
        return 1


if __name__ == "__main__":
    sys.exit(main())
