"""CLI entrypoint.

Commands:
- `clean-text [KEY ...]` : apply catalog transformers in order, stdin -> stdout
- `clean-text -i in.txt -o out.txt norm` : same, file to file (atomic output)
- `clean-text --list` : show the catalog
- `clean-text-batch --config batch.yaml` : run the jobs of a batch file

Exit codes: 0 success, 1 processing failure (invalid UTF-8, I/O),
2 configuration or usage error.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Mapping, Optional

from .config.loader import LOG_LEVELS, Settings, load_chains, load_yaml
from .errors import ConfigurationError
from .logging_ import setup_logging
from .pipeline.build import build_batch, process_file, process_path, process_stream, process_to_path
from .stages.base import Stage
from .stages.registry import describe_catalog, make_catalog, make_stages

log = logging.getLogger("clean_text.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def _error(prog: str, message: object) -> None:
    print(f"{prog}: error: {message}", file=sys.stderr)


def _catalog_text(catalog: Mapping[str, Stage]) -> str:
    return "\n".join(f"  {key:<8} {doc}" for key, doc in describe_catalog(catalog))


def build_parser(catalog: Mapping[str, Stage]) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="clean-text",
        description="Process UTF-8 text from stdin to stdout.",
        epilog="transformers:\n" + _catalog_text(catalog),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("transformers", nargs="*", metavar="KEY", help="catalog keys, applied in order")
    p.add_argument("-c", "--config", help="YAML settings file (run:, chains:)")
    p.add_argument("-i", "--input", help="read this file instead of stdin")
    p.add_argument("-o", "--output", help="write this file instead of stdout (replaced only on success)")
    p.add_argument("-l", "--list", action="store_true", help="list transformers and exit")
    p.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="override run.log_level")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    # --config can add chains to the catalog, so read it before the full parse
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("-c", "--config")
    known, _ = pre.parse_known_args(argv)

    try:
        cfg = load_yaml(known.config) if known.config else {}
        catalog = make_catalog(load_chains(cfg))
    except ConfigurationError as e:
        _error("clean-text", e)
        return EXIT_CONFIG

    args = build_parser(catalog).parse_args(argv)

    if args.list:
        print(_catalog_text(catalog))
        return EXIT_OK

    try:
        settings = Settings.from_config(cfg)
        stages = make_stages(args.transformers, catalog)
    except ConfigurationError as e:
        _error("clean-text", e)
        return EXIT_CONFIG

    try:
        setup_logging(args.log_level or settings.log_level, settings.log_file)
    except OSError as e:
        _error("clean-text", f"cannot open log file {settings.log_file}: {e}")
        return EXIT_CONFIG
    log.debug(f"Transformers: {' '.join(args.transformers) or '(identity)'}")

    if args.input and args.output:
        status = process_file(args.input, args.output, stages, settings)
    elif args.input:
        status = process_path(args.input, sys.stdout.buffer, stages, settings)
    elif args.output:
        status = process_to_path(sys.stdin.buffer, args.output, stages, settings)
    else:
        status = process_stream(sys.stdin.buffer, sys.stdout.buffer, stages, settings)

    if not status.ok:
        _error("clean-text", status.error)
        return EXIT_FAILURE
    return EXIT_OK


def batch_main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="clean-text-batch", description="Run the jobs of a batch YAML file.")
    p.add_argument("--config", required=True)
    p.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="override run.log_level")
    p.add_argument("--no-progress", action="store_true", help="disable the progress bar")
    args = p.parse_args(argv)

    try:
        cfg = load_yaml(args.config)
        settings = Settings.from_config(cfg, default_log_level="INFO")
    except ConfigurationError as e:
        _error("clean-text-batch", e)
        return EXIT_CONFIG
    if args.no_progress:
        settings.progress = False

    try:
        setup_logging(args.log_level or settings.log_level, settings.log_file)
    except OSError as e:
        _error("clean-text-batch", f"cannot open log file {settings.log_file}: {e}")
        return EXIT_CONFIG
    try:
        failed = build_batch(cfg, settings)
    except ConfigurationError as e:
        _error("clean-text-batch", e)
        return EXIT_CONFIG
    return EXIT_FAILURE if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
