"""
Command line tool for inspecting GPP strings.

Usage:
    iabgpp parse "DBACNY~CPXxRfAPXxRfAAfKABENB-CgAAAAAAAAAAYgAAAAAAAA~1YNN"
    iabgpp parse "DBABTA~1YNN" --section-id 6
    iabgpp list "DBACNY~CPXxRfAPXxRfAAfKABENB-CgAAAAAAAAAAYgAAAAAAAA~1YNN"
"""

import argparse
import json
import sys
from dataclasses import replace

from .config import DecoderConfig, load_config
from .errors import GppError
from .gpp_string import GppString
from .logging import LogContext, cli_logger, configure_logging
from .models.section_id import section_name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iabgpp",
        description="Decode IAB Global Privacy Platform strings",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument(
        "--compact", action="store_true", help="Print JSON on a single line"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse", help="Parse a GPP string and print it as JSON"
    )
    parse_cmd.add_argument("gpp_string", help="GPP string to parse")
    parse_cmd.add_argument(
        "-s", "--section-id", type=int, help="Only decode this section id"
    )

    list_cmd = subparsers.add_parser("list", help="List the sections of a GPP string")
    list_cmd.add_argument("gpp_string", help="GPP string to parse")

    return parser


def _dump(data: dict, config: DecoderConfig) -> str:
    indent = config.json_indent or None
    return json.dumps(data, indent=indent)


def run_parse(args: argparse.Namespace, config: DecoderConfig) -> int:
    gpp = GppString(args.gpp_string, config)

    if args.section_id is not None:
        section = gpp.decode_section(args.section_id)
        print(_dump(section.to_dict(), config))
        return 0

    data = gpp.to_dict()
    print(_dump(data, config))
    return 1 if any("error" in section for section in data["sections"]) else 0


def run_list(args: argparse.Namespace, config: DecoderConfig) -> int:
    gpp = GppString(args.gpp_string, config)
    for section_id in gpp.section_ids:
        print(f"{int(section_id)}\t{section_name(section_id)}")
    return 0


COMMANDS = {
    "parse": run_parse,
    "list": run_list,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config = replace(config, log_level=args.log_level.upper())
    if args.compact:
        config = replace(config, json_indent=0)
    configure_logging(level=config.log_level, format=config.log_format)

    logger = cli_logger()
    with LogContext(command=args.command):
        try:
            return COMMANDS[args.command](args, config)
        except GppError as e:
            logger.debug("Command failed", error=type(e).__name__)
            print(f"Error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
