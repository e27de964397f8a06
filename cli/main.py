"""Main CLI entry point for mailheaders."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mailheaders.config.config_loader import ConfigError, ConfigLoader
from mailheaders.models.behavior import Behavior
from mailheaders.models.outcome import ParseOutcome
from mailheaders.services.email_parser.header_extractor import HeaderExtractor
from mailheaders.services.grammar import HeaderParseError
from mailheaders.services.header_parser import (
    decode_encoded_words,
    parse_address,
    parse_address_list,
    parse_content_disposition,
    parse_content_transfer_encoding,
    parse_content_type,
    parse_date_time,
    parse_mailbox_list,
    parse_message_id,
    parse_message_id_list,
    parse_unstructured,
)
from mailheaders.services.reporting.formatter import OutcomeFormatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_USAGE_ERROR = 2

FIELD_PARSERS = {
    "mailbox-list": parse_mailbox_list,
    "address-list": parse_address_list,
    "address": parse_address,
    "message-id": parse_message_id,
    "message-ids": parse_message_id_list,
    "date": parse_date_time,
    "unstructured": parse_unstructured,
    "content-type": parse_content_type,
    "content-disposition": parse_content_disposition,
    "content-transfer-encoding": parse_content_transfer_encoding,
}


def _behavior(args, default: Behavior) -> Behavior:
    if args.strict:
        return Behavior.STRICT
    if args.obsolete:
        return Behavior.OBSOLETE
    return default


def cmd_parse(args) -> int:
    """Parse a single field body and print the outcome."""
    config = ConfigLoader(args.config).load_app_config()
    formatter = OutcomeFormatter(config.output_indent)
    value = args.value.encode("utf-8")

    if args.field == "encoded-words":
        outcome = ParseOutcome(decode_encoded_words(value, config.parser))
    else:
        behavior = _behavior(args, config.default_behavior)
        outcome = FIELD_PARSERS[args.field](value, behavior, config.parser)

    print(formatter.format_outcome(outcome))
    return EXIT_OK


def cmd_headers(args) -> int:
    """Parse every header of a message file and print the outcomes."""
    config = ConfigLoader(args.config).load_app_config()
    formatter = OutcomeFormatter(config.output_indent)
    behavior = Behavior.STRICT if args.fallback else _behavior(args, config.default_behavior)
    extractor = HeaderExtractor(behavior, config.parser, fallback=args.fallback)

    headers = extractor.extract_from_file(args.file)
    print(formatter.format_headers(headers))

    for name, error in extractor.failures:
        print(f"{name}: {error}", file=sys.stderr)
    return EXIT_PARSE_ERROR if extractor.failures else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="mailheaders - RFC 5322 header parsing")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    mode = argparse.ArgumentParser(add_help=False)
    group = mode.add_mutually_exclusive_group()
    group.add_argument("--strict", action="store_true", help="Accept only RFC 5322 section 3 syntax")
    group.add_argument("--obsolete", action="store_true", help="Also accept obsolete syntax")
    mode.add_argument("--config", type=Path, help="Custom config file path")

    parse_parser = subparsers.add_parser("parse", parents=[mode], help="Parse one field body")
    parse_parser.add_argument("field", choices=sorted(FIELD_PARSERS) + ["encoded-words"], help="Grammar to use")
    parse_parser.add_argument("value", help="Field body")

    headers_parser = subparsers.add_parser("headers", parents=[mode], help="Parse all headers of a message file")
    headers_parser.add_argument("file", type=Path, help="Message file")
    headers_parser.add_argument(
        "--fallback", action="store_true", help="Parse strictly, retrying failures with the obsolete grammar"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE_ERROR

    try:
        if args.command == "parse":
            return cmd_parse(args)
        return cmd_headers(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR
    except HeaderParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR


if __name__ == "__main__":
    sys.exit(main())
