"""Main CLI entry point for the strict-html command-line tool.

Reads documents from disk, parses them with the strict grammar and prints the
resulting tree, a JSON dump or re-serialised XML. Parse failures and file
failures are reported with different exit codes.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from strict_html_parser import __author__, __version__
from strict_html_parser.api import HtmlParser, LxmlAdapter
from strict_html_parser.shared import (
    ConfigError,
    GrammarSyntaxError,
    ParseError,
    ParserConfig,
    SourceReadError,
    TagMatchingPolicy,
    configure_logging,
    get_logger,
)
from strict_html_parser.tree import format_tree, nodes_to_dict

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_IO_ERROR = 2
EXIT_INTERRUPTED = 130

OUTPUT_FORMATS = ["tree", "json", "xml"]

CREDITS = f"strict-html-parser {__version__}, developed by the {__author__}."

logger = get_logger(__name__, None, "cli")


def build_config(args: argparse.Namespace) -> ParserConfig:
    """Create the parser configuration from a config file and command-line flags."""
    config = ParserConfig()
    if getattr(args, "config", None):
        config = ParserConfig.from_file(args.config)
        # -v and -q take precedence over the file
        if not (getattr(args, "verbose", False) or getattr(args, "quiet", False)):
            configure_logging(config.logging_level)
    overrides: Dict[str, Any] = {}
    if getattr(args, "lenient", False):
        overrides["tag_matching"] = TagMatchingPolicy.LENIENT
    if getattr(args, "max_depth", None) is not None:
        overrides["max_nesting_depth"] = args.max_depth
    return config.override(**overrides) if overrides else config


def format_nodes(nodes: List[Any], output_format: str) -> str:
    """Render parsed nodes in the requested output format."""
    if output_format == "json":
        return json.dumps(nodes_to_dict(nodes), indent=2, ensure_ascii=False)
    if output_format == "xml":
        return format_xml(nodes)
    return format_tree(nodes)


def format_xml(nodes: List[Any]) -> str:
    """Serialise through lxml, warning about content XML cannot represent."""
    adapter = LxmlAdapter()
    result = adapter.convert(nodes)
    if result.dropped_text or result.dropped_attributes:
        print(
            f"Warning: dropped {len(result.dropped_text)} text runs and "
            f"{len(result.dropped_attributes)} attributes that are not XML compatible",
            file=sys.stderr,
        )
    return adapter.serialize_elements(result.elements)


def report_parse_error(error: ParseError) -> None:
    """Print a parse failure to stderr, with source context for syntax errors."""
    if isinstance(error, GrammarSyntaxError):
        print(error.render(), file=sys.stderr)
    else:
        print(f"Error: {error}", file=sys.stderr)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    parser = HtmlParser(build_config(args))
    try:
        nodes = parser.parse_file(args.file, encoding=args.encoding)
    except SourceReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except ParseError as e:
        report_parse_error(e)
        return EXIT_PARSE_ERROR

    output = format_nodes(nodes, args.format)
    if args.output:
        try:
            args.output.write_text(output + "\n", encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_IO_ERROR
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    parser = HtmlParser(build_config(args))
    exit_code = EXIT_OK

    for path in args.files:
        try:
            nodes = parser.parse_file(path, encoding=args.encoding)
        except SourceReadError as e:
            print(f"FAIL {path}: {e}")
            exit_code = max(exit_code, EXIT_IO_ERROR)
            continue
        except ParseError as e:
            print(f"FAIL {path}: {e}")
            exit_code = max(exit_code, EXIT_PARSE_ERROR)
            continue
        print(f"OK   {path} ({len(nodes)} top-level elements)")

    stats = parser.statistics
    print(
        f"Checked {stats['total_parses']} documents, "
        f"{stats['successful_parses']} valid",
        file=sys.stderr,
    )
    return exit_code


def cmd_rule(args: argparse.Namespace) -> int:
    """Handle rule command."""
    parser = HtmlParser(build_config(args))
    try:
        span = parser.parse(args.rule, args.text)
    except ParseError as e:
        report_parse_error(e)
        return EXIT_PARSE_ERROR

    if args.format == "json":
        print(json.dumps(span.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(span.pretty())
    return EXIT_OK


def cmd_credits(args: argparse.Namespace) -> int:
    """Handle credits command."""
    print(CREDITS)
    return EXIT_OK


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="strict-html",
        description="Parse a strict subset of HTML into a tree of elements and text.",
        epilog=(
            "Examples:\n"
            "  strict-html parse page.html\n"
            "  strict-html parse page.html --format json --lenient\n"
            "  strict-html check a.html b.html\n"
            "  strict-html rule attribute 'href=\"x\"'"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true",
                           help="Log parser activity to stderr")
    verbosity.add_argument("-q", "--quiet", action="store_true",
                           help="Only log errors")

    subparsers = parser.add_subparsers(dest="command")

    config_options = argparse.ArgumentParser(add_help=False)
    config_options.add_argument("--config", type=Path,
                                help="JSON file with parser configuration")
    config_options.add_argument("--lenient", action="store_true",
                                help="Do not compare closing tag names with opening tags")
    config_options.add_argument("--max-depth", type=int, dest="max_depth",
                                help="Maximum element nesting depth")

    parse_parser = subparsers.add_parser(
        "parse", parents=[config_options], help="Parse a document file"
    )
    parse_parser.add_argument("file", type=Path, help="Document to parse")
    parse_parser.add_argument("--format", choices=OUTPUT_FORMATS, default="tree",
                              help="Output format (default: tree)")
    parse_parser.add_argument("--encoding", default="utf-8",
                              help="File encoding (default: utf-8)")
    parse_parser.add_argument("-o", "--output", type=Path,
                              help="Write output to file instead of stdout")

    check_parser = subparsers.add_parser(
        "check", parents=[config_options], help="Validate one or more document files"
    )
    check_parser.add_argument("files", type=Path, nargs="+", help="Documents to check")
    check_parser.add_argument("--encoding", default="utf-8",
                              help="File encoding (default: utf-8)")

    rule_parser = subparsers.add_parser(
        "rule", parents=[config_options], help="Match text against a single grammar rule"
    )
    rule_parser.add_argument("rule", help="Grammar rule name, e.g. attribute")
    rule_parser.add_argument("text", help="Text to match")
    rule_parser.add_argument("--format", choices=["tree", "json"], default="tree",
                             help="Output format (default: tree)")

    subparsers.add_parser("credits", help="Show credits")
    subparsers.add_parser("help", help="Show this help message")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command or args.command == "help":
        parser.print_help()
        return EXIT_OK if args.command == "help" else EXIT_PARSE_ERROR

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    handlers = {
        "parse": cmd_parse,
        "check": cmd_check,
        "rule": cmd_rule,
        "credits": cmd_credits,
    }

    logger.debug("Running command", extra={"command": args.command})
    try:
        return handlers[args.command](args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
