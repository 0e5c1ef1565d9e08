#!/usr/bin/env python3
"""Debug script: dump the token stream and formatted output of a template."""

import argparse
import logging
import sys
from pathlib import Path

from razorfmt import Config, format_document, tokenize
from razorfmt.directives import parse_control_flow
from razorfmt.tokens import TokenKind


def dump_tokens(text):
    tokens = tokenize(text)
    print(f"=== Tokens ({len(tokens)}) ===")
    for index, token in enumerate(tokens):
        print(f"  {index:>4} {token!r}")
        if token.attributes:
            for attr in token.attributes:
                print(f"         {attr!r}")
        if token.kind == TokenKind.CONTROL_FLOW_BLOCK:
            parsed = parse_control_flow(token.raw_content)
            print(f"         {parsed!r}")

    joined = "".join(token.raw_content for token in tokens)
    if joined == text:
        print("\nToken round-trip OK")
    else:
        print("\n!!! Token round-trip MISMATCH !!!")


def main():
    parser = argparse.ArgumentParser(description="Inspect how razorfmt tokenizes and formats a file")
    parser.add_argument("path", type=Path, help="Template to inspect ('-' reads stdin)")
    parser.add_argument("--indent-size", type=int, default=4)
    parser.add_argument("--max-attributes", type=int, default=1)
    parser.add_argument("--no-format", action="store_true", help="Only print the tokens")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if str(args.path) == "-":
        text = sys.stdin.read()
    elif not args.path.exists():
        print(f"File not found: {args.path}")
        sys.exit(1)
    else:
        text = args.path.read_text(encoding="utf-8")

    print(f"Input: {text[:200]!r}")
    dump_tokens(text)
    if args.no_format:
        return

    config = Config(indent_size=args.indent_size, max_attributes_per_line=args.max_attributes)
    result = format_document(text, config)
    print("\n=== Formatted ===")
    print(result.text)
    if result.warnings:
        print("\n=== Warnings ===")
        for warning in result.warnings:
            print(f"  {warning}")


if __name__ == "__main__":
    main()
