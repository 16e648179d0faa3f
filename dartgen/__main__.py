"""CLI entry point for the Dart data-class generator.

Usage:
    dartgen [options] FILE
    python -m dartgen [options] FILE

Options:
    FILE                Dart source file to process
    --config PATH       Path to dartgen.yaml config file
    --part NAME         Generate only one member category
                        (constructor, copyWith, serialization, toString,
                        equality, useEquatable), or jsonSerializable
                        to rewrite classes for json_serializable
    --write             Rewrite FILE in place instead of printing it
    --backup            Keep FILE.bak when writing
    --format FORMAT     text (patched source, default) or json (report)
    --coerce-numbers    Convert decoded numbers with toInt()/toDouble()
    --flutter           Treat the package as a Flutter package
    --no-flutter        Treat the package as a plain Dart package
    --package NAME      Override the package name from pubspec.yaml
    --quiet / -q        Suppress progress output
    --help / -h         Show this help
"""

from __future__ import annotations

import argparse
import os
import sys


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="dartgen",
        description="Generate data-class boilerplate for Dart classes",
    )
    parser.add_argument(
        "file",
        help="Dart source file to process",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to dartgen.yaml configuration file",
    )
    parser.add_argument(
        "--part",
        type=str,
        default=None,
        help="Generate only this member category. Default: all",
    )
    parser.add_argument(
        "--write",
        action="store_true",
        default=False,
        help="Rewrite the file in place",
    )
    parser.add_argument(
        "--backup",
        action="store_true",
        default=False,
        help="Keep a .bak copy when writing",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=("text", "json"),
        default="text",
        help="Output format when not writing (text or json)",
    )
    parser.add_argument(
        "--coerce-numbers",
        action="store_true",
        default=False,
        help="Coerce decoded numbers to the declared int/double type",
    )
    parser.add_argument(
        "--flutter",
        action="store_true",
        default=False,
        help="Treat the package as a Flutter package",
    )
    parser.add_argument(
        "--no-flutter",
        action="store_true",
        default=False,
        help="Treat the package as a plain Dart package",
    )
    parser.add_argument(
        "--package",
        type=str,
        default=None,
        help="Package name used to group same-package imports",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress output",
    )

    args = parser.parse_args(argv)

    path = os.path.abspath(args.file)
    if not os.path.isfile(path):
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    from .config import load_config, validate_part
    from .discovery import find_pubspec
    from .errors import DartGenError

    # dartgen.yaml lives next to pubspec.yaml
    pubspec = find_pubspec(path)
    project_root = os.path.dirname(pubspec) if pubspec else os.path.dirname(path)

    try:
        config = load_config(config_path=args.config, project_root=project_root)
        part = validate_part(args.part)
    except DartGenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.backup:
        config.output.backup = True
    if args.flutter:
        config.project.is_flutter = True
    elif args.no_flutter:
        config.project.is_flutter = False
    if args.package:
        config.project.package_name = args.package

    # stdout carries the result unless the file is rewritten
    verbose = not args.quiet and args.write

    from .runner import generate_file

    try:
        result = generate_file(
            path,
            config,
            part=part,
            coerce_numbers=args.coerce_numbers,
            write=args.write,
            verbose=verbose,
        )
    except DartGenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        from .output.json_writer import dumps_report
        print(dumps_report(result.generation, path))
    elif not args.write:
        sys.stdout.write(result.text)

    if verbose:
        print(f"[dartgen] Time: {result.duration_seconds:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
