#!/usr/bin/env python3
"""Shapedefs CLI - inspect shape declarations.

Usage:
    shapedefs <file.shapes>                          # Show declared shapes
    shapedefs <file.shapes> --shape Profile --keys   # Show all field key sets
    shapedefs <file.shapes> --shape Profile --keys RequiredKeysFor
    shapedefs <file.shapes> --shape Profile --derive WithOptional --names age
    shapedefs <file.shapes> --shape Profile --guard instance.json
    shapedefs "{name: str}" --text --lark            # Show Lark parse tree
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import shapedefs


logger = logging.getLogger("shapedefs")


def show_keys(shape, kind="all"):
    """Print key sets of a shape, one operation per line.

    Args:
        shape: (Shape) Shape to inspect
        kind: (str) Key operation name, or "all" for every key set
    """
    if kind == "all":
        operations = shapedefs.KEY_OPERATIONS
    else:
        operations = {kind: shapedefs.KEY_OPERATIONS[kind]}
    width = max(len(op) for op in operations)
    for op, func in operations.items():
        keys = func(shape)
        print(f"{op:<{width}}  {', '.join(keys) if keys else '-'}")


def guard_instance(shape, path):
    """Guard the required fields of a shape against a JSON object.

    Returns:
        (int) Process exit code
    """
    instance = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(instance, dict):
        raise shapedefs.InvalidArgument(f"Expected a JSON object in {path}")

    required = shapedefs.required_keys_for(shape)
    if shapedefs.guard_for(instance, *required):
        print(f"ok: {shape.display_name} fields defined ({', '.join(required) or '-'})")
        return 0
    missing = shapedefs.missing_for(instance, *required)
    print(f"fail: {shape.display_name} missing {', '.join(missing)}")
    return 1


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="shapedefs",
        description="Inspect shape declarations and derived shapes")
    parser.add_argument("source",
        help="Shape declaration file to parse")
    parser.add_argument("--text", action="store_true",
        help="Treat source as declaration text instead of a file path")
    parser.add_argument("--lark", action="store_true",
        help="Show Lark parse tree")
    parser.add_argument("--shape",
        help="Name of the declared shape to inspect")
    parser.add_argument("--derive", metavar="OP",
        help="Apply a shape operation, like WritableOnly or WithOptional")
    parser.add_argument("--names", nargs="*", default=[], metavar="FIELD",
        help="Field names for --derive")
    parser.add_argument("--keys", nargs="?", const="all", metavar="KIND",
        choices=["all", *shapedefs.KEY_OPERATIONS],
        help="Show one field key set of the shape, like RequiredKeysFor, or all of them")
    parser.add_argument("--guard", metavar="JSON",
        help="Check required fields of the shape against a JSON object file")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Show debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")

    if (args.derive or args.keys or args.guard) and not args.shape:
        parser.error("--derive, --keys and --guard require --shape")
    if args.names and not args.derive:
        parser.error("--names requires --derive")
    if args.keys and args.guard:
        parser.error("--keys and --guard cannot be combined")
    if args.derive in shapedefs.KEY_OPERATIONS and (args.keys or args.guard):
        parser.error(f"--derive {args.derive} produces field names, "
                     "it cannot be combined with --keys or --guard")

    try:
        if args.text:
            source = args.source
            filename = "<text>"
        else:
            filepath = Path(args.source)
            if not filepath.exists():
                print(f"Error: File not found: {filepath}", file=sys.stderr)
                return 1
            source = filepath.read_text(encoding="utf-8")
            filename = str(filepath)

        if args.lark:
            print(shapedefs.lark_tree(source).pretty())
            return 0

        namespace = shapedefs.parse_shapes(source, filename=filename)
        logger.debug("Parsed %d shapes from %s", len(namespace), filename)

        if not args.shape:
            print(shapedefs.format_namespace(namespace))
            return 0

        shape = namespace.lookup(args.shape)
        if args.derive:
            shape = shapedefs.derive(args.derive, shape, *args.names)
            if isinstance(shape, tuple):
                print(", ".join(shape) if shape else "-")
                return 0

        if args.keys:
            show_keys(shape, args.keys)
        elif args.guard:
            return guard_instance(shape, args.guard)
        else:
            print(shapedefs.format_shape(shape, None if args.derive else args.shape))
        return 0

    except (shapedefs.ParseError, shapedefs.DefinitionError,
            shapedefs.InvalidArgument) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
