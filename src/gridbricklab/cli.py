"""
Command-line interface for GridBrickLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter

from gridbricklab import __version__
from gridbricklab.core.assembly import assemble, check_boundary_conditions
from gridbricklab.core.catalog_loader import load_catalog
from gridbricklab.core.errors import ConfigError, UnresolvedRecordsError
from gridbricklab.core.resolver import ResolverConfig, resolve
from gridbricklab.handlers.registry import default_registry


def _summary(result) -> dict:
    counts = Counter(obj_id.category for obj_id in result.toplevel)
    counts.update(obj_id.category for obj_id in result.lowlevel)
    return {
        "passes": result.passes,
        "toplevel": len(result.toplevel),
        "lowlevel": len(result.lowlevel),
        "by_category": dict(sorted(counts.items())),
    }


def cmd_check(args) -> int:
    """Load a catalog, resolve it and check boundary-condition coverage."""
    try:
        records = load_catalog(args.input)
        result = resolve(
            records,
            default_registry(),
            config=ResolverConfig(log_dependencies=args.verbose),
        )
        assemble(result.toplevel)
        report = check_boundary_conditions(result.toplevel)
    except FileNotFoundError as e:
        print(f"Catalog not found: {e}", file=sys.stderr)
        return 1
    except UnresolvedRecordsError as e:
        if args.json:
            pending = {
                str(key): [str(d) for d in deps] for key, deps in e.pending.items()
            }
            json.dump({"ok": False, "unresolved": pending}, sys.stdout, indent=2)
            sys.stdout.write("\n")
        else:
            print(f"❌ Resolution failed: {e}")
        return 1
    except ConfigError as e:
        if args.json:
            json.dump({"ok": False, "error": str(e)}, sys.stdout, indent=2)
            sys.stdout.write("\n")
        else:
            print(f"❌ Configuration error: {e}")
        return 1

    summary = _summary(result)
    if args.json:
        output = {"ok": report.is_valid(), **summary, "boundary": report.to_dict()}
        json.dump(output, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(
            f"Resolved {len(records)} records in {summary['passes']} passes "
            f"({summary['toplevel']} top-level, {summary['lowlevel']} low-level)"
        )
        for category, count in summary["by_category"].items():
            print(f"  {category}: {count}")
        print(report)
    return 0 if report.is_valid() else 1


def cmd_handlers(args) -> int:
    """List the registered (category, variant) keys."""
    table = default_registry().describe()
    if args.json:
        json.dump(table.to_dict("records"), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(table.to_string(index=False))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gridbrick",
        description="GridBrickLab - Declarative model building for energy scheduling",
    )
    parser.add_argument("--version", action="version", version=f"GridBrickLab {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    check_parser = subparsers.add_parser(
        "check", help="Resolve a record catalog and check boundary conditions"
    )
    check_parser.add_argument("input", help="Catalog file (YAML or JSON)")
    check_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    check_parser.set_defaults(func=cmd_check)

    handlers_parser = subparsers.add_parser(
        "handlers", help="List the built-in record handlers"
    )
    handlers_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    handlers_parser.set_defaults(func=cmd_handlers)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
