"""
Command-line entry point.

    tmsu-db [-D DB] [-v] init [PATH ...] [-P ROOTPATH] [-D DB] [-v]

Creates a .tmsu directory under each PATH (default: the working
directory) and initialises a new empty database within it. With a
networked --database (or TMSU_DB), that database is initialised instead
and --root-path is stored in its settings.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import configure_logging, load_config
from .errors import StorageError
from .initializer import init_databases


def _common_options() -> argparse.ArgumentParser:
    # accepted before or after the command; SUPPRESS keeps the init
    # subparser from resetting a value given before it
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-D", "--database",
        default=argparse.SUPPRESS,
        help="use the specified database (path or scheme://address)",
    )
    common.add_argument(
        "-v", "--verbose",
        action="count",
        default=argparse.SUPPRESS,
        help="show progress; repeat to log SQL statements",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    ap = argparse.ArgumentParser(
        prog="tmsu-db", description="TMSU database tools", parents=[common]
    )

    sub = ap.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="initializes a new database", parents=[common])
    init.add_argument("paths", nargs="*", metavar="PATH")
    init.add_argument(
        "-P", "--root-path",
        default=None,
        help="root path to use for relative paths; only for networked databases",
    )

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    database = getattr(args, "database", None)
    verbose = getattr(args, "verbose", 0)

    cfg = load_config()
    if verbose:
        cfg.enable_logging = True
        cfg.verbosity = verbose
    configure_logging(cfg)

    database_path = database or cfg.database_path
    root_path = args.root_path or cfg.root_path

    try:
        result = init_databases(args.paths, database_path, root_path)
    except StorageError as e:
        print(f"tmsu-db: {e}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"tmsu-db: warning: {warning}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
