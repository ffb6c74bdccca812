#!/usr/bin/env python
"""
Reconcile analytics account descriptions against the remote management API
"""

# Standard
from typing import List, Optional, Tuple
import argparse
import sys

# First Party
import alog

# Local
from .cmd import (
    CmdBase,
    DescribeCmd,
    ReconcileCmd,
    add_config_args,
    apply_config_args,
)
from .log_format import configure_logging

log = alog.use_channel("MAIN")

# Command run when the first argument does not name one
DEFAULT_COMMAND = "reconcile"


def build_parser(
    commands: List[CmdBase],
) -> Tuple[argparse.ArgumentParser, List[str]]:
    """Parser with one subcommand per command, each taking the library config
    overrides. The names of the subcommands are returned alongside.
    """
    parser = argparse.ArgumentParser(description=__doc__)
    subparsers = parser.add_subparsers(
        help="Available commands", dest="command", required=True
    )
    for command in commands:
        subparser = command.add_subparser(subparsers)
        subparser.set_defaults(func=command.cmd)
        add_config_args(subparser)
    return parser, list(subparsers.choices)


def main(argv: Optional[List[str]] = None):
    """Run the command named by the first argument. Without one, the arguments
    go to reconcile.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    parser, names = build_parser([ReconcileCmd(), DescribeCmd()])
    if not argv or argv[0] not in names + ["-h", "--help"]:
        argv.insert(0, DEFAULT_COMMAND)
    args = parser.parse_args(argv)

    apply_config_args(args)
    configure_logging()

    log.debug("Running command [%s]", args.command)
    args.func(args)


if __name__ == "__main__":  # pragma: no cover
    main()
