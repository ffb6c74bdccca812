"""
Render a description file in its normalized form (whitelisted fields and
defaults applied) without contacting the remote API
"""
# Standard
import argparse

# First Party
import alog

# Local
from ..description import DescriptionBuilder
from .base import CmdBase, load_document

log = alog.use_channel("CMD-DESCR")


class DescribeCmd(CmdBase):
    __doc__ = __doc__

    def add_subparser(
        self,
        subparsers: argparse._SubParsersAction,
    ) -> argparse.ArgumentParser:
        """Add the subparser for this command"""
        parser = subparsers.add_parser(
            "describe",
            help="Print the normalized form of a description file",
        )
        command_args = parser.add_argument_group("Command Arguments")
        command_args.add_argument(
            "--description",
            "-d",
            required=True,
            help="YAML or JSON file holding the description",
        )
        command_args.add_argument(
            "--output",
            "-o",
            default=None,
            help="File to write the normalized description to (default stdout)",
        )
        return parser

    def cmd(self, args: argparse.Namespace):
        builder = DescriptionBuilder.from_dict(load_document(args.description))
        log.debug("Loaded description from %s", args.description)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as handle:
                handle.write(str(builder))
        else:
            print(str(builder))
