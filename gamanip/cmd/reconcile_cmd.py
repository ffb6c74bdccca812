"""
This is the main entrypoint command for reconciling a description file against
the remote management API
"""
# Standard
from typing import Optional
import argparse
import asyncio
import importlib
import os
import sys

# First Party
import alog

# Local
from .. import config
from ..description import Description
from ..log_format import configure_logging
from ..management_client import DryRunManagementClient, ManagementClientBase
from ..reconcile import ReconcileManager
from ..session import Session
from .base import CmdBase, load_document

log = alog.use_channel("MAIN")


class ReconcileCmd(CmdBase):
    __doc__ = __doc__

    ## Interface ##

    def add_subparser(
        self,
        subparsers: argparse._SubParsersAction,
    ) -> argparse.ArgumentParser:
        parser = subparsers.add_parser("reconcile", help=__doc__)
        runtime_args = parser.add_argument_group("Runtime Configuration")
        runtime_args.add_argument(
            "--description",
            "-d",
            required=True,
            help="YAML or JSON file holding the description to reconcile",
        )
        runtime_args.add_argument(
            "--client",
            "-c",
            default=None,
            help="The management client class to use, as module.ClassName",
        )
        runtime_args.add_argument(
            "--state",
            "-s",
            default=None,
            help="(dry run) A YAML file holding the initial remote state",
        )
        runtime_args.add_argument(
            "--output",
            "-o",
            default=None,
            help="File to write the reconciled description to (default stdout)",
        )
        runtime_args.add_argument(
            "--reconciliation_id",
            default=None,
            help="Id of this reconciliation for the logs (generated if not given)",
        )
        return parser

    def cmd(self, args: argparse.Namespace):
        # Validate args
        assert args.state is None or (
            config.dry_run and os.path.isfile(args.state)
        ), "Can only specify --state with dry run and it must point to a valid file"
        assert (
            config.dry_run or args.client
        ), "Must specify --client unless running with --dry_run"

        description = Description.from_dict(load_document(args.description))
        client = self._get_client(args.client, args.state)
        session = Session(client, reconciliation_id=args.reconciliation_id)
        configure_logging(session.id, description.account_id)

        result = asyncio.run(ReconcileManager().safe_make(session, description))
        if result.description is not None:
            self._write_output(result.description, args.output)
        if not result.success:
            log.error("Reconcile failed: %s", result.exception.to_debug())
            sys.exit(1)
        log.info("Reconcile completed successfully")

    ## Implementation ##

    @staticmethod
    def _get_client(
        client_name: Optional[str],
        state_file: Optional[str],
    ) -> ManagementClientBase:
        """Construct the management client. With dry run, the client holds the
        remote state in memory, seeded from the state file.
        """
        if config.dry_run:
            log.info("Running DRY RUN")
            state = load_document(state_file) if state_file else None
            return DryRunManagementClient(state)

        module_name, _, class_name = client_name.rpartition(".")
        assert module_name and class_name, f"Invalid client name: {client_name}"
        log.debug("Importing client %s from %s", class_name, module_name)
        client_class = getattr(importlib.import_module(module_name), class_name)
        assert isinstance(client_class, type) and issubclass(
            client_class, ManagementClientBase
        ), f"{client_name} is not a ManagementClientBase"
        return client_class()

    @staticmethod
    def _write_output(description: Description, output: Optional[str]):
        if output:
            with open(output, "w", encoding="utf-8") as handle:
                handle.write(description.to_json())
        else:
            print(description.to_json())
