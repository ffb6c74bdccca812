"""
Base class for all gamanip commands along with the helpers they share: document
loading and command line overrides of the library config
"""

# Standard
import abc
import argparse

# Third Party
import yaml

# Local
from .. import constants
from ..config import library_config
from ..utils import nested_get


class CmdBase(abc.ABC):
    __doc__ = __doc__

    @abc.abstractmethod
    def add_subparser(
        self,
        subparsers: argparse._SubParsersAction,
    ) -> argparse.ArgumentParser:
        """Add this command's argument parser subcommand

        Args:
            subparsers (argparse._SubParsersAction): The subparser section for
                the central main parser

        Returns:
            subparser (argparse.ArgumentParser): The configured parser for this
                command
        """

    @abc.abstractmethod
    def cmd(self, args: argparse.Namespace):
        """Execute the command with the parsed arguments

        Args:
            args (argparse.Namespace): The parsed command line arguments
        """


def load_document(path: str) -> dict:
    """Load a YAML (or JSON) document holding a serialized tree

    Args:
        path (str): The file to read

    Returns:
        document (dict): The parsed content, empty if the file is empty
    """
    with open(path, encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


## Library config overrides ####################################################

# Library config keys that can be set from the command line
CONFIG_ARGS = {
    "dry_run": "Reconcile against an in-memory remote state (see --state)",
    "quota_user": "Quota user attached to every remote call",
    "backoff.max_attempts": "Total attempts of a remote call on transient errors",
    "backoff.start_delay_ms": "Delay before the first retry, doubled on each retry",
    "backoff.retry_reasons": "Remote error reasons that are retried",
    "positional_ids.custom_dimension": "Id format of custom dimensions ({index} is the position)",
    "positional_ids.custom_metric": "Id format of custom metrics ({index} is the position)",
    "log_level": "Default log level",
    "log_filters": "Per-channel log levels (CHANNEL:level,...)",
    "log_json": "Emit json formatted logs",
    "log_thread_id": "Include the thread id in log lines",
}


def _dest(key: str) -> str:
    return key.replace(".", "_")


def add_config_args(parser: argparse.ArgumentParser):
    """Add a --<key> override for every library config key in CONFIG_ARGS. The
    current config value is the default.
    """
    group = parser.add_argument_group("Library Configuration")
    for key, help_text in CONFIG_ARGS.items():
        current = nested_get(library_config, key)
        kwargs = {"dest": _dest(key), "default": current, "help": help_text}
        if isinstance(current, bool):
            kwargs["action"] = "store_true"
        elif isinstance(current, list):
            kwargs["nargs"] = "+"
        elif isinstance(current, int):
            kwargs["type"] = int
        else:
            kwargs["type"] = str
        group.add_argument(f"--{key}", **kwargs)


def apply_config_args(args: argparse.Namespace):
    """Write the parsed overrides back into the library config"""
    for key in CONFIG_ARGS:
        *parents, name = key.split(constants.NESTED_DICT_DELIM)
        target = library_config
        for parent in parents:
            target = target[parent]
        target[name] = getattr(args, _dest(key))
