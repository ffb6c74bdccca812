"""
This module holds all of the command classes for gamanip's main entrypoint
"""

# Local
from .base import CmdBase, add_config_args, apply_config_args, load_document
from .describe_cmd import DescribeCmd
from .reconcile_cmd import ReconcileCmd
