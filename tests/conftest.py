"""
Shared test config
"""
# Standard
from unittest import mock
import sys

# Third Party
import pytest

# Local
from gamanip.test_helpers.helpers import configure_logging

configure_logging()


@pytest.fixture
def reset_sys_argv():
    """Tests that run the main entrypoint need to muck with sys.argv, so this
    fixture will reset it to a clean state
    """
    with mock.patch.object(sys, "argv", ["gamanip"]):
        yield
