"""Pytest configuration for the fomega test suite."""

import pytest

from fomega.colors import disable_colors
from fomega.errors import clear_trace, disable_trace


@pytest.fixture(autouse=True)
def plain_output():
    """Compare rendered output without ANSI escapes and with a fresh trace."""
    disable_colors()
    clear_trace()
    yield
    disable_trace()
    clear_trace()
