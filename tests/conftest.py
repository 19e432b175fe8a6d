"""Shared pytest fixtures for wirebox tests."""

from __future__ import annotations

import pytest

from wirebox import Container

pytest_plugins = ["wirebox.integrations.pytest_plugin"]


@pytest.fixture()
def container() -> Container:
    """Container raising every failure from the failing call."""
    return Container()


@pytest.fixture()
def debug_container() -> Container:
    """Container with debug tracing enabled."""
    return Container(debug=True)
