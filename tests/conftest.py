"""Shared fixtures."""

from collections.abc import Iterator

import pytest

from roost.app import RestAPI
from tests.helpers import local_config


@pytest.fixture
def running_api() -> Iterator[RestAPI]:
    """A started RestAPI on an ephemeral loopback port with a fixed info payload."""
    api = RestAPI(local_config(name="test01"), info_producer=lambda: {"project": "test"})
    api.start()
    try:
        yield api
    finally:
        api.stop()
