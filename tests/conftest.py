"""
Shared pytest fixtures for the wmbrowse test suite.

Sessions run over the in-process memory backend with a scripted console,
so tests need no world model server and never sleep for real.

Usage in tests:
    def test_something(browser_factory):
        browser_factory.add_attribute("room.101", "temperature", "21.5", type_name="double")
        cli = browser_factory.create_cli("status room.101\\nquit\\n")
        assert cli.run() == 0

    def test_with_data(browser_env, capsys):
        # browser_env comes pre-populated with the sample world
        browser_env.run_command("search room.*")
"""

import pytest
from loguru import logger

from tests.factories import BrowserTestFactory


@pytest.fixture(autouse=True)
def quiet_logging():
    """Drop loguru sinks so tests never write log files or stderr noise."""
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def browser_factory(tmp_path):
    """
    Create an empty BrowserTestFactory (origin "tester").

    Example:
        def test_touch(browser_factory):
            browser_factory.run_command("touch door.1")
            assert browser_factory.model.search_ids("door.*") == ["door.1"]
    """
    return BrowserTestFactory(tmp_path)


@pytest.fixture
def browser_env(tmp_path):
    """
    Create a BrowserTestFactory with the sample world.

    Pre-populated with:
    - room.101 (temperature x2, display name)
    - room.102 (temperature)
    - sensor.7 (no attributes)
    """
    factory = BrowserTestFactory(tmp_path)
    factory.create_sample_world()
    return factory


@pytest.fixture
def readonly_env(tmp_path):
    """Sample world, session without an origin (observation link only)."""
    factory = BrowserTestFactory(tmp_path, origin=None)
    factory.create_sample_world()
    return factory
