"""
Tests for cp — copying Attributes between Identifiers

Validates:
- All k attributes copied, session origin unchanged afterward
- Origin switched per attribute to preserve attribution
- First failed send aborts; no success claimed for the rest
- Empty sources are reported distinctly and write nothing
- cp -r copies the full history streamed over [0, now]
"""

from unittest.mock import Mock, call

import pytest

from wmbrowse.cli import SessionState
from wmbrowse.commands.copy_cmd import CopyFailed


@pytest.fixture
def copy_env(browser_factory):
    """room.300 with four attributes a..d written by "sensor"."""
    for i, name in enumerate("abcd"):
        browser_factory.add_attribute("room.300", name, str(i), type_name="integer",
                                      origin="sensor", created=1000 + i)
    return browser_factory


def start(env, capsys):
    cli = env.create_cli(start=True)
    capsys.readouterr()
    return cli


class TestShallowCopy:
    """cp SRC DST."""

    def test_copies_all_attributes(self, copy_env, capsys):
        cli = start(copy_env, capsys)

        cli.handle_command("cp room.300 room.301")

        assert 'Copied 4 attribute(s) from "room.300" to "room.301".' in capsys.readouterr().out
        copied = copy_env.model.snapshot("room\\.301").attributes("room.301")
        assert [a.name for a in copied] == ["a", "b", "c", "d"]
        assert [a.created for a in copied] == [1000, 1001, 1002, 1003]

    def test_origin_preserved_and_restored(self, browser_env, capsys):
        """Attributes keep their writer's origin; the session origin comes back."""
        cli = start(browser_env, capsys)
        mutation = browser_env.mutation
        mutation.set_origin = Mock(wraps=mutation.set_origin)

        cli.handle_command("cp room.101 room.201")

        copied = {a.name: a.origin for a in browser_env.model.snapshot("room\\.201").attributes("room.201")}
        assert copied == {"display name": "admin", "temperature": "thermostat"}
        assert mutation.origin == "tester"
        assert mutation.set_origin.call_args_list == [call("admin"), call("thermostat"), call("tester")]

    def test_same_origin_not_switched(self, browser_factory, capsys):
        browser_factory.add_attribute("a", "x", "1", origin="tester")
        cli = start(browser_factory, capsys)
        browser_factory.mutation.set_origin = Mock()

        cli.handle_command("cp a b")

        browser_factory.mutation.set_origin.assert_not_called()

    def test_jth_failure_aborts(self, copy_env, capsys):
        """Third of four sends rejected: two copied, no success line, origin restored."""
        cli = start(copy_env, capsys)
        mutation = copy_env.mutation
        mutation.update_attribute = Mock(side_effect=[True, True, False, True])

        cli.handle_command("cp room.300 room.301")

        out = capsys.readouterr().out
        assert 'Error: Copy failed at "c" after 2 attribute(s) copied.' in out
        assert "not rolled back" in out
        assert "Copied 4" not in out
        assert mutation.update_attribute.call_count == 3
        assert mutation.origin == "tester"
        assert cli.state == SessionState.RUNNING

    def test_link_fault_during_send(self, copy_env, capsys):
        cli = start(copy_env, capsys)
        copy_env.mutation.update_attribute = Mock(side_effect=[True, ConnectionResetError("reset")])

        cli.handle_command("cp room.300 room.301")

        out = capsys.readouterr().out
        assert 'Copy failed at "b" after 1 attribute(s) copied: reset.' in out
        assert copy_env.mutation.origin == "tester"

    def test_copy_failed_carries_count(self, copy_env, capsys):
        cli = start(copy_env, capsys)
        copy_env.mutation.update_attribute = Mock(return_value=False)

        with pytest.raises(CopyFailed) as exc:
            cli._copy_cmd.copy(["room.300", "room.301"])

        assert exc.value.copied == 0
        assert exc.value.attribute.identifier == "room.301"

    def test_empty_source(self, browser_env, capsys):
        cli = start(browser_env, capsys)
        browser_env.mutation.update_attribute = Mock()

        cli.handle_command("cp sensor.7 sensor.8")

        assert 'Nothing copied: source is empty ("sensor.7").' in capsys.readouterr().out
        browser_env.mutation.update_attribute.assert_not_called()

    def test_source_with_regex_characters(self, browser_factory, capsys):
        """SRC is an Identifier, not a pattern."""
        browser_factory.add_attribute("a.1", "x", "1")
        browser_factory.add_attribute("a-1", "x", "2")
        cli = start(browser_factory, capsys)

        assert cli._copy_cmd.copy(["a.1", "b"]) == 1


class TestRecursiveCopy:
    """cp -r SRC DST."""

    def test_copies_full_history(self, browser_env, capsys):
        cli = start(browser_env, capsys)

        cli.handle_command("cp -r room.101 room.201")

        assert 'Copied 3 attribute(s) from "room.101" to "room.201".' in capsys.readouterr().out
        history = browser_env.model.range("room\\.201", 0, 5000)
        assert sum(s.attribute_count for s in history) == 3
        assert browser_env.mutation.origin == "tester"

    def test_empty_source_writes_nothing(self, browser_factory, capsys):
        cli = start(browser_factory, capsys)
        browser_factory.mutation.update_attribute = Mock()

        cli.handle_command("cp -r ghost room.999")

        assert 'Nothing copied: source is empty ("ghost").' in capsys.readouterr().out
        browser_factory.mutation.update_attribute.assert_not_called()
        assert browser_factory.model.search_ids("room.*") == []

    def test_failure_aborts_rest_of_stream(self, copy_env, capsys):
        """A failed send stops the copy, including snapshots not yet pulled."""
        cli = start(copy_env, capsys)
        copy_env.mutation.update_attribute = Mock(side_effect=[True, False, True, True])

        cli.handle_command("cp -r room.300 room.301")

        out = capsys.readouterr().out
        assert 'Copy failed at "b" after 1 attribute(s) copied.' in out
        assert copy_env.mutation.update_attribute.call_count == 2
        assert copy_env.mutation.origin == "tester"


class TestCopyUsage:
    """Argument checking happens before any link call."""

    def test_missing_destination(self, browser_env, capsys):
        cli = start(browser_env, capsys)
        cli.handle_command("cp room.101")
        assert "Error: Missing arguments.\nUsage: cp [-r] SRC_ID DST_ID" in capsys.readouterr().out

    def test_too_many_arguments(self, browser_env, capsys):
        cli = start(browser_env, capsys)
        cli.handle_command("cp -r a b c")
        assert "Error: Too many arguments." in capsys.readouterr().out

    def test_same_source_and_destination(self, browser_env, capsys):
        cli = start(browser_env, capsys)
        browser_env.observation.get_current_snapshot = Mock()

        cli.handle_command("cp room.101 room.101")

        assert "Source and destination are the same Identifier." in capsys.readouterr().out
        browser_env.observation.get_current_snapshot.assert_not_called()
