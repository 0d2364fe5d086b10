"""Unit tests for statement splitting and script execution."""

import pytest

from vagabond.exceptions import StatementExecutionError
from vagabond.migrations.executor import ScriptExecutor, split_statements


class TestSplitStatements:
    """Test script splitting."""

    def test_trailing_empty_fragment_dropped(self):
        assert split_statements("CREATE TABLE a (id int PRIMARY KEY);") == [
            "CREATE TABLE a (id int PRIMARY KEY)"
        ]

    def test_multiple_statements_in_order(self):
        script = """
        CREATE TABLE a (id int PRIMARY KEY);
        CREATE TABLE b (id int PRIMARY KEY);
        INSERT INTO a (id) VALUES (1);
        """
        assert split_statements(script) == [
            "CREATE TABLE a (id int PRIMARY KEY)",
            "CREATE TABLE b (id int PRIMARY KEY)",
            "INSERT INTO a (id) VALUES (1)",
        ]

    def test_empty_script(self):
        assert split_statements("") == []
        assert split_statements("  \n ;\n;") == []

    def test_comment_only_fragments_dropped(self):
        script = "-- header\nCREATE TABLE a (id int PRIMARY KEY);\n// trailing note\n"
        assert split_statements(script) == ["-- header\nCREATE TABLE a (id int PRIMARY KEY)"]

    def test_statement_without_delimiter(self):
        assert split_statements("DROP TABLE a") == ["DROP TABLE a"]

    def test_custom_delimiter(self):
        assert split_statements("a|b|", delimiter='|') == ['a', 'b']


class TestScriptExecutor:
    """Test statement execution against a session."""

    def test_runs_every_statement(self, fake_session):
        executed = ScriptExecutor().run(fake_session, "CREATE TABLE a (id int PRIMARY KEY);DROP TABLE b;")

        assert executed == 2
        assert fake_session.executed == ["CREATE TABLE a (id int PRIMARY KEY)", "DROP TABLE b"]

    def test_empty_script_runs_nothing(self, fake_session):
        assert ScriptExecutor().run(fake_session, "") == 0
        assert fake_session.executed == []

    def test_stops_at_first_failure_without_undo(self, fake_session):
        fake_session.fail_on.add("bad statement")
        script = "first statement;bad statement;third statement;"

        with pytest.raises(StatementExecutionError) as exc_info:
            ScriptExecutor().run(fake_session, script, source="migrations/m/up.cql")

        error = exc_info.value
        assert error.statement == "bad statement"
        assert error.position == 2
        assert error.executed == 1
        assert "bad statement" in str(error)
        assert "migrations/m/up.cql" in str(error)
        assert "clean this up" in error.cleanup_hint
        # First statement stays executed, third never ran
        assert fake_session.executed == ["first statement"]

    def test_first_statement_failure_hint(self, fake_session):
        fake_session.fail_on.add("bad")

        with pytest.raises(StatementExecutionError) as exc_info:
            ScriptExecutor().run(fake_session, "bad;")

        assert exc_info.value.executed == 0
        assert "No statement" in exc_info.value.cleanup_hint
