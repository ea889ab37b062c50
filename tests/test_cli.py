"""
Tests for the command-line interface and the interactive console.
"""

import json
import os
from typing import List

import httpx
import pytest
import respx

from queryconsole.cli import InteractiveConsole, build_parser, main, read_block
from queryconsole.models import EntryStatus
from queryconsole.state import Stage

API_URL = os.environ["QUERYCONSOLE_API_URL"]
GENERATE_URL = f"{API_URL}/api/generate"


def scripted_input(lines: List[str]):
    """An input() replacement that replays `lines`, then signals EOF."""
    remaining = iter(lines)

    def _input(prompt: str = "") -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError

    return _input


class TestParser:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_run_arguments(self):
        args = build_parser().parse_args(["--api-url", "http://x:1", "run", "count users", "--json"])
        assert args.command == "run"
        assert args.prompt == "count users"
        assert args.json is True
        assert args.api_url == "http://x:1"


class TestRunCommand:

    @respx.mock
    def test_run_prints_table(self, capsys, users_generation):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json=users_generation))
        respx.post(f"{API_URL}/api/users").mock(
            return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}])
        )

        exit_code = main(["run", "list user ids"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.splitlines()[:4] == ["id", "--", "1", "2"]

    @respx.mock
    def test_run_json_prints_raw_result(self, capsys, users_generation):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json=users_generation))
        respx.post(f"{API_URL}/api/users").mock(return_value=httpx.Response(200, json=[{"id": 1}]))

        assert main(["run", "list user ids", "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == [{"id": 1}]

    @respx.mock
    def test_run_non_tabular_result_prints_json(self, capsys, users_generation):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json=users_generation))
        respx.post(f"{API_URL}/api/users").mock(return_value=httpx.Response(200, json={"count": 2}))

        assert main(["run", "count users"]) == 0
        assert json.loads(capsys.readouterr().out) == {"count": 2}

    @respx.mock
    def test_run_error_exits_non_zero(self, capsys):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(500))

        assert main(["run", "anything"]) == 1
        assert capsys.readouterr().out.startswith("Error: Query generation failed")

    def test_run_with_invalid_api_url(self, capsys):
        assert main(["--api-url", "not-a-url", "run", "anything"]) == 1
        assert "api_url must be an http" in capsys.readouterr().out

    @respx.mock
    def test_api_url_override(self, capsys, users_generation):
        route = respx.post("http://override.test:9000/api/generate").mock(
            return_value=httpx.Response(200, json=users_generation)
        )
        respx.post("http://override.test:9000/api/users").mock(
            return_value=httpx.Response(200, json=[])
        )

        assert main(["--api-url", "http://override.test:9000", "run", "q"]) == 0
        assert route.called


class TestValidateSchemaCommand:

    def test_valid_file(self, tmp_path, capsys):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text('{"collection": "orders"}', encoding="utf-8")

        assert main(["validate-schema", str(schema_file)]) == 0
        assert "Schema is valid" in capsys.readouterr().out

    def test_invalid_file(self, tmp_path, capsys):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text("{", encoding="utf-8")

        assert main(["validate-schema", str(schema_file)]) == 1
        assert "Invalid JSON schema format" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["validate-schema", str(tmp_path / "missing.json")]) == 1
        assert "Error reading" in capsys.readouterr().out

    def test_non_utf8_file(self, tmp_path, capsys):
        schema_file = tmp_path / "schema.json"
        schema_file.write_bytes(b'{"a": "\xff"}')

        assert main(["validate-schema", str(schema_file)]) == 1
        assert capsys.readouterr().out.startswith("✗ Invalid JSON schema format")


def test_show_config(capsys):
    assert main(["show-config"]) == 0
    config = json.loads(capsys.readouterr().out)
    assert config["api_url"] == API_URL
    assert config["submit_delay"] == 0.0


def test_read_block_stops_at_dot():
    assert read_block(scripted_input(["line 1", "line 2", ".", "ignored"])) == "line 1\nline 2"


class TestInteractiveConsole:

    def _console(self, state, query_client, lines):
        output: List[str] = []
        console = InteractiveConsole(
            state, query_client, input_fn=scripted_input(lines), output_fn=output.append
        )
        return console, output

    @pytest.mark.asyncio
    async def test_quit_on_landing(self, state, query_client):
        console, output = self._console(state, query_client, ["quit"])

        assert await console.run() == 0
        assert state.stage == Stage.LANDING
        assert output[0] == "=== Database Query ==="

    @pytest.mark.asyncio
    async def test_connect_requires_a_connection(self, state, query_client):
        console, output = self._console(state, query_client, ["", "connect", "quit"])

        await console.run()

        assert state.stage == Stage.CONNECT
        assert any("at least one connection" in line for line in output)

    @pytest.mark.asyncio
    async def test_connection_commands(self, state, query_client):
        console, output = self._console(
            state,
            query_client,
            ["", "add", "add", "set 1 mongodb://localhost/app", "type 2 redis", "rm 2",
             "type 1 oracle", "rm x", "list", "quit"],
        )

        await console.run()

        assert [c.to_dict() for c in state.connections] == [
            {"id": 1, "value": "mongodb://localhost/app", "type": "mongodb"}
        ]
        assert any("Unsupported datastore type" in line for line in output)
        assert any("invalid literal" in line for line in output)
        assert "#1 [MongoDB] mongodb://localhost/app" in output

    @pytest.mark.asyncio
    async def test_invalid_schema_blocks_editor(self, state, query_client):
        console, output = self._console(
            state, query_client, ["", "add", "connect", "edit", "{", ".", "submit", "quit"]
        )

        await console.run()

        assert state.stage == Stage.SCHEMA
        assert state.schema.text == "{"
        assert any(line.startswith("✗ Invalid JSON schema format") for line in output)

    @pytest.mark.asyncio
    async def test_load_non_utf8_file_keeps_session(self, state, query_client, tmp_path):
        bad_file = tmp_path / "bad.json"
        bad_file.write_bytes(b'{"a": "\xff"}')
        good_file = tmp_path / "good.json"
        good_file.write_text('{"collection": "orders"}', encoding="utf-8")
        state.stage = Stage.SCHEMA

        console, output = self._console(
            state, query_client, [f"load {bad_file}", f"load {good_file}", "submit", "quit"]
        )

        assert await console.run() == 0
        assert any(line.startswith("✗ Invalid JSON schema format") for line in output)
        assert state.schema.text == '{"collection": "orders"}'
        assert state.stage == Stage.EDITOR

    @respx.mock
    @pytest.mark.asyncio
    async def test_full_walkthrough(self, state, query_client, users_generation):
        respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json=users_generation))
        respx.post(f"{API_URL}/api/users").mock(
            return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}])
        )
        console, output = self._console(
            state,
            query_client,
            [
                "",                       # landing
                "add",                    # connect step
                "set 1 mongodb://localhost:27017/app",
                "connect",
                "submit",                 # schema step, default template
                "db products_db",         # editor step
                "run list user ids",
                "history",
                "status",
            ],
        )

        assert await console.run() == 0

        assert state.stage == Stage.EDITOR
        assert state.selected_database == "products_db"
        assert state.table.rows == [[1], [2]]
        assert [e.status for e in state.history] == [EntryStatus.SUCCESS]
        assert "Connected to: products_db | 1 Queries executed" in output
        assert "(2 rows)" in "\n".join(output)

    @respx.mock
    @pytest.mark.asyncio
    async def test_run_uses_editor_buffer(self, state, query_client, users_generation):
        route = respx.post(GENERATE_URL).mock(return_value=httpx.Response(200, json=users_generation))
        respx.post(f"{API_URL}/api/users").mock(return_value=httpx.Response(200, json={"ok": True}))
        state.stage = Stage.EDITOR

        console, output = self._console(
            state, query_client, ["edit", "db.users.count()", ".", "show", "run"]
        )
        await console.run()

        assert json.loads(route.calls.last.request.content) == {"prompt": "db.users.count()"}
        assert "db.users.count()" in output
