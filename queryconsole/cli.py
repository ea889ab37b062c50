#!/usr/bin/env python3
"""
Command-line interface for the query console.

Usage:
    python -m queryconsole run "users older than 21"
    python -m queryconsole run "users older than 21" --json
    python -m queryconsole validate-schema schema.json
    python -m queryconsole console
    python -m queryconsole show-config
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .config import ConsoleSettings
from .logging_config import setup_logging
from .pipeline import QueryPipeline
from .query_client import QueryClient
from .render import (
    render_connections,
    render_entry,
    render_history,
    render_status,
    render_table,
)
from .schema_draft import INVALID_SCHEMA_MESSAGE, SchemaDraftStore
from .state import ConsoleState, Stage

logger = logging.getLogger(__name__)

FEATURES = [
    ("Database Connections", "Connect to multiple databases seamlessly"),
    ("Query Editor", "Write and execute queries with ease"),
    ("Real-time Results", "Get instant query results and insights"),
]

CONNECT_HELP = """Commands:
  add                     add a connection (type mongodb)
  set <id> <string>       set the connection string
  type <id> <type>        mongodb | postgresql | mysql | redis
  rm <id>                 remove a connection
  list                    show connections
  connect                 continue to the schema step
  quit                    leave the console"""

SCHEMA_HELP = """Commands:
  show                    print the schema draft
  edit                    replace the draft (end input with a single '.')
  load <file>             replace the draft with a file's contents
  reset                   restore the default template
  submit                  validate and continue to the editor
  quit                    leave the console"""

EDITOR_HELP = """Commands:
  show                    print the editor buffer
  edit                    replace the buffer (end input with a single '.')
  run [text]              execute the buffer, or the given text
  db <name>               select users_db | products_db | orders_db
  table                   show the current result table
  history                 show all submitted queries
  status                  show the status line
  quit                    leave the console"""


def load_settings(args) -> ConsoleSettings:
    """Environment settings, overridden by --api-url / --timeout."""
    settings = ConsoleSettings.from_env()
    overrides = {}
    if getattr(args, "api_url", None):
        overrides["api_url"] = args.api_url
    if getattr(args, "timeout", None) is not None:
        overrides["http_timeout"] = args.timeout
    if overrides:
        settings = ConsoleSettings(**{**settings.to_dict(), **overrides})
    return settings


async def run_once(state: ConsoleState, prompt: str):
    """Submit one prompt on a fresh client and return the resolved entry."""
    async with QueryClient(state.settings.api_url, state.settings.http_timeout) as client:
        return await QueryPipeline(state, client).submit(prompt)


def cmd_run(args):
    """Submit a single query and print the outcome."""
    try:
        state = ConsoleState(load_settings(args))
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    logger.info(f"Submitting prompt to {state.settings.api_url}")
    entry = asyncio.run(run_once(state, args.prompt))

    if entry.is_error:
        print(entry.result)
        return 1

    if args.json or state.table.is_empty:
        print(entry.result)
    else:
        print(render_table(state.table))
    return 0


def cmd_validate_schema(args):
    """Check that a schema file is well-formed JSON."""
    path = Path(args.file)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        print(f"✗ {INVALID_SCHEMA_MESSAGE}: {path} is not UTF-8 ({e})")
        return 1
    except OSError as e:
        print(f"Error reading {path}: {e}")
        return 1

    draft = SchemaDraftStore(text=text, submit_delay=0)
    if not asyncio.run(draft.submit()):
        print(f"✗ {draft.error}")
        return 1

    print(f"✓ Schema is valid ({draft.character_count} characters)")
    return 0


def cmd_show_config(args):
    """Print the effective configuration."""
    try:
        settings = load_settings(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    print(json.dumps(settings.to_dict(), indent=2))
    return 0


def read_block(input_fn: Callable[[str], str]) -> str:
    """Read lines until a line containing a single '.'."""
    lines: List[str] = []
    while True:
        line = input_fn("")
        if line.strip() == ".":
            break
        lines.append(line)
    return "\n".join(lines)


class InteractiveConsole:
    """
    Line-oriented walk through the landing, connect, schema and editor steps.

    Input and output are injectable so the console can be driven from tests.
    """

    def __init__(
        self,
        state: ConsoleState,
        client: QueryClient,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.state = state
        self.client = client
        self.pipeline = QueryPipeline(state, client)
        self.input = input_fn
        self.output = output_fn

    async def run(self) -> int:
        handlers = {
            Stage.LANDING: self._landing,
            Stage.CONNECT: self._connect,
            Stage.SCHEMA: self._schema,
            Stage.EDITOR: self._editor,
        }
        try:
            while True:
                keep_going = await handlers[self.state.stage]()
                if not keep_going:
                    return 0
        except (EOFError, KeyboardInterrupt):
            self.output("")
            return 0

    async def _landing(self) -> bool:
        self.output("=== Database Query ===")
        self.output("Connect, Query, and Manage Your Databases in One Place\n")
        for title, description in FEATURES:
            self.output(f"  * {title}: {description}")
        answer = self.input("\nPress Enter to get started (or 'quit'): ")
        if answer.strip().lower() == "quit":
            return False
        self.state.advance()
        self.output(f"\n=== Database Connections ===\n{CONNECT_HELP}")
        return True

    async def _connect(self) -> bool:
        registry = self.state.connections
        parts = self.input("connect> ").strip().split(maxsplit=2)
        if not parts:
            return True
        command, rest = parts[0].lower(), parts[1:]

        try:
            if command == "quit":
                return False
            elif command == "add":
                descriptor = registry.add()
                self.output(f"Added connection #{descriptor.id}")
            elif command == "set" and len(rest) == 2:
                if not registry.update(int(rest[0]), rest[1]):
                    self.output(f"No connection #{rest[0]}")
            elif command == "type" and len(rest) == 2:
                if not registry.set_type(int(rest[0]), rest[1]):
                    self.output(f"No connection #{rest[0]}")
            elif command == "rm" and len(rest) == 1:
                if not registry.remove(int(rest[0])):
                    self.output(f"No connection #{rest[0]}")
            elif command == "list":
                self.output(render_connections(registry))
            elif command == "connect":
                if not len(registry):
                    self.output('Click "add" to begin: at least one connection is required')
                    return True
                self.output("Connecting...")
                await registry.submit()
                self.state.advance()
                self.output(f"\n=== Database Schema ===\n{SCHEMA_HELP}")
            else:
                self.output(CONNECT_HELP)
        except ValueError as e:
            self.output(f"Error: {e}")
        return True

    async def _schema(self) -> bool:
        draft = self.state.schema
        parts = self.input("schema> ").strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()

        if command == "quit":
            return False
        elif command == "show":
            self.output(draft.text)
            self.output(f"{draft.character_count} characters")
        elif command == "edit":
            draft.update(read_block(self.input))
        elif command == "load" and len(parts) == 2:
            try:
                draft.update(Path(parts[1]).read_text(encoding="utf-8"))
            except UnicodeDecodeError as e:
                self.output(f"✗ {INVALID_SCHEMA_MESSAGE}: {parts[1]} is not UTF-8 ({e})")
            except OSError as e:
                self.output(f"Error reading {parts[1]}: {e}")
        elif command == "reset":
            draft.reset()
        elif command == "submit":
            if await draft.submit():
                self.state.advance()
                self.output(f"\n=== Query Editor ===\n{EDITOR_HELP}")
                self.output(render_status(self.state))
            else:
                self.output(f"✗ {draft.error}")
        else:
            self.output(SCHEMA_HELP)
        return True

    async def _editor(self) -> bool:
        parts = self.input("query> ").strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()

        if command == "quit":
            return False
        elif command == "show":
            self.output(self.state.editor_text)
        elif command == "edit":
            self.state.set_editor_text(read_block(self.input))
        elif command == "run":
            text = parts[1] if len(parts) == 2 else None
            entry = await self.pipeline.submit(text)
            self.output(render_entry(entry))
            if not entry.is_error and not self.state.table.is_empty:
                self.output(render_table(self.state.table))
        elif command == "db" and len(parts) == 2:
            try:
                self.state.select_database(parts[1])
            except ValueError as e:
                self.output(f"Error: {e}")
        elif command == "table":
            self.output(render_table(self.state.table))
        elif command == "history":
            self.output(render_history(self.state.history))
        elif command == "status":
            self.output(render_status(self.state))
        else:
            self.output(EDITOR_HELP)
        return True


async def _run_console(state: ConsoleState) -> int:
    async with QueryClient(state.settings.api_url, state.settings.http_timeout) as client:
        return await InteractiveConsole(state, client).run()


def cmd_console(args):
    """Run the interactive console."""
    try:
        state = ConsoleState(load_settings(args))
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return asyncio.run(_run_console(state))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="queryconsole",
        description="Database query console",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  queryconsole run "users older than 21"          # Generate, execute, print table
  queryconsole run "count users" --json            # Print the raw JSON result
  queryconsole validate-schema schema.json         # Check a schema draft
  queryconsole console                             # Interactive console
  queryconsole show-config                         # Effective configuration
        """,
    )
    parser.add_argument("--api-url", help="Origin of the generation/execution API")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Submit a single query")
    run_parser.add_argument("prompt", help="Free-form query text")
    run_parser.add_argument("--json", action="store_true", help="Print the raw JSON result")

    schema_parser = subparsers.add_parser("validate-schema", help="Validate a schema file")
    schema_parser.add_argument("file", help="Path to a JSON schema draft")

    subparsers.add_parser("console", help="Interactive console")
    subparsers.add_parser("show-config", help="Print effective configuration")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(console_mode=args.command == "console")

    commands = {
        "run": cmd_run,
        "validate-schema": cmd_validate_schema,
        "console": cmd_console,
        "show-config": cmd_show_config,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
