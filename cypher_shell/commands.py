# Copyright 2025-2026 Gregorio Elias Roecker Momm and cypher-shell contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Built-in shell commands.

Commands start with a colon and are handled locally:
    :help [command]          list commands, or describe one
    :exit                    leave the shell
    :connect / :disconnect   open or close the connection
    :begin / :commit / :rollback   explicit transactions
    :param name expression   bind a parameter
    :params                  list bound parameters
    :forget name             unbind a parameter
"""

import sys
from typing import Dict, List, Optional, TextIO

from .config import ConnectionConfig
from .errors import CommandError, ExitError
from .shell import CypherShell


class Command:
    """
    Base class for shell commands.

    Subclasses set the class attributes and implement execute().
    """
    name = ""
    aliases: List[str] = []
    description = ""
    usage = ""
    help = ""

    def __init__(self, shell: CypherShell, out: Optional[TextIO] = None):
        self._shell = shell
        self._out = out or sys.stdout

    def execute(self, args: str) -> None:
        raise NotImplementedError

    def _print(self, text: str) -> None:
        print(text, file=self._out)

    def _usage_error(self) -> CommandError:
        usage = f"{self.name} {self.usage}".rstrip()
        return CommandError(f"Incorrect number of arguments.\nusage: {usage}")

    def _require_no_args(self, args: str) -> None:
        if args.strip():
            raise self._usage_error()


class Exit(Command):
    name = ":exit"
    aliases = [":quit"]
    description = "Exit the shell"
    help = "Exit the shell. Any open transaction is rolled back."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        raise ExitError(0)


class Help(Command):
    name = ":help"
    description = "Show this help message"
    usage = "[command]"
    help = "Show the list of available commands or help for a specific command."

    def __init__(self, shell: CypherShell, helper: "CommandHelper", out: Optional[TextIO] = None):
        super().__init__(shell, out)
        self._helper = helper

    def execute(self, args: str) -> None:
        name = args.strip()
        if not name:
            self._print_all()
            return

        if not name.startswith(":"):
            name = f":{name}"
        command = self._helper.get_command(name)
        if command is None:
            raise CommandError(f"No such command: {name}")

        self._print(f"\nusage: {command.name} {command.usage}".rstrip())
        self._print(f"\n{command.help}\n")

    def _print_all(self) -> None:
        commands = self._helper.all_commands()
        width = max(len(c.name) for c in commands)
        self._print("\nAvailable commands:")
        for command in commands:
            self._print(f"  {command.name.ljust(width)}  {command.description}")
        self._print("\nFor help on a specific command type:")
        self._print("    :help command\n")


class Connect(Command):
    name = ":connect"
    description = "Connect to a database"
    help = "Connect to the database given on the command line."

    def __init__(self, shell: CypherShell, config: ConnectionConfig, out: Optional[TextIO] = None):
        super().__init__(shell, out)
        self._config = config

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        self._shell.connect(self._config)


class Disconnect(Command):
    name = ":disconnect"
    description = "Disconnect from database"
    help = "Disconnect from the database. Any open transaction is rolled back."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        self._shell.disconnect()


class Begin(Command):
    name = ":begin"
    description = "Open a transaction"
    help = "Start a transaction which will remain open until :commit or :rollback is called."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        self._shell.begin_transaction()


class Commit(Command):
    name = ":commit"
    description = "Commit the currently open transaction"
    help = "Commit and close the currently open transaction."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        self._shell.commit_transaction()


class Rollback(Command):
    name = ":rollback"
    description = "Rollback the currently open transaction"
    help = "Roll back and close the currently open transaction."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        self._shell.rollback_transaction()


class Param(Command):
    name = ":param"
    aliases = [":set"]
    description = "Set the value of a query parameter"
    usage = "name expression"
    help = (
        "Set the specified query parameter to the value of the expression. "
        "The expression is evaluated by the server and may use parameters set before.\n"
        "Example: :param limit 2 * 5"
    )

    def execute(self, args: str) -> None:
        parts = args.strip().split(None, 1)
        if len(parts) != 2:
            raise self._usage_error()
        name, expression = parts
        self._shell.set(name, expression)


class Params(Command):
    name = ":params"
    aliases = [":env"]
    description = "Print all currently set query parameters and their values"
    help = "Print a table of all currently set query parameters and their values."

    def execute(self, args: str) -> None:
        self._require_no_args(args)
        params = self._shell.get_all()
        if not params:
            return
        printer = self._shell.printer
        width = max(len(name) for name in params)
        for name in sorted(params):
            self._print(f"{name.ljust(width)}: {printer.format_value(params[name])}")


class Forget(Command):
    name = ":forget"
    aliases = [":unset"]
    description = "Unset a query parameter"
    usage = "name"
    help = "Remove the named query parameter. Nothing happens if it is not set."

    def execute(self, args: str) -> None:
        parts = args.split()
        if len(parts) != 1:
            raise self._usage_error()
        self._shell.remove(parts[0])


class CommandHelper:
    """
    Registry of shell commands by name and alias.
    """

    def __init__(self):
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        """
        Register a command under its name and aliases.

        Raises:
            ValueError: If a name or alias is already taken.
        """
        for name in [command.name] + list(command.aliases):
            if name in self._commands:
                raise ValueError(f"Command name already registered: {name}")
        for name in [command.name] + list(command.aliases):
            self._commands[name] = command
        self._ordered.append(command)

    def get_command(self, name: str) -> Optional[Command]:
        """Look up a command by name or alias."""
        return self._commands.get(name)

    def all_commands(self) -> List[Command]:
        """Registered commands in registration order."""
        return list(self._ordered)

    @classmethod
    def default(
        cls,
        shell: CypherShell,
        config: ConnectionConfig,
        out: Optional[TextIO] = None
    ) -> "CommandHelper":
        """Build the standard command set and install it on the shell."""
        helper = cls()
        helper.register(Help(shell, helper, out))
        helper.register(Exit(shell, out))
        helper.register(Connect(shell, config, out))
        helper.register(Disconnect(shell, out))
        helper.register(Begin(shell, out))
        helper.register(Commit(shell, out))
        helper.register(Rollback(shell, out))
        helper.register(Param(shell, out))
        helper.register(Params(shell, out))
        helper.register(Forget(shell, out))
        shell.command_helper = helper
        return helper
