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
Statement dispatcher.

Decides whether a line of input is a shell command or a Cypher statement,
and keeps the parameters bound for every statement.
"""

import logging
import re
import sys
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, TextIO

from .config import ConnectionConfig
from .errors import NotConnectedError, ParameterEvaluationError
from .formatter import PrettyPrinter
from .handler import BoltStateHandler
from .result import BoltResult

if TYPE_CHECKING:
    from .commands import CommandHelper


logger = logging.getLogger(__name__)

# Command name followed by a free-form argument tail
COMMAND_PATTERN = re.compile(r"\s*(?P<name>\S+)\b(?P<args>.*?)\s*")


class CypherShell:
    """
    A possibly interactive shell for evaluating Cypher statements.

    Statements run against whatever the handler currently selects (the open
    transaction or the session), with all bound parameters supplied.
    Parameters live as long as the shell, across reconnects.

    Usage:
        with CypherShell() as shell:
            shell.connect(ConnectionConfig())
            shell.set("name", "'Alice'")
            shell.execute("MATCH (p:Person {name: $name}) RETURN p")
    """

    def __init__(
        self,
        handler: Optional[BoltStateHandler] = None,
        printer: Optional[PrettyPrinter] = None,
        out: Optional[TextIO] = None
    ):
        self._handler = handler or BoltStateHandler()
        self._printer = printer or PrettyPrinter()
        self._out = out or sys.stdout
        self._params: Dict[str, Any] = {}
        self.command_helper: Optional["CommandHelper"] = None

    @property
    def printer(self) -> PrettyPrinter:
        return self._printer

    def execute(self, line: str) -> None:
        """
        Execute a line of input.

        Shell commands run without a connection; anything else is sent to
        the server as Cypher.

        Raises:
            NotConnectedError: If the line is a statement and not connected.
            CommandError: From the command that was run.
        """
        command = self._get_command(line)
        if command is not None:
            command()
            return

        if not self.is_connected():
            raise NotConnectedError()

        self._execute_cypher(line)

    def _execute_cypher(self, cypher: str) -> None:
        result = self._handler.run_cypher(cypher, self._params)
        if result is not None:
            self._print(self._printer.format(result))

    def _get_command(self, line: str) -> Optional[Callable[[], None]]:
        """Return a callable running the matching command, if any."""
        match = COMMAND_PATTERN.fullmatch(line)
        if self.command_helper is None or match is None:
            return None

        command = self.command_helper.get_command(match.group("name"))
        if command is None:
            return None

        args = match.group("args")
        return lambda: command.execute(args)

    def _print(self, text: str) -> None:
        if text:
            print(text, file=self._out)

    def connect(self, config: ConnectionConfig) -> None:
        self._handler.connect(config)

    def disconnect(self) -> None:
        self._handler.disconnect()

    def is_connected(self) -> bool:
        return self._handler.is_connected()

    def begin_transaction(self) -> None:
        self._handler.begin_transaction()

    def commit_transaction(self) -> None:
        self._handler.commit_transaction()

    def rollback_transaction(self) -> None:
        self._handler.rollback_transaction()

    def is_transaction_open(self) -> bool:
        return self._handler.is_transaction_open()

    def set(self, name: str, value_expression: str) -> Any:
        """
        Evaluate an expression on the server and bind it as a parameter.

        The expression may refer to parameters bound earlier.

        Args:
            name: Parameter name
            value_expression: Cypher expression giving the value

        Returns:
            The value stored under ``name``.

        Raises:
            ParameterEvaluationError: If the evaluation does not return exactly one row.
        """
        result = self._evaluate(name, value_expression)
        value = result.records[0].get(name)
        self._params[name] = value
        logger.debug(f"Parameter {name} set to {value!r}")
        return value

    def _evaluate(self, name: str, value_expression: str) -> BoltResult:
        cypher = f"RETURN {value_expression} AS {name}"
        result = self._handler.run_cypher(cypher, self._params)
        if result is None or result.row_count() != 1:
            raise ParameterEvaluationError()
        return result

    def remove(self, name: str) -> Optional[Any]:
        """Unbind a parameter, returning its previous value (None if unset)."""
        return self._params.pop(name, None)

    def get_all(self) -> Dict[str, Any]:
        """Return the live parameter mapping (not a copy)."""
        return self._params

    def reset(self) -> None:
        """Drop the connection without raising."""
        self._handler.reset()

    def __enter__(self) -> "CypherShell":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.reset()
        return False
