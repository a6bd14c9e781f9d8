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
Error types raised by the shell.

Every operational failure the REPL reports and recovers from derives from
CommandError. Failures raised by the driver while running a statement are
not wrapped; STATEMENT_ERRORS lists them for callers that catch both.
"""

from neo4j.exceptions import DriverError, Neo4jError


class CommandError(Exception):
    """Base exception for shell-level failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotConnectedError(CommandError):
    """Raised when an operation needs a connection and there is none."""

    def __init__(self, message: str = "Not connected to Neo4j"):
        super().__init__(message)


class AlreadyConnectedError(CommandError):
    """Raised by connect while a connection is open."""

    def __init__(self, message: str = "Already connected. Call :disconnect first."):
        super().__init__(message)


class InvalidCredentialsError(CommandError):
    """Username and password must be given together or not at all."""


class TransactionAlreadyOpenError(CommandError):
    def __init__(self, message: str = "There is already an open transaction"):
        super().__init__(message)


class NoOpenTransactionError(CommandError):
    def __init__(self, action: str):
        super().__init__(f"There is no open transaction to {action}")


class ParameterEvaluationError(CommandError):
    def __init__(self, message: str = "Failed to set value of parameter"):
        super().__init__(message)


class ExitError(CommandError):
    """Raised to end the shell session with the given exit code."""

    def __init__(self, code: int = 0):
        self.code = code
        super().__init__(f"Exit with code {code}")


# Statement failures come straight from the driver. Its client-side checks
# (parameter values it cannot send, malformed arguments) raise plain
# ValueError and TypeError.
STATEMENT_ERRORS = (Neo4jError, DriverError, ValueError, TypeError)
