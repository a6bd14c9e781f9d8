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
Interactive Cypher shell for Neo4j.

This package implements a command-line client that runs Cypher statements
against a Neo4j server over Bolt, with explicit transactions, bound
parameters and tabular output.

Usage:
    from cypher_shell import CypherShell, ConnectionConfig

    with CypherShell() as shell:
        shell.connect(ConnectionConfig(username="neo4j", password="secret"))
        shell.set("name", "'Alice'")
        shell.begin_transaction()
        shell.execute("CREATE (:Person {name: $name})")
        shell.commit_transaction()

Or from a terminal:
    cypher-shell -a bolt://localhost:7687 -u neo4j -p secret
"""

from .shell import CypherShell
from .handler import BoltStateHandler
from .config import ConnectionConfig
from .result import BoltResult, SummaryCounters
from .formatter import OutputFormat, PrettyPrinter
from .commands import Command, CommandHelper
from .state import ConnectionState, StateMachine
from .errors import (
    CommandError,
    NotConnectedError,
    AlreadyConnectedError,
    InvalidCredentialsError,
    TransactionAlreadyOpenError,
    NoOpenTransactionError,
    ParameterEvaluationError,
    ExitError,
)

__version__ = "0.1.0"

__all__ = [
    # Shell
    "CypherShell",
    "Command",
    "CommandHelper",
    # Connection handling
    "BoltStateHandler",
    "ConnectionConfig",
    # State management
    "ConnectionState",
    "StateMachine",
    # Results
    "BoltResult",
    "SummaryCounters",
    "OutputFormat",
    "PrettyPrinter",
    # Errors
    "CommandError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "InvalidCredentialsError",
    "TransactionAlreadyOpenError",
    "NoOpenTransactionError",
    "ParameterEvaluationError",
    "ExitError",
]
