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
Shell connection state machine.

Defines the connection states, valid transitions and the guards that turn
an illegal request into a typed error.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Union

from .errors import (
    AlreadyConnectedError,
    NoOpenTransactionError,
    NotConnectedError,
    TransactionAlreadyOpenError,
)


class ConnectionState(Enum):
    """
    Shell connection states.

    State diagram:
        DISCONNECTED → CONNECTED ⇄ TX_OPEN
              ↑            │          │
              └────────────┴──────────┘
    """
    DISCONNECTED = auto()  # No driver, no session
    CONNECTED = auto()     # Session open, statements run in auto-commit mode
    TX_OPEN = auto()       # Explicit transaction open on the session


# Valid state transitions
VALID_TRANSITIONS = {
    ConnectionState.DISCONNECTED: {ConnectionState.CONNECTED},
    ConnectionState.CONNECTED: {
        ConnectionState.TX_OPEN,
        ConnectionState.DISCONNECTED
    },
    ConnectionState.TX_OPEN: {
        ConnectionState.CONNECTED,     # After commit/rollback
        ConnectionState.DISCONNECTED   # Teardown with a transaction open
    },
}


@dataclass(frozen=True)
class NoTransaction:
    """No explicit transaction is open."""


@dataclass(frozen=True)
class OpenTransaction:
    """An explicit transaction wrapping a driver transaction handle."""
    handle: Any


TransactionState = Union[NoTransaction, OpenTransaction]

NO_TRANSACTION = NoTransaction()


class StateMachine:
    """
    Manages shell connection state transitions.
    """

    def __init__(self):
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        """Get current state."""
        return self._state

    def can_transition_to(self, new_state: ConnectionState) -> bool:
        """Check if transition to new_state is valid."""
        return new_state in VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, new_state: ConnectionState) -> None:
        """
        Transition to a new state.

        Raises:
            ValueError: If the transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise ValueError(
                f"Invalid state transition: {self._state.name} → {new_state.name}"
            )
        self._state = new_state

    def reset(self) -> None:
        """Force the DISCONNECTED state (used by teardown)."""
        self._state = ConnectionState.DISCONNECTED

    def is_disconnected(self) -> bool:
        return self._state == ConnectionState.DISCONNECTED

    def is_in_transaction(self) -> bool:
        """Check if an explicit transaction is open."""
        return self._state == ConnectionState.TX_OPEN

    def require_disconnected(self) -> None:
        if not self.is_disconnected():
            raise AlreadyConnectedError()

    def require_connected(self) -> None:
        if self.is_disconnected():
            raise NotConnectedError()

    def require_no_transaction(self) -> None:
        if self.is_in_transaction():
            raise TransactionAlreadyOpenError()

    def require_transaction(self, action: str) -> None:
        """
        Raises:
            NoOpenTransactionError: If no transaction is open; ``action``
                names what was attempted (commit, rollback).
        """
        if not self.is_in_transaction():
            raise NoOpenTransactionError(action)
