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
Driver state handler.

Owns the single driver connection and the optional explicit transaction,
and decides which of the two a statement runs against.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional

from neo4j import Auth, GraphDatabase

from .config import ConnectionConfig
from .errors import NotConnectedError
from .result import BoltResult
from .state import (
    NO_TRANSACTION,
    ConnectionState,
    OpenTransaction,
    StateMachine,
    TransactionState,
)


logger = logging.getLogger(__name__)

# Forces the driver to actually open a connection
VALIDATION_STATEMENT = "RETURN 1"

DriverFactory = Callable[[str, Optional[Auth]], Any]


def default_driver_factory(url: str, auth: Optional[Auth]) -> Any:
    """Create a neo4j driver for the given URL."""
    return GraphDatabase.driver(url, auth=auth)


class BoltStateHandler:
    """
    Handles interactions with the driver.

    Tracks the connection lifecycle through a StateMachine:
    connect/disconnect move between DISCONNECTED and CONNECTED,
    begin/commit/rollback move between CONNECTED and TX_OPEN.

    Usage:
        handler = BoltStateHandler()
        with handler.connected(ConnectionConfig()):
            result = handler.run_cypher("MATCH (n) RETURN count(n)", {})
    """

    def __init__(self, driver_factory: Optional[DriverFactory] = None):
        """
        Initialize the handler.

        Args:
            driver_factory: Callable taking (url, auth) and returning a
                driver. Defaults to neo4j.GraphDatabase.driver.
        """
        self._driver_factory = driver_factory or default_driver_factory
        self._state = StateMachine()

        self._driver: Any = None
        self._session: Any = None
        self._tx: TransactionState = NO_TRANSACTION

    @property
    def state(self) -> ConnectionState:
        """Get the current connection state."""
        return self._state.state

    def is_connected(self) -> bool:
        """Check if a session is open."""
        if self._state.is_disconnected() or self._session is None:
            return False
        return not self._session.closed()

    def is_transaction_open(self) -> bool:
        """Check if an explicit transaction is open."""
        return isinstance(self._tx, OpenTransaction)

    def connect(self, config: ConnectionConfig) -> None:
        """
        Open a driver and a session, and verify the connection.

        Credentials are checked before anything touches the network. Any
        failure afterwards tears everything down again and is re-raised.

        Raises:
            AlreadyConnectedError: If already connected.
            InvalidCredentialsError: If only one of username/password is set.
        """
        if not self.is_connected() and not self._state.is_disconnected():
            # Session closed underneath us, drop the stale references
            self._silent_disconnect()
        self._state.require_disconnected()

        auth = config.auth_token()

        try:
            self._driver = self._driver_factory(config.driver_url, auth)
            self._session = self._driver.session()
            self._session.run(VALIDATION_STATEMENT).consume()
        except BaseException:
            self._silent_disconnect()
            raise

        self._state.transition_to(ConnectionState.CONNECTED)
        logger.info(f"Connected to {config.driver_url}")

    def disconnect(self) -> None:
        """
        Close the session and the driver.

        Raises:
            NotConnectedError: If not connected.
        """
        if not self.is_connected():
            self._silent_disconnect()
            raise NotConnectedError("Not connected, nothing to disconnect from.")
        self._silent_disconnect()
        logger.info("Disconnected")

    def begin_transaction(self) -> None:
        """
        Open an explicit transaction on the session.

        Raises:
            NotConnectedError: If not connected.
            TransactionAlreadyOpenError: If a transaction is already open.
        """
        self._require_connected()
        self._state.require_no_transaction()

        handle = self._session.begin_transaction()
        self._tx = OpenTransaction(handle)
        self._state.transition_to(ConnectionState.TX_OPEN)
        logger.debug("Transaction opened")

    def commit_transaction(self) -> None:
        """
        Commit the open transaction.

        The transaction is gone afterwards even if the commit fails.

        Raises:
            NotConnectedError: If not connected.
            NoOpenTransactionError: If no transaction is open.
        """
        handle = self._open_transaction("commit")
        try:
            handle.commit()
        finally:
            self._end_transaction(handle)
        logger.debug("Transaction committed")

    def rollback_transaction(self) -> None:
        """
        Roll back the open transaction.

        Raises:
            NotConnectedError: If not connected.
            NoOpenTransactionError: If no transaction is open.
        """
        handle = self._open_transaction("rollback")
        try:
            handle.rollback()
        finally:
            self._end_transaction(handle)
        logger.debug("Transaction rolled back")

    def get_execution_context(self) -> Any:
        """
        Return what a statement should run against.

        Returns:
            The open transaction if there is one, otherwise the session.

        Raises:
            NotConnectedError: If not connected.
        """
        self._require_connected()
        if isinstance(self._tx, OpenTransaction):
            return self._tx.handle
        return self._session

    def run_cypher(self, cypher: str, params: Dict[str, Any]) -> Optional[BoltResult]:
        """
        Run a statement in the current execution context.

        Args:
            cypher: Statement text
            params: Parameter values bound for the statement

        Returns:
            The consumed result, or None for a blank statement.

        Raises:
            NotConnectedError: If not connected.
        """
        if not cypher.strip():
            return None

        runner = self.get_execution_context()
        logger.debug(f"Running: {cypher[:100]}")
        return BoltResult.from_driver(runner.run(cypher, dict(params)))

    def reset(self) -> None:
        """
        Tear everything down without raising.

        Safe to call at any time, including from exit hooks.
        """
        try:
            self._silent_disconnect()
        except Exception as e:
            logger.debug(f"Ignoring error during reset: {e}")

    @contextmanager
    def connected(self, config: ConnectionConfig) -> Iterator["BoltStateHandler"]:
        """Connect for the duration of a with-block; always released on exit."""
        self.connect(config)
        try:
            yield self
        finally:
            self.reset()

    def _require_connected(self) -> None:
        self._state.require_connected()
        if not self.is_connected():
            raise NotConnectedError()

    def _open_transaction(self, action: str) -> Any:
        self._require_connected()
        self._state.require_transaction(action)
        return self._tx.handle

    def _end_transaction(self, handle: Any) -> None:
        """Forget the transaction and go back to auto-commit mode."""
        self._tx = NO_TRANSACTION
        if self._state.is_in_transaction():
            self._state.transition_to(ConnectionState.CONNECTED)
        _close_quietly(handle, "transaction")

    def _silent_disconnect(self) -> None:
        """
        Drop transaction, session and driver in that order, without output.

        Each close is attempted even if an earlier one fails.
        """
        tx, session, driver = self._tx, self._session, self._driver
        self._tx = NO_TRANSACTION
        self._session = None
        self._driver = None
        self._state.reset()

        if isinstance(tx, OpenTransaction):
            _close_quietly(tx.handle, "transaction")
        if session is not None:
            _close_quietly(session, "session")
        if driver is not None:
            _close_quietly(driver, "driver")

    def __enter__(self) -> "BoltStateHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.reset()
        return False  # Don't suppress exceptions


def _close_quietly(resource: Any, what: str) -> None:
    try:
        resource.close()
    except Exception as e:
        logger.debug(f"Ignoring error closing {what}: {e}")
