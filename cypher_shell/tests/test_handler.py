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

"""Tests for the driver state handler."""

import pytest
from neo4j.exceptions import ServiceUnavailable

from cypher_shell.config import ConnectionConfig
from cypher_shell.errors import (
    AlreadyConnectedError,
    InvalidCredentialsError,
    NoOpenTransactionError,
    NotConnectedError,
    TransactionAlreadyOpenError,
)
from cypher_shell.state import ConnectionState


class TestConnect:
    """Test connect and disconnect."""

    def test_connect(self, handler, factory, config):
        handler.connect(config)

        assert handler.is_connected()
        assert handler.state == ConnectionState.CONNECTED
        assert factory.driver.url == "bolt://localhost:7687"
        # Validation statement forces the connection open
        assert factory.session.statements == [("RETURN 1", None)]

    def test_connect_twice_fails(self, connected_handler, config):
        with pytest.raises(AlreadyConnectedError):
            connected_handler.connect(config)
        assert connected_handler.is_connected()

    def test_disconnect(self, connected_handler, factory):
        connected_handler.disconnect()

        assert not connected_handler.is_connected()
        assert connected_handler.state == ConnectionState.DISCONNECTED
        assert factory.session.closed()
        assert factory.driver.closed

    def test_disconnect_twice_fails(self, connected_handler):
        connected_handler.disconnect()
        with pytest.raises(NotConnectedError):
            connected_handler.disconnect()

    def test_disconnect_when_never_connected(self, handler, factory):
        with pytest.raises(NotConnectedError):
            handler.disconnect()
        assert factory.drivers == []

    def test_connect_disconnect_cycles(self, handler, factory, config):
        for _ in range(3):
            handler.connect(config)
            assert handler.is_connected()
            handler.disconnect()
            assert not handler.is_connected()
        assert len(factory.drivers) == 3
        assert all(d.closed for d in factory.drivers)

    def test_disconnect_closes_driver_when_session_close_fails(self, connected_handler, factory):
        factory.session_close_error = RuntimeError("boom")

        connected_handler.disconnect()

        assert factory.driver.closed
        assert connected_handler.state == ConnectionState.DISCONNECTED

    def test_disconnect_closes_transaction_then_session_then_driver(self, connected_handler, factory):
        connected_handler.begin_transaction()

        connected_handler.disconnect()

        assert factory.close_log == ["transaction", "session", "driver"]

    def test_disconnect_when_driver_close_fails(self, connected_handler, factory):
        factory.driver_close_error = RuntimeError("boom")

        connected_handler.disconnect()

        assert factory.close_log == ["session", "driver"]
        assert connected_handler.state == ConnectionState.DISCONNECTED
        assert not connected_handler.is_connected()

    def test_session_closed_underneath(self, connected_handler, factory, config):
        factory.session.close()

        assert not connected_handler.is_connected()
        # Reconnect works without an explicit disconnect
        connected_handler.connect(config)
        assert connected_handler.is_connected()
        assert factory.drivers[0].closed


class TestFailedConnect:
    """Test that a failed connect leaves nothing behind."""

    def test_validation_failure_tears_down(self, handler, factory, config):
        factory.responses["RETURN 1"] = ServiceUnavailable("server down")

        with pytest.raises(ServiceUnavailable):
            handler.connect(config)

        assert handler.state == ConnectionState.DISCONNECTED
        assert not handler.is_connected()
        assert factory.session.closed()
        assert factory.driver.closed

    def test_reconnect_after_failure(self, handler, factory, config):
        factory.responses["RETURN 1"] = ServiceUnavailable("server down")
        with pytest.raises(ServiceUnavailable):
            handler.connect(config)

        factory.responses["RETURN 1"] = [{"1": 1}]
        handler.connect(config)

        assert handler.is_connected()
        assert len(factory.drivers) == 2

    def test_driver_creation_failure(self, config):
        from cypher_shell.handler import BoltStateHandler

        def broken_factory(url, auth):
            raise ServiceUnavailable("no route")

        handler = BoltStateHandler(driver_factory=broken_factory)
        with pytest.raises(ServiceUnavailable):
            handler.connect(config)
        assert handler.state == ConnectionState.DISCONNECTED


class TestCredentials:
    """Test the credential rule applied before connecting."""

    def test_no_auth(self, handler, factory):
        handler.connect(ConnectionConfig(username="", password=""))
        assert factory.driver.auth is None

    def test_basic_auth(self, handler, factory):
        handler.connect(ConnectionConfig(username="u", password="p"))
        auth = factory.driver.auth
        assert auth.scheme == "basic"
        assert auth.principal == "u"
        assert auth.credentials == "p"

    def test_username_without_password(self, handler, factory):
        with pytest.raises(InvalidCredentialsError, match="username but no password"):
            handler.connect(ConnectionConfig(username="u", password=""))
        assert factory.drivers == []

    def test_password_without_username(self, handler, factory):
        with pytest.raises(InvalidCredentialsError, match="password but no username"):
            handler.connect(ConnectionConfig(username="", password="p"))
        assert factory.drivers == []


class TestTransactions:
    """Test begin, commit and rollback."""

    def test_begin(self, connected_handler):
        connected_handler.begin_transaction()

        assert connected_handler.is_transaction_open()
        assert connected_handler.state == ConnectionState.TX_OPEN

    def test_begin_twice_fails(self, connected_handler):
        connected_handler.begin_transaction()
        with pytest.raises(TransactionAlreadyOpenError):
            connected_handler.begin_transaction()
        assert connected_handler.is_transaction_open()

    def test_begin_when_disconnected(self, handler):
        with pytest.raises(NotConnectedError):
            handler.begin_transaction()

    def test_commit(self, connected_handler, factory):
        connected_handler.begin_transaction()
        connected_handler.commit_transaction()

        tx = factory.session.transactions[0]
        assert tx.committed
        assert tx.closed
        assert not connected_handler.is_transaction_open()
        assert connected_handler.state == ConnectionState.CONNECTED

    def test_rollback(self, connected_handler, factory):
        connected_handler.begin_transaction()
        connected_handler.rollback_transaction()

        tx = factory.session.transactions[0]
        assert tx.rolled_back
        assert not tx.committed
        assert not connected_handler.is_transaction_open()

    def test_commit_without_transaction(self, connected_handler):
        with pytest.raises(NoOpenTransactionError, match="to commit"):
            connected_handler.commit_transaction()

    def test_rollback_without_transaction(self, connected_handler):
        with pytest.raises(NoOpenTransactionError, match="to rollback"):
            connected_handler.rollback_transaction()

    def test_commit_when_disconnected(self, handler):
        with pytest.raises(NotConnectedError):
            handler.commit_transaction()

    def test_rollback_when_disconnected(self, handler):
        with pytest.raises(NotConnectedError):
            handler.rollback_transaction()

    def test_failed_commit_ends_transaction(self, connected_handler, factory):
        factory.commit_error = ServiceUnavailable("lost")
        connected_handler.begin_transaction()

        with pytest.raises(ServiceUnavailable):
            connected_handler.commit_transaction()

        assert not connected_handler.is_transaction_open()
        assert connected_handler.state == ConnectionState.CONNECTED

    def test_disconnect_with_open_transaction(self, connected_handler, factory):
        connected_handler.begin_transaction()
        tx = factory.session.transactions[0]

        connected_handler.disconnect()

        assert tx.closed
        assert not connected_handler.is_transaction_open()
        assert connected_handler.state == ConnectionState.DISCONNECTED


class TestExecutionContext:
    """Test which runner a statement goes to."""

    def test_session_without_transaction(self, connected_handler, factory):
        assert connected_handler.get_execution_context() is factory.session

    def test_transaction_when_open(self, connected_handler, factory):
        connected_handler.begin_transaction()
        assert connected_handler.get_execution_context() is factory.session.transactions[0]

    def test_disconnected(self, handler):
        with pytest.raises(NotConnectedError):
            handler.get_execution_context()

    def test_statements_follow_transaction_state(self, connected_handler, factory):
        connected_handler.begin_transaction()
        connected_handler.run_cypher("CREATE (n)", {})
        connected_handler.commit_transaction()
        connected_handler.run_cypher("MATCH (n) RETURN n", {})

        tx = factory.session.transactions[0]
        assert tx.statements == [("CREATE (n)", {})]
        assert factory.session.statements[-1] == ("MATCH (n) RETURN n", {})

    def test_run_cypher_returns_result(self, connected_handler, factory):
        factory.responses["RETURN $x AS x"] = [{"x": 5}]

        result = connected_handler.run_cypher("RETURN $x AS x", {"x": 5})

        assert result.keys == ["x"]
        assert result.records == [{"x": 5}]
        assert factory.session.statements[-1] == ("RETURN $x AS x", {"x": 5})

    def test_blank_statement(self, connected_handler, factory):
        assert connected_handler.run_cypher("   ", {}) is None
        assert len(factory.session.statements) == 1  # Validation only


class TestReset:
    """Test best-effort teardown."""

    def test_reset_when_disconnected(self, handler):
        handler.reset()
        assert handler.state == ConnectionState.DISCONNECTED

    def test_reset_twice(self, connected_handler, factory):
        connected_handler.reset()
        connected_handler.reset()
        assert factory.driver.closed

    def test_reset_swallows_close_errors(self, connected_handler, factory):
        factory.session_close_error = RuntimeError("half torn down")
        connected_handler.begin_transaction()

        connected_handler.reset()

        assert connected_handler.state == ConnectionState.DISCONNECTED
        assert factory.driver.closed

    def test_reset_closes_transaction_then_session_then_driver(self, connected_handler, factory):
        connected_handler.begin_transaction()

        connected_handler.reset()

        assert factory.close_log == ["transaction", "session", "driver"]
        assert connected_handler.state == ConnectionState.DISCONNECTED

    def test_reset_when_driver_close_fails(self, connected_handler, factory):
        factory.driver_close_error = RuntimeError("boom")
        connected_handler.begin_transaction()

        connected_handler.reset()

        assert factory.close_log == ["transaction", "session", "driver"]
        assert connected_handler.state == ConnectionState.DISCONNECTED

    def test_context_manager(self, handler, factory, config):
        with handler:
            handler.connect(config)
        assert not handler.is_connected()
        assert factory.driver.closed

    def test_connected_block_releases_on_error(self, handler, factory, config):
        with pytest.raises(RuntimeError):
            with handler.connected(config):
                assert handler.is_connected()
                raise RuntimeError("inside")
        assert handler.state == ConnectionState.DISCONNECTED
        assert factory.driver.closed
