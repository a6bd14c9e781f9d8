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
Fake driver collaborators.

They implement only what the shell uses: run/keys/iteration/consume on
results, a summary with counters, begin/commit/rollback/close on
transactions and sessions.
"""

import io

import pytest

from cypher_shell.commands import CommandHelper
from cypher_shell.config import ConnectionConfig
from cypher_shell.formatter import PrettyPrinter
from cypher_shell.handler import BoltStateHandler
from cypher_shell.shell import CypherShell


class FakeSummary:
    def __init__(self, counters=None):
        self.counters = counters


class FakeResult:
    def __init__(self, records=None, counters=None):
        self._records = list(records or [])
        self._counters = counters
        self.consumed = False

    def keys(self):
        return list(self._records[0].keys()) if self._records else []

    def __iter__(self):
        return iter(self._records)

    def consume(self):
        self.consumed = True
        return FakeSummary(self._counters)


class FakeRunner:
    """Records statements and answers them from the factory's response table."""

    def __init__(self, factory):
        self._factory = factory
        self.statements = []

    def run(self, query, parameters=None):
        self.statements.append((query, parameters))
        response = self._factory.responses.get(query, [])
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FakeResult):
            return response
        return FakeResult(response)


class FakeTransaction(FakeRunner):
    def __init__(self, factory):
        super().__init__(factory)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def commit(self):
        if self._factory.commit_error is not None:
            raise self._factory.commit_error
        self.committed = True
        self.closed = True

    def rollback(self):
        self.rolled_back = True
        self.closed = True

    def close(self):
        self._factory.close_log.append("transaction")
        self.closed = True


class FakeSession(FakeRunner):
    def __init__(self, factory):
        super().__init__(factory)
        self.transactions = []
        self._closed = False

    def begin_transaction(self):
        tx = FakeTransaction(self._factory)
        self.transactions.append(tx)
        return tx

    def closed(self):
        return self._closed

    def close(self):
        self._factory.close_log.append("session")
        self._closed = True
        if self._factory.session_close_error is not None:
            raise self._factory.session_close_error


class FakeDriver:
    def __init__(self, factory, url, auth):
        self._factory = factory
        self.url = url
        self.auth = auth
        self.sessions = []
        self.closed = False

    def session(self):
        session = FakeSession(self._factory)
        self.sessions.append(session)
        return session

    def close(self):
        self._factory.close_log.append("driver")
        self.closed = True
        if self._factory.driver_close_error is not None:
            raise self._factory.driver_close_error


class FakeDriverFactory:
    """
    Stands in for GraphDatabase.driver.

    Attributes:
        responses: statement text -> list of records, FakeResult or exception
        drivers: every driver created, in order
        close_log: "transaction", "session" and "driver" in the order closed
    """

    def __init__(self):
        self.responses = {"RETURN 1": [{"1": 1}]}
        self.drivers = []
        self.commit_error = None
        self.session_close_error = None
        self.driver_close_error = None
        self.close_log = []

    def __call__(self, url, auth):
        driver = FakeDriver(self, url, auth)
        self.drivers.append(driver)
        return driver

    @property
    def driver(self):
        return self.drivers[-1]

    @property
    def session(self):
        return self.driver.sessions[-1]


@pytest.fixture
def factory():
    return FakeDriverFactory()


@pytest.fixture
def config():
    return ConnectionConfig()


@pytest.fixture
def handler(factory):
    return BoltStateHandler(driver_factory=factory)


@pytest.fixture
def connected_handler(handler, config):
    handler.connect(config)
    return handler


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def shell(handler, config, out):
    shell = CypherShell(handler=handler, printer=PrettyPrinter(), out=out)
    CommandHelper.default(shell, config, out)
    return shell


@pytest.fixture
def connected_shell(shell, config):
    shell.connect(config)
    return shell
