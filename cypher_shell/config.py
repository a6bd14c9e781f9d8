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
Connection settings.

Holds the address and credentials used to open a connection, and turns the
credentials into a driver auth token.
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

from neo4j import Auth, basic_auth

from .errors import InvalidCredentialsError


DEFAULT_SCHEME = "bolt"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 7687

ENV_ADDRESS = "NEO4J_ADDRESS"
ENV_USERNAME = "NEO4J_USERNAME"
ENV_PASSWORD = "NEO4J_PASSWORD"


@dataclass
class ConnectionConfig:
    """
    Where to connect and as whom.

    Attributes:
        scheme: URI scheme understood by the driver (bolt, neo4j, ...)
        host: Server host name
        port: Server port (default: 7687, standard Bolt port)
        username: Empty for no authentication
        password: Empty for no authentication
    """
    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: str = ""
    password: str = ""

    @property
    def driver_url(self) -> str:
        """URL handed to the driver."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def from_address(
        cls,
        address: str,
        username: str = "",
        password: str = ""
    ) -> "ConnectionConfig":
        """
        Build a config from an address like ``bolt://host:7687``.

        Scheme and port are optional and fall back to the defaults.

        Raises:
            ValueError: If the port is not a number.
        """
        address = address.strip()
        if "://" not in address:
            address = f"{DEFAULT_SCHEME}://{address}"

        parts = urlsplit(address)
        # .port raises ValueError on garbage
        port = parts.port

        return cls(
            scheme=parts.scheme or DEFAULT_SCHEME,
            host=parts.hostname or DEFAULT_HOST,
            port=port if port is not None else DEFAULT_PORT,
            username=username,
            password=password,
        )

    @classmethod
    def from_env(cls) -> "ConnectionConfig":
        """Build a config from NEO4J_ADDRESS, NEO4J_USERNAME and NEO4J_PASSWORD."""
        return cls.from_address(
            os.environ.get(ENV_ADDRESS, f"{DEFAULT_HOST}:{DEFAULT_PORT}"),
            username=os.environ.get(ENV_USERNAME, ""),
            password=os.environ.get(ENV_PASSWORD, ""),
        )

    def auth_token(self) -> Optional[Auth]:
        """
        Turn the credentials into a driver auth token.

        Both empty means no authentication, both set means basic auth.

        Raises:
            InvalidCredentialsError: If only one of username and password is set.
        """
        if not self.username and not self.password:
            return None
        if self.username and self.password:
            return basic_auth(self.username, self.password)
        if not self.username:
            raise InvalidCredentialsError("Specified password but no username")
        raise InvalidCredentialsError("Specified username but no password")
