#!/usr/bin/env python
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
Command-line interface for the Cypher shell.

Usage:
    cypher-shell [-a ADDRESS] [-u USERNAME] [-p PASSWORD] [--format FORMAT] [cypher]
"""

import argparse
import atexit
import logging
import os
import sys
from typing import List, Optional, TextIO

from .commands import CommandHelper
from .config import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_ADDRESS,
    ENV_PASSWORD,
    ENV_USERNAME,
    ConnectionConfig,
)
from .errors import STATEMENT_ERRORS, CommandError, ExitError
from .formatter import OutputFormat, PrettyPrinter
from .shell import CypherShell

PROMPT = "neo4j> "
TX_PROMPT = "neo4j# "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cypher-shell",
        description="A command line shell where you can execute Cypher against a Neo4j server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  cypher-shell                                  Interactive shell on localhost
  cypher-shell -a bolt://db:7687 -u neo4j -p secret
  cypher-shell "MATCH (n) RETURN count(n)"      Run one statement and exit

Credentials default to ${ENV_USERNAME} and ${ENV_PASSWORD}.
Type :help inside the shell for the list of commands.
        """
    )

    parser.add_argument(
        "-a", "--address",
        default=os.environ.get(ENV_ADDRESS, f"{DEFAULT_HOST}:{DEFAULT_PORT}"),
        help=f"Address and port to connect to (default: {DEFAULT_HOST}:{DEFAULT_PORT})"
    )
    parser.add_argument(
        "-u", "--username",
        default=os.environ.get(ENV_USERNAME, ""),
        help=f"Username to connect as (default: ${ENV_USERNAME})"
    )
    parser.add_argument(
        "-p", "--password",
        default=os.environ.get(ENV_PASSWORD, ""),
        help=f"Password to connect with (default: ${ENV_PASSWORD})"
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.VERBOSE.value,
        help="Output format (default: verbose)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log connection events"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log statements and ignored cleanup errors"
    )
    parser.add_argument(
        "cypher",
        nargs="?",
        help="Statement to execute; the shell exits afterwards"
    )
    return parser


def configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def run_line(shell: CypherShell, line: str, err: Optional[TextIO] = None) -> bool:
    """
    Execute one line, reporting operational errors.

    Returns:
        True if the line succeeded.

    Raises:
        ExitError: If the line asked the shell to exit.
    """
    err = err or sys.stderr
    try:
        shell.execute(line)
        return True
    except ExitError:
        raise
    except CommandError as e:
        print(e.message, file=err)
    except STATEMENT_ERRORS as e:
        print(str(e), file=err)
    return False


def repl(shell: CypherShell, err: Optional[TextIO] = None) -> int:
    """
    Read and execute lines until :exit or end of input.

    Returns:
        Exit code.
    """
    err = err or sys.stderr
    while True:
        prompt = TX_PROMPT if shell.is_transaction_open() else PROMPT
        try:
            line = input(prompt)
        except EOFError:
            print(file=err)
            return 0
        except KeyboardInterrupt:
            # Discard the current line
            print(file=err)
            continue

        line = line.strip()
        if line.endswith(";"):
            line = line[:-1].rstrip()
        if not line:
            continue

        try:
            run_line(shell, line, err)
        except ExitError as e:
            return e.code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.debug)

    try:
        config = ConnectionConfig.from_address(
            args.address, username=args.username, password=args.password
        )
    except ValueError as e:
        print(f"Invalid address {args.address!r}: {e}", file=sys.stderr)
        return 1

    printer = PrettyPrinter(OutputFormat(args.format))
    shell = CypherShell(printer=printer)
    CommandHelper.default(shell, config)
    atexit.register(shell.reset)

    with shell:
        try:
            shell.connect(config)
        except CommandError as e:
            print(e.message, file=sys.stderr)
            return 1
        except STATEMENT_ERRORS as e:
            print(f"Unable to connect to {config.driver_url}: {e}", file=sys.stderr)
            return 1

        try:
            if args.cypher is not None:
                return 0 if run_line(shell, args.cypher) else 1
            return repl(shell)
        except ExitError as e:
            return e.code
        finally:
            if args.verbose:
                print("Bye!", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
