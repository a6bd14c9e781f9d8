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
Result formatting for terminal output.

Converts a BoltResult into text: a boxed table in verbose mode, comma
separated lines in plain mode. Graph values are written in Cypher-like
notation:
    node          (:Person {name: "Alice"})
    relationship  [:KNOWS {since: 2020}]
    path          (:Person)-[:KNOWS]->(:Person)
"""

from enum import Enum
from typing import Any, Dict, List

from neo4j.graph import Node, Path, Relationship

from .result import BoltResult, SummaryCounters


class OutputFormat(Enum):
    VERBOSE = "verbose"
    PLAIN = "plain"


# (counter attribute, summary phrase)
COUNTER_LABELS = [
    ("nodes_created", "Added {} nodes"),
    ("nodes_deleted", "Deleted {} nodes"),
    ("relationships_created", "Created {} relationships"),
    ("relationships_deleted", "Deleted {} relationships"),
    ("properties_set", "Set {} properties"),
    ("labels_added", "Added {} labels"),
    ("labels_removed", "Removed {} labels"),
    ("indexes_added", "Added {} indexes"),
    ("indexes_removed", "Removed {} indexes"),
    ("constraints_added", "Added {} constraints"),
    ("constraints_removed", "Removed {} constraints"),
]


class PrettyPrinter:
    """Formats statement results for display."""

    def __init__(self, output_format: OutputFormat = OutputFormat.VERBOSE):
        self._format = output_format

    def format(self, result: BoltResult) -> str:
        """
        Format a result.

        Args:
            result: Consumed statement result

        Returns:
            Display text; may be empty for a plain-mode update with no rows.
        """
        if self._format == OutputFormat.PLAIN:
            return self._format_plain(result)
        return self._format_verbose(result)

    def format_value(self, value: Any) -> str:
        """Render a single value."""
        quote = self._format == OutputFormat.VERBOSE
        return self._convert_value(value, quote)

    def format_counters(self, counters: SummaryCounters) -> str:
        """Summarize update counters, e.g. 'Added 1 nodes, Set 2 properties'."""
        parts = []
        for attr, label in COUNTER_LABELS:
            count = getattr(counters, attr)
            if count:
                parts.append(label.format(count))
        return ", ".join(parts)

    def _format_plain(self, result: BoltResult) -> str:
        if not result.keys:
            return ""
        lines = [", ".join(result.keys)]
        for record in result.records:
            lines.append(", ".join(
                self._convert_value(record.get(key), False) for key in result.keys
            ))
        return "\n".join(lines)

    def _format_verbose(self, result: BoltResult) -> str:
        lines: List[str] = []

        if result.keys:
            rows = [
                [self._convert_value(record.get(key), True) for key in result.keys]
                for record in result.records
            ]
            widths = [len(key) for key in result.keys]
            for row in rows:
                for i, cell in enumerate(row):
                    widths[i] = max(widths[i], len(cell))

            border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
            lines.append(border)
            lines.append(self._table_row(result.keys, widths))
            lines.append(border)
            for row in rows:
                lines.append(self._table_row(row, widths))
            if rows:
                lines.append(border)
            lines.append("")

            count = result.row_count()
            lines.append(f"{count} row{'' if count == 1 else 's'} available")

        summary = self.format_counters(result.counters)
        if summary:
            lines.append(summary)

        return "\n".join(lines)

    @staticmethod
    def _table_row(cells: List[str], widths: List[int]) -> str:
        return "| " + " | ".join(
            cell.ljust(width) for cell, width in zip(cells, widths)
        ) + " |"

    def _convert_value(self, value: Any, quote: bool) -> str:
        """
        Convert a single value to display text.

        Handles driver graph types as well as nested lists and maps.
        """
        if value is None:
            return "NULL"

        if isinstance(value, Node):
            return self._convert_node(value, quote)
        if isinstance(value, Relationship):
            return self._convert_relationship(value, quote)
        if isinstance(value, Path):
            return self._convert_path(value, quote)

        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            if quote:
                escaped = value.replace("\\", "\\\\").replace('"', '\\"')
                return f'"{escaped}"'
            return value
        if isinstance(value, dict):
            return self._convert_properties(value, quote)
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self._convert_value(v, quote) for v in value) + "]"

        # Numbers, temporal and spatial values
        return str(value)

    def _convert_properties(self, properties: Dict[str, Any], quote: bool) -> str:
        if not properties:
            return "{}"
        return "{" + ", ".join(
            f"{k}: {self._convert_value(v, quote)}" for k, v in properties.items()
        ) + "}"

    def _convert_node(self, node: Node, quote: bool) -> str:
        labels = "".join(f":{label}" for label in sorted(node.labels))
        properties = dict(node.items())
        if properties:
            props = self._convert_properties(properties, quote)
            return f"({labels} {props})" if labels else f"({props})"
        return f"({labels})"

    def _convert_relationship(self, rel: Relationship, quote: bool) -> str:
        properties = dict(rel.items())
        if properties:
            return f"[:{rel.type} {self._convert_properties(properties, quote)}]"
        return f"[:{rel.type}]"

    def _convert_path(self, path: Path, quote: bool) -> str:
        """Render nodes and relationships alternately, arrows following direction."""
        nodes = path.nodes
        text = self._convert_node(nodes[0], quote)

        for i, rel in enumerate(path.relationships):
            next_node = nodes[i + 1]
            rel_text = self._convert_relationship(rel, quote)
            # Forward if the relationship ends at the next node in the path
            if rel.end_node is not None and rel.end_node.element_id == next_node.element_id:
                text += f"-{rel_text}->"
            else:
                text += f"<-{rel_text}-"
            text += self._convert_node(next_node, quote)

        return text
