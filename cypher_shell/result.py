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
Statement results.

Holds a fully consumed driver result: the column names, the records and the
update counters from the result summary.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List


@dataclass
class SummaryCounters:
    """
    Update counters reported by the server.

    Any counter the summary does not report stays at zero.
    """
    nodes_created: int = 0
    nodes_deleted: int = 0
    relationships_created: int = 0
    relationships_deleted: int = 0
    properties_set: int = 0
    labels_added: int = 0
    labels_removed: int = 0
    indexes_added: int = 0
    indexes_removed: int = 0
    constraints_added: int = 0
    constraints_removed: int = 0

    @classmethod
    def from_summary(cls, summary: Any) -> "SummaryCounters":
        """Read counters from a driver result summary (may be None)."""
        counters = getattr(summary, "counters", None)
        if counters is None:
            return cls()
        return cls(**{
            f.name: getattr(counters, f.name, 0) or 0
            for f in fields(cls)
        })

    @property
    def contains_updates(self) -> bool:
        """True if any counter is non-zero."""
        return any(getattr(self, f.name) for f in fields(self))


@dataclass
class BoltResult:
    """
    Holds the outcome of one statement.

    Attributes:
        keys: Column names in result order
        records: One name -> value mapping per row
        counters: Update counters from the summary
    """
    keys: List[str] = field(default_factory=list)
    records: List[Dict[str, Any]] = field(default_factory=list)
    counters: SummaryCounters = field(default_factory=SummaryCounters)

    @classmethod
    def from_driver(cls, result: Any) -> "BoltResult":
        """
        Consume a driver result.

        Records are pulled first, the summary afterwards; the driver result
        cannot be used again.
        """
        keys = list(result.keys())
        records = [dict(record.items()) for record in result]
        summary = result.consume()
        return cls(
            keys=keys,
            records=records,
            counters=SummaryCounters.from_summary(summary)
        )

    def row_count(self) -> int:
        return len(self.records)

    def is_empty(self) -> bool:
        """Check if the result has no rows."""
        return not self.records
