import sys
from typing import Iterable, Optional, TextIO

from tabulate import tabulate

from .collectors import InventoryKind


class Report:
    """Writes one titled table per object kind to a single stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream or sys.stdout

    def add_section(self, kind: InventoryKind, summaries: Iterable[object]) -> int:
        heading = kind.heading
        self.stream.write(f"\n{heading}\n")
        self.stream.write("-" * len(heading) + "\n\n")

        rows = [kind.to_row(summary) for summary in summaries]
        table = tabulate(
            rows,
            headers=list(kind.columns),
            tablefmt="plain",
            disable_numparse=True,
        )
        for line in table.splitlines():
            self.stream.write(line.rstrip() + "\n")
        self.stream.flush()

        return len(rows)
