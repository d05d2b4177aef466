from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence


@dataclass(frozen=True)
class InventoryKind:
    """One reportable object kind: what to fetch, how to summarize it, how to print it."""

    name: str
    title: str
    vim_type: Any
    properties: Sequence[str]
    columns: Sequence[str]
    summarize: Callable[[Dict[str, Any]], Any]
    to_row: Callable[[Any], List[str]]

    @property
    def heading(self) -> str:
        return f"*** {self.title} Information ***"


def summary_of(item: Dict[str, Any]):
    props = item.get("props", {}) or {}
    return props.get("summary")


def int_attr(obj, name: str) -> int:
    if obj is None:
        return 0
    value = getattr(obj, name, 0)
    return int(value or 0)
