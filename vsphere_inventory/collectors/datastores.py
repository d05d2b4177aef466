from dataclasses import dataclass
from typing import List

from pyVmomi import vim

from ..metrics import format_bytes
from .base import InventoryKind, int_attr, summary_of

DATASTORE_PROPERTIES = ["summary"]

DATASTORE_COLUMNS = ["Name:", "Type:", "Capacity:", "Free:"]


@dataclass(frozen=True)
class DatastoreSummary:
    name: str
    type: str
    capacity: int
    free_space: int


def summarize(item) -> DatastoreSummary:
    summary = summary_of(item)
    return DatastoreSummary(
        name=getattr(summary, "name", None) or item.get("moid", ""),
        type=getattr(summary, "type", None) or "",
        capacity=int_attr(summary, "capacity"),
        free_space=int_attr(summary, "freeSpace"),
    )


def to_row(datastore: DatastoreSummary) -> List[str]:
    return [
        datastore.name,
        datastore.type,
        format_bytes(datastore.capacity),
        format_bytes(datastore.free_space),
    ]


DATASTORE_KIND = InventoryKind(
    name="datastore",
    title="Datastore",
    vim_type=vim.Datastore,
    properties=DATASTORE_PROPERTIES,
    columns=DATASTORE_COLUMNS,
    summarize=summarize,
    to_row=to_row,
)
