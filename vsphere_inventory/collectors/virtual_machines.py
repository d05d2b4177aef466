from dataclasses import dataclass
from typing import List

from pyVmomi import vim

from .base import InventoryKind, summary_of

VM_PROPERTIES = ["summary"]

VM_COLUMNS = ["Name:", "Guest Full Name:"]


@dataclass(frozen=True)
class VirtualMachineSummary:
    name: str
    guest_full_name: str


def summarize(item) -> VirtualMachineSummary:
    config = getattr(summary_of(item), "config", None)
    return VirtualMachineSummary(
        name=getattr(config, "name", None) or item.get("moid", ""),
        guest_full_name=getattr(config, "guestFullName", None) or "",
    )


def to_row(vm: VirtualMachineSummary) -> List[str]:
    return [vm.name, vm.guest_full_name]


VM_KIND = InventoryKind(
    name="virtual_machine",
    title="VM",
    vim_type=vim.VirtualMachine,
    properties=VM_PROPERTIES,
    columns=VM_COLUMNS,
    summarize=summarize,
    to_row=to_row,
)
