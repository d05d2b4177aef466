from dataclasses import dataclass
from typing import List

from pyVmomi import vim

from ..metrics import HostMetrics, format_bytes, host_metrics
from .base import InventoryKind, int_attr, summary_of

HOST_PROPERTIES = ["summary"]

HOST_COLUMNS = [
    "Name:",
    "Used CPU:",
    "Total CPU:",
    "Free CPU:",
    "Used Memory:",
    "Total Memory:",
    "Free Memory:",
]


@dataclass(frozen=True)
class HostSummary:
    name: str
    cpu_mhz: int
    num_cpu_cores: int
    memory_size: int
    overall_cpu_usage: int
    overall_memory_usage: int

    def metrics(self) -> HostMetrics:
        return host_metrics(
            cpu_mhz=self.cpu_mhz,
            num_cpu_cores=self.num_cpu_cores,
            used_cpu_mhz=self.overall_cpu_usage,
            memory_size=self.memory_size,
            used_memory_mib=self.overall_memory_usage,
        )


def summarize(item) -> HostSummary:
    summary = summary_of(item)
    config = getattr(summary, "config", None)
    # Disconnected hosts come back without hardware or quickStats.
    hardware = getattr(summary, "hardware", None)
    quick_stats = getattr(summary, "quickStats", None)

    return HostSummary(
        name=getattr(config, "name", None) or item.get("moid", ""),
        cpu_mhz=int_attr(hardware, "cpuMhz"),
        num_cpu_cores=int_attr(hardware, "numCpuCores"),
        memory_size=int_attr(hardware, "memorySize"),
        overall_cpu_usage=int_attr(quick_stats, "overallCpuUsage"),
        overall_memory_usage=int_attr(quick_stats, "overallMemoryUsage"),
    )


def to_row(host: HostSummary) -> List[str]:
    metrics = host.metrics()
    return [
        host.name,
        str(metrics.used_cpu_mhz),
        str(metrics.total_cpu_mhz),
        str(metrics.free_cpu_mhz),
        format_bytes(metrics.used_memory_bytes),
        format_bytes(metrics.total_memory_bytes),
        format_bytes(metrics.free_memory_bytes),
    ]


HOST_KIND = InventoryKind(
    name="host",
    title="Host",
    vim_type=vim.HostSystem,
    properties=HOST_PROPERTIES,
    columns=HOST_COLUMNS,
    summarize=summarize,
    to_row=to_row,
)
