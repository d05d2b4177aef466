from dataclasses import dataclass

BYTE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]
MIB = 1024 * 1024


@dataclass(frozen=True)
class HostMetrics:
    used_cpu_mhz: int
    total_cpu_mhz: int
    free_cpu_mhz: int
    used_memory_bytes: int
    total_memory_bytes: int
    free_memory_bytes: int


def total_cpu_mhz(cpu_mhz: int, num_cpu_cores: int) -> int:
    return int(cpu_mhz) * int(num_cpu_cores)


def free_cpu_mhz(cpu_mhz: int, num_cpu_cores: int, used_cpu_mhz: int) -> int:
    # Negative on over-subscribed hosts.
    return total_cpu_mhz(cpu_mhz, num_cpu_cores) - int(used_cpu_mhz)


def free_memory_bytes(memory_size: int, used_memory_mib: int) -> int:
    return int(memory_size) - int(used_memory_mib) * MIB


def host_metrics(
    cpu_mhz: int,
    num_cpu_cores: int,
    used_cpu_mhz: int,
    memory_size: int,
    used_memory_mib: int,
) -> HostMetrics:
    return HostMetrics(
        used_cpu_mhz=int(used_cpu_mhz),
        total_cpu_mhz=total_cpu_mhz(cpu_mhz, num_cpu_cores),
        free_cpu_mhz=free_cpu_mhz(cpu_mhz, num_cpu_cores, used_cpu_mhz),
        used_memory_bytes=int(used_memory_mib) * MIB,
        total_memory_bytes=int(memory_size),
        free_memory_bytes=free_memory_bytes(memory_size, used_memory_mib),
    )


def format_bytes(value: int) -> str:
    """Render a byte count in the largest 1024-based unit where it is >= 1.

    Values under 1KB stay as whole bytes; negative values keep only a
    leading sign.
    """
    value = int(value)
    sign = "-" if value < 0 else ""
    scaled = float(abs(value))
    unit_index = 0
    while scaled >= 1024 and unit_index < len(BYTE_UNITS) - 1:
        scaled /= 1024
        unit_index += 1

    if unit_index == 0:
        return f"{sign}{abs(value)}B"
    return f"{sign}{scaled:.2f}{BYTE_UNITS[unit_index]}"
