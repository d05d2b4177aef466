from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import InventoryError, RetrievalError, classify_exception


@dataclass
class KindDiagnostics:
    attempted_count: int = 0
    rendered_count: int = 0
    errors: Dict[str, int] = field(default_factory=dict)
    examples: List[Dict[str, str]] = field(default_factory=list)

    @property
    def total_error_count(self) -> int:
        return sum(self.errors.values())


class Diagnostics:
    def __init__(self, kind_names: Optional[List[str]] = None) -> None:
        self._stats: Dict[str, KindDiagnostics] = {}
        self._runtime_config: Dict[str, object] = {}
        if kind_names:
            for name in kind_names:
                self._stats[name] = KindDiagnostics()

    def _get_stats(self, kind: str) -> KindDiagnostics:
        if kind not in self._stats:
            self._stats[kind] = KindDiagnostics()
        return self._stats[kind]

    def get_kind_stats(self, kind: str) -> KindDiagnostics:
        return self._get_stats(kind)

    def add_attempt(self, kind: str) -> None:
        self._get_stats(kind).attempted_count += 1

    def add_rendered(self, kind: str, count: int) -> None:
        self._get_stats(kind).rendered_count += count

    def add_error(self, kind: str, exc: Exception) -> str:
        if isinstance(exc, RetrievalError):
            error_type = exc.reason
        elif isinstance(exc, InventoryError):
            error_type = type(exc).__name__
        else:
            error_type = classify_exception(exc)

        stats = self._get_stats(kind)
        stats.errors[error_type] = stats.errors.get(error_type, 0) + 1
        if len(stats.examples) < 10:
            stats.examples.append({"error_type": error_type, "message": str(exc)})
        return error_type

    def set_runtime_config(self, runtime_config: Dict[str, object]) -> None:
        self._runtime_config = dict(runtime_config)

    @property
    def runtime_config(self) -> Dict[str, object]:
        return dict(self._runtime_config)

    def kind_names(self) -> List[str]:
        return list(self._stats)
