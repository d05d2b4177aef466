from dataclasses import dataclass
from typing import Any

from ..operation import OperationContext


@dataclass
class CollectorContext:
    content: Any
    logger: Any
    operation: OperationContext
    diagnostics: Any
