from .base import InventoryKind
from .context import CollectorContext
from .datastores import DATASTORE_KIND
from .hosts import HOST_KIND
from .virtual_machines import VM_KIND

# Report order.
KINDS = [HOST_KIND, DATASTORE_KIND, VM_KIND]

KINDS_BY_NAME = {kind.name: kind for kind in KINDS}

__all__ = ["CollectorContext", "InventoryKind", "KINDS", "KINDS_BY_NAME"]
