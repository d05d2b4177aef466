from typing import List

from .collectors import CollectorContext, InventoryKind
from .errors import InventoryError
from .property_fetch import fetch_objects, open_scope


def collect(context: CollectorContext, kind: InventoryKind) -> List[object]:
    """Open a scope for ``kind``, fetch its summaries and release the scope."""
    diagnostics = context.diagnostics
    logger = context.logger

    try:
        with open_scope(context.content, kind, context.operation, logger=logger) as view:
            items = fetch_objects(context.content, view, kind, context.operation)
    except InventoryError as exc:
        diagnostics.add_error(kind.name, exc)
        raise

    logger.debug("Obtenidos %s objetos de tipo %s", len(items), kind.name)

    summaries = []
    for item in items:
        diagnostics.add_attempt(kind.name)
        summaries.append(kind.summarize(item))
    return summaries
