import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from pyVmomi import vim, vmodl

from .collectors import KINDS_BY_NAME, InventoryKind
from .errors import (
    OperationCancelled,
    RetrievalError,
    ScopeCreationError,
    classify_exception,
    fault_message,
)
from .operation import OperationContext


def _logger(logger: Optional[logging.Logger]) -> logging.Logger:
    return logger or logging.getLogger("vsphere_inventory")


@contextmanager
def open_scope(
    content,
    kind: InventoryKind,
    operation: OperationContext,
    logger: Optional[logging.Logger] = None,
) -> Iterator[object]:
    """Recursive container view over ``kind`` rooted at the inventory root.

    The view is destroyed exactly once when the block exits, whatever the
    outcome of the retrieval inside it.
    """
    logger = _logger(logger)

    if KINDS_BY_NAME.get(kind.name) is not kind:
        raise ScopeCreationError(kind.name, f"Tipo de objeto no soportado: {kind.name}")

    operation.check()
    try:
        view = content.viewManager.CreateContainerView(
            content.rootFolder, [kind.vim_type], True
        )
    except OperationCancelled:
        raise
    except Exception as exc:
        raise ScopeCreationError(
            kind.name,
            f"No se pudo crear el container view de {kind.title}: {fault_message(exc)}",
        ) from exc

    logger.debug("Container view creado para %s", kind.name)
    try:
        yield view
    finally:
        try:
            view.Destroy()
            logger.debug("Container view destruido para %s", kind.name)
        except Exception:
            logger.warning(
                "No se pudo destruir el container view de %s", kind.name, exc_info=True
            )


def _filter_spec(view, kind: InventoryKind):
    traversal_spec = vmodl.query.PropertyCollector.TraversalSpec(
        name="traverseView",
        path="view",
        skip=False,
        type=vim.view.ContainerView,
    )
    obj_spec = vmodl.query.PropertyCollector.ObjectSpec(
        obj=view,
        skip=True,
        selectSet=[traversal_spec],
    )
    prop_spec = vmodl.query.PropertyCollector.PropertySpec(
        type=kind.vim_type,
        pathSet=list(kind.properties),
        all=False,
    )
    return vmodl.query.PropertyCollector.FilterSpec(
        objectSet=[obj_spec],
        propSet=[prop_spec],
    )


def fetch_objects(
    content,
    view,
    kind: InventoryKind,
    operation: OperationContext,
    max_objects: Optional[int] = None,
) -> List[Dict[str, object]]:
    """Retrieve ``kind.properties`` for every object in ``view``.

    Items keep the order the endpoint returned them in.
    """
    collector = content.propertyCollector
    filter_spec = _filter_spec(view, kind)
    options = vmodl.query.PropertyCollector.RetrieveOptions(maxObjects=max_objects)

    results: List[Dict[str, object]] = []
    try:
        operation.check()
        retrieved = collector.RetrievePropertiesEx([filter_spec], options)

        while retrieved:
            for obj in retrieved.objects:
                prop_dict = {prop.name: prop.val for prop in obj.propSet}
                results.append(
                    {
                        "moid": obj.obj._GetMoId(),
                        "props": prop_dict,
                    }
                )
            if retrieved.token:
                operation.check()
                retrieved = collector.ContinueRetrievePropertiesEx(retrieved.token)
            else:
                break
    except OperationCancelled:
        raise
    except Exception as exc:
        reason = classify_exception(exc)
        raise RetrievalError(
            kind.name,
            f"No se pudo obtener {kind.title} ({reason}): {fault_message(exc)}",
            reason=reason,
        ) from exc

    return results
