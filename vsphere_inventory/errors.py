from typing import Optional

from pyVmomi import vim, vmodl


EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIG = 2
EXIT_AUTH = 3
EXIT_SCOPE = 4
EXIT_RETRIEVAL = 5
EXIT_CANCELLED = 130


class InventoryError(Exception):
    exit_code = EXIT_UNEXPECTED


class ConfigError(InventoryError):
    exit_code = EXIT_CONFIG


class AuthError(InventoryError):
    exit_code = EXIT_AUTH


class ScopeCreationError(InventoryError):
    exit_code = EXIT_SCOPE

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class RetrievalError(InventoryError):
    exit_code = EXIT_RETRIEVAL

    def __init__(self, kind: str, message: str, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.reason = reason or "other_error"


class OperationCancelled(InventoryError):
    exit_code = EXIT_CANCELLED


def classify_exception(exc: BaseException) -> str:
    """Map a vSphere fault to a short reason used in diagnostics and log lines."""
    if isinstance(exc, vim.fault.NoPermission):
        return "no_permission"
    for invalid_cls in (
        getattr(vim.fault, "InvalidProperty", None),
        getattr(vmodl.query, "InvalidProperty", None),
    ):
        if invalid_cls and isinstance(exc, invalid_cls):
            return "invalid_property"
    message = str(exc).lower()
    if "invalidproperty" in message or "invalid property" in message:
        return "invalid_property"
    not_found = [vmodl.fault.ManagedObjectNotFound]
    if hasattr(vim.fault, "NotFound"):
        not_found.append(vim.fault.NotFound)
    if isinstance(exc, tuple(not_found)):
        return "not_found"
    if isinstance(exc, vmodl.fault.RequestCanceled):
        return "cancelled"
    return "other_error"


def fault_message(exc: BaseException) -> str:
    msg = getattr(exc, "msg", None)
    if msg:
        return str(msg)
    return str(exc) or exc.__class__.__name__
