import ssl

from pyVim.connect import SmartConnect, Disconnect
from pyVmomi import vim

from .config import EndpointURL
from .errors import AuthError, OperationCancelled
from .operation import OperationContext


def connect(endpoint: EndpointURL, user: str, password: str, insecure: bool, operation: OperationContext):
    operation.check()

    ssl_context = None
    if insecure:
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    kwargs = {}
    if operation.timeout:
        kwargs["httpConnectionTimeout"] = operation.timeout

    try:
        service_instance = SmartConnect(
            host=endpoint.host,
            user=user,
            pwd=password,
            port=endpoint.port,
            path=endpoint.path,
            sslContext=ssl_context,
            **kwargs,
        )
    except vim.fault.InvalidLogin as exc:
        raise AuthError(f"Credenciales rechazadas por {endpoint.display}: {exc.msg}") from exc
    except OperationCancelled:
        raise
    except Exception as exc:
        raise AuthError(f"No se pudo conectar a {endpoint.display}: {exc}") from exc

    if not isinstance(service_instance, vim.ServiceInstance):
        raise AuthError("No se obtuvo una instancia de servicio valida")

    return service_instance


def service_root(service_instance):
    """Return the service content; its rootFolder anchors every inventory scope."""
    return service_instance.RetrieveContent()


def disconnect(service_instance):
    if service_instance is not None:
        Disconnect(service_instance)
