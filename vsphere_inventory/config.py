import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from urllib.parse import unquote, urlparse

from dotenv import dotenv_values

from .errors import ConfigError


URL_ALIASES = ["GOVMOMI_URL", "VCENTER_URL", "VCENTER_HOST", "VSPHERE_URL"]
USER_ALIASES = ["GOVMOMI_USERNAME", "VCENTER_USER", "VSPHERE_USER"]
PASSWORD_ALIASES = [
    "GOVMOMI_PASSWORD",
    "VCENTER_PASSWORD",
    "VCENTER_PASS",
    "VSPHERE_PASSWORD",
]
INSECURE_ALIASES = ["GOVMOMI_INSECURE", "VCENTER_INSECURE", "VSPHERE_INSECURE"]
TIMEOUT_ALIASES = ["VCENTER_TIMEOUT", "GOVMOMI_TIMEOUT"]

DEFAULT_SDK_PATH = "/sdk"


@dataclass(frozen=True)
class EndpointURL:
    scheme: str
    host: str
    port: int
    path: str
    user: str = ""
    password: str = ""

    @property
    def display(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}{self.path}"


@dataclass
class Config:
    server: str
    endpoint: EndpointURL
    user: str
    password: str
    insecure: bool
    timeout: Optional[float]
    debug: bool
    env_file_used: Optional[str]


def _env_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Inventario de hosts, datastores y VMs de vCenter/ESXi"
    )
    parser.add_argument("--server", help="vCenter/ESXi URL (https://host/sdk)")
    parser.add_argument("--user", help="Usuario")
    parser.add_argument("--password", help="Password")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Deshabilita verificacion TLS (solo si es necesario)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Timeout en segundos por llamada al endpoint",
    )
    parser.add_argument("--debug", action="store_true", help="Logs en modo debug")
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Ruta a archivo .env (por defecto ./.env si existe)",
    )
    return parser.parse_args(argv)


def _resolve_env_file(env_file: Optional[str]) -> Optional[Path]:
    if env_file:
        candidate = Path(env_file)
        if not candidate.is_file():
            raise ConfigError(f"No se encontro .env en: {candidate}")
        return candidate

    candidate = Path.cwd() / ".env"
    if candidate.is_file():
        return candidate
    return None


def _read_env_values(env_file: Optional[Path]) -> Dict[str, str]:
    if env_file is None:
        return {}
    values = dotenv_values(env_file)
    normalized = {}
    for key, value in values.items():
        if value is None:
            continue
        normalized[key] = str(value).strip()
    return normalized


def _resolve_alias_value(aliases: List[str], env_values: Dict[str, str]) -> Optional[str]:
    resolved = None
    for key in aliases:
        value = env_values.get(key)
        if value:
            resolved = value
            break

    for key in aliases:
        value = os.environ.get(key)
        if value:
            return value.strip()

    return resolved


def parse_server_url(server: str) -> EndpointURL:
    """Normalize a vSphere URL the way govc does.

    A bare host gets the https scheme and the /sdk path. User and password
    embedded in the URL are kept so they can be used as fallback credentials.
    """
    server = (server or "").strip()
    if not server:
        raise ConfigError("No se indico la URL del endpoint (GOVMOMI_URL o --server)")

    if "://" not in server:
        server = f"https://{server}"

    try:
        parsed = urlparse(server)
    except ValueError as exc:
        raise ConfigError(f"No se pudo interpretar la URL {server}: {exc}") from exc

    if parsed.scheme not in {"http", "https"}:
        raise ConfigError(f"Esquema no soportado en la URL: {parsed.scheme}")

    try:
        port = parsed.port
    except ValueError as exc:
        raise ConfigError(f"Puerto invalido en la URL {server}: {exc}") from exc

    host = parsed.hostname
    if not host:
        raise ConfigError(f"Servidor invalido: {server}")

    if port is None:
        port = 443 if parsed.scheme == "https" else 80

    path = parsed.path.rstrip("/") or DEFAULT_SDK_PATH

    return EndpointURL(
        scheme=parsed.scheme,
        host=host,
        port=port,
        path=path,
        user=unquote(parsed.username or ""),
        password=unquote(parsed.password or ""),
    )


def _parse_timeout(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ConfigError(f"Timeout invalido: {value}") from exc
    if timeout <= 0:
        raise ConfigError(f"Timeout debe ser mayor que cero: {value}")
    return timeout


def load_config(args: argparse.Namespace) -> Config:
    env_file = _resolve_env_file(args.env_file)
    env_values = _read_env_values(env_file)

    server = (args.server or "").strip() or (_resolve_alias_value(URL_ALIASES, env_values) or "")
    endpoint = parse_server_url(server)

    user = (
        (args.user or "").strip()
        or _resolve_alias_value(USER_ALIASES, env_values)
        or endpoint.user
    )
    password = (
        (args.password or "").strip()
        or _resolve_alias_value(PASSWORD_ALIASES, env_values)
        or endpoint.password
    )

    missing = []
    if not user:
        missing.append("--user o GOVMOMI_USERNAME")
    if not password:
        missing.append("--password o GOVMOMI_PASSWORD")
    if missing:
        raise ConfigError("Faltan parametros requeridos: " + ", ".join(missing))

    if args.insecure:
        insecure = True
    else:
        insecure = _env_bool(_resolve_alias_value(INSECURE_ALIASES, env_values))

    if args.timeout is not None:
        timeout = _parse_timeout(str(args.timeout))
    else:
        timeout = _parse_timeout(_resolve_alias_value(TIMEOUT_ALIASES, env_values))

    return Config(
        server=server,
        endpoint=endpoint,
        user=user,
        password=password,
        insecure=insecure,
        timeout=timeout,
        debug=args.debug,
        env_file_used=str(env_file) if env_file else None,
    )
