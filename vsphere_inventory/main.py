import logging
import sys
from typing import Optional, Sequence, TextIO

from .collectors import KINDS, CollectorContext
from .config import load_config, parse_args
from .diagnostics import Diagnostics
from .errors import EXIT_CANCELLED, EXIT_OK, EXIT_UNEXPECTED, ConfigError, InventoryError
from .inventory import collect
from .operation import OperationContext
from .report import Report
from .vmware_client import connect, disconnect, service_root


def setup_logging(debug: bool) -> logging.Logger:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stdout)
    return logging.getLogger("vsphere_inventory")


def _mask_user(user: str) -> str:
    if not user:
        return ""
    if "@" in user:
        name, domain = user.split("@", 1)
        if not name:
            return f"***@{domain}"
        visible = name[:2] if len(name) > 1 else name[:1]
        return f"{visible}***@{domain}"
    visible = user[:2] if len(user) > 1 else user[:1]
    return f"{visible}***"


def _print_summary(diagnostics: Diagnostics, logger: logging.Logger) -> None:
    logger.debug("Configuracion de la ejecucion: %s", diagnostics.runtime_config)
    for kind_name in diagnostics.kind_names():
        stats = diagnostics.get_kind_stats(kind_name)
        errors = ",".join(f"{key}={value}" for key, value in sorted(stats.errors.items()))
        logger.debug(
            "Resumen %s: attempted=%s rendered=%s errors=%s (%s)",
            kind_name,
            stats.attempted_count,
            stats.rendered_count,
            stats.total_error_count,
            errors or "-",
        )
        for example in stats.examples:
            logger.debug("  %s: %s", example["error_type"], example["message"])


def main(argv: Optional[Sequence[str]] = None, stream: Optional[TextIO] = None) -> int:
    args = parse_args(argv)
    logger = setup_logging(args.debug)

    try:
        config = load_config(args)
    except ConfigError as exc:
        logger.error(str(exc))
        return exc.exit_code

    if config.env_file_used:
        logger.info(
            "Cargadas credenciales desde: %s (user: %s)",
            config.env_file_used,
            _mask_user(config.user),
        )

    diagnostics = Diagnostics([kind.name for kind in KINDS])
    diagnostics.set_runtime_config(
        {
            "server_host": config.endpoint.host,
            "insecure": config.insecure,
            "timeout": config.timeout,
        }
    )
    operation = OperationContext(timeout=config.timeout)
    report = Report(stream)
    service_instance = None
    exit_code = EXIT_UNEXPECTED

    try:
        operation.install_signal_handlers()
        logger.info("Conectando a %s (user: %s)", config.endpoint.display, _mask_user(config.user))
        service_instance = connect(
            endpoint=config.endpoint,
            user=config.user,
            password=config.password,
            insecure=config.insecure,
            operation=operation,
        )
        content = service_root(service_instance)
        about = getattr(content, "about", None)
        logger.info(
            "Sesion iniciada: %s (%s %s)",
            getattr(about, "fullName", ""),
            getattr(about, "apiType", ""),
            getattr(about, "apiVersion", ""),
        )

        context = CollectorContext(
            content=content,
            logger=logger,
            operation=operation,
            diagnostics=diagnostics,
        )

        for kind in KINDS:
            summaries = collect(context, kind)
            rendered = report.add_section(kind, summaries)
            diagnostics.add_rendered(kind.name, rendered)

        exit_code = EXIT_OK
    except KeyboardInterrupt:
        operation.cancel("SIGINT")
        logger.error("Operacion cancelada: SIGINT")
        exit_code = EXIT_CANCELLED
    except InventoryError as exc:
        operation.cancel(type(exc).__name__)
        logger.error("Fallo el inventario: %s", exc)
        exit_code = exc.exit_code
    except Exception as exc:
        operation.cancel(type(exc).__name__)
        logger.error("Fallo el inventario: %s", exc)
        logger.debug("Detalle del error", exc_info=True)
    finally:
        _print_summary(diagnostics, logger)
        try:
            disconnect(service_instance)
        except Exception:
            logger.debug("No se pudo cerrar la sesion", exc_info=True)
        operation.restore_signal_handlers()

    return exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
