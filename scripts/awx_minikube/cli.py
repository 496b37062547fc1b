"""Command-line interface for deploying AWX onto local minikube.

Running the CLI with no arguments performs ``up``. Every option can also be
set through an ``AWX_MINIKUBE_*`` environment variable.
"""

from __future__ import annotations

import subprocess
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from awx_minikube import __version__
from awx_minikube.config import Config
from awx_minikube.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_exception,
    log_warning,
)
from awx_minikube.orchestration import (
    setup_environment,
    show_admin_password,
    show_environment_status,
)
from awx_minikube.validation import AwxMinikubeError, ReadinessTimeoutError

logger = get_logger(__name__)

app = App(
    name="awx_minikube",
    help="Deploy AWX on a local minikube cluster",
    version=__version__,
)

Namespace = typ.Annotated[str, Parameter(env_var="AWX_MINIKUBE_NAMESPACE")]
OperatorVersion = typ.Annotated[
    str, Parameter(env_var="AWX_MINIKUBE_OPERATOR_VERSION")
]
OperatorDir = typ.Annotated[
    Path | None, Parameter(env_var="AWX_MINIKUBE_OPERATOR_DIR")
]
LocalPort = typ.Annotated[int, Parameter(env_var="AWX_MINIKUBE_LOCAL_PORT")]
LogLevel = typ.Annotated[str, Parameter(env_var="AWX_MINIKUBE_LOG_LEVEL")]

_DEFAULTS = Config()


def _build_config(
    namespace: str,
    operator_version: str,
    operator_dir: Path | None,
    local_port: int,
) -> Config:
    overrides: dict[str, typ.Any] = {
        "namespace": namespace,
        "operator_version": operator_version,
        "local_port": local_port,
    }
    if operator_dir is not None:
        overrides["operator_dir"] = operator_dir.expanduser()
    return Config(**overrides)


def _setup_logging(log_level: str) -> None:
    normalized, invalid = configure_logging(log_level)
    if invalid:
        log_warning(
            logger, "Invalid log level %r; falling back to %s", log_level, normalized
        )


def _run_guarded(action: typ.Callable[[], int]) -> int:
    """Run a command body and map failures onto exit codes.

    A readiness timeout exits with 1. A failing external command exits with
    that command's own return code; its diagnostics were already printed.
    Package errors and file errors, such as a missing template manifest,
    exit with 1.
    """
    try:
        return action()
    except ReadinessTimeoutError as e:
        log_error(logger, "%s", e)
        return 1
    except subprocess.CalledProcessError as e:
        cmd = e.cmd if isinstance(e.cmd, str) else " ".join(map(str, e.cmd))
        log_error(logger, "Command failed with exit code %d: %s", e.returncode, cmd)
        return e.returncode
    except subprocess.TimeoutExpired as e:
        log_exception(logger, "External command timed out", e)
        return 1
    except AwxMinikubeError as e:
        log_error(logger, "%s", e)
        return 1
    except OSError as e:
        log_error(logger, "%s", e)
        return 1


@app.command
def up(
    *,
    namespace: Namespace = _DEFAULTS.namespace,
    operator_version: OperatorVersion = _DEFAULTS.operator_version,
    operator_dir: OperatorDir = None,
    local_port: LocalPort = _DEFAULTS.local_port,
    log_level: LogLevel = "INFO",
) -> int:
    """Deploy AWX if needed, expose it locally, and print the admin password.

    Safe to run repeatedly: an already running AWX is left untouched and an
    existing port-forward is reused.

    Args:
        namespace: Kubernetes namespace for AWX.
        operator_version: AWX operator release tag to check out.
        operator_dir: Local clone of the AWX operator (default ~/awx-operator).
        local_port: Local port forwarded to the AWX service.
        log_level: Log level for progress output.

    Returns:
        Exit code (0 for success, non-zero for failure).

    """
    _setup_logging(log_level)
    return _run_guarded(
        lambda: setup_environment(
            _build_config(namespace, operator_version, operator_dir, local_port)
        )
    )


app.default(up)


@app.command
def status(
    *,
    namespace: Namespace = _DEFAULTS.namespace,
    log_level: LogLevel = "INFO",
) -> int:
    """Show the AWX deployments and whether AWX is ready.

    Args:
        namespace: Kubernetes namespace for AWX.
        log_level: Log level for progress output.

    Returns:
        Exit code (0 if AWX is ready, 1 otherwise).

    """
    _setup_logging(log_level)
    return _run_guarded(lambda: show_environment_status(Config(namespace=namespace)))


@app.command
def password(
    *,
    namespace: Namespace = _DEFAULTS.namespace,
    log_level: LogLevel = "INFO",
) -> int:
    """Print the decoded AWX admin password.

    Args:
        namespace: Kubernetes namespace for AWX.
        log_level: Log level for progress output.

    Returns:
        Exit code (0 for success, non-zero for failure).

    """
    _setup_logging(log_level)
    return _run_guarded(lambda: show_admin_password(Config(namespace=namespace)))


def main() -> int:
    """Entry point for the CLI."""
    return app()
