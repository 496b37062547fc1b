"""High-level orchestration for CLI commands."""

from __future__ import annotations

import os
import typing as typ

from awx_minikube.credentials import report_admin_password
from awx_minikube.k8s import apply_manifest_file, ensure_namespace, print_deployments
from awx_minikube.logging import get_logger, log_info
from awx_minikube.minikube import ensure_minikube_running
from awx_minikube.operator_repo import (
    checkout_operator_version,
    ensure_operator_clone,
    install_operator,
    render_manifest,
)
from awx_minikube.port_forward import PortForward, expose_service
from awx_minikube.readiness import Readiness, ReadinessWaiter, probe
from awx_minikube.validation import require_exe

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

logger = get_logger(__name__)

REQUIRED_TOOLS = ("minikube", "kubectl", "git", "make", "pgrep")


def _install_awx(
    cfg: Config, env: dict[str, str], sleep: typ.Callable[[float], None] | None
) -> None:
    """Install the operator, apply the AWX manifest, and wait for readiness."""
    log_info(logger, "AWX is not deployed. Starting deployment...")
    ensure_operator_clone(cfg, env)
    checkout_operator_version(cfg, env)

    log_info(logger, "Creating namespace if it doesn't exist...")
    ensure_namespace(cfg.namespace, env)

    install_operator(cfg, env)
    manifest = render_manifest(cfg)

    log_info(logger, "Applying AWX manifest...")
    apply_manifest_file(manifest, cfg.namespace, env)

    ReadinessWaiter.for_config(cfg, env, sleep=sleep).wait()


def deploy_awx(
    cfg: Config,
    env: dict[str, str],
    *,
    sleep: typ.Callable[[float], None] | None = None,
) -> bool:
    """Deploy AWX unless it is already running.

    The readiness probe is called exactly once to decide. When AWX is ready
    no install step runs; otherwise the full install path runs and blocks
    until the deployments are ready.

    Args:
        cfg: Deployment configuration.
        env: Environment for the external tools.
        sleep: Sleep function used while waiting for readiness.

    Returns:
        True if the install path ran, False if AWX was already deployed.

    Raises:
        ReadinessTimeoutError: If AWX does not become ready in time.
        subprocess.CalledProcessError: If any external command fails.

    """
    log_info(logger, "Checking if AWX is deployed...")
    if probe(cfg, env) is Readiness.READY:
        log_info(logger, "AWX is already deployed.")
        return False

    _install_awx(cfg, env, sleep)
    return True


def _print_success_banner(forward: PortForward) -> None:
    """Print the access banner for the exposed AWX instance."""
    print()
    print("=" * 60)
    if forward.started:
        print("Port-forward started.")
    else:
        print("Port-forward already running.")
    print(f'AWX should be accessible at "{forward.url}"')
    print("=" * 60)


def setup_environment(
    cfg: Config, *, sleep: typ.Callable[[float], None] | None = None
) -> int:
    """Bring up minikube, deploy AWX, expose it, and print the admin password.

    Args:
        cfg: Deployment configuration.
        sleep: Sleep function used while waiting for readiness.

    Returns:
        Exit code (0 for success).

    """
    log_info(logger, "Checking required tools...")
    for exe in REQUIRED_TOOLS:
        require_exe(exe)

    env = dict(os.environ)
    ensure_minikube_running(cfg, env)
    deploy_awx(cfg, env, sleep=sleep)
    forward = expose_service(cfg, env)
    _print_success_banner(forward)
    report_admin_password(cfg, env)
    return 0


def show_environment_status(cfg: Config) -> int:
    """Print the AWX deployments and the readiness verdict.

    Returns:
        Exit code (0 if AWX is ready, 1 otherwise).

    """
    require_exe("kubectl")
    env = dict(os.environ)

    print(f"Namespace: {cfg.namespace}")
    print()
    print_deployments(cfg.namespace, env)
    verdict = probe(cfg, env)
    print()
    print(f"AWX readiness: {verdict.value}")
    return 0 if verdict is Readiness.READY else 1


def show_admin_password(cfg: Config) -> int:
    """Print the decoded AWX admin password.

    Returns:
        Exit code (0 for success).

    """
    require_exe("kubectl")
    report_admin_password(cfg, dict(os.environ))
    return 0
