"""minikube cluster lifecycle operations.

The helper only needs two things from minikube: to know whether the local
cluster is running, and to start it when it is not. kubectl talks to the
cluster through the context minikube writes into the default kubeconfig.

Examples
--------
Make sure the cluster is up before touching it with kubectl:

    cfg = Config()
    ensure_minikube_running(cfg, dict(os.environ))

"""

from __future__ import annotations

import subprocess
import typing as typ

from awx_minikube.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

logger = get_logger(__name__)

# minikube start pulls the kicbase image on first use.
_MINIKUBE_START_TIMEOUT = 900
_MINIKUBE_STATUS_TIMEOUT = 60


def minikube_running(env: dict[str, str]) -> bool:
    """Check whether the minikube cluster reports a running host.

    ``minikube status`` exits non-zero when the cluster is stopped or absent,
    so the exit code is not checked; the output is searched for ``Running``.

    Parameters
    ----------
    env : dict[str, str]
        Environment for the minikube process.

    Returns
    -------
    bool
        True if minikube reports a running component, False otherwise.

    """
    # S603/S607: minikube via PATH is standard; no user input
    result = subprocess.run(
        ["minikube", "status"],  # noqa: S607
        capture_output=True,
        text=True,
        env=env,
        timeout=_MINIKUBE_STATUS_TIMEOUT,
    )
    return "Running" in (result.stdout or "")


def start_minikube(driver: str, env: dict[str, str]) -> None:
    """Start the minikube cluster with the given driver.

    Raises
    ------
    subprocess.CalledProcessError
        If minikube fails to start.

    """
    # S603/S607: minikube via PATH is standard; driver from Config
    subprocess.run(  # noqa: S603
        ["minikube", "start", f"--driver={driver}"],  # noqa: S607
        check=True,
        env=env,
        timeout=_MINIKUBE_START_TIMEOUT,
    )


def ensure_minikube_running(cfg: Config, env: dict[str, str]) -> None:
    """Start minikube unless it is already running."""
    log_info(logger, "Checking Minikube status...")
    if minikube_running(env):
        log_info(logger, "Minikube is already running.")
        return

    log_info(logger, "Minikube is not running. Starting it...")
    start_minikube(cfg.minikube_driver, env)
