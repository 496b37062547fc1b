"""Background ``kubectl port-forward`` to the AWX service.

At most one forward per (service, local port, remote port, namespace) is
started. A running forward is detected by matching its command line with
``pgrep -f``; an unrelated process with the same command line is treated
as the forward.

The forward is detached into its own session so it keeps running after the
script exits. Its lifetime is unmanaged: the returned handle carries the
pid for callers that want to stop it later.
"""

from __future__ import annotations

import dataclasses
import subprocess
import typing as typ

from awx_minikube.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

logger = get_logger(__name__)

_PGREP_TIMEOUT = 10


@dataclasses.dataclass(frozen=True, slots=True)
class PortForward:
    """Handle for the port-forward exposing AWX.

    Attributes:
        url: Local URL served by the forward.
        pid: Process id of a forward started by this call, or None when an
            already running forward was reused.
        started: Whether this call started a new forward.

    """

    url: str
    pid: int | None
    started: bool


def port_forward_command(cfg: Config) -> list[str]:
    """Return the kubectl port-forward command for the configured service."""
    return [
        "kubectl",
        "port-forward",
        f"svc/{cfg.service}",
        f"{cfg.local_port}:{cfg.remote_port}",
        "-n",
        cfg.namespace,
    ]


def port_forward_running(cfg: Config, env: dict[str, str]) -> bool:
    """Check whether a matching port-forward process is already running.

    Returns
    -------
    bool
        True if ``pgrep -f`` finds a process with the forward's command line.

    """
    signature = " ".join(port_forward_command(cfg))
    # S603/S607: pgrep via PATH is standard; pattern built from Config
    result = subprocess.run(  # noqa: S603
        ["pgrep", "-f", signature],  # noqa: S607
        capture_output=True,
        text=True,
        env=env,
        timeout=_PGREP_TIMEOUT,
    )
    return result.returncode == 0


def start_port_forward(cfg: Config, env: dict[str, str]) -> int:
    """Start a detached port-forward process and return its pid."""
    # S603: kubectl via PATH is standard; args from Config
    process = subprocess.Popen(  # noqa: S603
        port_forward_command(cfg),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        env=env,
        start_new_session=True,
    )
    return process.pid


def expose_service(cfg: Config, env: dict[str, str]) -> PortForward:
    """Ensure exactly one port-forward exposes the AWX service locally.

    Parameters
    ----------
    cfg : Config
        Configuration with service, ports, and namespace.
    env : dict[str, str]
        Environment for the pgrep and kubectl processes.

    Returns
    -------
    PortForward
        Handle describing the forward serving ``cfg.access_url``.

    """
    if port_forward_running(cfg, env):
        log_info(
            logger,
            'Port-forward on port "%d" is already running.',
            cfg.local_port,
        )
        return PortForward(url=cfg.access_url, pid=None, started=False)

    log_info(
        logger,
        'Forwarding port "%d" to AWX service in the background...',
        cfg.local_port,
    )
    pid = start_port_forward(cfg, env)
    return PortForward(url=cfg.access_url, pid=pid, started=True)
