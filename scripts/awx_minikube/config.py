"""Configuration for the local AWX-on-minikube deployment."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from awx_minikube.validation import ConfigError

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _default_operator_dir() -> Path:
    return Path.home() / "awx-operator"


@dataclasses.dataclass(frozen=True, slots=True)
class Config:
    """Configuration for deploying AWX onto a local minikube cluster.

    A single instance is built by the CLI and passed to every component.
    Relative manifest paths are resolved against ``operator_dir``.

    Attributes:
        operator_version: Git tag of the AWX operator release to deploy.
        operator_dir: Local clone of the operator repository. Never re-cloned
            or updated once present.
        template_token: Token in the template manifest replaced by
            ``instance_name`` when rendering the deploy manifest.
        poll_interval: Seconds between readiness probes.
        max_wait: Readiness budget in seconds before giving up.
        settle_delay: Seconds to wait after both deployments report ready,
            since ``availableReplicas`` flips before AWX finishes migrating.
        admin_secret_name: Exact name of the admin password secret. When
            None it is derived from ``instance_name``.

    """

    operator_version: str = "2.19.1"
    operator_repo_url: str = "https://github.com/ansible/awx-operator.git"
    operator_dir: Path = dataclasses.field(default_factory=_default_operator_dir)
    template_manifest: Path = dataclasses.field(
        default_factory=lambda: Path("awx-demo.yml")
    )
    deploy_manifest: Path = dataclasses.field(default_factory=lambda: Path("awx.yml"))
    template_token: str = "awx-demo"
    instance_name: str = "awx"
    namespace: str = "ansible-awx"
    service: str = "awx-service"
    local_port: int = 8080
    remote_port: int = 80
    web_deployment: str = "awx-web"
    task_deployment: str = "awx-task"
    minikube_driver: str = "docker"
    poll_interval: int = 60
    max_wait: int = 600
    settle_delay: int = 120
    # S105 false positive: a Kubernetes Secret resource name, not a password.
    admin_secret_name: str | None = None  # noqa: S105

    def __post_init__(self) -> None:
        """Validate port numbers and polling budgets."""
        for label, port in (
            ("local_port", self.local_port),
            ("remote_port", self.remote_port),
        ):
            if not _MIN_PORT <= port <= _MAX_PORT:
                msg = f"{label} must be between {_MIN_PORT} and {_MAX_PORT}, got {port}"
                raise ConfigError(msg)
        if self.poll_interval <= 0:
            msg = f"poll_interval must be positive, got {self.poll_interval}"
            raise ConfigError(msg)
        if self.max_wait < 0:
            msg = f"max_wait must be >= 0, got {self.max_wait}"
            raise ConfigError(msg)
        if self.settle_delay < 0:
            msg = f"settle_delay must be >= 0, got {self.settle_delay}"
            raise ConfigError(msg)
        if not self.template_token:
            msg = "template_token cannot be empty"
            raise ConfigError(msg)

    @property
    def template_path(self) -> Path:
        """Template manifest shipped with the operator repository."""
        return self.operator_dir / self.template_manifest

    @property
    def deploy_path(self) -> Path:
        """Rendered manifest applied to the cluster."""
        return self.operator_dir / self.deploy_manifest

    @property
    def access_url(self) -> str:
        """Local URL served by the port-forward."""
        return f"http://localhost:{self.local_port}"

    @property
    def admin_secret(self) -> str:
        """Exact name of the secret holding the AWX admin password."""
        return self.admin_secret_name or f"{self.instance_name}-admin-password"
