"""Local AWX-on-minikube deployment package.

This package deploys AWX onto a local minikube cluster through the AWX
operator and exposes it on a local port. The primary entrypoints are:

- setup_environment: Deploy AWX if needed, expose it, and print the password
- deploy_awx: Install-or-skip decision plus the install path
- show_environment_status: Display the AWX deployments and readiness
- show_admin_password: Print the decoded admin password

For lower-level operations, import directly from submodules:

- awx_minikube.minikube: minikube status and start
- awx_minikube.operator_repo: operator clone, checkout, install, manifest
- awx_minikube.k8s: kubectl namespace, manifest, deployment, secret calls
- awx_minikube.readiness: readiness probe and waiter
- awx_minikube.port_forward: background port-forward management
- awx_minikube.credentials: admin password secret lookup

"""

from __future__ import annotations

__version__ = "0.1.0"

from awx_minikube.config import Config  # noqa: E402
from awx_minikube.orchestration import (  # noqa: E402
    deploy_awx,
    setup_environment,
    show_admin_password,
    show_environment_status,
)
from awx_minikube.validation import (  # noqa: E402
    AmbiguousSecretError,
    AwxMinikubeError,
    ConfigError,
    ExecutableNotFoundError,
    ReadinessTimeoutError,
    SecretDecodeError,
    SecretNotFoundError,
)

# Public API: only stable exports for external consumers
__all__ = [
    "AmbiguousSecretError",
    "AwxMinikubeError",
    "Config",
    "ConfigError",
    "ExecutableNotFoundError",
    "ReadinessTimeoutError",
    "SecretDecodeError",
    "SecretNotFoundError",
    "__version__",
    "deploy_awx",
    "setup_environment",
    "show_admin_password",
    "show_environment_status",
]
