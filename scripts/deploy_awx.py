#!/usr/bin/env -S uv run python
# /// script
# requires-python = ">=3.12"
# dependencies = ["cyclopts>=2.9", "femtologging>=0.1"]
# ///
"""Deploy AWX on a local minikube cluster.

Starts minikube if needed, installs the AWX operator at a pinned release,
applies the AWX manifest, waits for the web and task deployments, forwards
a local port to the AWX service, and prints the admin password.

Usage:
    uv run scripts/deploy_awx.py             # Same as "up"
    uv run scripts/deploy_awx.py up          # Deploy and expose AWX
    uv run scripts/deploy_awx.py status      # Show AWX deployments
    uv run scripts/deploy_awx.py password    # Print the admin password

Environment variables:
    AWX_MINIKUBE_NAMESPACE        - Kubernetes namespace (default: ansible-awx)
    AWX_MINIKUBE_OPERATOR_VERSION - AWX operator tag (default: 2.19.1)
    AWX_MINIKUBE_OPERATOR_DIR     - Operator clone (default: ~/awx-operator)
    AWX_MINIKUBE_LOCAL_PORT       - Local port for AWX (default: 8080)
    AWX_MINIKUBE_LOG_LEVEL        - Log level (default: INFO)
"""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running the script from a checkout without installing the package.
_SCRIPTS_DIR = Path(__file__).resolve().parent
if str(_SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(_SCRIPTS_DIR))

from awx_minikube.cli import app, main  # noqa: E402

__all__ = ["app", "main"]

if __name__ == "__main__":
    sys.exit(main())
