"""Validation helpers and exceptions for the AWX minikube deployment.

This module provides the foundational utilities used across the
awx_minikube package: executable verification, base64 decoding of secret
values, and the custom exception hierarchy.

Custom Exceptions
-----------------
- ``AwxMinikubeError``: Base exception for all package errors
- ``ConfigError``: Raised when configuration values are out of range
- ``ExecutableNotFoundError``: Raised when a required CLI tool is missing
- ``ReadinessTimeoutError``: Raised when AWX does not become ready in time
- ``SecretNotFoundError``: Raised when no admin password secret matches
- ``AmbiguousSecretError``: Raised when several secrets match and none is exact
- ``SecretDecodeError``: Raised when secret decoding fails

Examples
--------
Verify required executables before proceeding:

    require_exe("minikube")
    require_exe("kubectl")

Decode a secret value retrieved from Kubernetes:

    password = b64decode_k8s_secret_field("c2VjcmV0")

"""

from __future__ import annotations

import base64
import shutil


class AwxMinikubeError(Exception):
    """Base exception for all awx_minikube package errors."""


class ConfigError(AwxMinikubeError, ValueError):
    """Configuration value is invalid."""


class ExecutableNotFoundError(AwxMinikubeError):
    """Required CLI tool is not installed."""


class ReadinessTimeoutError(AwxMinikubeError):
    """AWX deployments did not become available within the wait budget."""

    def __init__(self, elapsed: int, max_wait: int) -> None:
        """Record the elapsed time and the budget that was exceeded."""
        self.elapsed = elapsed
        self.max_wait = max_wait
        super().__init__(
            f"AWX is not ready after {max_wait} seconds. Port-forwarding aborted."
        )


class SecretNotFoundError(AwxMinikubeError):
    """No secret matching the admin password marker was found."""


class AmbiguousSecretError(AwxMinikubeError):
    """Several secrets match the admin password marker."""


class SecretDecodeError(AwxMinikubeError):
    """Failed to decode a Kubernetes secret field."""


def require_exe(name: str) -> None:
    """Verify a CLI tool is available in PATH.

    Parameters
    ----------
    name : str
        Name of the executable to check for.

    Raises
    ------
    ExecutableNotFoundError
        If the executable is not found in PATH.

    """
    if shutil.which(name) is None:
        msg = f"Required executable '{name}' not found in PATH"
        raise ExecutableNotFoundError(msg)


def b64decode_k8s_secret_field(b64_text: str) -> str:
    """Decode a base64-encoded Kubernetes secret value.

    Parameters
    ----------
    b64_text : str
        Base64-encoded string from a Kubernetes secret.

    Returns
    -------
    str
        The decoded UTF-8 string.

    Raises
    ------
    SecretDecodeError
        If the input is not valid base64 or cannot be decoded as UTF-8 text.

    """
    try:
        return base64.b64decode(b64_text, validate=True).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        msg = f"Failed to decode secret field: {e}"
        raise SecretDecodeError(msg) from e
