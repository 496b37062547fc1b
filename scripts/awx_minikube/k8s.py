"""Kubernetes namespace, manifest, deployment, and secret operations.

This module wraps the kubectl calls the deployment needs. Every function
takes an environment dictionary that is passed through to kubectl, so
callers decide which kubeconfig is used.

Examples
--------
Ensure a namespace exists before applying a manifest:

    ensure_namespace("ansible-awx", env)
    apply_manifest_file(Path("awx.yml"), "ansible-awx", env)

Query a deployment's available replicas:

    replicas = available_replicas("awx-web", "ansible-awx", env)

"""

from __future__ import annotations

import contextlib
import re
import subprocess
import typing as typ

from awx_minikube.validation import b64decode_k8s_secret_field

if typ.TYPE_CHECKING:
    from pathlib import Path

# Kubernetes secret keys must contain only alphanumeric, dot, underscore, or hyphen
_SECRET_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

_KUBECTL_TIMEOUT = 30
_KUBECTL_APPLY_TIMEOUT = 60


def ensure_namespace(namespace: str, env: dict[str, str]) -> None:
    """Make sure the AWX namespace exists before the operator is installed.

    The namespace manifest is rendered client-side and applied, so re-runs
    against an existing namespace succeed without touching it.

    Raises
    ------
    subprocess.CalledProcessError
        If kubectl cannot render or apply the namespace.

    """
    # Render the Namespace manifest without contacting the API server
    # S603/S607: kubectl via PATH is standard; namespace validated by k8s API
    result = subprocess.run(  # noqa: S603
        [  # noqa: S607
            "kubectl",
            "create",
            "namespace",
            namespace,
            "--dry-run=client",
            "-o",
            "yaml",
        ],
        capture_output=True,
        text=True,
        check=True,
        env=env,
        timeout=_KUBECTL_TIMEOUT,
    )
    # Apply for idempotent upsert
    # S607: kubectl via PATH is standard; no user input
    subprocess.run(
        ["kubectl", "apply", "-f", "-"],  # noqa: S607
        input=result.stdout,
        text=True,
        check=True,
        env=env,
        timeout=_KUBECTL_TIMEOUT,
    )


def apply_manifest_file(path: Path, namespace: str, env: dict[str, str]) -> None:
    """Apply a manifest file into a namespace via kubectl."""
    # S603/S607: kubectl via PATH is standard; path rendered internally
    subprocess.run(  # noqa: S603
        ["kubectl", "apply", "-f", str(path), "-n", namespace],  # noqa: S607
        check=True,
        env=env,
        timeout=_KUBECTL_APPLY_TIMEOUT,
    )


def deployment_exists(name: str, namespace: str, env: dict[str, str]) -> bool:
    """Check if a deployment exists in a namespace.

    ``--ignore-not-found`` makes kubectl print nothing for a missing
    deployment. A failing or timed-out query is treated as absent.

    Returns
    -------
    bool
        True if kubectl printed the deployment, False otherwise.

    """
    try:
        # S603/S607: kubectl via PATH is standard; names from Config
        result = subprocess.run(  # noqa: S603
            [  # noqa: S607
                "kubectl",
                "get",
                "deployment",
                name,
                "-n",
                namespace,
                "--ignore-not-found",
            ],
            capture_output=True,
            text=True,
            env=env,
            timeout=_KUBECTL_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        return False
    return result.returncode == 0 and bool((result.stdout or "").strip())


def available_replicas(name: str, namespace: str, env: dict[str, str]) -> int:
    """Return a deployment's ``.status.availableReplicas``.

    The field is omitted by the API server while no replica is available,
    so empty output, a failing or timed-out query, or a non-numeric value
    all count as 0.

    Returns
    -------
    int
        Number of available replicas.

    """
    try:
        # S603/S607: kubectl via PATH is standard; names from Config
        result = subprocess.run(  # noqa: S603
            [  # noqa: S607
                "kubectl",
                "get",
                "deployment",
                name,
                "-n",
                namespace,
                "-o",
                "jsonpath={.status.availableReplicas}",
            ],
            capture_output=True,
            text=True,
            env=env,
            timeout=_KUBECTL_TIMEOUT,
        )
    except subprocess.TimeoutExpired:
        return 0
    if result.returncode != 0:
        return 0
    try:
        return int((result.stdout or "").strip())
    except ValueError:
        return 0


def print_deployments(namespace: str, env: dict[str, str]) -> None:
    """Print the deployments in a namespace.

    Output goes straight to the terminal. A failing or timed-out query is
    not fatal, since this is only used to show progress.

    """
    # S603/S607: kubectl via PATH is standard; namespace from Config
    with contextlib.suppress(subprocess.TimeoutExpired):
        subprocess.run(  # noqa: S603
            ["kubectl", "get", "deployment", "-n", namespace],  # noqa: S607
            check=False,
            env=env,
            timeout=_KUBECTL_TIMEOUT,
        )


def list_secret_names(namespace: str, env: dict[str, str]) -> list[str]:
    """Return the names of all secrets in a namespace."""
    # S603/S607: kubectl via PATH is standard; namespace from Config
    result = subprocess.run(  # noqa: S603
        [  # noqa: S607
            "kubectl",
            "get",
            "secrets",
            "-n",
            namespace,
            "-o",
            "jsonpath={.items[*].metadata.name}",
        ],
        capture_output=True,
        text=True,
        check=True,
        env=env,
        timeout=_KUBECTL_TIMEOUT,
    )
    return (result.stdout or "").split()


def read_secret_field(
    secret_name: str, field: str, namespace: str, env: dict[str, str]
) -> str:
    """Read one base64-encoded data key of a secret and decode it.

    Used for the ``password`` key of the operator-generated admin secret.
    The key is checked against the Kubernetes data-key alphabet before it
    is quoted into the jsonpath expression.

    Parameters
    ----------
    secret_name : str
        Secret to read, e.g. ``awx-admin-password``.
    field : str
        Data key to read, e.g. ``password``.
    namespace : str
        Namespace of the AWX instance.
    env : dict[str, str]
        Environment for the kubectl process.

    Returns
    -------
    str
        The decoded value.

    Raises
    ------
    ValueError
        If the key is empty or not a valid data key, or the secret holds no
        value for it.
    SecretDecodeError
        If the stored value is not base64-encoded UTF-8 text.
    subprocess.CalledProcessError
        If kubectl cannot read the secret.

    """
    if not field:
        msg = "field cannot be empty"
        raise ValueError(msg)
    if not _SECRET_KEY_PATTERN.match(field):
        msg = (
            f"field '{field}' contains invalid characters; "
            "only alphanumeric, dot, underscore, and hyphen are allowed"
        )
        raise ValueError(msg)

    jsonpath = f"jsonpath={{.data['{field}']}}"

    # S603/S607: kubectl via PATH is standard; key validated above
    result = subprocess.run(  # noqa: S603
        [  # noqa: S607
            "kubectl",
            "get",
            "secret",
            secret_name,
            f"--namespace={namespace}",
            "-o",
            jsonpath,
        ],
        capture_output=True,
        text=True,
        check=True,
        env=env,
        timeout=_KUBECTL_TIMEOUT,
    )

    output = result.stdout.strip()
    if not output:
        msg = (
            f"Secret '{secret_name}' field '{field}' is empty or missing "
            f"in namespace '{namespace}'"
        )
        raise ValueError(msg)

    return b64decode_k8s_secret_field(output)
