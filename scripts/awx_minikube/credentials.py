"""AWX admin password retrieval.

The operator's bootstrap creates a secret named ``<instance>-admin-password``
whose ``password`` field holds the generated admin password. Secrets are
matched by a case-insensitive ``password`` marker; the exact configured name
wins when several match.
"""

from __future__ import annotations

import typing as typ

from awx_minikube.k8s import list_secret_names, read_secret_field
from awx_minikube.validation import AmbiguousSecretError, SecretNotFoundError

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

_PASSWORD_MARKER = "password"  # noqa: S105
_PASSWORD_FIELD = "password"  # noqa: S105


def select_admin_secret(names: typ.Iterable[str], exact_name: str) -> str:
    """Pick the admin password secret from a list of secret names.

    Parameters
    ----------
    names : Iterable[str]
        Secret names in the namespace.
    exact_name : str
        Preferred secret name when several candidates match.

    Returns
    -------
    str
        Name of the selected secret.

    Raises
    ------
    SecretNotFoundError
        If no name contains the password marker.
    AmbiguousSecretError
        If several names match and none equals ``exact_name``.

    """
    candidates = sorted(
        name for name in names if _PASSWORD_MARKER in name.casefold()
    )
    if exact_name in candidates:
        return exact_name
    if not candidates:
        msg = "No secret with 'password' in its name was found"
        raise SecretNotFoundError(msg)
    if len(candidates) > 1:
        msg = (
            f"Several secrets match 'password' ({', '.join(candidates)}) and "
            f"none is named '{exact_name}'"
        )
        raise AmbiguousSecretError(msg)
    return candidates[0]


def find_admin_secret(cfg: Config, env: dict[str, str]) -> str:
    """Return the name of the admin password secret in the AWX namespace."""
    names = list_secret_names(cfg.namespace, env)
    return select_admin_secret(names, cfg.admin_secret)


def read_admin_password(cfg: Config, env: dict[str, str]) -> str:
    """Read and decode the AWX admin password."""
    secret_name = find_admin_secret(cfg, env)
    return read_secret_field(secret_name, _PASSWORD_FIELD, cfg.namespace, env)


def report_admin_password(cfg: Config, env: dict[str, str]) -> str:
    """Print the AWX admin password and return it."""
    password = read_admin_password(cfg, env)
    print(f"AWX admin password: {password}")
    return password
