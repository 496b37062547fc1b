"""AWX operator source checkout, installation, and manifest rendering.

The operator is installed from a local clone of ``ansible/awx-operator``
using its own ``make deploy`` target. The clone is left in place between
runs and is never updated, so local edits survive re-runs.

Examples
--------
Install the operator and render the AWX manifest:

    cfg = Config()
    ensure_operator_clone(cfg, env)
    checkout_operator_version(cfg, env)
    install_operator(cfg, env)
    render_manifest(cfg)

"""

from __future__ import annotations

import subprocess
import typing as typ

from awx_minikube.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from pathlib import Path

    from awx_minikube.config import Config

logger = get_logger(__name__)

_GIT_CLONE_TIMEOUT = 300
_GIT_CHECKOUT_TIMEOUT = 60
# make deploy builds kustomize and applies the operator bundle.
_MAKE_DEPLOY_TIMEOUT = 900


def clone_operator_repo(repo_url: str, dest: Path, env: dict[str, str]) -> None:
    """Clone the operator repository into ``dest``.

    Raises
    ------
    subprocess.CalledProcessError
        If git clone fails.

    """
    # S603/S607: git via PATH is standard; url and dest from Config
    subprocess.run(  # noqa: S603
        ["git", "clone", repo_url, str(dest)],  # noqa: S607
        check=True,
        env=env,
        timeout=_GIT_CLONE_TIMEOUT,
    )


def ensure_operator_clone(cfg: Config, env: dict[str, str]) -> bool:
    """Clone the operator repository unless ``operator_dir`` already exists.

    Parameters
    ----------
    cfg : Config
        Configuration with the repository URL and clone directory.
    env : dict[str, str]
        Environment for the git process.

    Returns
    -------
    bool
        True if a clone was made, False if the existing directory was kept.

    """
    log_info(logger, "Checking if AWX Operator repository is cloned...")
    if cfg.operator_dir.is_dir():
        return False

    log_info(logger, 'AWX Operator directory not found at "%s"', cfg.operator_dir)
    log_info(logger, "Cloning AWX Operator repository...")
    clone_operator_repo(cfg.operator_repo_url, cfg.operator_dir, env)
    return True


def checkout_operator_version(cfg: Config, env: dict[str, str]) -> None:
    """Switch the clone to the pinned operator release tag."""
    log_info(logger, 'Switching to AWX Operator version "%s"...', cfg.operator_version)
    # S603/S607: git via PATH is standard; tag from Config
    subprocess.run(  # noqa: S603
        ["git", "checkout", cfg.operator_version],  # noqa: S607
        check=True,
        cwd=cfg.operator_dir,
        env=env,
        timeout=_GIT_CHECKOUT_TIMEOUT,
    )


def install_operator(cfg: Config, env: dict[str, str]) -> None:
    """Install the operator into the cluster with ``make deploy``.

    The operator Makefile reads the target namespace from ``NAMESPACE``.

    Raises
    ------
    subprocess.CalledProcessError
        If the make target fails.

    """
    log_info(logger, 'Setting NAMESPACE="%s"', cfg.namespace)
    make_env = {**env, "NAMESPACE": cfg.namespace}

    log_info(logger, "Deploying AWX Operator...")
    # S603/S607: make via PATH is standard; target is fixed
    subprocess.run(  # noqa: S603
        ["make", "deploy"],  # noqa: S607
        check=True,
        cwd=cfg.operator_dir,
        env=make_env,
        timeout=_MAKE_DEPLOY_TIMEOUT,
    )


def render_manifest(cfg: Config) -> Path:
    """Render the AWX manifest from the operator's demo template.

    Every occurrence of ``cfg.template_token`` is replaced with
    ``cfg.instance_name``. An existing rendered file is overwritten.

    Returns
    -------
    Path
        Path of the rendered manifest.

    Raises
    ------
    FileNotFoundError
        If the template manifest does not exist.

    """
    log_info(logger, "Preparing AWX manifest...")
    if not cfg.template_path.is_file():
        msg = f"Template manifest not found at {cfg.template_path}"
        raise FileNotFoundError(msg)

    template = cfg.template_path.read_text(encoding="utf-8")
    rendered = template.replace(cfg.template_token, cfg.instance_name)
    cfg.deploy_path.write_text(rendered, encoding="utf-8")
    return cfg.deploy_path
