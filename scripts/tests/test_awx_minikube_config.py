"""Unit tests for awx_minikube Config dataclass."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest
from awx_minikube import Config, ConfigError


class TestConfig:
    """Tests for Config dataclass."""

    def test_config_defaults(self) -> None:
        """Config should default to the pinned AWX operator deployment."""
        cfg = Config()

        assert cfg.operator_version == "2.19.1"
        assert cfg.operator_repo_url == "https://github.com/ansible/awx-operator.git"
        assert cfg.operator_dir == Path.home() / "awx-operator"
        assert cfg.namespace == "ansible-awx"
        assert cfg.service == "awx-service"
        assert cfg.local_port == 8080
        assert cfg.remote_port == 80
        assert cfg.web_deployment == "awx-web"
        assert cfg.task_deployment == "awx-task"
        assert cfg.minikube_driver == "docker"
        assert cfg.poll_interval == 60
        assert cfg.max_wait == 600
        assert cfg.settle_delay == 120

    def test_config_is_frozen(self) -> None:
        """Config should be immutable."""
        cfg = Config()

        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.namespace = "other"  # type: ignore[misc]

    def test_manifest_paths_resolve_against_operator_dir(self, tmp_path: Path) -> None:
        """Template and deploy manifests should live inside the clone."""
        cfg = Config(operator_dir=tmp_path)

        assert cfg.template_path == tmp_path / "awx-demo.yml"
        assert cfg.deploy_path == tmp_path / "awx.yml"

    def test_access_url_uses_local_port(self) -> None:
        """access_url should point at the forwarded local port."""
        assert Config(local_port=9090).access_url == "http://localhost:9090"

    def test_admin_secret_derived_from_instance_name(self) -> None:
        """The admin secret name should follow the operator's convention."""
        assert Config().admin_secret == "awx-admin-password"  # noqa: S105
        assert Config(instance_name="tower").admin_secret == "tower-admin-password"

    def test_explicit_admin_secret_name_wins(self) -> None:
        """An explicit admin secret name should override the derived one."""
        cfg = Config(admin_secret_name="custom-secret")  # noqa: S106

        assert cfg.admin_secret == "custom-secret"  # noqa: S105

    @pytest.mark.parametrize(
        ("overrides", "error_match"),
        [
            ({"local_port": 0}, "local_port must be between 1 and 65535"),
            ({"remote_port": 70000}, "remote_port must be between 1 and 65535"),
            ({"poll_interval": 0}, "poll_interval must be positive"),
            ({"max_wait": -1}, "max_wait must be >= 0"),
            ({"settle_delay": -5}, "settle_delay must be >= 0"),
            ({"template_token": ""}, "template_token cannot be empty"),
        ],
    )
    def test_rejects_invalid_values(
        self, overrides: dict[str, object], error_match: str
    ) -> None:
        """Config should reject out-of-range values."""
        with pytest.raises(ConfigError, match=error_match):
            Config(**overrides)  # type: ignore[arg-type]

    def test_config_error_is_value_error(self) -> None:
        """ConfigError should be catchable as ValueError."""
        with pytest.raises(ValueError, match="local_port"):
            Config(local_port=-1)
