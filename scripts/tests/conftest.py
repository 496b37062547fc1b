"""Pytest configuration for scripts tests.

Adds the scripts directory to the Python path for imports and provides a
scripted stand-in for the external tools used by multi-step workflows.
The cmd-mox plugin is registered globally via pyproject.toml.
"""

from __future__ import annotations

import base64
import dataclasses
import os
import subprocess
import sys
import typing as typ
from pathlib import Path

import pytest

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

# Add scripts directory to path so we can import awx_minikube
_SCRIPTS_DIR = Path(__file__).resolve().parents[1]
if str(_SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(_SCRIPTS_DIR))

TEMPLATE_MANIFEST = """\
---
apiVersion: awx.ansible.com/v1beta1
kind: AWX
metadata:
  name: awx-demo
spec:
  service_type: nodeport
"""


@pytest.fixture
def test_env(tmp_path: Path) -> dict[str, str]:
    """Create a test environment with a temporary KUBECONFIG path.

    Returns a copy of the current environment with KUBECONFIG pointing to
    a temporary file, allowing cmd-mox shims to work properly during testing.
    """
    env = dict(os.environ)
    env["KUBECONFIG"] = str(tmp_path / "kubeconfig-test.yaml")
    return env


@pytest.fixture
def awx_config(tmp_path: Path) -> Config:
    """Config whose operator clone lives under the test's temporary path."""
    from awx_minikube.config import Config

    return Config(operator_dir=tmp_path / "awx-operator")


@dataclasses.dataclass(slots=True)
class FakePopen:
    """Minimal stand-in for a started subprocess.Popen."""

    args: list[str]
    pid: int


@dataclasses.dataclass(slots=True)
class FakeCluster:
    """Scripted behaviour of minikube, kubectl, git, make, and pgrep.

    Deployments map a name to its available replica count, or to None when
    the deployment exists but reports no availableReplicas field. Names
    missing from the mapping do not exist. The first ``replica_timeouts``
    replica queries time out instead of answering.
    """

    namespace: str = "ansible-awx"
    minikube_running: bool = True
    deployments: dict[str, int | None] = dataclasses.field(default_factory=dict)
    secrets: dict[str, str] = dataclasses.field(
        default_factory=lambda: {"awx-admin-password": "s3cr3t"}
    )
    forward_running: bool = False
    fail_on: tuple[str, ...] | None = None
    fail_code: int = 2
    replica_timeouts: int = 0
    calls: list[tuple[str, ...]] = dataclasses.field(default_factory=list)
    call_kwargs: list[dict[str, object]] = dataclasses.field(default_factory=list)
    popen_calls: list[tuple[str, ...]] = dataclasses.field(default_factory=list)
    sleeps: list[float] = dataclasses.field(default_factory=list)
    next_pid: int = 4242

    def has_call(self, *prefix: str) -> bool:
        """Return True if any recorded call starts with ``prefix``."""
        return any(c[: len(prefix)] == prefix for c in self.calls)

    def call_index(self, *prefix: str) -> int:
        """Return the position of the first call starting with ``prefix``."""
        for index, call in enumerate(self.calls):
            if call[: len(prefix)] == prefix:
                return index
        msg = f"no call starting with {prefix!r}"
        raise AssertionError(msg)

    def kwargs_for(self, *prefix: str) -> dict[str, object]:
        """Return the keyword arguments of the first matching call."""
        return self.call_kwargs[self.call_index(*prefix)]

    def _minikube(self, args: list[str]) -> tuple[str, int]:
        if args[1] == "status":
            if self.minikube_running:
                return "minikube\ntype: Control Plane\nhost: Running\n", 0
            return "minikube\ntype: Control Plane\nhost: Stopped\n", 7
        if args[1] == "start":
            self.minikube_running = True
        return "", 0

    def _git(self, args: list[str]) -> tuple[str, int]:
        if args[1] == "clone":
            dest = Path(args[3])
            dest.mkdir(parents=True)
            (dest / "awx-demo.yml").write_text(TEMPLATE_MANIFEST, encoding="utf-8")
        return "", 0

    def _kubectl_get_deployment(self, args: list[str]) -> tuple[str, int]:
        if len(args) == 5:  # kubectl get deployment -n NS
            return "", 0
        name = args[3]
        if name not in self.deployments:
            if "--ignore-not-found" in args:
                return "", 0
            return "", 1
        if "--ignore-not-found" in args:
            return f"NAME READY UP-TO-DATE AVAILABLE AGE\n{name} 0/1 1 0 1m\n", 0
        if self.replica_timeouts > 0:
            self.replica_timeouts -= 1
            raise subprocess.TimeoutExpired(args, 30)
        replicas = self.deployments[name]
        return ("" if replicas is None else str(replicas)), 0

    def _kubectl(self, args: list[str]) -> tuple[str, int]:
        if args[1:3] == ["get", "deployment"]:
            return self._kubectl_get_deployment(args)
        if args[1:3] == ["get", "secrets"]:
            return " ".join(self.secrets), 0
        if args[1:3] == ["get", "secret"]:
            value = self.secrets.get(args[3])
            if value is None:
                return "", 1
            return base64.b64encode(value.encode()).decode(), 0
        if args[1:3] == ["create", "namespace"]:
            return f"apiVersion: v1\nkind: Namespace\nmetadata:\n  name: {args[3]}\n", 0
        return "", 0

    def _dispatch(self, args: list[str]) -> tuple[str, int]:
        tool = args[0]
        if tool == "minikube":
            return self._minikube(args)
        if tool == "git":
            return self._git(args)
        if tool == "kubectl":
            return self._kubectl(args)
        if tool == "pgrep":
            return ("12345\n", 0) if self.forward_running else ("", 1)
        return "", 0

    def run(
        self, args: list[str], **kwargs: object
    ) -> subprocess.CompletedProcess[str]:
        """Handle a subprocess.run call."""
        self.calls.append(tuple(args))
        self.call_kwargs.append(kwargs)

        failing = self.fail_on is not None and (
            tuple(args[: len(self.fail_on)]) == self.fail_on
        )
        if failing:
            stdout, returncode = "", self.fail_code
        else:
            stdout, returncode = self._dispatch(list(args))

        if kwargs.get("check") and returncode != 0:
            raise subprocess.CalledProcessError(returncode, args, stdout, "")
        return subprocess.CompletedProcess(
            args=args, returncode=returncode, stdout=stdout, stderr=""
        )

    def popen(self, args: list[str], **_kwargs: object) -> FakePopen:
        """Handle a subprocess.Popen call."""
        self.popen_calls.append(tuple(args))
        self.forward_running = True
        return FakePopen(args=list(args), pid=self.next_pid)

    def sleep(self, seconds: float) -> None:
        """Record a sleep instead of blocking."""
        self.sleeps.append(seconds)


@pytest.fixture
def fake_cluster(monkeypatch: pytest.MonkeyPatch) -> FakeCluster:
    """Route subprocess, which, and sleep calls through a FakeCluster."""
    cluster = FakeCluster()
    monkeypatch.setattr("subprocess.run", cluster.run)
    monkeypatch.setattr("subprocess.Popen", cluster.popen)
    monkeypatch.setattr("shutil.which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr("time.sleep", cluster.sleep)
    return cluster


@pytest.fixture
def stub_basic_config(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    """Capture femtologging.basicConfig calls made by CLI commands."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("awx_minikube.logging.basicConfig", fake_basic_config)
    return captured
