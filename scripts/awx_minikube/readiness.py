"""Readiness probing and bounded waiting for the AWX deployments.

AWX is considered ready when both the web and task deployments exist and
each reports exactly one available replica. The waiter polls that verdict
on a fixed interval, gives up after a fixed budget, and holds a settle
delay once the deployments report ready, since ``availableReplicas`` flips
to 1 before AWX has finished its database migrations.

The waiter accounts elapsed time in interval steps and sleeps through an
injectable callable, so tests drive it with a fake sleep.

Examples
--------
Wait for AWX using the configured budget:

    waiter = ReadinessWaiter.for_config(cfg, env)
    waiter.wait()

"""

from __future__ import annotations

import enum
import time
import typing as typ

from awx_minikube.k8s import available_replicas, deployment_exists, print_deployments
from awx_minikube.logging import get_logger, log_info
from awx_minikube.validation import ReadinessTimeoutError

if typ.TYPE_CHECKING:
    from awx_minikube.config import Config

logger = get_logger(__name__)

# A deployment counts as ready when exactly this many replicas are available.
_READY_REPLICAS = 1


class Readiness(enum.StrEnum):
    """Verdict returned by the readiness probe."""

    READY = "ready"
    NOT_READY = "not_ready"


class WaitState(enum.StrEnum):
    """States of the readiness waiter."""

    POLLING = "polling"
    SETTLING = "settling"
    READY = "ready"
    FAILED = "failed"


def probe(cfg: Config, env: dict[str, str]) -> Readiness:
    """Report whether the AWX web and task deployments are fully available.

    Missing deployments and unreadable replica counts yield NOT_READY rather
    than an error. The probe has no side effects.

    Parameters
    ----------
    cfg : Config
        Configuration with the namespace and deployment names.
    env : dict[str, str]
        Environment for the kubectl processes.

    Returns
    -------
    Readiness
        READY if both deployments report exactly one available replica.

    """
    names = (cfg.web_deployment, cfg.task_deployment)
    if not all(deployment_exists(name, cfg.namespace, env) for name in names):
        return Readiness.NOT_READY

    replicas = [available_replicas(name, cfg.namespace, env) for name in names]
    if all(count == _READY_REPLICAS for count in replicas):
        return Readiness.READY
    return Readiness.NOT_READY


class ReadinessWaiter:
    """Poll a readiness probe until it reports READY or the budget runs out.

    ``POLLING --(ready)--> SETTLING --(settle delay)--> READY`` and
    ``POLLING --(elapsed >= max_wait)--> FAILED``. FAILED is terminal and
    the probe is never called again once it is reached.
    """

    def __init__(  # noqa: PLR0913
        self,
        probe: typ.Callable[[], Readiness],
        on_not_ready: typ.Callable[[], None] | None = None,
        *,
        interval: int,
        max_wait: int,
        settle_delay: int,
        sleep: typ.Callable[[float], None] | None = None,
    ) -> None:
        """Store the probe, the polling budget, and the sleep function."""
        self._probe = probe
        self._on_not_ready = on_not_ready
        self.interval = interval
        self.max_wait = max_wait
        self.settle_delay = settle_delay
        self._sleep = sleep or time.sleep
        self.state = WaitState.POLLING
        self.elapsed = 0

    @classmethod
    def for_config(
        cls,
        cfg: Config,
        env: dict[str, str],
        *,
        sleep: typ.Callable[[float], None] | None = None,
    ) -> ReadinessWaiter:
        """Build a waiter that probes the configured AWX deployments."""
        return cls(
            lambda: probe(cfg, env),
            lambda: print_deployments(cfg.namespace, env),
            interval=cfg.poll_interval,
            max_wait=cfg.max_wait,
            settle_delay=cfg.settle_delay,
            sleep=sleep,
        )

    def wait(self) -> None:
        """Block until the probe reports READY and the settle delay elapses.

        Raises
        ------
        ReadinessTimeoutError
            If ``max_wait`` seconds elapse without a READY verdict.
        RuntimeError
            If called again after the waiter has finished.

        """
        if self.state is not WaitState.POLLING:
            msg = f"waiter already finished in state {self.state.value}"
            raise RuntimeError(msg)

        log_info(
            logger,
            "Checking AWX component readiness... (max. %d seconds)",
            self.max_wait,
        )
        while self._probe() is not Readiness.READY:
            if self.elapsed >= self.max_wait:
                self.state = WaitState.FAILED
                raise ReadinessTimeoutError(self.elapsed, self.max_wait)

            log_info(logger, "AWX not ready yet. Retrying in %ds...", self.interval)
            if self._on_not_ready is not None:
                self._on_not_ready()
            self._sleep(self.interval)
            self.elapsed += self.interval

        self.state = WaitState.SETTLING
        self._sleep(self.settle_delay)
        self.state = WaitState.READY
        log_info(logger, "AWX is ready (web and task deployments are available).")
