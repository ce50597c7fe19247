import asyncio
import json
from datetime import datetime, timezone
from typing import Any

from ecsroll.core import run_async
from ecsroll.core.exceptions import BestEffortError, RemoteCallError

from ._helper import build_release_manifest, call_remote, parse_rollback_events
from ._models import (
    BlueGreenStrategy,
    DeploymentRequest,
    DeployOptions,
    ExplicitCount,
    ResolvedCount,
    ServiceSnapshot,
    ServiceUpdate,
    SubmittedDeployment,
)
from ._observer import DeployObserver, URLNotifier

SERVICE_SETTLE_DELAY = 3.0

NOTIFY_TIMEOUT = 1.0


class RollingUpdater:
    """Rolls the service out with the ECS deployment controller."""

    backend: Any
    observer: DeployObserver
    settle_delay: float

    def __init__(
        self,
        backend: Any,
        observer: DeployObserver,
        settle_delay: float = SERVICE_SETTLE_DELAY,
    ):
        self.backend = backend
        self.observer = observer
        self.settle_delay = settle_delay

    async def update(
        self,
        snapshot: ServiceSnapshot,
        task_definition: str,
        desired_count: ResolvedCount,
        options: DeployOptions,
    ) -> bool | None:
        """Submit the update and wait unless asked not to.

        Returns True once the service is stable, None when not waited for.
        """
        msg = "Updating service"
        if options.force_new_deployment:
            msg = msg + " with force new deployment"
        self.observer.log(msg + "...")

        request = ServiceUpdate(
            task_definition=task_definition,
            desired_count=desired_count,
            force_new_deployment=options.force_new_deployment,
            network_configuration=snapshot.network_configuration,
            health_check_grace_period_seconds=(
                snapshot.health_check_grace_period_seconds
            ),
            platform_version=snapshot.platform_version,
        )
        await call_remote(
            "update service", self.backend.update_service, request
        )

        if options.no_wait:
            self.observer.log("Service is deployed.")
            return None

        since = datetime.now(timezone.utc)
        # the service reports its previous state for a moment
        await asyncio.sleep(self.settle_delay)
        try:
            await self.backend.await_service_stable(since=since)
        except Exception as e:
            raise RemoteCallError("wait service stable", e) from e

        self.observer.log("Service is stable now. Completed!")
        return True


class BlueGreenUpdater:
    """Releases the task definition through a CodeDeploy deployment."""

    backend: Any
    observer: DeployObserver
    notifier: URLNotifier | None
    notify_timeout: float

    def __init__(
        self,
        backend: Any,
        observer: DeployObserver,
        notifier: URLNotifier | None = None,
        notify_timeout: float = NOTIFY_TIMEOUT,
    ):
        self.backend = backend
        self.observer = observer
        self.notifier = notifier
        self.notify_timeout = notify_timeout
        self._pending = None

    async def update(
        self,
        snapshot: ServiceSnapshot,
        strategy: BlueGreenStrategy,
        task_definition: str,
        desired_count: ResolvedCount,
        options: DeployOptions,
    ) -> SubmittedDeployment:
        # CodeDeploy keeps the replica count of the service as is
        if (
            isinstance(desired_count, ExplicitCount)
            and desired_count.value != snapshot.desired_count
        ):
            self.observer.log("updating desired count to", desired_count.value)
            await call_remote(
                "update service",
                self.backend.update_service,
                ServiceUpdate(desired_count=desired_count),
            )

        manifest = build_release_manifest(
            task_definition, snapshot.load_balancers
        )
        self.observer.debug("appSpecContent:", manifest)

        request = DeploymentRequest(
            deployment_group=strategy.deployment_group,
            manifest=manifest,
            rollback_events=tuple(
                parse_rollback_events(options.rollback_events)
            ),
        )
        self.observer.debug(
            "creating a deployment to CodeDeploy",
            json.dumps(request.to_dict(), indent=2),
        )
        deployment_id = await call_remote(
            "create deployment", self.backend.create_deployment, request
        )
        deployment = SubmittedDeployment(
            id=deployment_id,
            console_url=self.backend.get_console_url(deployment_id),
        )
        self.observer.log(
            f"Deployment {deployment.id} is created on CodeDeploy:"
        )
        self.observer.log(deployment.console_url)
        await self._notify(deployment.console_url)
        return deployment

    async def _notify(self, url: str) -> None:
        if self.notifier is None:
            return
        notification = asyncio.ensure_future(run_async(self._open, url))
        # a slow viewer keeps running on its own after the timeout
        done, _ = await asyncio.wait(
            {notification}, timeout=self.notify_timeout
        )
        if notification in done:
            notification.result()
        else:
            self._pending = notification

    def _open(self, url: str) -> None:
        try:
            self.notifier.notify(url)
        except BestEffortError as e:
            self.observer.log("Couldn't open URL", url, f"({e})")
