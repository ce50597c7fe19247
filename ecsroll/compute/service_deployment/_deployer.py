import json
from typing import Any

from ._dispatcher import select_strategy
from ._helper import call_remote, resolve_desired_count
from ._models import (
    BlueGreenStrategy,
    DeployOptions,
    DeployResult,
    ExplicitCount,
    ServiceSnapshot,
)
from ._observer import DeployObserver, URLNotifier
from ._updaters import (
    NOTIFY_TIMEOUT,
    SERVICE_SETTLE_DELAY,
    BlueGreenUpdater,
    RollingUpdater,
)


class Deployer:
    """Runs one deploy of a service against a backend.

    The backend is a service deployment provider. Every call to it is
    wrapped with the name of the stage that made it.
    """

    backend: Any
    observer: DeployObserver
    notifier: URLNotifier | None
    settle_delay: float
    notify_timeout: float

    def __init__(
        self,
        backend: Any,
        observer: DeployObserver | None = None,
        notifier: URLNotifier | None = None,
        settle_delay: float = SERVICE_SETTLE_DELAY,
        notify_timeout: float = NOTIFY_TIMEOUT,
    ):
        self.backend = backend
        self.observer = observer or DeployObserver()
        self.notifier = notifier
        self.settle_delay = settle_delay
        self.notify_timeout = notify_timeout

    async def run(self, options: DeployOptions) -> DeployResult:
        self.observer.log("Starting deploy")
        snapshot: ServiceSnapshot = await call_remote(
            "describe service status", self.backend.describe_service_status
        )

        desired_count = resolve_desired_count(
            snapshot.scheduling_strategy,
            options.desired_count,
            snapshot.desired_count,
        )
        task_definition = await self._stage_task_definition(snapshot, options)
        if isinstance(desired_count, ExplicitCount):
            self.observer.log("desired count:", desired_count.value)

        result = DeployResult(
            service_name=snapshot.service_name,
            cluster_name=snapshot.cluster_name,
            task_definition=task_definition,
            desired_count=desired_count,
            dry_run=options.dry_run,
        )
        if options.dry_run:
            self.observer.log("DRY RUN OK")
            return result

        # no service mutation happens before this point
        strategy = await select_strategy(snapshot, self.backend)
        result.strategy = strategy
        # after dispatch so that an undeployable service never touches
        # auto scaling, before any service update or deployment
        await self._coordinate_auto_scaling(options)

        if isinstance(strategy, BlueGreenStrategy):
            updater = BlueGreenUpdater(
                backend=self.backend,
                observer=self.observer,
                notifier=self.notifier,
                notify_timeout=self.notify_timeout,
            )
            result.deployment = await updater.update(
                snapshot=snapshot,
                strategy=strategy,
                task_definition=task_definition,
                desired_count=desired_count,
                options=options,
            )
            return result

        rolling = RollingUpdater(
            backend=self.backend,
            observer=self.observer,
            settle_delay=self.settle_delay,
        )
        result.stable = await rolling.update(
            snapshot=snapshot,
            task_definition=task_definition,
            desired_count=desired_count,
            options=options,
        )
        return result

    async def _stage_task_definition(
        self,
        snapshot: ServiceSnapshot,
        options: DeployOptions,
    ) -> str | None:
        if options.skip_task_definition:
            return snapshot.task_definition

        task_definition = await call_remote(
            "load task definition", self.backend.load_task_definition
        )
        if options.dry_run:
            self.observer.log(
                "task definition:",
                json.dumps(task_definition, indent=2, default=str),
            )
            return None

        arn = await call_remote(
            "register task definition",
            self.backend.register_task_definition,
            task_definition,
        )
        self.observer.log("Task definition is registered", arn)
        return arn

    async def _coordinate_auto_scaling(self, options: DeployOptions) -> None:
        if options.suspend_auto_scaling is None:
            return
        await call_remote(
            "suspend auto scaling" if options.suspend_auto_scaling
            else "resume auto scaling",
            self.backend.suspend_auto_scaling,
            options.suspend_auto_scaling,
        )
