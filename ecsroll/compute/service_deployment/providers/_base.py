from datetime import datetime
from typing import Any

from ecsroll.core import Provider, Response, run_sync

from .._deployer import Deployer
from .._models import (
    DeploymentGroupRef,
    DeploymentRequest,
    DeployOptions,
    DeployResult,
    ServiceSnapshot,
    ServiceUpdate,
)
from .._observer import (
    BrowserNotifier,
    ConsoleObserver,
    DeployObserver,
    URLNotifier,
)
from .._updaters import SERVICE_SETTLE_DELAY


class BaseServiceDeploymentProvider(Provider):
    cluster_name: str
    service_name: str
    observer: DeployObserver | None = None
    notifier: URLNotifier | None = None
    settle_delay: float = SERVICE_SETTLE_DELAY
    debug: bool = False

    def deploy(
        self,
        options: DeployOptions | None = None,
        **kwargs: Any,
    ) -> Response[DeployResult]:
        return run_sync(self.adeploy, options=options, **kwargs)

    async def adeploy(
        self,
        options: DeployOptions | None = None,
        **kwargs: Any,
    ) -> Response[DeployResult]:
        await self.__asetup__()
        deployer = Deployer(
            backend=self,
            observer=self._get_observer(),
            notifier=self._get_notifier(),
            settle_delay=self.settle_delay,
        )
        result = await deployer.run(options or DeployOptions())
        return Response(result=result)

    def _get_observer(self) -> DeployObserver:
        if self.observer is None:
            self.observer = ConsoleObserver(
                prefix=f"{self.service_name}/{self.cluster_name}",
                debug=self.debug,
            )
        return self.observer

    def _get_notifier(self) -> URLNotifier | None:
        if self.notifier is not None:
            return self.notifier
        return BrowserNotifier()

    def describe_service_status(self) -> ServiceSnapshot:
        raise NotImplementedError(
            "Describe service status must be implemented by provider."
        )

    def load_task_definition(self) -> dict[str, Any]:
        raise NotImplementedError(
            "Load task definition must be implemented by provider."
        )

    def register_task_definition(self, task_definition: dict[str, Any]) -> str:
        raise NotImplementedError(
            "Register task definition must be implemented by provider."
        )

    def update_service(self, request: ServiceUpdate) -> None:
        raise NotImplementedError(
            "Update service must be implemented by provider."
        )

    def suspend_auto_scaling(self, suspend: bool) -> None:
        raise NotImplementedError(
            "Suspend auto scaling must be implemented by provider."
        )

    def get_deployment_group(self, deployment_id: str) -> DeploymentGroupRef:
        raise NotImplementedError(
            "Get deployment group must be implemented by provider."
        )

    def create_deployment(self, request: DeploymentRequest) -> str:
        raise NotImplementedError(
            "Create deployment must be implemented by provider."
        )

    def get_console_url(self, deployment_id: str) -> str:
        raise NotImplementedError(
            "Get console url must be implemented by provider."
        )

    async def await_service_stable(self, since: datetime) -> None:
        raise NotImplementedError(
            "Wait service stable must be implemented by provider."
        )
