from typing import Any

from ecsroll.core import Component, Response, operation

from ._models import DeployOptions, DeployResult


class ServiceDeployment(Component):
    def __init__(self, **kwargs):
        """Initialize.

        Args:
            __provider__:
                Provider instance, provider name under ``providers``
                or a dict with ``type`` and ``parameters``.
        """
        super().__init__(**kwargs)

    @operation()
    def deploy(
        self,
        options: DeployOptions | None = None,
        **kwargs: Any,
    ) -> Response[DeployResult]:
        """Deploy the task definition to the service."""
        ...

    @operation()
    async def adeploy(
        self,
        options: DeployOptions | None = None,
        **kwargs: Any,
    ) -> Response[DeployResult]:
        """Deploy the task definition to the service."""
        ...
