from typing import Any

from ecsroll.core.exceptions import ValidationError

from ._helper import call_remote
from ._models import (
    BlueGreenStrategy,
    DeploymentGroupRef,
    RolloutStrategy,
    RollingStrategy,
    ServiceSnapshot,
)

ECS_CONTROLLER = "ECS"
CODE_DEPLOY_CONTROLLER = "CODE_DEPLOY"


async def select_strategy(
    snapshot: ServiceSnapshot,
    backend: Any,
) -> RolloutStrategy:
    """Pick how the service is rolled out from its deployment controller.

    CodeDeploy services also resolve the deployment group here, so that an
    unusable service fails before anything is changed.
    """
    controller = snapshot.deployment_controller
    if controller is None or controller == ECS_CONTROLLER:
        return RollingStrategy()
    if controller == CODE_DEPLOY_CONTROLLER:
        deployment_group = await resolve_deployment_group(snapshot, backend)
        return BlueGreenStrategy(deployment_group=deployment_group)
    raise ValidationError(
        f"could not deploy a service using deployment controller type "
        f"{controller}"
    )


async def resolve_deployment_group(
    snapshot: ServiceSnapshot,
    backend: Any,
) -> DeploymentGroupRef:
    if not snapshot.task_sets:
        raise ValidationError(
            f"taskSet is not found in service {snapshot.service_name}. "
            f"The service has not been deployed by CodeDeploy yet, "
            f"or its task set is still being created."
        )
    task_set = snapshot.task_sets[0]
    if not task_set.external_id:
        raise ValidationError(
            f"taskSet {task_set.id} of service {snapshot.service_name} "
            f"has no CodeDeploy deployment id."
        )
    return await call_remote(
        "get deployment",
        backend.get_deployment_group,
        deployment_id=task_set.external_id,
    )
