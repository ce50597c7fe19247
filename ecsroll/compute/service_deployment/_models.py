from typing import Annotated, Any, Literal

from pydantic import ConfigDict, NonNegativeInt

from ecsroll.core import DataModel, DataModelField

KEEP_DESIRED_COUNT = "keep"

DAEMON_SCHEDULING_STRATEGY = "DAEMON"


class LoadBalancerBinding(DataModel):
    """Load balancer attached to a service container."""

    model_config = ConfigDict(frozen=True)

    container_name: str
    container_port: int
    target_group_arn: str | None = None
    load_balancer_name: str | None = None


class TaskSet(DataModel):
    """Task set of a service released through CodeDeploy."""

    model_config = ConfigDict(frozen=True)

    id: str
    external_id: str | None = None
    status: str | None = None


class ServiceSnapshot(DataModel):
    """State of the service as described before the deploy."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    cluster_name: str
    desired_count: int = 0
    scheduling_strategy: str = "REPLICA"
    task_definition: str | None = None

    # Deployment controller type, None when the service has no controller
    deployment_controller: str | None = None

    # Copied forward to rolling updates as is
    network_configuration: dict[str, Any] | None = None
    health_check_grace_period_seconds: int | None = None
    platform_version: str | None = None

    load_balancers: tuple[LoadBalancerBinding, ...] = ()
    task_sets: tuple[TaskSet, ...] = ()


class DeployOptions(DataModel):
    """Options of one deploy run."""

    model_config = ConfigDict(frozen=True)

    desired_count: NonNegativeInt | Literal["keep"] = KEEP_DESIRED_COUNT
    skip_task_definition: bool = False
    dry_run: bool = False
    force_new_deployment: bool = False
    no_wait: bool = False
    rollback_events: str = ""

    # None leaves the scalable targets untouched
    suspend_auto_scaling: bool | None = None


class UnmanagedCount(DataModel):
    """Replica count owned by the scheduler (daemon services)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unmanaged"] = "unmanaged"

    def __str__(self) -> str:
        return "unmanaged"


class ExplicitCount(DataModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["explicit"] = "explicit"
    value: NonNegativeInt

    def __str__(self) -> str:
        return str(self.value)


ResolvedCount = Annotated[
    UnmanagedCount | ExplicitCount, DataModelField(discriminator="kind")
]


class DeploymentGroupRef(DataModel):
    """CodeDeploy names inherited from the deployment of the task set."""

    model_config = ConfigDict(frozen=True)

    application_name: str
    deployment_group_name: str
    deployment_config_name: str | None = None


class RollingStrategy(DataModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["rolling"] = "rolling"


class BlueGreenStrategy(DataModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["blue_green"] = "blue_green"
    deployment_group: DeploymentGroupRef


RolloutStrategy = Annotated[
    RollingStrategy | BlueGreenStrategy, DataModelField(discriminator="kind")
]


class ServiceUpdate(DataModel):
    """Update service request.

    Fields left as None are not sent, so the service keeps its value.
    """

    model_config = ConfigDict(frozen=True)

    task_definition: str | None = None
    desired_count: ResolvedCount = UnmanagedCount()
    force_new_deployment: bool | None = None
    network_configuration: dict[str, Any] | None = None
    health_check_grace_period_seconds: int | None = None
    platform_version: str | None = None


class DeploymentRequest(DataModel):
    """Create deployment request for CodeDeploy."""

    model_config = ConfigDict(frozen=True)

    deployment_group: DeploymentGroupRef
    manifest: str
    rollback_events: tuple[str, ...] = ()


class SubmittedDeployment(DataModel):
    id: str
    console_url: str


class DeployResult(DataModel):
    service_name: str
    cluster_name: str
    strategy: RolloutStrategy | None = None
    task_definition: str | None = None
    desired_count: ResolvedCount
    dry_run: bool = False
    deployment: SubmittedDeployment | None = None
    stable: bool | None = None


class ServiceDeploymentConfig(DataModel):
    """Deploy configuration file."""

    region: str = "us-west-2"
    cluster: str = "default"
    service: str
    task_definition: str | None = None
    timeout: float = 600
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None
    profile_name: str | None = None
