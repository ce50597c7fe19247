from typing import Any, Callable, Literal

from ecsroll.core import run_async
from ecsroll.core.exceptions import RemoteCallError

from ._models import (
    DAEMON_SCHEDULING_STRATEGY,
    KEEP_DESIRED_COUNT,
    ExplicitCount,
    LoadBalancerBinding,
    ResolvedCount,
    UnmanagedCount,
)

CONSOLE_URL_FORMAT = (
    "https://{region}.console.{domain}/codesuite/codedeploy/deployments/"
    "{deployment_id}?region={region}"
)

APPSPEC_WITH_LB_FORMAT = """version: 1
Resources:
- TargetService:
    Type: AWS::ECS::Service
    Properties:
      TaskDefinition: "{task_definition}"
      LoadBalancerInfo:
        ContainerName: {container_name}
        ContainerPort: {container_port}
"""

APPSPEC_WITHOUT_LB_FORMAT = """version: 1
Resources:
- TargetService:
    Type: AWS::ECS::Service
    Properties:
      TaskDefinition: "{task_definition}"
"""


def resolve_desired_count(
    scheduling_strategy: str | None,
    requested: int | Literal["keep"],
    current: int,
) -> ResolvedCount:
    if scheduling_strategy == DAEMON_SCHEDULING_STRATEGY:
        return UnmanagedCount()
    if requested == KEEP_DESIRED_COUNT:
        return ExplicitCount(value=current)
    return ExplicitCount(value=requested)


def build_release_manifest(
    task_definition: str,
    load_balancers: tuple[LoadBalancerBinding, ...] | list[LoadBalancerBinding],
) -> str:
    """Build the AppSpec content of a CodeDeploy ECS deployment.

    Only the first load balancer is bound.
    """
    if load_balancers:
        lb = load_balancers[0]
        return APPSPEC_WITH_LB_FORMAT.format(
            task_definition=task_definition,
            container_name=lb.container_name,
            container_port=lb.container_port,
        )
    return APPSPEC_WITHOUT_LB_FORMAT.format(task_definition=task_definition)


def parse_rollback_events(events: str | None) -> list[str]:
    """Split comma separated rollback events.

    Empty entries are dropped, CodeDeploy accepts no empty event name.
    """
    if not events:
        return []
    return [e.strip() for e in events.split(",") if e.strip()]


def get_console_domain(region: str) -> str:
    if region.startswith("cn-"):
        return "amazonaws.cn"
    if region.startswith("us-gov-"):
        return "amazonaws-us-gov.com"
    return "aws.amazon.com"


def format_console_url(region: str, deployment_id: str) -> str:
    return CONSOLE_URL_FORMAT.format(
        region=region,
        domain=get_console_domain(region),
        deployment_id=deployment_id,
    )


async def call_remote(
    stage: str,
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> Any:
    """Run a blocking collaborator call, wrapping its failure with the stage.

    Errors already carrying a stage pass through unchanged.
    """
    try:
        return await run_async(func, *args, **kwargs)
    except RemoteCallError:
        raise
    except Exception as e:
        raise RemoteCallError(stage, e) from e
