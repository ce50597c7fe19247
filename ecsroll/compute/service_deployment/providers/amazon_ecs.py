"""
AWS ECS deployment with rolling updates or CodeDeploy blue/green.
"""

from __future__ import annotations

__all__ = ["AmazonECS"]

import asyncio
import json
import time
from datetime import datetime
from typing import Any

import boto3
from botocore.exceptions import ClientError

from ecsroll.core import Context, YamlLoader, run_async
from ecsroll.core.exceptions import (
    LoadError,
    NotFoundError,
    WaitTimeoutError,
)

from .._helper import format_console_url
from .._models import (
    DeploymentGroupRef,
    DeploymentRequest,
    ExplicitCount,
    LoadBalancerBinding,
    ServiceSnapshot,
    ServiceUpdate,
    TaskSet,
)
from .._observer import DeployObserver, URLNotifier
from ._base import BaseServiceDeploymentProvider

# Fields returned by DescribeTaskDefinition that RegisterTaskDefinition rejects
READ_ONLY_TASK_DEFINITION_FIELDS = (
    "taskDefinitionArn",
    "revision",
    "status",
    "requiresAttributes",
    "compatibilities",
    "registeredAt",
    "registeredBy",
    "deregisteredAt",
)


class AmazonECS(BaseServiceDeploymentProvider):
    region: str
    cluster_name: str
    service_name: str
    task_definition_path: str | None
    timeout: float
    poll_interval: float

    aws_access_key_id: str | None
    aws_secret_access_key: str | None
    aws_session_token: str | None
    profile_name: str | None
    nparams: dict[str, Any]

    _ecs_client: Any
    _codedeploy_client: Any
    _application_autoscaling_client: Any
    _init: bool = False
    _op_converter: OperationConverter
    _result_converter: ResultConverter

    def __init__(
        self,
        region: str = "us-west-2",
        cluster_name: str = "default",
        service_name: str | None = None,
        task_definition_path: str | None = None,
        timeout: float = 600,
        poll_interval: float = 5,
        observer: DeployObserver | None = None,
        notifier: URLNotifier | None = None,
        debug: bool = False,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        profile_name: str | None = None,
        nparams: dict[str, Any] = {},
        **kwargs: Any,
    ):
        """Initialize AWS ECS deployment provider.

        Args:
            region: AWS region of the ECS service.
            cluster_name: The name of the ECS cluster.
            service_name: The name of the ECS service to deploy.
            task_definition_path:
                Path to the task definition file (JSON or YAML)
                registered on deploy.
            timeout: Seconds to wait for the service to become stable.
            poll_interval: Seconds between service status checks.
            observer: Receives progress messages, printed when omitted.
            notifier:
                Notified with the CodeDeploy console URL,
                opens a browser when omitted.
            debug: Print debug messages.
            aws_access_key_id: AWS access key ID.
            aws_secret_access_key: AWS secret access key.
            aws_session_token: AWS session token.
            profile_name: AWS profile name to use.
            nparams: Native params to AWS clients.
        """
        if not service_name:
            raise LoadError("service_name is required.")
        self.region = region
        self.cluster_name = cluster_name
        self.service_name = service_name
        self.task_definition_path = task_definition_path
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.observer = observer
        self.notifier = notifier
        self.debug = debug
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.aws_session_token = aws_session_token
        self.profile_name = profile_name
        self.nparams = nparams

        self._op_converter = OperationConverter()
        self._result_converter = ResultConverter()

        super().__init__(**kwargs)

    def __setup__(self, context: Context | None = None) -> None:
        if self._init:
            return

        session_kwargs = {}
        if self.aws_access_key_id:
            session_kwargs["aws_access_key_id"] = self.aws_access_key_id
        if self.aws_secret_access_key:
            session_kwargs["aws_secret_access_key"] = (
                self.aws_secret_access_key
            )
        if self.aws_session_token:
            session_kwargs["aws_session_token"] = self.aws_session_token
        if self.profile_name:
            session_kwargs["profile_name"] = self.profile_name

        session = boto3.Session(**session_kwargs)

        self._ecs_client = session.client(
            "ecs", region_name=self.region, **self.nparams
        )
        self._codedeploy_client = session.client(
            "codedeploy", region_name=self.region, **self.nparams
        )
        self._application_autoscaling_client = session.client(
            "application-autoscaling", region_name=self.region, **self.nparams
        )

        self._init = True

    def describe_service_status(self) -> ServiceSnapshot:
        service = self._describe_service()
        return self._result_converter.convert_service_snapshot(
            service, cluster_name=self.cluster_name
        )

    def load_task_definition(self) -> dict[str, Any]:
        path = self.task_definition_path
        if not path:
            raise LoadError("Task definition path is not configured.")
        if path.endswith(".json"):
            try:
                with open(path, "r") as file:
                    data = json.load(file)
            except (OSError, ValueError) as e:
                raise LoadError(f"Could not load {path}: {e}") from e
        else:
            data = YamlLoader.load(path)
        return self._op_converter.convert_task_definition(data)

    def register_task_definition(self, task_definition: dict[str, Any]) -> str:
        response = self._ecs_client.register_task_definition(**task_definition)
        return response["taskDefinition"]["taskDefinitionArn"]

    def update_service(self, request: ServiceUpdate) -> None:
        args = self._op_converter.convert_update_service(
            cluster_name=self.cluster_name,
            service_name=self.service_name,
            request=request,
        )
        self._ecs_client.update_service(**args)

    def suspend_auto_scaling(self, suspend: bool) -> None:
        resource_id = f"service/{self.cluster_name}/{self.service_name}"
        targets = (
            self._application_autoscaling_client.describe_scalable_targets(
                ServiceNamespace="ecs",
                ResourceIds=[resource_id],
                ScalableDimension="ecs:service:DesiredCount",
            )["ScalableTargets"]
        )
        observer = self._get_observer()
        if not targets:
            observer.log(f"No scalable target for {resource_id}")
            return
        for target in targets:
            observer.log(
                f"Register scalable target {target['ResourceId']} "
                f"set suspended to {suspend}"
            )
            self._application_autoscaling_client.register_scalable_target(
                ServiceNamespace=target["ServiceNamespace"],
                ScalableDimension=target["ScalableDimension"],
                ResourceId=target["ResourceId"],
                SuspendedState={
                    "DynamicScalingInSuspended": suspend,
                    "DynamicScalingOutSuspended": suspend,
                    "ScheduledScalingSuspended": suspend,
                },
            )

    def get_deployment_group(self, deployment_id: str) -> DeploymentGroupRef:
        response = self._codedeploy_client.get_deployment(
            deploymentId=deployment_id
        )
        return self._result_converter.convert_deployment_group(
            response["deploymentInfo"]
        )

    def create_deployment(self, request: DeploymentRequest) -> str:
        args = self._op_converter.convert_create_deployment(request)
        response = self._codedeploy_client.create_deployment(**args)
        return response["deploymentId"]

    def get_console_url(self, deployment_id: str) -> str:
        return format_console_url(self.region, deployment_id)

    async def await_service_stable(self, since: datetime) -> None:
        observer = self._get_observer()
        observer.log(f"Waiting for service {self.service_name} to be stable")
        start_time = time.time()
        seen: set[str] = set()
        while True:
            service = await run_async(self._describe_service)
            for event in self._result_converter.convert_new_events(
                service, since=since, seen=seen
            ):
                observer.log(event)
            if self._result_converter.is_stable(service):
                return
            if time.time() - start_time > self.timeout:
                raise WaitTimeoutError(
                    f"Service {self.service_name} did not become stable "
                    f"within {self.timeout} seconds."
                )
            await asyncio.sleep(self.poll_interval)

    def _describe_service(self) -> dict[str, Any]:
        try:
            response = self._ecs_client.describe_services(
                cluster=self.cluster_name, services=[self.service_name]
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ClusterNotFoundException":
                raise NotFoundError(
                    f"Cluster {self.cluster_name} not found."
                ) from e
            raise
        if not response["services"]:
            raise NotFoundError(f"Service {self.service_name} not found.")
        service = response["services"][0]
        if service.get("status") != "ACTIVE":
            raise NotFoundError(
                f"Service {self.service_name} is not active."
            )
        return service


class OperationConverter:
    def convert_task_definition(self, data: dict[str, Any]) -> dict[str, Any]:
        if "taskDefinition" in data:
            task_definition = dict(data["taskDefinition"])
            if data.get("tags"):
                task_definition["tags"] = data["tags"]
        else:
            task_definition = dict(data)
        for field in READ_ONLY_TASK_DEFINITION_FIELDS:
            task_definition.pop(field, None)
        if not task_definition.get("family"):
            raise LoadError("Task definition has no family.")
        return task_definition

    def convert_update_service(
        self,
        cluster_name: str,
        service_name: str,
        request: ServiceUpdate,
    ) -> dict[str, Any]:
        args: dict[str, Any] = {
            "cluster": cluster_name,
            "service": service_name,
        }
        if request.task_definition is not None:
            args["taskDefinition"] = request.task_definition
        if isinstance(request.desired_count, ExplicitCount):
            args["desiredCount"] = request.desired_count.value
        if request.force_new_deployment is not None:
            args["forceNewDeployment"] = request.force_new_deployment
        if request.network_configuration is not None:
            args["networkConfiguration"] = request.network_configuration
        if request.health_check_grace_period_seconds is not None:
            args["healthCheckGracePeriodSeconds"] = (
                request.health_check_grace_period_seconds
            )
        if request.platform_version is not None:
            args["platformVersion"] = request.platform_version
        return args

    def convert_create_deployment(
        self, request: DeploymentRequest
    ) -> dict[str, Any]:
        group = request.deployment_group
        args: dict[str, Any] = {
            "applicationName": group.application_name,
            "deploymentGroupName": group.deployment_group_name,
            "revision": {
                "revisionType": "AppSpecContent",
                "appSpecContent": {"content": request.manifest},
            },
        }
        if group.deployment_config_name:
            args["deploymentConfigName"] = group.deployment_config_name
        if request.rollback_events:
            args["autoRollbackConfiguration"] = {
                "enabled": True,
                "events": list(request.rollback_events),
            }
        return args


class ResultConverter:
    def convert_service_snapshot(
        self,
        service: dict[str, Any],
        cluster_name: str,
    ) -> ServiceSnapshot:
        controller = service.get("deploymentController") or {}
        return ServiceSnapshot(
            service_name=service["serviceName"],
            cluster_name=cluster_name,
            desired_count=service.get("desiredCount", 0),
            scheduling_strategy=service.get("schedulingStrategy", "REPLICA"),
            task_definition=service.get("taskDefinition"),
            deployment_controller=controller.get("type"),
            network_configuration=service.get("networkConfiguration"),
            health_check_grace_period_seconds=service.get(
                "healthCheckGracePeriodSeconds"
            ),
            platform_version=service.get("platformVersion"),
            load_balancers=tuple(
                LoadBalancerBinding(
                    container_name=lb["containerName"],
                    container_port=lb["containerPort"],
                    target_group_arn=lb.get("targetGroupArn"),
                    load_balancer_name=lb.get("loadBalancerName"),
                )
                for lb in service.get("loadBalancers") or []
            ),
            task_sets=tuple(
                TaskSet(
                    id=ts["id"],
                    external_id=ts.get("externalId"),
                    status=ts.get("status"),
                )
                for ts in service.get("taskSets") or []
            ),
        )

    def convert_deployment_group(
        self, info: dict[str, Any]
    ) -> DeploymentGroupRef:
        return DeploymentGroupRef(
            application_name=info["applicationName"],
            deployment_group_name=info["deploymentGroupName"],
            deployment_config_name=info.get("deploymentConfigName"),
        )

    def convert_new_events(
        self,
        service: dict[str, Any],
        since: datetime,
        seen: set[str],
    ) -> list[str]:
        # events are listed newest first
        messages = []
        for event in reversed(service.get("events") or []):
            created_at = event.get("createdAt")
            if event["id"] in seen:
                continue
            if created_at is None or created_at < since:
                continue
            seen.add(event["id"])
            messages.append(
                f"{created_at.astimezone().strftime('%Y/%m/%d %H:%M:%S')} "
                f"{event['message']}"
            )
        return messages

    def is_stable(self, service: dict[str, Any]) -> bool:
        deployments = service.get("deployments") or []
        primary = next(
            (d for d in deployments if d.get("status") == "PRIMARY"),
            None,
        )
        if primary is None:
            return False
        if len(deployments) > 1 and primary.get("rolloutState") != "COMPLETED":
            return False
        return service.get("runningCount") == service.get("desiredCount")

