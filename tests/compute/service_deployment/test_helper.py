import pytest

from ecsroll.compute.service_deployment import (
    ExplicitCount,
    LoadBalancerBinding,
    UnmanagedCount,
    build_release_manifest,
    format_console_url,
    parse_rollback_events,
    resolve_desired_count,
)
from ecsroll.compute.service_deployment._helper import call_remote
from ecsroll.core.exceptions import RemoteCallError

from ._providers import NEW_TASK_DEFINITION


@pytest.mark.parametrize("requested", ["keep", 0, 1, 5, 100])
@pytest.mark.parametrize("current", [0, 2])
def test_daemon_service_is_always_unmanaged(requested, current):
    count = resolve_desired_count("DAEMON", requested, current)
    assert count == UnmanagedCount()


@pytest.mark.parametrize("scheduling_strategy", ["REPLICA", None])
def test_keep_uses_current_count(scheduling_strategy):
    count = resolve_desired_count(scheduling_strategy, "keep", 3)
    assert count == ExplicitCount(value=3)


def test_requested_count_is_used():
    assert resolve_desired_count("REPLICA", 5, 3) == ExplicitCount(value=5)
    assert resolve_desired_count("REPLICA", 0, 3) == ExplicitCount(value=0)


def test_explicit_count_is_never_negative():
    with pytest.raises(ValueError):
        ExplicitCount(value=-1)


def test_manifest_with_load_balancer():
    manifest = build_release_manifest(
        NEW_TASK_DEFINITION,
        [
            LoadBalancerBinding(container_name="web", container_port=80),
            LoadBalancerBinding(container_name="admin", container_port=8080),
        ],
    )
    assert manifest == (
        "version: 1\n"
        "Resources:\n"
        "- TargetService:\n"
        "    Type: AWS::ECS::Service\n"
        "    Properties:\n"
        f'      TaskDefinition: "{NEW_TASK_DEFINITION}"\n'
        "      LoadBalancerInfo:\n"
        "        ContainerName: web\n"
        "        ContainerPort: 80\n"
    )
    assert "admin" not in manifest


def test_manifest_without_load_balancer():
    manifest = build_release_manifest(NEW_TASK_DEFINITION, ())
    assert manifest == (
        "version: 1\n"
        "Resources:\n"
        "- TargetService:\n"
        "    Type: AWS::ECS::Service\n"
        "    Properties:\n"
        f'      TaskDefinition: "{NEW_TASK_DEFINITION}"\n'
    )
    assert "LoadBalancerInfo" not in manifest


@pytest.mark.parametrize(
    "events, expected",
    [
        ("", []),
        (None, []),
        ("   ", []),
        ("DEPLOYMENT_FAILURE,,", ["DEPLOYMENT_FAILURE"]),
        ("DEPLOYMENT_FAILURE", ["DEPLOYMENT_FAILURE"]),
        (
            "DEPLOYMENT_STOP_ON_ALARM, DEPLOYMENT_FAILURE",
            ["DEPLOYMENT_STOP_ON_ALARM", "DEPLOYMENT_FAILURE"],
        ),
        (
            " DEPLOYMENT_FAILURE ,DEPLOYMENT_STOP_ON_REQUEST ",
            ["DEPLOYMENT_FAILURE", "DEPLOYMENT_STOP_ON_REQUEST"],
        ),
    ],
)
def test_parse_rollback_events(events, expected):
    assert parse_rollback_events(events) == expected


def test_console_url():
    assert format_console_url("ap-northeast-1", "d-XXXXXXXXX") == (
        "https://ap-northeast-1.console.aws.amazon.com/codesuite/codedeploy/"
        "deployments/d-XXXXXXXXX?region=ap-northeast-1"
    )


def test_console_url_china_region():
    url = format_console_url("cn-north-1", "d-1")
    assert url.startswith("https://cn-north-1.console.amazonaws.cn/")
    assert url.endswith("?region=cn-north-1")


@pytest.mark.asyncio
async def test_call_remote_wraps_errors_with_stage():
    def fail():
        raise ConnectionError("connection reset")

    with pytest.raises(RemoteCallError) as exc_info:
        await call_remote("update service", fail)
    assert exc_info.value.stage == "update service"
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert str(exc_info.value) == "failed to update service: connection reset"


@pytest.mark.asyncio
async def test_call_remote_returns_result():
    assert await call_remote("add", lambda a, b: a + b, 1, b=2) == 3
