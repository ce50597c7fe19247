import argparse
import sys

import pytest

import ecsroll.core.main as main_module
from ecsroll.core import (
    Component,
    Loader,
    Operation,
    Provider,
    Response,
    operation,
)
from ecsroll.core.exceptions import LoadError, ValidationError
from ecsroll.core.main import parse_desired_count


@pytest.mark.parametrize(
    "value, expected",
    [("keep", "keep"), ("0", 0), ("5", 5), ("-1", "keep")],
)
def test_parse_desired_count(value, expected):
    assert parse_desired_count(value) == expected


def test_parse_desired_count_invalid():
    with pytest.raises(argparse.ArgumentTypeError):
        parse_desired_count("five")


def test_operation_normalize_drops_none():
    operation = Operation.normalize(
        name="deploy",
        args={"self": object(), "options": None, "kwargs": {"debug": True}},
    )
    assert operation.name == "deploy"
    assert operation.args == {"debug": True}


def test_load_missing_provider():
    with pytest.raises(LoadError):
        Loader.load_provider_instance("ecsroll.compute.missing.providers.x")


def test_load_provider_class():
    cls = Loader.load_class(
        "ecsroll.compute.service_deployment.providers.amazon_ecs", Provider
    )
    assert cls.__name__ == "AmazonECS"


def run_main(monkeypatch, argv, adeploy):
    monkeypatch.setattr(sys, "argv", ["ecsroll", *argv])
    monkeypatch.setattr(main_module, "adeploy", adeploy)
    main_module.main()


@pytest.mark.parametrize(
    "argv, suspend_auto_scaling",
    [
        ([], None),
        (["--suspend-auto-scaling"], True),
        (["--no-suspend-auto-scaling"], False),
    ],
)
def test_main_deploy_arguments(monkeypatch, argv, suspend_auto_scaling):
    calls = []

    async def adeploy(**kwargs):
        calls.append(kwargs)

    run_main(
        monkeypatch,
        ["deploy", "--config", "prod.yml", "--tasks", "5", *argv],
        adeploy,
    )

    [call] = calls
    assert call["config"] == "prod.yml"
    assert call["tasks"] == 5
    assert call["suspend_auto_scaling"] is suspend_auto_scaling
    assert call["dry_run"] is False
    assert call["rollback_events"] == ""


def test_main_deploy_defaults(monkeypatch):
    calls = []

    async def adeploy(**kwargs):
        calls.append(kwargs)

    run_main(
        monkeypatch,
        ["deploy", "--dry-run", "--skip-task-definition", "--no-wait"],
        adeploy,
    )

    [call] = calls
    assert call["config"] == "ecsroll.yml"
    assert call["tasks"] == "keep"
    assert call["dry_run"] is True
    assert call["skip_task_definition"] is True
    assert call["no_wait"] is True
    assert call["force_new_deployment"] is False


def test_main_error_exit(monkeypatch, capsys):
    async def adeploy(**kwargs):
        raise ValidationError("taskSet is not found in service web")

    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, ["deploy"], adeploy)

    assert exc_info.value.code == 1
    assert capsys.readouterr().err == (
        "ecsroll: taskSet is not found in service web\n"
    )


def test_main_interrupt_exit(monkeypatch):
    async def adeploy(**kwargs):
        pass

    def interrupted(coro):
        coro.close()
        raise KeyboardInterrupt

    monkeypatch.setattr(main_module.asyncio, "run", interrupted)

    with pytest.raises(SystemExit) as exc_info:
        run_main(monkeypatch, ["deploy"], adeploy)

    assert exc_info.value.code == 130


def test_context_returned_on_response():
    class EchoProvider(Provider):
        def deploy(self):
            return Response(result="ok")

    class Echo(Component):
        @operation()
        def deploy(self):
            raise NotImplementedError

    component = Echo(__provider__=EchoProvider())

    assert component.deploy(__context__={"id": "run-1"}).context.id == "run-1"
    assert component.deploy().context.id
