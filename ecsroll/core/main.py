import argparse
import asyncio
import sys
from typing import Any

from .exceptions import BaseError

DEFAULT_CONFIG_FILE = "ecsroll.yml"


def parse_desired_count(value: str) -> int | str:
    if value == "keep":
        return value
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"desired count must be an integer or 'keep': {value}"
        )
    # negative counts keep the current count
    if count < 0:
        return "keep"
    return count


async def adeploy(
    config: str,
    tasks: int | str,
    skip_task_definition: bool,
    dry_run: bool,
    force_new_deployment: bool,
    no_wait: bool,
    rollback_events: str,
    suspend_auto_scaling: bool | None,
    debug: bool,
) -> Any:
    """
    ecsroll Deploy
    """
    from ecsroll.compute.service_deployment import (
        DeployOptions,
        ServiceDeployment,
        get_provider_parameters,
        load_config,
    )

    deploy_config = load_config(config)
    parameters = get_provider_parameters(deploy_config)
    parameters["debug"] = debug
    component = ServiceDeployment(
        __provider__=dict(type="amazon_ecs", parameters=parameters),
    )
    options = DeployOptions(
        desired_count=tasks,
        skip_task_definition=skip_task_definition,
        dry_run=dry_run,
        force_new_deployment=force_new_deployment,
        no_wait=no_wait,
        rollback_events=rollback_events,
        suspend_auto_scaling=suspend_auto_scaling,
    )
    return await component.adeploy(options=options)


def main():
    parser = argparse.ArgumentParser(prog="ecsroll", description="ecsroll")
    subparsers = parser.add_subparsers(dest="command")
    deploy_parser = subparsers.add_parser(
        "deploy", help="Deploy a task definition to the service"
    )
    deploy_parser_arguments = [
        ("--config", str, DEFAULT_CONFIG_FILE, "Config file"),
        ("--tasks", parse_desired_count, "keep", "Desired count of tasks"),
        (
            "--rollback-events",
            str,
            "",
            "Comma separated events triggering a CodeDeploy rollback",
        ),
    ]
    for arg in deploy_parser_arguments:
        deploy_parser.add_argument(
            arg[0], type=arg[1], default=arg[2], help=arg[3]
        )
    deploy_parser_flags = [
        ("--skip-task-definition", "Use the current task definition"),
        ("--dry-run", "Do not change anything"),
        ("--force-new-deployment", "Force a new deployment of the service"),
        ("--no-wait", "Exit without waiting for the service to be stable"),
        ("--debug", "Print debug messages"),
    ]
    for flag in deploy_parser_flags:
        deploy_parser.add_argument(flag[0], action="store_true", help=flag[1])
    deploy_parser.add_argument(
        "--suspend-auto-scaling",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Suspend or resume application auto scaling",
    )

    args = parser.parse_args()
    if args.command == "deploy":
        try:
            response = asyncio.run(
                adeploy(
                    config=args.config,
                    tasks=args.tasks,
                    skip_task_definition=args.skip_task_definition,
                    dry_run=args.dry_run,
                    force_new_deployment=args.force_new_deployment,
                    no_wait=args.no_wait,
                    rollback_events=args.rollback_events,
                    suspend_auto_scaling=args.suspend_auto_scaling,
                    debug=args.debug,
                )
            )
            if args.debug and response:
                print(response.result.to_json(indent=2))
        except BaseError as e:
            print(f"ecsroll: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            sys.exit(130)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
