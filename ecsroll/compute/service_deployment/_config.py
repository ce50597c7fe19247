import os
from typing import Any

from ecsroll.core import YamlLoader
from ecsroll.core.exceptions import LoadError

from ._models import ServiceDeploymentConfig


def load_config(path: str) -> ServiceDeploymentConfig:
    """Load the deploy configuration from a YAML file.

    A relative task definition path is resolved against the directory
    of the configuration file.
    """
    data = YamlLoader.load(path)
    try:
        config = ServiceDeploymentConfig.from_dict(data)
    except ValueError as e:
        raise LoadError(f"Invalid configuration {path}: {e}") from e
    task_definition = config.task_definition
    if task_definition and not os.path.isabs(task_definition):
        base_dir = os.path.dirname(os.path.abspath(path))
        config = config.model_copy(
            update={"task_definition": os.path.join(base_dir, task_definition)}
        )
    return config


def get_provider_parameters(
    config: ServiceDeploymentConfig,
) -> dict[str, Any]:
    return dict(
        region=config.region,
        cluster_name=config.cluster,
        service_name=config.service,
        task_definition_path=config.task_definition,
        timeout=config.timeout,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        aws_session_token=config.aws_session_token,
        profile_name=config.profile_name,
    )
