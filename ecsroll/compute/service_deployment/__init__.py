from ._config import get_provider_parameters, load_config
from ._helper import (
    build_release_manifest,
    format_console_url,
    parse_rollback_events,
    resolve_desired_count,
)
from ._models import (
    KEEP_DESIRED_COUNT,
    BlueGreenStrategy,
    DeploymentGroupRef,
    DeploymentRequest,
    DeployOptions,
    DeployResult,
    ExplicitCount,
    LoadBalancerBinding,
    ResolvedCount,
    RollingStrategy,
    RolloutStrategy,
    ServiceDeploymentConfig,
    ServiceSnapshot,
    ServiceUpdate,
    SubmittedDeployment,
    TaskSet,
    UnmanagedCount,
)
from ._observer import (
    BrowserNotifier,
    ConsoleObserver,
    DeployObserver,
    URLNotifier,
)
from .component import ServiceDeployment

__all__ = [
    "ServiceDeployment",
    "ServiceDeploymentConfig",
    "BlueGreenStrategy",
    "BrowserNotifier",
    "ConsoleObserver",
    "DeployObserver",
    "DeployOptions",
    "DeployResult",
    "DeploymentGroupRef",
    "DeploymentRequest",
    "ExplicitCount",
    "KEEP_DESIRED_COUNT",
    "LoadBalancerBinding",
    "ResolvedCount",
    "RollingStrategy",
    "RolloutStrategy",
    "ServiceSnapshot",
    "ServiceUpdate",
    "SubmittedDeployment",
    "TaskSet",
    "URLNotifier",
    "UnmanagedCount",
    "build_release_manifest",
    "format_console_url",
    "get_provider_parameters",
    "load_config",
    "parse_rollback_events",
    "resolve_desired_count",
]
