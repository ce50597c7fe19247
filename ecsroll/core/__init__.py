from ._async_helper import run_async, run_sync
from ._component import Component
from ._context import Context
from ._decorators import operation
from ._loader import Loader
from ._operation import Operation
from ._provider import Provider
from ._response import Response
from ._yaml_loader import YamlLoader
from .data_model import DataModel, DataModelField

__all__ = [
    "Component",
    "Context",
    "DataModel",
    "DataModelField",
    "Loader",
    "Operation",
    "Provider",
    "Response",
    "YamlLoader",
    "operation",
    "run_async",
    "run_sync",
]
