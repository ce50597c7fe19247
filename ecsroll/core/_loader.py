import importlib
import inspect
from typing import Any

from ._provider import Provider
from .exceptions import LoadError


class Loader:
    @staticmethod
    def load_provider_instance(
        path: str,
        parameters: dict[str, Any] = dict(),
    ) -> Provider:
        provider = Loader.load_class(path, Provider)
        return provider(**parameters)

    @staticmethod
    def load_class(path: str, type: Any) -> Any:
        class_name = None
        if ":" in path:
            module_name, class_name = path.split(":", 1)
        else:
            module_name = path
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise LoadError(f"Could not import {module_name}: {e}") from e
        if class_name is not None:
            return getattr(module, class_name)
        for _, cls in inspect.getmembers(module, inspect.isclass):
            if issubclass(cls, type) and cls.__module__ == module_name:
                return cls
        raise LoadError(f"{type.__name__} not found at {module_name}")
