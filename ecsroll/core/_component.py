from __future__ import annotations

import uuid
from typing import Any

from ._context import Context
from ._operation import Operation
from ._provider import Provider
from ._response import Response
from .exceptions import NotSupportedError


class Component:
    __provider__: Provider
    __unpack__: bool
    __native__: bool

    def __init__(
        self,
        **kwargs,
    ):
        self.__native__ = kwargs.pop("__native__", False)
        self.__unpack__ = kwargs.pop("__unpack__", False)
        if "__provider__" in kwargs:
            self.__bind__(kwargs.pop("__provider__"))

    def __bind__(
        self,
        provider: Provider | dict | str | None,
    ) -> None:
        if provider is None:
            return
        if isinstance(provider, Provider):
            provider.__component__ = self
            self.__provider__ = provider
            return
        if isinstance(provider, dict):
            provider = dict(provider)
            type = provider.pop("type")
            parameters = provider.pop("parameters", dict())
        else:
            type = provider
            parameters = dict()
        from ._loader import Loader

        module_name = self.__class__.__module__.rsplit(".", 1)[0]
        if "." in type or ":" in type:
            provider_path = type
        else:
            provider_path = f"{module_name}.providers.{type}"
        provider_instance = Loader.load_provider_instance(
            path=provider_path,
            parameters=parameters,
        )
        self.__bind__(provider=provider_instance)

    def __run__(
        self,
        operation: Operation | None = None,
        context: dict | Context | None = None,
        **kwargs,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError("No provider bound to component.")
        context = self._init_context(context)
        response = self.__provider__.__run__(
            operation=operation,
            context=context,
            **kwargs,
        )
        return self._finalize(response, context)

    async def __arun__(
        self,
        operation: Operation | None = None,
        context: dict | Context | None = None,
        **kwargs,
    ) -> Any:
        if not hasattr(self, "__provider__"):
            raise NotSupportedError("No provider bound to component.")
        context = self._init_context(context)
        response = await self.__provider__.__arun__(
            operation=operation,
            context=context,
            **kwargs,
        )
        return self._finalize(response, context)

    def _finalize(self, response: Any, context: Context) -> Any:
        if isinstance(response, Response):
            if response.context is None:
                response.context = context
            if not self.__native__:
                response.native = None
        if self.__unpack__ and isinstance(response, Response):
            return response.result
        return response

    def _init_context(
        self,
        context: dict | Context | None,
    ) -> Context:
        if isinstance(context, dict):
            context = Context.from_dict(context)
        if context is not None and context.id:
            id = context.id
        else:
            id = str(uuid.uuid4())
        return Context(id=id)
