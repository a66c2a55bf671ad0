"""Capability interface implemented by every tool, plus the function-backed variant."""

from __future__ import annotations

import asyncio
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Type, cast

import jsonref  # type: ignore
from pydantic import BaseModel, ValidationError, create_model

from ..exceptions import ErrorKind, ToolValidationError
from ..logger import get_logger
from .models import ToolExecutionResult, ToolKind, ToolSpec
from .schema import SchemaValidator, ToolParameterFactory

logger = get_logger(__name__)


class ToolCapability(ABC):
    """A named, schema-described operation the model may ask the host to run.

    Implementations report every expected outcome as a ``ToolExecutionResult``.
    Unexpected faults may be raised; the executor converts them.
    """

    kind: ToolKind = ToolKind.FUNCTION

    @property
    @abstractmethod
    def spec(self) -> ToolSpec:
        """The immutable description advertised to the model."""

    @property
    def name(self) -> str:
        return self.spec.name

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        """Run the tool with decoded arguments."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, kind={self.kind.value})"


class FunctionTool(ToolCapability):
    """
    Wraps a plain Python function as a tool.

    The parameter schema is inferred from ``Annotated[T, Field(description=...)]``
    annotations and the description from the docstring. Arguments are validated
    against the inferred pydantic model before each call; sync functions run in
    a worker thread.
    """

    kind = ToolKind.FUNCTION

    def __init__(self, func: Callable[..., Any], name: Optional[str] = None, description: Optional[str] = None):
        """Infer the tool definition from ``func``.

        Args:
            func: Sync or async callable implementing the tool.
            name: Optional name override. Defaults to ``func.__name__``.
            description: Optional description override. Defaults to the docstring.

        Raises:
            ToolValidationError: If the docstring or a parameter description is missing,
                or the argument schema is recursive.
        """
        self.func = func
        tool_name = name or func.__name__
        tool_description = description or self._get_docstring(func, tool_name)

        fields = ToolParameterFactory.build_fields(func, tool_name)
        # create_model expects **field_definitions: Any
        self.args_model: Type[BaseModel] = create_model(f"{tool_name}Params", **cast(Dict[str, Any], fields))
        raw_schema = self.args_model.model_json_schema()

        SchemaValidator.assert_no_recursive_refs(raw_schema)
        # proxies=False returns plain dicts instead of JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        parameters = SchemaValidator.sanitize_schema(resolved)

        self._spec = ToolSpec(
            name=tool_name,
            description=tool_description,
            parameter_schema=parameters,
            required=frozenset(parameters.get("required") or ()),
        )

    @property
    def spec(self) -> ToolSpec:
        return self._spec

    async def execute(self, arguments: Dict[str, Any]) -> ToolExecutionResult:
        try:
            validated = self.args_model(**(arguments or {}))
        except ValidationError as exc:
            msg = f"Argument validation failed: {exc}"
            logger.warning(f"Validation error for '{self.name}': {msg}")
            return ToolExecutionResult.fail(ErrorKind.INVALID_REQUEST, msg)

        kwargs = {field: getattr(validated, field) for field in type(validated).model_fields}
        if inspect.iscoroutinefunction(self.func):
            value = await self.func(**kwargs)
        else:
            value = await asyncio.to_thread(self.func, **kwargs)

        if isinstance(value, ToolExecutionResult):
            return value
        if isinstance(value, dict):
            return ToolExecutionResult.ok(value)
        return ToolExecutionResult.ok({"result": value})

    @staticmethod
    def _get_docstring(func: Callable[..., Any], tool_name: str) -> str:
        doc = inspect.getdoc(func)
        if not doc:
            msg = f"Tool '{tool_name}' missing docstring. LLMs need a description of what the tool does."
            logger.error(msg)
            raise ToolValidationError(msg)
        return doc
