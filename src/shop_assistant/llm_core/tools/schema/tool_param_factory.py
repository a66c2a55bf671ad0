import inspect
from typing import Annotated, Any, Dict, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class FieldTuple(BaseModel):
    """Typed ``(annotation, FieldInfo)`` pair consumed by pydantic's ``create_model``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    annotation: Any
    field: FieldInfo

    def as_definition(self) -> tuple:
        return (self.annotation, self.field)


class ToolParameterFactory:
    """Turns the parameters of a tool function into pydantic field definitions."""

    @classmethod
    def build_fields(cls, func: Any, tool_name: str) -> Dict[str, Any]:
        """Field definitions for every named parameter of ``func``.

        Args:
            func: The tool function.
            tool_name: Name of the tool for error reporting.

        Returns:
            Mapping of parameter name to ``(annotation, FieldInfo)``.

        Raises:
            ToolValidationError: If a parameter is variadic or lacks a description.
        """
        fields: Dict[str, Any] = {}
        for param_name, param in inspect.signature(func).parameters.items():
            if param_name in ("self", "cls"):
                continue
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                msg = f"Tool '{tool_name}' uses variadic parameter '{param_name}', which cannot be described to a model."
                logger.error(msg)
                raise ToolValidationError(msg)
            fields[param_name] = cls.build_field_tuple(param_name, param, tool_name).as_definition()
        return fields

    @classmethod
    def build_field_tuple(cls, param_name: str, param: inspect.Parameter, tool_name: str) -> FieldTuple:
        """Creates the (annotation, FieldInfo) pair for a single function parameter."""
        annotation = param.annotation
        description = cls._extract_description(annotation, param_name, tool_name)
        default = ... if param.default is inspect.Parameter.empty else param.default
        return FieldTuple(annotation=annotation, field=Field(default=default, description=description))

    @staticmethod
    def _extract_description(annotation: Any, param_name: str, tool_name: str) -> str:
        """Every tool parameter must be declared as ``Annotated[T, Field(description='...')]``.

        Raises:
            ToolValidationError: If the parameter is missing a Field description.
        """
        if get_origin(annotation) is Annotated:
            for metadata in get_args(annotation)[1:]:
                if isinstance(metadata, FieldInfo) and metadata.description:
                    return metadata.description

        msg = (
            f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
            f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
        )
        logger.error(msg)
        raise ToolValidationError(msg)
