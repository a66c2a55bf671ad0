from .schema_validator import SchemaValidator
from .tool_param_factory import ToolParameterFactory, FieldTuple
from .catalog import build_function_declaration, build_function_declarations, default_item_type

__all__ = [
    "SchemaValidator",
    "ToolParameterFactory",
    "FieldTuple",
    "build_function_declaration",
    "build_function_declarations",
    "default_item_type",
]
