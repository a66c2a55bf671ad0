"""Build the provider-facing function declarations from registered tool specs."""

from typing import Any, Dict, Iterable, List

from ..models import ToolSpec
from .schema_validator import SchemaValidator

_INTEGER_ITEM_HINTS = ("id", "number", "count")


def default_item_type(property_name: str) -> str:
    """Item type assumed for an array parameter that does not declare ``items``."""
    lowered = property_name.lower()
    return "integer" if any(hint in lowered for hint in _INTEGER_ITEM_HINTS) else "string"


def _declare_property(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    prop: Dict[str, Any] = {"type": schema.get("type", "string")}
    if schema.get("description"):
        prop["description"] = schema["description"]
    if schema.get("enum") is not None:
        prop["enum"] = [str(value) for value in schema["enum"]]
    if prop["type"] == "array":
        items = schema.get("items")
        prop["items"] = SchemaValidator.strip_keys(items, ["additionalProperties"]) if items else {
            "type": default_item_type(name)
        }
    elif prop["type"] == "object" and schema.get("properties"):
        prop["properties"] = {k: _declare_property(k, v) for k, v in schema["properties"].items()}
        if schema.get("required"):
            prop["required"] = list(schema["required"])
    return prop


def build_function_declaration(spec: ToolSpec) -> Dict[str, Any]:
    """
    Converts one ToolSpec to ``{name, description, parameters}``.

    ``parameters`` is always an object schema whose properties carry only
    ``type``, ``description``, ``enum`` and ``items`` (nested objects keep their
    own properties). Enum values are stringified and ``required`` lists only
    declared properties, in declaration order.

    Args:
        spec: The tool spec to convert.

    Returns:
        The function declaration dictionary.
    """
    properties = {name: _declare_property(name, schema) for name, schema in spec.properties.items()}
    required = [name for name in properties if name in spec.required]
    return {
        "name": spec.name,
        "description": spec.description,
        "parameters": {"type": "object", "properties": properties, "required": required},
    }


def build_function_declarations(specs: Iterable[ToolSpec]) -> List[Dict[str, Any]]:
    return [build_function_declaration(spec) for spec in specs]
