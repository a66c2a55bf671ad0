from shop_assistant.llm_core import ToolSpec
from shop_assistant.llm_core.tools.schema import SchemaValidator, build_function_declaration, default_item_type


def test_sanitize_keeps_property_names_that_look_like_metadata() -> None:
    schema = {
        "title": "Params",
        "type": "object",
        "properties": {
            "title": {"type": "string", "title": "Title"},
            "limit": {"anyOf": [{"type": "integer"}, {"type": "null"}], "default": None, "title": "Limit"},
        },
    }

    cleaned = SchemaValidator.sanitize_schema(schema)

    assert cleaned == {
        "type": "object",
        "properties": {"title": {"type": "string"}, "limit": {"type": "integer"}},
    }


def test_sanitize_leaves_real_unions_alone() -> None:
    schema = {"anyOf": [{"type": "integer"}, {"type": "string"}]}
    assert SchemaValidator.sanitize_schema(schema) == schema


def test_strip_keys_is_recursive() -> None:
    schema = {"type": "object", "additionalProperties": False, "properties": {"a": {"additionalProperties": True}}}
    assert SchemaValidator.strip_keys(schema, ["additionalProperties"]) == {"type": "object", "properties": {"a": {}}}


def test_default_item_type() -> None:
    assert default_item_type("productIds") == "integer"
    assert default_item_type("phoneNumbers") == "integer"
    assert default_item_type("tags") == "string"


def test_declaration_keeps_only_supported_keys() -> None:
    spec = ToolSpec(
        name="filter_products",
        description="Filters products.",
        parameter_schema={
            "type": "object",
            "properties": {
                "sort": {"type": "string", "description": "Sort order", "enum": ["asc", 1], "examples": ["asc"]},
                "productIds": {"type": "array", "description": "Ids"},
                "range": {
                    "type": "object",
                    "properties": {"min": {"type": "number", "minimum": 0}},
                    "required": ["min"],
                },
            },
        },
        required=frozenset({"productIds", "unknown"}),
    )

    declaration = build_function_declaration(spec)

    assert declaration["name"] == "filter_products"
    assert declaration["description"] == "Filters products."
    parameters = declaration["parameters"]
    assert parameters["type"] == "object"
    assert parameters["required"] == ["productIds"]
    assert parameters["properties"]["sort"] == {"type": "string", "description": "Sort order", "enum": ["asc", "1"]}
    assert parameters["properties"]["productIds"]["items"] == {"type": "integer"}
    assert parameters["properties"]["range"] == {
        "type": "object",
        "properties": {"min": {"type": "number"}},
        "required": ["min"],
    }


def test_declaration_for_tool_without_parameters() -> None:
    declaration = build_function_declaration(ToolSpec(name="ping", description="Ping."))
    assert declaration["parameters"] == {"type": "object", "properties": {}, "required": []}
