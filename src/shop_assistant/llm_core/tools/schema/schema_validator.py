"""Validation and clean-up of JSON schemas inferred for function tools."""

from typing import Any, Dict, Iterable, Set

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "definitions", "$schema", "$id", "title")


class SchemaValidator:
    """
    Helper class for validating and sanitizing tool parameter schemas.
    """

    @staticmethod
    def assert_no_recursive_refs(schema: Dict[str, Any]) -> None:
        """
        Walks the ``$ref`` graph of a schema and rejects cycles.

        Args:
            schema: The JSON schema to check.

        Raises:
            ToolValidationError: If a recursive reference is found.
        """
        defs = schema.get("$defs") or schema.get("definitions") or {}

        def visit(node: Any, trail: Set[str]) -> None:
            if isinstance(node, list):
                for item in node:
                    visit(item, trail)
                return
            if not isinstance(node, dict):
                return

            ref = node.get("$ref")
            if ref is None:
                for value in node.values():
                    visit(value, trail)
                return

            if ref in trail:
                msg = (
                    f"Recursive structure detected: {ref}. "
                    "Tool arguments must be finite trees; pass ids or flat lists instead."
                )
                logger.error(msg)
                raise ToolValidationError(msg)

            # Only local refs (#/$defs/Name) can be followed
            target = ref.rsplit("/", 1)[-1] if ref.startswith("#") else None
            if target in defs:
                visit(defs[target], trail | {ref})

        visit(schema, set())

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans an inferred schema so providers accept it.

        Drops metadata keys, collapses ``Optional[T]`` (``anyOf`` with ``null``)
        into ``T`` and removes ``None`` defaults.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if isinstance(schema, list):
            return [SchemaValidator.sanitize_schema(item) for item in schema]
        if not isinstance(schema, dict):
            return schema

        any_of = schema.get("anyOf")
        if isinstance(any_of, list):
            non_null = [option for option in any_of if not (isinstance(option, dict) and option.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                collapsed = {k: v for k, v in schema.items() if k != "anyOf"}
                collapsed.update({k: v for k, v in non_null[0].items() if k not in collapsed})
                return SchemaValidator.sanitize_schema(collapsed)

        cleaned: Dict[str, Any] = {}
        for key, value in schema.items():
            if key in _METADATA_KEYS:
                continue
            if key == "default" and value is None:
                continue
            if key == "properties" and isinstance(value, dict):
                # Property names are user data, never metadata keys
                cleaned[key] = {name: SchemaValidator.sanitize_schema(sub) for name, sub in value.items()}
                continue
            cleaned[key] = SchemaValidator.sanitize_schema(value)
        return cleaned

    @staticmethod
    def strip_keys(schema: Any, keys: Iterable[str]) -> Any:
        """Recursively removes the given keys (e.g. ``additionalProperties``) from a schema."""
        drop = set(keys)
        if isinstance(schema, list):
            return [SchemaValidator.strip_keys(item, drop) for item in schema]
        if not isinstance(schema, dict):
            return schema
        return {k: SchemaValidator.strip_keys(v, drop) for k, v in schema.items() if k not in drop}
