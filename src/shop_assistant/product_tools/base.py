from typing import Any, ClassVar, Dict, List

from shop_assistant.llm_core.tools import ToolCapability, ToolSpec


class ProductTool(ToolCapability):
    """Base for the shopping tools. Subclasses declare their schema as class attributes."""

    tool_name: ClassVar[str]
    description: ClassVar[str]
    parameters: ClassVar[Dict[str, Dict[str, Any]]] = {}
    required: ClassVar[List[str]] = []

    @property
    def spec(self) -> ToolSpec:
        spec = getattr(self, "_spec", None)
        if spec is None:
            spec = self._spec = ToolSpec(
                name=self.tool_name,
                description=self.description,
                parameter_schema={"type": "object", "properties": self.parameters, "required": list(self.required)},
                required=frozenset(self.required),
            )
        return spec
