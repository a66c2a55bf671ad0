from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ErrorKind


class ToolKind(str, Enum):
    """Discriminator of the registered capability variants."""

    SEARCH = "search"
    FILTER = "filter"
    COMPARE = "compare"
    DETAILS = "details"
    USER_PRODUCTS = "user_products"
    ANALYTICS = "analytics"
    RECOMMENDATIONS = "recommendations"
    FUNCTION = "function"


class ToolSpec(BaseModel):
    """
    Immutable description of a tool as advertised to the model.

    Attributes:
        name: The unique name of the tool.
        description: What the tool does and when the model should use it.
        parameter_schema: JSON schema (``type: object``) of the tool's arguments.
        required: Names of the mandatory parameters.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameter_schema: Dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    required: FrozenSet[str] = frozenset()

    @property
    def properties(self) -> Dict[str, Any]:
        return dict(self.parameter_schema.get("properties") or {})


class ToolExecutionResult(BaseModel):
    """
    Outcome of one tool execution.

    Exactly one of ``result`` (on success) or ``error_message``/``error_code``
    (on failure) is meaningful.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    result: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    error_code: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, result: Dict[str, Any]) -> "ToolExecutionResult":
        return cls(success=True, result=result)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ToolExecutionResult":
        return cls(success=False, error_message=message, error_code=kind)

    def to_payload(self) -> Dict[str, Any]:
        """Payload fed back to the model as the tool's response."""
        if self.success:
            return dict(self.result or {})
        code = self.error_code.value if self.error_code else ErrorKind.EXECUTION_ERROR.value
        return {"error": self.error_message or "Tool execution failed", "code": code}
