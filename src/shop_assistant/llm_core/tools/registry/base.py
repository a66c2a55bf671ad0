"""Registry of tool capabilities, built once at startup and then frozen."""

from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ...exceptions import ToolNotFoundError, ToolRegistrationError
from ...logger import get_logger
from ..capability import FunctionTool, ToolCapability
from ..models import ToolSpec
from ..schema import build_function_declarations

logger = get_logger(__name__)


class ToolRegistry:
    """
    A central registry of the tools the model may call.

    Tools are registered during startup. After ``freeze()`` the registry is
    read-only, so concurrent lookups need no locking.
    """

    def __init__(self, tools: Optional[Iterable[Union[ToolCapability, Callable[..., Any]]]] = None) -> None:
        """Initialize the registry, optionally registering ``tools`` right away."""
        self._tools: Dict[str, ToolCapability] = {}
        self._frozen = False
        for tool in tools or ():
            self.register(tool)

    def register(
        self,
        tool: Union[ToolCapability, Callable[..., Any]],
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ToolCapability:
        """
        Register a tool capability.

        Plain callables are wrapped in a ``FunctionTool`` whose schema is inferred
        from the function signature.

        Args:
            tool: A ``ToolCapability`` or a documented, annotated function.
            name: Name override, only used for callables.
            description: Description override, only used for callables.

        Returns:
            The registered capability.

        Raises:
            ToolRegistrationError: If the registry is frozen or the name is already taken.
            ToolValidationError: If a callable cannot be described as a tool.
        """
        if self._frozen:
            raise ToolRegistrationError("Tool registry is frozen; register tools before serving requests.")

        if isinstance(tool, ToolCapability):
            capability = tool
        elif callable(tool):
            capability = FunctionTool(tool, name=name, description=description)
        else:
            raise ToolRegistrationError(f"Cannot register {tool!r}: expected a ToolCapability or a callable.")

        if capability.name in self._tools:
            msg = f"Tool '{capability.name}' is already registered."
            logger.error(msg)
            raise ToolRegistrationError(msg)

        self._tools[capability.name] = capability
        logger.info(f"Successfully registered tool: '{capability.name}' ({capability.kind.value})")
        return capability

    def tool(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """A decorator to turn a function into a tool.

        Args:
            func: The function to decorate.

        Returns:
            The original function, after registering it as a tool.
        """
        self.register(func)
        return func

    def freeze(self) -> "ToolRegistry":
        """Make the registry read-only. Returns self for chaining."""
        self._frozen = True
        logger.debug(f"Tool registry frozen with {len(self._tools)} tools: {', '.join(self._tools)}")
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, name: str) -> ToolCapability:
        """Look up a tool by name.

        Raises:
            ToolNotFoundError: If no tool with that name is registered.
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(f"Tool '{name}' not found in the registry.") from None

    def describe(self) -> List[ToolSpec]:
        """Specs of all registered tools, in registration order."""
        return [tool.spec for tool in self._tools.values()]

    def function_declarations(self) -> List[Dict[str, Any]]:
        """The tool catalog in function-declaration wire format."""
        return build_function_declarations(self.describe())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> List[str]:
        return list(self._tools)
