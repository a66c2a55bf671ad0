"""Translate conversation turns and tool catalogs to and from Gemini content structures."""

from typing import Any, Dict, List, Optional, Sequence

from google.genai import types
from google.genai.types import GenerateContentResponse

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.gateway import ModelReply
from shop_assistant.llm_core.messages import ChatTurn, Role, ToolCall
from shop_assistant.llm_core.tools import SchemaValidator

logger = get_logger(__name__)

NO_CANDIDATES_MESSAGE = "I apologize, but I couldn't generate a response. Please try again."


class GeminiTurnAdapter:
    """Stateless conversions between ``ChatTurn`` lists and ``types.Content``."""

    @staticmethod
    def to_contents(turns: Sequence[ChatTurn]) -> List[types.Content]:
        """
        Converts ordered chat turns to Gemini contents.

        Tool calls become ``function_call`` parts of the model turn. Consecutive
        tool results are grouped into one user turn of ``function_response``
        parts, matching the calls of the preceding model turn.

        Args:
            turns: The conversation, oldest first.

        Returns:
            List of Gemini Content objects in the same order.
        """
        contents: List[types.Content] = []
        for turn in turns:
            if turn.tool_result is not None:
                part = types.Part(
                    function_response=types.FunctionResponse(
                        name=turn.tool_result.name,
                        response=turn.tool_result.payload,
                    )
                )
                previous = contents[-1] if contents else None
                if previous is not None and previous.role == "user" and previous.parts and all(
                    p.function_response for p in previous.parts
                ):
                    previous.parts.append(part)
                else:
                    contents.append(types.Content(role="user", parts=[part]))
                continue

            parts: List[types.Part] = []
            if turn.text:
                parts.append(types.Part(text=turn.text))
            for call in turn.tool_calls:
                parts.append(types.Part(function_call=types.FunctionCall(name=call.name, args=dict(call.arguments))))
            if not parts:
                continue

            role = "user" if turn.role == Role.USER else "model"
            contents.append(types.Content(role=role, parts=parts))
        return contents

    @staticmethod
    def to_tool(tool_catalog: Sequence[Dict[str, Any]]) -> Optional[types.Tool]:
        """Wraps function declarations in a single ``types.Tool``, or None for an empty catalog."""
        if not tool_catalog:
            return None

        declarations = []
        for declaration in tool_catalog:
            # Gemini does not support 'additionalProperties' in the schema
            parameters = SchemaValidator.strip_keys(declaration.get("parameters"), ["additionalProperties"])
            if parameters and parameters.get("properties"):
                declarations.append(
                    types.FunctionDeclaration(
                        name=declaration["name"], description=declaration.get("description"), parameters=parameters
                    )
                )
            else:
                declarations.append(
                    types.FunctionDeclaration(name=declaration["name"], description=declaration.get("description"))
                )
        return types.Tool(function_declarations=declarations)

    @staticmethod
    def to_reply(response: GenerateContentResponse) -> ModelReply:
        """
        Parses the first candidate into text plus tool calls.

        Args:
            response: The raw Gemini response.

        Returns:
            The normalized reply. Tool calls get locally generated call ids.
        """
        candidates = response.candidates or []
        if not candidates:
            logger.warning("Gemini returned no candidates.")
            return ModelReply(text=NO_CANDIDATES_MESSAGE)

        content = candidates[0].content
        parts = (content.parts if content else None) or []

        text = "".join(part.text for part in parts if part.text and not part.thought)
        tool_calls = [
            ToolCall(name=part.function_call.name or "", arguments=dict(part.function_call.args or {}))
            for part in parts
            if part.function_call
        ]
        return ModelReply(text=text, tool_calls=tool_calls)
