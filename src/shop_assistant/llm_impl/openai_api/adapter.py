"""Translate conversation turns and tool catalogs to and from OpenAI chat messages."""

import json
from typing import Any, Dict, List, Optional, Sequence

from openai.types.chat import ChatCompletion

from shop_assistant.llm_core import get_logger
from shop_assistant.llm_core.gateway import ModelReply
from shop_assistant.llm_core.messages import ChatTurn, Role, ToolCall

logger = get_logger(__name__)


class OpenAITurnAdapter:
    """Stateless conversions for the OpenAI chat completions API."""

    @staticmethod
    def to_messages(system_prompt: Optional[str], turns: Sequence[ChatTurn]) -> List[Dict[str, Any]]:
        """
        Converts ordered chat turns to OpenAI message dictionaries.

        Model turns become ``assistant`` messages whose ``tool_calls`` use the
        local call ids; tool results become ``tool`` messages referencing them.

        Args:
            system_prompt: Optional system instruction, sent first.
            turns: The conversation, oldest first.

        Returns:
            List of OpenAI message dictionaries.
        """
        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        for turn in turns:
            if turn.tool_result is not None:
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": turn.tool_result.call_id or turn.tool_result.name,
                        "content": json.dumps(turn.tool_result.payload, default=str),
                    }
                )
            elif turn.role == Role.MODEL:
                message: Dict[str, Any] = {"role": "assistant", "content": turn.text or None}
                if turn.tool_calls:
                    message["tool_calls"] = [
                        {
                            "id": call.call_id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": json.dumps(call.arguments, default=str)},
                        }
                        for call in turn.tool_calls
                    ]
                elif not turn.text:
                    continue
                messages.append(message)
            elif turn.text:
                messages.append({"role": "user", "content": turn.text})
        return messages

    @staticmethod
    def to_tools(tool_catalog: Sequence[Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
        if not tool_catalog:
            return None
        return [{"type": "function", "function": dict(declaration)} for declaration in tool_catalog]

    @staticmethod
    def to_reply(response: ChatCompletion) -> ModelReply:
        """Parses the first choice into text plus tool calls with local call ids."""
        if not response.choices:
            logger.warning("OpenAI returned no choices.")
            return ModelReply()

        message = response.choices[0].message
        tool_calls: List[ToolCall] = []
        for tool_call in message.tool_calls or []:
            if tool_call.type != "function":
                continue
            tool_calls.append(
                ToolCall(
                    name=tool_call.function.name,
                    arguments=OpenAITurnAdapter._decode_arguments(tool_call.function.name, tool_call.function.arguments),
                )
            )
        return ModelReply(text=message.content or "", tool_calls=tool_calls)

    @staticmethod
    def _decode_arguments(tool_name: str, raw_args: Optional[str]) -> Dict[str, Any]:
        """Decode the JSON argument string. Anything but a JSON object becomes ``{}``."""
        if not raw_args:
            return {}
        try:
            parsed = json.loads(raw_args)
        except json.JSONDecodeError as exc:
            logger.warning(f"Failed to parse arguments for tool '{tool_name}': {exc}")
            return {}
        if not isinstance(parsed, dict):
            logger.warning(f"Arguments for tool '{tool_name}' did not decode to a JSON object.")
            return {}
        return parsed
