from .models import ChatTurn, Role, ToolCall, ToolResultContent, new_call_id

__all__ = ["ChatTurn", "Role", "ToolCall", "ToolResultContent", "new_call_id"]
