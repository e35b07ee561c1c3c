"""Tool registration and dispatch for convention document requests."""

from .registry import RegisteredTool, ToolDispatchError, ToolHandler, ToolRegistry

__all__ = ["RegisteredTool", "ToolDispatchError", "ToolHandler", "ToolRegistry"]
