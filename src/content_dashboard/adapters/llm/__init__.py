"""Text-generation adapters."""

from content_dashboard.adapters.llm.claude_client import ClaudeClient

__all__ = ["ClaudeClient"]
