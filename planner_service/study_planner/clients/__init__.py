"""Client package exports for external provider integrations."""

from .llm_client import build_gateway_chat_client

__all__ = ["build_gateway_chat_client"]
