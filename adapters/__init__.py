"""
Adapters package - External service connections.
httpx clients for the canteen backend, the recommendation service and the chat assistant.
"""

from adapters import backend_client, chat_client, recommendation_client

__all__ = [
    "backend_client",
    "chat_client",
    "recommendation_client",
]
