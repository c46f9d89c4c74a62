from typing import Callable, Dict, List, Optional
import logging
import threading

from adapters import chat_client
from app.exceptions import BackendError
from domain.enums import ChatRole
from domain.schemas.chat_schemas import ChatMessage, ChatTranscript

logger = logging.getLogger("storefront.chat")

GREETING = "Hello! I'm your canteen assistant. How can I help you today?"
FALLBACK_REPLY = "I'm sorry, I couldn't process that request."
UNREACHABLE_REPLY = "I'm temporarily unable to connect. Please try again in a moment."
FAILED_REPLY = "Sorry, I couldn't process that. Please try again."
CONNECTION_REPLY = "I'm having connection issues. Please try again."


def convert_to_api_history(messages: List[ChatMessage]) -> List[Dict[str, str]]:
    return [{"role": m.role.value, "content": m.content} for m in messages]


def greeting() -> ChatMessage:
    return ChatMessage(role=ChatRole.ASSISTANT, content=GREETING)


class ChatSession:
    """Transcript of one visitor's conversation with the assistant."""

    def __init__(
        self,
        messages: Optional[List[ChatMessage]] = None,
        client_getter: Callable = chat_client.get_client,
    ):
        self.messages: List[ChatMessage] = list(messages) if messages else [greeting()]
        self.is_loading = False
        self._client_getter = client_getter
        self._lock = threading.Lock()

    def history(self) -> List[Dict[str, str]]:
        """Prior turns for the API: everything after the greeting except error notices."""
        conversation = [
            m
            for m in self.messages[1:]
            if m.role in (ChatRole.USER, ChatRole.ASSISTANT) and not m.is_error
        ]
        return convert_to_api_history(conversation)

    def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send ``text`` and append the assistant's answer.

        Blank messages and sends while a reply is pending are ignored and
        return None. Upstream failures become error entries in the transcript.
        """
        user_message = (text or "").strip()
        with self._lock:
            if not user_message or self.is_loading:
                return None
            history = self.history()
            self.messages.append(ChatMessage(role=ChatRole.USER, content=user_message))
            self.is_loading = True

        try:
            result = self._client_getter().send_message(user_message, history)
            if result.success and result.data is not None:
                data = result.data if isinstance(result.data, dict) else {}
                reply = data.get("reply") or data.get("response") or FALLBACK_REPLY
                answer = ChatMessage(role=ChatRole.ASSISTANT, content=reply)
            else:
                error = result.error or ""
                content = UNREACHABLE_REPLY if ("CORS" in error or "OPTIONS" in error) else FAILED_REPLY
                answer = ChatMessage(role=ChatRole.ASSISTANT, content=content, is_error=True)
        except BackendError as exc:
            logger.error("Chat error: %s", exc)
            answer = ChatMessage(role=ChatRole.ASSISTANT, content=CONNECTION_REPLY, is_error=True)
        finally:
            with self._lock:
                self.is_loading = False

        with self._lock:
            self.messages.append(answer)
        return answer

    def transcript(self) -> ChatTranscript:
        return ChatTranscript(messages=list(self.messages), is_loading=self.is_loading)

    def to_list(self) -> list:
        return [m.model_dump(mode="json") for m in self.messages]

    @staticmethod
    def messages_from_list(data: Optional[list]) -> List[ChatMessage]:
        return [ChatMessage.model_validate(m) for m in (data or [])]
