"""Assistant session manager.

Owns the active conversation's in-memory messages and the transitions
between idle and sending. The user's message is appended before the
gateway is called, so it stays visible even when the call fails; the
conversation is only written to the store after a successful round-trip.
"""

import logging

from ..config import DEFAULT_CHAT_MODEL
from ..conversations import ChatMessage, ConversationSession, ConversationStore
from ..errors import GatewayError
from ..llm import CompletionGateway, MessageRole
from .state import SessionState

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send message"


class SessionManager:
    """Coordinates message sends, gateway calls and conversation history.

    All operations are meant to run on one event loop. ``send_message``
    switches to SENDING before its first suspension point, so a second call
    made while a request is in flight is ignored. Switching, starting,
    deleting or clearing conversations is ignored until the reply arrives.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        store: ConversationStore,
        model: str = DEFAULT_CHAT_MODEL
    ):
        self._gateway = gateway
        self._store = store
        self._model = model
        self._messages: list[ChatMessage] = []
        self._current_conversation_id: str | None = None
        self._state = SessionState.IDLE
        self._error: str | None = None

    # ------------------------------------------------------------------ #
    # Read-only views
    # ------------------------------------------------------------------ #

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def conversations(self) -> tuple[ConversationSession, ...]:
        return self._store.list()

    @property
    def current_conversation_id(self) -> str | None:
        return self._current_conversation_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_sending(self) -> bool:
        return self._state is SessionState.SENDING

    @property
    def model(self) -> str:
        return self._model

    def current_conversation(self) -> ConversationSession | None:
        if self._current_conversation_id is None:
            return None
        return self._store.get(self._current_conversation_id)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def initialize(self, resume_latest: bool = True) -> None:
        """Load conversation history.

        Args:
            resume_latest: Make the most recent conversation active
        """
        await self._store.load()
        conversations = self._store.list()
        if resume_latest and conversations:
            recent = conversations[0]
            self._messages = list(recent.messages)
            self._current_conversation_id = recent.id

    async def send_message(self, text: str) -> ChatMessage | None:
        """Send a user message and append the assistant's reply.

        Blank text, or a call made while another send is in flight, is a
        no-op. On failure the user's message stays in ``messages``, ``error``
        is set and the store is left untouched.

        Returns:
            The assistant message, or None if nothing was appended
        """
        content = text.strip()
        if not content or self.is_sending:
            return None

        user_message = ChatMessage.create(MessageRole.USER, content)
        self._messages.append(user_message)
        self._state = SessionState.SENDING
        self._error = None

        try:
            response = await self._gateway.complete(
                [m.to_completion_message() for m in self._messages],
                model=self._model,
            )
        except GatewayError as e:
            logger.warning("Assistant request failed (%s): %s", e.kind.value, e.user_message)
            self._fail(e.user_message)
            return None
        except Exception:
            logger.exception("Assistant error")
            self._fail(SEND_FAILED_MESSAGE)
            return None

        assistant_message = ChatMessage.create(
            MessageRole.ASSISTANT,
            response.content,
            timestamp=response.timestamp,
        )
        self._messages.append(assistant_message)
        await self._save_active_conversation()
        self._state = SessionState.IDLE
        return assistant_message

    def start_new_conversation(self) -> bool:
        """Clear the active conversation. History is not touched.

        Returns:
            False (no-op) while a send is in flight
        """
        if self._ignored_while_sending("start_new_conversation"):
            return False
        self._reset_active()
        return True

    def load_conversation(self, conversation_id: str) -> bool:
        """Make a stored conversation active.

        Returns:
            True if the conversation exists; False (no-op) if it does not or
            a send is in flight
        """
        if self._ignored_while_sending("load_conversation"):
            return False
        conversation = self._store.get(conversation_id)
        if conversation is None:
            return False
        self._messages = list(conversation.messages)
        self._current_conversation_id = conversation.id
        self._clear_error()
        return True

    async def delete_conversation(self, conversation_id: str) -> bool:
        """Remove a conversation; resets the session if it was active.

        Returns:
            False (no-op) while a send is in flight
        """
        if self._ignored_while_sending("delete_conversation"):
            return False
        await self._store.remove(conversation_id)
        if conversation_id == self._current_conversation_id:
            self._reset_active()
        return True

    async def clear_all_conversations(self) -> bool:
        """Empty the history and reset the active session.

        Returns:
            False (no-op) while a send is in flight
        """
        if self._ignored_while_sending("clear_all_conversations"):
            return False
        await self._store.clear()
        self._reset_active()
        return True

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _ignored_while_sending(self, operation: str) -> bool:
        # The in-flight reply belongs to the active messages
        if self.is_sending:
            logger.debug("Ignoring %s while a message is being sent", operation)
            return True
        return False

    def _reset_active(self) -> None:
        self._messages = []
        self._current_conversation_id = None
        self._clear_error()

    async def _save_active_conversation(self) -> None:
        existing = None
        if self._current_conversation_id is not None:
            existing = self._store.get(self._current_conversation_id)

        if existing is None:
            conversation = ConversationSession.start(self._messages)
            self._current_conversation_id = conversation.id
            logger.info("Started conversation %s: %r", conversation.id, conversation.title)
        else:
            conversation = existing.with_messages(self._messages)

        await self._store.upsert(conversation)

    def _fail(self, message: str) -> None:
        self._error = message
        self._state = SessionState.ERROR

    def _clear_error(self) -> None:
        self._error = None
        if self._state is SessionState.ERROR:
            self._state = SessionState.IDLE
