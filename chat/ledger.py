"""
Purpose: Per-ride chat between passenger and driver (the ChatLedger).
What it does:
- Owns the in-memory list of ChatMessage records
- Provides operations:
   - post_message / post_voice_message
   - list_messages (oldest first, paginated)
   - mark_read / unread_count
   - user_history (newest first, paginated)
   - delete_message (moderation)
   - stats / average_response_time_minutes

Only depends on the RideStore to check a ride exists and to find which
rides a user takes part in.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime
from threading import RLock
from typing import Callable, Dict, Iterable, List, Optional

from common.errors import MessageNotFound, RideNotFound, ValidationError
from rides.store import RideStore
from .models import VOICE_PLACEHOLDER, ChatMessage, MessageType, SenderType, Transcriber
from .policy import ChatPolicy, default_chat_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessagePage:
    messages: List[ChatMessage]
    total: int
    limit: int
    offset: int


@dataclass(frozen=True)
class ChatStats:
    total_messages: int
    messages_by_type: Dict[str, int]
    unread_messages: int
    messages_today: int
    average_response_time: int  # whole minutes
    now: datetime = field(default_factory=datetime.utcnow)


def parse_sender_type(value) -> SenderType:
    try:
        return SenderType(value)
    except ValueError:
        raise ValidationError('senderType must be either "driver" or "passenger"')


def parse_message_type(value) -> MessageType:
    try:
        return MessageType(value)
    except ValueError:
        allowed = ", ".join(kind.value for kind in MessageType)
        raise ValidationError(f"messageType must be one of: {allowed}")


def _paginate(limit: int, offset: int) -> None:
    if limit < 0 or offset < 0:
        raise ValidationError("limit and offset must be >= 0")


class ChatLedger:
    def __init__(
        self,
        rides: RideStore,
        policy: Optional[ChatPolicy] = None,
        transcriber: Optional[Transcriber] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
        messages: Iterable[ChatMessage] = (),
    ):
        self.rides = rides
        self.policy = policy or default_chat_policy()
        self.transcriber = transcriber
        self._clock = clock
        self._messages: List[ChatMessage] = list(messages)
        self._lock = RLock()

    # --- Writes ---

    def _append(self, message: ChatMessage) -> ChatMessage:
        with self._lock:
            self._messages.append(message)
        return message

    def _check_sender(self, ride_id: str, sender_type) -> SenderType:
        kind = parse_sender_type(sender_type)
        if not self.rides.exists(ride_id):
            raise RideNotFound(ride_id)
        return kind

    def post_message(self, ride_id: str, sender_id, sender_type, message, message_type="text") -> ChatMessage:
        if not sender_id or not sender_type or not message:
            raise ValidationError("senderId, senderType, and message are required")

        kind = self._check_sender(ride_id, sender_type)
        chat_message = ChatMessage.new(
            ride_id,
            sender_id,
            kind,
            message,
            timestamp=self._clock(),
            message_type=parse_message_type(message_type or MessageType.TEXT.value),
        )
        return self._append(chat_message)

    def post_voice_message(self, ride_id: str, sender_id, sender_type, audio_url, transcription: Optional[str] = None) -> ChatMessage:
        """
        Stores a voice message. Without a transcription from the client the
        configured transcriber is asked; with neither, the text is a placeholder.
        """
        if not sender_id or not sender_type or not audio_url:
            raise ValidationError("senderId, senderType, and audioUrl are required")

        kind = self._check_sender(ride_id, sender_type)

        confidence = None
        if not transcription and self.transcriber is not None:
            result = self.transcriber(audio_url)
            transcription, confidence = result.text, result.confidence

        chat_message = ChatMessage.new(
            ride_id,
            sender_id,
            kind,
            transcription or VOICE_PLACEHOLDER,
            timestamp=self._clock(),
            message_type=MessageType.VOICE,
            audio_url=audio_url,
            transcription_confidence=confidence,
        )
        return self._append(chat_message)

    def mark_read(self, ride_id: str, user_id, user_type) -> int:
        """
        Marks the other party's messages in a ride as read.
        Returns how many messages changed.
        """
        if not user_id or not user_type:
            raise ValidationError("userId and userType are required")
        kind = parse_sender_type(user_type)

        updated = 0
        with self._lock:
            for index, message in enumerate(self._messages):
                if message.ride_id != ride_id or message.is_read:
                    continue
                if not self._from_other_party(message, user_id, kind):
                    continue
                self._messages[index] = replace(message, is_read=True)
                updated += 1
        return updated

    def delete_message(self, message_id: str, reason: Optional[str] = None) -> ChatMessage:
        with self._lock:
            for index, message in enumerate(self._messages):
                if message.id == message_id:
                    deleted = self._messages.pop(index)
                    break
            else:
                raise MessageNotFound(message_id)

        logger.info("Deleted message %s from ride %s: %s", message_id, deleted.ride_id, reason or "No reason provided")
        return deleted

    # --- Reads ---

    def _snapshot(self) -> List[ChatMessage]:
        with self._lock:
            return list(self._messages)

    def _from_other_party(self, message: ChatMessage, user_id: str, user_type: SenderType) -> bool:
        if self.policy.unread_mode == "sender_type":
            return message.sender_id != user_id and message.sender_type != user_type
        return not message.authored_by(user_id, user_type)

    def list_messages(self, ride_id: str, limit: Optional[int] = None, offset: int = 0) -> MessagePage:
        limit = self.policy.messages_page_size if limit is None else limit
        _paginate(limit, offset)

        # sort is stable: equal timestamps keep insertion order
        messages = sorted(
            (message for message in self._snapshot() if message.ride_id == ride_id),
            key=lambda message: message.timestamp,
        )
        return MessagePage(messages=messages[offset: offset + limit], total=len(messages), limit=limit, offset=offset)

    def unread_count(self, user_id, user_type) -> int:
        if not user_id or not user_type:
            raise ValidationError("userId and userType are required")
        kind = parse_sender_type(user_type)

        messages = self._snapshot()
        if self.policy.unread_mode == "participant":
            ride_ids = set(self.rides.ride_ids_for_user(user_id, kind.value))
            messages = [message for message in messages if message.ride_id in ride_ids]

        return sum(
            1 for message in messages
            if not message.is_read and self._from_other_party(message, user_id, kind)
        )

    def user_history(self, user_id, user_type, limit: Optional[int] = None, offset: int = 0) -> MessagePage:
        """
        Every message in rides the user took part in, newest first.
        """
        if not user_id or not user_type:
            raise ValidationError("userId and userType are required")
        kind = parse_sender_type(user_type)
        limit = self.policy.history_page_size if limit is None else limit
        _paginate(limit, offset)

        ride_ids = set(self.rides.ride_ids_for_user(user_id, kind.value))
        messages = [message for message in self._snapshot() if message.ride_id in ride_ids]
        messages.sort(key=lambda message: message.timestamp, reverse=True)
        return MessagePage(messages=messages[offset: offset + limit], total=len(messages), limit=limit, offset=offset)

    def average_response_time_minutes(self) -> float:
        """
        Mean gap between consecutive messages of a ride when the sender changes.
        0 when no ride has a back-and-forth.
        """
        conversations: Dict[str, List[ChatMessage]] = defaultdict(list)
        for message in self._snapshot():
            conversations[message.ride_id].append(message)

        total_seconds = 0.0
        responses = 0
        for conversation in conversations.values():
            conversation.sort(key=lambda message: message.timestamp)
            for previous, current in zip(conversation, conversation[1:]):
                if (previous.sender_id, previous.sender_type) == (current.sender_id, current.sender_type):
                    continue
                total_seconds += (current.timestamp - previous.timestamp).total_seconds()
                responses += 1

        if responses == 0:
            return 0.0
        return total_seconds / responses / 60

    def stats(self) -> ChatStats:
        messages = self._snapshot()
        now = self._clock()
        return ChatStats(
            total_messages=len(messages),
            messages_by_type={
                kind.value: sum(1 for message in messages if message.message_type == kind)
                for kind in MessageType
            },
            unread_messages=sum(1 for message in messages if not message.is_read),
            messages_today=sum(1 for message in messages if message.timestamp.date() == now.date()),
            average_response_time=round(self.average_response_time_minutes()),
            now=now,
        )

    def __len__(self) -> int:
        return len(self._messages)
