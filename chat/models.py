"""
Purpose: Domain models for per-ride chat.
What it does:
- ChatMessage (id, ride, sender, text, type, timestamp, read flag, voice extras)
- Transcription (what a speech/sign provider hands back for a voice message)
- SenderType = driver | passenger
- MessageType = text | voice | image

Messages are append-only: `is_read` is the only field that ever changes.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
import uuid

VOICE_PLACEHOLDER = "[Voice Message]"


class SenderType(str, Enum):
    DRIVER = "driver"
    PASSENGER = "passenger"


class MessageType(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"


@dataclass(frozen=True)
class Transcription:
    text: str
    confidence: float


# Speech-to-text (or sign-to-text) collaborator: audio url in, text + confidence out.
Transcriber = Callable[[str], Transcription]


@dataclass(frozen=True)
class ChatMessage:
    id: str
    ride_id: str
    sender_id: str
    sender_type: SenderType
    message: str
    message_type: MessageType
    timestamp: datetime
    is_read: bool = False

    audio_url: Optional[str] = None
    transcription_confidence: Optional[float] = None

    def authored_by(self, user_id: str, user_type: SenderType) -> bool:
        return self.sender_id == user_id and self.sender_type == user_type

    @staticmethod
    def new(
        ride_id: str,
        sender_id: str,
        sender_type: SenderType,
        message: str,
        *,
        timestamp: datetime,
        message_type: MessageType = MessageType.TEXT,
        audio_url: Optional[str] = None,
        transcription_confidence: Optional[float] = None,
    ) -> ChatMessage:
        return ChatMessage(
            id=f"msg_{uuid.uuid4().hex}",
            ride_id=ride_id,
            sender_id=sender_id,
            sender_type=sender_type,
            message=message,
            message_type=message_type,
            timestamp=timestamp,
            audio_url=audio_url,
            transcription_confidence=transcription_confidence,
        )
