"""
Chat domain package.

Public API:
- Domain models: ChatMessage, SenderType, MessageType, Transcription
- Ledger: ChatLedger, MessagePage, ChatStats
- Policy: ChatPolicy
"""
from .models import ChatMessage, SenderType, MessageType, Transcription, VOICE_PLACEHOLDER
from .policy import ChatPolicy, default_chat_policy, chat_policy_from_env
from .ledger import ChatLedger, MessagePage, ChatStats

__all__ = [
    "ChatMessage",
    "SenderType",
    "MessageType",
    "Transcription",
    "VOICE_PLACEHOLDER",
    "ChatPolicy",
    "default_chat_policy",
    "chat_policy_from_env",
    "ChatLedger",
    "MessagePage",
    "ChatStats",
]
