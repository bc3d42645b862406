"""
Purpose: Central configuration for the chat ledger.

UNREAD_MODE = "participant"   # count/mark by full sender identity, user's own rides only
              "sender_type"   # legacy: any message whose senderId AND senderType differ

Rule: No logic here, just parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

UNREAD_MODES = ("participant", "sender_type")


@dataclass(frozen=True)
class ChatPolicy:

    # "participant" scopes unread counts to rides the user is part of and only
    # skips messages the user wrote. "sender_type" is the legacy mobile client
    # behaviour: sender id and sender type are compared separately, across
    # every ride.
    unread_mode: str = "participant"

    # --- Pagination defaults ---
    messages_page_size: int = 50
    history_page_size: int = 20

    def validate(self) -> None:
        if self.unread_mode not in UNREAD_MODES:
            raise ValueError(f"unread_mode must be one of {UNREAD_MODES}, got {self.unread_mode!r}")

        if self.messages_page_size <= 0 or self.history_page_size <= 0:
            raise ValueError("page sizes must be > 0")


def default_chat_policy() -> ChatPolicy:
    p = ChatPolicy()
    p.validate()
    return p


def chat_policy_from_env() -> ChatPolicy:
    load_dotenv()
    p = ChatPolicy(unread_mode=os.getenv("ACCESSRIDE_UNREAD_MODE", "participant").strip().lower())
    p.validate()
    return p
