"""Conversation records and the JSONL capture log"""

from prompt_relay.data.capture_log import ConversationLog
from prompt_relay.data.conversation import ChatMessage, ConversationRecord

__all__ = [
    "ChatMessage",
    "ConversationRecord",
    "ConversationLog",
]
