"""Chat page: conversations, messages and read tracking."""

from __future__ import annotations

import structlog

from socialhub.db.client import utc_now
from socialhub.pages.base import Page, Row
from socialhub.utils.validators import matches_search

logger = structlog.get_logger(__name__)

CONVERSATION_TYPES = ("direct", "group", "channel")
ROLES = ("admin", "moderator", "member")


class ChatPage(Page):
    feature = "chat"

    def __init__(self, client, session):
        super().__init__(client, session)
        self.conversations: list[Row] = []
        self.selected: Row | None = None
        self.messages: list[Row] = []

    def load(self) -> bool:
        """Fetch the user's conversations with last message and unread count.

        unread_count counts messages from other participants newer than the
        user's last_read_at. Conversations with the latest activity come
        first.
        """
        if not self.user_id:
            return False
        self.loading = True
        try:
            with self.remote("load"):
                memberships = (
                    self.client.table("conversation_participants")
                    .select()
                    .eq("user_id", self.user_id)
                    .execute()
                    .data
                )
                last_read = {m["conversation_id"]: m["last_read_at"] for m in memberships}
                conversations = (
                    self.client.table("conversations")
                    .select()
                    .in_("id", list(last_read))
                    .execute()
                    .data
                )
                for conversation in conversations:
                    self._decorate(conversation, last_read[conversation["id"]])
                conversations.sort(key=_last_activity, reverse=True)
                self.conversations = conversations
                return True
            return False
        finally:
            self.loading = False

    def _decorate(self, conversation: Row, last_read_at: str) -> None:
        latest = (
            self.client.table("messages")
            .select()
            .eq("conversation_id", conversation["id"])
            .order("created_at", ascending=False)
            .limit(1)
            .embed_user(fk="sender_id")
            .execute()
            .data
        )
        unread = (
            self.client.table("messages")
            .select("id", count=True)
            .eq("conversation_id", conversation["id"])
            .neq("sender_id", self.user_id)
            .gt("created_at", last_read_at)
            .limit(0)
            .execute()
        )
        conversation["last_message"] = latest[0] if latest else None
        conversation["unread_count"] = unread.count or 0

    def search(self, query: str = "") -> list[Row]:
        return [
            c for c in self.conversations if matches_search(query, c["name"], c["description"])
        ]

    def select(self, conversation_id: str) -> list[Row]:
        """Open a conversation: load its messages oldest first and mark it read."""
        self.selected = self.find(self.conversations, conversation_id)
        self.messages = []
        if self.selected is None:
            return self.messages

        with self.remote("load_messages", conversation_id=conversation_id):
            self.messages = (
                self.client.table("messages")
                .select()
                .eq("conversation_id", conversation_id)
                .order("created_at")
                .embed_user(fk="sender_id")
                .execute()
                .data
            )
        self.mark_read(conversation_id)
        return self.messages

    def mark_read(self, conversation_id: str) -> None:
        with self.remote("mark_read", conversation_id=conversation_id):
            (
                self.client.table("conversation_participants")
                .update({"last_read_at": utc_now()})
                .eq("conversation_id", conversation_id)
                .eq("user_id", self.user_id)
                .execute()
            )
            conversation = self.find(self.conversations, conversation_id)
            if conversation is not None:
                self.conversations = self.replace(
                    self.conversations, {**conversation, "unread_count": 0}
                )

    def send(self, content: str) -> Row | None:
        """Post a text message to the selected conversation."""
        if not content.strip() or self.selected is None or not self.user_id:
            return None
        conversation_id = self.selected["id"]

        with self.remote("send", conversation_id=conversation_id):
            message = (
                self.client.table("messages")
                .insert(
                    {
                        "conversation_id": conversation_id,
                        "sender_id": self.user_id,
                        "content": content,
                        "message_type": "text",
                    }
                )
                .embed_user(fk="sender_id")
                .single()
            )
            self.messages = self.messages + [message]

            touched = (
                self.client.table("conversations")
                .update({"updated_at": message["created_at"]})
                .eq("id", conversation_id)
                .single()
            )
            touched.update(last_message=message, unread_count=0)
            self.selected = touched
            self.conversations = [touched] + [
                c for c in self.conversations if c["id"] != conversation_id
            ]
            self.log_activity("message_sent", conversation_id=conversation_id)
            return message
        return None

    def create_conversation(
        self,
        name: str,
        description: str = "",
        type: str = "group",
    ) -> Row | None:
        """Start a conversation with the creator as its admin."""
        if not name.strip() or not self.user_id:
            return None
        if type not in CONVERSATION_TYPES:
            return None

        with self.remote("create_conversation"):
            conversation = (
                self.client.table("conversations")
                .insert(
                    {
                        "type": type,
                        "name": name,
                        "description": description or None,
                        "created_by": self.user_id,
                    }
                )
                .single()
            )
            self._join(conversation["id"], self.user_id, "admin")
            conversation.update(last_message=None, unread_count=0)
            self.conversations = [conversation] + self.conversations
            logger.info("chat.conversation_created", conversation_id=conversation["id"])
            return conversation
        return None

    def add_participant(self, conversation_id: str, user_id: str, role: str = "member") -> Row | None:
        """Add someone to a conversation the current user belongs to."""
        if role not in ROLES or self.find(self.conversations, conversation_id) is None:
            return None
        with self.remote("add_participant", conversation_id=conversation_id):
            return self._join(conversation_id, user_id, role)
        return None

    def participants(self, conversation_id: str) -> list[Row]:
        with self.remote("participants", conversation_id=conversation_id):
            return (
                self.client.table("conversation_participants")
                .select()
                .eq("conversation_id", conversation_id)
                .order("joined_at")
                .embed_user()
                .execute()
                .data
            )
        return []

    def _join(self, conversation_id: str, user_id: str, role: str) -> Row:
        now = utc_now()
        return (
            self.client.table("conversation_participants")
            .insert(
                {
                    "conversation_id": conversation_id,
                    "user_id": user_id,
                    "role": role,
                    "joined_at": now,
                    "last_read_at": now,
                }
            )
            .single()
        )

    def edit_message(self, message_id: str, content: str) -> Row | None:
        """Change the text of one of the user's messages. Deleted messages stay deleted."""
        if not content.strip():
            return None
        return self._update_own_message(
            message_id,
            {"content": content, "is_edited": True, "updated_at": utc_now()},
            live_only=True,
        )

    def delete_message(self, message_id: str) -> Row | None:
        """Soft delete: the row stays, flagged and emptied."""
        return self._update_own_message(
            message_id, {"content": None, "is_deleted": True, "updated_at": utc_now()}
        )

    def _update_own_message(self, message_id: str, values: Row, live_only: bool = False) -> Row | None:
        with self.remote("update_message", message_id=message_id):
            query = (
                self.client.table("messages")
                .update(values)
                .eq("id", message_id)
                .eq("sender_id", self.user_id)
            )
            if live_only:
                query = query.eq("is_deleted", False)
            message = query.embed_user(fk="sender_id").single()
            self.messages = self.replace(self.messages, message)
            return message
        return None


def _last_activity(conversation: Row) -> str:
    last = conversation.get("last_message")
    stamps = [conversation["updated_at"]]
    if last:
        stamps.append(last["created_at"])
    return max(stamps)
