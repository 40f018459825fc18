"""Direct and group messaging with periodic refresh of the open thread."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from acadash.app.polling_scheduler import PollingScheduler
from acadash.app.shared_store import UNREAD_MESSAGES, SharedStore
from acadash.domain.derived import filter_conversations
from acadash.domain.entities import Conversation, ConversationRef, Message, MessageGroup
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.messages import MessageUseCases
from acadash.viewmodels import forms
from acadash.viewmodels.base import FormDialog, OpFlag, ScreenVM

LOGGER = logging.getLogger(__name__)

POLL_CHANNEL = "messages:poll"


class MessagesVM(ScreenVM):
    load_error_message = "Failed to load conversations"
    clear_on_error = False

    def __init__(
        self,
        usecases: MessageUseCases,
        *,
        user_id: str,
        notifier: Notifier,
        is_admin: bool = False,
        store: Optional[SharedStore] = None,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
        poll_ms: int = 5000,
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.user_id = user_id
        self.is_admin = is_admin
        self.store = store
        self.poll_ms = poll_ms

        self.conversations: List[Conversation] = []
        self.groups: List[MessageGroup] = []
        self.selected: Optional[ConversationRef] = None
        self.messages: List[Message] = []
        self.search = ""
        self.draft_text = ""

        self.sending = OpFlag("Send", "Sending...")
        self.group_dialog = FormDialog({"name": "", "members": []}, submit_label="Create", busy_label="Creating...")

    @property
    def visible_conversations(self) -> List[Conversation]:
        return filter_conversations(self.conversations, self.search)

    @property
    def send_enabled(self) -> bool:
        return self.selected is not None and bool(self.draft_text.strip()) and self.sending.enabled

    # ---------- loads ----------

    async def load(self) -> None:
        ok, conversations = await self._run(self.loading, self.load_error_message, self.uc.load_conversations)
        if ok:
            self.conversations = list(conversations)
        ok, groups = await self._run(
            self.loading, "Failed to load groups", self.uc.load_groups, all_groups=self.is_admin
        )
        if ok:
            self.groups = list(groups)

    async def select(self, target: ConversationRef) -> None:
        self.selected = target
        self.messages = []
        await self.refresh_messages()

    def close_conversation(self) -> None:
        self.selected = None
        self.messages = []
        self.scope.cancel(POLL_CHANNEL)

    async def refresh_messages(self) -> None:
        """Reload the open thread, mark incoming messages read and re-arm the poll."""
        target = self.selected
        if target is None:
            return
        ok, messages = await self._run_silent(self.uc.load_messages, target)
        if ok and self.selected == target:
            self.messages = list(messages)
            if target.kind == "user":
                await self._mark_incoming_read(self.messages)
        if self.selected == target:
            self.scope.schedule(POLL_CHANNEL, self.poll_ms, self._on_poll)

    def _on_poll(self) -> None:
        self.scope.spawn(self.refresh_messages())

    async def _mark_incoming_read(self, messages: Sequence[Message]) -> None:
        marked = 0
        for message in messages:
            if not message.is_unread_for(self.user_id):
                continue
            ok, _ = await self._run_silent(self.uc.mark_read, message.id)
            if ok:
                marked += 1
        if marked and self.store is not None:
            current = int(self.store.get(UNREAD_MESSAGES, 0) or 0)
            self.store.publish(UNREAD_MESSAGES, max(0, current - marked))
        if marked:
            LOGGER.debug("Marked %d messages read", marked)

    # ---------- send ----------

    async def send(self) -> bool:
        target = self.selected
        if target is None or not self.sending.enabled:
            return False
        content = self.draft_text.strip()
        if not content:
            return False
        ok, _ = await self._run(
            self.sending, "Failed to send message", self.uc.send, target, content, locale=self.locale
        )
        if not ok:
            return False
        self.draft_text = ""
        await self.refresh_messages()
        await self.load()
        return True

    # ---------- groups ----------

    def open_group_dialog(self, group: Optional[MessageGroup] = None) -> None:
        if group is None:
            self.group_dialog.open({"members": []})
            return
        self.group_dialog.open({"name": group.name, "members": list(group.members)}, editing_id=group.id)

    def toggle_group_member(self, user_id: str) -> None:
        members = list(self.group_dialog.get("members") or [])
        if user_id in members:
            members.remove(user_id)
        else:
            members.append(user_id)
        self.group_dialog.set("members", members)

    async def submit_group(self) -> bool:
        dialog = self.group_dialog
        if not dialog.submit_enabled:
            return False
        name = forms.text(dialog.get("name"))
        members = [member for member in (dialog.get("members") or []) if member]
        if not name or not members:
            self.reject_invalid(ValidationError("Group name and members are required"))
            return False
        if self.user_id not in members:
            members.append(self.user_id)
        if dialog.editing_id is not None:
            ok, _ = await self._run(
                dialog.submitting,
                "Failed to update group",
                self.uc.update_group,
                dialog.editing_id,
                name=name,
                members=members,
            )
            message = "Group updated successfully"
        else:
            ok, _ = await self._run(
                dialog.submitting,
                "Failed to create group",
                self.uc.create_group,
                name,
                members,
                created_by=self.user_id,
            )
            message = "Group created successfully"
        if not ok:
            return False
        self.succeed(message)
        dialog.close()
        await self.load()
        return True


__all__ = ["MessagesVM", "POLL_CHANNEL"]
