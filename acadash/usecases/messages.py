from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from acadash.adapters.action_schemas import ConversationWire, MessageGroupWire, MessageWire, parse_many
from acadash.domain.entities import Conversation, ConversationRef, Message, MessageGroup
from acadash.domain.ports import ActionPort, UserId
from acadash.usecases.invoke_action import call_action, parse_payload


@dataclass
class LoadConversations:
    actions: ActionPort

    def __call__(self) -> List[Conversation]:
        payload = call_action(self.actions, "getUserConversations")
        return parse_payload("getUserConversations", parse_many, ConversationWire, payload.get("conversations"))


@dataclass
class LoadGroups:
    """Admins see every group, everyone else only their own."""

    actions: ActionPort

    def __call__(self, *, all_groups: bool = False) -> List[MessageGroup]:
        action = "getAllGroups" if all_groups else "getUserGroups"
        payload = call_action(self.actions, action)
        return parse_payload(action, parse_many, MessageGroupWire, payload.get("groups"))


@dataclass
class LoadMessages:
    actions: ActionPort

    def __call__(self, target: ConversationRef) -> List[Message]:
        if target.kind == "user":
            action, body = "getConversation", {"userId": target.id}
        else:
            action, body = "getGroupMessages", {"groupId": target.id}
        payload = call_action(self.actions, action, body)
        return parse_payload(action, parse_many, MessageWire, payload.get("messages"))


@dataclass
class SendMessage:
    actions: ActionPort

    def __call__(self, target: ConversationRef, content: str, *, locale: str) -> None:
        call_action(
            self.actions,
            "sendMessage",
            {
                "recipientId": target.id if target.kind == "user" else None,
                "groupId": target.id if target.kind == "group" else None,
                "content": content,
                "locale": locale,
            },
            default_code="SEND_FAILED",
        )


@dataclass
class CreateMessageGroup:
    actions: ActionPort

    def __call__(self, name: str, members: Sequence[UserId], *, created_by: UserId) -> None:
        call_action(
            self.actions,
            "createGroup",
            {"name": name, "createdBy": created_by, "members": list(members)},
        )


@dataclass
class UpdateMessageGroup:
    actions: ActionPort

    def __call__(self, group_id: str, *, name: Optional[str] = None, members: Optional[Sequence[UserId]] = None) -> None:
        call_action(
            self.actions,
            "updateGroup",
            {"groupId": group_id, "name": name, "members": list(members) if members is not None else None},
        )


@dataclass
class MarkMessageRead:
    actions: ActionPort

    def __call__(self, message_id: str) -> None:
        call_action(self.actions, "markMessageAsRead", {"messageId": message_id})


@dataclass
class MessageUseCases:
    load_conversations: LoadConversations
    load_groups: LoadGroups
    load_messages: LoadMessages
    send: SendMessage
    create_group: CreateMessageGroup
    update_group: UpdateMessageGroup
    mark_read: MarkMessageRead

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "MessageUseCases":
        return cls(
            load_conversations=LoadConversations(actions),
            load_groups=LoadGroups(actions),
            load_messages=LoadMessages(actions),
            send=SendMessage(actions),
            create_group=CreateMessageGroup(actions),
            update_group=UpdateMessageGroup(actions),
            mark_read=MarkMessageRead(actions),
        )


__all__ = [
    "MessageUseCases",
    "CreateMessageGroup",
    "LoadConversations",
    "LoadGroups",
    "LoadMessages",
    "MarkMessageRead",
    "SendMessage",
    "UpdateMessageGroup",
]
