from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from acadash.adapters.action_schemas import ProgramMemberWire, ProgramWire, UserWire, parse_many
from acadash.domain.entities import Program, ProgramMember, UserSummary
from acadash.domain.ports import ActionPort, ProgramId, UserId
from acadash.usecases.invoke_action import call_action, parse_payload


@dataclass
class LoadPrograms:
    actions: ActionPort

    def __call__(self, *, locale: str) -> List[Program]:
        payload = call_action(self.actions, "getPrograms", {"locale": locale})
        return parse_payload("getPrograms", parse_many, ProgramWire, payload.get("programs"))


@dataclass
class LoadAcademyPlayers:
    """Players of the current academy that may be enrolled in programs."""

    actions: ActionPort

    def __call__(self, *, locale: str) -> List[UserSummary]:
        payload = call_action(self.actions, "getAcademyPlayersForPrograms", {"locale": locale})
        return parse_payload("getAcademyPlayersForPrograms", parse_many, UserWire, payload.get("players"))


@dataclass
class LoadProgramMembers:
    actions: ActionPort
    for_coach: bool = False

    def __call__(self, program_id: ProgramId, *, locale: str) -> List[ProgramMember]:
        action = "listProgramMembersForCoach" if self.for_coach else "listProgramMembers"
        payload = call_action(self.actions, action, {"programId": program_id, "locale": locale})
        return parse_payload(action, parse_many, ProgramMemberWire, payload.get("members"))


@dataclass
class AddProgramMember:
    actions: ActionPort

    def __call__(self, program_id: ProgramId, user_id: UserId, *, locale: str) -> None:
        call_action(
            self.actions,
            "addPlayerToProgram",
            {"programId": program_id, "userId": user_id, "locale": locale},
        )


@dataclass
class RemoveProgramMember:
    actions: ActionPort

    def __call__(self, program_id: ProgramId, user_id: UserId, *, locale: str) -> None:
        call_action(
            self.actions,
            "removePlayerFromProgram",
            {"programId": program_id, "userId": user_id, "locale": locale},
        )


@dataclass
class AddCoachNote:
    actions: ActionPort

    def __call__(
        self,
        program_id: ProgramId,
        user_id: UserId,
        *,
        locale: str,
        points_delta: Optional[float] = None,
        comment: Optional[str] = None,
    ) -> None:
        call_action(
            self.actions,
            "addCoachNoteToProgramPlayer",
            {
                "locale": locale,
                "programId": program_id,
                "userId": user_id,
                "pointsDelta": points_delta,
                "comment": comment,
            },
        )


@dataclass
class GrantPlayerBadge:
    actions: ActionPort

    def __call__(
        self,
        *,
        academy_id: str,
        user_id: UserId,
        badge_id: str,
        locale: str,
        notes: Optional[str] = None,
    ) -> None:
        call_action(
            self.actions,
            "grantPlayerBadge",
            {
                "locale": locale,
                "academyId": academy_id,
                "userId": user_id,
                "badgeId": badge_id,
                "notes": notes,
            },
        )


@dataclass
class ProgramUseCases:
    load_programs: LoadPrograms
    load_players: LoadAcademyPlayers
    load_members: LoadProgramMembers
    add_member: AddProgramMember
    remove_member: RemoveProgramMember
    add_coach_note: AddCoachNote
    grant_badge: GrantPlayerBadge

    @classmethod
    def from_actions(cls, actions: ActionPort, *, for_coach: bool = False) -> "ProgramUseCases":
        return cls(
            load_programs=LoadPrograms(actions),
            load_players=LoadAcademyPlayers(actions),
            load_members=LoadProgramMembers(actions, for_coach=for_coach),
            add_member=AddProgramMember(actions),
            remove_member=RemoveProgramMember(actions),
            add_coach_note=AddCoachNote(actions),
            grant_badge=GrantPlayerBadge(actions),
        )


__all__ = [
    "ProgramUseCases",
    "AddCoachNote",
    "AddProgramMember",
    "GrantPlayerBadge",
    "LoadAcademyPlayers",
    "LoadProgramMembers",
    "LoadPrograms",
    "RemoveProgramMember",
]
