"""Program attendance reads and the batch save used by auto-save."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from acadash.adapters.action_schemas import AttendanceRecordWire, AttendanceSummaryWire, parse_keyed, parse_many
from acadash.domain.entities import AttendanceRecord, AttendanceSummary
from acadash.domain.ports import ActionPort, ProgramId, UserId
from acadash.usecases.invoke_action import call_action, drop_unset, parse_payload


@dataclass
class LoadAttendance:
    actions: ActionPort

    def __call__(self, program_id: ProgramId, session_date: str, *, locale: str) -> List[AttendanceRecord]:
        payload = call_action(
            self.actions,
            "getProgramAttendance",
            {"locale": locale, "programId": program_id, "sessionDate": session_date},
        )
        return parse_payload("getProgramAttendance", parse_many, AttendanceRecordWire, payload.get("records"))


@dataclass
class LoadAttendanceSummary:
    actions: ActionPort

    def __call__(self, program_id: ProgramId, *, locale: str) -> Dict[UserId, AttendanceSummary]:
        payload = call_action(
            self.actions,
            "getProgramAttendanceSummaryForProgram",
            {"locale": locale, "programId": program_id},
        )
        return parse_payload(
            "getProgramAttendanceSummaryForProgram", parse_keyed, AttendanceSummaryWire, payload.get("byUserId")
        )


@dataclass
class SaveAttendance:
    """Persist one full attendance sheet for a program session."""

    actions: ActionPort

    def __call__(
        self,
        program_id: ProgramId,
        session_date: str,
        entries: Sequence[AttendanceRecord],
        *,
        locale: str,
    ) -> None:
        call_action(
            self.actions,
            "saveProgramAttendance",
            {
                "locale": locale,
                "programId": program_id,
                "sessionDate": session_date,
                "entries": [
                    drop_unset({"userId": entry.user_id, "present": entry.present, "notes": entry.notes})
                    for entry in entries
                ],
            },
            default_code="SAVE_ATTENDANCE_FAILED",
        )


@dataclass
class AttendanceUseCases:
    load: LoadAttendance
    load_summary: LoadAttendanceSummary
    save: SaveAttendance

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "AttendanceUseCases":
        return cls(
            load=LoadAttendance(actions),
            load_summary=LoadAttendanceSummary(actions),
            save=SaveAttendance(actions),
        )


__all__ = ["AttendanceUseCases", "LoadAttendance", "LoadAttendanceSummary", "SaveAttendance"]
