"""Academy administration use cases (admin dashboard)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from acadash.adapters.action_schemas import AcademyWire, ManagerWire, UserWire, parse_many
from acadash.domain.entities import Academy, ManagerSummary, UserSummary
from acadash.domain.ports import AcademyId, ActionPort, UserId
from acadash.usecases.invoke_action import call_action, parse_payload


@dataclass(frozen=True)
class AcademyDraft:
    """Validated academy form values; ``None`` means "omit from payload"."""

    name: str
    name_ar: str
    slug: Optional[str] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass
class AcademyListing:
    academies: List[Academy] = field(default_factory=list)
    managers_by_academy: Dict[AcademyId, Optional[ManagerSummary]] = field(default_factory=dict)


def _draft_payload(draft: AcademyDraft) -> Dict[str, object]:
    return {
        "name": draft.name,
        "nameAr": draft.name_ar,
        "slug": draft.slug,
        "image": draft.image,
        "isActive": draft.is_active,
    }


@dataclass
class LoadAcademies:
    actions: ActionPort

    def __call__(self) -> AcademyListing:
        payload = call_action(self.actions, "getAllAcademies", default_code="LOAD_ACADEMIES_FAILED")

        def _parse() -> AcademyListing:
            managers: Dict[AcademyId, Optional[ManagerSummary]] = {}
            for academy_id, raw in (payload.get("managersByAcademyId") or {}).items():
                managers[str(academy_id)] = ManagerWire.model_validate(raw).to_domain() if raw else None
            return AcademyListing(
                academies=parse_many(AcademyWire, payload.get("academies")),
                managers_by_academy=managers,
            )

        return parse_payload("getAllAcademies", _parse)


@dataclass
class LoadEligibleManagers:
    actions: ActionPort

    def __call__(self) -> List[UserSummary]:
        payload = call_action(self.actions, "getEligibleAcademyManagers")
        return parse_payload("getEligibleAcademyManagers", parse_many, UserWire, payload.get("users"))


@dataclass
class CreateAcademy:
    actions: ActionPort

    def __call__(self, draft: AcademyDraft) -> None:
        call_action(self.actions, "createAcademy", _draft_payload(draft), default_code="CREATE_FAILED")


@dataclass
class UpdateAcademy:
    actions: ActionPort

    def __call__(self, academy_id: AcademyId, draft: AcademyDraft) -> None:
        payload = {"academyId": academy_id, **_draft_payload(draft)}
        call_action(self.actions, "updateAcademy", payload, default_code="UPDATE_FAILED")


@dataclass
class DeleteAcademy:
    actions: ActionPort

    def __call__(self, academy_id: AcademyId) -> None:
        call_action(self.actions, "deleteAcademy", {"academyId": academy_id}, default_code="DELETE_FAILED")


@dataclass
class AssignAcademyManager:
    actions: ActionPort

    def __call__(self, academy_id: AcademyId, user_id: UserId) -> None:
        call_action(
            self.actions,
            "assignExistingAcademyManager",
            {"academyId": academy_id, "userId": user_id},
            default_code="ASSIGN_FAILED",
        )


@dataclass
class SetCurrentAcademy:
    actions: ActionPort

    def __call__(self, academy_id: AcademyId, *, locale: str) -> None:
        call_action(self.actions, "setCurrentAcademy", {"locale": locale, "academyId": academy_id})


@dataclass
class AcademyUseCases:
    """Academy screen use cases bound to one action port."""

    load: LoadAcademies
    load_eligible_managers: LoadEligibleManagers
    create: CreateAcademy
    update: UpdateAcademy
    delete: DeleteAcademy
    assign_manager: AssignAcademyManager
    set_current: SetCurrentAcademy

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "AcademyUseCases":
        return cls(
            load=LoadAcademies(actions),
            load_eligible_managers=LoadEligibleManagers(actions),
            create=CreateAcademy(actions),
            update=UpdateAcademy(actions),
            delete=DeleteAcademy(actions),
            assign_manager=AssignAcademyManager(actions),
            set_current=SetCurrentAcademy(actions),
        )


__all__ = [
    "AcademyUseCases",
    "AcademyDraft",
    "AcademyListing",
    "AssignAcademyManager",
    "CreateAcademy",
    "DeleteAcademy",
    "LoadAcademies",
    "LoadEligibleManagers",
    "SetCurrentAcademy",
    "UpdateAcademy",
]
