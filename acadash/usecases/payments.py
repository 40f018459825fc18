from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from acadash.adapters.action_schemas import EnrollmentWire, parse_many
from acadash.domain.entities import Enrollment, PaymentStatus
from acadash.domain.ports import ActionPort
from acadash.usecases.invoke_action import call_action, parse_payload


@dataclass
class LoadEnrollments:
    """Admins review every enrollment, other roles only their own."""

    actions: ActionPort

    def __call__(self, *, all_enrollments: bool = False) -> List[Enrollment]:
        action = "getAllEnrollments" if all_enrollments else "getMyEnrollments"
        payload = call_action(self.actions, action)
        return parse_payload(action, parse_many, EnrollmentWire, payload.get("enrollments"))


@dataclass
class UpdatePaymentStatus:
    actions: ActionPort

    def __call__(self, enrollment_id: str, status: PaymentStatus, *, notes: Optional[str] = None) -> None:
        call_action(
            self.actions,
            "updatePaymentStatus",
            {"enrollmentId": enrollment_id, "status": status, "notes": notes},
            default_code="UPDATE_FAILED",
        )


@dataclass
class PaymentUseCases:
    load: LoadEnrollments
    update_status: UpdatePaymentStatus

    @classmethod
    def from_actions(cls, actions: ActionPort) -> "PaymentUseCases":
        return cls(load=LoadEnrollments(actions), update_status=UpdatePaymentStatus(actions))


__all__ = ["LoadEnrollments", "PaymentUseCases", "UpdatePaymentStatus"]
