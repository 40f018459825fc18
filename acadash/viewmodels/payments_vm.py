from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

from acadash.app.polling_scheduler import PollingScheduler
from acadash.domain.derived import EnrollmentBuckets, bucket_enrollments, filter_enrollments
from acadash.domain.entities import Enrollment
from acadash.domain.ports import Notifier, ValidationError
from acadash.usecases.payments import PaymentUseCases
from acadash.viewmodels import forms
from acadash.viewmodels.base import FormDialog, ScreenVM

PAYMENT_STATUSES = ("pending", "paid", "rejected")
STATUS_LABELS = {"pending": "Pending", "paid": "Paid", "rejected": "Rejected"}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentsVM(ScreenVM):
    """Enrollment payment review.

    A status change patches the affected row in place instead of reloading
    the whole list.
    """

    load_error_message = "Failed to load enrollments"
    clear_on_error = False

    def __init__(
        self,
        usecases: PaymentUseCases,
        *,
        notifier: Notifier,
        is_admin: bool = False,
        scheduler: Optional[PollingScheduler] = None,
        locale: str = "en",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        super().__init__(notifier=notifier, scheduler=scheduler, locale=locale)
        self.uc = usecases
        self.is_admin = is_admin
        self._clock = clock
        self.enrollments: List[Enrollment] = []
        self.search = ""
        self.status_dialog = FormDialog({"status": "pending", "notes": ""}, submit_label="Update", busy_label="Updating...")

    @property
    def visible(self) -> List[Enrollment]:
        return filter_enrollments(self.enrollments, self.search)

    @property
    def buckets(self) -> EnrollmentBuckets:
        return bucket_enrollments(self.visible)

    async def load(self) -> None:
        ok, items = await self._run(
            self.loading, self.load_error_message, self.uc.load, all_enrollments=self.is_admin
        )
        if ok:
            self.enrollments = list(items)
        elif self.clear_on_error and not self.scope.closed:
            self.enrollments = []

    def open_status(self, enrollment: Enrollment) -> None:
        self.status_dialog.open(
            {"status": enrollment.payment_status or "pending", "notes": enrollment.notes or ""},
            editing_id=enrollment.id,
        )

    def close_status(self) -> None:
        self.status_dialog.close()

    async def submit_status(self) -> bool:
        dialog = self.status_dialog
        enrollment_id = dialog.editing_id
        if enrollment_id is None or not dialog.submit_enabled:
            return False
        status = dialog.get("status")
        if status not in PAYMENT_STATUSES:
            self.reject_invalid(ValidationError("Please select a payment status", field="status"))
            return False
        notes = forms.optional_text(dialog.get("notes"))
        ok, _ = await self._run(
            dialog.submitting,
            "Failed to update payment status",
            self.uc.update_status,
            enrollment_id,
            status,
            notes=notes,
        )
        if not ok:
            return False
        paid_at = self._clock().isoformat() if status == "paid" else None
        self.enrollments = [
            replace(
                item,
                payment_status=status,
                payment_date=paid_at or item.payment_date,
                notes=notes if notes is not None else item.notes,
            )
            if item.id == enrollment_id
            else item
            for item in self.enrollments
        ]
        self.succeed(f'Payment status changed to "{STATUS_LABELS[status]}"')
        dialog.close()
        return True


__all__ = ["PAYMENT_STATUSES", "PaymentsVM"]
