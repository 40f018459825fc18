"""NiceGUI runtime orchestration for the academy dashboard.

``WebRuntime`` owns the process-wide objects (settings, storage, the
action controller, the shared store and the timer scheduler) and builds a
fresh view model for every page visit. Pages mount the view model on open
and unmount it when the client disconnects.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from acadash.adapters.actions_mock import InMemoryActions
from acadash.adapters.storage_local import StorageLocal
from acadash.app.controller import AppController
from acadash.app.polling_scheduler import PollingScheduler, asyncio_scheduler
from acadash.app.shared_store import SharedStore
from acadash.domain.entities import Course
from acadash.domain.ports import Notifier
from acadash.utils.logging import apply_debug_toggle
from acadash.viewmodels.academies_vm import AcademiesVM
from acadash.viewmodels.attendance_vm import AttendanceVM
from acadash.viewmodels.courses_vm import CourseFormVM, CoursesVM
from acadash.viewmodels.messages_vm import MessagesVM
from acadash.viewmodels.notifications_vm import NotificationsVM
from acadash.viewmodels.payments_vm import PaymentsVM
from acadash.viewmodels.program_members_vm import ProgramMembersVM
from acadash.viewmodels.session_plan_vm import SessionPlanEditorVM
from acadash.viewmodels.settings_vm import SettingsVM
from acadash.viewmodels.unread_badge_vm import UnreadBadgeVM

LOGGER = logging.getLogger(__name__)


class NotConfigured(RuntimeError):
    """Raised when a page needs the API but no base URL is set."""


class WebRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(self, *, demo: bool = False, storage_root: Optional[str] = None) -> None:
        self.status_message = "Ready."
        self.storage = StorageLocal(root_dir=storage_root or os.environ.get("ACADASH_STORAGE_ROOT") or ".")
        self.settings_vm = SettingsVM(on_save=self.storage.save_user_settings)
        self._load_settings_defaults()
        self.settings_vm.apply_env()

        actions = None
        if demo:
            actions = InMemoryActions.with_demo_data()
            self.settings_vm.user_id = self.settings_vm.user_id or actions.current_user_id
            self.settings_vm.is_admin = True
        self.controller = AppController(self.settings_vm, actions=actions)
        self.store = SharedStore()
        self._scheduler: Optional[PollingScheduler] = None
        apply_debug_toggle(self.settings_vm.debug_logging)

    @property
    def scheduler(self) -> PollingScheduler:
        """Loop-bound scheduler, created on first use inside the running loop."""
        if self._scheduler is None:
            self._scheduler = asyncio_scheduler()
        return self._scheduler

    @property
    def locale(self) -> str:
        return self.settings_vm.locale

    # ------------------------------------------------------------------
    # Settings workflows
    # ------------------------------------------------------------------
    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        self.settings_vm.apply_dict(payload)
        self.controller.reset()
        apply_debug_toggle(self.settings_vm.debug_logging)
        self.status_message = "Settings applied."

    def save_settings(self) -> None:
        self.settings_vm.cmd_save()
        self.status_message = "Settings saved."

    def ensure_adapter(self) -> bool:
        if self.controller.ensure_ready():
            return True
        self.status_message = "Configure the API URL in Settings first."
        return False

    def _require_ready(self) -> AppController:
        if not self.ensure_adapter():
            raise NotConfigured(self.status_message)
        return self.controller

    # ------------------------------------------------------------------
    # View model factories
    # ------------------------------------------------------------------
    def academies_vm(self, notifier: Notifier) -> AcademiesVM:
        controller = self._require_ready()
        return AcademiesVM(
            controller.uc_academies,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
        )

    def program_members_vm(self, notifier: Notifier) -> ProgramMembersVM:
        controller = self._require_ready()
        return ProgramMembersVM(
            controller.uc_programs,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
        )

    def attendance_vm(self, notifier: Notifier) -> AttendanceVM:
        controller = self._require_ready()
        return AttendanceVM(
            controller.uc_programs,
            controller.uc_attendance,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
            autosave_idle_ms=self.settings_vm.autosave_idle_ms,
        )

    def notifications_vm(self, notifier: Notifier) -> NotificationsVM:
        controller = self._require_ready()
        return NotificationsVM(
            controller.uc_notifications,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
        )

    def messages_vm(self, notifier: Notifier) -> MessagesVM:
        controller = self._require_ready()
        return MessagesVM(
            controller.uc_messages,
            user_id=self.settings_vm.user_id,
            is_admin=self.settings_vm.is_admin,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
            poll_ms=self.settings_vm.message_poll_ms,
        )

    def courses_vm(self, notifier: Notifier) -> CoursesVM:
        controller = self._require_ready()
        return CoursesVM(controller.uc_courses, notifier=notifier, scheduler=self.scheduler, locale=self.locale)

    def course_form_vm(self, notifier: Notifier, course: Optional[Course] = None) -> CourseFormVM:
        controller = self._require_ready()
        return CourseFormVM(
            controller.uc_courses, notifier=notifier, course=course, scheduler=self.scheduler, locale=self.locale
        )

    def session_plan_vm(
        self,
        notifier: Notifier,
        course_id: str,
        *,
        plan_id: Optional[str] = None,
        session_number: int = 1,
    ) -> SessionPlanEditorVM:
        controller = self._require_ready()
        return SessionPlanEditorVM(
            controller.uc_courses,
            course_id=course_id,
            notifier=notifier,
            plan_id=plan_id,
            session_number=session_number,
            scheduler=self.scheduler,
            locale=self.locale,
        )

    def payments_vm(self, notifier: Notifier) -> PaymentsVM:
        controller = self._require_ready()
        return PaymentsVM(
            controller.uc_payments,
            notifier=notifier,
            is_admin=self.settings_vm.is_admin,
            scheduler=self.scheduler,
            locale=self.locale,
        )

    def unread_badge_vm(self, notifier: Notifier) -> UnreadBadgeVM:
        controller = self._require_ready()
        return UnreadBadgeVM(
            controller.uc_notifications,
            notifier=notifier,
            store=self.store,
            scheduler=self.scheduler,
            locale=self.locale,
            poll_ms=self.settings_vm.unread_poll_ms,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _load_settings_defaults(self) -> None:
        try:
            payload = self.storage.load_user_settings()
        except (OSError, ValueError) as exc:
            LOGGER.warning("Could not load local settings defaults: %s", exc)
            return
        try:
            self.settings_vm.apply_dict(payload)
        except ValueError as exc:
            LOGGER.warning("Could not apply local settings defaults: %s", exc)


__all__ = ["NotConfigured", "WebRuntime"]
