"""Adapter and use-case wiring for the dashboard runtime.

This module owns lazy construction of the action transport and the per-screen
use-case bundles that depend on values in
:class:`acadash.viewmodels.settings_vm.SettingsVM`. The web runtime calls
``ensure_ready`` before mounting a screen.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..adapters.action_rest import ActionRestAdapter
from ..domain.ports import ActionPort
from ..usecases.academies import AcademyUseCases
from ..usecases.attendance import AttendanceUseCases
from ..usecases.courses import CourseUseCases
from ..usecases.messages import MessageUseCases
from ..usecases.notifications import NotificationUseCases
from ..usecases.payments import PaymentUseCases
from ..usecases.programs import ProgramUseCases
from ..viewmodels.settings_vm import SettingsVM

LOGGER = logging.getLogger(__name__)


class AppController:
    """Create and cache the action port and use-case bundles from settings.

    A fixed ``actions`` port (for example ``InMemoryActions``) bypasses the
    REST adapter entirely; otherwise one is built from ``api_base_url``.
    """

    def __init__(self, settings_vm: SettingsVM, *, actions: Optional[ActionPort] = None) -> None:
        self.settings_vm = settings_vm
        self._fixed_actions = actions
        self._actions: Optional[ActionPort] = None
        self.uc_academies: Optional[AcademyUseCases] = None
        self.uc_programs: Optional[ProgramUseCases] = None
        self.uc_attendance: Optional[AttendanceUseCases] = None
        self.uc_notifications: Optional[NotificationUseCases] = None
        self.uc_messages: Optional[MessageUseCases] = None
        self.uc_courses: Optional[CourseUseCases] = None
        self.uc_payments: Optional[PaymentUseCases] = None

    @property
    def actions(self) -> Optional[ActionPort]:
        """Return the cached action port, if built."""
        return self._actions

    def reset(self) -> None:
        """Drop cached objects so the next ``ensure_ready`` rebuilds from settings."""
        self._actions = None
        self.uc_academies = None
        self.uc_programs = None
        self.uc_attendance = None
        self.uc_notifications = None
        self.uc_messages = None
        self.uc_courses = None
        self.uc_payments = None

    def ensure_ready(self) -> bool:
        """Ensure the action port and use cases are available.

        Returns:
            ``True`` when dependencies are available, ``False`` when no base
            URL is configured and no fixed port was given.
        """
        if self._actions is not None:
            return True

        if self._fixed_actions is not None:
            actions: ActionPort = self._fixed_actions
        else:
            base_url = (self.settings_vm.api_base_url or "").strip()
            if not base_url:
                return False
            actions = ActionRestAdapter(
                base_url,
                api_key=self.settings_vm.api_key or None,
                request_timeout_s=self.settings_vm.request_timeout_s,
                retries=self.settings_vm.retries,
            )
            LOGGER.debug("Action adapter ready for %s", base_url)

        self._actions = actions
        self.uc_academies = AcademyUseCases.from_actions(actions)
        self.uc_programs = ProgramUseCases.from_actions(actions, for_coach=not self.settings_vm.is_admin)
        self.uc_attendance = AttendanceUseCases.from_actions(actions)
        self.uc_notifications = NotificationUseCases.from_actions(actions)
        self.uc_messages = MessageUseCases.from_actions(actions)
        self.uc_courses = CourseUseCases.from_actions(actions)
        self.uc_payments = PaymentUseCases.from_actions(actions)
        return True


__all__ = ["AppController"]
