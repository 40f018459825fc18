"""NiceGUI entrypoint for the academy dashboard."""

from __future__ import annotations

import argparse
import os
from typing import Awaitable, Callable

from nicegui import ui

from acadash.domain.entities import ConversationRef
from acadash.utils.logging import configure_root
from acadash.viewmodels.base import ScreenVM
from acadash.viewmodels.courses_vm import CourseFormVM
from acadash.viewmodels.session_plan_vm import ACTIVITY_TYPES, ROW_PAIRS, SESSION_STATUSES, SessionPlanEditorVM
from acadash.web_ui.runtime import NotConfigured, WebRuntime


class UiNotifier:
    """``Notifier`` backed by NiceGUI toasts."""

    def success(self, message: str) -> None:
        ui.notify(message, color="positive")

    def error(self, message: str) -> None:
        ui.notify(message, color="negative", close_button="OK")


def _install_theme() -> None:
    ui.add_head_html(
        """
<style>
body { font-family: 'Segoe UI', Tahoma, sans-serif; background: #f5f7fb; }
.acadash-page { max-width: 1280px; margin: 0 auto; padding: 14px; }
.acadash-card { background: #fff; border: 1px solid #dde3ee; border-radius: 12px; }
</style>
        """
    )


def _bind(vm: ScreenVM) -> None:
    """Unmount the view model when the browser tab goes away."""
    ui.context.client.on_disconnect(vm.unmount)


def _action(fn: Callable[[], Awaitable[object]], *views) -> Callable[[], Awaitable[None]]:
    async def _handler() -> None:
        await fn()
        for view in views:
            view.refresh()

    return _handler


def _header(runtime: WebRuntime, notifier: UiNotifier) -> None:
    _install_theme()
    badge_vm = None
    if runtime.ensure_adapter():
        badge_vm = runtime.unread_badge_vm(notifier)
        _bind(badge_vm)

    @ui.refreshable
    def render_badges() -> None:
        if badge_vm is None:
            ui.label(runtime.status_message).classes("text-caption")
            return
        ui.badge(f"Notifications {badge_vm.notifications}", color="primary")
        ui.badge(f"Messages {badge_vm.messages}", color="secondary")

    with ui.header().classes("items-center justify-between"):
        with ui.row().classes("items-center q-gutter-md"):
            ui.label("Academy Dashboard").classes("text-h6")
            for path, label in (
                ("/", "Academies"),
                ("/programs", "Programs"),
                ("/courses", "Courses"),
                ("/payments", "Payments"),
                ("/attendance", "Attendance"),
                ("/notifications", "Notifications"),
                ("/messages", "Messages"),
                ("/settings", "Settings"),
            ):
                ui.link(label, path).classes("text-white")
        render_badges()

    if badge_vm is not None:
        ui.timer(0.1, badge_vm.mount, once=True)
        ui.timer(2.0, render_badges.refresh)


def _not_configured(message: str) -> None:
    with ui.column().classes("acadash-page"):
        ui.label(message).classes("text-negative")
        ui.link("Open settings", "/settings")


def _course_sessions(form_vm: CourseFormVM, view) -> None:
    """Existing plans when editing, queued plans when creating."""
    ui.label("Sessions").classes("text-subtitle1")
    if form_vm.is_edit:
        course_id = form_vm.form.editing_id
        for plan in form_vm.session_plans:
            ui.link(
                f"#{plan.session_number} {plan.title or plan.session_date}",
                f"/courses/{course_id}/sessions/{plan.id}",
            )
        ui.link("Add session", f"/courses/{course_id}/sessions/new?number={form_vm.next_session_number}")
        return

    for index, draft in enumerate(form_vm.sessions):
        with ui.row().classes("items-center"):
            ui.label(f"#{draft.session_number} {draft.session_date} {draft.title}")
            ui.button("Remove", on_click=lambda i=index: (form_vm.remove_session(i), view.refresh())).props("flat")
    session_form = form_vm.session_form
    with ui.row().classes("items-center"):
        for field, label in (("session_date", "Date"), ("title", "Title"), ("title_ar", "Arabic title")):
            ui.input(label, value=session_form.get(field) or "", on_change=lambda e, f=field: session_form.set(f, e.value))
        ui.button(session_form.submit_label, on_click=lambda: (form_vm.add_queued_session(), view.refresh()))


def _session_plan_editor(vm: SessionPlanEditorVM):
    """Render the plan editor; every structural edit re-renders it."""

    @ui.refreshable
    def render() -> None:
        title = f"Session #{vm.session_number}" if vm.is_edit else "New session"
        ui.label(title).classes("text-h6")
        ui.input("Date", value=vm.values["session_date"] or "", on_change=lambda e: vm.set("session_date", e.value))
        for field, label in (
            ("title", "Title"),
            ("title_ar", "Arabic title"),
            ("description", "Description"),
            ("description_ar", "Arabic description"),
            ("notes", "Notes"),
            ("notes_ar", "Arabic notes"),
        ):
            ui.input(label, value=vm.values[field] or "", on_change=lambda e, f=field: vm.set(f, e.value))
        ui.select(list(SESSION_STATUSES), value=vm.values["status"], label="Status", on_change=lambda e: vm.set("status", e.value))

        for kind, label in (("objectives", "Objectives"), ("materials", "Materials")):
            ui.label(label).classes("text-subtitle1")
            arabic = ROW_PAIRS[kind]
            for index, value in enumerate(vm.rows[kind]):
                with ui.row().classes("items-center"):
                    ui.input(value=value, on_change=lambda e, k=kind, i=index: vm.set_row(k, i, e.value))
                    ui.input(value=vm.rows[arabic][index], on_change=lambda e, k=arabic, i=index: vm.set_row(k, i, e.value))
                    ui.button("Remove", on_click=lambda k=kind, i=index: (vm.remove_row(k, i), render.refresh())).props("flat")
            ui.button(f"Add {label.lower()[:-1]}", on_click=lambda k=kind: (vm.add_row(k), render.refresh())).props("flat")

        ui.label("Activities").classes("text-subtitle1")
        for index, activity in enumerate(vm.activities):
            with ui.row().classes("items-center"):
                for field, label in (("name", "Name"), ("name_ar", "Arabic name")):
                    ui.input(label, value=activity[field], on_change=lambda e, i=index, f=field: vm.set_activity(i, f, e.value))
                ui.number("Minutes", value=activity["duration"], on_change=lambda e, i=index: vm.set_activity(i, "duration", e.value))
                ui.select(
                    list(ACTIVITY_TYPES),
                    value=activity["type"],
                    on_change=lambda e, i=index: vm.set_activity(i, "type", e.value),
                )
                ui.button("Remove", on_click=lambda i=index: (vm.remove_activity(i), render.refresh())).props("flat")
        ui.button("Add activity", on_click=lambda: (vm.add_activity(), render.refresh())).props("flat")

        with ui.row():
            ui.button(vm.saving.label, on_click=_action(vm.submit, render)).props("" if vm.saving.enabled else "disable")
            ui.link("Back to courses", "/courses")

    with ui.column().classes("acadash-page acadash-card q-pa-md w-full"):
        render()
    return render


def _build_ui(runtime: WebRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    @ui.page("/")
    async def academies_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.academies_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        @ui.refreshable
        def render_list() -> None:
            if vm.loading.active:
                ui.spinner()
                return
            if vm.is_empty:
                ui.label("No academies yet.")
                return
            for academy in vm.visible_academies:
                manager = vm.manager_for(academy.id)
                with ui.card().classes("acadash-card w-full"):
                    with ui.row().classes("w-full items-center justify-between"):
                        ui.label(academy.name_ar if vm.locale == "ar" else academy.name).classes("text-subtitle1")
                        ui.badge("Active" if academy.is_active else "Inactive")
                        ui.label(manager.email if manager else "No manager").classes("text-caption")
                        with ui.row():
                            ui.button("Edit", on_click=lambda a=academy: (vm.open_edit(a), render_dialogs.refresh()))
                            ui.button(
                                "Select",
                                on_click=_action(lambda a=academy: vm.set_current(a.id), render_list),
                            )
                            ui.button(
                                "Delete",
                                color="negative",
                                on_click=lambda a=academy: (vm.request_delete(a.id), render_dialogs.refresh()),
                            )

        @ui.refreshable
        def render_dialogs() -> None:
            form = vm.edit_dialog if vm.edit_dialog.is_open else vm.create_dialog
            if form.is_open:
                with ui.card().classes("acadash-card w-full q-pa-md"):
                    ui.label("Edit academy" if form.editing_id else "Create academy").classes("text-h6")
                    for field, label in (("name", "Name"), ("name_ar", "Arabic name"), ("slug", "Slug"), ("image", "Image URL")):
                        ui.input(label, value=form.get(field) or "", on_change=lambda e, f=field: form.set(f, e.value))
                    if form.editing_id:
                        ui.switch("Active", value=bool(form.get("is_active")), on_change=lambda e: form.set("is_active", e.value))
                    submit = vm.submit_update if form.editing_id else vm.submit_create
                    with ui.row():
                        ui.button(form.submit_label, on_click=_action(submit, render_dialogs, render_list)).props(
                            "" if form.submit_enabled else "disable"
                        )
                        ui.button("Cancel", on_click=lambda: (form.close(), render_dialogs.refresh()))
            if vm.delete_confirm.is_open:
                with ui.card().classes("acadash-card w-full q-pa-md"):
                    ui.label("Delete this academy?")
                    with ui.row():
                        ui.button(
                            vm.delete_confirm.deleting.label,
                            color="negative",
                            on_click=_action(vm.confirm_delete, render_dialogs, render_list),
                        )
                        ui.button("Cancel", on_click=lambda: (vm.cancel_delete(), render_dialogs.refresh()))

        with ui.column().classes("acadash-page w-full"):
            with ui.row().classes("w-full items-center"):
                ui.input("Search", on_change=lambda e: (setattr(vm, "query", e.value or ""), render_list.refresh()))
                ui.button("New academy", on_click=lambda: (vm.open_create(), render_dialogs.refresh()))
            render_dialogs()
            render_list()
        await vm.mount()
        render_list.refresh()

    @ui.page("/attendance")
    async def attendance_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.attendance_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        @ui.refreshable
        def render_sheet() -> None:
            stats = vm.stats
            ui.label(f"Present {stats.present} / {stats.total}").classes("text-subtitle1")
            if vm.saving.active:
                ui.label("Saving...").classes("text-caption")
            elif vm.last_saved is not None:
                ui.label(f"Saved at {vm.last_saved.strftime('%H:%M:%S')}").classes("text-caption")
            for member in vm.members:
                record = vm.record_for(member.user_id)
                name = member.user.full_name or member.user.username if member.user else member.user_id
                with ui.row().classes("w-full items-center"):
                    ui.checkbox(
                        name,
                        value=record.present,
                        on_change=lambda e, uid=member.user_id: vm.toggle_present(uid),
                    )
                    ui.input(
                        "Notes",
                        value=record.notes or "",
                        on_change=lambda e, uid=member.user_id: vm.set_notes(uid, e.value),
                    )

        async def on_program(event) -> None:
            await vm.select_program(str(event.value))
            render_sheet.refresh()

        async def on_date(event) -> None:
            await vm.select_date(str(event.value))
            render_sheet.refresh()

        await vm.mount()
        with ui.column().classes("acadash-page w-full"):
            with ui.row().classes("items-center"):
                ui.select(
                    {program.id: program.name for program in vm.programs},
                    value=vm.selected_program_id,
                    label="Program",
                    on_change=on_program,
                )
                ui.input("Session date", value=vm.session_date, on_change=on_date)
                ui.button("Save now", on_click=_action(vm.save_now, render_sheet))
            render_sheet()
        ui.timer(1.0, render_sheet.refresh)

    @ui.page("/notifications")
    async def notifications_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.notifications_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        @ui.refreshable
        def render_list() -> None:
            counts = vm.counts
            ui.label(f"{counts.unread} unread, {counts.today} today").classes("text-caption")
            for item in vm.visible:
                with ui.card().classes("acadash-card w-full"):
                    with ui.row().classes("w-full items-center justify-between"):
                        ui.label(item.title).classes("text-weight-bold" if not item.read else "")
                        ui.label(item.message)
                        with ui.row():
                            if not item.read:
                                ui.button("Mark read", on_click=_action(lambda i=item: vm.mark_read(i.id), render_list))
                            ui.button(
                                "Delete",
                                color="negative",
                                on_click=_action(lambda i=item: vm.delete(i.id), render_list),
                            )

        def set_tab(event) -> None:
            vm.active_tab = event.value
            render_list.refresh()

        def set_read_filter(event) -> None:
            vm.read_filter = event.value
            render_list.refresh()

        with ui.column().classes("acadash-page w-full"):
            with ui.row().classes("items-center"):
                ui.toggle(["all", "system", "appointments", "users", "messages"], value="all", on_change=set_tab)
                ui.toggle(["all", "unread", "read"], value="all", on_change=set_read_filter)
                ui.button("Mark all read", on_click=_action(vm.mark_all_read, render_list))
                ui.button("Clear read", on_click=_action(vm.clear_read, render_list))
            render_list()
        await vm.mount()
        render_list.refresh()

    @ui.page("/messages")
    async def messages_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.messages_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        async def open_thread(target: ConversationRef) -> None:
            await vm.select(target)
            render_thread.refresh()

        @ui.refreshable
        def render_conversations() -> None:
            for conversation in vm.visible_conversations:
                label = conversation.name
                if conversation.unread_count:
                    label = f"{label} ({conversation.unread_count})"
                ui.button(
                    label,
                    on_click=lambda c=conversation: open_thread(ConversationRef("user", c.user_id, c.name)),
                ).props("flat")
            for group in vm.groups:
                ui.button(
                    f"# {group.name}",
                    on_click=lambda g=group: open_thread(ConversationRef("group", g.id, g.name)),
                ).props("flat")

        @ui.refreshable
        def render_thread() -> None:
            if vm.selected is None:
                ui.label("Select a conversation.")
                return
            ui.label(vm.selected.name).classes("text-subtitle1")
            for message in vm.messages:
                mine = message.sender_id == vm.user_id
                ui.chat_message(message.content, sent=mine, stamp=message.created_at.strftime("%H:%M"))
            with ui.row().classes("w-full"):
                ui.input("Message", value=vm.draft_text, on_change=lambda e: setattr(vm, "draft_text", e.value or ""))
                ui.button(vm.sending.label, on_click=_action(vm.send, render_thread, render_conversations))

        with ui.row().classes("acadash-page w-full no-wrap"):
            with ui.column().classes("acadash-card q-pa-sm"):
                ui.input("Search", on_change=lambda e: (setattr(vm, "search", e.value or ""), render_conversations.refresh()))
                render_conversations()
            with ui.column().classes("acadash-card q-pa-sm col-grow"):
                render_thread()
        await vm.mount()
        render_conversations.refresh()
        ui.timer(1.0, render_thread.refresh)

    @ui.page("/programs")
    async def program_members_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.program_members_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        @ui.refreshable
        def render_members() -> None:
            if vm.loading_members.active:
                ui.spinner()
                return
            if not vm.members:
                ui.label("No members in this program.")
            for member in vm.members:
                name = member.user.display_name if member.user else member.user_id
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(name)
                    ui.badge(f"{member.points_total} pts")
                    with ui.row():
                        ui.button("Note", on_click=lambda m=member: (vm.open_note(m.user_id), render_dialogs.refresh()))
                        ui.button(
                            "Remove",
                            color="negative",
                            on_click=lambda m=member: (vm.request_remove(m.user_id), render_dialogs.refresh()),
                        )

        @ui.refreshable
        def render_players() -> None:
            for player in vm.available_players:
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(player.display_name)
                    ui.button(
                        vm.adding.label,
                        on_click=_action(lambda p=player: vm.add_player(p.id), render_members, render_players),
                    ).props("" if vm.adding.enabled else "disable")

        @ui.refreshable
        def render_dialogs() -> None:
            if vm.remove_confirm.is_open:
                with ui.card().classes("acadash-card w-full q-pa-md"):
                    ui.label("Remove this player from the program?")
                    with ui.row():
                        ui.button(
                            vm.remove_confirm.deleting.label,
                            color="negative",
                            on_click=_action(vm.confirm_remove, render_dialogs, render_members, render_players),
                        )
                        ui.button("Cancel", on_click=lambda: (vm.cancel_remove(), render_dialogs.refresh()))
            note = vm.note_dialog
            if note.is_open:
                with ui.card().classes("acadash-card w-full q-pa-md"):
                    ui.label("Coach note").classes("text-h6")
                    ui.input("Points", value=note.get("points_delta") or "", on_change=lambda e: note.set("points_delta", e.value))
                    ui.textarea("Comment", value=note.get("comment") or "", on_change=lambda e: note.set("comment", e.value))
                    with ui.row():
                        ui.button(note.submit_label, on_click=_action(vm.submit_note, render_dialogs, render_members))
                        ui.button("Cancel", on_click=lambda: (vm.close_note(), render_dialogs.refresh()))

        async def on_program(event) -> None:
            await vm.select_program(str(event.value))
            render_members.refresh()
            render_players.refresh()

        await vm.mount()
        with ui.column().classes("acadash-page w-full"):
            ui.select(
                {program.id: program.name for program in vm.programs},
                value=vm.selected_program_id,
                label="Program",
                on_change=on_program,
            )
            render_dialogs()
            with ui.row().classes("w-full no-wrap"):
                with ui.column().classes("acadash-card q-pa-sm col-grow"):
                    ui.label("Members").classes("text-subtitle1")
                    render_members()
                with ui.column().classes("acadash-card q-pa-sm"):
                    ui.input("Find player", on_change=lambda e: (setattr(vm, "search", e.value or ""), render_players.refresh()))
                    render_players()

    @ui.page("/courses")
    async def courses_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.courses_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)
        editor = {"vm": None}

        def drop_form() -> None:
            if editor["vm"] is not None:
                editor["vm"].unmount()
            editor["vm"] = None

        ui.context.client.on_disconnect(drop_form)

        async def open_form(course=None) -> None:
            drop_form()
            form_vm = runtime.course_form_vm(notifier, course)
            editor["vm"] = form_vm
            await form_vm.mount()
            render_form.refresh()

        async def submit_form() -> None:
            form_vm = editor["vm"]
            if form_vm is not None and await form_vm.submit():
                drop_form()
                await vm.load()
            render_form.refresh()
            render_list.refresh()

        def close_form() -> None:
            drop_form()
            render_form.refresh()

        @ui.refreshable
        def render_form() -> None:
            form_vm = editor["vm"]
            if form_vm is None:
                return
            form = form_vm.form
            with ui.card().classes("acadash-card w-full q-pa-md"):
                ui.label("Edit course" if form_vm.is_edit else "Create course").classes("text-h6")
                for field, label in (
                    ("name", "Name"),
                    ("name_ar", "Arabic name"),
                    ("description", "Description"),
                    ("description_ar", "Arabic description"),
                    ("currency", "Currency"),
                ):
                    ui.input(label, value=form.get(field) or "", on_change=lambda e, f=field: form.set(f, e.value))
                for field, label in (("price", "Price"), ("duration", "Duration"), ("max_students", "Max students")):
                    ui.number(label, value=form.get(field), on_change=lambda e, f=field: form.set(f, e.value))
                ui.select(
                    {category.id: category.name for category in form_vm.categories},
                    value=form.get("category_id") or None,
                    label="Category",
                    on_change=lambda e: form.set("category_id", e.value or ""),
                )
                if form_vm.is_edit:
                    ui.switch("Active", value=bool(form.get("is_active")), on_change=lambda e: form.set("is_active", e.value))
                _course_sessions(form_vm, render_form)
                if form_vm.partial_course_id:
                    with ui.row().classes("items-center"):
                        ui.label(f"Course {form_vm.partial_course_id} was created with incomplete sessions.").classes(
                            "text-negative"
                        )
                        ui.link("Continue with sessions", f"/courses/{form_vm.partial_course_id}/sessions/new")
                with ui.row():
                    ui.button(form.submit_label, on_click=submit_form).props(
                        "" if form.submit_enabled and not form_vm.partial_course_id else "disable"
                    )
                    ui.button("Cancel", on_click=close_form)

        @ui.refreshable
        def render_list() -> None:
            if vm.loading.active:
                ui.spinner()
                return
            for course in vm.visible_courses:
                with ui.card().classes("acadash-card w-full"):
                    with ui.row().classes("w-full items-center justify-between"):
                        ui.label(course.name_ar if vm.locale == "ar" else course.name).classes("text-subtitle1")
                        ui.label(vm.category_name(course.category_id)).classes("text-caption")
                        ui.label(f"{course.price:g} {course.currency}")
                        ui.switch(
                            "Active",
                            value=course.is_active,
                            on_change=_action(lambda c=course: vm.toggle_active(c.id), render_list),
                        )
                        with ui.row():
                            ui.button("Edit", on_click=lambda c=course: open_form(c))
                            ui.button(
                                "Delete",
                                color="negative",
                                on_click=lambda c=course: (vm.request_delete(c.id), render_confirm.refresh()),
                            )

        @ui.refreshable
        def render_confirm() -> None:
            if not vm.delete.is_open:
                return
            with ui.card().classes("acadash-card w-full q-pa-md"):
                ui.label("Delete this course?")
                with ui.row():
                    ui.button(
                        vm.delete.deleting.label,
                        color="negative",
                        on_click=_action(vm.confirm_delete, render_confirm, render_list),
                    )
                    ui.button("Cancel", on_click=lambda: (vm.cancel_delete(), render_confirm.refresh()))

        with ui.column().classes("acadash-page w-full"):
            with ui.row().classes("w-full items-center"):
                ui.input("Search", on_change=lambda e: (setattr(vm, "search", e.value or ""), render_list.refresh()))
                ui.button("New course", on_click=lambda: open_form())
            render_form()
            render_confirm()
            render_list()
        await vm.mount()
        render_list.refresh()

    @ui.page("/courses/{course_id}/sessions/new")
    async def new_session_page(course_id: str, number: int = 1) -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.session_plan_vm(notifier, course_id, session_number=number)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)
        _session_plan_editor(vm)
        await vm.mount()

    @ui.page("/courses/{course_id}/sessions/{plan_id}")
    async def edit_session_page(course_id: str, plan_id: str) -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.session_plan_vm(notifier, course_id, plan_id=plan_id)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)
        render = _session_plan_editor(vm)
        await vm.mount()
        render.refresh()

    @ui.page("/payments")
    async def payments_page() -> None:
        notifier = UiNotifier()
        _header(runtime, notifier)
        try:
            vm = runtime.payments_vm(notifier)
        except NotConfigured as exc:
            _not_configured(str(exc))
            return
        _bind(vm)

        @ui.refreshable
        def render_buckets() -> None:
            if vm.loading.active:
                ui.spinner()
                return
            buckets = vm.buckets
            for title, rows in (
                ("Pending", buckets.pending),
                ("Paid", buckets.paid),
                ("Unpaid", buckets.unpaid),
                ("Rejected", buckets.rejected),
            ):
                ui.label(f"{title} ({len(rows)})").classes("text-subtitle1")
                for enrollment in rows:
                    course = enrollment.course_name_ar if vm.locale == "ar" and enrollment.course_name_ar else enrollment.course_name
                    with ui.row().classes("w-full items-center justify-between acadash-card q-pa-xs"):
                        ui.label(enrollment.student_name)
                        ui.label(course)
                        ui.label(enrollment.payment_date or "").classes("text-caption")
                        if vm.is_admin:
                            ui.button(
                                "Status",
                                on_click=lambda e=enrollment: (vm.open_status(e), render_dialog.refresh()),
                            )

        @ui.refreshable
        def render_dialog() -> None:
            dialog = vm.status_dialog
            if not dialog.is_open:
                return
            with ui.card().classes("acadash-card w-full q-pa-md"):
                ui.label("Payment status").classes("text-h6")
                ui.select(
                    {"pending": "Pending", "paid": "Paid", "rejected": "Rejected"},
                    value=dialog.get("status"),
                    label="Status",
                    on_change=lambda e: dialog.set("status", e.value),
                )
                ui.textarea("Notes", value=dialog.get("notes") or "", on_change=lambda e: dialog.set("notes", e.value))
                with ui.row():
                    ui.button(dialog.submit_label, on_click=_action(vm.submit_status, render_dialog, render_buckets))
                    ui.button("Cancel", on_click=lambda: (vm.close_status(), render_dialog.refresh()))

        with ui.column().classes("acadash-page w-full"):
            ui.input("Search", on_change=lambda e: (setattr(vm, "search", e.value or ""), render_buckets.refresh()))
            render_dialog()
            render_buckets()
        await vm.mount()
        render_buckets.refresh()

    @ui.page("/settings")
    async def settings_page() -> None:
        settings = runtime.settings_vm

        def apply_value(key: str, value) -> None:
            try:
                runtime.apply_settings_payload({key: value})
            except ValueError as exc:
                ui.notify(str(exc), color="negative", close_button="OK")

        def save() -> None:
            try:
                runtime.save_settings()
            except (OSError, ValueError) as exc:
                ui.notify(str(exc), color="negative", close_button="OK")
                return
            ui.notify("Settings saved.", color="positive")

        _header(runtime, UiNotifier())
        with ui.column().classes("acadash-page acadash-card q-pa-md"):
            ui.input("API base URL", value=settings.api_base_url, on_change=lambda e: apply_value("api_base_url", e.value))
            ui.input("API key", value=settings.api_key, password=True, on_change=lambda e: apply_value("api_key", e.value))
            ui.input("User id", value=settings.user_id, on_change=lambda e: apply_value("user_id", e.value))
            ui.switch("Administrator", value=settings.is_admin, on_change=lambda e: apply_value("is_admin", e.value))
            ui.select(["en", "ar"], value=settings.locale, label="Language", on_change=lambda e: apply_value("locale", e.value))
            ui.number(
                "Request timeout (s)",
                value=settings.request_timeout_s,
                on_change=lambda e: apply_value("request_timeout_s", e.value),
            )
            ui.switch("Debug logging", value=settings.debug_logging, on_change=lambda e: apply_value("debug_logging", e.value))
            ui.button("Save", on_click=save)


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the academy dashboard NiceGUI web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--demo", action="store_true", help="Serve in-memory demo data instead of the REST API.")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    runtime = WebRuntime(demo=args.demo)
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="Academy Dashboard",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("ACADASH_WEB_STORAGE_SECRET", "acadash-web-ui-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
