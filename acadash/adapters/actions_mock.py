from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from acadash.domain.ports import ActionName, ActionPort


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:8]}"


@dataclass
class InMemoryActions(ActionPort):
    """Offline substitute for ``ActionRestAdapter`` with deterministic responses.

    Records are stored as camelCase dictionaries, exactly as the action API
    would return them. Every call is appended to ``calls`` so tests can assert
    on what was sent.
    """

    current_user_id: str = "user-admin"
    calls: List[Tuple[ActionName, Dict[str, Any]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.academies: Dict[str, Dict[str, Any]] = {}
        self.managers: Dict[str, Optional[Dict[str, Any]]] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.programs: Dict[str, Dict[str, Any]] = {}
        self.members: Dict[str, Dict[str, Any]] = {}
        self.attendance: Dict[Tuple[str, str], Dict[str, Dict[str, Any]]] = {}
        self.notifications: Dict[str, Dict[str, Any]] = {}
        self.messages: List[Dict[str, Any]] = []
        self.groups: Dict[str, Dict[str, Any]] = {}
        self.categories: Dict[str, Dict[str, Any]] = {}
        self.courses: Dict[str, Dict[str, Any]] = {}
        self.session_plans: Dict[str, Dict[str, Any]] = {}
        self.enrollments: Dict[str, Dict[str, Any]] = {}
        self.current_academy_id: Optional[str] = None
        self._rejections: Dict[ActionName, Optional[str]] = {}
        self._failures: Dict[ActionName, Exception] = {}
        self._handlers: Dict[ActionName, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "getAllAcademies": self._get_all_academies,
            "getEligibleAcademyManagers": self._get_eligible_managers,
            "createAcademy": self._create_academy,
            "updateAcademy": self._update_academy,
            "deleteAcademy": self._delete_academy,
            "assignExistingAcademyManager": self._assign_manager,
            "setCurrentAcademy": self._set_current_academy,
            "getPrograms": self._get_programs,
            "getAcademyPlayersForPrograms": self._get_players,
            "listProgramMembers": self._list_members,
            "listProgramMembersForCoach": self._list_members,
            "addPlayerToProgram": self._add_member,
            "removePlayerFromProgram": self._remove_member,
            "addCoachNoteToProgramPlayer": self._add_coach_note,
            "grantPlayerBadge": self._ok,
            "getProgramAttendance": self._get_attendance,
            "getProgramAttendanceSummaryForProgram": self._get_attendance_summary,
            "saveProgramAttendance": self._save_attendance,
            "getNotifications": self._get_notifications,
            "markAsRead": self._mark_read,
            "markAllAsRead": self._mark_all_read,
            "deleteNotification": self._delete_notification,
            "getUnreadCounts": self._get_unread_counts,
            "getUserConversations": self._get_conversations,
            "getAllGroups": self._get_all_groups,
            "getUserGroups": self._get_user_groups,
            "getConversation": self._get_conversation,
            "getGroupMessages": self._get_group_messages,
            "sendMessage": self._send_message,
            "createGroup": self._create_group,
            "updateGroup": self._update_group,
            "markMessageAsRead": self._mark_message_read,
            "getCourses": self._get_courses,
            "getAllCategories": self._get_categories,
            "createCourse": self._create_course,
            "updateCourse": self._update_course,
            "deleteCourse": self._delete_course,
            "getSessionPlans": self._get_session_plans,
            "createSessionPlan": self._create_session_plan,
            "updateSessionPlan": self._update_session_plan,
            "getAllEnrollments": self._get_all_enrollments,
            "getMyEnrollments": self._get_my_enrollments,
            "updatePaymentStatus": self._update_payment_status,
        }

    # ---------- ActionPort ----------

    def invoke(self, action: ActionName, payload: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        body = dict(payload or {})
        self.calls.append((action, body))
        if action in self._failures:
            raise self._failures[action]
        if action in self._rejections:
            error = self._rejections[action]
            return {"success": False, "error": error} if error is not None else {"success": False}
        handler = self._handlers.get(action)
        if handler is None:
            return {"success": False, "error": f"Unknown action: {action}"}
        return handler(body)

    # ---------- Test helpers ----------

    def reject(self, action: ActionName, error: Optional[str] = None) -> None:
        """Answer ``success: false`` for ``action`` until ``clear_faults``."""
        self._rejections[action] = error

    def fail(self, action: ActionName, exc: Exception) -> None:
        """Raise ``exc`` from ``invoke`` for ``action`` until ``clear_faults``."""
        self._failures[action] = exc

    def clear_faults(self) -> None:
        self._rejections.clear()
        self._failures.clear()

    def calls_to(self, action: ActionName) -> List[Dict[str, Any]]:
        return [body for name, body in self.calls if name == action]

    def add_user(self, user_id: str, *, username: str, role: str = "player", full_name: Optional[str] = None) -> Dict[str, Any]:
        record = {
            "id": user_id,
            "email": f"{username}@example.com",
            "username": username,
            "fullName": full_name,
            "role": role,
        }
        self.users[user_id] = record
        return record

    def add_academy(self, academy_id: str, name: str, name_ar: str, **extra: Any) -> Dict[str, Any]:
        record = {"id": academy_id, "name": name, "nameAr": name_ar, "slug": "", "image": None, "isActive": True}
        record.update(extra)
        self.academies[academy_id] = record
        self.managers.setdefault(academy_id, None)
        return record

    def add_program(self, program_id: str, name: str, *, academy_id: Optional[str] = None) -> Dict[str, Any]:
        record = {"id": program_id, "name": name, "nameAr": "", "academyId": academy_id, "isActive": True}
        self.programs[program_id] = record
        return record

    def add_member(self, program_id: str, user_id: str, *, points_total: int = 0) -> Dict[str, Any]:
        member_id = f"{program_id}:{user_id}"
        record = {
            "id": member_id,
            "programId": program_id,
            "userId": user_id,
            "academyId": self.programs.get(program_id, {}).get("academyId") or "",
            "status": "active",
            "pointsTotal": points_total,
        }
        self.members[member_id] = record
        return record

    def add_notification(self, notification_id: str, title: str, *, read: bool = False, **extra: Any) -> Dict[str, Any]:
        record = {
            "id": notification_id,
            "title": title,
            "message": "",
            "timestamp": _now(),
            "type": "info",
            "category": "system",
            "read": read,
        }
        record.update(extra)
        self.notifications[notification_id] = record
        return record

    def add_category(self, category_id: str, name: str) -> Dict[str, Any]:
        record = {"id": category_id, "name": name, "nameAr": ""}
        self.categories[category_id] = record
        return record

    def add_course(self, course_id: str, name: str, name_ar: str, **extra: Any) -> Dict[str, Any]:
        record = {
            "id": course_id,
            "name": name,
            "nameAr": name_ar,
            "price": 0.0,
            "currency": "OMR",
            "duration": 1,
            "isActive": True,
        }
        record.update(extra)
        self.courses[course_id] = record
        return record

    def add_enrollment(self, enrollment_id: str, course_id: str, student_id: str, *, status: Optional[str] = None) -> Dict[str, Any]:
        record = {
            "id": enrollment_id,
            "courseId": course_id,
            "studentId": student_id,
            "paymentStatus": status,
            "paymentDate": None,
            "notes": None,
        }
        self.enrollments[enrollment_id] = record
        return record

    def add_message(self, sender_id: str, content: str, *, recipient_id: Optional[str] = None, group_id: Optional[str] = None) -> Dict[str, Any]:
        record = {
            "id": _new_id("msg"),
            "senderId": sender_id,
            "recipientId": recipient_id,
            "groupId": group_id,
            "content": content,
            "readBy": [sender_id],
            "createdAt": _now(),
        }
        self.messages.append(record)
        return record

    @classmethod
    def with_demo_data(cls) -> "InMemoryActions":
        """Small fixture set used by the demo web runtime."""
        actions = cls()
        actions.add_user("user-admin", username="admin", role="admin", full_name="Admin")
        actions.add_user("user-coach", username="coach", role="coach", full_name="Coach Salim")
        actions.add_user("user-p1", username="ahmed", full_name="Ahmed Al Balushi")
        actions.add_user("user-p2", username="fatma", full_name="Fatma Al Harthi")
        actions.add_academy("ac-1", "Muscat Academy", "أكاديمية مسقط", slug="muscat")
        actions.add_academy("ac-2", "Sohar Academy", "أكاديمية صحار", slug="sohar", isActive=False)
        actions.add_program("prog-1", "U12 Football", academy_id="ac-1")
        actions.add_member("prog-1", "user-p1", points_total=40)
        actions.add_member("prog-1", "user-p2", points_total=25)
        actions.add_notification("n-1", "Welcome", message="Your academy is ready.")
        actions.add_notification("n-2", "New enrollment", category="users", read=True)
        actions.add_category("cat-1", "Football")
        actions.add_course("course-1", "Beginner Football", "كرة القدم للمبتدئين", categoryId="cat-1")
        actions.add_enrollment("enr-1", "course-1", "user-p1", status="pending")
        actions.add_message("user-coach", "Training moved to 5pm", recipient_id="user-admin")
        return actions

    # ---------- Handlers ----------

    @staticmethod
    def _ok(_: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True}

    @staticmethod
    def _missing(what: str) -> Dict[str, Any]:
        return {"success": False, "error": f"{what} not found"}

    def _user_card(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.users.get(user_id)

    # academies

    def _get_all_academies(self, _: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "success": True,
            "academies": list(self.academies.values()),
            "managersByAcademyId": dict(self.managers),
        }

    def _get_eligible_managers(self, _: Dict[str, Any]) -> Dict[str, Any]:
        users = [user for user in self.users.values() if user.get("role") in ("admin", "manager", "coach")]
        return {"success": True, "users": users}

    def _create_academy(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if not body.get("name") or not body.get("nameAr"):
            return {"success": False, "error": "Name and Arabic name are required"}
        academy_id = _new_id("ac")
        extra = {key: body[key] for key in ("slug", "image", "isActive") if key in body}
        academy = self.add_academy(academy_id, body["name"], body["nameAr"], **extra)
        return {"success": True, "academy": academy}

    def _update_academy(self, body: Dict[str, Any]) -> Dict[str, Any]:
        academy = self.academies.get(body.get("academyId", ""))
        if academy is None:
            return self._missing("Academy")
        for key in ("name", "nameAr", "slug", "image", "isActive"):
            if key in body:
                academy[key] = body[key]
        return {"success": True, "academy": academy}

    def _delete_academy(self, body: Dict[str, Any]) -> Dict[str, Any]:
        academy_id = body.get("academyId", "")
        if self.academies.pop(academy_id, None) is None:
            return self._missing("Academy")
        self.managers.pop(academy_id, None)
        return {"success": True}

    def _assign_manager(self, body: Dict[str, Any]) -> Dict[str, Any]:
        academy_id = body.get("academyId", "")
        user = self.users.get(body.get("userId", ""))
        if academy_id not in self.academies or user is None:
            return self._missing("Academy or user")
        self.managers[academy_id] = {
            "userId": user["id"],
            "email": user["email"],
            "username": user["username"],
            "fullName": user.get("fullName"),
            "role": "manager",
        }
        return {"success": True}

    def _set_current_academy(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if body.get("academyId") not in self.academies:
            return self._missing("Academy")
        self.current_academy_id = body["academyId"]
        return {"success": True}

    # programs

    def _get_programs(self, _: Dict[str, Any]) -> Dict[str, Any]:
        programs = [
            program
            for program in self.programs.values()
            if self.current_academy_id is None or program.get("academyId") == self.current_academy_id
        ]
        return {"success": True, "programs": programs}

    def _get_players(self, _: Dict[str, Any]) -> Dict[str, Any]:
        players = [user for user in self.users.values() if user.get("role") == "player"]
        return {"success": True, "players": players}

    def _list_members(self, body: Dict[str, Any]) -> Dict[str, Any]:
        program_id = body.get("programId")
        members = []
        for member in self.members.values():
            if member["programId"] != program_id:
                continue
            members.append({**member, "user": self._user_card(member["userId"])})
        return {"success": True, "members": members}

    def _add_member(self, body: Dict[str, Any]) -> Dict[str, Any]:
        program_id, user_id = body.get("programId", ""), body.get("userId", "")
        if program_id not in self.programs:
            return self._missing("Program")
        if f"{program_id}:{user_id}" in self.members:
            return {"success": False, "error": "Player is already a member"}
        self.add_member(program_id, user_id)
        return {"success": True}

    def _remove_member(self, body: Dict[str, Any]) -> Dict[str, Any]:
        key = f"{body.get('programId')}:{body.get('userId')}"
        if self.members.pop(key, None) is None:
            return self._missing("Member")
        return {"success": True}

    def _add_coach_note(self, body: Dict[str, Any]) -> Dict[str, Any]:
        member = self.members.get(f"{body.get('programId')}:{body.get('userId')}")
        if member is None:
            return self._missing("Member")
        member["pointsTotal"] = int(member.get("pointsTotal", 0) + float(body.get("pointsDelta") or 0))
        return {"success": True}

    # attendance

    def _get_attendance(self, body: Dict[str, Any]) -> Dict[str, Any]:
        sheet = self.attendance.get((body.get("programId", ""), body.get("sessionDate", "")), {})
        return {"success": True, "records": list(sheet.values())}

    def _get_attendance_summary(self, body: Dict[str, Any]) -> Dict[str, Any]:
        by_user: Dict[str, Dict[str, int]] = {}
        for (program_id, _), sheet in self.attendance.items():
            if program_id != body.get("programId"):
                continue
            for user_id, record in sheet.items():
                entry = by_user.setdefault(user_id, {"attended": 0, "marked": 0})
                entry["marked"] += 1
                entry["attended"] += 1 if record.get("present") else 0
        return {"success": True, "byUserId": by_user}

    def _save_attendance(self, body: Dict[str, Any]) -> Dict[str, Any]:
        key = (body.get("programId", ""), body.get("sessionDate", ""))
        sheet = self.attendance.setdefault(key, {})
        for entry in body.get("entries") or []:
            sheet[entry["userId"]] = dict(entry)
        return {"success": True}

    # notifications

    def _get_notifications(self, _: Dict[str, Any]) -> Dict[str, Any]:
        items = sorted(self.notifications.values(), key=lambda item: item["timestamp"], reverse=True)
        return {"success": True, "notifications": items}

    def _mark_read(self, body: Dict[str, Any]) -> Dict[str, Any]:
        item = self.notifications.get(body.get("notificationId", ""))
        if item is None:
            return self._missing("Notification")
        item["read"] = True
        return {"success": True}

    def _mark_all_read(self, _: Dict[str, Any]) -> Dict[str, Any]:
        for item in self.notifications.values():
            item["read"] = True
        return {"success": True}

    def _delete_notification(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.notifications.pop(body.get("notificationId", ""), None) is None:
            return self._missing("Notification")
        return {"success": True}

    def _get_unread_counts(self, _: Dict[str, Any]) -> Dict[str, Any]:
        notifications = sum(1 for item in self.notifications.values() if not item["read"])
        messages = sum(
            1
            for item in self.messages
            if item.get("recipientId") == self.current_user_id and self.current_user_id not in item["readBy"]
        )
        return {"success": True, "notifications": notifications, "messages": messages}

    # messages

    def _get_conversations(self, _: Dict[str, Any]) -> Dict[str, Any]:
        me = self.current_user_id
        threads: Dict[str, Dict[str, Any]] = {}
        for item in self.messages:
            if item.get("groupId"):
                continue
            if item["senderId"] == me:
                other = item.get("recipientId")
            elif item.get("recipientId") == me:
                other = item["senderId"]
            else:
                continue
            user = self.users.get(other or "", {})
            thread = threads.setdefault(
                other,
                {"userId": other, "name": user.get("fullName") or user.get("username") or other, "unreadCount": 0},
            )
            thread["lastMessage"] = item["content"]
            if item.get("recipientId") == me and me not in item["readBy"]:
                thread["unreadCount"] += 1
        return {"success": True, "conversations": list(threads.values())}

    def _get_all_groups(self, _: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "groups": list(self.groups.values())}

    def _get_user_groups(self, _: Dict[str, Any]) -> Dict[str, Any]:
        groups = [group for group in self.groups.values() if self.current_user_id in group["members"]]
        return {"success": True, "groups": groups}

    def _get_conversation(self, body: Dict[str, Any]) -> Dict[str, Any]:
        me, other = self.current_user_id, body.get("userId")
        thread = [
            item
            for item in self.messages
            if not item.get("groupId")
            and {item["senderId"], item.get("recipientId")} == {me, other}
        ]
        return {"success": True, "messages": thread}

    def _get_group_messages(self, body: Dict[str, Any]) -> Dict[str, Any]:
        group_id = body.get("groupId")
        return {"success": True, "messages": [item for item in self.messages if item.get("groupId") == group_id]}

    def _send_message(self, body: Dict[str, Any]) -> Dict[str, Any]:
        content = str(body.get("content") or "").strip()
        if not content:
            return {"success": False, "error": "Message is empty"}
        if body.get("groupId") and body["groupId"] not in self.groups:
            return self._missing("Group")
        message = self.add_message(
            self.current_user_id, content, recipient_id=body.get("recipientId"), group_id=body.get("groupId")
        )
        return {"success": True, "message": message}

    def _create_group(self, body: Dict[str, Any]) -> Dict[str, Any]:
        group_id = _new_id("grp")
        group = {
            "id": group_id,
            "name": body.get("name", ""),
            "members": list(body.get("members") or []),
            "createdBy": body.get("createdBy", ""),
        }
        self.groups[group_id] = group
        return {"success": True, "group": group}

    def _update_group(self, body: Dict[str, Any]) -> Dict[str, Any]:
        group = self.groups.get(body.get("groupId", ""))
        if group is None:
            return self._missing("Group")
        for key in ("name", "members"):
            if key in body:
                group[key] = body[key]
        return {"success": True}

    def _mark_message_read(self, body: Dict[str, Any]) -> Dict[str, Any]:
        for item in self.messages:
            if item["id"] == body.get("messageId"):
                if self.current_user_id not in item["readBy"]:
                    item["readBy"].append(self.current_user_id)
                return {"success": True}
        return self._missing("Message")

    # courses

    def _get_courses(self, _: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "courses": list(self.courses.values())}

    def _get_categories(self, _: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "categories": list(self.categories.values())}

    def _create_course(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if not body.get("name") or not body.get("nameAr"):
            return {"success": False, "error": "Name and Arabic name are required"}
        fields = {key: value for key, value in body.items() if key not in ("name", "nameAr")}
        course = self.add_course(_new_id("course"), body["name"], body["nameAr"], **fields)
        return {"success": True, "course": course}

    def _update_course(self, body: Dict[str, Any]) -> Dict[str, Any]:
        course = self.courses.get(body.get("courseId", ""))
        if course is None:
            return self._missing("Course")
        course.update({key: value for key, value in body.items() if key != "courseId"})
        return {"success": True, "course": course}

    def _delete_course(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if self.courses.pop(body.get("courseId", ""), None) is None:
            return self._missing("Course")
        return {"success": True}

    def _get_session_plans(self, body: Dict[str, Any]) -> Dict[str, Any]:
        plans = [plan for plan in self.session_plans.values() if plan["courseId"] == body.get("courseId")]
        plans.sort(key=lambda plan: plan["sessionNumber"])
        return {"success": True, "sessionPlans": plans}

    def _create_session_plan(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if body.get("courseId") not in self.courses:
            return self._missing("Course")
        plan = {"id": _new_id("plan"), **body}
        self.session_plans[plan["id"]] = plan
        return {"success": True, "sessionPlan": plan}

    def _update_session_plan(self, body: Dict[str, Any]) -> Dict[str, Any]:
        plan = self.session_plans.get(body.get("sessionPlanId", ""))
        if plan is None:
            return self._missing("Session plan")
        plan.update({key: value for key, value in body.items() if key != "sessionPlanId"})
        return {"success": True, "sessionPlan": plan}

    # payments

    def _enrollment_view(self, record: Dict[str, Any]) -> Dict[str, Any]:
        course = self.courses.get(record["courseId"], {})
        return {
            **record,
            "course": {"name": course.get("name", ""), "nameAr": course.get("nameAr", "")},
            "student": self._user_card(record.get("studentId", "")),
        }

    def _get_all_enrollments(self, _: Dict[str, Any]) -> Dict[str, Any]:
        return {"success": True, "enrollments": [self._enrollment_view(item) for item in self.enrollments.values()]}

    def _get_my_enrollments(self, _: Dict[str, Any]) -> Dict[str, Any]:
        mine = [item for item in self.enrollments.values() if item.get("studentId") == self.current_user_id]
        return {"success": True, "enrollments": [self._enrollment_view(item) for item in mine]}

    def _update_payment_status(self, body: Dict[str, Any]) -> Dict[str, Any]:
        record = self.enrollments.get(body.get("enrollmentId", ""))
        if record is None:
            return self._missing("Enrollment")
        status = body.get("status")
        if status not in ("pending", "paid", "rejected"):
            return {"success": False, "error": "Invalid payment status"}
        record["paymentStatus"] = status
        if status == "paid":
            record["paymentDate"] = _now()
        if "notes" in body:
            record["notes"] = body["notes"]
        return {"success": True}


__all__ = ["InMemoryActions"]
