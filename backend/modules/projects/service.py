"""
Project lifecycle service implementation.

Enforces the transition table against a freshly loaded actor and issues
conditional status writes. Transitions are all-or-nothing and never retried.
"""

import logging
from typing import Optional

from shared.config import Settings, get_settings
from shared.exceptions import BeyondMeasureError, PreconditionFailedError
from shared.models import AuthenticatedUser
from modules.profiles.exceptions import RoleNotAllowedError
from modules.profiles.interfaces import IProfileStore
from modules.profiles.models import Actor, Role
from modules.profiles.service import load_actor

from .interfaces import IProjectLifecycleService, IProjectStore
from .models import (
    CreateProjectRequest,
    Project,
    ProjectStatus,
    PUBLIC_STATUSES,
    REVIEW_DECISIONS,
    REVIEW_QUEUE_STATUSES,
    UpdateProjectRequest,
)
from .exceptions import (
    InvalidReviewDecisionError,
    InvalidTransition,
    NotProjectOwnerError,
    ProjectNotEditableError,
    ProjectNotFoundError,
    ReviewNoteRequiredError,
    TeacherNotVerifiedError,
    TransitionNotPermittedError,
    UnknownStatusError,
)
from .transitions import TransitionRule, find_rule

logger = logging.getLogger(__name__)


def parse_status(value: "str | ProjectStatus") -> ProjectStatus:
    """Parse a status name, accepting legacy synonyms."""
    try:
        return ProjectStatus(value)
    except ValueError:
        raise UnknownStatusError(str(value))


def _clean_note(note: Optional[str]) -> Optional[str]:
    if note is None:
        return None
    note = note.strip()
    return note or None


class ProjectLifecycleService(IProjectLifecycleService):
    """
    Project lifecycle controller.

    Request evaluation order: target status parsed, project loaded,
    transition looked up, actor authorized, note checked, conditional write.
    """

    def __init__(
        self,
        store: IProjectStore,
        profiles: IProfileStore,
        settings: Optional[Settings] = None,
    ):
        self._store = store
        self._profiles = profiles
        self._settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Creation and reads
    # -------------------------------------------------------------------------

    async def create_project(
        self,
        account: AuthenticatedUser,
        request: CreateProjectRequest,
    ) -> Project:
        actor = await load_actor(self._profiles, account)
        if not actor.is_teacher:
            raise RoleNotAllowedError("create projects", actor.role.value, [Role.TEACHER.value])

        teacher = actor.teacher_profile
        if teacher is None:
            raise TeacherNotVerifiedError(
                actor.profile.id,
                "Teacher profile not found. Please complete your profile setup.",
            )
        if not teacher.is_active:
            raise TeacherNotVerifiedError(
                actor.profile.id,
                "Your teacher account is awaiting verification and cannot create projects yet.",
            )

        project = await self._store.create_project(teacher.id, request)
        logger.info(f"Teacher {teacher.id} created draft project {project.id}")

        if request.category_ids:
            try:
                await self._store.link_categories(project.id, request.category_ids)
            except BeyondMeasureError as e:
                # Category links are best effort; the draft is kept
                logger.warning(f"Could not link categories to project {project.id}: {e.message}")

        return project

    async def update_project(
        self,
        account: AuthenticatedUser,
        project_id: str,
        request: UpdateProjectRequest,
    ) -> Project:
        actor = await load_actor(self._profiles, account)
        if not actor.is_teacher:
            raise RoleNotAllowedError("edit projects", actor.role.value, [Role.TEACHER.value])

        project = await self._store.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        if not self._owns(actor, project):
            raise NotProjectOwnerError(project.id, actor.profile.id)
        if project.status != ProjectStatus.DRAFT:
            raise ProjectNotEditableError(project.id, project.status)

        if not request.model_dump(exclude_none=True):
            return project

        try:
            updated = await self._store.update_project(project.id, request, ProjectStatus.DRAFT)
        except PreconditionFailedError:
            logger.info(f"Project {project.id} left draft before the edit was written")
            raise ProjectNotEditableError(
                project.id,
                project.status,
                reason="This project was submitted or changed by someone else. Refresh and try again.",
            )

        logger.info(f"Teacher {actor.teacher_profile.id} edited draft project {project.id}")
        return updated

    async def get_project(self, account: AuthenticatedUser, project_id: str) -> Project:
        actor = await load_actor(self._profiles, account)
        project = await self._store.get_project(project_id)
        if project is None or not self._can_view(actor, project):
            raise ProjectNotFoundError(project_id)
        return project

    async def list_projects(
        self,
        account: AuthenticatedUser,
        status: Optional[str] = None,
    ) -> list[Project]:
        """
        List projects visible to the caller.

        Admins get the review queue (draft and pending_review) by default,
        teachers get their own projects, donors get public ones.
        """
        actor = await load_actor(self._profiles, account)
        statuses = [parse_status(status)] if status else None

        if actor.is_admin:
            return await self._store.list_projects(statuses=statuses or list(REVIEW_QUEUE_STATUSES))

        if actor.is_teacher:
            if actor.teacher_profile is None:
                return []
            return await self._store.list_projects(
                statuses=statuses,
                teacher_id=actor.teacher_profile.id,
            )

        visible = [s for s in (statuses or PUBLIC_STATUSES) if s in PUBLIC_STATUSES]
        if not visible:
            return []
        return await self._store.list_projects(statuses=sorted(visible, key=lambda s: s.value))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def submit_for_review(self, account: AuthenticatedUser, project_id: str) -> Project:
        return await self._transition(account, project_id, ProjectStatus.PENDING_REVIEW)

    async def review_project(
        self,
        account: AuthenticatedUser,
        project_id: str,
        status: "str | ProjectStatus",
        note: Optional[str] = None,
    ) -> Project:
        target = parse_status(status)
        if target not in REVIEW_DECISIONS:
            raise InvalidReviewDecisionError(target)
        return await self._transition(account, project_id, target, note=note)

    async def return_to_draft(
        self,
        account: AuthenticatedUser,
        project_id: str,
        reopen_denied: Optional[bool] = None,
    ) -> Project:
        if reopen_denied is None:
            reopen_denied = self._settings.allow_denied_resubmission
        return await self._transition(
            account,
            project_id,
            ProjectStatus.DRAFT,
            reopen_denied=reopen_denied,
        )

    async def mark_funded(self, account: AuthenticatedUser, project_id: str) -> Project:
        return await self._transition(account, project_id, ProjectStatus.FUNDED)

    async def mark_completed(self, account: AuthenticatedUser, project_id: str) -> Project:
        return await self._transition(account, project_id, ProjectStatus.COMPLETED)

    async def _transition(
        self,
        account: AuthenticatedUser,
        project_id: str,
        target: ProjectStatus,
        note: Optional[str] = None,
        reopen_denied: bool = False,
    ) -> Project:
        actor = await load_actor(self._profiles, account)
        project = await self._store.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        rule = find_rule(project.status, target)
        if rule is None:
            raise InvalidTransition(project.id, project.status, target)
        if rule.reopens_denied and not reopen_denied:
            raise InvalidTransition(
                project.id,
                project.status,
                target,
                reason="Denied projects cannot be reopened. Create a new project instead.",
            )

        self._authorize(actor, project, rule)

        note = _clean_note(note)
        if rule.requires_note and note is None:
            raise ReviewNoteRequiredError(target)

        try:
            updated = await self._store.transition_status(
                project.id,
                project.status,
                target,
                note=note,
                actor_profile_id=actor.profile.id,
            )
        except PreconditionFailedError:
            logger.info(
                f"Project {project.id} left {project.status.value} before the move to "
                f"{target.value} was written"
            )
            raise InvalidTransition(
                project.id,
                project.status,
                target,
                reason="This project was changed by someone else. Refresh and try again.",
            )

        logger.info(
            f"Project {project.id} moved {project.status.value} -> {target.value} "
            f"by {actor.role.value} {actor.profile.id}"
        )
        return updated

    # -------------------------------------------------------------------------
    # Authorization helpers
    # -------------------------------------------------------------------------

    def _authorize(self, actor: Actor, project: Project, rule: TransitionRule) -> None:
        if actor.role not in rule.roles:
            raise TransitionNotPermittedError(project.id, actor.role.value, rule.target)
        if actor.is_teacher and not self._owns(actor, project):
            raise NotProjectOwnerError(project.id, actor.profile.id)

    @staticmethod
    def _owns(actor: Actor, project: Project) -> bool:
        return actor.teacher_profile is not None and actor.teacher_profile.id == project.teacher_id

    def _can_view(self, actor: Actor, project: Project) -> bool:
        if actor.is_admin or project.status.is_public:
            return True
        return self._owns(actor, project)
