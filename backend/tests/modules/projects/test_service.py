"""Tests for the project lifecycle service."""

import asyncio
import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from shared.exceptions import (
    ForeignKeyViolationError,
    NotFoundError,
    PermissionDenied,
    UpstreamUnavailable,
    ValidationError,
)
from modules.profiles.exceptions import RoleNotAllowedError
from modules.profiles.models import Role, TeacherAccountStatus
from modules.projects.exceptions import (
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
from modules.projects.models import CreateProjectRequest, ProjectStatus, UpdateProjectRequest
from modules.projects.service import ProjectLifecycleService
from tests.conftest import make_account
from tests.fakes import InMemoryProfileStore, InMemoryProjectStore

TEACHER = make_account("auth-teacher")
OTHER_TEACHER = make_account("auth-other-teacher")
ADMIN = make_account("auth-admin")
DONOR = make_account("auth-donor")


def make_settings(allow_denied_resubmission: bool = True) -> MagicMock:
    settings = MagicMock()
    settings.allow_denied_resubmission = allow_denied_resubmission
    return settings


@pytest.fixture
def profiles() -> InMemoryProfileStore:
    store = InMemoryProfileStore()
    store.add_teacher(store.add_profile("auth-teacher", Role.TEACHER), teacher_id="teacher-1")
    store.add_teacher(store.add_profile("auth-other-teacher", Role.TEACHER), teacher_id="teacher-2")
    store.add_profile("auth-admin", Role.ADMIN)
    store.add_profile("auth-donor", Role.DONOR)
    return store


@pytest.fixture
def projects() -> InMemoryProjectStore:
    return InMemoryProjectStore()


@pytest.fixture
def service(projects, profiles) -> ProjectLifecycleService:
    return ProjectLifecycleService(projects, profiles, settings=make_settings())


def project_in(projects: InMemoryProjectStore, status: ProjectStatus, teacher_id: str = "teacher-1"):
    return projects.add_project(teacher_id, status=status)


class TestSubmitForReview:
    @pytest.mark.asyncio
    async def test_owner_submits_draft(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        updated = await service.submit_for_review(TEACHER, project.id)

        assert updated.status == ProjectStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_admin_submits_on_behalf(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        updated = await service.submit_for_review(ADMIN, project.id)

        assert updated.status == ProjectStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_other_teacher_rejected(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(NotProjectOwnerError):
            await service.submit_for_review(OTHER_TEACHER, project.id)
        assert projects.projects[project.id].status == ProjectStatus.DRAFT

    @pytest.mark.asyncio
    async def test_donor_rejected(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(PermissionDenied):
            await service.submit_for_review(DONOR, project.id)

    @pytest.mark.parametrize(
        "status",
        [
            ProjectStatus.PENDING_REVIEW,
            ProjectStatus.ACTIVE,
            ProjectStatus.DENIED,
            ProjectStatus.FUNDED,
        ],
    )
    @pytest.mark.asyncio
    async def test_only_from_draft(self, service, projects, status):
        """Submitting from any other state is an invalid transition and changes nothing."""
        project = project_in(projects, status)

        with pytest.raises(InvalidTransition):
            await service.submit_for_review(TEACHER, project.id)

        assert projects.projects[project.id].status == status
        assert projects.transition_writes == 0

    @pytest.mark.asyncio
    async def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            await service.submit_for_review(TEACHER, "project-404")


class TestReviewProject:
    @pytest.mark.asyncio
    async def test_approve_without_note(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        updated = await service.review_project(ADMIN, project.id, "active")

        assert updated.status == ProjectStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_approved_synonym(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        updated = await service.review_project(ADMIN, project.id, "approved")

        assert updated.status == ProjectStatus.ACTIVE

    @pytest.mark.parametrize("target", ["denied", "needs_revision"])
    @pytest.mark.parametrize("note", [None, "", "   \n"])
    @pytest.mark.asyncio
    async def test_note_required(self, service, projects, target, note):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        with pytest.raises(ValidationError) as exc_info:
            await service.review_project(ADMIN, project.id, target, note=note)

        assert isinstance(exc_info.value, ReviewNoteRequiredError)
        assert projects.projects[project.id].status == ProjectStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_request_revision_stores_note(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        updated = await service.review_project(
            ADMIN, project.id, "needs_revision", note="  Add a photo  "
        )

        assert updated.status == ProjectStatus.NEEDS_REVISION
        assert updated.review_notes == "Add a photo"

    @pytest.mark.asyncio
    async def test_teacher_cannot_review_own_project(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        with pytest.raises(TransitionNotPermittedError):
            await service.review_project(TEACHER, project.id, "active")

    @pytest.mark.asyncio
    async def test_unknown_status(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        with pytest.raises(UnknownStatusError):
            await service.review_project(ADMIN, project.id, "archived")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "current,target",
        [
            (ProjectStatus.ACTIVE, "funded"),
            (ProjectStatus.FUNDED, "completed"),
            (ProjectStatus.PENDING_REVIEW, "draft"),
            (ProjectStatus.DRAFT, "pending_review"),
        ],
    )
    async def test_only_review_decisions_accepted(self, service, projects, current, target):
        project = project_in(projects, current)

        with pytest.raises(InvalidReviewDecisionError) as exc_info:
            await service.review_project(ADMIN, project.id, target)

        assert isinstance(exc_info.value, ValidationError)
        assert projects.projects[project.id].status == current
        assert projects.transition_writes == 0

    @pytest.mark.asyncio
    async def test_teacher_cannot_use_review_to_reopen(self, service, projects):
        project = project_in(projects, ProjectStatus.NEEDS_REVISION)

        with pytest.raises(InvalidReviewDecisionError):
            await service.review_project(TEACHER, project.id, "draft")
        assert projects.projects[project.id].status == ProjectStatus.NEEDS_REVISION

    @pytest.mark.asyncio
    async def test_invalid_transition_checked_before_note(self, service, projects):
        """Denying a draft is invalid regardless of the missing note."""
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(InvalidTransition):
            await service.review_project(ADMIN, project.id, "denied")

    @pytest.mark.asyncio
    async def test_permission_checked_before_note(self, service, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        with pytest.raises(PermissionDenied):
            await service.review_project(TEACHER, project.id, "denied")

    @pytest.mark.asyncio
    async def test_role_is_read_from_store(self, service, projects, profiles):
        """Demoting an admin takes effect on their next request."""
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)
        admin_profile = next(p for p in profiles.profiles.values() if p.auth_id == "auth-admin")
        profiles.profiles[admin_profile.id] = admin_profile.model_copy(update={"role": Role.DONOR})

        with pytest.raises(PermissionDenied):
            await service.review_project(ADMIN, project.id, "active")

    @pytest.mark.asyncio
    async def test_concurrent_approve_and_deny(self, service, projects):
        """Exactly one of two racing review decisions is applied."""
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        results = await asyncio.gather(
            service.review_project(ADMIN, project.id, "active"),
            service.review_project(ADMIN, project.id, "denied", note="Duplicate request"),
            return_exceptions=True,
        )

        succeeded = [r for r in results if not isinstance(r, Exception)]
        failed = [r for r in results if isinstance(r, Exception)]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], InvalidTransition)
        assert projects.projects[project.id].status == succeeded[0].status

    @pytest.mark.asyncio
    async def test_store_failure_is_not_retried(self, profiles, projects):
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)

        class FailingStore(InMemoryProjectStore):
            async def transition_status(self, *args, **kwargs):
                self.transition_writes += 1
                raise UpstreamUnavailable("Data store timed out", service="supabase")

        failing = FailingStore()
        failing.projects = projects.projects
        service = ProjectLifecycleService(failing, profiles, settings=make_settings())

        with pytest.raises(UpstreamUnavailable):
            await service.review_project(ADMIN, project.id, "active")
        assert failing.transition_writes == 1


class TestReturnToDraft:
    @pytest.mark.asyncio
    async def test_from_needs_revision(self, service, projects):
        project = project_in(projects, ProjectStatus.NEEDS_REVISION)

        updated = await service.return_to_draft(TEACHER, project.id)

        assert updated.status == ProjectStatus.DRAFT

    @pytest.mark.asyncio
    async def test_denied_with_default_policy(self, service, projects):
        project = project_in(projects, ProjectStatus.DENIED)

        updated = await service.return_to_draft(TEACHER, project.id)

        assert updated.status == ProjectStatus.DRAFT

    @pytest.mark.asyncio
    async def test_denied_without_opt_in(self, service, projects):
        project = project_in(projects, ProjectStatus.DENIED)

        with pytest.raises(InvalidTransition):
            await service.return_to_draft(TEACHER, project.id, reopen_denied=False)
        assert projects.projects[project.id].status == ProjectStatus.DENIED

    @pytest.mark.asyncio
    async def test_denied_when_policy_disallows(self, projects, profiles):
        service = ProjectLifecycleService(
            projects, profiles, settings=make_settings(allow_denied_resubmission=False)
        )
        project = project_in(projects, ProjectStatus.DENIED)

        with pytest.raises(InvalidTransition):
            await service.return_to_draft(TEACHER, project.id)

        updated = await service.return_to_draft(TEACHER, project.id, reopen_denied=True)
        assert updated.status == ProjectStatus.DRAFT

    @pytest.mark.asyncio
    async def test_from_active_is_invalid(self, service, projects):
        project = project_in(projects, ProjectStatus.ACTIVE)

        with pytest.raises(InvalidTransition):
            await service.return_to_draft(TEACHER, project.id)

    @pytest.mark.asyncio
    async def test_other_teacher_rejected(self, service, projects):
        project = project_in(projects, ProjectStatus.NEEDS_REVISION)

        with pytest.raises(NotProjectOwnerError):
            await service.return_to_draft(OTHER_TEACHER, project.id)


class TestReviewCycle:
    @pytest.mark.asyncio
    async def test_deny_then_resubmit(self, service, projects):
        """A denied project can be reopened, edited and submitted again."""
        project = project_in(projects, ProjectStatus.DRAFT)

        await service.submit_for_review(TEACHER, project.id)
        denied = await service.review_project(
            ADMIN, project.id, "denied", note="missing budget breakdown"
        )
        assert denied.status == ProjectStatus.DENIED
        assert denied.review_notes == "missing budget breakdown"

        reopened = await service.return_to_draft(TEACHER, project.id, reopen_denied=True)
        assert reopened.status == ProjectStatus.DRAFT

        resubmitted = await service.submit_for_review(TEACHER, project.id)
        assert resubmitted.status == ProjectStatus.PENDING_REVIEW

    @pytest.mark.asyncio
    async def test_funding_tail(self, service, projects):
        project = project_in(projects, ProjectStatus.ACTIVE)

        funded = await service.mark_funded(ADMIN, project.id)
        completed = await service.mark_completed(ADMIN, project.id)

        assert funded.status == ProjectStatus.FUNDED
        assert completed.status == ProjectStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_teacher_cannot_mark_funded(self, service, projects):
        project = project_in(projects, ProjectStatus.ACTIVE)

        with pytest.raises(TransitionNotPermittedError):
            await service.mark_funded(TEACHER, project.id)


class TestCreateProject:
    def request(self, **overrides) -> CreateProjectRequest:
        data = {
            "title": "Microscopes",
            "description": "Six microscopes",
            "student_impact": "Biology labs",
            "funding_goal": Decimal("450"),
            "category_ids": ["cat-science"],
        }
        data.update(overrides)
        return CreateProjectRequest(**data)

    @pytest.mark.asyncio
    async def test_active_teacher_creates_draft(self, service, projects):
        project = await service.create_project(TEACHER, self.request())

        assert project.status == ProjectStatus.DRAFT
        assert project.teacher_id == "teacher-1"
        assert projects.categories[project.id] == ["cat-science"]

    @pytest.mark.asyncio
    async def test_pending_teacher_rejected(self, service, projects, profiles):
        profiles.teachers["teacher-1"] = profiles.teachers["teacher-1"].model_copy(
            update={"account_status": TeacherAccountStatus.PENDING}
        )

        with pytest.raises(TeacherNotVerifiedError):
            await service.create_project(TEACHER, self.request())
        assert projects.projects == {}

    @pytest.mark.asyncio
    async def test_donor_rejected(self, service):
        with pytest.raises(RoleNotAllowedError):
            await service.create_project(DONOR, self.request())

    @pytest.mark.asyncio
    async def test_category_failure_keeps_draft(self, profiles):
        """A rejected category link neither fails the request nor invites a duplicate retry."""

        class RejectingCategories(InMemoryProjectStore):
            async def link_categories(self, project_id, category_ids):
                raise ForeignKeyViolationError("project_categories")

        store = RejectingCategories()
        service = ProjectLifecycleService(store, profiles, settings=make_settings())

        project = await service.create_project(TEACHER, self.request(category_ids=["cat-missing"]))

        assert project.status == ProjectStatus.DRAFT
        assert list(store.projects) == [project.id]
        assert store.categories == {}

    @pytest.mark.asyncio
    async def test_category_store_outage_keeps_draft(self, profiles):
        class UnavailableCategories(InMemoryProjectStore):
            async def link_categories(self, project_id, category_ids):
                raise UpstreamUnavailable("Data store timed out", service="supabase")

        store = UnavailableCategories()
        service = ProjectLifecycleService(store, profiles, settings=make_settings())

        project = await service.create_project(TEACHER, self.request())

        assert store.projects[project.id].status == ProjectStatus.DRAFT


class TestUpdateProject:
    @pytest.mark.asyncio
    async def test_owner_edits_draft(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        updated = await service.update_project(
            TEACHER,
            project.id,
            UpdateProjectRequest(title="Microscopes and slides", funding_goal=Decimal("520")),
        )

        assert updated.title == "Microscopes and slides"
        assert updated.funding_goal == Decimal("520")
        assert updated.description == project.description
        assert updated.status == ProjectStatus.DRAFT

    @pytest.mark.asyncio
    async def test_revise_and_resubmit(self, service, projects):
        """A project sent back for revision is reopened, edited and resubmitted."""
        project = project_in(projects, ProjectStatus.PENDING_REVIEW)
        await service.review_project(ADMIN, project.id, "needs_revision", note="Add a budget")

        await service.return_to_draft(TEACHER, project.id)
        await service.update_project(
            TEACHER, project.id, UpdateProjectRequest(description="Six microscopes,  each")
        )
        resubmitted = await service.submit_for_review(TEACHER, project.id)

        assert resubmitted.status == ProjectStatus.PENDING_REVIEW
        assert resubmitted.description == "Six microscopes at 75 dollars each"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [
            ProjectStatus.PENDING_REVIEW,
            ProjectStatus.NEEDS_REVISION,
            ProjectStatus.ACTIVE,
            ProjectStatus.DENIED,
        ],
    )
    async def test_only_drafts_are_editable(self, service, projects, status):
        project = project_in(projects, status)

        with pytest.raises(ProjectNotEditableError):
            await service.update_project(TEACHER, project.id, UpdateProjectRequest(title="New"))

        assert projects.projects[project.id].title == project.title
        assert projects.content_writes == 0

    @pytest.mark.asyncio
    async def test_other_teacher_rejected(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(NotProjectOwnerError):
            await service.update_project(OTHER_TEACHER, project.id, UpdateProjectRequest(title="Mine"))
        assert projects.projects[project.id].title == project.title

    @pytest.mark.asyncio
    @pytest.mark.parametrize("account", [ADMIN, DONOR])
    async def test_non_teacher_rejected(self, service, projects, account):
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(RoleNotAllowedError):
            await service.update_project(account, project.id, UpdateProjectRequest(title="New"))

    @pytest.mark.asyncio
    async def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            await service.update_project(TEACHER, "missing", UpdateProjectRequest(title="New"))

    @pytest.mark.asyncio
    async def test_empty_edit_writes_nothing(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        result = await service.update_project(TEACHER, project.id, UpdateProjectRequest())

        assert result == project
        assert projects.content_writes == 0

    @pytest.mark.asyncio
    async def test_edit_racing_submit(self, service, projects):
        """An edit that loses to a submission is rejected, never applied to the submitted project."""
        project = project_in(projects, ProjectStatus.DRAFT)

        results = await asyncio.gather(
            service.submit_for_review(TEACHER, project.id),
            service.update_project(TEACHER, project.id, UpdateProjectRequest(title="Late edit")),
            return_exceptions=True,
        )

        stored = projects.projects[project.id]
        assert stored.status == ProjectStatus.PENDING_REVIEW
        if isinstance(results[1], Exception):
            assert isinstance(results[1], ProjectNotEditableError)
            assert stored.title == project.title
        else:
            assert stored.title == "Late edit"


class TestReads:
    @pytest.mark.asyncio
    async def test_teacher_sees_own_draft(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)
        assert (await service.get_project(TEACHER, project.id)).id == project.id

    @pytest.mark.asyncio
    async def test_draft_hidden_from_others(self, service, projects):
        project = project_in(projects, ProjectStatus.DRAFT)

        with pytest.raises(NotFoundError):
            await service.get_project(OTHER_TEACHER, project.id)
        with pytest.raises(NotFoundError):
            await service.get_project(DONOR, project.id)

    @pytest.mark.asyncio
    async def test_active_visible_to_donor(self, service, projects):
        project = project_in(projects, ProjectStatus.ACTIVE)
        assert (await service.get_project(DONOR, project.id)).status == ProjectStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_admin_review_queue(self, service, projects):
        draft = project_in(projects, ProjectStatus.DRAFT)
        pending = project_in(projects, ProjectStatus.PENDING_REVIEW, teacher_id="teacher-2")
        project_in(projects, ProjectStatus.ACTIVE)

        queue = await service.list_projects(ADMIN)

        assert {p.id for p in queue} == {draft.id, pending.id}

    @pytest.mark.asyncio
    async def test_admin_filter(self, service, projects):
        active = project_in(projects, ProjectStatus.ACTIVE)
        project_in(projects, ProjectStatus.DRAFT)

        result = await service.list_projects(ADMIN, status="approved")

        assert [p.id for p in result] == [active.id]

    @pytest.mark.asyncio
    async def test_teacher_lists_own(self, service, projects):
        mine = project_in(projects, ProjectStatus.DRAFT)
        project_in(projects, ProjectStatus.DRAFT, teacher_id="teacher-2")

        result = await service.list_projects(TEACHER)

        assert [p.id for p in result] == [mine.id]

    @pytest.mark.asyncio
    async def test_donor_lists_public_only(self, service, projects):
        active = project_in(projects, ProjectStatus.ACTIVE)
        project_in(projects, ProjectStatus.PENDING_REVIEW)

        assert [p.id for p in await service.list_projects(DONOR)] == [active.id]
        assert await service.list_projects(DONOR, status="draft") == []
