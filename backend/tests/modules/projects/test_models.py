"""Tests for projects models."""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from modules.projects.models import CreateProjectRequest, ProjectStatus, UpdateProjectRequest


class TestProjectStatus:
    def test_approved_is_active(self):
        assert ProjectStatus("approved") == ProjectStatus.ACTIVE

    def test_rejected_is_denied(self):
        assert ProjectStatus("rejected") == ProjectStatus.DENIED

    def test_case_insensitive(self):
        assert ProjectStatus("Pending_Review") == ProjectStatus.PENDING_REVIEW

    def test_unknown(self):
        with pytest.raises(ValueError):
            ProjectStatus("archived")

    def test_stored_values_include_synonyms(self):
        assert ProjectStatus.ACTIVE.stored_values == ["active", "approved"]
        assert ProjectStatus.DRAFT.stored_values == ["draft"]

    def test_public(self):
        assert ProjectStatus.ACTIVE.is_public
        assert not ProjectStatus.PENDING_REVIEW.is_public


class TestCreateProjectRequest:
    def test_valid(self):
        request = CreateProjectRequest(
            title="  Microscopes ",
            description="Six microscopes",
            student_impact="Biology labs",
            funding_goal="450.00",
            category_ids=["cat-science"],
        )
        assert request.title == "Microscopes"
        assert request.funding_goal == Decimal("450.00")

    def test_blank_title(self):
        with pytest.raises(ValidationError):
            CreateProjectRequest(
                title="   ",
                description="Six microscopes",
                student_impact="Biology labs",
                funding_goal=450,
            )

    def test_goal_must_be_positive(self):
        with pytest.raises(ValidationError):
            CreateProjectRequest(
                title="Microscopes",
                description="Six microscopes",
                student_impact="Biology labs",
                funding_goal=0,
            )


class TestUpdateProjectRequest:
    def test_all_fields_optional(self):
        assert UpdateProjectRequest().model_dump(exclude_none=True) == {}

    def test_strips_text(self):
        request = UpdateProjectRequest(title="  Microscopes  ")
        assert request.title == "Microscopes"

    def test_blank_description(self):
        with pytest.raises(ValidationError):
            UpdateProjectRequest(description="   ")

    def test_goal_must_be_positive(self):
        with pytest.raises(ValidationError):
            UpdateProjectRequest(funding_goal=Decimal("0"))
