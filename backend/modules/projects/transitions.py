"""
The project status transition table.

This is the only place that says which status changes exist, who may make
them, and what they require. Anything not listed here is an invalid
transition.
"""

from dataclasses import dataclass
from typing import Optional

from modules.profiles.models import Role

from .models import ProjectStatus


@dataclass(frozen=True)
class TransitionRule:
    """
    One permitted status change.

    Attributes:
        source: Status the project must currently be in
        target: Status it moves to
        roles: Roles allowed to request it
        requires_note: Whether a non-blank review note is mandatory
        reopens_denied: Whether it revives a denied project, which is
            only allowed when the caller opts in
    """

    source: ProjectStatus
    target: ProjectStatus
    roles: frozenset[Role]
    requires_note: bool = False
    reopens_denied: bool = False


TRANSITIONS: tuple[TransitionRule, ...] = (
    # Teacher submits (or an admin submits on the teacher's behalf)
    TransitionRule(
        ProjectStatus.DRAFT,
        ProjectStatus.PENDING_REVIEW,
        frozenset({Role.TEACHER, Role.ADMIN}),
    ),
    # Admin review
    TransitionRule(
        ProjectStatus.PENDING_REVIEW,
        ProjectStatus.ACTIVE,
        frozenset({Role.ADMIN}),
    ),
    TransitionRule(
        ProjectStatus.PENDING_REVIEW,
        ProjectStatus.NEEDS_REVISION,
        frozenset({Role.ADMIN}),
        requires_note=True,
    ),
    TransitionRule(
        ProjectStatus.PENDING_REVIEW,
        ProjectStatus.DENIED,
        frozenset({Role.ADMIN}),
        requires_note=True,
    ),
    # Teacher reopens for editing
    TransitionRule(
        ProjectStatus.NEEDS_REVISION,
        ProjectStatus.DRAFT,
        frozenset({Role.TEACHER}),
    ),
    TransitionRule(
        ProjectStatus.DENIED,
        ProjectStatus.DRAFT,
        frozenset({Role.TEACHER}),
        reopens_denied=True,
    ),
    # Funding tail
    TransitionRule(
        ProjectStatus.ACTIVE,
        ProjectStatus.FUNDED,
        frozenset({Role.ADMIN}),
    ),
    TransitionRule(
        ProjectStatus.FUNDED,
        ProjectStatus.COMPLETED,
        frozenset({Role.ADMIN}),
    ),
)

_RULES: dict[tuple[ProjectStatus, ProjectStatus], TransitionRule] = {
    (rule.source, rule.target): rule for rule in TRANSITIONS
}


def find_rule(source: ProjectStatus, target: ProjectStatus) -> Optional[TransitionRule]:
    """Get the rule for a status change, or None if it does not exist."""
    return _RULES.get((source, target))


def allowed_targets(source: ProjectStatus) -> list[ProjectStatus]:
    """Statuses reachable from source in one step."""
    return [rule.target for rule in TRANSITIONS if rule.source == source]
