"""Reviewer assignment and lifecycle engines for Reviewkeeper.

This package holds the transactional rules that keep every pull request
reviewed by active teammates:

- ReviewerAssigner: picks initial reviewers when a pull request is opened
- ReviewerReassigner: swaps one reviewer for an eligible teammate
- DeactivationCascade: deactivates team members and repairs their reviews
- PullRequestLifecycle: OPEN -> MERGED transitions and pull request reads
- TeamMembershipManager: teams, users and active flags

Each engine is stateless apart from its session factory and random picker,
and runs every operation in exactly one database transaction.
"""

from __future__ import annotations

from reviewkeeper.assignment.assigner import ReviewerAssigner
from reviewkeeper.assignment.cascade import DeactivationCascade
from reviewkeeper.assignment.lifecycle import (
    VALID_TRANSITIONS,
    PullRequestLifecycle,
    validate_transition,
)
from reviewkeeper.assignment.membership import TeamMembershipManager
from reviewkeeper.assignment.reassigner import ReviewerReassigner
from reviewkeeper.assignment.schemas import (
    DeactivationResult,
    PullRequestShort,
    PullRequestView,
    ReassignmentNote,
    ReassignResult,
    TeamMember,
    TeamView,
    UserReviews,
    UserView,
)
from reviewkeeper.assignment.selection import ReviewerPicker, eligible_candidates

__all__ = [
    # Engines
    "ReviewerAssigner",
    "ReviewerReassigner",
    "DeactivationCascade",
    "PullRequestLifecycle",
    "TeamMembershipManager",
    # Selection
    "ReviewerPicker",
    "eligible_candidates",
    # State machine
    "VALID_TRANSITIONS",
    "validate_transition",
    # Results
    "TeamMember",
    "TeamView",
    "UserView",
    "PullRequestView",
    "PullRequestShort",
    "ReassignmentNote",
    "ReassignResult",
    "DeactivationResult",
    "UserReviews",
]
