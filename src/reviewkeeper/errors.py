"""Business error taxonomy for Reviewkeeper.

Every rejection raised by the assignment engines (and the admin token check
of the HTTP API) derives from ReviewError and carries a stable ``code`` that the HTTP layer maps onto a status. Store and
transaction failures are deliberately not wrapped: they surface as
``sqlalchemy.exc.SQLAlchemyError`` so callers can tell an invalid request
apart from an operation the system could not complete.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for rejected reviewer-management requests.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
    """

    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(ReviewError):
    """Referenced user ID does not exist."""

    code = "NOT_FOUND"

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class TeamNotFoundError(ReviewError):
    """Team has no row, or an author has no usable team context."""

    code = "NOT_FOUND"

    def __init__(self, team_name: str | None, reason: str | None = None) -> None:
        self.team_name = team_name
        msg = f"Team {team_name} not found" if team_name else "Team not found"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TeamAlreadyExistsError(ReviewError):
    code = "TEAM_EXISTS"

    def __init__(self, team_name: str) -> None:
        self.team_name = team_name
        super().__init__(f"Team {team_name} already exists")


class PullRequestAlreadyExistsError(ReviewError):
    code = "PR_EXISTS"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__(f"Pull request {pull_request_id} already exists")


class PullRequestNotFoundError(ReviewError):
    code = "NOT_FOUND"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__(f"Pull request {pull_request_id} not found")


class PullRequestMergedError(ReviewError):
    """Reviewer reassignment attempted on a merged pull request."""

    code = "PR_MERGED"

    def __init__(self, pull_request_id: str) -> None:
        self.pull_request_id = pull_request_id
        super().__init__(f"Cannot reassign on merged pull request {pull_request_id}")


class ReviewerNotAssignedError(ReviewError):
    code = "NOT_ASSIGNED"

    def __init__(self, pull_request_id: str, user_id: str) -> None:
        self.pull_request_id = pull_request_id
        self.user_id = user_id
        super().__init__(
            f"User {user_id} is not assigned to pull request {pull_request_id}"
        )


class NoAvailableReviewerError(ReviewError):
    code = "NO_CANDIDATE"

    def __init__(self, pull_request_id: str, user_id: str) -> None:
        self.pull_request_id = pull_request_id
        self.user_id = user_id
        super().__init__(
            f"No active replacement candidate for {user_id} on pull request {pull_request_id}"
        )


class TeamCompatibilityError(ReviewError):
    """A deactivation batch names users outside the team."""

    code = "TEAM_COMPATIBILITY"

    def __init__(self, team_name: str, user_ids: list[str]) -> None:
        self.team_name = team_name
        self.user_ids = user_ids
        super().__init__(
            f"Users {', '.join(user_ids)} do not belong to team {team_name}"
        )


class InvalidTransitionError(ReviewError):
    """Raised when a pull request status transition is not allowed.

    Attributes:
        current: The current status name.
        target: The attempted target status name.
        pull_request_id: The pull request that failed to transition.
    """

    code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str, pull_request_id: str | None = None) -> None:
        self.current = current
        self.target = target
        self.pull_request_id = pull_request_id
        msg = f"Invalid transition from {current} to {target}"
        if pull_request_id:
            msg += f" for pull request {pull_request_id}"
        super().__init__(msg)


class UnauthorizedError(ReviewError):
    """Admin operation requested without the configured admin token."""

    code = "UNAUTHORIZED"

    def __init__(self) -> None:
        super().__init__("Missing or invalid admin token")
