"""
Jira sprint models.
"""

from typing import Any, Literal

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_SPRINT_STATE, JIRA_SPRINT_STATES

SprintState = Literal["active", "closed", "future"]


class JiraSprint(ApiModel):
    """
    Model representing the sprint an issue belongs to.
    """

    id: int | None = None
    name: str = EMPTY_STRING
    state: SprintState = JIRA_DEFAULT_SPRINT_STATE
    start_date: str | None = None
    end_date: str | None = None
    complete_date: str | None = None
    goal: str | None = None
    board_id: int | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraSprint":
        """
        Create a JiraSprint from a Jira API response.

        Unknown sprint states fall back to ``future``.
        """
        if not data:
            return cls()

        state = data.get("state")
        if isinstance(state, str):
            state = state.lower()
        if state not in JIRA_SPRINT_STATES:
            state = JIRA_DEFAULT_SPRINT_STATE

        return cls(
            id=data.get("id"),
            name=str(data.get("name", EMPTY_STRING)),
            state=state,
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            complete_date=data.get("completeDate"),
            goal=data.get("goal"),
            board_id=data.get("boardId") or data.get("originBoardId"),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
        }
