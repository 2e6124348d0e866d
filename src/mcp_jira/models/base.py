"""
Base models and mixins for API response conversion.

Every Jira entity model derives from ApiModel, which standardizes how raw
REST payloads are turned into models and how models are rendered back into
compact dictionaries for tool responses.
"""

from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

from ..utils.date import parse_datetime

T = TypeVar("T", bound="ApiModel")


class ApiModel(BaseModel):
    """
    Base model for all API response models.

    Subclasses implement from_api_response() for their payload shape and
    to_simplified_dict() for the rendered form. Instances are immutable so a
    hierarchy built from them cannot drift from its derived point totals.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_api_response(cls: type[T], data: dict[str, Any], **kwargs: Any) -> T:
        """
        Create a model instance from an API response.

        Args:
            data: The raw API response data
            **kwargs: Additional context

        Returns:
            An instance of the model

        Raises:
            NotImplementedError: If the subclass does not implement it
        """
        raise NotImplementedError("Subclasses must implement from_api_response")

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return self.model_dump(exclude_none=True)


class TimestampMixin:
    """Mixin for models with ``created``/``updated`` Jira timestamp strings."""

    @property
    def created_at(self) -> datetime | None:
        """The creation timestamp as an aware datetime, if parseable."""
        return parse_datetime(self.created)

    @property
    def updated_at(self) -> datetime | None:
        """The last-update timestamp as an aware datetime, if parseable."""
        return parse_datetime(self.updated)
