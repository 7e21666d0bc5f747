"""
Status Submission Models

Pydantic model for inbound check-in forms.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_NAME_LENGTH = 200
MAX_ID_NUMBER_LENGTH = 100
MAX_LOCATION_LENGTH = 300
MAX_STATUS_LENGTH = 50
MAX_MESSAGE_LENGTH = 2000


class StatusSubmission(BaseModel):
    """A check-in as posted by the update form"""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(default="", max_length=MAX_NAME_LENGTH)
    id_number: str | None = Field(default=None, max_length=MAX_ID_NUMBER_LENGTH)
    location: str | None = Field(default=None, max_length=MAX_LOCATION_LENGTH)
    status: str = Field(default="", max_length=MAX_STATUS_LENGTH)
    message: str | None = Field(default=None, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("id_number", "location", "message", mode="after")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """Names of required fields left empty."""
        return [name for name in required if not getattr(self, name)]
