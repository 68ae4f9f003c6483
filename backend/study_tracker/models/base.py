"""
Shared Pydantic Bases for the Study Tracker API

Request bodies (subjects, sessions, decks, cards, assignments, quizzes)
reject unknown fields, so a client sending a misspelled field such as
"durationMinutes" gets a 422 instead of a silently ignored value.

Response bodies are built from ORM rows (Subject, StudySession,
FlashcardDeck, Flashcard, Assignment, Quiz) with model_validate and
ignore columns they do not expose.

    Client JSON → StrictRequest → Service → ORM row → StrictResponse → JSON
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator

# "#RRGGBB", used for subject and deck colors
HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class StrictRequest(BaseModel):
    """
    Base for request bodies.

    - Unknown fields are rejected (422)
    - Leading/trailing whitespace is stripped from strings
    - Defaults are validated like submitted values
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )


class PartialUpdate(StrictRequest):
    """
    Base for PATCH/PUT bodies where omitted fields stay unchanged.

    Fields listed in `non_nullable` map to NOT NULL columns: they may be
    omitted but not sent as an explicit null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "PartialUpdate":
        nulled = sorted(
            name
            for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self


class StrictResponse(BaseModel):
    """
    Base for response bodies.

    Built from ORM rows via from_attributes; columns without a matching
    field are dropped.
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )


class SuccessResponse(StrictResponse):
    """Acknowledgement for deletes and other operations without a body."""

    success: bool = True
    message: str
