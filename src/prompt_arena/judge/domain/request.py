"""JudgeRequest and JudgeResponse — one turn of the persistent judge session."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from prompt_arena.stream.domain.event import UsageStats


class JudgeRequest(BaseModel, frozen=True):
    """A single judge turn.

    Exactly one of ``session_id`` (start a new session under that id) or
    ``resume_session_id`` (continue an existing one) must be set.
    """

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    system_prompt: str | None = None
    user_message: str
    session_id: str | None = None
    resume_session_id: str | None = None

    @model_validator(mode="after")
    def _exactly_one_session_id(self) -> Self:
        if (self.session_id is None) == (self.resume_session_id is None):
            raise ValueError("exactly one of session_id or resume_session_id is required")
        return self

    @property
    def is_resume(self) -> bool:
        return self.resume_session_id is not None

    @property
    def target_session_id(self) -> str:
        return self.resume_session_id or self.session_id or ""


class JudgeResponse(BaseModel, frozen=True):
    model_config = ConfigDict(frozen=True)

    output: str
    exit_code: int
    session_id: str | None = None
    usage: UsageStats | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0
