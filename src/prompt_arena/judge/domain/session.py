"""JudgeSession Protocol — structural interface for the persistent judge agent."""

from typing import Protocol

from prompt_arena.judge.domain.request import JudgeRequest, JudgeResponse


class JudgeSession(Protocol):
    """Runs one judge turn; failures come back as a non-zero exit code."""

    async def send(self, request: JudgeRequest) -> JudgeResponse: ...
