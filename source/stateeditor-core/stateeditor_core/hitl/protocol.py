"""Confirmation protocol for destructive edits.

The editor asks before it deletes a rule and performs no mutation until the
answer arrives. A pending question may also be cancelled, in which case the
awaiting operation sees ``asyncio.CancelledError``.
"""

import asyncio
from typing import Protocol


class ConfirmationPrompt(Protocol):
    """Protocol for confirmation prompts."""

    async def ask(self, message: str) -> bool:
        """Ask the author to confirm. Returns True on confirmation."""
        ...


class AutoConfirmPrompt:
    """Prompt that answers every question with a fixed value."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    async def ask(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


class PendingConfirmationPrompt:
    """Prompt whose answer is supplied later by the UI.

    ``ask`` waits on a future that is settled by ``resolve`` or ``cancel``.
    Only one question can be pending at a time.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[bool] | None = None
        self.message: str | None = None

    @property
    def is_pending(self) -> bool:
        return self._future is not None and not self._future.done()

    async def ask(self, message: str) -> bool:
        if self.is_pending:
            raise RuntimeError("A confirmation is already pending")
        self.message = message
        self._future = asyncio.get_running_loop().create_future()
        try:
            return await self._future
        finally:
            self._future = None

    def resolve(self, answer: bool) -> None:
        if not self.is_pending:
            raise RuntimeError("No confirmation is pending")
        self._future.set_result(answer)

    def cancel(self) -> None:
        if not self.is_pending:
            raise RuntimeError("No confirmation is pending")
        self._future.cancel()
