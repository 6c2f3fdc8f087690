"""User-facing warnings raised during an editing session."""


class WarningsLog:
    """Collects warnings to show the author.

    Older warnings are dropped once ``max_warnings`` is reached.
    """

    MAX_WARNINGS = 10

    def __init__(self, max_warnings: int = MAX_WARNINGS) -> None:
        self._max_warnings = max_warnings
        self._warnings: list[str] = []

    def add_warning(self, message: str) -> None:
        self._warnings.append(message)
        if len(self._warnings) > self._max_warnings:
            self._warnings = self._warnings[-self._max_warnings:]

    @property
    def warnings(self) -> list[str]:
        return list(self._warnings)

    def clear(self) -> None:
        self._warnings.clear()

    def __len__(self) -> int:
        return len(self._warnings)
