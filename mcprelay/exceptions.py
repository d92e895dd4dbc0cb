from __future__ import annotations


class RelayError(Exception):
    pass


class RelayConfigError(RelayError):
    """Raised when the relay cannot be configured, e.g. an unusable URL."""


class InputClosed(RelayError):

    def __init__(
        self, cause: BaseException | None = None
    ) -> None:
        self.cause: BaseException | None = cause
        super().__init__(
            "end of input"
            if cause is None
            else f"input read error: {cause}"
        )

    @property
    def is_eof(self) -> bool:
        return self.cause is None
