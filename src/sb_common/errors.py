"""Unified error codes and custom exceptions.

Every error carries a stable ``kind`` (the name clients switch on) plus a
numeric code grouped by range:
  1xxx: Validation/Identity
  2xxx: Games (schedule provider lookups)
  3xxx: Wager
  4xxx: Acceptance
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    kind: str = "InternalFailure"

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Validation/Identity ---

class ValidationError(AppError):
    kind = "ValidationError"

    def __init__(self, detail: str) -> None:
        super().__init__(1001, detail, 400)


class InvalidIdentityError(ValidationError):
    def __init__(self) -> None:
        AppError.__init__(self, 1002, "Invalid phone number", 400)


# --- 2xxx: Games ---

class GameNotFoundError(AppError):
    kind = "NotFound"

    def __init__(self, game_id: str) -> None:
        super().__init__(2001, f"Game not found: {game_id}", 404)


class GameNotFinishedError(AppError):
    kind = "GameNotFinished"

    def __init__(self, game_id: str) -> None:
        super().__init__(2002, f"Game is not yet completed: {game_id}", 400)


# --- 3xxx: Wager ---

class WagerNotFoundError(AppError):
    kind = "NotFound"

    def __init__(self, wager_id: str) -> None:
        super().__init__(3001, f"Wager not found: {wager_id}", 404)


class WagerClosedError(AppError):
    kind = "WagerClosed"

    def __init__(self, wager_id: str) -> None:
        super().__init__(3002, f"Wager is no longer open: {wager_id}", 400)


# --- 4xxx: Acceptance ---

class GameStartedError(AppError):
    kind = "GameStarted"

    def __init__(self) -> None:
        super().__init__(4001, "Game has already started", 400)


class InvalidStakeError(AppError):
    kind = "InvalidStake"

    def __init__(self, detail: str) -> None:
        super().__init__(4002, f"Invalid stake: {detail}", 400)


class SelfAcceptanceError(AppError):
    kind = "SelfAcceptance"

    def __init__(self) -> None:
        super().__init__(4003, "You cannot accept your own wager", 400)


class DuplicateAcceptanceError(AppError):
    kind = "DuplicateAcceptance"

    def __init__(self) -> None:
        super().__init__(4004, "You have already accepted this wager", 400)


# --- 9xxx: System ---

class ProviderError(AppError):
    def __init__(self, provider: str, detail: str) -> None:
        super().__init__(9001, f"{provider} API error: {detail}", 500)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
