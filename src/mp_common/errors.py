"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Configuration
  2xxx: Chain reads
  3xxx: Holdings

Fee calculation never raises: invalid amounts produce an all-zero result.
"""


class AppError(Exception):
    """Base application error."""

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


# --- 1xxx: Configuration ---

class ConfigurationError(AppError):
    def __init__(self, setting: str, hint: str = "") -> None:
        message = f"Missing configuration: {setting}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(1001, message, 500)
        self.setting = setting


class InvalidRangeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Invalid range: {detail}", 422)


# --- 2xxx: Chain ---

class ChainReadError(AppError):
    def __init__(self, call: str, detail: str) -> None:
        super().__init__(2001, f"Chain read failed: {call}: {detail}", 502)
        self.call = call


# --- 3xxx: Holdings ---

class InvalidWalletAddressError(AppError):
    def __init__(self, wallet: str) -> None:
        super().__init__(3001, f"Invalid wallet address: {wallet}", 422)
