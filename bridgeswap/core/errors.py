"""Exceptions raised by the bridge-and-swap flow."""


class InsufficientBalanceError(ValueError):
    """Raised when the wallet holds less of the input token than the run needs."""

    def __init__(self, message: str, *, required: int, available: int) -> None:
        super().__init__(message)
        self.required = required
        self.available = available


class QuoteError(ValueError):
    """Raised when the swap quote API returns an error or an unusable payload."""


class ContractMismatchError(QuoteError):
    """Raised when a refreshed swap quote targets a different swap contract."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"Swap contract address mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class BridgeError(RuntimeError):
    """Raised when the bridge rejects a quote or a bridge transaction fails."""


__all__ = ["BridgeError", "ContractMismatchError", "InsufficientBalanceError", "QuoteError"]
