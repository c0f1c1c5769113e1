"""
Result object for error handling throughout Gear Forge.

All operations that can fail return a Result object instead of raising exceptions.
This provides clear, type-safe error handling and makes the API predictable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(Enum):
    """
    Standard error codes for Result objects.

    Values are the reason strings surfaced to callers, so a presentation
    layer can map them straight to user-facing messages.
    """

    # Lookup errors
    ITEM_NOT_FOUND = "item-not-found"

    # Progression errors
    MAX_UPGRADE_REACHED = "max-upgrade-reached"
    INSUFFICIENT_GOLD = "insufficient-gold"
    PLAYER_LEVEL_TOO_LOW = "player-level-too-low"

    # Slot errors
    TWO_HANDED_IN_OFF_HAND = "two-handed-in-off-hand"
    SHIELD_IN_MAIN_HAND = "shield-in-main-hand"
    EQUIPPED_BY_COMPANION = "equipped-by-companion"
    NO_SLOT_AVAILABLE = "no-slot-available"
    SLOT_NOT_ALLOWED = "slot-not-allowed"
    NOT_EQUIPPED = "not-equipped"

    # Ownership errors
    EQUIPPED_BY_PLAYER = "equipped-by-player"
    OWNED_BY_OTHER_COMPANION = "owned-by-other-companion"
    NOT_ASSIGNED_TO_COMPANION = "not-assigned-to-companion"

    # Validation errors
    VALIDATION_ERROR = "validation-error"
    INVALID_INPUT = "invalid-input"

    def __str__(self) -> str:
        """Return the error code value."""
        return self.value


@dataclass
class Result:
    """
    Represents the result of an operation that can succeed or fail.

    Attributes:
        success: Whether the operation succeeded
        data: The result data if successful
        error: Error message if failed
        error_code: Machine-readable error code if failed

    Examples:
        >>> result = Result.ok(item)
        >>> if result.success:
        ...     print(result.data)

        >>> result = Result.fail("Item not found", ErrorCode.ITEM_NOT_FOUND)
        >>> if not result.success:
        ...     print(f"Error: {result.error_code}")
    """
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @staticmethod
    def ok(data: Any = None) -> 'Result':
        """
        Create a successful result.

        Args:
            data: Optional data to return

        Returns:
            Result with success=True
        """
        return Result(success=True, data=data)

    @staticmethod
    def fail(error: str, code: Optional[str | ErrorCode] = None) -> 'Result':
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            code: Machine-readable error code (ErrorCode enum or string)

        Returns:
            Result with success=False

        Examples:
            >>> Result.fail("Max upgrade reached", ErrorCode.MAX_UPGRADE_REACHED)
            >>> Result.fail("Validation error", "custom-error")
        """
        error_code_str = code.value if isinstance(code, ErrorCode) else code
        return Result(success=False, error=error, error_code=error_code_str)

    def __bool__(self) -> bool:
        """Allow using Result in boolean context: if result: ..."""
        return self.success


__all__ = ['ErrorCode', 'Result']
