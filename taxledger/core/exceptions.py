"""Custom exception hierarchy for TaxLedger.

All errors raised by the report layer inherit from ``TaxLedgerException`` so
callers can catch a single base class and render ``to_dict()``.

Error codes follow pattern: [CATEGORY][NUMBER]
- PRF: Business profile errors (100-199)
- REC: Record store errors (200-299)
- RPT: Report request errors (300-399)
- SYS: System errors (400-499)

Pure tax computations never raise; negative intermediate values are clamped
to zero instead.
"""

from __future__ import annotations

from typing import Any


class TaxLedgerException(Exception):
    """Base exception for all TaxLedger application errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with user-friendly message and metadata.

        Args:
            message: User-friendly error message
            code: Unique error code (e.g., "PRF100")
            status_code: HTTP-style status code for callers that surface it
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# PROFILE ERRORS (PRF100-199)
# ============================================================================

class ProfileError(TaxLedgerException):
    """Base class for business profile errors."""
    pass


class ProfileNotFoundError(ProfileError):
    """No business profile exists for the user.

    Tax liability on an absent profile is meaningless, so reports refuse to
    run instead of assuming zero turnover and assets.
    """

    def __init__(self, user_id: int | None = None):
        message = "Profile not found" if user_id is None else f"Profile not found for user {user_id}"
        super().__init__(
            message=message,
            code="PRF100",
            status_code=404,
            details={"user_id": user_id} if user_id is not None else {},
        )


class InvalidProfileError(ProfileError):
    """Profile update carried values outside their allowed range."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid value for {field}: {reason}",
            code="PRF101",
            status_code=422,
            details={"field": field, "reason": reason},
        )


# ============================================================================
# RECORD STORE ERRORS (REC200-299)
# ============================================================================

class RecordStoreError(TaxLedgerException):
    """Income or expense records could not be fetched."""

    def __init__(self, record_type: str, reason: str | None = None):
        message = f"Failed to fetch {record_type} records"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="REC200",
            status_code=503,
            details={"record_type": record_type},
        )


# ============================================================================
# REPORT ERRORS (RPT300-399)
# ============================================================================

class ReportError(TaxLedgerException):
    """Base class for report request errors."""
    pass


class InvalidReportRangeError(ReportError):
    """Report filter dates could not be parsed."""

    def __init__(self, value: str, field: str = "date"):
        super().__init__(
            message=f"Invalid {field}: '{value}'. Expected YYYY-MM-DD",
            code="RPT300",
            status_code=400,
            details={"field": field, "value": value},
        )


# ============================================================================
# SYSTEM ERRORS (SYS400-499)
# ============================================================================

class ConfigurationError(TaxLedgerException):
    """System misconfiguration (missing database URL, etc.)."""

    def __init__(self, setting: str):
        super().__init__(
            message=f"Missing or invalid setting: {setting}",
            code="SYS401",
            status_code=500,
            details={"setting": setting},
        )
