# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a short user-facing title (`detail`) and, where useful,
# a description telling the user what to do next (`suggestion`).
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.models.workflow import WorkflowOutcome, WorkflowResult


class SparkLinksException(Exception):
    """
    Base exception for the Spark Links API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SPARKLINKS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Project Exceptions
# =============================================================================

class ProjectNotFoundError(SparkLinksException):
    """Raised when a project doesn't exist or the caller may not manage it."""

    def __init__(self, project_id: str):
        super().__init__(
            message="找不到指定的專案",
            code="PROJECT_NOT_FOUND",
            status_code=404,
            suggestion="專案可能不存在或您沒有管理權限",
            details={"project_id": project_id}
        )


class ProjectNotRecruitingError(SparkLinksException):
    """Raised when applying to a project that has stopped recruiting."""

    def __init__(self, project_id: str):
        super().__init__(
            message="此專案目前未開放招募",
            code="PROJECT_NOT_RECRUITING",
            status_code=400,
            suggestion="請瀏覽其他正在招募的專案",
            details={"project_id": project_id}
        )


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(SparkLinksException):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: str):
        super().__init__(
            message="找不到此用戶",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="請確認用戶連結是否正確",
            details={"user_id": user_id}
        )


class ProfilePrivateError(SparkLinksException):
    """Raised when viewing a talent profile that is not public."""

    def __init__(self, user_id: str):
        super().__init__(
            message="此用戶的個人資料未公開",
            code="PROFILE_PRIVATE",
            status_code=403,
            details={"user_id": user_id}
        )


# =============================================================================
# Application / Invitation Exceptions
# =============================================================================

class RequestNotFoundError(SparkLinksException):
    """Raised when an application/invitation doesn't exist or isn't the caller's to act on."""

    def __init__(self, table: str, request_id: str):
        super().__init__(
            message="找不到指定的申請" if table == "applications" else "找不到指定的邀請",
            code="REQUEST_NOT_FOUND",
            status_code=404,
            details={"table": table, "request_id": request_id}
        )


class AlreadyAppliedError(SparkLinksException):
    """Raised when a pending application already exists for the project."""

    def __init__(self, project_id: str):
        super().__init__(
            message="您已經申請過此專案",
            code="ALREADY_APPLIED",
            status_code=409,
            suggestion="請等待專案創建者回覆，或撤回原申請後重新申請",
            details={"project_id": project_id}
        )


class AlreadyInvitedError(SparkLinksException):
    """Raised when a pending invitation already exists for the user."""

    def __init__(self, project_id: str, invitee_id: str):
        super().__init__(
            message="您已經邀請過此用戶",
            code="ALREADY_INVITED",
            status_code=409,
            suggestion="請等待對方回覆，或撤回原邀請後重新邀請",
            details={"project_id": project_id, "invitee_id": invitee_id}
        )


class AlreadyMemberError(SparkLinksException):
    """Raised when the user to add is already on the project team."""

    def __init__(self, project_id: str, user_id: str, message: str = "您已經是此專案的成員"):
        super().__init__(
            message=message,
            code="ALREADY_MEMBER",
            status_code=409,
            details={"project_id": project_id, "user_id": user_id}
        )


class SelfRequestError(SparkLinksException):
    """Raised when a user applies to their own project or invites themselves."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="SELF_REQUEST",
            status_code=400,
        )


class RejectionReasonRequiredError(SparkLinksException):
    """Raised when rejecting without a reason."""

    def __init__(self):
        super().__init__(
            message="請填寫拒絕原因",
            code="REJECTION_REASON_REQUIRED",
            status_code=400,
            suggestion="拒絕時需要提供原因讓對方了解",
        )


# Non-success workflow outcomes and how they are reported over HTTP
_OUTCOME_STATUS = {
    WorkflowOutcome.ALREADY_PROCESSED: (409, "REQUEST_ALREADY_PROCESSED"),
    WorkflowOutcome.CONFLICT: (409, "JOIN_CONFLICT"),
    WorkflowOutcome.BACKEND_ERROR: (502, "BACKEND_ERROR"),
}


class WorkflowError(SparkLinksException):
    """Raised by routers when a workflow operation did not succeed."""

    def __init__(self, result: WorkflowResult):
        status_code, code = _OUTCOME_STATUS[result.outcome]
        details: dict[str, Any] = {"outcome": result.outcome.value}
        if result.compensated is not None:
            details["compensated"] = result.compensated
        super().__init__(
            message=result.notification.title,
            code=code,
            status_code=status_code,
            suggestion=result.notification.description,
            details=details,
        )
        self.result = result


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(SparkLinksException):
    """Raised when sign-in fails."""

    def __init__(self, error: str):
        super().__init__(
            message="登入失敗",
            code="AUTHENTICATION_FAILED",
            status_code=401,
            suggestion="請確認電子信箱與密碼是否正確",
            details={"error": error}
        )


class RegistrationError(SparkLinksException):
    """Raised when sign-up fails."""

    def __init__(self, error: str):
        super().__init__(
            message="註冊失敗",
            code="REGISTRATION_FAILED",
            status_code=400,
            suggestion="請稍後再試，或使用其他電子信箱註冊",
            details={"error": error}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(SparkLinksException):
    """Raised when an uploaded avatar type is not allowed."""

    def __init__(self, content_type: str, allowed: list[str]):
        super().__init__(
            message="不支援的圖片格式",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"請上傳以下格式的圖片: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed}
        )


class FileTooLargeError(SparkLinksException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message="圖片檔案過大",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"請上傳小於 {max_mb}MB 的圖片",
            details={"size_mb": round(size_mb, 1), "max_mb": max_mb}
        )


class StorageUploadError(SparkLinksException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="上傳失敗",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="請檢查網路連線或稍後再試",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def sparklinks_exception_handler(
    request: Request,
    exc: SparkLinksException
) -> JSONResponse:
    """
    Convert SparkLinksException to JSON response.

    Returns structured error with:
    - detail: Short user-facing title
    - code: Machine-readable error code
    - suggestion: What the user can do (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def backend_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Report an unexpected Supabase failure as a bad-gateway error."""
    return JSONResponse(
        status_code=502,
        content={
            "detail": "系統錯誤",
            "code": getattr(exc, "code", "BACKEND_ERROR"),
            "suggestion": "發生未預期的錯誤，請稍後再試",
        }
    )
