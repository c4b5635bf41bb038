from dataclasses import dataclass, field

from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int
    translations: dict[str, str] = field(default_factory=dict)

    def localized_message(self, language: str | None) -> str:
        if language and language in self.translations:
            return self.translations[language]
        return self.message


class ErrorCatalog:
    UNAUTHORIZED = ErrorDefinition(
        "UNAUTHORIZED",
        "Authentication required",
        status.HTTP_401_UNAUTHORIZED,
        {"ko": "인증이 필요합니다."},
    )
    FORBIDDEN = ErrorDefinition(
        "FORBIDDEN",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
        {"ko": "접근 권한이 없습니다."},
    )
    BAD_REQUEST = ErrorDefinition(
        "BAD_REQUEST",
        "Invalid request",
        status.HTTP_400_BAD_REQUEST,
        {"ko": "잘못된 요청입니다."},
    )
    NOT_FOUND = ErrorDefinition(
        "NOT_FOUND",
        "Resource not found",
        status.HTTP_404_NOT_FOUND,
        {"ko": "리소스를 찾을 수 없습니다."},
    )
    CONFLICT = ErrorDefinition(
        "CONFLICT",
        "Resource already exists",
        status.HTTP_409_CONFLICT,
        {"ko": "이미 존재하는 데이터입니다."},
    )
    SERVICE_UNAVAILABLE = ErrorDefinition(
        "SERVICE_UNAVAILABLE",
        "Service temporarily unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
        {"ko": "서비스를 일시적으로 사용할 수 없습니다."},
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"ko": "알 수 없는 오류가 발생했습니다."},
    )


class AppError(Exception):
    def __init__(
        self,
        error: ErrorDefinition,
        message: str | None = None,
        details: object | None = None,
    ):
        self.error = error
        self.custom_message = message
        self.details = details
        super().__init__(message or error.message)

    def message_for(self, language: str | None) -> str:
        if self.custom_message:
            return self.custom_message
        return self.error.localized_message(language)


def unauthorized(message: str | None = None) -> AppError:
    return AppError(ErrorCatalog.UNAUTHORIZED, message)


def forbidden(message: str | None = None) -> AppError:
    return AppError(ErrorCatalog.FORBIDDEN, message)


def bad_request(message: str | None = None, details: object | None = None) -> AppError:
    return AppError(ErrorCatalog.BAD_REQUEST, message, details)


def not_found(message: str | None = None, details: object | None = None) -> AppError:
    return AppError(ErrorCatalog.NOT_FOUND, message, details)


def conflict(message: str | None = None) -> AppError:
    return AppError(ErrorCatalog.CONFLICT, message)


def service_unavailable(message: str | None = None) -> AppError:
    return AppError(ErrorCatalog.SERVICE_UNAVAILABLE, message)
