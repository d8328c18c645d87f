"""
core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 예외 클래스들을 정의합니다.
일관된 예외 처리와 에러 메시지를 제공합니다.

예외 계층 구조:
    ERTError (베이스)
    ├── NotConnectedError (vCenter 세션 없음)
    ├── CatalogUnavailableError (릴리스 카탈로그 로드 실패)
    ├── EmptyHostSetError (조정 대상 호스트 없음)
    ├── ScopeNotFoundError (인벤토리 범위 조회 실패)
    └── APICallError (외부 API 호출)
        ├── TagServiceError
        └── InventoryError

Usage:
    from core.exceptions import TagServiceError

    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        raise TagServiceError.from_http_error("create_tag", e) from e
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class ERTError(Exception):
    """ESXi Release Tags 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 실행 전제 조건 (치명적)
# =============================================================================


class NotConnectedError(ERTError):
    """vCenter 세션이 없거나 만료된 경우"""

    def __init__(self, endpoint: str | None = None, cause: Exception | None = None):
        target = endpoint or "vCenter"
        super().__init__(f"활성 세션 없음 [{target}]: 먼저 연결하세요", cause)
        self.endpoint = endpoint
        if endpoint:
            self.details["endpoint"] = endpoint


class CatalogUnavailableError(ERTError):
    """릴리스 카탈로그를 읽거나 파싱할 수 없는 경우"""

    def __init__(
        self,
        location: str,
        reason: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        message = f"카탈로그 로드 실패 [{location}]: {reason}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message, cause)
        self.location = location
        self.reason = reason
        self.status_code = status_code
        self.details.update({"location": location, "status_code": status_code})


class EmptyHostSetError(ERTError):
    """연결된 호스트가 하나도 없는 경우"""

    def __init__(self, scope: str | None = None):
        where = scope or "전체 인벤토리"
        super().__init__(f"조정할 호스트 없음 [{where}]")
        self.scope = scope
        self.details["scope"] = scope


class ScopeNotFoundError(ERTError):
    """범위(클러스터/데이터센터/폴더)를 찾을 수 없는 경우"""

    def __init__(self, name: str):
        super().__init__(f"인벤토리 범위를 찾을 수 없음: {name}")
        self.name = name
        self.details["scope"] = name


# =============================================================================
# API 호출 관련 예외
# =============================================================================


class APICallError(ERTError):
    """외부 API 호출 관련 예외

    requests의 HTTPError / RequestException을 래핑하여 일관된 예외 처리를 제공합니다.
    """

    service = "api"

    def __init__(
        self,
        operation: str,
        status_code: int | None = None,
        error_message: str | None = None,
        cause: Exception | None = None,
    ):
        message = f"{self.service}.{operation}"
        if status_code is not None:
            message = f"{message} 실패 (HTTP {status_code})"
        else:
            message = f"{message} 실패"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.operation = operation
        self.status_code = status_code
        self.error_message = error_message
        self.details.update(
            {
                "service": self.service,
                "operation": operation,
                "status_code": status_code,
            }
        )

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_http_error(cls, operation: str, error: Exception) -> APICallError:
        """requests 예외로부터 생성

        Args:
            operation: API 작업 이름
            error: requests.HTTPError 또는 RequestException

        Returns:
            APICallError 인스턴스
        """
        status_code = None
        error_message = None

        response = getattr(error, "response", None)
        if response is not None:
            status_code = response.status_code
            error_message = _extract_error_message(response)

        if not error_message:
            error_message = str(error)

        return cls(
            operation=operation,
            status_code=status_code,
            error_message=error_message,
            cause=error,
        )


class TagServiceError(APICallError):
    """태그 서비스(CIS tagging) 호출 실패"""

    service = "tagging"


class InventoryError(APICallError):
    """인벤토리 조회 실패"""

    service = "inventory"


def _extract_error_message(response: Any) -> str | None:
    """vCenter 에러 응답 본문에서 메시지 추출"""
    try:
        body = response.json()
    except ValueError:
        text: str = getattr(response, "text", "") or ""
        return text[:200] or None

    if isinstance(body, dict):
        messages = body.get("messages") or []
        for item in messages:
            if isinstance(item, dict) and item.get("default_message"):
                return str(item["default_message"])
        if body.get("error_type"):
            return str(body["error_type"])
    return None


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def _status_of(error: Exception) -> int | None:
    if isinstance(error, APICallError):
        return error.status_code
    if isinstance(error, CatalogUnavailableError):
        return error.status_code
    response = getattr(error, "response", None)
    if response is not None:
        return getattr(response, "status_code", None)
    return None


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인 (401/403)"""
    return _status_of(error) in (401, 403)


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인 (404)"""
    return _status_of(error) == 404


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    status = _status_of(error)
    friendly_messages = {
        401: "인증이 만료되었습니다. 다시 로그인하세요.",
        403: "권한이 없습니다. vCenter 역할의 태깅 권한을 확인하세요.",
    }
    if status in friendly_messages and not isinstance(error, CatalogUnavailableError):
        return f"{error} - {friendly_messages[status]}"

    return str(error)
