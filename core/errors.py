"""
core/errors.py - 호스트 단위 실패 수집 및 관리

조정(reconcile) 중 호스트별로 발생한 태그 서비스 오류를 수집하고
실행 종료 시 한 번에 보고하기 위한 유틸리티입니다.

주요 구성 요소:
- ErrorSeverity: 에러 심각도 분류
- ErrorCategory: HTTP 상태 기반 에러 분류
- HostFailure: 수집된 실패 상세 정보
- FailureCollector: 실패 수집기

Example:
    collector = FailureCollector("tagging")

    try:
        tagging.create_assignment(tag, host.ref)
    except TagServiceError as e:
        collector.collect(e, host_id=host.ref.id, host_name=host.name, build=host.build,
                          operation="create_assignment")

    if collector.has_errors:
        print(collector.get_summary())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from core.exceptions import APICallError

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """에러 심각도 분류"""

    CRITICAL = "critical"  # 할당 실패로 호스트에 카테고리 태그 없음
    WARNING = "warning"  # 호스트 단위 실패 - 보고하되 계속 진행


class ErrorCategory(Enum):
    """에러 카테고리"""

    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    THROTTLING = "throttling"
    TIMEOUT = "timeout"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    NETWORK = "network"
    UNKNOWN = "unknown"


def categorize_status(status_code: int | None) -> ErrorCategory:
    """HTTP 상태 코드를 ErrorCategory로 분류

    상태 코드가 없으면 네트워크 계층 오류로 간주합니다.
    """
    if status_code is None:
        return ErrorCategory.NETWORK
    if status_code in (401, 403):
        return ErrorCategory.ACCESS_DENIED
    if status_code == 404:
        return ErrorCategory.NOT_FOUND
    if status_code == 429:
        return ErrorCategory.THROTTLING
    if status_code in (408, 504):
        return ErrorCategory.TIMEOUT
    if 400 <= status_code < 500:
        return ErrorCategory.INVALID_REQUEST
    if status_code >= 500:
        return ErrorCategory.SERVICE_ERROR
    return ErrorCategory.UNKNOWN


@dataclass
class HostFailure:
    """수집된 호스트 단위 실패

    Attributes:
        timestamp: 발생 시각
        host_id: 호스트 MoRef ID
        host_name: 호스트 이름
        build: 호스트 빌드 번호
        service: 서비스 이름 (예: "tagging")
        operation: 작업 이름 (예: "create_assignment")
        status_code: HTTP 상태 코드 (없으면 None)
        error_message: 에러 메시지
        severity: 심각도
        category: 에러 카테고리
    """

    timestamp: datetime
    host_id: str
    host_name: str
    build: str
    service: str
    operation: str
    status_code: int | None
    error_message: str
    severity: ErrorSeverity
    category: ErrorCategory

    def __str__(self) -> str:
        status = f"HTTP {self.status_code}" if self.status_code is not None else self.category.value
        return (
            f"[{self.severity.value.upper()}] {self.host_name} (build {self.build}) - "
            f"{self.service}.{self.operation}: {status} {self.error_message}"
        ).rstrip()

    def to_dict(self) -> dict[str, str | int | None]:
        """딕셔너리로 변환 (JSON 출력용)"""
        return {
            "timestamp": self.timestamp.isoformat(),
            "host_id": self.host_id,
            "host_name": self.host_name,
            "build": self.build,
            "service": self.service,
            "operation": self.operation,
            "status_code": self.status_code,
            "error_message": self.error_message,
            "severity": self.severity.value,
            "category": self.category.value,
        }


class FailureCollector:
    """호스트 단위 실패 수집기

    실패를 기록하고 로깅하며, 실행 종료 시 요약을 제공합니다.
    """

    def __init__(self, service: str):
        self.service = service
        self._failures: list[HostFailure] = []

    def collect(
        self,
        error: Exception,
        host_id: str,
        host_name: str,
        build: str,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> HostFailure:
        """예외를 HostFailure로 기록하고 로깅

        APICallError면 상태 코드와 메시지를 그대로 사용합니다.
        """
        if isinstance(error, APICallError):
            status_code = error.status_code
            error_message = error.error_message or str(error)
        else:
            status_code = None
            error_message = str(error)

        failure = HostFailure(
            timestamp=datetime.now(),
            host_id=host_id,
            host_name=host_name,
            build=build,
            service=self.service,
            operation=operation,
            status_code=status_code,
            error_message=error_message,
            severity=severity,
            category=categorize_status(status_code),
        )
        self._failures.append(failure)

        if severity == ErrorSeverity.CRITICAL:
            logger.error(str(failure))
        else:
            logger.warning(str(failure))

        return failure

    @property
    def failures(self) -> list[HostFailure]:
        """수집된 모든 실패의 복사본"""
        return list(self._failures)

    @property
    def has_errors(self) -> bool:
        return bool(self._failures)

    def get_summary(self) -> str:
        """카테고리별 건수를 포함한 요약 문자열

        Returns:
            예: "실패 3건 (access_denied: 1건, network: 2건)"
        """
        if not self._failures:
            return "실패 없음"

        by_category: dict[str, int] = {}
        for f in self._failures:
            by_category[f.category.value] = by_category.get(f.category.value, 0) + 1

        parts = [f"{k}: {v}건" for k, v in sorted(by_category.items())]
        return f"실패 {len(self._failures)}건 ({', '.join(parts)})"

    def get_by_host(self) -> dict[str, list[HostFailure]]:
        """호스트별 그룹핑

        Returns:
            {"호스트이름 (MoRef)": [HostFailure, ...]}
        """
        result: dict[str, list[HostFailure]] = {}
        for f in self._failures:
            result.setdefault(f"{f.host_name} ({f.host_id})", []).append(f)
        return result

    def clear(self) -> None:
        self._failures.clear()
