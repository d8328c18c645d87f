"""
cli/i18n/messages/runner.py - Execution Messages

Contains translations for execution flow, connection, and error messages.
"""

from __future__ import annotations

RUNNER_MESSAGES = {
    # =========================================================================
    # Execution Flow
    # =========================================================================
    "execution_failed": {
        "ko": "실행 실패: {message}",
        "en": "Execution failed: {message}",
    },
    "cancelled": {
        "ko": "취소됨",
        "en": "Cancelled",
    },
    "debug_hint": {
        "ko": "--debug 옵션으로 상세 로그를 확인하세요.",
        "en": "Re-run with --debug for detailed logs.",
    },
    # =========================================================================
    # Connection
    # =========================================================================
    "connected": {
        "ko": "vCenter 연결됨: {server}",
        "en": "Connected to vCenter: {server}",
    },
    "missing_credentials": {
        "ko": "vCenter 접속 정보가 없습니다 (--server/--user/--password 또는 VSPHERE_* 환경변수).",
        "en": "Missing vCenter credentials (--server/--user/--password or VSPHERE_* environment variables).",
    },
    "insecure_warning": {
        "ko": "vCenter 인증서 검증을 건너뜁니다 (--insecure).",
        "en": "Skipping vCenter certificate validation (--insecure).",
    },
    # =========================================================================
    # Output
    # =========================================================================
    "report_saved": {
        "ko": "리포트 저장됨: {path}",
        "en": "Report saved: {path}",
    },
}
