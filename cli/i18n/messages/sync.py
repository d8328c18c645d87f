"""
cli/i18n/messages/sync.py - Release Tag Sync Messages

Contains translations for the `sync` and `catalog` commands.
"""

from __future__ import annotations

SYNC_MESSAGES = {
    # =========================================================================
    # Headers
    # =========================================================================
    "title": {
        "ko": "ESXi 릴리스 태그 동기화",
        "en": "ESXi Release Tag Sync",
    },
    "subtitle": {
        "ko": "카테고리: {category} | 카탈로그: {catalog}",
        "en": "Category: {category} | Catalog: {catalog}",
    },
    "dry_run_notice": {
        "ko": "dry-run 모드: vCenter 태그를 변경하지 않습니다.",
        "en": "Dry-run mode: vCenter tags will not be modified.",
    },
    "step_connect": {
        "ko": "vCenter 연결 중...",
        "en": "Connecting to vCenter...",
    },
    "step_scope": {
        "ko": "범위 확인 중: {scope}",
        "en": "Resolving scope: {scope}",
    },
    "step_reconcile": {
        "ko": "태그 조정 중...",
        "en": "Reconciling tags...",
    },
    # =========================================================================
    # Results
    # =========================================================================
    "completed": {
        "ko": "동기화 완료: 릴리스 태그 {assigned}건, sentinel {sentinel}건",
        "en": "Sync completed: {assigned} release tags, {sentinel} sentinel tags",
    },
    "planned": {
        "ko": "dry-run 완료: 호스트 {count}개 계획됨",
        "en": "Dry-run completed: {count} hosts planned",
    },
    "unmapped_builds": {
        "ko": "카탈로그에 없는 빌드: {builds}",
        "en": "Builds missing from catalog: {builds}",
    },
    "partial_failure": {
        "ko": "일부 호스트 실패: {summary}",
        "en": "Some hosts failed: {summary}",
    },
    # =========================================================================
    # Catalog command
    # =========================================================================
    "catalog_loaded": {
        "ko": "카탈로그 로드됨: 빌드 {count}개 ({location})",
        "en": "Catalog loaded: {count} builds ({location})",
    },
    "catalog_not_found": {
        "ko": "카탈로그에 없음",
        "en": "not in catalog",
    },
}
