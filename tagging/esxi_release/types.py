"""
tagging/esxi_release/types.py - 릴리스 태그 조정 데이터 모델

카탈로그(빌드 → 릴리스), 위치(로컬/원격), 실행 상태와 결과 요약을 정의합니다.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from core.errors import HostFailure
from shared.vsphere.types import EntityRef, Host

# =============================================================================
# 카탈로그 위치
# =============================================================================


@dataclass(frozen=True)
class LocalPath:
    """로컬 파일 위치"""

    path: Path

    def __str__(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class RemoteURL:
    """HTTP(S) 위치"""

    url: str

    def __str__(self) -> str:
        return self.url


Location = LocalPath | RemoteURL


# =============================================================================
# 릴리스 카탈로그
# =============================================================================


@dataclass(frozen=True)
class ReleaseDescriptor:
    """빌드 번호에 대응하는 릴리스 정보

    Attributes:
        version: 릴리스 이름 (카탈로그의 Version 필드)
        build: 빌드 번호 (카탈로그 키)
        fields: 카탈로그 항목의 전체 필드 (원본 그대로)
    """

    version: str
    build: str
    fields: Mapping[str, Any] = field(default_factory=dict, compare=False)


class ReleaseCatalog(Mapping[str, ReleaseDescriptor]):
    """빌드 번호 → ReleaseDescriptor 불변 매핑 (정확히 일치하는 키만 조회)"""

    def __init__(self, entries: Mapping[str, ReleaseDescriptor], location: Location | None = None):
        self._entries = MappingProxyType(dict(entries))
        self.location = location

    def __getitem__(self, build: str) -> ReleaseDescriptor:
        return self._entries[build]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReleaseCatalog({len(self)} builds, location={self.location})"


# =============================================================================
# 실행 상태
# =============================================================================


class RunState(Enum):
    """조정 실행 상태"""

    IDLE = "idle"
    PREFLIGHTED = "preflighted"
    CATALOG_LOADED = "catalog_loaded"
    HOSTS_ENUMERATED = "hosts_enumerated"
    CATALOG_OBJECTS_ENSURED = "catalog_objects_ensured"
    PER_HOST_APPLIED = "per_host_applied"
    DONE = "done"
    ABORTED = "aborted"


class HostStatus(Enum):
    """호스트 처리 결과"""

    ASSIGNED = "assigned"  # 릴리스 태그 할당
    SENTINEL = "sentinel"  # 카탈로그에 없는 빌드
    FAILED = "failed"  # 태그 서비스 오류
    PLANNED = "planned"  # dry-run


@dataclass
class HostResult:
    """호스트별 처리 결과"""

    host: Host
    status: HostStatus
    tag_name: str = ""
    previous_tag: str = ""
    error: str = ""

    @property
    def build(self) -> str:
        return self.host.build

    def to_dict(self) -> dict[str, Any]:
        return {
            "host_id": self.host.ref.id,
            "host_name": self.host.name,
            "build": self.build,
            "status": self.status.value,
            "tag": self.tag_name,
            "previous_tag": self.previous_tag,
            "error": self.error,
        }


@dataclass
class ReconcileSummary:
    """조정 실행 요약"""

    category_name: str
    sentinel_name: str
    state: RunState = RunState.IDLE
    dry_run: bool = False
    catalog_location: str = ""
    catalog_size: int = 0
    scope: EntityRef | None = None
    total_hosts: int = 0
    skipped_hosts: int = 0
    builds: list[str] = field(default_factory=list)
    build_mapping: dict[str, str] = field(default_factory=dict)
    unmapped_builds: list[str] = field(default_factory=list)
    created_objects: list[str] = field(default_factory=list)
    results: list[HostResult] = field(default_factory=list)
    failures: list[HostFailure] = field(default_factory=list)

    @property
    def assigned_count(self) -> int:
        return sum(1 for r in self.results if r.status == HostStatus.ASSIGNED)

    @property
    def sentinel_count(self) -> int:
        return sum(1 for r in self.results if r.status == HostStatus.SENTINEL)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.status == HostStatus.FAILED)

    @property
    def ok(self) -> bool:
        """끝까지 실행되었고 호스트 단위 실패가 없으면 True"""
        return self.state == RunState.DONE and not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "ok": self.ok,
            "dry_run": self.dry_run,
            "category": self.category_name,
            "sentinel": self.sentinel_name,
            "catalog_location": self.catalog_location,
            "catalog_size": self.catalog_size,
            "scope": str(self.scope) if self.scope else None,
            "total_hosts": self.total_hosts,
            "skipped_hosts": self.skipped_hosts,
            "builds": self.builds,
            "build_mapping": self.build_mapping,
            "unmapped_builds": self.unmapped_builds,
            "created_objects": self.created_objects,
            "assigned": self.assigned_count,
            "sentinel_assigned": self.sentinel_count,
            "failed": self.failed_count,
            "results": [r.to_dict() for r in self.results],
            "failures": [f.to_dict() for f in self.failures],
        }
