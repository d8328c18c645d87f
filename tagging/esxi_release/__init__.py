"""
tagging/esxi_release - ESXi 릴리스 이름 태그 동기화

호스트 빌드 번호를 릴리스 카탈로그와 대조하여
단일 카테고리(tc_esxi_release_names)의 태그로 관리합니다.

    from tagging.esxi_release import load_catalog, reconcile
"""

from .catalog import classify_location, load_catalog, normalize_label, parse_catalog
from .reconciler import ReleaseTagReconciler, derive_build_set, map_builds, reconcile
from .reporter import ReconcileReporter
from .types import (
    HostResult,
    HostStatus,
    LocalPath,
    ReconcileSummary,
    ReleaseCatalog,
    ReleaseDescriptor,
    RemoteURL,
    RunState,
)

__all__ = [
    "classify_location",
    "load_catalog",
    "normalize_label",
    "parse_catalog",
    "ReleaseTagReconciler",
    "derive_build_set",
    "map_builds",
    "reconcile",
    "ReconcileReporter",
    "HostResult",
    "HostStatus",
    "LocalPath",
    "ReconcileSummary",
    "ReleaseCatalog",
    "ReleaseDescriptor",
    "RemoteURL",
    "RunState",
]
