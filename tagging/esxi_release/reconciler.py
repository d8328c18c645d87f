"""
tagging/esxi_release/reconciler.py - ESXi 릴리스 태그 조정

호스트의 빌드 번호로 릴리스 이름을 찾아 vCenter 태그로 동기화합니다.

처리 순서:
    1. 세션 확인 (없으면 NotConnectedError)
    2. 릴리스 카탈로그 로드 (실패 시 CatalogUnavailableError)
    3. 호스트 조회 및 disconnected 제외 (없으면 EmptyHostSetError)
    4. 빌드 번호 집합 추출
    5. 카테고리 확인/생성 (SINGLE, HostSystem)
    6. sentinel 태그 확인/생성
    7. 빌드 → 태그 이름 매핑 및 릴리스 태그 확인/생성
    8. 호스트별 기존 할당 해제 후 새 태그 할당

1~6 단계의 오류는 실행을 중단하고(ABORTED), 7~8 단계의 오류는 호스트 단위로
수집하여 마지막에 함께 보고합니다.

Usage:
    from tagging.esxi_release.reconciler import reconcile

    summary = reconcile(session, catalog_location="esxi_builds.json")
    if not summary.ok:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from core.config import get_catalog_location, get_catalog_verify_tls, get_category_name, settings
from core.errors import ErrorSeverity, FailureCollector
from core.exceptions import APICallError, EmptyHostSetError, ERTError, NotConnectedError, TagServiceError
from shared.vsphere.types import (
    EntityRef,
    Host,
    InventoryProvider,
    SessionProtocol,
    Tag,
    TagCategory,
    TagService,
)

from .catalog import load_catalog, normalize_label
from .types import HostResult, HostStatus, ReconcileSummary, ReleaseCatalog, RunState

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def derive_build_set(hosts: Iterable[Host]) -> list[str]:
    """호스트 목록의 고유 빌드 번호 (정렬)"""
    return sorted({host.build for host in hosts})


def map_builds(catalog: ReleaseCatalog, builds: Iterable[str]) -> tuple[dict[str, str], list[str]]:
    """빌드 번호를 태그 이름으로 매핑

    Returns:
        (빌드 → 태그 이름, 카탈로그에 없는 빌드 목록)
    """
    mapping: dict[str, str] = {}
    unmapped: list[str] = []
    for build in builds:
        descriptor = catalog.get(build)
        if descriptor is None:
            unmapped.append(build)
        else:
            mapping[build] = normalize_label(descriptor.version)
    return mapping, unmapped


def release_tag_description(version: str, build: str) -> str:
    return f"{version} - build: {build}"


class ReleaseTagReconciler:
    """ESXi 릴리스 태그 조정기

    vCenter 세션을 명시적으로 전달받아 인벤토리와 태그 서비스를 사용합니다.
    태그 네임스페이스에 대한 유일한 작성자라고 가정하므로,
    같은 카테고리에 대한 동시 실행은 호출자가 직렬화해야 합니다.
    """

    def __init__(
        self,
        session: SessionProtocol,
        *,
        inventory: InventoryProvider | None = None,
        tagging: TagService | None = None,
        category_name: str | None = None,
        sentinel_name: str | None = None,
        verify_tls: bool | None = None,
        dry_run: bool = False,
        progress: ProgressCallback | None = None,
    ):
        """초기화

        Args:
            session: vCenter 세션 (is_connected 제공)
            inventory: 인벤토리 제공자 (기본: session.inventory)
            tagging: 태그 서비스 (기본: session.tagging)
            category_name: 태그 카테고리 이름
            sentinel_name: 카탈로그에 없는 빌드용 태그 이름
            verify_tls: 카탈로그 다운로드 시 인증서 검증 여부
            dry_run: True면 변경 없이 계획만 보고
            progress: 단계/호스트 진행 메시지 콜백
        """
        self.session = session
        self.inventory: InventoryProvider = inventory if inventory is not None else session.inventory  # type: ignore[attr-defined]
        self.tagging: TagService = tagging if tagging is not None else session.tagging  # type: ignore[attr-defined]
        self.category_name = category_name or get_category_name()
        self.sentinel_name = sentinel_name or settings.SENTINEL_TAG_NAME
        self.verify_tls = get_catalog_verify_tls() if verify_tls is None else verify_tls
        self.dry_run = dry_run
        self._progress = progress
        self._collector = FailureCollector("tagging")

    def _report(self, message: str) -> None:
        logger.info(message)
        if self._progress:
            self._progress(message)

    # =========================================================================
    # 실행
    # =========================================================================

    def run(
        self,
        catalog_location: str | None = None,
        scope: EntityRef | None = None,
    ) -> ReconcileSummary:
        """조정 실행

        Args:
            catalog_location: 카탈로그 위치 (기본: 공개 URL 또는 ERT_CATALOG_URL)
            scope: 조회 범위 (클러스터/데이터센터/폴더)

        Returns:
            ReconcileSummary (호스트 단위 실패가 있으면 ok=False)

        Raises:
            NotConnectedError, CatalogUnavailableError, EmptyHostSetError,
            InventoryError, TagServiceError(카테고리/sentinel 단계)
        """
        summary = ReconcileSummary(
            category_name=self.category_name,
            sentinel_name=self.sentinel_name,
            dry_run=self.dry_run,
            scope=scope,
        )
        self._collector.clear()

        try:
            self._preflight()
            summary.state = RunState.PREFLIGHTED

            catalog = self._load_catalog(catalog_location, summary)
            summary.state = RunState.CATALOG_LOADED

            hosts = self._enumerate_hosts(scope, summary)
            summary.state = RunState.HOSTS_ENUMERATED

            summary.builds = derive_build_set(hosts)
            self._report(f"고유 빌드 {len(summary.builds)}개: {', '.join(summary.builds)}")

            category = self._ensure_category(summary)
            sentinel = self._ensure_sentinel(category, summary)
        except ERTError:
            summary.state = RunState.ABORTED
            raise

        failed_builds = self._ensure_release_tags(catalog, category, summary)
        summary.state = RunState.CATALOG_OBJECTS_ENSURED

        for index, host in enumerate(hosts, 1):
            result = self._apply_host(host, category, sentinel, summary.build_mapping, failed_builds)
            summary.results.append(result)
            self._report(f"({index}/{len(hosts)}) {host.name}: {result.status.value} {result.tag_name}".rstrip())
        summary.state = RunState.PER_HOST_APPLIED

        summary.failures = self._collector.failures
        if self._collector.has_errors:
            logger.warning(self._collector.get_summary())
        summary.state = RunState.DONE
        return summary

    # =========================================================================
    # 1~3단계: 사전 조건
    # =========================================================================

    def _preflight(self) -> None:
        endpoint = getattr(self.session, "endpoint", None)
        if not self.session.is_connected():
            raise NotConnectedError(endpoint)
        self._report(f"세션 확인: {endpoint or 'vCenter'}")

    def _load_catalog(self, location: str | None, summary: ReconcileSummary) -> ReleaseCatalog:
        location = location or get_catalog_location()
        self._report(f"카탈로그 로드: {location}")
        catalog = load_catalog(location, verify_tls=self.verify_tls)
        summary.catalog_location = str(catalog.location or location)
        summary.catalog_size = len(catalog)
        return catalog

    def _enumerate_hosts(self, scope: EntityRef | None, summary: ReconcileSummary) -> list[Host]:
        all_hosts = self.inventory.list_hosts(scope)
        hosts = [h for h in all_hosts if not h.is_disconnected]

        summary.total_hosts = len(hosts)
        summary.skipped_hosts = len(all_hosts) - len(hosts)
        if summary.skipped_hosts:
            logger.info(f"disconnected 호스트 {summary.skipped_hosts}개 제외")

        if not hosts:
            raise EmptyHostSetError(str(scope) if scope else None)

        self._report(f"호스트 {len(hosts)}개 (제외 {summary.skipped_hosts}개)")
        return hosts

    # =========================================================================
    # 5~7단계: 카테고리 / 태그 확인
    # =========================================================================

    def _ensure_category(self, summary: ReconcileSummary) -> TagCategory | None:
        """카테고리 확인/생성 (이름으로만 비교)"""
        category = self.tagging.get_category(self.category_name)
        if category is not None:
            logger.debug(f"카테고리 존재: {self.category_name}")
            return category

        summary.created_objects.append(f"category:{self.category_name}")
        if self.dry_run:
            self._report(f"[dry-run] 카테고리 생성 예정: {self.category_name}")
            return None

        self._report(f"카테고리 생성: {self.category_name}")
        return self.tagging.create_category(
            self.category_name,
            cardinality=settings.CATEGORY_CARDINALITY,
            description=settings.CATEGORY_DESCRIPTION,
            associable_types=settings.ASSOCIABLE_TYPES,
        )

    def _ensure_sentinel(self, category: TagCategory | None, summary: ReconcileSummary) -> Tag | None:
        existing = self.tagging.get_tag(self.sentinel_name, category) if category else None
        if existing is not None:
            return existing
        return self._create_tag(self.sentinel_name, category, settings.SENTINEL_TAG_DESCRIPTION, summary)

    def _create_tag(
        self,
        name: str,
        category: TagCategory | None,
        description: str,
        summary: ReconcileSummary,
    ) -> Tag | None:
        summary.created_objects.append(f"tag:{self.category_name}/{name}")
        if self.dry_run or category is None:
            self._report(f"[dry-run] 태그 생성 예정: {name}")
            return None

        self._report(f"태그 생성: {name}")
        return self.tagging.create_tag(name, category, description)

    def _ensure_release_tags(
        self,
        catalog: ReleaseCatalog,
        category: TagCategory | None,
        summary: ReconcileSummary,
    ) -> dict[str, APICallError]:
        """빌드 매핑 생성 및 릴리스 태그 확인/생성

        같은 이름의 태그가 어느 카테고리에든 있으면 그대로 사용합니다.

        Returns:
            태그 확인/생성에 실패한 빌드 → 예외
        """
        mapping, unmapped = map_builds(catalog, summary.builds)
        summary.build_mapping = mapping
        summary.unmapped_builds = unmapped

        for build in unmapped:
            logger.warning(f"카탈로그에 없는 빌드: {build} → {self.sentinel_name}")

        failed: dict[str, APICallError] = {}
        ensured: set[str] = set()
        for build, label in mapping.items():
            if label in ensured:
                continue
            descriptor = catalog[build]
            try:
                if self.tagging.get_tag(label) is None:
                    self._create_tag(label, category, release_tag_description(descriptor.version, build), summary)
                ensured.add(label)
            except APICallError as e:
                logger.error(f"릴리스 태그 확인 실패 [{label} / build {build}]: {e}")
                failed[build] = e

        return failed

    # =========================================================================
    # 8단계: 호스트별 적용
    # =========================================================================

    def _resolve_tag(self, label: str, category: TagCategory | None) -> Tag | None:
        """카테고리 내 태그를 우선하고, 없으면 같은 이름의 다른 카테고리 태그 사용"""
        if category is not None:
            tag = self.tagging.get_tag(label, category)
            if tag is not None:
                return tag
        return self.tagging.get_tag(label)

    def _apply_host(
        self,
        host: Host,
        category: TagCategory | None,
        sentinel: Tag | None,
        mapping: dict[str, str],
        failed_builds: dict[str, APICallError],
    ) -> HostResult:
        """기존 할당을 항상 해제한 뒤 새 태그를 할당"""
        label = mapping.get(host.build)
        target = label or self.sentinel_name
        status = HostStatus.ASSIGNED if label else HostStatus.SENTINEL

        if host.build in failed_builds:
            error = failed_builds[host.build]
            self._collector.collect(error, host.ref.id, host.name, host.build, error.operation)
            return HostResult(host=host, status=HostStatus.FAILED, tag_name=target, error=str(error))

        operation = "get_assignment"
        previous = ""
        try:
            current = self.tagging.get_assignment(category, host.ref) if category else None
            previous = current.tag.name if current else ""

            if self.dry_run:
                return HostResult(host=host, status=HostStatus.PLANNED, tag_name=target, previous_tag=previous)

            operation = "get_tag"
            tag = self._resolve_tag(label, category) if label else sentinel
            if tag is None:
                raise TagServiceError(operation, error_message=f"태그 없음: {target}")

            if current is not None:
                operation = "remove_assignment"
                self.tagging.remove_assignment(current)

            operation = "create_assignment"
            self.tagging.create_assignment(tag, host.ref)
        except APICallError as e:
            # create_assignment 실패 시 호스트에 카테고리 태그가 남지 않음
            severity = ErrorSeverity.CRITICAL if operation == "create_assignment" else ErrorSeverity.WARNING
            self._collector.collect(e, host.ref.id, host.name, host.build, operation, severity=severity)
            return HostResult(
                host=host,
                status=HostStatus.FAILED,
                tag_name=target,
                previous_tag=previous,
                error=str(e),
            )

        if previous and previous != target:
            logger.info(f"{host.name}: {previous} → {target}")
        return HostResult(host=host, status=status, tag_name=target, previous_tag=previous)


def reconcile(
    session: SessionProtocol,
    catalog_location: str | None = None,
    category_name: str | None = None,
    scope: EntityRef | None = None,
    **kwargs,
) -> ReconcileSummary:
    """릴리스 태그 조정 (편의 함수)

    Args:
        session: vCenter 세션
        catalog_location: 카탈로그 위치
        category_name: 태그 카테고리 이름 (기본: tc_esxi_release_names)
        scope: 조회 범위
        **kwargs: ReleaseTagReconciler 옵션 (inventory, tagging, dry_run, verify_tls, progress)

    Returns:
        ReconcileSummary
    """
    reconciler = ReleaseTagReconciler(session, category_name=category_name, **kwargs)
    return reconciler.run(catalog_location=catalog_location, scope=scope)
