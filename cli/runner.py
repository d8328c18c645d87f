"""
cli/runner.py - 동기화 실행기

`ert sync` 명령의 비대화형 실행 흐름입니다.
CI/CD 파이프라인 및 스케줄 작업에서 사용할 수 있도록 종료 코드를 반환합니다.

종료 코드:
    0: 성공
    1: 치명적 오류 또는 호스트 단위 실패 존재
    130: 사용자 취소 (Ctrl+C)
"""

from __future__ import annotations

import json
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cli.i18n import t
from cli.ui.console import (
    console,
    print_error,
    print_info,
    print_panel_header,
    print_step_header,
    print_sub_task,
    print_sub_warning,
    print_success,
    print_warning,
)
from core.config import get_catalog_location, get_category_name
from core.exceptions import ERTError, format_error_for_user
from shared.vsphere.session import VSphereSession
from tagging.esxi_release.reconciler import ReleaseTagReconciler
from tagging.esxi_release.reporter import ReconcileReporter
from tagging.esxi_release.types import ReconcileSummary

SessionFactory = Callable[..., Any]


@dataclass
class SyncConfig:
    """sync 실행 설정"""

    # vCenter 접속
    server: str | None = None
    user: str | None = None
    password: str | None = None
    insecure: bool = False

    # 조정 대상
    catalog: str | None = None
    category: str | None = None
    scope: str | None = None
    verify_tls: bool | None = None
    dry_run: bool = False

    # 출력
    format: str = "console"  # console, json
    output: str | None = None
    quiet: bool = False
    debug: bool = False


class SyncRunner:
    """릴리스 태그 동기화 실행기"""

    def __init__(self, config: SyncConfig, session_factory: SessionFactory | None = None):
        self.config = config
        self.session_factory = session_factory or VSphereSession.connect

    def run(self) -> int:
        """동기화 실행

        Returns:
            종료 코드 (0: 성공, 1: 실패, 130: 취소)
        """
        try:
            # 1. vCenter 연결
            session = self._connect()
            if session is None:
                return 1

            with session:
                # 2. 범위 확인
                scope = self._resolve_scope(session)

                # 3. 조정
                summary = self._reconcile(session, scope)

            # 4. 결과 출력
            return self._report(summary)

        except KeyboardInterrupt:
            if not self.config.quiet:
                console.print(f"\n[dim]{t('runner.cancelled')}[/dim]")
            return 130
        except ERTError as e:
            print_error(format_error_for_user(e))
            if self.config.debug:
                traceback.print_exc()
            return 1
        except Exception as e:
            print_error(t("runner.execution_failed", message=str(e)))
            if self.config.debug:
                traceback.print_exc()
            else:
                print_info(t("runner.debug_hint"))
            return 1

    def _connect(self) -> Any:
        cfg = self.config
        if not (cfg.server and cfg.user and cfg.password):
            print_error(t("runner.missing_credentials"))
            return None

        category = cfg.category or get_category_name()
        catalog = cfg.catalog or get_catalog_location()
        print_panel_header(t("sync.title"), t("sync.subtitle", category=category, catalog=catalog))
        if cfg.dry_run:
            print_warning(t("sync.dry_run_notice"))
        if cfg.insecure:
            print_sub_warning(t("runner.insecure_warning"))

        print_step_header(1, t("sync.step_connect"))
        session = self.session_factory(cfg.server, cfg.user, cfg.password, verify_ssl=not cfg.insecure)
        print_sub_task(t("runner.connected", server=cfg.server))
        return session

    def _resolve_scope(self, session: Any) -> Any:
        if not self.config.scope:
            return None
        print_sub_task(t("sync.step_scope", scope=self.config.scope))
        return session.inventory.resolve_scope(self.config.scope)

    def _reconcile(self, session: Any, scope: Any) -> ReconcileSummary:
        print_step_header(2, t("sync.step_reconcile"))
        reconciler = ReleaseTagReconciler(
            session,
            category_name=self.config.category,
            verify_tls=self.config.verify_tls,
            dry_run=self.config.dry_run,
            progress=print_sub_task,
        )
        return reconciler.run(catalog_location=self.config.catalog, scope=scope)

    def _report(self, summary: ReconcileSummary) -> int:
        reporter = ReconcileReporter(summary)

        if self.config.format == "json":
            if self.config.output:
                path = reporter.write_json(self.config.output)
                print_success(t("runner.report_saved", path=path))
            else:
                print(json.dumps(reporter.to_dict(), indent=2, ensure_ascii=False))
        else:
            reporter.print_summary(console)
            if self.config.output:
                path = reporter.write_json(self.config.output)
                print_success(t("runner.report_saved", path=path))

        if summary.unmapped_builds:
            print_warning(t("sync.unmapped_builds", builds=", ".join(summary.unmapped_builds)))

        if summary.failures:
            failed_hosts = sorted({f.host_name for f in summary.failures})
            print_error(t("sync.partial_failure", summary=", ".join(failed_hosts)))
            return 1

        if summary.dry_run:
            print_success(t("sync.planned", count=len(summary.results)))
        else:
            print_success(t("sync.completed", assigned=summary.assigned_count, sentinel=summary.sentinel_count))
        return 0


def run_sync(config: SyncConfig, session_factory: SessionFactory | None = None) -> int:
    """sync 실행 (CLI 진입점)"""
    return SyncRunner(config, session_factory).run()
