"""
tagging/esxi_release/reporter.py - 조정 결과 리포터

콘솔 요약(rich 테이블)과 JSON 파일 출력을 제공합니다.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .types import HostStatus, ReconcileSummary

logger = logging.getLogger(__name__)

_STATUS_STYLE = {
    HostStatus.ASSIGNED: "green",
    HostStatus.SENTINEL: "yellow",
    HostStatus.FAILED: "red",
    HostStatus.PLANNED: "cyan",
}


class ReconcileReporter:
    """조정 결과 리포터"""

    def __init__(self, summary: ReconcileSummary):
        self.summary = summary

    def build_host_table(self) -> Table:
        """호스트별 결과 테이블"""
        title = f"{self.summary.category_name} ({len(self.summary.results)} hosts)"
        table = Table(title=title, show_lines=False)
        table.add_column("Host", style="bold")
        table.add_column("Build")
        table.add_column("Previous", style="dim")
        table.add_column("Tag")
        table.add_column("Status", justify="center")
        table.add_column("Error", style="red")

        for result in sorted(self.summary.results, key=lambda r: r.host.name):
            style = _STATUS_STYLE.get(result.status, "")
            table.add_row(
                escape(result.host.name),
                result.build,
                escape(result.previous_tag or "-"),
                escape(result.tag_name),
                f"[{style}]{result.status.value}[/{style}]" if style else result.status.value,
                escape(result.error),
            )
        return table

    def build_totals_table(self) -> Table:
        """집계 테이블"""
        s = self.summary
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("항목", style="dim")
        table.add_column("값")

        table.add_row("카탈로그", escape(f"{s.catalog_location} ({s.catalog_size}개 빌드)"))
        if s.scope:
            table.add_row("범위", escape(str(s.scope)))
        table.add_row("대상 호스트", f"{s.total_hosts}개 (disconnected 제외 {s.skipped_hosts}개)")
        table.add_row("고유 빌드", f"{len(s.builds)}개")
        table.add_row("매핑된 빌드", f"{len(s.build_mapping)}개")
        table.add_row("카탈로그에 없는 빌드", escape(", ".join(s.unmapped_builds)) or "-")
        created_label = "생성 예정 객체" if s.dry_run else "생성된 객체"
        table.add_row(created_label, escape(", ".join(s.created_objects)) or "-")
        table.add_row("릴리스 태그 할당", f"{s.assigned_count}건")
        table.add_row("sentinel 할당", f"{s.sentinel_count}건")
        table.add_row("실패", f"[red]{s.failed_count}건[/red]" if s.failed_count else "0건")
        return table

    def print_summary(self, console: Console | None = None, show_hosts: bool = True) -> None:
        """콘솔에 요약 출력"""
        console = console or Console()
        console.print()
        if show_hosts and self.summary.results:
            console.print(self.build_host_table())
        console.print(self.build_totals_table())

        if self.summary.failures:
            console.print()
            console.print("[bold red]호스트 단위 실패[/bold red]")
            for failure in self.summary.failures:
                console.print(f"  [red]{escape(str(failure))}[/red]")

    def to_dict(self) -> dict:
        data = self.summary.to_dict()
        data["generated_at"] = datetime.now().isoformat(timespec="seconds")
        return data

    def write_json(self, output_path: str | Path) -> Path:
        """JSON 파일로 저장"""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"리포트 저장됨: {path}")
        return path
