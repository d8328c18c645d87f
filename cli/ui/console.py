"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력을 위한 함수들
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

# HTTP / vSphere SDK 노이즈 로그 제한
logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
logging.getLogger("pyVmomi").setLevel(logging.WARNING)


def get_console(quiet: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
        quiet=quiet,
    )


# 전역 콘솔 인스턴스
console = get_console()


def set_quiet(quiet: bool) -> None:
    """최소 출력 모드 전환 (-q)"""
    console.quiet = quiet


def get_logging_handler() -> RichHandler:
    """루트 로거에 연결할 Rich 핸들러"""
    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"

INDENT = "   "  # Step 내 부작업 들여쓰기 (3칸)


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)

    quiet 모드에서도 stderr로 출력합니다.
    """
    if console.quiet:
        Console(stderr=True).print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")
        return
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """정보 메시지 출력 (파란색)"""
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_step_header(step: int, message: str) -> None:
    """Step 헤더 출력 (예: Step 1: 카탈로그 로드 중...)"""
    console.print(f"[bold cyan]Step {step}: {escape(message)}[/bold cyan]")


def print_sub_task(message: str) -> None:
    """하위 작업 진행 출력 (들여쓰기)

    Example:
        print_step_header(1, "조정 실행 중...")
        print_sub_task("호스트 12개")
    """
    console.print(f"{INDENT}{escape(message)}")


def print_sub_warning(message: str) -> None:
    """하위 작업 경고 출력 (들여쓰기 + 노란색)"""
    console.print(f"{INDENT}[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_panel_header(title: str, subtitle: str | None = None) -> None:
    """제목과 부제목을 포함한 패널 헤더를 출력합니다."""
    body = f"[bold blue]{escape(title)}[/]"
    if subtitle:
        body = f"{body}\n[dim]{escape(subtitle)}[/]"
    console.print(Panel(body, border_style="blue", padding=(1, 2)))
