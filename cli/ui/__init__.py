# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

CLI 전용 출력 헬퍼 (진행 메시지, 경고, 패널 헤더 등)
"""

from .console import (
    INDENT,
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    get_console,
    get_logging_handler,
    print_error,
    print_info,
    print_panel_header,
    print_step_header,
    print_sub_task,
    print_sub_warning,
    print_success,
    print_warning,
    set_quiet,
)

__all__: list[str] = [
    "console",
    "get_console",
    "get_logging_handler",
    "set_quiet",
    # 표준 출력 심볼
    "SYMBOL_SUCCESS",
    "SYMBOL_ERROR",
    "SYMBOL_WARNING",
    "SYMBOL_INFO",
    "INDENT",
    # 메시지 출력
    "print_success",
    "print_error",
    "print_warning",
    "print_info",
    "print_step_header",
    "print_sub_task",
    "print_sub_warning",
    "print_panel_header",
]
