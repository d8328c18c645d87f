# core/__init__.py
"""
core - ESXi Release Tags 인프라

설정, 예외 계층, 실패 수집기를 포함하는 최상위 패키지입니다.

아키텍처:
    core/
    ├── config.py       # 중앙 설정 관리 (Settings, LogConfig, 환경변수)
    ├── errors.py       # 호스트 단위 실패 수집기
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, get_catalog_location
    location = get_catalog_location()

    # 예외 처리
    from core.exceptions import TagServiceError, is_access_denied
    try:
        tagging.create_assignment(tag, host.ref)
    except TagServiceError as e:
        if is_access_denied(e):
            print("권한이 없습니다")
"""
