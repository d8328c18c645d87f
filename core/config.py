"""
core/config.py - 중앙 설정 관리

애플리케이션 전체에서 사용하는 기본값과 환경변수 기반 설정을 정의합니다.

환경변수:
    ERT_CATALOG_URL: 릴리스 카탈로그 기본 위치 (URL 또는 로컬 경로)
    ERT_CATALOG_VERIFY_TLS: 카탈로그 다운로드 시 인증서 검증 여부 (기본: false)
    ERT_CATEGORY_NAME: 태그 카테고리 이름 (기본: tc_esxi_release_names)
    ERT_API_TIMEOUT: HTTP 요청 타임아웃 (초)
    LOG_LEVEL / LOG_FORMAT: 로깅 설정

Usage:
    from core.config import settings, get_catalog_location

    location = get_catalog_location()
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

PACKAGE_NAME = "esxi-release-tags"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


# =============================================================================
# 환경변수 헬퍼
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """환경변수를 bool로 변환

    인식할 수 없는 값이면 기본값을 반환합니다.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def get_env_int(name: str, default: int) -> int:
    """환경변수를 int로 변환 (실패 시 기본값)"""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_env_str(name: str, default: str) -> str:
    """환경변수 문자열 (비어있으면 기본값)"""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


# =============================================================================
# 기본 설정
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """불변 기본 설정값"""

    # 태그 네임스페이스
    DEFAULT_CATEGORY_NAME: str = "tc_esxi_release_names"
    CATEGORY_DESCRIPTION: str = "ESXi release names derived from host build numbers"
    CATEGORY_CARDINALITY: str = "SINGLE"
    ASSOCIABLE_TYPES: tuple[str, ...] = ("HostSystem",)
    SENTINEL_TAG_NAME: str = "no_matching_release"
    SENTINEL_TAG_DESCRIPTION: str = "Host build not found in the release catalog"

    # 릴리스 카탈로그
    DEFAULT_CATALOG_URL: str = (
        "https://raw.githubusercontent.com/dominikzorgnotti/vmware_product_releases_machine-readable/"
        "main/index/kb2143832_vmware_vsphere_esxi_table0_release_as-index.json"
    )
    CATALOG_VERSION_FIELD: str = "Version"

    # HTTP
    API_TIMEOUT: int = 30

    # 출력
    OUTPUT_FORMATS: tuple[str, ...] = ("console", "json")


settings = Settings()


def get_catalog_location() -> str:
    """카탈로그 위치 (ERT_CATALOG_URL 우선)"""
    return get_env_str("ERT_CATALOG_URL", settings.DEFAULT_CATALOG_URL)


def get_catalog_verify_tls() -> bool:
    """카탈로그 다운로드 시 TLS 인증서 검증 여부

    내부 미러의 자체 서명 인증서를 허용하기 위해 기본값은 False입니다.
    """
    return get_env_bool("ERT_CATALOG_VERIFY_TLS", default=False)


def get_category_name() -> str:
    """태그 카테고리 이름"""
    return get_env_str("ERT_CATEGORY_NAME", settings.DEFAULT_CATEGORY_NAME)


def get_api_timeout() -> int:
    """HTTP 타임아웃 (초)"""
    timeout = get_env_int("ERT_API_TIMEOUT", settings.API_TIMEOUT)
    return timeout if timeout > 0 else settings.API_TIMEOUT


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    quiet_loggers: list[str] = field(default_factory=lambda: ["urllib3", "requests", "pyVmomi"])

    @classmethod
    def from_env(cls, default_level: str = "INFO") -> LogConfig:
        """LOG_LEVEL, LOG_FORMAT 환경변수에서 로드"""
        config = cls()
        config.level = get_env_str("LOG_LEVEL", default_level).upper()
        config.format = get_env_str("LOG_FORMAT", config.format)
        return config

    def apply(self, handler: logging.Handler | None = None) -> None:
        """루트 로거에 설정 적용

        handler를 지정하면 기본 StreamHandler 대신 사용합니다 (예: RichHandler).
        """
        level = getattr(logging, self.level.upper(), logging.INFO)
        if handler is not None:
            logging.basicConfig(level=level, handlers=[handler], force=True)
        else:
            logging.basicConfig(level=level, format=self.format, datefmt=self.date_format, force=True)
        for name in self.quiet_loggers:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))


# =============================================================================
# 프로젝트 정보
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로"""
    return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_version() -> str:
    """버전 문자열 반환

    version.txt를 우선 사용하고, 없으면 설치된 패키지 메타데이터를 사용합니다.
    """
    version_file = get_project_root() / "version.txt"
    if version_file.is_file():
        text = version_file.read_text(encoding="utf-8").strip()
        if text:
            return text

    from importlib.metadata import PackageNotFoundError, version

    try:
        return version(PACKAGE_NAME)
    except PackageNotFoundError:
        return "0.0.0"
