"""
tagging/esxi_release/catalog.py - 릴리스 카탈로그 로더

빌드 번호를 키로 하는 JSON 문서(로컬 파일 또는 HTTP(S))를 읽어
ReleaseCatalog로 변환합니다.

카탈로그 형식:
    {
        "20036589": {"Version": "ESXi 7.0 Update 3g", "Release Date": "2022-09-01", ...},
        ...
    }

위치 판별 규칙:
    1. 존재하는 로컬 파일이면 LocalPath
    2. file:// URL이면 LocalPath
    3. 그 외에는 RemoteURL

로컬 파일 읽기에 실패해도 네트워크로 대체하지 않으며,
원격 다운로드는 1회만 시도합니다.

Usage:
    from tagging.esxi_release.catalog import load_catalog

    catalog = load_catalog("https://mirror.example.com/esxi_builds.json")
    catalog["20036589"].version  # "ESXi 7.0 Update 3g"
"""

from __future__ import annotations

import json
import logging
import warnings
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import requests
from urllib3.exceptions import InsecureRequestWarning

from core.config import get_api_timeout, settings
from core.exceptions import CatalogUnavailableError

from .types import LocalPath, Location, ReleaseCatalog, ReleaseDescriptor, RemoteURL

logger = logging.getLogger(__name__)


def classify_location(raw: str | Path | Location) -> Location:
    """카탈로그 위치 판별 (존재하는 로컬 파일이 우선)"""
    if isinstance(raw, (LocalPath, RemoteURL)):
        return raw

    text = str(raw).strip()
    candidate = Path(text).expanduser()
    if candidate.is_file():
        return LocalPath(candidate)

    parsed = urlparse(text)
    if parsed.scheme == "file":
        return LocalPath(Path(unquote(parsed.path)))

    return RemoteURL(text)


def normalize_label(version: str) -> str:
    """릴리스 이름을 태그 이름으로 변환 (공백 → 밑줄)"""
    return version.replace(" ", "_")


def parse_catalog(document: Any, location: Location | None = None) -> ReleaseCatalog:
    """JSON 문서를 ReleaseCatalog로 변환

    최상위는 객체여야 하고, 각 항목은 문자열 Version 필드를 가진 객체여야 합니다.

    Raises:
        CatalogUnavailableError: 형식 오류
    """
    where = str(location) if location else "<document>"
    version_field = settings.CATALOG_VERSION_FIELD

    if not isinstance(document, Mapping):
        raise CatalogUnavailableError(where, f"최상위가 JSON 객체가 아님 ({type(document).__name__})")

    entries: dict[str, ReleaseDescriptor] = {}
    for build, value in document.items():
        if not isinstance(value, Mapping):
            raise CatalogUnavailableError(where, f"항목 '{build}'이 객체가 아님")
        version = value.get(version_field)
        if not isinstance(version, str) or not version:
            raise CatalogUnavailableError(where, f"항목 '{build}'에 {version_field} 필드 없음")
        entries[str(build)] = ReleaseDescriptor(version=version, build=str(build), fields=dict(value))

    return ReleaseCatalog(entries, location)


def _read_local(location: LocalPath) -> Any:
    try:
        text = location.path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogUnavailableError(str(location), "파일 읽기 실패", cause=e) from e

    try:
        return json.loads(text)
    except ValueError as e:
        raise CatalogUnavailableError(str(location), "JSON 파싱 실패", cause=e) from e


def _fetch_remote(location: RemoteURL, verify_tls: bool, timeout: int) -> Any:
    try:
        with warnings.catch_warnings():
            if not verify_tls:
                warnings.simplefilter("ignore", InsecureRequestWarning)
            response = requests.get(location.url, timeout=timeout, verify=verify_tls)
    except requests.RequestException as e:
        raise CatalogUnavailableError(location.url, "다운로드 실패", cause=e) from e

    if not 200 <= response.status_code < 300:
        raise CatalogUnavailableError(location.url, "HTTP 응답 오류", status_code=response.status_code)

    try:
        return response.json()
    except ValueError as e:
        raise CatalogUnavailableError(
            location.url, "JSON 파싱 실패", status_code=response.status_code, cause=e
        ) from e


def load_catalog(
    location: str | Path | Location,
    *,
    verify_tls: bool = False,
    timeout: int | None = None,
) -> ReleaseCatalog:
    """릴리스 카탈로그 로드

    Args:
        location: 로컬 경로, file:// URL, 또는 HTTP(S) URL
        verify_tls: 원격 다운로드 시 인증서 검증 여부 (기본 False: 내부 미러의 자체 서명 인증서 허용)
        timeout: 요청 타임아웃 (초)

    Returns:
        ReleaseCatalog

    Raises:
        CatalogUnavailableError: 읽기/다운로드/파싱 실패
    """
    resolved = classify_location(location)

    if isinstance(resolved, LocalPath):
        logger.info(f"로컬 카탈로그 로드: {resolved}")
        document = _read_local(resolved)
    else:
        if not verify_tls:
            logger.debug(f"인증서 검증 없이 다운로드: {resolved}")
        logger.info(f"원격 카탈로그 다운로드: {resolved}")
        document = _fetch_remote(resolved, verify_tls, timeout or get_api_timeout())

    catalog = parse_catalog(document, resolved)
    logger.info(f"카탈로그 빌드 {len(catalog)}개 로드됨")
    return catalog
