"""
tests/core/test_core_config.py - core/config.py 테스트
"""

import logging
from pathlib import Path

import pytest

from core.config import (
    LogConfig,
    Settings,
    get_api_timeout,
    get_catalog_location,
    get_catalog_verify_tls,
    get_category_name,
    get_env_bool,
    get_env_int,
    get_env_str,
    get_project_root,
    get_version,
    settings,
)


class TestSettings:
    """Settings 데이터클래스 테스트"""

    def test_settings_is_frozen(self):
        """설정이 불변인지 확인"""
        with pytest.raises(Exception):  # FrozenInstanceError
            settings.DEFAULT_CATEGORY_NAME = "other"

    def test_default_values(self):
        """기본값 확인"""
        assert settings.DEFAULT_CATEGORY_NAME == "tc_esxi_release_names"
        assert settings.SENTINEL_TAG_NAME == "no_matching_release"
        assert settings.CATEGORY_CARDINALITY == "SINGLE"
        assert settings.ASSOCIABLE_TYPES == ("HostSystem",)
        assert settings.CATALOG_VERSION_FIELD == "Version"
        assert settings.API_TIMEOUT == 30

    def test_default_catalog_is_https(self):
        assert Settings().DEFAULT_CATALOG_URL.startswith("https://")


class TestEnvironmentHelpers:
    """환경변수 헬퍼 테스트"""

    @pytest.mark.parametrize("value", ["true", "1", "YES", " on "])
    def test_get_env_bool_true_values(self, monkeypatch, value):
        monkeypatch.setenv("TEST_BOOL", value)
        assert get_env_bool("TEST_BOOL") is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "OFF"])
    def test_get_env_bool_false_values(self, monkeypatch, value):
        monkeypatch.setenv("TEST_BOOL", value)
        assert get_env_bool("TEST_BOOL", default=True) is False

    def test_get_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("TEST_BOOL", raising=False)
        assert get_env_bool("TEST_BOOL", default=True) is True

    def test_get_env_bool_invalid(self, monkeypatch):
        """인식할 수 없는 값은 기본값"""
        monkeypatch.setenv("TEST_BOOL", "maybe")
        assert get_env_bool("TEST_BOOL") is False

    def test_get_env_int_valid(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "42")
        assert get_env_int("TEST_INT", 0) == 42

    def test_get_env_int_invalid(self, monkeypatch):
        monkeypatch.setenv("TEST_INT", "abc")
        assert get_env_int("TEST_INT", 7) == 7

    def test_get_env_str_blank(self, monkeypatch):
        """빈 문자열은 기본값"""
        monkeypatch.setenv("TEST_STR", "  ")
        assert get_env_str("TEST_STR", "fallback") == "fallback"


class TestRuntimeSettings:
    """환경변수 기반 설정 테스트"""

    def test_catalog_location_default(self):
        assert get_catalog_location() == settings.DEFAULT_CATALOG_URL

    def test_catalog_location_override(self, monkeypatch):
        monkeypatch.setenv("ERT_CATALOG_URL", "/srv/mirror/esxi.json")
        assert get_catalog_location() == "/srv/mirror/esxi.json"

    def test_catalog_verify_tls_defaults_off(self):
        """카탈로그 인증서 검증은 기본 비활성화"""
        assert get_catalog_verify_tls() is False

    def test_catalog_verify_tls_opt_in(self, monkeypatch):
        monkeypatch.setenv("ERT_CATALOG_VERIFY_TLS", "true")
        assert get_catalog_verify_tls() is True

    def test_category_name_override(self, monkeypatch):
        monkeypatch.setenv("ERT_CATEGORY_NAME", "esxi_releases")
        assert get_category_name() == "esxi_releases"

    def test_api_timeout_rejects_non_positive(self, monkeypatch):
        monkeypatch.setenv("ERT_API_TIMEOUT", "0")
        assert get_api_timeout() == settings.API_TIMEOUT


class TestLogConfig:
    """LogConfig 테스트"""

    def test_default_values(self):
        config = LogConfig()
        assert config.level == "INFO"
        assert "%(levelname)s" in config.format
        assert "pyVmomi" in config.quiet_loggers

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "%(message)s")

        config = LogConfig.from_env()

        assert config.level == "DEBUG"
        assert config.format == "%(message)s"

    def test_from_env_default_level(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert LogConfig.from_env(default_level="WARNING").level == "WARNING"

    def test_apply_with_handler(self):
        """핸들러 지정 시 루트 로거에 연결, 노이즈 로거는 WARNING 이상"""
        handler = logging.NullHandler()
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))
        try:
            LogConfig(level="DEBUG").apply(handler)

            assert root.level == logging.DEBUG
            assert handler in root.handlers
            assert logging.getLogger("urllib3").level == logging.WARNING
        finally:
            root.handlers[:] = saved[1]
            root.setLevel(saved[0])


class TestProjectInfo:
    """프로젝트 정보 테스트"""

    def test_get_project_root(self):
        root = get_project_root()
        assert isinstance(root, Path)
        assert (root / "core").is_dir()

    def test_get_version_returns_string(self):
        version = get_version()
        assert isinstance(version, str)
        assert len(version) > 0

    def test_version_format(self):
        """버전 형식 확인 (x.y.z)"""
        parts = get_version().split(".")
        assert len(parts) >= 2
        for part in parts:
            assert part.isdigit(), f"버전 파트는 숫자여야 함: {part}"
