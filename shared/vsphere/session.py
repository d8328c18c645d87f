"""
shared/vsphere/session.py - vCenter 세션

REST 세션(CIS tagging)과 pyVmomi ServiceInstance(인벤토리)를 함께 관리합니다.
조정 로직은 전역 연결 상태 대신 이 세션 객체를 명시적으로 전달받습니다.

Usage:
    from shared.vsphere.session import VSphereSession

    with VSphereSession.connect("vcsa.example.com", "administrator@vsphere.local", "...") as session:
        hosts = session.inventory.list_hosts()
"""

from __future__ import annotations

import logging
import warnings
from typing import Any

import requests
from pyVim.connect import Disconnect, SmartConnect
from urllib3.exceptions import InsecureRequestWarning

from core.config import get_api_timeout
from core.exceptions import NotConnectedError

from .inventory import VSphereInventory
from .tagging import CisTaggingClient

logger = logging.getLogger(__name__)

SESSION_HEADER = "vmware-api-session-id"


def _base_url(server: str) -> str:
    if server.startswith(("http://", "https://")):
        return server.rstrip("/")
    return f"https://{server.rstrip('/')}"


class VSphereSession:
    """vCenter 세션 (REST + vSphere API)"""

    def __init__(
        self,
        server: str,
        http: requests.Session,
        service_instance: Any = None,
        timeout: int | None = None,
    ):
        self.server = server
        self.base_url = _base_url(server)
        self.http = http
        self.service_instance = service_instance
        self.timeout = timeout or get_api_timeout()
        self._inventory: VSphereInventory | None = None
        self._tagging: CisTaggingClient | None = None

    @property
    def endpoint(self) -> str:
        return self.base_url

    @classmethod
    def connect(
        cls,
        server: str,
        user: str,
        password: str,
        verify_ssl: bool = True,
        timeout: int | None = None,
    ) -> VSphereSession:
        """vCenter 로그인

        Args:
            server: vCenter 호스트명 또는 URL
            user: SSO 사용자
            password: 비밀번호
            verify_ssl: vCenter 인증서 검증 여부
            timeout: HTTP 타임아웃 (초)

        Raises:
            NotConnectedError: 로그인 실패
        """
        timeout = timeout or get_api_timeout()
        base_url = _base_url(server)

        http = requests.Session()
        http.verify = verify_ssl
        try:
            with warnings.catch_warnings():
                if not verify_ssl:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                response = http.post(f"{base_url}/api/session", auth=(user, password), timeout=timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            http.close()
            raise NotConnectedError(base_url, cause=e) from e

        http.headers[SESSION_HEADER] = response.json()

        host = base_url.split("://", 1)[1]
        try:
            service_instance = SmartConnect(
                host=host,
                user=user,
                pwd=password,
                disableSslCertValidation=not verify_ssl,
            )
        except Exception as e:
            http.close()
            raise NotConnectedError(base_url, cause=e) from e

        logger.info(f"vCenter 연결됨: {base_url}")
        return cls(server, http, service_instance, timeout)

    def is_connected(self) -> bool:
        """REST 세션과 vSphere API 세션이 모두 유효한지 확인"""
        if SESSION_HEADER not in self.http.headers or self.service_instance is None:
            return False

        try:
            with warnings.catch_warnings():
                if not self.http.verify:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                response = self.http.get(f"{self.base_url}/api/session", timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"세션 확인 실패: {e}")
            return False
        if not response.ok:
            return False

        try:
            return self.service_instance.content.sessionManager.currentSession is not None
        except Exception as e:
            logger.debug(f"vSphere API 세션 확인 실패: {e}")
            return False

    @property
    def inventory(self) -> VSphereInventory:
        if self._inventory is None:
            self._inventory = VSphereInventory(self.service_instance)
        return self._inventory

    @property
    def tagging(self) -> CisTaggingClient:
        if self._tagging is None:
            self._tagging = CisTaggingClient(self.http, self.base_url, self.timeout)
        return self._tagging

    def close(self) -> None:
        """세션 종료 (실패해도 무시)"""
        if SESSION_HEADER in self.http.headers:
            try:
                self.http.delete(f"{self.base_url}/api/session", timeout=self.timeout)
            except requests.RequestException as e:
                logger.debug(f"REST 세션 종료 실패: {e}")
            self.http.headers.pop(SESSION_HEADER, None)
        self.http.close()

        if self.service_instance is not None:
            try:
                Disconnect(self.service_instance)
            except Exception as e:
                logger.debug(f"vSphere API 세션 종료 실패: {e}")
            self.service_instance = None

    def __enter__(self) -> VSphereSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
