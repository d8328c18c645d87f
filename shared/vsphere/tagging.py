"""
shared/vsphere/tagging.py - vCenter CIS Tagging REST 클라이언트

vSphere 7.0 U2 이상의 `/api/cis/tagging` 엔드포인트를 사용하여
카테고리, 태그, 태그 할당을 관리합니다.

모든 호출은 1회만 시도하며, 실패 시 TagServiceError를 발생시킵니다.
(HTTP 상태 코드와 vCenter 에러 메시지 포함)

Usage:
    from shared.vsphere.tagging import CisTaggingClient

    client = CisTaggingClient(http_session, "https://vcsa.example.com")
    category = client.get_category("tc_esxi_release_names")
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from core.config import get_api_timeout
from core.exceptions import TagServiceError

from .types import HOST_TYPE, EntityRef, Tag, TagAssignment, TagCategory

logger = logging.getLogger(__name__)

TAGGING_PATH = "/api/cis/tagging"


class CisTaggingClient:
    """CIS Tagging REST API 클라이언트

    태그는 추가만 되고 삭제/이름 변경되지 않으므로 ID 기준으로 캐시합니다.
    """

    def __init__(
        self,
        http: requests.Session,
        base_url: str,
        timeout: int | None = None,
    ):
        """초기화

        Args:
            http: 인증 헤더(vmware-api-session-id)가 설정된 requests.Session
            base_url: vCenter 주소 (예: https://vcsa.example.com)
            timeout: 요청 타임아웃 (초)
        """
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or get_api_timeout()
        self._tag_cache: dict[str, Tag] = {}
        self._category_cache: dict[str, TagCategory] = {}

    # =========================================================================
    # HTTP
    # =========================================================================

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """단일 요청 실행 (재시도 없음)"""
        url = f"{self.base_url}{TAGGING_PATH}{path}"
        logger.debug("%s %s (%s)", method, url, operation)

        try:
            response = self.http.request(method, url, params=params, json=json, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TagServiceError.from_http_error(operation, e) from e

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TagServiceError(operation, response.status_code, "JSON 응답 파싱 실패", cause=e) from e

    # =========================================================================
    # 카테고리
    # =========================================================================

    def _describe_category(self, category_id: str) -> TagCategory:
        if category_id not in self._category_cache:
            data = self._request("GET", f"/category/{category_id}", "get_category")
            self._category_cache[category_id] = TagCategory(
                id=data["id"],
                name=data["name"],
                cardinality=data.get("cardinality", "SINGLE"),
                description=data.get("description", ""),
                associable_types=tuple(data.get("associable_types") or ()),
            )
        return self._category_cache[category_id]

    def get_category(self, name: str) -> TagCategory | None:
        """이름으로 카테고리 조회 (없으면 None)"""
        for category_id in self._request("GET", "/category", "list_categories") or []:
            category = self._describe_category(category_id)
            if category.name == name:
                return category
        return None

    def create_category(
        self,
        name: str,
        cardinality: str = "SINGLE",
        description: str = "",
        associable_types: tuple[str, ...] = (HOST_TYPE,),
    ) -> TagCategory:
        """카테고리 생성"""
        category_id = self._request(
            "POST",
            "/category",
            "create_category",
            json={
                "name": name,
                "description": description,
                "cardinality": cardinality,
                "associable_types": list(associable_types),
            },
        )
        category = TagCategory(
            id=category_id,
            name=name,
            cardinality=cardinality,
            description=description,
            associable_types=tuple(associable_types),
        )
        self._category_cache[category_id] = category
        logger.info(f"카테고리 생성: {name} ({category_id})")
        return category

    # =========================================================================
    # 태그
    # =========================================================================

    def _describe_tag(self, tag_id: str) -> Tag:
        if tag_id not in self._tag_cache:
            data = self._request("GET", f"/tag/{tag_id}", "get_tag")
            self._tag_cache[tag_id] = Tag(
                id=data["id"],
                name=data["name"],
                category_id=data["category_id"],
                description=data.get("description", ""),
            )
        return self._tag_cache[tag_id]

    def get_tag(self, name: str, category: TagCategory | None = None) -> Tag | None:
        """이름으로 태그 조회

        Args:
            name: 태그 이름
            category: 지정하면 해당 카테고리 내에서만 조회

        Returns:
            Tag 또는 None
        """
        for tag in list(self._tag_cache.values()):
            if tag.name == name and (category is None or tag.category_id == category.id):
                return tag

        if category is not None:
            tag_ids = self._request(
                "POST",
                "/tag",
                "list_tags_for_category",
                params={"action": "list-tags-for-category"},
                json={"category_id": category.id},
            )
        else:
            tag_ids = self._request("GET", "/tag", "list_tags")

        for tag_id in tag_ids or []:
            tag = self._describe_tag(tag_id)
            if tag.name == name:
                return tag
        return None

    def create_tag(self, name: str, category: TagCategory, description: str = "") -> Tag:
        """카테고리에 태그 생성"""
        tag_id = self._request(
            "POST",
            "/tag",
            "create_tag",
            json={"name": name, "description": description, "category_id": category.id},
        )
        tag = Tag(id=tag_id, name=name, category_id=category.id, description=description)
        self._tag_cache[tag_id] = tag
        logger.info(f"태그 생성: {category.name}/{name} ({tag_id})")
        return tag

    # =========================================================================
    # 할당
    # =========================================================================

    def get_assignment(self, category: TagCategory, entity: EntityRef) -> TagAssignment | None:
        """엔티티에 할당된 태그 중 카테고리에 속한 것 조회"""
        tag_ids = self._request(
            "POST",
            "/tag-association",
            "list_attached_tags",
            params={"action": "list-attached-tags"},
            json={"object_id": entity.to_object_id()},
        )
        for tag_id in tag_ids or []:
            tag = self._describe_tag(tag_id)
            if tag.category_id == category.id:
                return TagAssignment(tag=tag, entity=entity)
        return None

    def create_assignment(self, tag: Tag, entity: EntityRef) -> TagAssignment:
        """태그 할당"""
        self._request(
            "POST",
            f"/tag-association/{tag.id}",
            "attach",
            params={"action": "attach"},
            json={"object_id": entity.to_object_id()},
        )
        return TagAssignment(tag=tag, entity=entity)

    def remove_assignment(self, assignment: TagAssignment) -> None:
        """태그 할당 해제"""
        self._request(
            "POST",
            f"/tag-association/{assignment.tag.id}",
            "detach",
            params={"action": "detach"},
            json={"object_id": assignment.entity.to_object_id()},
        )
