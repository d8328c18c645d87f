"""
tests/conftest.py - pytest 공통 픽스처

vCenter 없이 조정 로직을 검증하기 위한 메모리 구현과 카탈로그 픽스처를 제공합니다.

Usage:
    def test_something(tag_service, make_host, catalog_file):
        # tag_service: InMemoryTagService (호출 기록 포함)
        # make_host: Host 팩토리
        # catalog_file: 테스트용 카탈로그 JSON 경로
        pass
"""

import json
import os
import sys
from itertools import count
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.exceptions import ScopeNotFoundError, TagServiceError  # noqa: E402
from shared.vsphere.types import (  # noqa: E402
    HOST_TYPE,
    ConnectionState,
    EntityRef,
    Host,
    Tag,
    TagAssignment,
    TagCategory,
)

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정 (실행 환경의 ERT_* 변수 영향 제거)"""
    for name in list(os.environ):
        if name.startswith("ERT_") or name.startswith("VSPHERE_"):
            monkeypatch.delenv(name, raising=False)
    yield


# =============================================================================
# 메모리 구현
# =============================================================================


class InMemoryTagService:
    """테스트용 태그 서비스

    모든 변경 호출을 events에 기록하며, fail_on으로 특정 호출을 실패시킬 수 있습니다.

    Example:
        service.fail_on[("create_assignment", "host-2")] = 403
    """

    def __init__(self):
        self._ids = count(1)
        self.categories: dict[str, TagCategory] = {}
        self.tags: dict[str, Tag] = {}
        self.attached: dict[str, set[str]] = {}  # entity id -> tag ids
        self.events: list[tuple[str, str, str]] = []
        self.fail_on: dict[tuple[str, str], int] = {}

    def _next_id(self, prefix: str) -> str:
        return f"urn:vmomi:Inventory{prefix}:{next(self._ids)}"

    def _check(self, operation: str, key: str) -> None:
        status = self.fail_on.get((operation, key))
        if status is not None:
            raise TagServiceError(operation, status, f"injected failure: {key}")

    # 카테고리

    def get_category(self, name):
        for category in self.categories.values():
            if category.name == name:
                return category
        return None

    def create_category(self, name, cardinality="SINGLE", description="", associable_types=(HOST_TYPE,)):
        self._check("create_category", name)
        category = TagCategory(
            id=self._next_id("ServiceCategory"),
            name=name,
            cardinality=cardinality,
            description=description,
            associable_types=tuple(associable_types),
        )
        self.categories[category.id] = category
        self.events.append(("create_category", name, ""))
        return category

    # 태그

    def get_tag(self, name, category=None):
        self._check("get_tag", name)
        for tag in self.tags.values():
            if tag.name == name and (category is None or tag.category_id == category.id):
                return tag
        return None

    def create_tag(self, name, category, description=""):
        self._check("create_tag", name)
        tag = Tag(id=self._next_id("ServiceTag"), name=name, category_id=category.id, description=description)
        self.tags[tag.id] = tag
        self.events.append(("create_tag", name, category.name))
        return tag

    # 할당

    def get_assignment(self, category, entity):
        self._check("get_assignment", entity.id)
        for tag_id in sorted(self.attached.get(entity.id, ())):
            tag = self.tags[tag_id]
            if tag.category_id == category.id:
                return TagAssignment(tag=tag, entity=entity)
        return None

    def create_assignment(self, tag, entity):
        self._check("create_assignment", entity.id)
        attached = self.attached.setdefault(entity.id, set())
        category = self.categories.get(tag.category_id)
        if category is not None and category.cardinality == "SINGLE":
            # SINGLE 카테고리는 엔티티당 하나만 허용
            for tag_id in attached:
                if self.tags[tag_id].category_id == category.id and tag_id != tag.id:
                    raise TagServiceError("create_assignment", 400, "cardinality violation")
        attached.add(tag.id)
        self.events.append(("create_assignment", entity.id, tag.name))
        return TagAssignment(tag=tag, entity=entity)

    def remove_assignment(self, assignment):
        self._check("remove_assignment", assignment.entity.id)
        self.attached.get(assignment.entity.id, set()).discard(assignment.tag.id)
        self.events.append(("remove_assignment", assignment.entity.id, assignment.tag.name))

    # 헬퍼

    def tag_names_for(self, entity_id: str, category_name: str) -> list[str]:
        category = self.get_category(category_name)
        if category is None:
            return []
        return sorted(
            self.tags[tag_id].name
            for tag_id in self.attached.get(entity_id, ())
            if self.tags[tag_id].category_id == category.id
        )

    def mutations(self) -> list[tuple[str, str, str]]:
        return list(self.events)


class StaticInventory:
    """테스트용 인벤토리 (고정 호스트 목록)"""

    def __init__(self, hosts=None, scopes=None):
        self.hosts: list[Host] = list(hosts or [])
        self.scopes: dict[str, list[str]] = dict(scopes or {})  # scope name -> host ids
        self.requested_scopes: list = []

    def list_hosts(self, scope=None):
        self.requested_scopes.append(scope)
        if scope is None:
            return list(self.hosts)
        members = set(self.scopes.get(scope.name, ()))
        return [h for h in self.hosts if h.ref.id in members]

    def resolve_scope(self, name):
        if name not in self.scopes:
            raise ScopeNotFoundError(name)
        return EntityRef(type="ClusterComputeResource", id=f"domain-c{len(name)}", name=name)


class FakeSession:
    """테스트용 vCenter 세션"""

    def __init__(self, inventory=None, tagging=None, connected=True, endpoint="https://vcsa.test"):
        self.inventory = inventory if inventory is not None else StaticInventory()
        self.tagging = tagging if tagging is not None else InMemoryTagService()
        self.connected = connected
        self.closed = False
        self._endpoint = endpoint

    @property
    def endpoint(self):
        return self._endpoint

    def is_connected(self):
        return self.connected

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


# =============================================================================
# 픽스처
# =============================================================================


CATALOG_DOCUMENT = {
    "20036589": {"Version": "ESXi 7.0 Update 3g", "Release Date": "2022-09-01", "Build Number": "20036589"},
    "21424296": {"Version": "ESXi 8.0 Update 1a", "Release Date": "2023-06-01", "Build Number": "21424296"},
    "21493926": {"Version": "ESXi 8.0 Update 1c", "Release Date": "2023-07-27", "Build Number": "21493926"},
}


@pytest.fixture
def catalog_document():
    """테스트용 카탈로그 문서"""
    return json.loads(json.dumps(CATALOG_DOCUMENT))


@pytest.fixture
def catalog_file(tmp_path, catalog_document):
    """테스트용 카탈로그 파일"""
    path = tmp_path / "esxi_builds.json"
    path.write_text(json.dumps(catalog_document), encoding="utf-8")
    return path


@pytest.fixture
def make_host():
    """Host 팩토리"""

    def _make(host_id, build, name=None, state=ConnectionState.CONNECTED):
        return Host(
            ref=EntityRef(type=HOST_TYPE, id=host_id, name=name or f"{host_id}.lab.local"),
            build=build,
            connection_state=state,
        )

    return _make


@pytest.fixture
def tag_service():
    """InMemoryTagService"""
    return InMemoryTagService()


@pytest.fixture
def inventory():
    """빈 StaticInventory"""
    return StaticInventory()


@pytest.fixture
def fake_session(inventory, tag_service):
    """FakeSession (inventory, tag_service 공유)"""
    return FakeSession(inventory=inventory, tagging=tag_service)


@pytest.fixture
def make_session():
    """호스트 목록으로 FakeSession 생성"""

    def _make(hosts, connected=True):
        return FakeSession(inventory=StaticInventory(hosts), connected=connected)

    return _make
