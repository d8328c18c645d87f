"""
shared/vsphere/types.py - vSphere 엔티티 및 서비스 Protocol 정의

인벤토리 제공자와 태그 서비스의 인터페이스 경계를 정의합니다.
조정 로직은 이 Protocol에만 의존하며, 실제 구현(pyVmomi / CIS REST)이나
테스트용 메모리 구현을 주입받습니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

HOST_TYPE = "HostSystem"

# 범위(scope)로 사용할 수 있는 인벤토리 타입
SCOPE_TYPES = ("ClusterComputeResource", "ComputeResource", "Datacenter", "Folder")


# =============================================================================
# 엔티티
# =============================================================================


@dataclass(frozen=True)
class EntityRef:
    """인벤토리 객체 참조 (MoRef)"""

    type: str
    id: str
    name: str = ""

    def to_object_id(self) -> dict[str, str]:
        """CIS tagging API의 DynamicID 형식"""
        return {"type": self.type, "id": self.id}

    def __str__(self) -> str:
        if self.name:
            return f"{self.type}:{self.name}"
        return f"{self.type}:{self.id}"


class ConnectionState(Enum):
    """호스트 연결 상태"""

    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    NOT_RESPONDING = "notResponding"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> ConnectionState:
        """vim / REST 표기를 모두 허용 (connected, CONNECTED, notResponding, NOT_RESPONDING)"""
        text = str(value or "").replace("_", "").lower()
        for state in cls:
            if state.value.lower() == text:
                return state
        return cls.UNKNOWN


@dataclass(frozen=True)
class Host:
    """ESXi 호스트"""

    ref: EntityRef
    build: str
    connection_state: ConnectionState = ConnectionState.CONNECTED

    @property
    def name(self) -> str:
        return self.ref.name or self.ref.id

    @property
    def is_disconnected(self) -> bool:
        return self.connection_state == ConnectionState.DISCONNECTED


@dataclass(frozen=True)
class TagCategory:
    """태그 카테고리"""

    id: str
    name: str
    cardinality: str = "SINGLE"
    description: str = ""
    associable_types: tuple[str, ...] = (HOST_TYPE,)


@dataclass(frozen=True)
class Tag:
    """카테고리 내 태그"""

    id: str
    name: str
    category_id: str
    description: str = ""


@dataclass(frozen=True)
class TagAssignment:
    """카테고리 범위의 (태그, 엔티티) 할당"""

    tag: Tag
    entity: EntityRef


# =============================================================================
# 서비스 Protocol
# =============================================================================


class InventoryProvider(Protocol):
    """인벤토리 제공자"""

    def list_hosts(self, scope: EntityRef | None = None) -> list[Host]:
        """호스트 목록 (scope 없으면 전체)"""
        ...

    def resolve_scope(self, name: str) -> EntityRef:
        """이름으로 클러스터/데이터센터/폴더 조회"""
        ...


class TagService(Protocol):
    """태그 서비스"""

    def get_category(self, name: str) -> TagCategory | None:
        """이름으로 카테고리 조회"""
        ...

    def create_category(
        self,
        name: str,
        cardinality: str = "SINGLE",
        description: str = "",
        associable_types: tuple[str, ...] = (HOST_TYPE,),
    ) -> TagCategory:
        """카테고리 생성"""
        ...

    def get_tag(self, name: str, category: TagCategory | None = None) -> Tag | None:
        """이름으로 태그 조회 (category 없으면 전체 카테고리)"""
        ...

    def create_tag(self, name: str, category: TagCategory, description: str = "") -> Tag:
        """카테고리에 태그 생성"""
        ...

    def get_assignment(self, category: TagCategory, entity: EntityRef) -> TagAssignment | None:
        """엔티티의 카테고리 내 현재 할당 조회"""
        ...

    def create_assignment(self, tag: Tag, entity: EntityRef) -> TagAssignment:
        """태그 할당"""
        ...

    def remove_assignment(self, assignment: TagAssignment) -> None:
        """태그 할당 해제"""
        ...


class SessionProtocol(Protocol):
    """vCenter 세션"""

    @property
    def endpoint(self) -> str:
        """접속 대상"""
        ...

    def is_connected(self) -> bool:
        """활성 세션 여부"""
        ...
