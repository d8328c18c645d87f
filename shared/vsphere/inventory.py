"""
shared/vsphere/inventory.py - pyVmomi 기반 호스트 인벤토리

ContainerView로 vim.HostSystem을 조회하여 빌드 번호와 연결 상태를 수집합니다.
범위(scope)를 지정하면 해당 클러스터/데이터센터/폴더 하위만 조회합니다.

Usage:
    from shared.vsphere.inventory import VSphereInventory

    inventory = VSphereInventory(service_instance)
    scope = inventory.resolve_scope("Cluster-A")
    hosts = inventory.list_hosts(scope)
"""

from __future__ import annotations

import http.client
import logging
from typing import Any

from pyVmomi import vim, vmodl

from core.exceptions import InventoryError, ScopeNotFoundError

from .types import HOST_TYPE, SCOPE_TYPES, ConnectionState, EntityRef, Host

logger = logging.getLogger(__name__)

_SCOPE_VIM_TYPES = {
    "ClusterComputeResource": vim.ClusterComputeResource,
    "ComputeResource": vim.ComputeResource,
    "Datacenter": vim.Datacenter,
    "Folder": vim.Folder,
}


def _moid(obj: Any) -> str:
    return str(obj._moId)


class VSphereInventory:
    """vCenter 인벤토리 제공자 (pyVmomi)"""

    def __init__(self, service_instance: Any):
        """초기화

        Args:
            service_instance: pyVim.connect.SmartConnect()가 반환한 ServiceInstance
        """
        self.service_instance = service_instance

    @property
    def content(self) -> Any:
        return self.service_instance.RetrieveContent()

    def _container_view(self, container: Any, vim_types: list[Any]) -> list[Any]:
        """ContainerView로 객체 목록 조회 후 view 정리"""
        view = self.content.viewManager.CreateContainerView(container, vim_types, True)
        try:
            return list(view.view)
        finally:
            view.Destroy()

    def resolve_scope(self, name: str) -> EntityRef:
        """이름으로 범위 객체 조회

        클러스터 → 컴퓨트 리소스 → 데이터센터 → 폴더 순으로 먼저 일치하는 객체를 사용합니다.

        Raises:
            ScopeNotFoundError: 일치하는 객체 없음
        """
        try:
            root = self.content.rootFolder
            for type_name in SCOPE_TYPES:
                for obj in self._container_view(root, [_SCOPE_VIM_TYPES[type_name]]):
                    if obj.name == name:
                        return EntityRef(type=type_name, id=_moid(obj), name=obj.name)
        except vmodl.MethodFault as e:
            raise InventoryError("resolve_scope", error_message=e.msg, cause=e) from e
        except (OSError, http.client.HTTPException) as e:
            raise InventoryError("resolve_scope", error_message=str(e), cause=e) from e

        raise ScopeNotFoundError(name)

    def _find_managed_object(self, ref: EntityRef) -> Any:
        vim_type = _SCOPE_VIM_TYPES.get(ref.type)
        if vim_type is None:
            raise ScopeNotFoundError(str(ref))
        for obj in self._container_view(self.content.rootFolder, [vim_type]):
            if _moid(obj) == ref.id:
                return obj
        raise ScopeNotFoundError(str(ref))

    def list_hosts(self, scope: EntityRef | None = None) -> list[Host]:
        """호스트 목록 조회

        Args:
            scope: 범위 (None이면 rootFolder 전체)

        Returns:
            Host 목록 (연결 상태 필터링 없음)
        """
        try:
            container = self._find_managed_object(scope) if scope else self.content.rootFolder
            host_objects = self._container_view(container, [vim.HostSystem])
            hosts = [self._to_host(obj) for obj in host_objects]
        except vmodl.MethodFault as e:
            raise InventoryError("list_hosts", error_message=e.msg, cause=e) from e
        except (OSError, http.client.HTTPException) as e:
            # 연결 끊김, 소켓 타임아웃 등
            raise InventoryError("list_hosts", error_message=str(e), cause=e) from e

        logger.debug(f"호스트 {len(hosts)}개 조회 (scope={scope})")
        return hosts

    @staticmethod
    def _to_host(obj: Any) -> Host:
        summary = obj.summary
        product = summary.config.product if summary.config else None
        build = str(product.build) if product and product.build else ""
        return Host(
            ref=EntityRef(type=HOST_TYPE, id=_moid(obj), name=obj.name),
            build=build,
            connection_state=ConnectionState.parse(summary.runtime.connectionState),
        )
