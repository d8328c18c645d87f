"""
shared/vsphere - vCenter 연동 (세션, 인벤토리, 태깅)

    from shared.vsphere import VSphereSession, EntityRef, Host
"""

from .session import VSphereSession
from .types import (
    HOST_TYPE,
    ConnectionState,
    EntityRef,
    Host,
    InventoryProvider,
    SessionProtocol,
    Tag,
    TagAssignment,
    TagCategory,
    TagService,
)

__all__ = [
    "VSphereSession",
    "HOST_TYPE",
    "ConnectionState",
    "EntityRef",
    "Host",
    "InventoryProvider",
    "SessionProtocol",
    "Tag",
    "TagAssignment",
    "TagCategory",
    "TagService",
]
