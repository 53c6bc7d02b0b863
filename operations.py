# operations.py

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import config
from state import (
    Document,
    FieldKind,
    ImportMode,
    InterfaceConfig,
    PeerConfig,
    STORE_KEYS,
)
from store import SectionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplyPlan:
    # store option -> encoded value, interface section only (full imports)
    interface_updates: Dict[str, Any] = field(default_factory=dict)
    # one option map per peer section to create
    peers: List[Dict[str, Any]] = field(default_factory=list)


def peer_section_type(section_id: str) -> str:
    return f"{config.PEER_SECTION_PREFIX}{section_id}"


def interface_device(section_id: str) -> str:
    return config.DEVICE_NAME.format(section_id=section_id)


def _encode(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode(v) for v in value]
    return str(value)


def _sparse(fields: Dict[FieldKind, Any]) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    for kind, value in fields.items():
        encoded = _encode(value)
        if encoded is not None:
            options[STORE_KEYS[kind]] = encoded
    return options


def _interface_options(iface: InterfaceConfig) -> Dict[str, Any]:
    return _sparse({
        FieldKind.NODE_ID: iface.node_id,
        FieldKind.PRIVATE_KEY: iface.private_key,
        FieldKind.PUBLIC_KEY: iface.public_key,
        FieldKind.IP_ADDR: iface.ip_addresses,
        FieldKind.PASSCODE: iface.passcode,
        FieldKind.CRYPTO: iface.crypto,
        FieldKind.MULTI_SOCKET: iface.multisocket,
        FieldKind.LISTEN: iface.listen_ports,
        FieldKind.MTU: iface.mtu,
    })


def _peer_options(peer: PeerConfig) -> Dict[str, Any]:
    return _sparse({
        FieldKind.DISABLED: peer.disabled,
        FieldKind.NODE_ID: peer.node_id,
        FieldKind.NODE_TYPE: peer.node_type,
        FieldKind.PUBLIC_KEY: peer.public_key,
        FieldKind.IP_ADDR: peer.ip_addresses,
        FieldKind.SUBNET: peer.subnet,
        FieldKind.ROUTE_SUBNET: peer.route_subnet,
        FieldKind.ADDRESS: peer.address,
    })


def plan_apply(
    *,
    document: Document,
    mode: Union[ImportMode, str],
) -> ApplyPlan:
    mode = ImportMode(mode)

    interface_updates: Dict[str, Any] = {}
    if mode is ImportMode.FULL:
        if document.interface is None:
            raise ValueError("A full import needs an [Interface] record")
        interface_updates = _interface_options(document.interface)

    return ApplyPlan(
        interface_updates=interface_updates,
        peers=[_peer_options(peer) for peer in document.peers.values()],
    )


def needs_overwrite_confirmation(
    *,
    current_private_key: Optional[str],
    document: Document,
) -> bool:
    """
    True when a full import would replace an interface that already has a
    different private key. Asking is up to the caller.
    """
    if not current_private_key or document.interface is None:
        return False
    return current_private_key != document.interface.private_key


def remove_peers(
    *,
    store: SectionStore,
    section_id: str,
) -> int:
    peers = store.sections(peer_section_type(section_id))

    for section in peers:
        store.remove(section.section_id)

    return len(peers)


def apply(
    *,
    document: Document,
    mode: Union[ImportMode, str],
    store: SectionStore,
    section_id: str,
) -> ApplyPlan:
    """
    Stage an imported document into the store.

    The peer collection of the interface is always replaced as a whole,
    in both import modes. Nothing is committed here.
    """
    plan = plan_apply(document=document, mode=mode)

    # 1. interface, sparse patch
    for option, value in plan.interface_updates.items():
        store.set(section_id, option, value)

    # 2. drop every existing peer
    removed = remove_peers(store=store, section_id=section_id)

    # 3. re-add the parsed peers
    peer_type = peer_section_type(section_id)
    for options in plan.peers:
        sid = store.add(peer_type)
        for option, value in options.items():
            store.set(sid, option, value)

    logger.info(
        "staged %s import on %s: %d interface field(s), %d peer(s) replaced by %d",
        ImportMode(mode).value,
        section_id,
        len(plan.interface_updates),
        removed,
        len(plan.peers),
    )
    return plan
