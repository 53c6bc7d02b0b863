# render\conf.py

from typing import Iterable, List, Optional

import config
from state import Document, InterfaceConfig, PeerConfig


def serialize(
    interface: Optional[InterfaceConfig],
    peers: Iterable[PeerConfig],
) -> str:
    """
    Returns the canonical .conf text.

    Peers are written in the order given; the caller decides that order
    (normally the order of the peer collection in the store).
    """
    lines: List[str] = []

    if interface is not None:
        lines.extend(_render_interface_block(interface))
        lines.append("")

    for peer in peers:
        lines.extend(_render_peer_block(peer))
        lines.append("")

    return "\n".join(lines)


def render_document(document: Document) -> str:
    return serialize(document.interface, document.peers.values())


def export_filename(node_id: int) -> str:
    return config.EXPORT_FILENAME.format(node_id=node_id)


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _join(values) -> str:
    return ",".join(str(v) for v in values)


def _render_interface_block(iface: InterfaceConfig) -> List[str]:
    lines = [
        "[Interface]",
        f"NodeID={iface.node_id}",
        f"PrivateKey={iface.private_key}",
        f"PublicKey={iface.public_key}",
        f"IPAddr={_join(iface.ip_addresses)}",
        f"PassCode={iface.passcode}",
        f"Crypto={iface.crypto.value}",
        f"MultiSocket={_flag(iface.multisocket)}",
    ]

    if iface.listen_ports:
        lines.append(f"Listen={_join(iface.listen_ports)}")

    return lines


def _render_peer_block(peer: PeerConfig) -> List[str]:
    lines = [
        "[Peer]",
        f"NodeID={peer.node_id}",
        f"PublicKey={peer.public_key or ''}",
        f"IPAddr={_join(peer.ip_addresses)}",
        f"NodeType={_join(t.value for t in peer.node_type)}",
    ]

    # only what differs from the parser defaults
    if peer.subnet:
        lines.append(f"Subnet={_join(peer.subnet)}")
    if peer.address:
        lines.append(f"Address={_join(peer.address)}")
    if not peer.route_subnet:
        lines.append(f"RouteSubnet={_flag(peer.route_subnet)}")
    if peer.disabled is not None:
        lines.append(f"Disabled={_flag(peer.disabled)}")

    return lines
