# parsing.py
"""
Text -> Document.

parse() never raises on bad input: it returns either a Document or the
first FieldError it hits, in a fixed field order, so the message shown to
the user is always the same for the same input.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Tuple, Union

import config
from state import (
    CryptoMode,
    Document,
    FieldError,
    FieldKind,
    ImportMode,
    InterfaceConfig,
    INTERFACE_FIELDS,
    NodeType,
    PeerConfig,
    PEER_FIELDS,
)
from validators import check, split_tokens

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_COMMENT_RE = re.compile(r"#.*$")
_HEADER_RE = re.compile(r"^\[(\w+)\]$")
_ASSIGN_RE = re.compile(r"^(\w+)\s*=\s*(.*)$")

_REQUIRED = object()

# (field, message, default); a default of _REQUIRED makes the field mandatory
_INTERFACE_PLAN: List[Tuple[FieldKind, str, Any]] = [
    (FieldKind.NODE_ID, "Node ID setting is missing or invalid", _REQUIRED),
    (FieldKind.PRIVATE_KEY, "PrivateKey setting is missing or invalid", _REQUIRED),
    (FieldKind.PUBLIC_KEY, "PublicKey setting is missing or invalid", _REQUIRED),
    (FieldKind.IP_ADDR, "IP Address setting is missing or invalid", _REQUIRED),
    (FieldKind.PASSCODE, "Passcode setting is missing or invalid", _REQUIRED),
    (FieldKind.CRYPTO, "Crypto setting is missing or invalid", _REQUIRED),
    (FieldKind.MULTI_SOCKET, "MultiSocket setting is missing or invalid", "0"),
    (FieldKind.LISTEN, "Listen setting is invalid", []),
    (FieldKind.MTU, "MTU setting is invalid", None),
]

_PEER_PLAN: List[Tuple[FieldKind, str, Any]] = [
    (FieldKind.NODE_ID, "Node ID is invalid", _REQUIRED),
    (FieldKind.PUBLIC_KEY, "PublicKey setting is invalid", None),
    (FieldKind.NODE_TYPE, "NodeType setting is missing or invalid", ["n"]),
    (FieldKind.IP_ADDR, "IPAddr setting is invalid", []),
    (FieldKind.SUBNET, "Subnet setting is invalid", []),
    (FieldKind.ROUTE_SUBNET, "RouteSubnet setting is missing or invalid", "1"),
    (FieldKind.ADDRESS, "Address setting is invalid", []),
    (FieldKind.DISABLED, "Disabled setting is invalid", None),
]


def tokenize(text: str) -> Tuple[Dict[str, str], List[Dict[str, str]]]:
    """
    Returns:
        (interface raw map, [peer raw map, ...])

    Raw maps are keyed by the lower-cased key as written. Every [Peer]
    header opens a new map; any other header selects the interface map.
    """
    interface: Dict[str, str] = {}
    peers: List[Dict[str, str]] = []
    current = None

    for lineno, line in enumerate(_LINE_SPLIT_RE.split(str(text)), start=1):
        raw = _COMMENT_RE.sub("", line).strip()
        if not raw:
            continue

        header = _HEADER_RE.match(raw)
        if header:
            if header.group(1).lower() == "peer":
                current = {}
                peers.append(current)
            else:
                current = interface
            continue

        kv = _ASSIGN_RE.match(raw)
        if kv is None or current is None:
            logger.debug("line %d skipped: %r", lineno, raw)
            continue

        value = kv.group(2).strip()
        if value:
            current[kv.group(1).lower()] = value

    return interface, peers


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return not split_tokens(value)
    return str(value).strip() == ""


def _run_plan(
    plan: List[Tuple[FieldKind, str, Any]],
    raw: Mapping[str, Any],
    section: str,
) -> Union[Dict[FieldKind, Any], FieldError]:
    values: Dict[FieldKind, Any] = {}

    for kind, message, default in plan:
        value = raw.get(kind.raw_key)

        if _is_blank(value):
            if default is _REQUIRED:
                return FieldError(field=kind, message=message, section=section)
            values[kind] = default
            continue

        # blank values never get here, so optional only matters for peers
        if check(kind, value, optional=True) is not None:
            return FieldError(field=kind, message=message, section=section)
        values[kind] = value

    return values


def _to_bool(value: Any, true_tokens=("1", "true")) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in true_tokens


def _to_int(value: Any) -> int:
    return int(str(value).strip())


def build_interface(raw: Mapping[str, Any]) -> Union[InterfaceConfig, FieldError]:
    values = _run_plan(_INTERFACE_PLAN, raw, "interface")
    if isinstance(values, FieldError):
        return values

    mtu = values[FieldKind.MTU]

    return InterfaceConfig(
        node_id=_to_int(values[FieldKind.NODE_ID]),
        private_key=str(values[FieldKind.PRIVATE_KEY]),
        public_key=str(values[FieldKind.PUBLIC_KEY]),
        ip_addresses=split_tokens(values[FieldKind.IP_ADDR]),
        passcode=str(values[FieldKind.PASSCODE]),
        crypto=CryptoMode(str(values[FieldKind.CRYPTO])),
        multisocket=_to_bool(values[FieldKind.MULTI_SOCKET]),
        listen_ports=[int(p) for p in split_tokens(values[FieldKind.LISTEN])],
        mtu=None if mtu is None else _to_int(mtu),
    )


def build_peer(raw: Mapping[str, Any]) -> Union[PeerConfig, FieldError]:
    values = _run_plan(_PEER_PLAN, raw, "peer")
    if isinstance(values, FieldError):
        return values

    public_key = values[FieldKind.PUBLIC_KEY]
    disabled = values[FieldKind.DISABLED]
    node_types = [NodeType(t) for t in split_tokens(values[FieldKind.NODE_TYPE])]

    return PeerConfig(
        node_id=_to_int(values[FieldKind.NODE_ID]),
        public_key=None if public_key is None else str(public_key),
        ip_addresses=split_tokens(values[FieldKind.IP_ADDR]),
        node_type=list(dict.fromkeys(node_types)),
        subnet=split_tokens(values[FieldKind.SUBNET]),
        route_subnet=_to_bool(values[FieldKind.ROUTE_SUBNET]),
        address=split_tokens(values[FieldKind.ADDRESS]),
        disabled=None if disabled is None else _to_bool(disabled, config.DISABLED_TRUE_TOKENS),
    )


def _recognized(raw: Mapping[str, str], fields: List[FieldKind]) -> Dict[str, str]:
    keys = {kind.raw_key for kind in fields}
    return {k: v for k, v in raw.items() if k in keys}


def parse(
    text: str,
    mode: Union[ImportMode, str] = ImportMode.FULL,
) -> Union[Document, FieldError]:
    mode = ImportMode(mode)
    interface_raw, peer_raws = tokenize(text)

    # 1. interface, full mode only
    interface = None
    if mode is ImportMode.FULL:
        result = build_interface(_recognized(interface_raw, INTERFACE_FIELDS))
        if isinstance(result, FieldError):
            logger.debug("interface rejected: %s", result.message)
            return result
        interface = result

    # 2. peers, last record wins on duplicate node ids
    peers: Dict[int, PeerConfig] = {}
    for index, raw in enumerate(peer_raws):
        peer = build_peer(_recognized(raw, PEER_FIELDS))
        if isinstance(peer, FieldError):
            logger.debug("peer #%d rejected: %s", index, peer.message)
            return peer
        if peer.node_id in peers:
            logger.debug("peer %d redefined, keeping the later record", peer.node_id)
        peers[peer.node_id] = peer

    logger.debug(
        "parsed %s document: interface=%s peers=%d",
        mode.value,
        interface.node_id if interface else None,
        len(peers),
    )
    return Document(interface=interface, peers=peers)
