# state.py
# in-memory model
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from enum import Enum


class CryptoMode(Enum):
    XOR = "xor"
    ARC4 = "arc4"
    NONE = "none"


class NodeType(Enum):
    NORMAL = "n"
    INDEX = "i"
    UNIFIED = "u"
    RELAY = "r"
    SILENCE = "s"
    FORWARD = "f"

    @property
    def label(self) -> str:
        return self.name.capitalize()


class ImportMode(Enum):
    FULL = "full"
    PEER = "peer"


class FieldKind(Enum):
    """Every field the .conf format or the store knows about.

    The value is the canonical key used in the text format.
    """
    NODE_ID = "NodeID"
    PRIVATE_KEY = "PrivateKey"
    PUBLIC_KEY = "PublicKey"
    IP_ADDR = "IPAddr"
    PASSCODE = "PassCode"
    CRYPTO = "Crypto"
    MULTI_SOCKET = "MultiSocket"
    LISTEN = "Listen"
    MTU = "MTU"
    NODE_TYPE = "NodeType"
    SUBNET = "Subnet"
    ROUTE_SUBNET = "RouteSubnet"
    ADDRESS = "Address"
    DISABLED = "Disabled"

    @property
    def raw_key(self) -> str:
        return self.value.lower()


# FieldKind -> option name in the external section store
STORE_KEYS: Dict[FieldKind, str] = {
    FieldKind.NODE_ID: "node_id",
    FieldKind.PRIVATE_KEY: "private_key",
    FieldKind.PUBLIC_KEY: "public_key",
    FieldKind.IP_ADDR: "ipaddr",
    FieldKind.PASSCODE: "passcode",
    FieldKind.CRYPTO: "crypto",
    FieldKind.MULTI_SOCKET: "multisocket",
    FieldKind.LISTEN: "listen",
    FieldKind.MTU: "mtu",
    FieldKind.NODE_TYPE: "node_type",
    FieldKind.SUBNET: "subnet",
    FieldKind.ROUTE_SUBNET: "route_subnet",
    FieldKind.ADDRESS: "address",
    FieldKind.DISABLED: "disabled",
}

# keys recognized in .conf text, in canonical output order
INTERFACE_FIELDS: List[FieldKind] = [
    FieldKind.NODE_ID,
    FieldKind.PRIVATE_KEY,
    FieldKind.PUBLIC_KEY,
    FieldKind.IP_ADDR,
    FieldKind.PASSCODE,
    FieldKind.CRYPTO,
    FieldKind.MULTI_SOCKET,
    FieldKind.LISTEN,
]

PEER_FIELDS: List[FieldKind] = [
    FieldKind.NODE_ID,
    FieldKind.PUBLIC_KEY,
    FieldKind.IP_ADDR,
    FieldKind.NODE_TYPE,
    FieldKind.SUBNET,
    FieldKind.ADDRESS,
    FieldKind.ROUTE_SUBNET,
    FieldKind.DISABLED,
]


@dataclass(frozen=True)
class InterfaceConfig:
    node_id: int
    private_key: str
    public_key: str
    ip_addresses: List[str]
    passcode: str
    crypto: CryptoMode
    multisocket: bool = False
    listen_ports: List[int] = field(default_factory=list)
    mtu: Optional[int] = None  # store-only, never part of the .conf text


@dataclass(frozen=True)
class PeerConfig:
    node_id: int
    public_key: Optional[str] = None
    ip_addresses: List[str] = field(default_factory=list)
    node_type: List[NodeType] = field(default_factory=lambda: [NodeType.NORMAL])
    subnet: List[str] = field(default_factory=list)
    route_subnet: bool = True
    address: List[str] = field(default_factory=list)
    disabled: Optional[bool] = None

    @property
    def has_key(self) -> bool:
        return bool(self.public_key)


@dataclass(frozen=True)
class Document:
    interface: Optional[InterfaceConfig]
    peers: Dict[int, PeerConfig] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldError:
    field: FieldKind
    message: str
    section: str  # "interface" | "peer"

    def __str__(self) -> str:
        return self.message
