# validators.py
"""
Field validators.

Every validator takes a raw value and returns None when the value is
acceptable, or a human readable reason when it is not. Validators never
raise. List-valued fields go through split_tokens() first, so callers may
pass either a sequence or a comma/space separated string.
"""

import ipaddress
import re
from typing import Any, Callable, Dict, List, Optional

import config
from state import FieldKind

_HEX_RE = re.compile(r"[0-9a-fA-F]+")
_DIGITS_RE = re.compile(r"[0-9]+")
_TOKEN_SPLIT_RE = re.compile(r"[, ]+")
_HOSTNAME_LABEL_RE = re.compile(r"[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?")
_DOTTED_QUAD_RE = re.compile(r"[0-9.]+")


def split_tokens(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if str(v)]
    return [t for t in _TOKEN_SPLIT_RE.split(str(value)) if t]


def validate_hex(length: int, value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    if len(value) != length:
        return False
    return bool(_HEX_RE.fullmatch(value))


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DIGITS_RE.fullmatch(value.strip()):
        return int(value.strip())
    return None


def _in_range(value: Any, lo: int, hi: int) -> bool:
    n = _as_int(value)
    return n is not None and lo <= n <= hi


def is_cidr4(token: str) -> bool:
    # the prefix is mandatory, either as a length or a dotted netmask
    _, sep, prefix = token.partition("/")
    if not sep:
        return False
    try:
        network = ipaddress.IPv4Network(token, strict=False)
    except ValueError:
        return False
    if "." in prefix:
        # IPv4Network also takes hostmasks such as 0.0.0.255
        return str(network.netmask) == prefix
    return True


def is_port(token: Any) -> bool:
    return _in_range(token, config.PORT_MIN, config.PORT_MAX)


def is_host(host: str) -> bool:
    if not host or len(host) > 253:
        return False
    if _DOTTED_QUAD_RE.fullmatch(host):
        try:
            ipaddress.IPv4Address(host)
        except ValueError:
            return False
        return True
    return all(_HOSTNAME_LABEL_RE.fullmatch(label) for label in host.split("."))


def is_hostport(token: str) -> bool:
    parts = token.split(":")
    if len(parts) != 2:
        return False
    host, port = parts
    return is_host(host) and bool(_DIGITS_RE.fullmatch(port)) and is_port(port)


def validate_node_id(value: Any) -> Optional[str]:
    if _in_range(value, config.NODE_ID_MIN, config.NODE_ID_MAX):
        return None
    return "Node ID setting is missing or invalid"


def validate_private_key(value: Any) -> Optional[str]:
    if validate_hex(config.PRIVATE_KEY_LENGTH, value):
        return None
    return "Private Key setting is missing or invalid"


def validate_public_key(value: Any, optional: bool = False) -> Optional[str]:
    if (optional and not value) or validate_hex(config.PUBLIC_KEY_LENGTH, value):
        return None
    return "Public Key setting is missing or invalid"


def validate_passcode(value: Any) -> Optional[str]:
    if validate_hex(config.PASSCODE_LENGTH, value):
        return None
    return "Passcode setting is missing or invalid"


def validate_crypto(value: Any) -> Optional[str]:
    if str(value) in config.CRYPTO_MODES:
        return None
    return "Crypto setting is missing or invalid"


def validate_multisocket(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if str(value) in config.MULTISOCKET_TOKENS:
        return None
    return "MultiSocket setting is missing or invalid"


def validate_listen(value: Any) -> Optional[str]:
    for token in split_tokens(value):
        if not is_port(token):
            return "Listen setting is missing or invalid"
    return None


def validate_ipaddr(value: Any) -> Optional[str]:
    for token in split_tokens(value):
        if not is_cidr4(token):
            return "IPAddr setting is invalid"
    return None


def validate_subnet(value: Any) -> Optional[str]:
    for token in split_tokens(value):
        if not is_cidr4(token):
            return "Subnet setting is missing or invalid"
    return None


def validate_route_subnet(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if str(value) in config.ROUTE_SUBNET_TOKENS:
        return None
    return "RouteSubnet setting is missing or invalid"


def validate_node_type(value: Any) -> Optional[str]:
    tokens = split_tokens(value)
    if not tokens:
        return "Node Type setting is missing or invalid"
    for token in tokens:
        if token not in config.NODE_TYPE_TAGS:
            return "Node Type setting is missing or invalid"
    return None


def validate_address(value: Any) -> Optional[str]:
    for token in split_tokens(value):
        if not is_hostport(token):
            return "Address setting is missing or invalid"
    return None


def validate_disabled(value: Any) -> Optional[str]:
    return None


def validate_mtu(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if _in_range(value, config.MTU_MIN, config.MTU_MAX):
        return None
    return "MTU setting is invalid"


VALIDATORS: Dict[FieldKind, Callable[[Any], Optional[str]]] = {
    FieldKind.NODE_ID: validate_node_id,
    FieldKind.PRIVATE_KEY: validate_private_key,
    FieldKind.PUBLIC_KEY: validate_public_key,
    FieldKind.IP_ADDR: validate_ipaddr,
    FieldKind.PASSCODE: validate_passcode,
    FieldKind.CRYPTO: validate_crypto,
    FieldKind.MULTI_SOCKET: validate_multisocket,
    FieldKind.LISTEN: validate_listen,
    FieldKind.MTU: validate_mtu,
    FieldKind.NODE_TYPE: validate_node_type,
    FieldKind.SUBNET: validate_subnet,
    FieldKind.ROUTE_SUBNET: validate_route_subnet,
    FieldKind.ADDRESS: validate_address,
    FieldKind.DISABLED: validate_disabled,
}


def check(kind: FieldKind, value: Any, *, optional: bool = False) -> Optional[str]:
    if kind is FieldKind.PUBLIC_KEY:
        return validate_public_key(value, optional=optional)
    return VALIDATORS[kind](value)
