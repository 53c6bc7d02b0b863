"""Test .conf parsing into a Document."""

import pytest

from parsing import build_peer, parse, tokenize
from render.conf import render_document
from state import (
    CryptoMode,
    Document,
    FieldError,
    FieldKind,
    ImportMode,
    InterfaceConfig,
    NodeType,
    PeerConfig,
)

from conftest import PEER_PUBLIC_KEY, PRIVATE_KEY, PUBLIC_KEY, SAMPLE_CONF


def _interface(**overrides):
    lines = {
        "NodeID": "10",
        "PrivateKey": PRIVATE_KEY,
        "PublicKey": PUBLIC_KEY,
        "IPAddr": "192.168.100.1/24",
        "PassCode": "deadbeef",
        "Crypto": "xor",
    }
    lines.update(overrides)
    body = "\n".join(f"{k}={v}" for k, v in lines.items() if v is not None)
    return f"[Interface]\n{body}\n"


def test_parse_sample_document():
    """Interface and one peer with every default filled in."""
    document = parse(SAMPLE_CONF, ImportMode.FULL)

    assert isinstance(document, Document)
    assert document.interface == InterfaceConfig(
        node_id=10,
        private_key=PRIVATE_KEY,
        public_key=PUBLIC_KEY,
        ip_addresses=["192.168.100.1/24"],
        passcode="deadbeef",
        crypto=CryptoMode.NONE,
        multisocket=False,
        listen_ports=[],
    )
    assert list(document.peers) == [11]
    assert document.peers[11] == PeerConfig(
        node_id=11,
        public_key=PEER_PUBLIC_KEY,
        ip_addresses=["192.168.100.2/24"],
        node_type=[NodeType.NORMAL],
        subnet=[],
        route_subnet=True,
        address=[],
        disabled=None,
    )


def test_short_private_key_names_the_field():
    text = _interface(PrivateKey=PRIVATE_KEY[:63])
    error = parse(text, ImportMode.FULL)

    assert isinstance(error, FieldError)
    assert error.field is FieldKind.PRIVATE_KEY
    assert error.section == "interface"
    assert error.message == "PrivateKey setting is missing or invalid"
    assert str(error) == error.message


def test_first_failure_wins():
    """Node ID is checked before the private key."""
    error = parse(_interface(NodeID="10000", PrivateKey="xyz"))
    assert error.field is FieldKind.NODE_ID
    assert error.message == "Node ID setting is missing or invalid"


@pytest.mark.parametrize("missing,kind", [
    ("NodeID", FieldKind.NODE_ID),
    ("PublicKey", FieldKind.PUBLIC_KEY),
    ("IPAddr", FieldKind.IP_ADDR),
    ("PassCode", FieldKind.PASSCODE),
    ("Crypto", FieldKind.CRYPTO),
])
def test_interface_required_fields(missing, kind):
    error = parse(_interface(**{missing: None}))
    assert isinstance(error, FieldError)
    assert error.field is kind


def test_interface_ipaddr_message():
    error = parse(_interface(IPAddr="192.168.100.1"))
    assert error.message == "IP Address setting is missing or invalid"


def test_multisocket_and_listen():
    document = parse(_interface(MultiSocket="true", Listen="9001, 9002"))
    assert document.interface.multisocket is True
    assert document.interface.listen_ports == [9001, 9002]

    error = parse(_interface(MultiSocket="maybe"))
    assert error.field is FieldKind.MULTI_SOCKET

    error = parse(_interface(Listen="9001,99999"))
    assert error.field is FieldKind.LISTEN
    assert error.message == "Listen setting is invalid"


def test_mtu_is_not_read_from_text():
    document = parse(_interface(MTU="1400"))
    assert document.interface.mtu is None


def test_comments_case_and_whitespace():
    text = (
        "# exported from node 10\r\n"
        "[INTERFACE]\r\n"
        "  nodeid = 10   # trailing comment\r\n"
        f"PRIVATEKEY={PRIVATE_KEY}\r\n"
        f"publickey =  {PUBLIC_KEY}\r\n"
        "ipaddr=192.168.100.1/24\r\n"
        "passcode=deadbeef\r\n"
        "crypto=arc4\r\n"
        "\r\n"
        "[peer]\r\n"
        "NodeId=20\r\n"
    )
    document = parse(text)

    assert document.interface.node_id == 10
    assert document.interface.crypto is CryptoMode.ARC4
    assert list(document.peers) == [20]


def test_lines_outside_sections_and_junk_are_skipped():
    text = "NodeID=99\nnot a key value line\n" + _interface() + "[broken\n= value\n"
    document = parse(text)
    assert document.interface.node_id == 10


def test_interface_and_peer_keys_do_not_collide():
    text = _interface() + "[Peer]\nNodeID=11\n"
    document = parse(text)
    assert document.interface.node_id == 10
    assert document.peers[11].node_id == 11


def test_multiple_peers_and_last_duplicate_wins():
    text = (
        _interface()
        + "[Peer]\nNodeID=11\nIPAddr=10.0.0.11/24\n"
        + "[Peer]\nNodeID=12\n"
        + "[Peer]\nNodeID=11\nIPAddr=10.0.0.99/24\n"
    )
    document = parse(text)

    assert sorted(document.peers) == [11, 12]
    assert document.peers[11].ip_addresses == ["10.0.0.99/24"]


def test_peer_mode_ignores_interface():
    text = "[Interface]\nNodeID=oops\n[Peer]\nNodeID=1001\n"

    document = parse(text, ImportMode.PEER)
    assert document.interface is None
    assert list(document.peers) == [1001]

    assert isinstance(parse(text, ImportMode.FULL), FieldError)


def test_mode_accepts_strings():
    document = parse("[Peer]\nNodeID=5\n", "peer")
    assert list(document.peers) == [5]

    with pytest.raises(ValueError):
        parse("[Peer]\nNodeID=5\n", "partial")


def test_peer_defaults():
    document = parse("[Peer]\nNodeID=1001\nPublicKey=\n", ImportMode.PEER)
    peer = document.peers[1001]

    assert peer.public_key is None
    assert not peer.has_key
    assert peer.node_type == [NodeType.NORMAL]
    assert peer.route_subnet is True
    assert peer.subnet == []
    assert peer.address == []
    assert peer.ip_addresses == []
    assert peer.disabled is None


def test_peer_fields():
    text = (
        "[Peer]\n"
        "NodeID=1001\n"
        f"PublicKey={PEER_PUBLIC_KEY}\n"
        "IPAddr=10.1.0.2/16\n"
        "NodeType=r s,r\n"
        "Subnet=192.168.2.0/24, 192.168.3.0/255.255.255.0\n"
        "RouteSubnet=0\n"
        "Address=peer.example.org:9001 1.2.3.4:9002\n"
        "Disabled=yes\n"
    )
    peer = parse(text, ImportMode.PEER).peers[1001]

    assert peer.node_type == [NodeType.RELAY, NodeType.SILENCE]
    assert peer.subnet == ["192.168.2.0/24", "192.168.3.0/255.255.255.0"]
    assert peer.route_subnet is False
    assert peer.address == ["peer.example.org:9001", "1.2.3.4:9002"]
    assert peer.disabled is True


@pytest.mark.parametrize("line,kind,message", [
    ("PublicKey=abc", FieldKind.PUBLIC_KEY, "PublicKey setting is invalid"),
    ("NodeType=x", FieldKind.NODE_TYPE, "NodeType setting is missing or invalid"),
    ("IPAddr=10.0.0.1", FieldKind.IP_ADDR, "IPAddr setting is invalid"),
    ("Subnet=10.0.0.0", FieldKind.SUBNET, "Subnet setting is invalid"),
    ("RouteSubnet=yes", FieldKind.ROUTE_SUBNET, "RouteSubnet setting is missing or invalid"),
    ("Address=nowhere", FieldKind.ADDRESS, "Address setting is invalid"),
])
def test_peer_errors(line, kind, message):
    error = parse(f"[Peer]\nNodeID=1001\n{line}\n", ImportMode.PEER)
    assert error == FieldError(field=kind, message=message, section="peer")


def test_peer_without_node_id():
    error = parse("[Peer]\nIPAddr=10.0.0.1/24\n", ImportMode.PEER)
    assert error.field is FieldKind.NODE_ID
    assert error.message == "Node ID is invalid"


def test_disabled_is_coerced():
    assert build_peer({"nodeid": "1", "disabled": "1"}).disabled is True
    assert build_peer({"nodeid": "1", "disabled": "0"}).disabled is False
    assert build_peer({"nodeid": "1", "disabled": "whatever"}).disabled is False


def test_tokenize_keeps_peers_apart():
    interface, peers = tokenize("[Interface]\nNodeID=1\n[Peer]\nNodeID=2\n[Peer]\nNodeID=3\n")
    assert interface == {"nodeid": "1"}
    assert peers == [{"nodeid": "2"}, {"nodeid": "3"}]


def test_parse_is_idempotent_through_serialize():
    text = (
        _interface(MultiSocket="1", Listen="9001 9002")
        + "[Peer]\nNodeID=11\nNodeType=i,f\nSubnet=10.2.0.0/16\nRouteSubnet=0\nDisabled=1\n"
        + "[Peer]\nNodeID=12\nAddress=a.example:1\n"
    )
    first = parse(text)
    second = parse(render_document(first))

    assert second == first
