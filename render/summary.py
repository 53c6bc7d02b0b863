from typing import List, Sequence

from state import PeerConfig


def abbreviate_key(key: str) -> str:
    # first 5 and last 6 characters
    if len(key) < 12:
        return key
    return f"{key[:5]}…{key[-6:]}"


def summarize_list(items: Sequence[str], limit: int = 3) -> str:
    shown = list(items[:limit])
    if len(items) > limit:
        shown.append(f"+ {len(items) - limit} more")
    return " ".join(shown)


def describe_peer(peer: PeerConfig) -> str:
    """
    One line per peer, e.g.

        1001 <0a1b2…f9e8d7> n,r (Normal, Relay) 10.0.0.0/24 192.168.1.0/24
    """
    parts: List[str] = [str(peer.node_id)]

    if peer.disabled:
        parts.append("[disabled]")

    if peer.has_key:
        parts.append(f"<{abbreviate_key(peer.public_key)}>")
    else:
        parts.append("<key missing>")

    tags = ",".join(t.value for t in peer.node_type)
    labels = ", ".join(t.label for t in peer.node_type)
    parts.append(f"{tags} ({labels})")

    if peer.subnet:
        parts.append(summarize_list(peer.subnet))

    return " ".join(parts)
