# finalize.py

import logging
from typing import Any, Dict, List, Mapping, Tuple, Union

from operations import peer_section_type
from parsing import build_interface, build_peer
from render.conf import export_filename, render_document
from state import (
    Document,
    FieldError,
    FieldKind,
    INTERFACE_FIELDS,
    PeerConfig,
    PEER_FIELDS,
    STORE_KEYS,
)
from store import SectionStore

logger = logging.getLogger(__name__)


def _raw(options: Mapping[str, Any], fields: List[FieldKind]) -> Dict[str, Any]:
    # store option names -> the lower-cased .conf keys the builders expect
    return {
        kind.raw_key: options[STORE_KEYS[kind]]
        for kind in fields
        if STORE_KEYS[kind] in options
    }


def snapshot(store: SectionStore, section_id: str) -> Union[Document, FieldError]:
    """
    Read one interface and its peers back out of the store as a Document.

    Store contents go through the same checks as imported text, so a
    snapshot that succeeds always serializes to text that parses again.
    """
    options = store.get(section_id)

    interface = build_interface(_raw(options, INTERFACE_FIELDS + [FieldKind.MTU]))
    if isinstance(interface, FieldError):
        logger.warning("interface %s is invalid: %s", section_id, interface.message)
        return interface

    peers: Dict[int, PeerConfig] = {}
    for section in store.sections(peer_section_type(section_id)):
        peer = build_peer(_raw(section.options, PEER_FIELDS))
        if isinstance(peer, FieldError):
            logger.warning("peer %s is invalid: %s", section.section_id, peer.message)
            return peer
        peers[peer.node_id] = peer

    return Document(interface=interface, peers=peers)


def export_text(store: SectionStore, section_id: str) -> Union[Tuple[str, str], FieldError]:
    """
    Returns:
        (filename, .conf text) for the interface, or the FieldError that
        stopped the snapshot
    """
    document = snapshot(store, section_id)
    if isinstance(document, FieldError):
        return document

    return export_filename(document.interface.node_id), render_document(document)
