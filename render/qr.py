# render\qr.py

import logging
from typing import Tuple, Union, cast

import qrcode
from qrcode.exceptions import DataOverflowError
from qrcode.image.base import BaseImage

import config
from finalize import snapshot
from render.conf import render_document
from state import Document, FieldError
from store import SectionStore

logger = logging.getLogger(__name__)

ERROR_CORRECT_Q: int = cast(int, qrcode.constants.ERROR_CORRECT_Q)


def qr_filename(document: Document) -> str:
    if document.interface is not None:
        return config.QR_FILENAME.format(node_id=document.interface.node_id)
    node_ids = "-".join(str(node_id) for node_id in document.peers)
    return config.PEERS_QR_FILENAME.format(node_ids=node_ids or "none")


def render_document_qr(document: Document) -> BaseImage:
    """
    Encode the canonical .conf text of a document, so another node can
    import it by scanning instead of copying the file over.

    Raises ValueError when the text does not fit in the largest QR symbol;
    each peer adds well over a hundred bytes, so big meshes will not fit.
    """
    text = render_document(document)

    qr = qrcode.QRCode(
        version=None,  # automatic size
        error_correction=ERROR_CORRECT_Q,
        box_size=config.QR_BOX_SIZE,
        border=config.QR_BORDER,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise ValueError(
            f"{qr_filename(document)}: {len(text)} bytes of configuration "
            f"({len(document.peers)} peer(s)) do not fit in a QR code"
        ) from exc

    logger.debug("QR version %d for %s", qr.version, qr_filename(document))
    return qr.make_image(fill_color="black", back_color="white")


def render_store_qr(
    store: SectionStore,
    section_id: str,
) -> Union[Tuple[str, BaseImage], FieldError]:
    """
    Returns:
        (filename, QR image) for the interface as it is in the store, or
        the FieldError that stopped the snapshot
    """
    document = snapshot(store, section_id)
    if isinstance(document, FieldError):
        return document
    return qr_filename(document), render_document_qr(document)
