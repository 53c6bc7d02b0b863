# main.py

import argparse
import logging
import os
import sys
from typing import List, Optional

import config
from finalize import export_text
from operations import apply, needs_overwrite_confirmation
from parsing import parse
from render.conf import render_document
from render.qr import qr_filename, render_document_qr, render_store_qr
from render.summary import describe_peer, summarize_list
from state import FieldError, ImportMode
from store import SectionStore

logger = logging.getLogger(__name__)


def _read(path: str) -> str:
    with open(path, "r") as f:
        return f.read()


def _fail(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def _mode(args) -> ImportMode:
    return ImportMode.PEER if args.peer else ImportMode.FULL


def cmd_check(args) -> int:
    document = parse(_read(args.file), _mode(args))
    if isinstance(document, FieldError):
        return _fail(f"Cannot parse configuration: {document}")

    iface = document.interface
    if iface is not None:
        print(
            f"interface {iface.node_id} crypto={iface.crypto.value} "
            f"ipaddr={summarize_list(iface.ip_addresses)} "
            f"multisocket={int(iface.multisocket)}"
        )
    for peer in document.peers.values():
        print(f"peer {describe_peer(peer)}")
    return 0


def cmd_normalize(args) -> int:
    document = parse(_read(args.file), _mode(args))
    if isinstance(document, FieldError):
        return _fail(f"Cannot parse configuration: {document}")

    sys.stdout.write(render_document(document))
    return 0


def cmd_import(args) -> int:
    mode = _mode(args)
    document = parse(_read(args.file), mode)
    if isinstance(document, FieldError):
        return _fail(f"Cannot parse configuration: {document}")

    store = SectionStore.load(args.store)

    if args.interface not in store:
        if mode is ImportMode.PEER:
            return _fail(f"Interface '{args.interface}' does not exist")
        store.add("interface", name=args.interface)
        store.set(args.interface, "proto", "gnb")
    elif mode is ImportMode.FULL and not args.yes:
        current = store.get(args.interface, "private_key")
        if needs_overwrite_confirmation(current_private_key=current, document=document):
            return _fail(
                "Overwrite the current settings with the imported configuration? "
                "Re-run with --yes to confirm."
            )

    apply(document=document, mode=mode, store=store, section_id=args.interface)
    store.commit()
    store.save(args.store)

    print(f"imported {len(document.peers)} peer(s) into {args.interface}")
    return 0


def cmd_export(args) -> int:
    store = SectionStore.load(args.store)
    if args.interface not in store:
        return _fail(f"Interface '{args.interface}' does not exist")

    result = export_text(store, args.interface)
    if isinstance(result, FieldError):
        return _fail(f"Cannot export configuration: {result}")

    filename, text = result
    path = os.path.join(args.output_dir, filename)
    with open(path, "w") as f:
        f.write(text)

    print(path)
    return 0


def cmd_qr(args) -> int:
    if args.store:
        store = SectionStore.load(args.store)
        if args.interface not in store:
            return _fail(f"Interface '{args.interface}' does not exist")
        try:
            result = render_store_qr(store, args.interface)
        except ValueError as exc:
            return _fail(str(exc))
        if isinstance(result, FieldError):
            return _fail(f"Cannot export configuration: {result}")
        filename, img = result
    elif args.file:
        document = parse(_read(args.file), _mode(args))
        if isinstance(document, FieldError):
            return _fail(f"Cannot parse configuration: {document}")
        filename = qr_filename(document)
        try:
            img = render_document_qr(document)
        except ValueError as exc:
            return _fail(str(exc))
    else:
        return _fail("Give a .conf file or --store")

    path = os.path.join(args.output_dir, filename)
    img.save(path)
    logger.info("QR written to %s", path)
    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import, check and export GNB node configuration")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("check", help="parse a .conf file and print a summary")
    p.add_argument("file")
    p.add_argument("--peer", action="store_true", help="peer-only import mode")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("normalize", help="print the canonical form of a .conf file")
    p.add_argument("file")
    p.add_argument("--peer", action="store_true", help="peer-only import mode")
    p.set_defaults(func=cmd_normalize)

    p = sub.add_parser("import", help="import a .conf file into a store")
    p.add_argument("file")
    p.add_argument("--store", required=True)
    p.add_argument("--interface", required=True)
    p.add_argument("--peer", action="store_true", help="peer-only import mode")
    p.add_argument("--yes", action="store_true", help="overwrite a differing interface")
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("export", help="write gnb-node-<id>.conf from a store")
    p.add_argument("--store", required=True)
    p.add_argument("--interface", required=True)
    p.add_argument("-o", "--output-dir", default=".")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("qr", help="render a .conf file or a stored interface as a QR code image")
    p.add_argument("file", nargs="?")
    p.add_argument("--store")
    p.add_argument("--interface", default="wan")
    p.add_argument("-o", "--output-dir", default=".")
    p.add_argument("--peer", action="store_true", help="peer-only import mode")
    p.set_defaults(func=cmd_qr)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)
    return args.func(args)


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
