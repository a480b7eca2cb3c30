from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from ld_projector.logging_config import configure_logging

logger = logging.getLogger("ld_projector.cli")


def cmd_version() -> int:
    from ld_projector import __version__

    print(__version__)
    return 0


def _dump(payload) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_triples(args: argparse.Namespace) -> int:
    configure_logging(args.log_level)
    from ld_projector.errors import LinkedDataError
    from ld_projector.projection.pipeline import fetch_quads
    from ld_projector.rdf.dereference import Dereferencer
    from ld_projector.rdf.terms import quad_to_json

    async def _run():
        dereferencer = Dereferencer(accept=args.accept)
        try:
            return await fetch_quads(args.url, dereferencer)
        finally:
            await dereferencer.aclose()

    try:
        quads = asyncio.run(_run())
    except LinkedDataError as e:
        logger.error(f"Error occurred calculating response for url {args.url}: {e}")
        return 1
    _dump([quad_to_json(q) for q in quads])
    return 0


def cmd_business(args: argparse.Namespace) -> int:
    configure_logging(args.log_level)
    from ld_projector.errors import LinkedDataError
    from ld_projector.projection.context import active_context, load_context
    from ld_projector.projection.pipeline import ProjectionRun
    from ld_projector.rdf.dereference import Dereferencer
    from ld_projector.settings import settings

    try:
        context = load_context(args.context) if args.context else active_context()
    except (OSError, ValueError) as e:
        logger.error(f"Could not load vocabulary context: {e}")
        return 1

    async def _run():
        dereferencer = Dereferencer(accept=args.accept)
        try:
            run = ProjectionRun(
                args.url,
                dereferencer,
                type_iri=args.type or settings.business_type,
                context=context,
                reuse_source=not args.no_reuse,
            )
            return await run.run()
        finally:
            await dereferencer.aclose()

    try:
        records = asyncio.run(_run())
    except LinkedDataError as e:
        logger.error(f"Error occurred calculating response for url {args.url}: {e}")
        return 1
    _dump(records)
    return 0


def cmd_serve(_args: argparse.Namespace) -> int:
    from ld_projector.service.server import main as serve

    serve()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ldp")
    p.add_argument("--log-level", default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=lambda _a: cmd_version())

    tr = sub.add_parser("triples", help="Dereference a URL and print its quads as JSON")
    tr.add_argument("url")
    tr.add_argument("--accept", default=None, help="Accept header (default: text/html)")
    tr.set_defaults(func=cmd_triples)

    biz = sub.add_parser("business", help="Project schema.org businesses found at a URL")
    biz.add_argument("url")
    biz.add_argument("--accept", default=None)
    biz.add_argument("--type", default=None, help="Type IRI to enumerate")
    biz.add_argument("--context", default=None, help="JSON-LD context file")
    biz.add_argument("--no-reuse", action="store_true", help="Dereference the source for every query")
    biz.set_defaults(func=cmd_business)

    sub.add_parser("serve", help="Run the HTTP service").set_defaults(func=cmd_serve)

    return p


def app() -> None:
    parser = build_parser()
    args = parser.parse_args()
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    app()
