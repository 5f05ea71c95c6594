from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from glove_vectorizer.application.log_setup import setup_logging
from glove_vectorizer.application.settings import get_settings


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    logger.info("Server listening on {}:{}", host, port)
    uvicorn.run("glove_vectorizer.application.api.main:app", host=host, port=port, log_level="info")
    return 0


def _cmd_build_store(args: argparse.Namespace) -> int:
    from glove_vectorizer.application.services.glove_loader import build_sqlite_store

    settings = get_settings()
    out = args.out or settings.store_path
    dim = args.dim or settings.embedding_dim
    try:
        count = build_sqlite_store(args.glove, out, dimension=dim, batch_size=args.batch_size)
    except (OSError, ValueError) as e:
        logger.error("build-store failed: {}", e)
        return 1
    print(f"stored {count} vectors in {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="glove-vectorizer", description="Word-vector centroid service")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=_cmd_serve)

    build = sub.add_parser("build-store", help="convert a GloVe text file into a sqlite store")
    build.add_argument("glove", type=Path, help="GloVe .txt file (word v1 ... vN per line)")
    build.add_argument("--out", type=Path, default=None, help="store path (default: STORE_PATH)")
    build.add_argument("--dim", type=int, default=None, help="vector dimension (default: EMBEDDING_DIM)")
    build.add_argument("--batch-size", type=int, default=10_000)
    build.set_defaults(func=_cmd_build_store)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
