"""
Student Records CLI: runs the MCP server or seeds the record store.

Usage:
    student-records-mcp [serve] [--mode auto|stdio|tcp] [--host HOST] [--port PORT]
    student-records-mcp seed [--keep]
    student-records-mcp --help

Commands:
    serve   Serve the student tools over stdio or TCP (the default command).
    seed    Replace the stored students with the bundled sample students.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, TextIO

from student_records.core.config import AppConfig
from student_records.core.errors import StudentRecordsError
from student_records.core.logging_setup import configure_logging
from student_records.mcp.dispatcher import ToolDispatcher
from student_records.mcp.session import McpSession
from student_records.mcp.transports import StdioTransport, TcpTransport
from student_records.store import RecordStore, open_store
from student_records.store.sample_data import sample_records
from student_records.version import __version__

logger = logging.getLogger("StudentRecords.cli")


def load_config(args: argparse.Namespace) -> AppConfig:
    """Config from --config (YAML) or the environment, then command-line overrides."""
    config = AppConfig.from_yaml(args.config) if args.config else AppConfig.from_env()
    if getattr(args, "backend", None):
        config.store.backend = args.backend
    if getattr(args, "mode", None):
        config.transport.mode = args.mode
    if getattr(args, "host", None):
        config.transport.host = args.host
    if getattr(args, "port", None) is not None:
        config.transport.port = args.port
    # assignment skips validation
    return AppConfig.model_validate(config.model_dump())


def resolve_mode(mode: str, stdin: Optional[TextIO] = None) -> str:
    """Turn ``auto`` into ``stdio`` when stdin is piped and ``tcp`` otherwise."""
    if mode != "auto":
        return mode
    stream = stdin if stdin is not None else sys.stdin
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        interactive = False
    return "tcp" if interactive else "stdio"


def _open_store(config: AppConfig) -> Optional[RecordStore]:
    try:
        return open_store(config.store)
    except (StudentRecordsError, OSError) as exc:
        logger.error("Failed to open %s record store: %s", config.store.backend, exc)
        return None


def _serve_stdio(dispatcher: ToolDispatcher, config: AppConfig) -> int:
    session = McpSession(dispatcher, tool_config=config.tools, peer="stdio")
    try:
        StdioTransport(session).serve()
    except OSError as exc:
        logger.error("Error reading from stdin: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping stdio transport")
    return 0


def _serve_tcp(dispatcher: ToolDispatcher, config: AppConfig) -> int:
    def session_factory(peer: str) -> McpSession:
        return McpSession(dispatcher, tool_config=config.tools, peer=peer)

    try:
        transport = TcpTransport(session_factory, config.transport.host, config.transport.port)
    except OSError as exc:
        logger.error(
            "Failed to listen on %s:%d: %s", config.transport.host, config.transport.port, exc
        )
        return 1
    try:
        transport.serve_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    finally:
        transport.shutdown()
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    try:
        config = load_config(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    mode = resolve_mode(config.transport.mode)
    configure_logging(config.logging, stdio_mode=(mode == "stdio"))
    logger.info(
        "Starting Student Records MCP server v%s (mode=%s, backend=%s)",
        __version__,
        mode,
        config.store.backend,
    )

    store = _open_store(config)
    if store is None:
        return 1
    try:
        dispatcher = ToolDispatcher(store)
        if mode == "stdio":
            return _serve_stdio(dispatcher, config)
        return _serve_tcp(dispatcher, config)
    finally:
        store.close()
        logger.info("Record store closed")


def cmd_seed(args: argparse.Namespace) -> int:
    try:
        config = load_config(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.logging, stdio_mode=False)

    store = _open_store(config)
    if store is None:
        return 1
    records = sample_records()
    with store:
        try:
            if not args.keep:
                store.drop_all()
                logger.info("Dropped existing students")
            ids = store.insert_many(records)
        except StudentRecordsError as exc:
            logger.error("Seeding failed: %s", exc)
            return 1

    for record, student_id in zip(records, ids):
        print(f"Inserted {record.name} ({student_id})")
    print(f"Seeded {len(ids)} students")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="student-records-mcp",
        description="Student Records MCP server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Examples:\n"
               "  student-records-mcp\n"
               "  student-records-mcp serve --mode tcp --port 8080\n"
               "  student-records-mcp --config students.yaml serve --mode stdio\n"
               "  student-records-mcp seed --keep\n",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="YAML config file (default: read the environment).",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser(
        "serve",
        help="Serve the student tools over stdio or TCP.",
    )
    serve.add_argument(
        "--mode",
        choices=["auto", "stdio", "tcp"],
        default=None,
        help="Transport (default: MCP_MODE or auto; auto picks stdio when stdin is piped).",
    )
    serve.add_argument("--host", default=None, help="TCP bind address (default: HOST or 0.0.0.0).")
    serve.add_argument("--port", type=int, default=None, help="TCP port (default: PORT or 8080).")
    serve.add_argument(
        "--backend",
        choices=["mongo", "sqlite"],
        default=None,
        help="Record store backend (default: STORE_BACKEND or mongo).",
    )

    seed = subparsers.add_parser(
        "seed",
        help="Load the sample students into the record store.",
        description="Drops every stored student, then inserts the five sample students.",
    )
    seed.add_argument(
        "--keep",
        action="store_true",
        default=False,
        help="Keep existing students and only append the samples.",
    )
    seed.add_argument(
        "--backend",
        choices=["mongo", "sqlite"],
        default=None,
        help="Record store backend (default: STORE_BACKEND or mongo).",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    command = args.command or "serve"
    if command == "serve":
        return cmd_serve(args)
    if command == "seed":
        return cmd_seed(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
