"""
Process entry point: storage setup and the two listeners.

Startup order:
    1. create / seed the SQLite file
    2. start the plaintext redirect listener in a background thread
    3. run the HTTPS listener on the main thread until it stops

Any startup failure is logged and ends the process with exit status 1.

Usage:
    python -m api.server
    python -m api.server --db data.db --http-port 8080 --https-port 8443
"""

import argparse
import logging
import os
import sqlite3
import ssl
import threading
from typing import Optional

import uvicorn

from database import DatabaseManager
from utils import log
from .config import settings
from .data_access import RecordDataProvider
from .main import create_app
from .redirect import create_redirect_app

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve records over HTTPS with an HTTP redirect listener")
    parser.add_argument("--db", default=settings.DB_PATH, help=f"SQLite database file (default: {settings.DB_PATH})")
    parser.add_argument("--host", default=settings.HOST, help=f"Bind address (default: {settings.HOST})")
    parser.add_argument("--http-port", type=int, default=settings.HTTP_PORT, help=f"Plaintext redirect port (default: {settings.HTTP_PORT})")
    parser.add_argument("--https-port", type=int, default=settings.HTTPS_PORT, help=f"HTTPS port (default: {settings.HTTPS_PORT})")
    parser.add_argument("--cert", default=settings.CERT_FILE, help=f"TLS certificate (default: {settings.CERT_FILE})")
    parser.add_argument("--key", default=settings.KEY_FILE, help=f"TLS private key (default: {settings.KEY_FILE})")
    parser.add_argument("--no-seed", action="store_true", help="Do not insert the seed records")
    parser.add_argument("--log-file", default=settings.LOG_FILE, help="Also write logs to this file")
    return parser.parse_args(argv)


def init_storage(db_path: str, seed: bool = True) -> None:
    """Create the schema and seed rows; any failure is fatal."""
    try:
        db = DatabaseManager(db_path=db_path, seed=seed)
    except (sqlite3.Error, OSError) as e:
        log.fatal(logger, f"Failed to initialize database {db_path}: {e}")
    try:
        logger.info(f"Database ready: {db.db_path} ({db.count_records()} records)")
    finally:
        db.close()


def open_provider(db_path: str) -> RecordDataProvider:
    try:
        data = RecordDataProvider(db_path)
        stats = data.get_database_stats()
    except (sqlite3.Error, OSError) as e:
        log.fatal(logger, f"Failed to connect to database: {e}")
    logger.info(f"Connected to database: {data.db_path} ({stats['total_records']} records)")
    return data


def _serve_redirects(server: uvicorn.Server, port: int) -> None:
    try:
        server.run()
    except BaseException as e:
        logger.critical(f"HTTP server error: {e!r}")
    else:
        logger.critical(f"HTTP server on port {port} stopped")
    # sys.exit only ends this thread
    os._exit(1)


def start_redirect_listener(host: str, http_port: int, https_port: int) -> threading.Thread:
    """Run the redirect app on the plaintext port in a daemon thread."""
    config = uvicorn.Config(
        create_redirect_app(https_port),
        host=host,
        port=http_port,
        log_config=None,
    )
    server = uvicorn.Server(config)
    logger.info(f"HTTP server listening on {http_port}")
    thread = threading.Thread(
        target=_serve_redirects,
        args=(server, http_port),
        name="http-redirect",
        daemon=True,
    )
    thread.start()
    return thread


def run_secure_listener(app, host: str, https_port: int, certfile: str, keyfile: str) -> None:
    """Serve the API over TLS on the calling thread. Blocks."""
    config = uvicorn.Config(
        app,
        host=host,
        port=https_port,
        ssl_certfile=certfile,
        ssl_keyfile=keyfile,
        log_config=None,
    )
    server = uvicorn.Server(config)
    logger.info(f"Server listening on {https_port}")
    try:
        server.run()
    except (OSError, ssl.SSLError) as e:
        log.fatal(logger, f"HTTPS server error: {e}")


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    log.setup_logging(log_file=args.log_file)

    init_storage(args.db, seed=not args.no_seed)
    data = open_provider(args.db)
    try:
        start_redirect_listener(args.host, args.http_port, args.https_port)
        run_secure_listener(create_app(data), args.host, args.https_port, args.cert, args.key)
    finally:
        data.close()


if __name__ == "__main__":
    main()
