# src/a11yscan/utils.py

import shutil
import socket
import tempfile
import threading
import urllib.parse
from http.server import HTTPServer, SimpleHTTPRequestHandler
from pathlib import Path
from typing import Iterable, List, Tuple

from .logging_config import get_logger

logger = get_logger('utils')

SUPPORTED_SCHEMES = ("http", "https")


def _is_valid_url(url: str) -> bool:
    """Validate if string is an absolute http(s) URL"""
    if not isinstance(url, str) or not url.strip():
        logger.warning(f"Invalid URL: {url!r}")
        return False
    try:
        result = urllib.parse.urlparse(url.strip())
        valid = all([result.scheme, result.netloc]) and result.scheme.lower() in SUPPORTED_SCHEMES
        if not valid:
            logger.warning(f"Invalid URL: {url}")
        return valid
    except ValueError:
        logger.warning(f"Invalid URL format: {url}")
        return False


def _split_urls(urls: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split submitted URLs into (valid, rejected), keeping submission order"""
    valid, rejected = [], []
    for url in urls:
        if _is_valid_url(url):
            valid.append(url.strip())
        else:
            rejected.append(url)
    return valid, rejected


def _create_file_server(html_file: str) -> Tuple[str, HTTPServer]:
    """Create temporary server for local HTML file"""
    logger.info(f"Setting up temporary server for {html_file}")

    # Find an available port
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('localhost', 0))
        port = s.getsockname()[1]

    temp_dir = Path(tempfile.mkdtemp(prefix="a11yscan-"))
    temp_file = temp_dir / "index.html"
    shutil.copy2(html_file, temp_file)
    logger.debug(f"Temporary file created at {temp_file}")

    class Handler(SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, directory=str(temp_dir), **kwargs)

        def log_message(self, format, *args):
            logger.debug(format % args)

    server = HTTPServer(('localhost', port), Handler)
    server.temp_dir = temp_dir
    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()

    server_url = f"http://localhost:{port}/index.html"
    logger.info(f"Local server started at {server_url}")
    return server_url, server


def _stop_file_server(server: HTTPServer) -> None:
    """Shut down a server from _create_file_server and remove its files"""
    server.shutdown()
    server.server_close()
    temp_dir = getattr(server, "temp_dir", None)
    if temp_dir is not None:
        shutil.rmtree(temp_dir, ignore_errors=True)
    logger.info("Local server stopped")
