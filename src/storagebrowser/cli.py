# src/storagebrowser/cli.py

import argparse
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path
from typing import List, Optional, Tuple

import requests

from storagebrowser import config as config_module
from storagebrowser import log_utils
from storagebrowser.browser import StorageBrowser
from storagebrowser.config import BrowserConfig
from storagebrowser.constants import APP_NAME
from storagebrowser.exceptions import ConfigurationError, StorageBrowserError
from storagebrowser.http_client import HttpStorageClient


def get_version() -> str:
    """
    Return the installed storagebrowser version, or "unknown" when not installed.
    """
    try:
        return package_version(APP_NAME)
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Resolve and download files from a remote storage service",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help=f"Configuration file (default: {config_module.CONFIG_FILE})",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="Console log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-dir",
        metavar="DIR",
        help="Also write logs to a rotating file in this directory",
    )
    subparsers = parser.add_subparsers(dest="command")

    resolve_parser = subparsers.add_parser(
        "resolve", help="Print the node hash of a remote file"
    )
    resolve_parser.add_argument("remote_path", help="Path below the root directory")

    download_parser = subparsers.add_parser(
        "download", help="Download a remote file, printing progress"
    )
    download_parser.add_argument("remote_path", help="Path below the root directory")
    download_parser.add_argument(
        "local_path",
        nargs="?",
        help="Local destination relative to the working directory (default: remote path)",
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def _load_config(path: Optional[str]) -> BrowserConfig:
    """
    Load the configuration, raising ConfigurationError when none is found.
    """
    config = config_module.load_config(path)
    if config is None:
        expected = path or config_module.CONFIG_FILE
        raise ConfigurationError(
            "No configuration found", details=f"expected a file at {expected}"
        )
    return config


def create_browser(config: BrowserConfig) -> Tuple[StorageBrowser, HttpStorageClient]:
    """
    Build a StorageBrowser backed by the HTTP storage client.

    Returns:
        Tuple[StorageBrowser, HttpStorageClient]: The browser and the client, which the caller closes.

    Raises:
        ConfigurationError: If the configuration has no BASE_URL.
    """
    if not config.base_url:
        raise ConfigurationError("BASE_URL is required to reach the storage service")
    client = HttpStorageClient(config.base_url, timeout=config.request_timeout)
    return StorageBrowser(config, client, client), client


def _run_command(args: argparse.Namespace) -> None:
    config = _load_config(args.config)
    if config.log_level and not args.log_level:
        log_utils.set_log_level(config.log_level)
    if args.log_dir:
        log_utils.add_file_logging(
            Path(args.log_dir), args.log_level or config.log_level or "INFO"
        )

    browser, client = create_browser(config)
    try:
        browser.initialize()
        if args.command == "resolve":
            print(browser.get_object_node(args.remote_path))
        elif args.command == "download":
            browser.fetch(args.remote_path, args.local_path or args.remote_path)
    finally:
        client.close()


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the storagebrowser command-line interface.

    Parses arguments and dispatches the resolve, download and version
    subcommands. Failures are logged and end the process with exit status 1.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        log_utils.set_log_level(args.log_level)

    if args.command is None:
        parser.print_help()
        return
    if args.command == "version":
        print(f"{APP_NAME} {get_version()}")
        return

    try:
        _run_command(args)
    except (
        StorageBrowserError,
        requests.RequestException,
        OSError,
        ValueError,
        KeyError,
    ) as e:
        log_utils.logger.error(f"{APP_NAME} {args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
