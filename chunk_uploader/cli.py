"""Command line interface for chunk_uploader package."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.logging import RichHandler

from .cli_progress import SingleFileUploadProgress, render_configuration_summary
from .models import UploadConfig, UploadStatus
from .orchestrator import UploadOrchestrator
from .services.source import UploadSource
from .exceptions import SourceReadError
from .utils.cancellation import CancellationToken


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug, --log-level or LOG_LEVEL is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    env_level = os.getenv("LOG_LEVEL")
    if silent or (not debug and not log_level and not env_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, (log_level or env_level).upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _build_config(args: argparse.Namespace) -> UploadConfig:
    try:
        config = UploadConfig.from_env(
            base_url=args.url,
            chunk_size=args.chunk_size,
            timeout=args.timeout,
        )
    except ValueError as exc:
        raise CLIError(str(exc)) from exc
    if not config.base_url:
        raise CLIError("no API URL: pass --url or set CHUNK_UPLOAD_API_URL")
    return config


def _install_interrupt_handler(token: CancellationToken) -> bool:
    """First Ctrl+C cancels after the in-flight chunk; a second one aborts."""
    loop = asyncio.get_running_loop()

    def _on_interrupt() -> None:
        token.cancel()
        loop.remove_signal_handler(signal.SIGINT)
        print("Cancelling after the current chunk... (Ctrl+C again to abort)", file=sys.stderr)

    try:
        loop.add_signal_handler(signal.SIGINT, _on_interrupt)
    except (NotImplementedError, RuntimeError):
        return False
    return True


async def _run_upload(source_path: Path, config: UploadConfig, whole: bool) -> int:
    try:
        source = UploadSource.from_path(source_path)
    except SourceReadError as exc:
        raise CLIError(str(exc)) from exc

    token = CancellationToken()
    installed = _install_interrupt_handler(token)

    progress = SingleFileUploadProgress(source.name, source.total_size)
    progress.start()
    try:
        async with UploadOrchestrator(config) as orchestrator:
            if whole:
                outcome = await orchestrator.upload_whole(source, progress.get_callback(), token)
            else:
                outcome = await orchestrator.upload_chunked(source, progress.get_callback(), token)
    finally:
        progress.stop()
        source.close()
        if installed:
            asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)

    progress.complete(outcome)
    if outcome.status == UploadStatus.COMPLETED:
        return EXIT_OK
    if outcome.status == UploadStatus.CANCELLED:
        return EXIT_CANCELLED
    return EXIT_FAILED


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chunk-up",
        description="Upload a file in chunks through the begin/chunk/end handshake.",
    )
    parser.add_argument("source", nargs="?", type=Path, help="Source file path")
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="Upload API base URL (default from CHUNK_UPLOAD_API_URL)",
    )
    parser.add_argument(
        "-s",
        "--chunk-size",
        type=_positive_int,
        default=None,
        help="Chunk size in bytes (default from CHUNK_UPLOAD_CHUNK_SIZE or 524288)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default from CHUNK_UPLOAD_TIMEOUT or 60)",
    )
    parser.add_argument(
        "-w",
        "--whole",
        action="store_true",
        help="Send the whole file in one request (small files only)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="chunk-up (from chunk_uploader)",
    )
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return EXIT_FAILED

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.source is None:
        parser.print_help()
        return EXIT_OK

    source = Path(args.source).expanduser()
    if not source.is_file():
        print(f"ERROR: source is not a file: {source}", file=sys.stderr)
        return EXIT_FAILED

    try:
        config = _build_config(args)
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FAILED

    render_configuration_summary(
        {
            "Source": str(source),
            "Mode": "whole file" if args.whole else "chunked",
            "API": config.base_url,
            "Chunk Size": "-" if args.whole else f"{config.chunk_size} bytes",
            "Timeout": f"{config.timeout:g}s",
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(source, config, whole=args.whole))
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except KeyboardInterrupt:
        print("Aborted.", file=sys.stderr)
        return EXIT_CANCELLED


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
