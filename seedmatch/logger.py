"""
Minimal logging context for seedmatch.
Single place to control all output: screen + file, with flush.
"""
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.text import Text

from seedmatch.__version__ import __version__

_PREFIX_STYLES = {
    "[ERROR]": "red",
    "[WARNING]": "yellow",
    "[INFO]": "cyan",
    "[DECIDE]": "magenta",
    "[DEBUG]": "grey50",
}


class SeedmatchLogger:
    """Minimal logger: print to screen + file, always flush"""

    def __init__(self, log_file: Optional[Path] = None, debug: bool = False, verbose: bool = False):
        self.log_file = log_file
        self._file_handle = None
        self._start_time = datetime.now()
        self.debug_mode = debug
        # debug output implies verbose decisions
        self.verbose_mode = verbose or debug
        self._console = Console(highlight=False, soft_wrap=True)
        self._logged_once: set[str] = set()

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_file, 'w', buffering=1, encoding='utf-8')

        self.log(f"({self._start_time.strftime('%H:%M:%S')}  Started seedmatch {__version__})")

    def _screen_text(self, output: str) -> Text:
        """Style known level prefixes; everything else stays literal."""
        text = Text(output)
        for marker, style in _PREFIX_STYLES.items():
            start = output.find(marker)
            if start != -1:
                text.stylize(style, start, start + len(marker))
        return text

    def log(self, msg: str, prefix: str = ""):
        """Log to screen and file"""
        output = f"{prefix}{msg}" if prefix else msg

        self._console.print(self._screen_text(output))

        if self._file_handle:
            self._file_handle.write(output + "\n")
            self._file_handle.flush()
            os.fsync(self._file_handle.fileno())

    def info(self, msg: str):
        """Info message"""
        self.log(msg)

    def warning(self, msg: str):
        """Warning message"""
        self.log(msg, "[WARNING] ")

    def error(self, msg: str):
        """Error message"""
        self.log(msg, "[ERROR] ")

    def debug(self, msg: str):
        """Debug message (only shown in debug mode)"""
        if self.debug_mode:
            timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
            self.log(msg, f"[{timestamp}] [DEBUG] ")

    def verbose(self, msg: str):
        """Verbose message (shown in verbose or debug mode)"""
        if self.verbose_mode:
            self.log(msg)

    def decide(self, msg: str):
        """Matching decision detail (verbose mode only)"""
        if self.verbose_mode:
            self.log(msg, "[DECIDE] ")

    def log_once(self, key: str, emit: Callable[[], None]):
        """Run ``emit`` the first time ``key`` is seen by this logger."""
        if key in self._logged_once:
            return
        self._logged_once.add(key)
        emit()

    def snatch_request(self, url: str, timeout_seconds: Optional[float]):
        """Log outgoing snatch (debug mode only)"""
        if timeout_seconds is None:
            self.debug(f"Snatch request: GET {url}")
        else:
            self.debug(f"Snatch request: GET {url} (timeout {timeout_seconds:.3f}s)")

    def snatch_failed(self, url: str, reason: str, detail: str = ""):
        """Log a failed snatch with its outcome kind"""
        suffix = f": {detail}" if detail else ""
        self.error(f"Snatch {reason} for {url}{suffix}")

    def snatch_response(self, url: str, status: int, elapsed_ms: float):
        """Log snatch response status (debug mode only)"""
        self.debug(f"Snatch response ({elapsed_ms:.0f}ms): Status {status} from {url}")

    def close(self):
        """Close file handle with goodbye message"""
        if self._file_handle:
            end_time = datetime.now()
            elapsed = end_time - self._start_time
            goodbye = f"({end_time.strftime('%H:%M:%S')}  Ended session, elapsed {elapsed.total_seconds():.1f}s)"
            self.log(goodbye)
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


_logger: Optional[SeedmatchLogger] = None

def set_logger(logger: SeedmatchLogger):
    """Set global logger instance"""
    global _logger
    _logger = logger

def get_logger() -> SeedmatchLogger:
    """Get global logger instance"""
    global _logger
    if _logger is None:
        # Fallback: create stdout-only logger
        _logger = SeedmatchLogger()
    return _logger

# Convenience functions
def log(msg: str):
    get_logger().log(msg)

def info(msg: str):
    get_logger().info(msg)

def warning(msg: str):
    get_logger().warning(msg)

def error(msg: str):
    get_logger().error(msg)

def debug(msg: str):
    get_logger().debug(msg)
