"""
Rush Bot - Logger Module
========================

Tree-style logging with Eastern timezone and daily rotation.

DESIGN:
    Structured, hierarchical output that's easy to scan visually.
    Game lifecycle events (lobby, turns, outcomes) are logged as trees
    so a single game can be followed through the log file.

    Key features:
    - Tree-style formatting for structured data visualization
    - EST timezone timestamps (auto EST/EDT handling)
    - Daily log rotation in dated folders
    - 7-day log retention with automatic cleanup
    - Session tracking with unique run IDs
    - Discord webhook integration for error alerts
"""

import os
import uuid
import aiohttp
import asyncio
from datetime import datetime
from pathlib import Path
from typing import List, Tuple, Optional

from zoneinfo import ZoneInfo


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path(os.getenv("RUSH_LOG_DIR", "logs"))
"""Directory for all log files, organized by date."""

LOG_RETENTION_DAYS = 7
"""Number of days to retain log directories before cleanup."""

NY_TZ = ZoneInfo("America/New_York")
"""Eastern timezone for consistent timestamps."""


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Custom logger with tree-style formatting and EST timezone support.

    Attributes:
        run_id: Unique identifier for this bot session.
        log_file: Path to the main log file.
        error_file: Path to the error-only log file.
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, bot_name: str = "Rush") -> None:
        self.run_id: str = str(uuid.uuid4())[:8]
        self._webhook_url: Optional[str] = None
        self._bot_name: str = bot_name

        today = datetime.now(NY_TZ).strftime("%Y-%m-%d")
        self.log_dir = LOGS_DIR / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"{bot_name}-{today}.log"
        self.error_file = self.log_dir / f"{bot_name}-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Set webhook URL for error notifications."""
        self._webhook_url = url

    # =========================================================================
    # Log Cleanup
    # =========================================================================

    def _cleanup_old_logs(self) -> None:
        """
        Remove log directories older than retention period.

        Only removes directories matching date format YYYY-MM-DD.
        """
        if not LOGS_DIR.exists():
            return

        now = datetime.now()
        deleted = 0

        for item in LOGS_DIR.iterdir():
            if item.is_dir() and item.name != "__pycache__":
                try:
                    dir_date = datetime.strptime(item.name, "%Y-%m-%d")
                except ValueError:
                    continue  # Not a dated log folder
                if (now - dir_date).days > LOG_RETENTION_DAYS:
                    for f in item.iterdir():
                        f.unlink()
                    item.rmdir()
                    deleted += 1

        if deleted > 0:
            print(f"[LOG CLEANUP] Removed {deleted} old log directories")

    # =========================================================================
    # Session Header
    # =========================================================================

    def _write_session_header(self) -> None:
        """Write session start marker to log file."""
        header = f"""
============================================================
NEW SESSION - RUN ID: {self.run_id}
[{datetime.now(NY_TZ).strftime("%I:%M:%S %p %Z")}]
============================================================
"""
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(header)

    # =========================================================================
    # Core Logging
    # =========================================================================

    def _get_timestamp(self) -> str:
        """Formatted timestamp string like "[02:30:45 PM EST]"."""
        return datetime.now(NY_TZ).strftime("[%I:%M:%S %p %Z]")

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """
        Write log message to console and file.

        Args:
            message: Log message content.
            emoji: Optional emoji prefix.
            include_timestamp: Whether to prepend timestamp.
            is_error: Whether to also write to error log.
        """
        if include_timestamp:
            timestamp = self._get_timestamp()
            full_message = f"{timestamp} {emoji} {message}" if emoji else f"{timestamp} {message}"
        else:
            full_message = f"{emoji} {message}" if emoji else message

        print(full_message)

        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(f"{full_message}\n")

        if is_error:
            with open(self.error_file, "a", encoding="utf-8") as f:
                f.write(f"{full_message}\n")

    def _write_details(
        self,
        details: List[Tuple[str, str]],
        is_error: bool = False,
    ) -> None:
        for i, (key, value) in enumerate(details):
            prefix = "└─" if i == len(details) - 1 else "├─"
            self._write(
                f"  {prefix} {key}: {value}",
                include_timestamp=False,
                is_error=is_error,
            )

    # =========================================================================
    # Tree Formatting
    # =========================================================================

    def tree(
        self,
        title: str,
        items: List[Tuple[str, str]],
        emoji: str = "📦",
    ) -> None:
        """
        Log structured data in tree format.

        Args:
            title: Main heading for the tree.
            items: List of (key, value) tuples to display.
            emoji: Emoji prefix for the title.

        Example output:
            [02:30:45 PM EST] 🎮 WordRush Started
              ├─ Guild: 1234
              ├─ Players: 3
              └─ Turn: 10s
        """
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write("\n")

        self._write(title, emoji=emoji)
        self._write_details(items)

        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write("\n")

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str, details: Optional[List[Tuple[str, str]]] = None) -> None:
        """Log debug message (only if DEBUG env var set)."""
        if os.getenv("DEBUG"):
            self._write(msg, "🔍")
            if details:
                self._write_details(details)

    def info(self, msg: str) -> None:
        """Log informational message."""
        self._write(msg, "ℹ️")

    def success(self, msg: str) -> None:
        """Log success message."""
        self._write(msg, "✅")

    def warning(self, msg: str, details: Optional[List[Tuple[str, str]]] = None) -> None:
        """
        Log warning message with optional structured details.

        Args:
            msg: Warning message or title.
            details: Optional list of (key, value) detail tuples.
        """
        self._write(msg, "⚠️")
        if details:
            self._write_details(details)

    def error(
        self,
        msg: str,
        details: Optional[List[Tuple[str, str]]] = None,
    ) -> None:
        """
        Log error message with optional structured details.

        DESIGN:
            Errors with details use tree format for visibility.
            Sent to the webhook when one is configured and a loop is running.

        Args:
            msg: Error message or title.
            details: Optional list of (key, value) detail tuples.
        """
        if not details:
            self._write(msg, "❌", is_error=True)
            return

        self._write("", is_error=True)
        self._write(msg, "❌", is_error=True)
        self._write_details(details, is_error=True)
        self._write("", include_timestamp=False, is_error=True)

        if self._webhook_url:
            try:
                asyncio.get_running_loop().create_task(self._send_webhook_error(msg, details))
            except RuntimeError:
                pass  # No running loop (startup / tests)

    def critical(self, msg: str) -> None:
        """Log critical error message."""
        self._write(msg, "🚨", is_error=True)

    # =========================================================================
    # Webhook Integration
    # =========================================================================

    async def _send_webhook_error(
        self,
        title: str,
        details: List[Tuple[str, str]],
    ) -> None:
        """
        Send error notification to Discord webhook.

        Args:
            title: Error title for the embed.
            details: List of (key, value) detail tuples.
        """
        if not self._webhook_url:
            return

        try:
            description = "\n".join([f"**{k}:** {v}" for k, v in details])
            payload = {
                "embeds": [{
                    "title": f"❌ {title}",
                    "description": description,
                    "color": 0xFF0000,
                    "timestamp": datetime.now(NY_TZ).isoformat(),
                    "footer": {"text": f"{self._bot_name} | Run ID: {self.run_id}"},
                }]
            }

            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status != 204:
                        print(f"Webhook error: {resp.status}")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger(os.getenv("BOT_NAME", "Rush"))
"""Global logger instance shared by every module."""


__all__ = [
    "logger",
    "TreeLogger",
]
