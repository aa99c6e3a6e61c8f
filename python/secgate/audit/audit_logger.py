"""Structured audit logging of gate decisions."""

import asyncio
import json
import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

from ..gate.verdict import Decision, Verdict
from ..policy.rule import Action


class LogType(Enum):
    """Types of audit log entries."""
    SESSION = "session"
    SOURCE = "source"
    DECISION = "decision"
    VERDICT = "verdict"
    ERROR = "error"


class AuditLogger:
    """
    Structured audit logger for gate runs.

    Features:
    - JSONL format for machine parsing
    - Console output for human readability
    - One entry per finding decision, ignored findings included
    - Async-safe logging
    """

    def __init__(
        self,
        log_dir: Optional[str] = None,
        session_id: Optional[str] = None,
        console_output: bool = True,
        log_level: int = logging.INFO
    ):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for log files (None = no file logging)
            session_id: Session ID (auto-generated if not provided)
            console_output: Enable console output
            log_level: Logging level
        """
        self.session_id = session_id or str(uuid.uuid4())
        self.console_output = console_output

        self._log_dir = Path(log_dir) if log_dir else None
        self._log_file: Optional[Path] = None
        self._lock = asyncio.Lock()
        self._entries: List[Dict[str, Any]] = []
        self._stats = {
            "sources": 0,
            "decisions": 0,
            "failures": 0,
            "warnings": 0,
            "ignored": 0,
            "errors": 0,
        }

        self._console_logger = logging.getLogger(f"secgate.audit.{self.session_id[:8]}")
        self._console_logger.setLevel(log_level)

        if console_output and not self._console_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(AuditFormatter())
            self._console_logger.addHandler(handler)
            self._console_logger.propagate = False

        if self._log_dir:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
            self._log_file = self._log_dir / f"audit_{timestamp}_{self.session_id[:8]}.jsonl"

    @property
    def log_file(self) -> Optional[Path]:
        return self._log_file

    async def start_session(self, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Log session start."""
        await self._log_entry(LogType.SESSION, {
            "type": LogType.SESSION.value,
            "event": "session_start",
            "session_id": self.session_id,
            "timestamp": datetime.utcnow().isoformat(),
            "metadata": metadata or {},
        })

    async def end_session(self, summary: Optional[Dict[str, Any]] = None) -> None:
        """Log session end with summary."""
        await self._log_entry(LogType.SESSION, {
            "type": LogType.SESSION.value,
            "event": "session_end",
            "session_id": self.session_id,
            "timestamp": datetime.utcnow().isoformat(),
            "stats": dict(self._stats),
            "summary": summary or {},
        })

    async def log_source(self, name: str, count: int) -> None:
        """Log a findings source that was read."""
        self._stats["sources"] += 1
        await self._log_entry(LogType.SOURCE, {
            "type": LogType.SOURCE.value,
            "timestamp": datetime.utcnow().isoformat(),
            "session_id": self.session_id,
            "source": name,
            "findings": count,
        })

    async def log_decision(self, decision: Decision) -> None:
        """Log the action chosen for one finding."""
        self._stats["decisions"] += 1
        stat_key = {
            Action.FAIL: "failures",
            Action.WARN: "warnings",
            Action.IGNORE: "ignored",
        }[decision.action]
        self._stats[stat_key] += 1

        entry = {
            "type": LogType.DECISION.value,
            "timestamp": datetime.utcnow().isoformat(),
            "session_id": self.session_id,
            "action": decision.action.value,
            "default": decision.is_default,
            "rule": decision.rule.rule_id if decision.rule else None,
            "rule_line": decision.rule.line if decision.rule else None,
            **decision.finding.to_dict(),
        }
        await self._log_entry(LogType.DECISION, entry)

    async def log_decisions(self, decisions: List[Decision]) -> None:
        for decision in decisions:
            await self.log_decision(decision)

    async def log_verdict(self, verdict: Verdict) -> None:
        await self._log_entry(LogType.VERDICT, {
            "type": LogType.VERDICT.value,
            "timestamp": datetime.utcnow().isoformat(),
            "session_id": self.session_id,
            "passed": verdict.passed,
            "failures": len(verdict.failures),
            "warnings": len(verdict.warnings),
        })

    async def log_error(self, error: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log error."""
        self._stats["errors"] += 1
        await self._log_entry(LogType.ERROR, {
            "type": LogType.ERROR.value,
            "timestamp": datetime.utcnow().isoformat(),
            "session_id": self.session_id,
            "error": error,
            "context": context or {},
        })

    async def _log_entry(self, log_type: LogType, entry: Dict[str, Any]) -> None:
        """Write log entry to file and console."""
        async with self._lock:
            self._entries.append(entry)

            if self._log_file:
                with open(self._log_file, "a") as f:
                    f.write(json.dumps(entry) + "\n")

            if self.console_output:
                self._log_to_console(log_type, entry)

    def _log_to_console(self, log_type: LogType, entry: Dict[str, Any]) -> None:
        """Format and log entry to console."""
        if log_type == LogType.DECISION:
            message = (
                f"{entry['action']:<6} {entry['rule_id']} "
                f"({entry['category']}/{entry['severity']}) {entry['description'][:80]}"
            )
            if entry["action"] == Action.FAIL.value:
                self._console_logger.error(message)
            elif entry["action"] == Action.WARN.value:
                self._console_logger.warning(message)
            else:
                self._console_logger.debug(message)
        elif log_type == LogType.SOURCE:
            self._console_logger.info(f"SOURCE {entry['source']} findings={entry['findings']}")
        elif log_type == LogType.VERDICT:
            self._console_logger.info(
                f"VERDICT passed={entry['passed']} "
                f"failures={entry['failures']} warnings={entry['warnings']}"
            )
        elif log_type == LogType.ERROR:
            self._console_logger.error(f"ERROR {entry.get('error', 'Unknown error')}")
        elif log_type == LogType.SESSION:
            event = entry.get("event", "")
            if event == "session_start":
                self._console_logger.info(f"=== Gate Session Started: {self.session_id[:8]} ===")
            elif event == "session_end":
                self._console_logger.info(
                    f"=== Gate Session Ended: failures={self._stats['failures']} "
                    f"warnings={self._stats['warnings']} ignored={self._stats['ignored']} ==="
                )

    def get_entries(self, log_type: Optional[LogType] = None) -> List[Dict[str, Any]]:
        """Get log entries, optionally filtered by type."""
        if log_type:
            return [e for e in self._entries if e.get("type") == log_type.value]
        return self._entries.copy()

    def get_stats(self) -> Dict[str, Any]:
        """Get logging statistics."""
        return {
            **self._stats,
            "total_entries": len(self._entries),
            "session_id": self.session_id,
            "log_file": str(self._log_file) if self._log_file else None,
        }


class AuditFormatter(logging.Formatter):
    """Custom formatter for audit log console output."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[32m",     # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        timestamp = datetime.utcnow().strftime("%H:%M:%S")
        return f"{color}[{timestamp}] {record.getMessage()}{self.RESET}"
