"""JSON report writer."""

import json
from pathlib import Path
from typing import Any, Dict
from datetime import datetime

from .. import __version__
from ..gate.result import GateResult


class JSONWriter:
    """Writes gate results to JSON format."""

    def __init__(self, pretty_print: bool = True, include_ignored: bool = True):
        self.pretty_print = pretty_print
        self.include_ignored = include_ignored

    def write(self, result: GateResult, output_path: str) -> str:
        """
        Write gate result to JSON file.

        Args:
            result: Gate result to write
            output_path: Output file path

        Returns:
            Path to written file
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(self.to_string(result))

        return str(path)

    def _format_result(self, result: GateResult) -> Dict[str, Any]:
        data = {
            "metadata": {
                "report_type": "security_gate",
                "generated_at": datetime.utcnow().isoformat(),
                "run_id": result.id,
                "tool": "secgate",
                "version": __version__,
            },
            "run": {
                "start_time": result.start_time.isoformat(),
                "end_time": result.end_time.isoformat() if result.end_time else None,
                "duration_seconds": result.duration_seconds,
                "policy_source": result.policy_source,
                "policy_rules": result.policy_rule_count,
                "sources": result.sources,
                "duplicates_filtered": result.duplicates_filtered,
            },
            "summary": result.get_summary(),
            "verdict": result.verdict.to_dict(),
        }

        if self.include_ignored:
            data["ignored"] = [f.to_dict() for f in result.ignored]

        return data

    def to_string(self, result: GateResult) -> str:
        """Convert gate result to JSON string."""
        data = self._format_result(result)
        if self.pretty_print:
            return json.dumps(data, indent=2, default=str)
        return json.dumps(data, default=str)
