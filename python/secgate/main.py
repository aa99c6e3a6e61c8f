#!/usr/bin/env python3
"""
secgate command line

Collects findings from scanner reports and live sources, applies the
policy and exits 0 (passed), 2 (failed) or 3 (could not decide).
"""

import asyncio
import argparse
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from . import __version__
from .audit import AuditLogger
from .bridge import SonarClient, ZAPClient
from .config import (
    EXIT_ERROR,
    EXIT_FAILED,
    EXIT_INTERRUPTED,
    EXIT_PASSED,
    GateConfig,
    Settings,
    SourceConfig,
)
from .errors import NotificationError, SecGateError
from .gate import GateResult, decide, verdict_from_decisions
from .notify import EmailNotifier
from .parsers import load_report
from .policy import PolicyRule, load_policy
from .reports import ReportGenerator
from .results import Finding, FindingAggregator


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger("secgate")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="secgate",
        description="Security gate - pass/fail CI runs from scanner findings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Gate on a ZAP baseline report with a ZAP-style rules file
  secgate --policy zap-rules.tsv --zap zap-report.json

  # Combine image scan, dependency scan and SAST results
  secgate --policy gate-policy.yaml --trivy trivy-image.json \\
      --trivy trivy-fs.json --sonar sonar-issues.json

  # Pull alerts and issues from running servers
  secgate --policy rules.tsv --zap-url http://zap:8080 \\
      --sonar-url http://sonar:9000 --sonar-project my-app

  # Use config file and mail the verdict
  secgate --config secgate.yaml --notify
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Policy
    parser.add_argument(
        "--policy", "-p",
        help="Rules file (text or YAML) mapping rule ids to FAIL/WARN/IGNORE"
    )

    # Report sources
    parser.add_argument("--zap", action="append", default=[], help="ZAP JSON report (repeatable)")
    parser.add_argument("--trivy", action="append", default=[], help="Trivy JSON report (repeatable)")
    parser.add_argument("--sonar", action="append", default=[], help="SonarQube issues JSON (repeatable)")
    parser.add_argument(
        "--findings",
        action="append",
        default=[],
        help="Normalized findings JSON (repeatable)"
    )

    # Live sources
    parser.add_argument("--zap-url", help="ZAP API URL to fetch alerts from")
    parser.add_argument("--zap-base-url", help="Only fetch ZAP alerts for this target URL")
    parser.add_argument("--sonar-url", help="SonarQube server URL (or set SONAR_HOST_URL)")
    parser.add_argument("--sonar-project", help="SonarQube project key to fetch issues for")

    # Output configuration
    parser.add_argument("--output", "-o", help="Output directory for reports (default: ./reports)")
    parser.add_argument(
        "--formats", "-f",
        help="Report formats: json,html,md (default: json,html,markdown; 'none' to skip)"
    )

    # Notification
    parser.add_argument("--notify", action="store_true", help="Email the verdict")
    parser.add_argument(
        "--notify-to",
        action="append",
        default=[],
        help="Notification recipient (repeatable)"
    )

    # Logging
    parser.add_argument("--log-dir", help="Directory for audit logs")
    parser.add_argument("--no-audit", action="store_true", help="Disable the audit log")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress console output")

    # Config file
    parser.add_argument("--config", help="Path to YAML config file")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GateConfig:
    """Build gate config from file, environment and arguments."""
    settings = Settings()
    if args.config:
        config = settings.load_from_file(args.config)
    else:
        config = settings.config

    if args.policy:
        config.policy.path = args.policy

    for fmt, paths in (
        ("zap", args.zap),
        ("trivy", args.trivy),
        ("sonarqube", args.sonar),
        ("generic", args.findings),
    ):
        config.sources.extend(SourceConfig(format=fmt, path=p) for p in paths)

    if args.zap_url:
        config.zap.enabled = True
        config.zap.url = args.zap_url
    if args.zap_base_url:
        config.zap.base_url = args.zap_base_url

    if args.sonar_url:
        config.sonar.url = args.sonar_url
    if args.sonar_project:
        config.sonar.enabled = True
        config.sonar.project_key = args.sonar_project

    if args.output:
        config.report.output_dir = args.output
    if args.formats:
        formats = [f.strip() for f in args.formats.split(",") if f.strip()]
        config.report.formats = [] if formats == ["none"] else formats

    if args.notify:
        config.notify.enabled = True
    if args.notify_to:
        config.notify.recipients = list(dict.fromkeys([*config.notify.recipients, *args.notify_to]))

    if args.log_dir:
        config.audit.log_dir = args.log_dir
    if args.no_audit:
        config.audit.enabled = False
    if args.quiet:
        config.audit.console_output = False

    return config


def load_gate_policy(config: GateConfig) -> List[PolicyRule]:
    if not config.policy.path:
        logger.warning("No policy configured: every finding is ignored")
        return []
    return load_policy(config.policy.path)


async def fetch_live_findings(config: GateConfig) -> List[Tuple[str, List[Finding]]]:
    """Fetch findings from live ZAP / SonarQube concurrently."""
    names = []
    tasks = []

    if config.zap.enabled:
        async def fetch_zap() -> List[Finding]:
            async with ZAPClient(config.zap.url, config.zap.api_key, config.zap.timeout) as zap:
                return await zap.fetch_findings(base_url=config.zap.base_url)

        names.append(f"zap-api:{config.zap.url}")
        tasks.append(fetch_zap())

    if config.sonar.enabled:
        async def fetch_sonar() -> List[Finding]:
            async with SonarClient(config.sonar.url, config.sonar.token, config.sonar.timeout) as sonar:
                return await sonar.fetch_findings(
                    config.sonar.project_key,
                    include_quality_gate=config.sonar.include_quality_gate,
                )

        names.append(f"sonarqube-api:{config.sonar.project_key}")
        tasks.append(fetch_sonar())

    results = await asyncio.gather(*tasks)
    return list(zip(names, results))


async def collect_findings(
    config: GateConfig,
    audit: Optional[AuditLogger] = None
) -> Tuple[FindingAggregator, List[Dict[str, Any]]]:
    """Read every configured source into one de-duplicated list."""
    aggregator = FindingAggregator()
    sources: List[Dict[str, Any]] = []

    batches = [
        (f"{source.format}:{source.path}", load_report(source.path, source.format))
        for source in config.sources
    ]
    batches.extend(await fetch_live_findings(config))

    for name, findings in batches:
        added = aggregator.add_findings(findings, source=name)
        sources.append({"name": name, "findings": len(findings), "unique": added})
        if audit:
            await audit.log_source(name, len(findings))

    return aggregator, sources


async def run_gate(args: argparse.Namespace) -> int:
    """Run the security gate."""
    start_time = datetime.utcnow()
    audit: Optional[AuditLogger] = None

    try:
        config = build_config(args)

        if config.sonar.enabled and not config.sonar.project_key:
            logger.error("SonarQube source enabled without a project key")
            return EXIT_ERROR

        if config.audit.enabled:
            audit = AuditLogger(
                log_dir=config.audit.log_dir,
                console_output=config.audit.console_output,
                log_level=logging.DEBUG if args.verbose else logging.INFO,
            )
            await audit.start_session({
                "policy": config.policy.path,
                "sources": [s.path for s in config.sources],
            })

        policy = load_gate_policy(config)
        aggregator, sources = await collect_findings(config, audit)
        findings = aggregator.get_all_findings()

        logger.info(f"Evaluating {len(findings)} findings against {len(policy)} rules")
        decisions = decide(findings, policy)
        verdict = verdict_from_decisions(decisions)

        result = GateResult(
            verdict=verdict,
            findings=findings,
            decisions=decisions,
            start_time=start_time,
            sources=sources,
            policy_source=config.policy.path or "",
            policy_rule_count=len(policy),
            duplicates_filtered=aggregator.get_summary()["duplicates_filtered"],
        )
        result.complete()

        if audit:
            await audit.log_decisions(decisions)
            await audit.log_verdict(verdict)

        for line in verdict.summary().splitlines():
            logger.info(line)

        paths: Dict[str, str] = {}
        if config.report.formats:
            report_gen = ReportGenerator(
                output_dir=config.report.output_dir,
                template_dir=config.report.template_dir,
            )
            paths = report_gen.generate(result, formats=config.report.formats)
            for fmt, path in paths.items():
                logger.info(f"Report generated: {path}")

        notifier = EmailNotifier(config.notify)
        if notifier.should_notify(result):
            try:
                notifier.send(result, attachments=list(paths.values()))
            except NotificationError as e:
                # Delivery problems do not change the verdict
                logger.error(str(e))
                if audit:
                    await audit.log_error(str(e), {"stage": "notify"})

        if audit:
            await audit.end_session(result.get_summary())

        return EXIT_PASSED if verdict.passed else EXIT_FAILED

    except (SecGateError, FileNotFoundError, ValueError) as e:
        logger.error(f"Gate could not decide: {e}")
        if audit:
            await audit.log_error(str(e))
        return EXIT_ERROR

    except KeyboardInterrupt:
        logger.info("Gate interrupted by user")
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(f"Gate run failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    try:
        return asyncio.run(run_gate(args))
    except KeyboardInterrupt:
        # asyncio.run cancels the gate task and re-raises here
        logger.info("Gate interrupted by user")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
