"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

import yaml

from .defaults import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LOG_DIR,
    DEFAULT_REPORT_DIR,
    DEFAULT_REPORT_FORMATS,
    DEFAULT_SENDER,
    DEFAULT_SMTP_HOST,
    DEFAULT_SMTP_PORT,
    DEFAULT_SONAR_URL,
    DEFAULT_ZAP_URL,
    SOURCE_FORMATS,
)


@dataclass
class SourceConfig:
    """A scanner report file to read findings from."""
    format: str
    path: str

    def __post_init__(self):
        self.format = self.format.lower()
        if self.format == "sonar":
            self.format = "sonarqube"
        if self.format not in SOURCE_FORMATS:
            raise ValueError(f"Unknown source format: {self.format}")


@dataclass
class PolicyConfig:
    """Gate policy configuration."""
    path: Optional[str] = None


@dataclass
class ZAPConfig:
    """Live ZAP source configuration."""
    enabled: bool = False
    url: str = DEFAULT_ZAP_URL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = DEFAULT_HTTP_TIMEOUT


@dataclass
class SonarConfig:
    """Live SonarQube source configuration."""
    enabled: bool = False
    url: str = DEFAULT_SONAR_URL
    token: Optional[str] = None
    project_key: Optional[str] = None
    include_quality_gate: bool = True
    timeout: float = DEFAULT_HTTP_TIMEOUT


@dataclass
class AuditConfig:
    """Audit logging configuration."""
    enabled: bool = True
    log_dir: Optional[str] = DEFAULT_LOG_DIR
    console_output: bool = True


@dataclass
class ReportConfig:
    """Report generation configuration."""
    output_dir: str = DEFAULT_REPORT_DIR
    formats: List[str] = field(default_factory=lambda: DEFAULT_REPORT_FORMATS.copy())
    template_dir: Optional[str] = None


@dataclass
class NotifyConfig:
    """Email notification configuration."""
    enabled: bool = False
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    use_tls: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    sender: str = DEFAULT_SENDER
    recipients: List[str] = field(default_factory=list)
    only_on_failure: bool = False
    timeout: float = DEFAULT_HTTP_TIMEOUT


@dataclass
class GateConfig:
    """Main gate configuration."""
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    sources: List[SourceConfig] = field(default_factory=list)
    zap: ZAPConfig = field(default_factory=ZAPConfig)
    sonar: SonarConfig = field(default_factory=SonarConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)


class Settings:
    """
    Application settings manager.

    Handles configuration from:
    - Environment variables
    - YAML config files
    - Programmatic overrides
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self._environ = environ if environ is not None else os.environ
        self._config: Optional[GateConfig] = None

    @property
    def config(self) -> GateConfig:
        """Get current configuration."""
        if self._config is None:
            self._config = self._load_defaults()
        return self._config

    def _load_defaults(self) -> GateConfig:
        config = GateConfig()
        self._apply_env_overrides(config)
        return config

    def _apply_env_overrides(self, config: GateConfig) -> None:
        """Apply environment variable overrides."""
        env = self._environ

        if env.get("SECGATE_POLICY"):
            config.policy.path = env["SECGATE_POLICY"]

        # ZAP settings
        if env.get("ZAP_URL"):
            config.zap.url = env["ZAP_URL"]
        if env.get("ZAP_API_KEY"):
            config.zap.api_key = env["ZAP_API_KEY"]

        # SonarQube settings, same names as the scanner uses
        if env.get("SONAR_HOST_URL"):
            config.sonar.url = env["SONAR_HOST_URL"]
        if env.get("SONAR_TOKEN"):
            config.sonar.token = env["SONAR_TOKEN"]

        # SMTP
        if env.get("SMTP_HOST"):
            config.notify.smtp_host = env["SMTP_HOST"]
        if env.get("SMTP_PORT"):
            config.notify.smtp_port = int(env["SMTP_PORT"])
        if env.get("SMTP_USER"):
            config.notify.username = env["SMTP_USER"]
        if env.get("SMTP_PASSWORD"):
            config.notify.password = env["SMTP_PASSWORD"]
        if env.get("SECGATE_NOTIFY_TO"):
            config.notify.recipients = [
                r.strip() for r in env["SECGATE_NOTIFY_TO"].split(",") if r.strip()
            ]

    def load_from_file(self, filepath: str) -> GateConfig:
        """
        Load configuration from YAML file.

        Args:
            filepath: Path to YAML config file

        Returns:
            Loaded configuration
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {filepath}")

        config = self._parse_config(data)
        self._apply_env_overrides(config)
        self._config = config

        return config

    def _parse_config(self, data: Dict[str, Any]) -> GateConfig:
        """Parse config dictionary into GateConfig."""
        config = GateConfig()

        if "policy" in data:
            policy = data["policy"]
            # Allow "policy: path/to/rules.tsv" shorthand
            if isinstance(policy, str):
                config.policy.path = policy
            else:
                config.policy.path = policy.get("path")

        for source in data.get("sources", []):
            config.sources.append(SourceConfig(format=source["format"], path=source["path"]))

        if "zap" in data:
            zap_data = data["zap"]
            config.zap = ZAPConfig(
                enabled=zap_data.get("enabled", False),
                url=zap_data.get("url", DEFAULT_ZAP_URL),
                api_key=zap_data.get("api_key"),
                base_url=zap_data.get("base_url"),
                timeout=zap_data.get("timeout", DEFAULT_HTTP_TIMEOUT),
            )

        if "sonar" in data:
            sonar_data = data["sonar"]
            config.sonar = SonarConfig(
                enabled=sonar_data.get("enabled", False),
                url=sonar_data.get("url", DEFAULT_SONAR_URL),
                token=sonar_data.get("token"),
                project_key=sonar_data.get("project_key"),
                include_quality_gate=sonar_data.get("include_quality_gate", True),
                timeout=sonar_data.get("timeout", DEFAULT_HTTP_TIMEOUT),
            )

        if "audit" in data:
            audit_data = data["audit"]
            config.audit = AuditConfig(
                enabled=audit_data.get("enabled", True),
                log_dir=audit_data.get("log_dir", DEFAULT_LOG_DIR),
                console_output=audit_data.get("console_output", True),
            )

        if "report" in data:
            report_data = data["report"]
            config.report = ReportConfig(
                output_dir=report_data.get("output_dir", DEFAULT_REPORT_DIR),
                formats=report_data.get("formats", DEFAULT_REPORT_FORMATS.copy()),
                template_dir=report_data.get("template_dir"),
            )

        if "notify" in data:
            notify_data = data["notify"]
            config.notify = NotifyConfig(
                enabled=notify_data.get("enabled", False),
                smtp_host=notify_data.get("smtp_host", DEFAULT_SMTP_HOST),
                smtp_port=int(notify_data.get("smtp_port", DEFAULT_SMTP_PORT)),
                use_tls=notify_data.get("use_tls", False),
                username=notify_data.get("username"),
                password=notify_data.get("password"),
                sender=notify_data.get("sender", DEFAULT_SENDER),
                recipients=list(notify_data.get("recipients", [])),
                only_on_failure=notify_data.get("only_on_failure", False),
            )

        return config

    def save_to_file(self, filepath: str) -> None:
        """Save current configuration to YAML file (secrets omitted)."""
        data = self._config_to_dict(self.config)

        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def _config_to_dict(self, config: GateConfig) -> Dict[str, Any]:
        return {
            "policy": {"path": config.policy.path},
            "sources": [{"format": s.format, "path": s.path} for s in config.sources],
            "zap": {
                "enabled": config.zap.enabled,
                "url": config.zap.url,
                "base_url": config.zap.base_url,
            },
            "sonar": {
                "enabled": config.sonar.enabled,
                "url": config.sonar.url,
                "project_key": config.sonar.project_key,
                "include_quality_gate": config.sonar.include_quality_gate,
            },
            "audit": {
                "enabled": config.audit.enabled,
                "log_dir": config.audit.log_dir,
                "console_output": config.audit.console_output,
            },
            "report": {
                "output_dir": config.report.output_dir,
                "formats": config.report.formats,
            },
            "notify": {
                "enabled": config.notify.enabled,
                "smtp_host": config.notify.smtp_host,
                "smtp_port": config.notify.smtp_port,
                "use_tls": config.notify.use_tls,
                "sender": config.notify.sender,
                "recipients": config.notify.recipients,
                "only_on_failure": config.notify.only_on_failure,
            },
        }


# Global settings instance
settings = Settings()
