"""Default configuration values."""

# Live sources
DEFAULT_ZAP_URL = "http://localhost:8080"
DEFAULT_SONAR_URL = "http://localhost:9000"
DEFAULT_HTTP_TIMEOUT = 30.0

# Audit logging
DEFAULT_LOG_DIR = "./logs"

# Report defaults
DEFAULT_REPORT_DIR = "./reports"
DEFAULT_REPORT_FORMATS = ["json", "html", "markdown"]

# Notification
DEFAULT_SMTP_HOST = "localhost"
DEFAULT_SMTP_PORT = 25
DEFAULT_SENDER = "secgate@localhost"

# Report formats accepted as file sources
SOURCE_FORMATS = ["zap", "trivy", "sonarqube", "generic"]

# Exit codes
EXIT_PASSED = 0
EXIT_FAILED = 2
EXIT_ERROR = 3
EXIT_INTERRUPTED = 130
