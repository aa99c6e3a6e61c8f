"""
secgate

Security gate for CI/CD pipelines: normalizes SonarQube, Trivy and ZAP
findings and decides pass/fail from a rules table.
"""

__version__ = "1.0.0"
