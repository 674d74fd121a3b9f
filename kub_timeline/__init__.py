"""Event-interval timelines and alert allowances for Kubernetes test runs."""

__version__ = "0.1.0"
