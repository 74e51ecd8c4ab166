"""Prometheus metrics for monitoring."""

from prometheus_client import Counter, Histogram

# Response time metrics
api_request_duration = Histogram(
    "api_request_duration_seconds", "API request duration in seconds", ["method", "endpoint", "status"]
)

# Moderation metrics
reports_resolved_total = Counter("reports_resolved_total", "Total number of reports resolved", ["action"])

reports_resolution_latency_seconds = Histogram(
    "reports_resolution_latency_seconds", "Time to resolve a report from request to commit"
)

sanctions_created_total = Counter("sanctions_created_total", "Total number of sanctions created", ["type"])

sanctions_latency_seconds = Histogram(
    "sanctions_latency_seconds", "Time to create a sanction through the direct path"
)

moderation_errors_total = Counter(
    "moderation_errors_total", "Total number of failed moderation operations", ["code"]
)

user_updates_total = Counter("admin_user_updates_total", "Total number of admin user updates")
