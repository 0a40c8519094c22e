"""
Prometheus metrics definitions for questboard.

- Quest completion metrics: completions by category, points awarded, level-ups
- Remote activity log metrics: writes and reads by outcome
- Leaderboard metrics: queries by range

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# =============================================================================
# Quest Completion Metrics
# =============================================================================

quests_completed_total = Counter(
    "questboard_quests_completed_total",
    "Total quest completions",
    ["category"],
)

quest_points_awarded_total = Counter(
    "questboard_quest_points_awarded_total",
    "Total points awarded for quest completions",
)

level_ups_total = Counter(
    "questboard_level_ups_total",
    "Total level-ups across all profiles",
)

# =============================================================================
# Remote Activity Log Metrics
# =============================================================================

remote_operations_total = Counter(
    "questboard_remote_operations_total",
    "Remote activity log operations",
    ["operation", "status"],  # operation: sign_in/write/query, status: success/error/skipped
)

remote_operation_duration_seconds = Histogram(
    "questboard_remote_operation_duration_seconds",
    "Remote activity log request latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# =============================================================================
# Leaderboard Metrics
# =============================================================================

leaderboard_queries_total = Counter(
    "questboard_leaderboard_queries_total",
    "Leaderboard queries by range",
    ["range"],
)
