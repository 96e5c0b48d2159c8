"""Upload orchestration, trend and lead-time aggregation, reporting."""
