"""healthdash: per-service, per-region health dashboard."""
