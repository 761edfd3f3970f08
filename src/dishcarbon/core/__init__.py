"""Core models, matching and aggregation for dishcarbon."""
