"""CLI configuration — settings, config discovery, logging."""
