"""Chat integrations."""
