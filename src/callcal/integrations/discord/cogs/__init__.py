"""Discord command cogs."""
