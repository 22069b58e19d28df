"""Discord transport for attendance commands."""
