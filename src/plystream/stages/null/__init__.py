"""Terminal stage."""
