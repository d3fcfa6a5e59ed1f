"""Feature modules (one blueprint package each)."""
