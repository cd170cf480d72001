"""Feature slices of customer-access."""
