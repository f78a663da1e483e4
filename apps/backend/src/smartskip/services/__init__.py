"""SmartSkip services."""
