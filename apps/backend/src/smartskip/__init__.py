"""SmartSkip: transcript-driven detection and skipping of non-content video segments."""

__version__ = "0.1.0"
