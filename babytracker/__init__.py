"""BabyTrack client: local store, server sync, live polling and pediatric calculators."""

__version__ = "0.5.0"
