"""Cross-event price correlation for Kalshi markets."""
