"""Command-line tools for the MAI Scam dashboard."""
