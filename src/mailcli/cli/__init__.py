"""Command-line interface for mailcli."""
