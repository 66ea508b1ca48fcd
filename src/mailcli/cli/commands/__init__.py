"""mailcli command groups."""
