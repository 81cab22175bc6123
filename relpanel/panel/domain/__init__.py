"""Version rules with no knowledge of the host or the UI."""
