"""Panel state and transitions."""
