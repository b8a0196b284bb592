"""Click commands for the bzrsource CLI."""
