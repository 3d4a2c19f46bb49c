"""agenteval command-line interface."""
