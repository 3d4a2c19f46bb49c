"""agenteval project scaffolding."""
