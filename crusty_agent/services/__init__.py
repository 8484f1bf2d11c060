"""Outbound services used by the agent."""
