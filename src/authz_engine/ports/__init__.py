"""Ports layer - inbound and outbound contracts."""
