"""Adapters layer - inbound REST and outbound store/telemetry implementations."""
