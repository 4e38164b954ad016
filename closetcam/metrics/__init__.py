"""Prometheus counters."""
