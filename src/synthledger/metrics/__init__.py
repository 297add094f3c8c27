"""Prometheus metrics for the ledger."""
