"""Core reconciliation engine for reprosetup."""
