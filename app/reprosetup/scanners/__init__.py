"""Snapshot providers that read live system state."""

from reprosetup.scanners.base import Scanner

__all__ = ["Scanner"]
