"""Appliers that mutate the live system through external commands."""

from reprosetup.operators.base import PackageOperator

__all__ = ["PackageOperator"]
