"""Linear setup steps that run after the reconciled domains."""
