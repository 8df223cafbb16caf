"""reprosetup - Reproducible desktop setup.

Declaratively provision a desktop machine and keep it reconciled with a
TOML configuration file.
"""

__version__ = "0.4.0"
