"""Resource domains reconciled by the engine.

Each domain binds a snapshot provider, an applier and a section of the
configuration into a single object the reconciler can drive.
"""

from reprosetup.domains.accounts import GroupDomain, UserDomain
from reprosetup.domains.base import Domain
from reprosetup.domains.containers import ContainerDomain
from reprosetup.domains.flatpak import FlatpakDomain
from reprosetup.domains.packages import PackageDomain
from reprosetup.domains.services import ServiceDomain

__all__ = [
    "ContainerDomain",
    "Domain",
    "FlatpakDomain",
    "GroupDomain",
    "PackageDomain",
    "ServiceDomain",
    "UserDomain",
]
