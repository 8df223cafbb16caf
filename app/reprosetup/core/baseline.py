"""Protected distribution packages.

Packages matching these definitions make up the running operating system.
They are never reported as undeclared, so they are never offered for
adoption or removal, even when the package manager lists them as
user-installed (which a fresh Fedora install does for most of @core).
"""

import fnmatch

# Glob patterns shared by both distribution families
_COMMON_PATTERNS: list[str] = [
    "systemd*",
    "dbus*",
    "udev*",
    "libsystemd*",
    "libpam*",
    "libnss*",
    "networkmanager*",
    "network-manager*",
    "gdm*",
    "plymouth*",
    "grub*",
    "flatpak",
    "podman",
    "sudo",
]

_FEDORA_PATTERNS: list[str] = [
    "kernel*",
    "glibc*",
    "dnf*",
    "rpm*",
    "fedora-*",
    "shim-*",
    "dracut*",
    "selinux-policy*",
    "@*",
]

_DEBIAN_PATTERNS: list[str] = [
    "linux-*",
    "libc6*",
    "apt*",
    "dpkg*",
    "initramfs-tools*",
    "debian-*",
    "ubuntu-*",
]

_PROTECTED_PACKAGES: set[str] = {
    "bash",
    "coreutils",
    "util-linux",
    "passwd",
    "login",
    "hostname",
    "iproute",
    "iproute2",
    "setup",
    "filesystem",
    "basesystem",
    "base-files",
    "init",
}


def get_protected_patterns(distro: str) -> list[str]:
    """Get the glob patterns protecting a distribution's core packages.

    Args:
        distro: "fedora" or "debian".

    Returns:
        Glob-style patterns, common ones first.
    """
    specific = _FEDORA_PATTERNS if distro == "fedora" else _DEBIAN_PATTERNS
    return [*_COMMON_PATTERNS, *specific]


def is_protected(package_name: str, distro: str) -> bool:
    """Check if a package is part of the protected baseline.

    Args:
        package_name: Name of the package to check.
        distro: "fedora" or "debian".

    Returns:
        True if the package must never be adopted or removed.
    """
    if package_name in _PROTECTED_PACKAGES:
        return True
    name = package_name.lower()
    return any(fnmatch.fnmatch(name, pattern) for pattern in get_protected_patterns(distro))
