"""Distribution detection from /etc/os-release."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release content into a mapping.

    Args:
        text: File content (KEY=value lines, values optionally quoted).

    Returns:
        Mapping of keys to unquoted values.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep:
            fields[key.strip()] = value.strip().strip("\"'")
    return fields


def detect_distro(path: Path = OS_RELEASE_PATH) -> str | None:
    """Detect the distribution family of the running system.

    Args:
        path: os-release file to read.

    Returns:
        "fedora", "debian", or None if the family is unknown.
    """
    try:
        fields = parse_os_release(path.read_text(encoding="utf-8"))
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return None

    ids = {fields.get("ID", "").lower(), *fields.get("ID_LIKE", "").lower().split()}
    if "fedora" in ids:
        return "fedora"
    if ids & {"debian", "ubuntu"}:
        return "debian"
    return None


def check_distro(configured: str, path: Path = OS_RELEASE_PATH) -> str | None:
    """Compare the configured distribution with the detected one.

    A mismatch is logged as a warning; the configured value still wins.

    Args:
        configured: Distribution family from the configuration.
        path: os-release file to read.

    Returns:
        A warning message on mismatch, otherwise None.
    """
    detected = detect_distro(path)
    if detected is None or detected == configured:
        return None
    message = f"Configuration targets '{configured}' but this system looks like '{detected}'"
    logger.warning(message)
    return message
