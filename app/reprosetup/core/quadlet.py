"""Typed parsing of Podman flags and translation into Quadlet units.

Container declarations carry their ``podman create`` options as a single
shell-style string. parse_flags() turns that string into a list of typed
flags; render_quadlet() translates the recognised flags into a Quadlet
``.container`` unit so systemd can create and supervise the container.

Flags without a Quadlet translation are kept as Unrecognized entries; the
translator drops them and logs one warning per flag.
"""

import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Publish:
    """-p / --publish HOST:CONTAINER[/proto]"""

    value: str


@dataclass(frozen=True, slots=True)
class Volume:
    """-v / --volume SRC:DST[:OPTS]"""

    value: str


@dataclass(frozen=True, slots=True)
class Env:
    """-e / --env KEY=VALUE"""

    value: str


@dataclass(frozen=True, slots=True)
class Device:
    """--device HOST[:CONTAINER[:PERMS]]"""

    value: str


@dataclass(frozen=True, slots=True)
class SecurityOpt:
    """--security-opt OPTION"""

    value: str


@dataclass(frozen=True, slots=True)
class ShmSize:
    """--shm-size SIZE"""

    value: str


@dataclass(frozen=True, slots=True)
class CapAdd:
    """--cap-add CAPABILITY"""

    value: str


@dataclass(frozen=True, slots=True)
class Unrecognized:
    """Any token the parser has no type for."""

    value: str


Flag = Publish | Volume | Env | Device | SecurityOpt | ShmSize | CapAdd | Unrecognized

# Option spellings that take one value, mapped to their flag type
_VALUE_FLAGS: dict[str, type[Flag]] = {
    "-p": Publish,
    "--publish": Publish,
    "-v": Volume,
    "--volume": Volume,
    "-e": Env,
    "--env": Env,
    "--device": Device,
    "--security-opt": SecurityOpt,
    "--shm-size": ShmSize,
    "--cap-add": CapAdd,
}


def parse_flags(raw_flags: str) -> list[Flag]:
    """Parse a shell-style flag string into typed flags.

    Both ``--opt value`` and ``--opt=value`` spellings are accepted.

    Args:
        raw_flags: Flags as written in the configuration.

    Returns:
        Typed flags in their original order.

    Raises:
        ValueError: If the string has unbalanced quotes.
    """
    tokens = shlex.split(raw_flags)
    flags: list[Flag] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        name, sep, inline = token.partition("=")
        flag_type = _VALUE_FLAGS.get(name) if name.startswith("-") else None
        if flag_type is not None and sep:
            flags.append(flag_type(inline))
        elif flag_type is not None and i + 1 < len(tokens):
            flags.append(flag_type(tokens[i + 1]))
            i += 1
        else:
            flags.append(Unrecognized(token))
        i += 1
    return flags


def expand_home(path: str, home: Path | None = None) -> str:
    """Expand a leading ``~`` or ``$HOME`` in a volume source.

    Args:
        path: Volume source path.
        home: Home directory, defaults to the current user's.

    Returns:
        The path with the home directory substituted.
    """
    home_dir = str(home or Path.home())
    if path == "~" or path.startswith("~/"):
        return home_dir + path[1:]
    for var in ("$HOME", "${HOME}"):
        if path == var or path.startswith(var + "/"):
            return home_dir + path[len(var) :]
    return path


def _translate(flag: Flag, home: Path | None) -> tuple[str, str] | None:
    match flag:
        case Publish(value):
            return ("PublishPort", value)
        case Volume(value):
            source, sep, rest = value.partition(":")
            return ("Volume", expand_home(source, home) + sep + rest)
        case Env(value):
            if "=" not in value:
                # Passing through a host variable by name
                value = f"{value}={os.environ.get(value, '')}"
            return ("Environment", value)
        case Device(value):
            return ("AddDevice", value)
        case SecurityOpt("label=disable"):
            return ("SecurityLabelDisable", "true")
        case SecurityOpt(value):
            return ("PodmanArgs", f"--security-opt={value}")
        case ShmSize(value):
            return ("ShmSize", value)
        case CapAdd(value):
            return ("AddCapability", value)
    return None


def render_quadlet(
    name: str,
    image: str,
    raw_flags: str,
    home: Path | None = None,
) -> str:
    """Render a Quadlet ``.container`` unit for a container.

    Args:
        name: Container name.
        image: Image reference.
        raw_flags: Flags as written in the configuration.
        home: Home directory used for volume expansion.

    Returns:
        Unit file content.
    """
    lines = [
        "# Generated by reprosetup, changes are overwritten.",
        "[Unit]",
        f"Description=Container {name}",
        "",
        "[Container]",
        f"ContainerName={name}",
        f"Image={image}",
    ]
    for flag in parse_flags(raw_flags):
        entry = _translate(flag, home)
        if entry is None:
            logger.warning("Container %s: dropping flag '%s' with no Quadlet equivalent", name, flag.value)
            continue
        key, value = entry
        lines.append(f"{key}={value}")
    lines += [
        "",
        "[Service]",
        "Restart=always",
        "",
        "[Install]",
        "WantedBy=default.target",
        "",
    ]
    return "\n".join(lines)
