"""Unit tests for Podman flag parsing and Quadlet rendering."""

import logging
from pathlib import Path

import pytest

from reprosetup.core.quadlet import (
    CapAdd,
    Device,
    Env,
    Publish,
    SecurityOpt,
    ShmSize,
    Unrecognized,
    Volume,
    expand_home,
    parse_flags,
    render_quadlet,
)

HOME = Path("/home/alice")


class TestParseFlags:
    """Tests for parse_flags()."""

    def test_separate_values(self) -> None:
        """Short and long options take the following token."""
        flags = parse_flags("-p 8080:80 --volume /data:/data -e TZ=UTC")

        assert flags == [Publish("8080:80"), Volume("/data:/data"), Env("TZ=UTC")]

    def test_inline_values(self) -> None:
        """--opt=value is split on the first equals sign."""
        flags = parse_flags("--env=KEY=a=b --shm-size=2g --cap-add=NET_ADMIN")

        assert flags == [Env("KEY=a=b"), ShmSize("2g"), CapAdd("NET_ADMIN")]

    def test_quoted_values(self) -> None:
        """Shell quoting is honoured."""
        flags = parse_flags("-e 'GREETING=hello world' --device /dev/dri")

        assert flags == [Env("GREETING=hello world"), Device("/dev/dri")]

    def test_unknown_flags_are_kept(self) -> None:
        """Untyped tokens become Unrecognized in order."""
        flags = parse_flags("--rm --security-opt label=disable --network host")

        assert flags == [
            Unrecognized("--rm"),
            SecurityOpt("label=disable"),
            Unrecognized("--network"),
            Unrecognized("host"),
        ]

    def test_trailing_option_without_value(self) -> None:
        """A value option at the end of the string is unrecognized."""
        assert parse_flags("-p") == [Unrecognized("-p")]

    def test_empty(self) -> None:
        """No flags yields an empty list."""
        assert parse_flags("") == []

    def test_unbalanced_quotes(self) -> None:
        """Unbalanced quotes raise ValueError."""
        with pytest.raises(ValueError):
            parse_flags("-e 'oops")


class TestExpandHome:
    """Tests for expand_home()."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("~/www", "/home/alice/www"),
            ("~", "/home/alice"),
            ("$HOME/data", "/home/alice/data"),
            ("${HOME}/data", "/home/alice/data"),
            ("/srv/www", "/srv/www"),
            ("named-volume", "named-volume"),
        ],
    )
    def test_expansion(self, path: str, expected: str) -> None:
        """Home references are expanded, everything else is kept."""
        assert expand_home(path, HOME) == expected


class TestRenderQuadlet:
    """Tests for render_quadlet()."""

    def test_sections_and_translations(self) -> None:
        """Recognised flags become Quadlet keys."""
        content = render_quadlet(
            "web",
            "docker.io/library/nginx:1.25",
            "-p 8080:80 -v ~/www:/usr/share/nginx/html:Z --device /dev/dri "
            "--security-opt label=disable --shm-size 1g --cap-add SYS_PTRACE",
            home=HOME,
        )
        lines = content.splitlines()

        assert "[Container]" in lines
        assert "ContainerName=web" in lines
        assert "Image=docker.io/library/nginx:1.25" in lines
        assert "PublishPort=8080:80" in lines
        assert "Volume=/home/alice/www:/usr/share/nginx/html:Z" in lines
        assert "AddDevice=/dev/dri" in lines
        assert "SecurityLabelDisable=true" in lines
        assert "ShmSize=1g" in lines
        assert "AddCapability=SYS_PTRACE" in lines
        assert "WantedBy=default.target" in lines
        assert content.endswith("\n")

    def test_other_security_opts_pass_through(self) -> None:
        """Security options without a dedicated key use PodmanArgs."""
        content = render_quadlet("web", "nginx", "--security-opt seccomp=unconfined")

        assert "PodmanArgs=--security-opt=seccomp=unconfined" in content.splitlines()

    def test_env_passthrough_reads_host_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A bare variable name takes the host's value."""
        monkeypatch.setenv("DISPLAY", ":0")

        content = render_quadlet("gui", "app", "-e DISPLAY")

        assert "Environment=DISPLAY=:0" in content.splitlines()

    def test_unrecognized_flags_dropped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Each dropped flag logs one warning."""
        with caplog.at_level(logging.WARNING, logger="reprosetup.core.quadlet"):
            content = render_quadlet("web", "nginx", "--rm -p 80:80")

        assert "--rm" not in content
        assert "PublishPort=80:80" in content
        assert len(caplog.records) == 1
        assert "--rm" in caplog.records[0].getMessage()
