"""
Shared fixtures for nginx-vhost tests.
"""

import grp
import os
import pwd
from typing import List, Optional, Tuple

import pytest

from nginx_vhost.core.resource import Platform
from nginx_vhost.resources.service import Service
from nginx_vhost.transport.base import Transport
from nginx_vhost.vhost.settings import Settings


class RecordingTransport(Transport):
    """
    Transport that records commands instead of running them.

    Exit codes can be scripted per command prefix.
    """

    def __init__(self, codes: Optional[dict] = None):
        self.commands: List[list] = []
        self.files: dict = {}
        self.codes = codes or {}

    def run_command(self, args: list) -> Tuple[str, int]:
        self.commands.append(list(args))
        for prefix, code in self.codes.items():
            if tuple(args[:len(prefix)]) == prefix:
                return ("scripted failure" if code else "", code)
        return "", 0

    def write_file(self, path: str, content: bytes) -> None:
        self.files[path] = content

    def read_file(self, path: str) -> bytes:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def file_exists(self, path: str) -> bool:
        return path in self.files

    def read_link(self, path: str) -> Optional[str]:
        return None

    def close(self) -> None:
        pass


class RecordingService(Service):
    """Service that records reloads instead of calling systemctl."""

    def __init__(self, name: str = "nginx", **options):
        super().__init__(name, **options)
        self.reloads = 0
        self.restarts = 0

    def reload(self, platform: Platform) -> None:
        self.reloads += 1

    def restart(self, platform: Platform) -> None:
        self.restarts += 1


@pytest.fixture
def debian():
    return Platform(system="Linux", distro="debian", version="12", arch="x86_64", has_ipv6=True)


@pytest.fixture
def redhat():
    return Platform(system="Linux", distro="centos", version="9", arch="x86_64", has_ipv6=True)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def current_owner():
    """(user, group) of the test process, so chown works without root."""
    return pwd.getpwuid(os.getuid()).pw_name, grp.getgrgid(os.getgid()).gr_name


@pytest.fixture
def tmp_settings(tmp_path, current_owner):
    user, group = current_owner
    return Settings(
        daemon_user=user,
        daemon_group=group,
        vdir=str(tmp_path / "sites-available"),
        vdir_enable=str(tmp_path / "sites-enabled"),
        log_dir=str(tmp_path / "log"),
    )


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def nginx_service():
    return RecordingService("nginx")
