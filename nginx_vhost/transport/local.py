"""
Local transport - run commands on local machine.
"""

import os
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from nginx_vhost.transport.base import Transport


class LocalTransport(Transport):
    """
    Local transport for running commands on the local machine.

    Uses subprocess for command execution.
    """

    def run_command(self, args: list) -> Tuple[str, int]:
        """
        Run command from list of arguments.

        Args:
            args: Command and arguments as list

        Returns:
            Tuple of (output, exit_code); a missing binary reports 127
        """
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            return str(e), 127
        return result.stdout + result.stderr, result.returncode

    def write_file(self, path: str, content: bytes) -> None:
        """Write content to file."""
        Path(path).write_bytes(content)

    def read_file(self, path: str) -> bytes:
        """Read file content."""
        return Path(path).read_bytes()

    def file_exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def read_link(self, path: str) -> Optional[str]:
        if not os.path.islink(path):
            return None
        return os.readlink(path)

    def close(self) -> None:
        """No-op for local transport."""
        pass
