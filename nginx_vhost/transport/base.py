"""
Base transport interface.

Resources never touch the filesystem or spawn processes directly; they go
through a Transport so tests and dry runs can swap the backend.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple


class Transport(ABC):
    """
    Abstract base class for command running and file operations.

    Implementations:
    - LocalTransport: Run commands locally
    - NullTransport: Placeholder until a resource joins an executor
    """

    @abstractmethod
    def run_command(self, args: list) -> Tuple[str, int]:
        """
        Run a command from list of arguments (no shell).

        Args:
            args: Command and arguments as list

        Returns:
            Tuple of (output, exit_code)

        Example:
            output, code = transport.run_command(["nginx", "-t"])
        """
        pass

    @abstractmethod
    def write_file(self, path: str, content: bytes) -> None:
        """
        Write content to a file.

        Raises:
            IOError: If write fails
        """
        pass

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        """
        Read file content.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """
        Check if a path exists. Dangling symlinks count as existing.
        """
        pass

    @abstractmethod
    def read_link(self, path: str) -> Optional[str]:
        """
        Return the target of a symlink, or None if path is not a link.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close transport connection.

        For LocalTransport this is a no-op.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes connection."""
        self.close()


class NullTransport(Transport):
    """
    Null Object pattern implementation for Transport.

    Raises helpful errors when methods are called, indicating that the
    resource was not added to an executor.
    """

    def _raise_error(self, method_name: str) -> None:
        raise RuntimeError(
            f"Cannot call {method_name}: Transport not initialized. "
            f"Resources must be added to an executor before use. "
            f"Example: executor.add(File(...))"
        )

    def run_command(self, args: list) -> Tuple[str, int]:
        self._raise_error("run_command()")
        return ("", 1)  # Never reached, but satisfies type checker

    def write_file(self, path: str, content: bytes) -> None:
        self._raise_error("write_file()")

    def read_file(self, path: str) -> bytes:
        self._raise_error("read_file()")
        return b""  # Never reached, but satisfies type checker

    def file_exists(self, path: str) -> bool:
        self._raise_error("file_exists()")
        return False  # Never reached, but satisfies type checker

    def read_link(self, path: str) -> Optional[str]:
        self._raise_error("read_link()")
        return None  # Never reached, but satisfies type checker

    def close(self) -> None:
        """No-op for null transport."""
        pass
