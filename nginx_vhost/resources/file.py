"""
File resource - manage files, directories and symbolic links.

Handles:
- File content
- File permissions (mode, owner, group)
- Directories (ensure="directory")
- Symbolic links (ensure="link")
- Removal (ensure="absent")
"""

from typing import Dict, Any, Optional
from pathlib import Path

from nginx_vhost.core.resource import Resource, Plan, Action, Platform

ENSURE_VALUES = ("file", "directory", "link", "absent")

# stat %F output → our type names
_STAT_TYPES = {
    "regular file": "file",
    "regular empty file": "file",
    "directory": "directory",
    "symbolic link": "link",
}


class File(Resource):
    """
    File resource for managing files, directories and links.

    Examples:
        # File with content
        File("/etc/nginx/conf.d/app.conf", content="server { }\\n")

        # Directory with owner/group
        File("/var/www/app", ensure="directory", owner="www-data", group="www-data")

        # Symbolic link
        File("/etc/nginx/sites-enabled/app.conf",
             ensure="link",
             target="/etc/nginx/sites-available/app.conf")
    """

    def __init__(
        self,
        path: str,
        content: Optional[str] = None,
        ensure: str = "file",
        target: Optional[str] = None,
        mode: Optional[int] = None,
        owner: Optional[str] = None,
        group: Optional[str] = None,
        **options
    ):
        """
        Initialize file resource.

        Args:
            path: File path
            content: Inline content
            ensure: "file", "directory", "link" or "absent"
            target: Link target (required for ensure="link")
            mode: File mode (e.g., 0o644)
            owner: Owner username
            group: Group name
        """
        if ensure not in ENSURE_VALUES:
            raise ValueError(f"Invalid ensure for {path}: {ensure!r}")
        if ensure == "link" and not target:
            raise ValueError(f"Link {path} requires a target")

        super().__init__(path, **options)

        self.path = path
        self.content = content
        self.ensure = ensure
        self.target = target
        self.mode = mode
        self.owner = owner
        self.group = group

    def resource_type(self) -> str:
        return "file"

    def check(self, platform: Platform) -> Dict[str, Any]:
        """Check current file state."""
        state: Dict[str, Any] = {
            "exists": False,
            "type": None,
            "content": None,
            "target": None,
            "mode": None,
            "owner": None,
            "group": None,
        }

        if not self._transport.file_exists(self.path):
            return state

        state["exists"] = True

        output, code = self._transport.run_command(
            ["stat", "-c", "%F|%a|%U|%G", self.path]
        )
        if code == 0:
            parts = output.strip().split("|")
            if len(parts) >= 4:
                file_type, mode_octal, owner, group = parts[:4]
                state["type"] = _STAT_TYPES.get(file_type.lower())
                try:
                    state["mode"] = int(mode_octal, 8)
                except ValueError:
                    pass
                state["owner"] = owner
                state["group"] = group

        if state["type"] == "link":
            state["target"] = self._transport.read_link(self.path)
        elif state["type"] == "file":
            try:
                state["content"] = self._transport.read_file(self.path).decode("utf-8")
            except UnicodeDecodeError:
                state["content"] = None

        return state

    def desired_state(self) -> Dict[str, Any]:
        """Return desired file state."""
        if self.ensure == "absent":
            return {"exists": False}

        state: Dict[str, Any] = {"exists": True, "type": self.ensure}

        if self.ensure == "link":
            # Link metadata is not managed, only where it points
            state["target"] = self.target
            return state

        if self.ensure == "file":
            state["content"] = self.desired_content()

        if self.mode is not None:
            state["mode"] = self.mode
        if self.owner is not None:
            state["owner"] = self.owner
        if self.group is not None:
            state["group"] = self.group

        return state

    def desired_content(self) -> Optional[str]:
        """Content the file should hold. Subclasses compute it."""
        return self.content

    def apply(self, plan: Plan, platform: Platform) -> None:
        """Apply file changes."""
        if plan.action == Action.DELETE:
            self._delete()
        elif plan.action == Action.CREATE:
            self._create()
        elif plan.action == Action.UPDATE:
            self._update(plan)

    def _create(self) -> None:
        """Create file, directory or link."""
        if self.ensure == "directory":
            self._run(["mkdir", "-p", self.path])
        else:
            parent = str(Path(self.path).parent)
            self._run(["mkdir", "-p", parent])

            if self.ensure == "link":
                self._run(["ln", "-sfn", self.target, self.path])
                return

            content = self._desired_state.get("content")
            if content is not None:
                self._transport.write_file(self.path, content.encode("utf-8"))
            else:
                self._run(["touch", self.path])

        self._set_metadata()

    def _update(self, plan: Plan) -> None:
        """Update existing file."""
        fields = {change.field: change for change in plan.changes}

        # Wrong kind of node: replace it wholesale
        if "type" in fields:
            self._delete()
            self._create()
            return

        for change in plan.changes:
            if change.field == "content":
                self._transport.write_file(self.path, change.to_value.encode("utf-8"))
            elif change.field == "target":
                self._run(["ln", "-sfn", self.target, self.path])
            elif change.field == "mode":
                self._run(["chmod", oct(change.to_value)[2:], self.path])

        if "owner" in fields or "group" in fields:
            self._set_owner()

    def _delete(self) -> None:
        """Delete file, directory or link."""
        self._run(["rm", "-rf", self.path])

    def _set_metadata(self) -> None:
        """Set file owner, group, and mode."""
        self._set_owner()
        if self.mode is not None:
            self._run(["chmod", oct(self.mode)[2:], self.path])

    def _set_owner(self) -> None:
        if self.owner is not None and self.group is not None:
            self._run(["chown", f"{self.owner}:{self.group}", self.path])
        elif self.owner is not None:
            self._run(["chown", self.owner, self.path])
        elif self.group is not None:
            self._run(["chgrp", self.group, self.path])

    def _run(self, args: list) -> str:
        output, code = self._transport.run_command(args)
        if code != 0:
            raise RuntimeError(f"{' '.join(args)} failed: {output.strip()}")
        return output
