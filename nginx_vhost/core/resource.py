"""
Resources, plans and the platform they are planned against.

File, Concat and Service compare the state they check on the host with
the state a vhost declares, and apply only the difference.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, List
import platform as platform_module

import distro as distro_lib

from nginx_vhost.transport import Transport, NullTransport, LocalTransport


class Action(Enum):
    NONE = "none"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class Change:
    """One property moving from its checked value to its declared value."""
    field: str
    from_value: Any
    to_value: Any

    def __str__(self):
        return f"{self.field}: {self.from_value} → {self.to_value}"


@dataclass
class Plan:
    """What apply would do to one resource."""
    action: Action
    changes: List[Change] = field(default_factory=list)
    reason: str = ""

    def has_changes(self) -> bool:
        return self.action != Action.NONE and len(self.changes) > 0

    def __str__(self):
        if self.action == Action.NONE:
            return "No changes"

        lines = [f"Action: {self.action.value}"]
        if self.reason:
            lines.append(f"Reason: {self.reason}")
        for change in self.changes:
            lines.append(f"  {change}")
        return "\n".join(lines)


# distro ids reported by some releases that we fold into a shorter name
_DISTRO_ALIASES = {
    "linuxmint": "mint",
}


@dataclass
class Platform:
    """Platform information (OS, distro, version, IPv6 availability)."""
    system: str  # Linux, Darwin, Windows
    distro: str  # ubuntu, debian, centos, etc.
    version: str = ""
    arch: str = ""
    has_ipv6: bool = False

    @classmethod
    def detect(cls, transport: Optional[Transport] = None) -> "Platform":
        """
        Detect platform information for the local host.

        Args:
            transport: Transport used to read /proc (default: LocalTransport)
        """
        transport = transport or LocalTransport()
        system = platform_module.system()
        arch = platform_module.machine()

        distro = "unknown"
        version = ""
        if system == "Linux":
            distro = distro_lib.id() or "unknown"
            version = distro_lib.version()
        elif system == "Darwin":
            distro = "macos"
            version = platform_module.mac_ver()[0]

        return cls(
            system=system,
            distro=_DISTRO_ALIASES.get(distro, distro),
            version=version,
            arch=arch,
            has_ipv6=cls._detect_ipv6(transport),
        )

    @staticmethod
    def _detect_ipv6(transport: Transport) -> bool:
        """
        Best-effort check for a global IPv6 address.

        Reads /proc/net/if_inet6; columns are address, ifindex, prefix
        length, scope, flags and interface name. Scope 00 is global.
        """
        try:
            content = transport.read_file("/proc/net/if_inet6").decode()
        except (FileNotFoundError, PermissionError):
            return False

        for line in content.splitlines():
            parts = line.split()
            if len(parts) >= 6 and parts[3] == "00" and parts[5] != "lo":
                return True
        return False


class Resource(ABC):
    """
    Something on the host a vhost declares: a config file, a link, a service.

    Subclasses report checked and desired state as flat dicts; plan() diffs
    them and apply() acts on the resulting Plan.
    """

    def __init__(self, name: str, **options):
        """
        Args:
            name: Path or service name, e.g. "/etc/nginx/sites-available/x.conf"
        """
        self.name = name
        self.options = options
        self._desired_state: Dict[str, Any] = {}
        self._actual_state: Dict[str, Any] = {}
        self._transport: Transport = NullTransport()  # bound by Executor.add

    @property
    def id(self) -> str:
        """
        type:name, e.g. file:/etc/nginx/sites-enabled/app.conf, svc:nginx
        """
        return f"{self.resource_type()}:{self.name}"

    @abstractmethod
    def resource_type(self) -> str:
        """Return resource type string (file, concat, svc)."""
        pass

    @abstractmethod
    def check(self, platform: Platform) -> Dict[str, Any]:
        """State found on the host, e.g. {"exists": True, "mode": 0o644}."""
        pass

    @abstractmethod
    def desired_state(self) -> Dict[str, Any]:
        """State the vhost declares, keyed like check()."""
        pass

    def plan(self, platform: Platform) -> Plan:
        self._actual_state = self.check(platform)
        self._desired_state = self.desired_state()

        exists = self._actual_state.get("exists", False)
        should_exist = self._desired_state.get("exists", True)

        if not exists and should_exist:
            action = Action.CREATE
            reason = "Resource does not exist"
        elif exists and not should_exist:
            action = Action.DELETE
            reason = "Resource should not exist"
        elif not exists and not should_exist:
            action = Action.NONE
            reason = "Resource correctly absent"
        else:
            changes = self._detect_changes()
            if changes:
                return Plan(
                    action=Action.UPDATE,
                    changes=changes,
                    reason="Properties differ from desired state",
                )
            action = Action.NONE
            reason = "No changes needed"

        changes = []
        if action == Action.CREATE:
            for key, value in self._desired_state.items():
                if key != "exists":
                    changes.append(Change(key, None, value))
        elif action == Action.DELETE:
            # has_changes() needs a change to act on
            changes.append(Change("exists", True, False))

        return Plan(action=action, changes=changes, reason=reason)

    def _detect_changes(self) -> List[Change]:
        changes = []

        for key, desired_value in self._desired_state.items():
            if key == "exists":
                continue

            actual_value = self._actual_state.get(key)

            if desired_value is None and actual_value is None:
                continue

            if actual_value != desired_value:
                changes.append(Change(key, actual_value, desired_value))

        return changes

    @abstractmethod
    def apply(self, plan: Plan, platform: Platform) -> None:
        """
        Raises:
            RuntimeError: If a host command fails
        """
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r})"

    def __str__(self):
        return self.id
