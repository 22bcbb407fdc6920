"""
Service resource - manage the web server service.

Supports systemd via systemctl. Reloads are triggered by the executor
when any resource listed in reload_on changed during apply.
"""

from typing import Any, Dict, List, Optional

from nginx_vhost.core import Plan, Platform, Resource


class Service(Resource):
    """
    Service resource for managing system services.

    Examples:
        # Reload nginx when a vhost file changes
        conf = executor.add(Concat("/etc/nginx/sites-available/app.conf", ...))
        executor.add(Service("nginx", reload_on=[conf]))

        # Validate the config before reloading
        Service("nginx", reload_on=[conf], test_command=["nginx", "-t"])
    """

    def __init__(
        self,
        name: str,
        running: Optional[bool] = None,
        enabled: Optional[bool] = None,
        reload_on: Optional[List] = None,
        restart_on: Optional[List] = None,
        test_command: Optional[List[str]] = None,
        **options,
    ):
        """
        Initialize service resource.

        Args:
            name: Service name
            running: Whether service should be running
            enabled: Whether service should be enabled at boot
            reload_on: Resources (or ids) that trigger a reload
            restart_on: Resources (or ids) that trigger a restart
            test_command: Command that must succeed before reload/restart
        """
        super().__init__(name, **options)

        self.service_name = name
        self.running = running
        self.enabled = enabled
        self.reload_on = self._extract_resource_ids(reload_on or [])
        self.restart_on = self._extract_resource_ids(restart_on or [])
        self.test_command = test_command

    def _extract_resource_ids(self, resources: List) -> List[str]:
        """Extract resource IDs from resource objects or strings."""
        ids = []
        for r in resources:
            if isinstance(r, str):
                ids.append(r)
            elif hasattr(r, "id"):
                ids.append(r.id)
        return ids

    def subscribe(self, resource) -> None:
        """Add a resource to the reload triggers."""
        for rid in self._extract_resource_ids([resource]):
            if rid not in self.reload_on:
                self.reload_on.append(rid)

    def resource_type(self) -> str:
        return "svc"

    def check(self, platform: Platform) -> Dict[str, Any]:
        """Check service state."""
        state: Dict[str, Any] = {"exists": True}
        if self.running is not None:
            state["running"] = self._systemctl_ok("is-active")
        if self.enabled is not None:
            state["enabled"] = self._systemctl_ok("is-enabled")
        return state

    def desired_state(self) -> Dict[str, Any]:
        """Return desired service state."""
        state: Dict[str, Any] = {"exists": True}

        if self.running is not None:
            state["running"] = self.running
        if self.enabled is not None:
            state["enabled"] = self.enabled

        return state

    def apply(self, plan: Plan, platform: Platform) -> None:
        """Apply service changes."""
        for change in plan.changes:
            if change.field == "running":
                self._systemctl("start" if change.to_value else "stop")
            elif change.field == "enabled":
                self._systemctl("enable" if change.to_value else "disable")

    def reload(self, platform: Platform) -> None:
        """Validate then reload service configuration."""
        self._test_config()
        self._systemctl("reload")

    def restart(self, platform: Platform) -> None:
        """Validate then restart service."""
        self._test_config()
        self._systemctl("restart")

    def should_reload(self, changed_resource_ids: List[str]) -> bool:
        return any(rid in changed_resource_ids for rid in self.reload_on)

    def should_restart(self, changed_resource_ids: List[str]) -> bool:
        return any(rid in changed_resource_ids for rid in self.restart_on)

    def _test_config(self) -> None:
        if not self.test_command:
            return
        output, code = self._transport.run_command(self.test_command)
        if code != 0:
            raise RuntimeError(
                f"Config test failed for {self.service_name}, not reloading: {output.strip()}"
            )

    def _systemctl_ok(self, verb: str) -> bool:
        _, code = self._transport.run_command(["systemctl", verb, self.service_name])
        return code == 0

    def _systemctl(self, verb: str) -> None:
        output, code = self._transport.run_command(["systemctl", verb, self.service_name])
        if code != 0:
            raise RuntimeError(f"Failed to {verb} service {self.service_name}: {output.strip()}")
