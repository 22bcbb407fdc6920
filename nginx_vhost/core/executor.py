"""
Executor for declared vhost resources.

Resources are planned and applied in declaration order. After apply,
every Service whose triggers changed is restarted or reloaded once.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional
import time

from nginx_vhost.core.resource import Resource, Plan, Platform
from nginx_vhost.logging import get_vhost_logger
from nginx_vhost.resources.service import Service
from nginx_vhost.transport import Transport, LocalTransport

logger = get_vhost_logger(__name__)


@dataclass
class PlanResult:
    """Plans keyed by resource id, plus any resource that failed to plan."""
    plans: Dict[str, Plan] = field(default_factory=dict)
    errors: List[Exception] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        return sum(1 for plan in self.plans.values() if plan.has_changes())

    @property
    def has_changes(self) -> bool:
        return self.change_count > 0

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0


@dataclass
class ApplyResult:
    """Ids of changed resources and refreshed services, and collected errors."""
    changed_resources: List[str] = field(default_factory=list)
    reloaded_services: List[str] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


class Executor:
    """
    Example:
        executor = Executor(platform)
        conf = executor.add(Concat("/etc/nginx/sites-available/app.conf", fragments))
        executor.add(Service("nginx", reload_on=[conf]))

        plan_result = executor.plan()
        apply_result = executor.apply(plan_result)
    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Args:
            platform: Target platform, detected through the transport when None
            transport: Defaults to LocalTransport
        """
        self.transport = transport or LocalTransport()
        self.platform = platform or Platform.detect(self.transport)
        self.resources: List[Resource] = []
        self._registry: Dict[str, Resource] = {}

    def add(self, resource: Resource) -> Resource:
        """
        Register a resource and bind it to this executor's transport.

        Returns:
            The resource, so it can be subscribed to a Service

        Raises:
            ValueError: If a resource with the same id was already added
        """
        if resource.id in self._registry:
            raise ValueError(f"Duplicate resource: {resource.id}")

        resource._transport = self.transport

        self.resources.append(resource)
        self._registry[resource.id] = resource
        return resource

    def get(self, resource_id: str) -> Optional[Resource]:
        """Look up a declared resource, e.g. ``get("svc:nginx")``."""
        return self._registry.get(resource_id)

    def plan(self) -> PlanResult:
        """Plan every resource; planning failures are collected, not raised."""
        result = PlanResult()

        for resource in self.resources:
            try:
                result.plans[resource.id] = resource.plan(self.platform)
            except Exception as e:
                logger.error(f"Planning {resource.id} failed: {e}")
                result.errors.append(e)

        return result

    def apply(self, plan_result: PlanResult) -> ApplyResult:
        """
        Apply every plan that has changes.

        Resources are applied in declaration order. A failing resource is
        recorded and the remaining resources are still applied.
        """
        result = ApplyResult()
        start_time = time.time()

        for resource in self.resources:
            plan = plan_result.plans.get(resource.id)
            if not plan or not plan.has_changes():
                continue

            try:
                resource.apply(plan, self.platform)
                result.changed_resources.append(resource.id)
                logger.action(plan.action.value, resource.id)

                resource._actual_state = resource.check(self.platform)
            except Exception as e:
                logger.error(f"Applying {resource.id} failed: {e}")
                result.errors.append(e)

        if result.changed_resources:
            self._trigger_service_reloads(result)

        result.duration = time.time() - start_time
        return result

    def _trigger_service_reloads(self, result: ApplyResult) -> None:
        """nginx -t runs inside reload/restart, so a broken config is reported here."""
        for resource in self.resources:
            if not isinstance(resource, Service):
                continue

            try:
                # restart wins over reload
                if resource.should_restart(result.changed_resources):
                    resource.restart(self.platform)
                    logger.action("restart", resource.id)
                    result.reloaded_services.append(resource.id)
                elif resource.should_reload(result.changed_resources):
                    resource.reload(self.platform)
                    logger.action("reload", resource.id)
                    result.reloaded_services.append(resource.id)
            except Exception as e:
                logger.error(f"Refreshing {resource.id} failed: {e}")
                result.errors.append(e)

    def clear(self) -> None:
        """Forget every declared resource."""
        self.resources.clear()
        self._registry.clear()
