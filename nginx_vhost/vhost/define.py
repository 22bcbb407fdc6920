"""
The vhost define: turns VhostParams into resources.

Evaluation order is normalize → validate → emit fragments → pick the
enable link. Nothing is declared unless validation passes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from nginx_vhost.core.executor import Executor
from nginx_vhost.core.resource import Platform
from nginx_vhost.logging import get_logger
from nginx_vhost.resources.concat import Concat, Fragment, Renderer, merge_fragments
from nginx_vhost.resources.file import File
from nginx_vhost.resources.service import Service
from nginx_vhost.templating import TemplateRenderer
from nginx_vhost.vhost.fragments import emit_fragments
from nginx_vhost.vhost.osfamily import EnableLink, enable_link_for
from nginx_vhost.vhost.params import NormalizedVhost, VhostParams, normalize
from nginx_vhost.vhost.settings import Settings
from nginx_vhost.vhost.validate import validate

logger = get_logger(__name__)

CONFIG_MODE = 0o644
NGINX_TEST_COMMAND = ["nginx", "-t"]


@dataclass
class VhostDeclaration:
    """Everything one vhost contributes, before it is handed to an executor."""
    vhost: NormalizedVhost
    fragments: List[Fragment]
    enable_link: Optional[EnableLink] = None
    warnings: List[str] = field(default_factory=list)


class Vhost:
    """
    One nginx virtual host.

    Example:
        site = Vhost(VhostParams("app.example.com", proxy="http://127.0.0.1:8000"),
                     settings, platform)
        site.declare(executor)
    """

    def __init__(
        self,
        params: Union[VhostParams, Dict[str, Any]],
        settings: Settings,
        platform: Platform,
        renderer: Optional[Renderer] = None,
    ):
        if isinstance(params, dict):
            params = VhostParams.from_dict(params)
        self.params = params
        self.settings = settings
        self.platform = platform
        self.renderer = renderer or TemplateRenderer()

    @property
    def name(self) -> str:
        return self.params.name

    def evaluate(self) -> VhostDeclaration:
        """
        Raises:
            ConfigurationError: If the parameters are inconsistent
        """
        vhost = normalize(self.params, self.settings)
        warnings = validate(vhost, self.platform)
        fragments = emit_fragments(vhost, has_ipv6=self.platform.has_ipv6)
        link = enable_link_for(self.platform, vhost)

        logger.debug(
            f"{vhost.name}: {len(fragments)} fragment(s) for {vhost.config_file}"
            + (f", enabled via {link.path}" if link else "")
        )
        return VhostDeclaration(vhost=vhost, fragments=fragments, enable_link=link, warnings=warnings)

    def render(self) -> str:
        """Merged config text, without touching the system."""
        return merge_fragments(self.evaluate().fragments, self.renderer)

    def declare(self, executor: Executor, service: Optional[Service] = None) -> VhostDeclaration:
        """
        Add this vhost's resources to an executor.

        The config file and enable link are subscribed to the service so
        that any content change reloads nginx. When no service is given,
        the one named in settings is reused or created. A given service
        is added to the executor if it is not there yet.
        """
        return self._add_resources(executor, self.evaluate(), service)

    def _add_resources(
        self,
        executor: Executor,
        declaration: VhostDeclaration,
        service: Optional[Service] = None,
    ) -> VhostDeclaration:
        vhost = declaration.vhost

        if service is None:
            service = _service_for(executor, self.settings)
        elif executor.get(service.id) is None:
            executor.add(service)

        concat = executor.add(Concat(
            vhost.config_file,
            fragments=declaration.fragments,
            renderer=self.renderer,
            ensure=vhost.ensure,
            mode=CONFIG_MODE,
            owner=vhost.owner,
            group=vhost.groupowner,
        ))
        service.subscribe(concat)

        if declaration.enable_link is not None:
            link = declaration.enable_link
            enable = executor.add(File(
                link.path,
                ensure="link" if link.ensure == "present" else "absent",
                target=link.target,
            ))
            service.subscribe(enable)

        if vhost.present and vhost.create_www_root and vhost.www_root:
            if executor.get(f"file:{vhost.www_root}") is None:
                executor.add(File(
                    vhost.www_root,
                    ensure="directory",
                    owner=vhost.owner,
                    group=vhost.groupowner,
                ))

        return declaration


def _service_for(executor: Executor, settings: Settings) -> Service:
    existing = executor.get(f"svc:{settings.service_name}")
    if isinstance(existing, Service):
        return existing
    service = Service(settings.service_name, test_command=NGINX_TEST_COMMAND)
    executor.add(service)
    return service


def declare_all(
    definitions: Iterable[Union[VhostParams, Dict[str, Any]]],
    settings: Settings,
    executor: Executor,
    renderer: Optional[Renderer] = None,
) -> List[VhostDeclaration]:
    """
    Evaluate every definition first, then declare them all.

    A ConfigurationError in any definition stops before anything is added.
    """
    renderer = renderer or TemplateRenderer()
    vhosts = [Vhost(d, settings, executor.platform, renderer) for d in definitions]
    evaluated = [(vhost, vhost.evaluate()) for vhost in vhosts]
    return [vhost._add_resources(executor, declaration) for vhost, declaration in evaluated]
