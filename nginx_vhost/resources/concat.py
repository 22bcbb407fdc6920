"""
Concat resource - build one file from ordered fragments.

Each fragment carries its own ensure-state, so a single block can be
added or removed without touching the others. The merge is a plain
sort on the two-digit order tag followed by concatenation.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from nginx_vhost.resources.file import File

PRESENT = "present"
ABSENT = "absent"

# (template name, context) -> rendered text
Renderer = Callable[[str, Dict[str, Any]], str]


@dataclass
class Fragment:
    """
    One ordered, independently toggleable piece of a target file.

    Attributes:
        order: Two-digit order tag ("00".."99")
        name: Fragment name, unique within a target
        target: Path of the file this fragment belongs to
        template: Template rendered for the fragment body
        ensure: "present" or "absent"
        context: Variables passed to the template
    """
    order: str
    name: str
    target: str
    template: str
    ensure: str = PRESENT
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def present(self) -> bool:
        return self.ensure == PRESENT

    @property
    def sort_key(self):
        return (self.order, self.name)

    def render(self, renderer: Renderer) -> str:
        return renderer(self.template, self.context)


def merge_fragments(fragments: List[Fragment], renderer: Renderer) -> str:
    """
    Render present fragments and join them in order-tag order.

    Example:
        merge_fragments([footer, header], render)  # header text, then footer
    """
    ordered = sorted((f for f in fragments if f.present), key=lambda f: f.sort_key)
    return "".join(fragment.render(renderer) for fragment in ordered)


class Concat(File):
    """
    File whose content is the merge of its fragments.

    Example:
        Concat("/etc/nginx/sites-available/app.conf",
               fragments=emit_fragments(vhost),
               renderer=TemplateRenderer(),
               owner="www-data", group="www-data", mode=0o644)
    """

    def __init__(
        self,
        path: str,
        fragments: Optional[List[Fragment]] = None,
        renderer: Optional[Renderer] = None,
        ensure: str = PRESENT,
        mode: Optional[int] = None,
        owner: Optional[str] = None,
        group: Optional[str] = None,
        **options
    ):
        if ensure not in (PRESENT, ABSENT):
            raise ValueError(f"Invalid ensure for {path}: {ensure!r}")

        super().__init__(
            path,
            ensure="file" if ensure == PRESENT else "absent",
            mode=mode,
            owner=owner,
            group=group,
            **options
        )
        self.fragments: List[Fragment] = []
        self.renderer = renderer
        for fragment in fragments or []:
            self.add_fragment(fragment)

    def resource_type(self) -> str:
        return "concat"

    def add_fragment(self, fragment: Fragment) -> Fragment:
        """
        Attach a fragment to this target.

        Raises:
            ValueError: If the fragment targets another file or its name is taken
        """
        if fragment.target != self.path:
            raise ValueError(
                f"Fragment {fragment.name} targets {fragment.target}, not {self.path}"
            )
        if any(f.name == fragment.name for f in self.fragments):
            raise ValueError(f"Duplicate fragment {fragment.name} for {self.path}")
        self.fragments.append(fragment)
        return fragment

    def desired_content(self) -> str:
        if self.renderer is None:
            raise RuntimeError(f"No renderer configured for {self.path}")
        return merge_fragments(self.fragments, self.renderer)
