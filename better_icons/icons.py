"""Icon handling for Iconify icon sets.

Icon sets arrive as JSON documents keyed by icon name. This module turns
them into dataclasses, resolves aliases and renders standalone SVG markup.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DEFAULT_ICON_SIZE = 24
CURRENT_COLOR = "currentColor"

# fill= / stroke= as attribute names, not fill-rule= or stroke-width=
_PAINT_ATTR_RE = re.compile(r'(?<![\w-])(?:fill|stroke)\s*=')
# Opening tags only: skips </closing>, <!comments> and <?declarations?>
_OPEN_TAG_RE = re.compile(r'<([A-Za-z][\w:.-]*)')


class InvalidIconIdError(ValueError):
    """Raised when an icon identifier is not in 'prefix:name' form."""

    def __init__(self, icon_id: str):
        self.icon_id = icon_id
        super().__init__(f"Invalid icon ID '{icon_id}'. Use 'prefix:name' format.")


@dataclass
class IconData:
    """A single icon fragment."""

    body: str
    width: Optional[int] = None
    height: Optional[int] = None
    left: Optional[int] = None
    top: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "IconData":
        """Create from dictionary."""
        return cls(
            body=data.get("body") or "",
            width=data.get("width"),
            height=data.get("height"),
            left=data.get("left"),
            top=data.get("top"),
        )


@dataclass
class IconSet:
    """Icons from one collection plus aliases and set-level defaults."""

    icons: dict[str, IconData] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)  # alias -> parent
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "IconSet":
        """Create from an Iconify icon set document.

        Every field is optional. Aliases are flattened from
        ``{"alias": {"parent": "name"}}`` to ``{"alias": "name"}``.
        """
        icons = {
            name: IconData.from_dict(icon)
            for name, icon in (data.get("icons") or {}).items()
            if isinstance(icon, dict)
        }
        aliases = {
            name: alias["parent"]
            for name, alias in (data.get("aliases") or {}).items()
            if isinstance(alias, dict) and alias.get("parent")
        }
        return cls(
            icons=icons,
            aliases=aliases,
            width=data.get("width"),
            height=data.get("height"),
        )

    def get(self, name: str) -> Optional[IconData]:
        """Look up an icon by name, following aliases."""
        return self.icons.get(resolve_alias(self, name))


def parse_icon_id(icon_id: str) -> tuple[str, str]:
    """Split 'prefix:name' into its parts.

    Raises:
        InvalidIconIdError: If either part is missing.
    """
    prefix, _, name = icon_id.partition(":")
    if not prefix or not name:
        raise InvalidIconIdError(icon_id)
    return prefix, name


def collection_prefix(icon_id: str) -> str:
    """Get the collection prefix of an icon ID ("mdi:home" -> "mdi")."""
    return icon_id.split(":", 1)[0]


def resolve_alias(icon_set: IconSet, name: str) -> str:
    """Return the parent icon name for an alias, or the name unchanged."""
    return icon_set.aliases.get(name, name)


def icon_dimensions(icon: IconData, defaults: IconSet) -> tuple[int, int]:
    """Effective (width, height) of an icon within its set."""
    width = _first_set(icon.width, defaults.width, DEFAULT_ICON_SIZE)
    height = _first_set(icon.height, defaults.height, DEFAULT_ICON_SIZE)
    return width, height


def _first_set(*values: Optional[int]) -> int:
    return next(v for v in values if v is not None)


def render_svg(
    icon: IconData,
    defaults: IconSet,
    size: Optional[int] = None,
    color: Optional[str] = None,
) -> str:
    """Build a standalone SVG element for an icon.

    Args:
        icon: Icon fragment to render
        defaults: Icon set supplying default width/height
        size: Pixel size for width and height (defaults to 1em)
        color: Fill color injected when the body has no fill or stroke

    Returns:
        SVG markup string
    """
    width, height = icon_dimensions(icon, defaults)
    view_box = f"{_first_set(icon.left, 0)} {_first_set(icon.top, 0)} {width} {height}"
    if size is not None:
        svg_size = f'width="{size}" height="{size}"'
    else:
        svg_size = 'width="1em" height="1em"'

    body = icon.body
    if not _PAINT_ATTR_RE.search(body):
        fill = color or CURRENT_COLOR
        body = _OPEN_TAG_RE.sub(lambda m: f'<{m.group(1)} fill="{fill}"', body)

    return f'<svg xmlns="{SVG_NAMESPACE}" {svg_size} viewBox="{view_box}">{body}</svg>'
