"""Framework component generation for project icon files.

Icons are appended to a single icons file in the user's project, one
component per icon. Every component is preceded by a marker comment holding
its icon ID, which is how existing icons are found again.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal, Optional

IconFramework = Literal["react", "vue", "svelte", "solid", "svg"]

BANNER = (
    "Auto-generated icons file - managed by better-icons",
    "Do not edit manually - use sync_icon to add new icons",
)

# SVG attribute -> JSX prop
_REACT_ATTRIBUTES = {
    "class": "className",
    "clip-path": "clipPath",
    "fill-rule": "fillRule",
    "stroke-width": "strokeWidth",
    "stroke-linecap": "strokeLinecap",
    "stroke-linejoin": "strokeLinejoin",
}

_XML_DECLARATION_RE = re.compile(r"<\?xml[^>]*\?>")
_SCRIPT_MARKER_RE = re.compile(r"//\s*([\w-]+:[\w-]+)\s*\nexport\s+(?:const|function)\s+(\w+)")
_HTML_MARKER_RE = re.compile(r"<!--\s*([\w-]+:[\w-]+)\s*-->")
_EXPORT_RE = re.compile(r"export\s+(?:const|function)\s+(\w+)")


@dataclass
class SyncResult:
    """Outcome of adding an icon to an icons file."""

    component_name: str
    already_exists: bool = False


def icon_id_to_component_name(icon_id: str) -> str:
    """Convert an icon ID to a component name ("lucide:arrow-right" -> "ArrowRightIcon")."""
    _, _, name = icon_id.partition(":")
    if not name:
        return "Icon"
    parts = [p for p in re.split(r"[-_]", name) if p]
    return "".join(p[0].upper() + p[1:].lower() for p in parts) + "Icon"


def _react(name: str, svg: str, icon_id: str) -> str:
    for attr, prop in _REACT_ATTRIBUTES.items():
        svg = re.sub(rf"(?<![\w-]){attr}=", f"{prop}=", svg)
    svg = svg.replace("<svg", "<svg {...props}", 1)
    return (
        f"// {icon_id}\n"
        f"export const {name} = (props: React.SVGProps<SVGSVGElement>) => (\n"
        f"  {svg}\n"
        f");"
    )


def _vue(name: str, svg: str, icon_id: str) -> str:
    svg = svg.replace("<svg", '<svg v-bind="$attrs"', 1)
    return f"// {icon_id}\nexport const {name} = {{\n  template: `{svg}`,\n}};"


def _svelte(name: str, svg: str, icon_id: str) -> str:
    svg = svg.replace("<svg", "<svg class={className}", 1)
    return (
        f"<!-- {icon_id} -->\n"
        f"<script>\n"
        f'  export let className = "";\n'
        f"</script>\n"
        f"\n"
        f"{svg}"
    )


def _solid(name: str, svg: str, icon_id: str) -> str:
    svg = svg.replace("<svg", "<svg {...props}", 1)
    return (
        f"// {icon_id}\n"
        f'export const {name} = (props: JSX.IntrinsicElements["svg"]) => (\n'
        f"  {svg}\n"
        f");"
    )


def _svg(name: str, svg: str, icon_id: str) -> str:
    return f"// {icon_id}\nexport const {name} = `{svg}`;"


FORMATTERS: dict[str, Callable[[str, str, str], str]] = {
    "react": _react,
    "vue": _vue,
    "svelte": _svelte,
    "solid": _solid,
    "svg": _svg,
}

FRAMEWORK_IMPORTS = {
    "react": 'import type React from "react";',
    "solid": 'import type { JSX } from "solid-js";',
}


def _formatter(framework: str) -> Callable[[str, str, str], str]:
    try:
        return FORMATTERS[framework]
    except KeyError:
        valid = ", ".join(FORMATTERS)
        raise ValueError(f"Unknown framework: {framework}. Use one of: {valid}") from None


def generate_component(name: str, svg: str, icon_id: str, framework: IconFramework) -> str:
    """Generate component source for an icon.

    Args:
        name: Component/export name
        svg: Rendered SVG markup
        icon_id: Icon ID written into the marker comment
        framework: Target framework

    Returns:
        Component source code
    """
    clean_svg = _XML_DECLARATION_RE.sub("", svg).strip()
    return _formatter(framework)(name, clean_svg, icon_id)


def file_header(framework: IconFramework) -> str:
    """Header written at the top of a new icons file."""
    _formatter(framework)  # rejects unknown frameworks
    if framework == "svelte":
        lines = [f"<!-- {line} -->" for line in BANNER]
    else:
        lines = [f"// {line}" for line in BANNER]
    header = "\n".join(lines) + "\n\n"
    if framework in FRAMEWORK_IMPORTS:
        header += FRAMEWORK_IMPORTS[framework] + "\n\n"
    return header


def parse_existing_icons(path: Path) -> dict[str, str]:
    """Find icons already present in an icons file.

    Returns:
        Mapping of icon ID to component name (empty if the file is missing)
    """
    if not path.exists():
        return {}

    try:
        content = path.read_text()
    except (IOError, UnicodeDecodeError):
        return {}

    icons = {m.group(1): m.group(2) for m in _SCRIPT_MARKER_RE.finditer(content)}

    # Svelte components carry no export name of their own
    for match in _HTML_MARKER_RE.finditer(content):
        icon_id = match.group(1)
        export = _EXPORT_RE.search(content, match.end())
        icons[icon_id] = export.group(1) if export else icon_id_to_component_name(icon_id)

    return icons


def add_icon_to_file(
    path: Path,
    icon_id: str,
    svg: str,
    framework: IconFramework,
    component_name: Optional[str] = None,
) -> SyncResult:
    """Append an icon component to an icons file, creating it if needed.

    Icons already in the file are left alone and their existing name is
    reported instead.
    """
    existing = parse_existing_icons(path)
    if icon_id in existing:
        return SyncResult(component_name=existing[icon_id], already_exists=True)

    name = component_name or icon_id_to_component_name(icon_id)
    code = generate_component(name, svg, icon_id, framework)

    path.parent.mkdir(parents=True, exist_ok=True)
    content = path.read_text() if path.exists() else file_header(framework)
    path.write_text(content.rstrip() + "\n\n" + code + "\n")

    return SyncResult(component_name=name)


def import_statement(path: Path, component_name: str, framework: IconFramework) -> str:
    """Import line for a component in the icons file.

    The path is relative to a sibling module; callers adjust it to their layout.
    """
    stem = path.stem
    if framework == "svelte":
        return f"import {component_name} from './{stem}.svelte';"
    return f"import {{ {component_name} }} from './{stem}';"
