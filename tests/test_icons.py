"""Tests for better_icons icons module."""

import pytest

from better_icons.icons import (
    IconData,
    IconSet,
    InvalidIconIdError,
    collection_prefix,
    icon_dimensions,
    parse_icon_id,
    render_svg,
    resolve_alias,
)


class TestResolveAlias:
    """Tests for resolve_alias."""

    def test_no_alias_returns_name(self):
        """Test that names without an alias pass through."""
        icon_set = IconSet(icons={"home": IconData(body="")})
        assert resolve_alias(icon_set, "home") == "home"

    def test_resolves_alias_to_parent(self):
        """Test that an alias resolves to its parent icon."""
        icon_set = IconSet.from_dict({
            "icons": {"house": {"body": ""}},
            "aliases": {"home": {"parent": "house"}},
        })
        assert resolve_alias(icon_set, "home") == "house"

    def test_unknown_name_without_aliases(self):
        """Test identity when the set has no alias mapping at all."""
        icon_set = IconSet.from_dict({"icons": {"home": {"body": ""}}})
        assert resolve_alias(icon_set, "arrow") == "arrow"

    def test_get_follows_alias(self):
        """Test IconSet.get looks up icons through aliases."""
        icon_set = IconSet.from_dict({
            "icons": {"house": {"body": "<path/>"}},
            "aliases": {"home": {"parent": "house"}},
        })
        assert icon_set.get("home").body == "<path/>"
        assert icon_set.get("missing") is None


class TestIconSetFromDict:
    """Tests for IconSet.from_dict."""

    def test_empty_document(self):
        """Test that every field is optional."""
        icon_set = IconSet.from_dict({})
        assert icon_set.icons == {}
        assert icon_set.aliases == {}
        assert icon_set.width is None

    def test_reads_dimensions(self):
        """Test icon and set dimensions are parsed."""
        icon_set = IconSet.from_dict({
            "icons": {"a": {"body": "<g/>", "width": 16, "left": 2}},
            "height": 32,
        })
        assert icon_set.icons["a"].width == 16
        assert icon_set.icons["a"].left == 2
        assert icon_set.height == 32

    def test_skips_alias_without_parent(self):
        """Test that malformed aliases are ignored."""
        icon_set = IconSet.from_dict({"aliases": {"x": {}, "y": "bad"}})
        assert icon_set.aliases == {}


class TestRenderSvg:
    """Tests for render_svg."""

    base_icon = IconData(body='<path d="M0 0"/>')

    def test_icon_dimensions_over_defaults(self):
        """Test icon dimensions win over set defaults."""
        icon = IconData(body='<path d="M0 0"/>', width=32, height=32)
        svg = render_svg(icon, IconSet(width=24, height=24))
        assert 'viewBox="0 0 32 32"' in svg

    def test_falls_back_to_set_defaults(self):
        """Test set defaults are used when the icon has no size."""
        svg = render_svg(self.base_icon, IconSet(width=48, height=48))
        assert 'viewBox="0 0 48 48"' in svg

    def test_falls_back_to_24(self):
        """Test 24x24 when neither icon nor set has a size."""
        svg = render_svg(self.base_icon, IconSet())
        assert 'viewBox="0 0 24 24"' in svg

    def test_left_top_offset(self):
        """Test left/top offsets go into the viewBox."""
        icon = IconData(body="<path/>", left=2, top=4, width=20, height=20)
        svg = render_svg(icon, IconSet())
        assert 'viewBox="2 4 20 20"' in svg

    def test_default_size_is_1em(self):
        """Test relative size when no pixel size is given."""
        svg = render_svg(self.base_icon, IconSet())
        assert 'width="1em" height="1em"' in svg

    def test_pixel_size(self):
        """Test literal pixel size."""
        svg = render_svg(self.base_icon, IconSet(), size=48)
        assert 'width="48" height="48"' in svg
        assert "1em" not in svg

    def test_current_color_fill_injected(self):
        """Test fill="currentColor" is added when no paint is declared."""
        svg = render_svg(self.base_icon, IconSet())
        assert '<path fill="currentColor" d="M0 0"/>' in svg

    def test_custom_color(self):
        """Test supplied color is used for injected fill."""
        svg = render_svg(self.base_icon, IconSet(), color="#ff0000")
        assert 'fill="#ff0000"' in svg
        assert "currentColor" not in svg

    def test_fill_injected_on_every_element(self):
        """Test every opening tag receives the fill."""
        icon = IconData(body='<g><circle cx="1"/><rect x="2"/></g>')
        svg = render_svg(icon, IconSet())
        assert svg.count('fill="currentColor"') == 3
        assert "</g>" in svg

    def test_preserves_existing_fill(self):
        """Test an existing fill is never overridden."""
        icon = IconData(body='<path fill="blue" d="M0 0"/>')
        svg = render_svg(icon, IconSet(), color="#ff0000")
        assert 'fill="blue"' in svg
        assert "#ff0000" not in svg

    def test_preserves_stroke_icons(self):
        """Test stroke-only icons get no injected fill."""
        icon = IconData(body='<path stroke="black" d="M0 0"/>')
        svg = render_svg(icon, IconSet())
        assert 'fill="currentColor"' not in svg

    def test_fill_rule_is_not_a_fill(self):
        """Test fill-rule alone does not count as a declared fill."""
        icon = IconData(body='<path fill-rule="evenodd" d="M0 0"/>')
        svg = render_svg(icon, IconSet())
        assert 'fill="currentColor"' in svg

    def test_empty_body(self):
        """Test empty body still renders a root element."""
        svg = render_svg(IconData(body=""), IconSet())
        assert svg == (
            '<svg xmlns="http://www.w3.org/2000/svg" width="1em" height="1em" '
            'viewBox="0 0 24 24"></svg>'
        )

    def test_icon_dimensions(self):
        """Test icon_dimensions mirrors render_svg sizing."""
        assert icon_dimensions(IconData(body="", width=16), IconSet(height=20)) == (16, 20)


class TestParseIconId:
    """Tests for parse_icon_id and collection_prefix."""

    def test_valid(self):
        """Test splitting a valid ID."""
        assert parse_icon_id("lucide:arrow-right") == ("lucide", "arrow-right")

    @pytest.mark.parametrize("icon_id", ["home", ":home", "mdi:", ""])
    def test_invalid(self, icon_id):
        """Test malformed IDs are rejected with the expected format."""
        with pytest.raises(InvalidIconIdError, match="prefix:name"):
            parse_icon_id(icon_id)

    def test_collection_prefix(self):
        """Test extracting the prefix."""
        assert collection_prefix("mdi:home") == "mdi"
        assert collection_prefix("random") == "random"
