"""
Tests for SVG state discovery and live pose setup.
"""

import xml.etree.ElementTree as ET

import pytest

from vectorpose.markup.document import (
    LIVE_GROUP_ID,
    build_state_snapshots,
    discover_parts,
    discover_states,
    parse_svg,
    setup_live_pose,
    to_string,
)
from vectorpose.markup.style import get_style_property
from vectorpose.models.errors import MarkupError, PartMismatchError


def live_groups(root):
    return [el for el in root.iter() if el.get("id") == LIVE_GROUP_ID]


class TestParseSvg:

    def test_from_markup_string(self, pose_svg):
        root = parse_svg(pose_svg)
        assert root.tag.endswith("svg")

    def test_from_file(self, pose_svg, tmp_path):
        path = tmp_path / "walker.svg"
        path.write_text(pose_svg, encoding="utf-8")
        assert parse_svg(path).tag.endswith("svg")
        assert parse_svg(str(path)).tag.endswith("svg")

    def test_element_passthrough(self, pose_svg):
        root = ET.fromstring(pose_svg)
        assert parse_svg(root) is root

    def test_nested_svg_found(self):
        root = parse_svg('<html><body><svg xmlns="http://www.w3.org/2000/svg"/></body></html>')
        assert root.tag.endswith("svg")

    def test_invalid_markup(self):
        with pytest.raises(MarkupError):
            parse_svg("<svg><g></svg>")

    def test_missing_file(self, tmp_path):
        with pytest.raises(MarkupError):
            parse_svg(tmp_path / "missing.svg")

    def test_no_svg_element(self):
        with pytest.raises(MarkupError):
            parse_svg("<html><body/></html>")


class TestDiscovery:

    def test_states_in_document_order(self, pose_svg):
        states = discover_states(parse_svg(pose_svg))
        assert list(states) == ["center", "left", "right"]

    def test_non_state_groups_ignored(self):
        root = parse_svg(
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<g id="background"/><g id="state_"/><g id="state_idle"><rect data-part="a"/></g>'
            '</svg>'
        )
        assert list(discover_states(root)) == ["idle"]

    def test_no_states(self):
        with pytest.raises(MarkupError, match="state_"):
            discover_states(parse_svg('<svg xmlns="http://www.w3.org/2000/svg"/>'))

    def test_parts_per_state(self, pose_svg):
        parts = discover_parts(discover_states(parse_svg(pose_svg)))
        assert set(parts) == {"center", "left", "right"}
        assert set(parts["left"]) == {"body", "head", "arm"}

    def test_state_without_parts(self):
        root = parse_svg('<svg xmlns="http://www.w3.org/2000/svg"><g id="state_idle"><rect/></g></svg>')
        with pytest.raises(MarkupError, match="idle"):
            discover_parts(discover_states(root))

    def test_part_mismatch_reports_both_sets(self):
        root = parse_svg(
            '<svg xmlns="http://www.w3.org/2000/svg">'
            '<g id="state_a"><rect data-part="x"/><rect data-part="y"/></g>'
            '<g id="state_b"><rect data-part="x"/><rect data-part="z"/></g>'
            '</svg>'
        )
        with pytest.raises(PartMismatchError) as exc_info:
            discover_parts(discover_states(root))

        error = exc_info.value
        assert (error.reference_state, error.reference_parts) == ("a", ["x", "y"])
        assert (error.state, error.parts) == ("b", ["x", "z"])
        assert 'State "a" has parts [x,y]' in str(error)

    def test_snapshots(self, pose_svg):
        snapshots = build_state_snapshots(discover_parts(discover_states(parse_svg(pose_svg))))

        body = snapshots["left"]["body"]
        assert body.numeric["x"] == 60
        assert body.colors["fill"] == "#3366cc"
        assert snapshots["left"]["arm"].transform == "translate(-10,0) rotate(-20)"
        assert snapshots["center"]["arm"].transform is None


class TestLivePose:

    def test_setup_clones_initial_state(self, pose_svg):
        root = parse_svg(pose_svg)
        states = discover_states(root)

        live = setup_live_pose(root, states, "left")

        assert live_groups(root) == [live.group]
        assert live.current_state == "left"
        assert live.parts["body"].get_number("x") == 60
        assert live.parts["body"].element is not states["left"].find(".//*[@data-part='body']")
        for group in states.values():
            assert get_style_property(group, "display") == "none"

    def test_live_group_visible(self, pose_svg):
        root = parse_svg(pose_svg)
        live = setup_live_pose(root, discover_states(root), "center")
        assert "style" not in live.group.attrib

    def test_existing_live_group_replaced(self, pose_svg):
        root = parse_svg(pose_svg)
        states = discover_states(root)

        setup_live_pose(root, states, "center")
        second = setup_live_pose(root, states, "right")

        assert live_groups(root) == [second.group]

    def test_unknown_initial_state(self, pose_svg):
        root = parse_svg(pose_svg)
        with pytest.raises(MarkupError, match="Available states: center, left, right"):
            setup_live_pose(root, discover_states(root), "crouch")

    def test_live_edits_leave_state_groups_alone(self, pose_svg):
        root = parse_svg(pose_svg)
        states = discover_states(root)
        live = setup_live_pose(root, states, "center")

        live.parts["body"].set_number("x", 5)

        assert states["center"].find(".//*[@data-part='body']").get("x") == "80"

    def test_teardown(self, pose_svg):
        root = parse_svg(pose_svg)
        states = discover_states(root)
        live = setup_live_pose(root, states, "center")

        live.teardown()

        assert live_groups(root) == []
        for group in states.values():
            assert "style" not in group.attrib

    def test_serialization_keeps_default_namespace(self, pose_svg):
        root = parse_svg(pose_svg)
        setup_live_pose(root, discover_states(root), "center")

        document = to_string(root)

        assert document.startswith("<svg")
        assert 'xmlns="http://www.w3.org/2000/svg"' in document
        assert LIVE_GROUP_ID in document
