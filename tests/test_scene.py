from __future__ import annotations

import pytest

import dxfscene.scene as scene_module
from dxfscene.context import SceneOptions
from tests._scene_helpers import FakeShaper, drawing, entity


def test_circle_scene_bounds_and_viewport() -> None:
    doc = drawing([entity("CIRCLE", center=(0.0, 0.0, 0.0), radius=5.0)])

    scene = scene_module.build_scene(doc, 800, 600, shaper=None)

    assert scene.bounds.min[:2] == pytest.approx((-5.0, -5.0))
    assert scene.bounds.max[:2] == pytest.approx((5.0, 5.0))
    assert scene.viewport is not None
    assert scene.viewport.aspect_ratio == pytest.approx(800 / 600)
    assert scene.viewport.contains(scene.bounds)
    assert scene.diagnostics == ()


def test_two_vertex_line_scene() -> None:
    doc = drawing([entity("LINE", vertices=[(0.0, 0.0), (10.0, 0.0)])])

    scene = scene_module.build_scene(doc, shaper=None)

    (primitive,) = scene.world_primitives()
    assert primitive.kind == "line"
    assert primitive.vertices == ((0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    assert scene.bounds.min == (0.0, 0.0, 0.0)
    assert scene.bounds.max == (10.0, 0.0, 0.0)
    assert scene.viewport.width == pytest.approx(10.0)
    assert scene.viewport.height == pytest.approx(7.5)


def test_empty_scene_has_no_viewport() -> None:
    scene = scene_module.build_scene(drawing([entity("HATCH")]), shaper=None)

    assert scene.items == ()
    assert scene.viewport is None
    assert not scene.bounds.is_defined
    assert scene.diagnostics_by_kind() == {"empty_scene": 1, "unsupported_entity": 1}


def test_insert_scene_resolves_world_points() -> None:
    doc = drawing(
        [entity("INSERT", name="MARK", xscale=2.0, yscale=2.0)],
        blocks={"MARK": [entity("POINT", location=(1.0, 1.0, 0.0))]},
    )

    scene = scene_module.build_scene(doc, shaper=None)

    (primitive,) = scene.world_primitives()
    assert primitive.vertices == ((2.0, 2.0, 0.0),)
    assert scene.bounds.min[:2] == (2.0, 2.0)


def test_bad_entity_does_not_abort_scene() -> None:
    doc = drawing(
        [
            entity("INSERT", handle=1, name="MISSING"),
            entity("MTEXT", handle=2, text="hello", attachment_point=12),
            entity("POINT", handle=3, location=(1.0, 1.0, 0.0)),
        ]
    )

    scene = scene_module.build_scene(doc, shaper=FakeShaper())

    assert [item.handle for item in scene.items] == [3]
    assert scene.diagnostics_by_kind() == {"invalid_attachment": 1, "missing_reference": 1}


def test_text_without_shaper_is_reported() -> None:
    doc = drawing([entity("TEXT", text="label", insert=(0.0, 0.0, 0.0))])

    scene = scene_module.build_scene(doc, shaper=None)

    assert scene.diagnostics_by_kind() == {"empty_scene": 1, "missing_text_shaper": 1}


def test_types_filter_limits_entities() -> None:
    doc = drawing(
        [
            entity("LINE", handle=1, vertices=[(0.0, 0.0), (1.0, 1.0)]),
            entity("POINT", handle=2, location=(9.0, 9.0, 0.0)),
        ]
    )

    scene = scene_module.build_scene(doc, types="line", shaper=None)

    assert [item.handle for item in scene.items] == [1]
    assert scene.bounds.max[:2] == (1.0, 1.0)


def test_build_scene_leaves_drawing_untouched() -> None:
    line = entity("LWPOLYLINE", vertices=[(0.0, 0.0), (1.0, 0.0)], bulges=[1.0, 0.0])
    doc = drawing([line])
    before = dict(line.dxf)

    scene_module.build_scene(doc, shaper=None)

    assert dict(line.dxf) == before
    assert doc.entities == (line,)


def test_options_change_tessellation_density() -> None:
    doc = drawing([entity("CIRCLE", center=(0.0, 0.0, 0.0), radius=1.0)])

    scene = scene_module.build_scene(doc, shaper=None, options=SceneOptions(arc_segments=8))

    (primitive,) = scene.world_primitives()
    assert len(primitive.vertices) == 9


def test_resized_scene_keeps_items_and_rescales_viewport() -> None:
    doc = drawing([entity("CIRCLE", center=(0.0, 0.0, 0.0), radius=5.0)])
    scene = scene_module.build_scene(doc, 800, 600, shaper=None)

    resized = scene.resized(400, 600)

    assert resized.items is scene.items
    assert (resized.width, resized.height) == (400, 600)
    assert resized.viewport.width == pytest.approx(scene.viewport.width / 2.0)
    assert resized.viewport.height == pytest.approx(scene.viewport.height)


def test_resized_empty_scene_stays_empty() -> None:
    scene = scene_module.build_scene(drawing(), shaper=None)
    assert scene.resized(10, 10).viewport is None


def test_scene_bounds_match_aggregated_items() -> None:
    from dxfscene.bounds import scene_bounds

    doc = drawing(
        [
            entity("CIRCLE", handle=1, center=(3.0, 0.0, 0.0), radius=1.0),
            entity("POINT", handle=2, location=(-4.0, 7.0, 2.0)),
            entity("INSERT", handle=3, name="B", insert=(0.0, -9.0, 0.0)),
        ],
        blocks={"B": [entity("POINT", location=(1.0, 1.0, 0.0))]},
    )

    scene = scene_module.build_scene(doc, shaper=None)

    assert scene.bounds == scene_bounds(scene.items)
    assert scene.bounds.min[:2] == pytest.approx((-4.0, -8.0))
    assert scene.bounds.max[:2] == pytest.approx((4.0, 7.0))
