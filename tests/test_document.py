from __future__ import annotations

import pytest

import dxfscene.document as document_module
from tests._scene_helpers import drawing, entity

ezdxf = pytest.importorskip("ezdxf")


def _sample_doc():
    doc = ezdxf.new()
    doc.layers.add("WALLS", color=1)
    doc.linetypes.add("DASHED2", pattern=[0.75, 0.5, -0.25], description="Dashed __ __")
    msp = doc.modelspace()

    msp.add_line((0.0, 0.0), (10.0, 0.0), dxfattribs={"layer": "WALLS", "linetype": "DASHED2"})
    msp.add_lwpolyline([(0.0, 0.0, 0.0), (2.0, 0.0, 1.0)], format="xyb", close=True)
    msp.add_circle((5.0, 5.0), radius=2.0, dxfattribs={"color": 5})
    msp.add_text("label", dxfattribs={"insert": (1.0, 2.0), "height": 2.5, "rotation": 30.0})
    msp.add_mtext(
        "A\\PB",
        dxfattribs={"insert": (0.0, 0.0), "char_height": 3.0, "attachment_point": 5},
    )

    block = doc.blocks.new(name="MARK")
    block.add_point((1.0, 1.0))
    msp.add_blockref("MARK", (3.0, 4.0), dxfattribs={"xscale": 2.0, "yscale": 2.0, "rotation": 90.0})
    return doc


def _by_type(doc) -> dict:
    return {item.dxftype: item for item in doc.entities}


def test_from_ezdxf_converts_modelspace_entities() -> None:
    doc = document_module.from_ezdxf(_sample_doc())
    entities = _by_type(doc)

    assert [item.dxftype for item in doc.entities] == [
        "LINE",
        "LWPOLYLINE",
        "CIRCLE",
        "TEXT",
        "MTEXT",
        "INSERT",
    ]
    assert all(item.handle > 0 for item in doc.entities)

    line = entities["LINE"]
    assert line.dxf["vertices"] == [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0)]
    assert line.layer == "WALLS"
    assert line.linetype == "DASHED2"
    assert line.color is None

    polyline = entities["LWPOLYLINE"]
    assert polyline.dxf["bulges"] == [0.0, 1.0]
    assert polyline.dxf["closed"] is True

    circle = entities["CIRCLE"]
    assert circle.dxf["center"] == (5.0, 5.0, 0.0)
    assert circle.dxf["radius"] == 2.0
    assert circle.color == 0x0000FF

    text = entities["TEXT"]
    assert text.dxf["text"] == "label"
    assert text.dxf["height"] == 2.5
    assert text.dxf["rotation"] == 30.0

    mtext = entities["MTEXT"]
    assert mtext.dxf["text"] == "A\\PB"
    assert mtext.dxf["char_height"] == 3.0
    assert mtext.dxf["attachment_point"] == 5

    insert = entities["INSERT"]
    assert insert.dxf["name"] == "MARK"
    assert insert.dxf["insert"] == (3.0, 4.0, 0.0)
    assert insert.dxf["xscale"] == 2.0
    assert insert.dxf["rotation"] == 90.0


def test_from_ezdxf_collects_blocks_layers_and_linetypes() -> None:
    doc = document_module.from_ezdxf(_sample_doc())

    assert set(doc.blocks) == {"MARK"}
    (point,) = doc.blocks["MARK"]
    assert point.dxftype == "POINT"
    assert point.dxf["location"] == (1.0, 1.0, 0.0)

    assert doc.layers["WALLS"] == 0xFF0000
    assert doc.layers["0"] == 0xFFFFFF
    assert doc.linetypes["DASHED2"] == (0.5, -0.25)
    assert doc.linetypes["Continuous"] == ()


def test_true_color_wins_over_aci() -> None:
    from ezdxf.colors import rgb2int

    source = ezdxf.new()
    source.modelspace().add_line(
        (0.0, 0.0),
        (1.0, 1.0),
        dxfattribs={"color": 1, "true_color": rgb2int((1, 2, 3))},
    )

    (line,) = document_module.from_ezdxf(source).entities
    assert line.color == 0x010203


def test_read_round_trips_saved_file(tmp_path) -> None:
    path = tmp_path / "sample.dxf"
    _sample_doc().saveas(path)

    doc = document_module.read(str(path))

    assert doc.path == str(path)
    assert len(doc.entities) == 6
    assert "MARK" in doc.blocks


def test_scene_from_document_places_block_point() -> None:
    doc = document_module.from_ezdxf(_sample_doc())

    scene = doc.scene(types="INSERT", shaper=None)

    (primitive,) = scene.world_primitives()
    x, y, _z = primitive.vertices[0]
    assert x == pytest.approx(1.0)
    assert y == pytest.approx(6.0)


def test_drawing_tables_are_read_only() -> None:
    doc = drawing(blocks={"B": [entity("POINT")]}, layers={"0": 7})

    with pytest.raises(TypeError):
        doc.layers["0"] = 1
    with pytest.raises(TypeError):
        doc.blocks["C"] = ()
    assert isinstance(doc.blocks["B"], tuple)


def test_query_normalizes_type_filters() -> None:
    doc = drawing(
        [
            entity("LINE", handle=1),
            entity("CIRCLE", handle=2),
            entity("LWPOLYLINE", handle=3),
            entity("POINT", handle=4),
        ]
    )
    layout = doc.modelspace()

    def handles(types) -> list[int]:
        return [item.handle for item in layout.query(types)]

    assert handles(None) == [1, 2, 3, 4]
    assert handles("line, circle") == [1, 2]
    assert handles(["point"]) == [4]
    assert handles("*") == [1, 2, 3, 4]
    assert handles("all") == [1, 2, 3, 4]
    assert handles("L*") == [1, 3]
    assert handles("") == [1, 2, 3, 4]
    assert handles("ARC") == []
    assert list(layout.iter_entities("POINT")) == list(layout.query("POINT"))


def test_drawing_and_layout_plot_delegate_to_renderer(monkeypatch) -> None:
    import dxfscene.render as render_module

    calls: list[tuple] = []
    monkeypatch.setattr(
        render_module,
        "plot",
        lambda target, *args, **kwargs: calls.append((target, args, kwargs)) or "ax",
    )
    doc = drawing([entity("POINT")])
    layout = doc.modelspace()

    assert doc.plot(types="POINT", show=False) == "ax"
    assert layout.plot(show=False) == "ax"
    assert calls == [
        (doc, (), {"types": "POINT", "show": False}),
        (layout, (), {"show": False}),
    ]
