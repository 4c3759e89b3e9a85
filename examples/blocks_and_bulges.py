import ezdxf

import dxfscene


def main() -> None:
    source = ezdxf.new()
    msp = source.modelspace()
    msp.add_lwpolyline([(0, 0, 0.0), (4, 0, 0.5), (4, 3, 0.0), (0, 3, -1.0)], format="xyb", close=True)

    bolt = source.blocks.new(name="BOLT")
    bolt.add_circle((0, 0), radius=0.25)
    bolt.add_line((-0.3, 0), (0.3, 0))
    for x, y in ((0.5, 0.5), (3.5, 0.5), (3.5, 2.5), (0.5, 2.5)):
        msp.add_blockref("BOLT", (x, y), dxfattribs={"xscale": 1.5, "yscale": 1.5, "rotation": 45})

    scene = dxfscene.from_ezdxf(source).scene(width=800, height=600)
    print(f"primitives: {len(scene.world_primitives())}")
    print(f"viewport: {scene.viewport}")

    ax = dxfscene.plot(scene, show=False, title="Blocks and bulges")
    ax.figure.savefig("blocks_and_bulges.png", dpi=150)
    print("saved: blocks_and_bulges.png")


if __name__ == "__main__":
    main()
