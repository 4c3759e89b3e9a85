import sys

import dxfscene


def main() -> None:
    path = sys.argv[1] if len(sys.argv) > 1 else "plan.dxf"
    doc = dxfscene.read(path)
    scene = doc.scene(width=1024, height=768)

    print(f"items: {len(scene.items)}")
    print(f"bounds: {scene.bounds.min[:2]} .. {scene.bounds.max[:2]}")
    for kind, count in scene.diagnostics_by_kind().items():
        print(f"{kind}: {count}")

    ax = dxfscene.plot(scene, show=False, title=path)
    ax.figure.savefig("plan.png", dpi=150)
    print("saved: plan.png")


if __name__ == "__main__":
    main()
