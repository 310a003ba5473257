"""Mesh duplication example.

Demonstrates:
- Element policies on container fields
- MAP_OR_COPY remapping of shared vertices
- Cycles through back-references
- Rebuilding skipped derived state in __post_duplicate__
- Loading duplicator configuration from GRAPHDUP_* environment variables
"""

from dataclasses import dataclass
from typing import Annotated

from graphdup import CopyAs, CopyPolicy, GraphDuplicator, copy_field
from graphdup.config import DuplicationSettings


@dataclass(eq=False)
class Vertex:
    x: float
    y: float


@dataclass(eq=False)
class Face:
    vertices: Annotated[list[Vertex], CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.MAP_OR_COPY)]
    mesh: "Mesh | None" = copy_field(CopyPolicy.MAP, default=None)


@dataclass(eq=False)
class Mesh:
    vertices: Annotated[list[Vertex], CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE)]
    faces: Annotated[list[Face], CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE)]
    perimeter: float = copy_field(CopyPolicy.DO_NOT_COPY, default=0.0)

    def __post_duplicate__(self) -> None:
        self.perimeter = compute_perimeter(self)


def compute_perimeter(mesh: Mesh) -> float:
    total = 0.0
    for face in mesh.faces:
        ring = face.vertices + face.vertices[:1]
        for a, b in zip(ring, ring[1:], strict=False):
            total += ((a.x - b.x) ** 2 + (a.y - b.y) ** 2) ** 0.5
    return total


def build_square() -> Mesh:
    vertices = [Vertex(0, 0), Vertex(1, 0), Vertex(1, 1), Vertex(0, 1)]
    mesh = Mesh(vertices, [])
    mesh.faces = [
        Face([vertices[0], vertices[1], vertices[2]], mesh),
        Face([vertices[0], vertices[2], vertices[3]], mesh),
    ]
    mesh.perimeter = compute_perimeter(mesh)
    return mesh


def main() -> None:
    settings = DuplicationSettings()
    duplicator = GraphDuplicator(settings.to_config())

    mesh = build_square()
    copy = duplicator.duplicate(mesh)

    shared = copy.faces[0].vertices[0] is copy.faces[1].vertices[0]
    print(f"Shared corner stays shared: {shared}")
    print(f"Faces point at the copy: {all(face.mesh is copy for face in copy.faces)}")
    print(f"Perimeter rebuilt: {copy.perimeter:.3f} (source {mesh.perimeter:.3f})")

    # Moving a vertex of the copy leaves the source untouched
    copy.vertices[2].x = 5.0
    print(f"Source vertex unchanged: {mesh.vertices[2].x}")

    # A face duplicated on its own keeps the source vertices and drops the mesh link
    lone = duplicator.duplicate(mesh.faces[0])
    print(f"Lone face shares vertices: {lone.vertices[0] is mesh.vertices[0]}")
    print(f"Lone face mesh link: {lone.mesh}")


if __name__ == "__main__":
    main()
