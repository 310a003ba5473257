from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated

from graphdup import CopyAs, CopyPolicy, DuplicationSession, copy_field, duplicatable, duplicate


class Grade(Enum):
    S235 = "S235"
    S355 = "S355"
    C30 = "C30/37"


@duplicatable(CopyPolicy.MAP_OR_DUPLICATE)
@dataclass(eq=False)
class Tag:
    """Classification shared by many materials."""

    label: str


@dataclass(eq=False)
class Material:
    name: str
    grade: Grade
    tag: Tag | None = None
    usage_count: int = copy_field(CopyPolicy.DO_NOT_COPY, default=0)


@dataclass(eq=False)
class Library:
    materials: Annotated[
        list[Material], CopyAs(CopyPolicy.DUPLICATE, items=CopyPolicy.DUPLICATE)
    ] = field(default_factory=list)


def main() -> None:
    structural = Tag("structural")
    steel = Material("steel", Grade.S355, structural, usage_count=12)
    concrete = Material("concrete", Grade.C30, structural, usage_count=4)

    # Duplicating the roots one after another against one session keeps the tag shared
    session = DuplicationSession()
    steel_copy = duplicate(steel, session)
    concrete_copy = duplicate(concrete, session)

    print(f"Tag shared between copies: {steel_copy.tag is concrete_copy.tag}")
    print(f"Tag distinct from source: {steel_copy.tag is not structural}")
    print(f"Usage count reset: {steel_copy.usage_count}")

    # A whole library is one graph: the tag is duplicated once on the way
    library = Library([steel, concrete])
    library_copy = duplicate(library)
    first, second = library_copy.materials
    print(f"Library copy shares one tag: {first.tag is second.tag}")
    print(f"Session entries after two roots: {len(session)}")


if __name__ == "__main__":
    main()
