from importlib.resources import files
from importlib.resources.abc import Traversable


def schema_definition(revision: str) -> Traversable:
    """The packaged ``metadata.xsd`` for a kernel revision, which may not exist."""
    return files("crosswalk") / "resources" / f"kernel-{revision}" / "metadata.xsd"
