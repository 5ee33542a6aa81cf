from __future__ import annotations

import json
from typing import Any

from pydantic_core import to_jsonable_python


def json_serializer(
    obj: Any, *, indent: int | None = None, ensure_ascii: bool = True
) -> str:
    """Dump ``obj`` as JSON.

    Values the json module cannot encode itself (models, enums, paths,
    dates) are handed to pydantic.
    """
    return json.dumps(
        obj, default=to_jsonable_python, indent=indent, ensure_ascii=ensure_ascii
    )
