import os
from typing import Annotated, NewType

from annotated_types import Predicate

TPath = NewType("TPath", str)


def _is_glob(pattern) -> bool:
    # Only `*` is a wildcard; `?` and brackets are matched literally.
    if not isinstance(pattern, str):
        return False
    return "*" in pattern


def _is_extension(name: str) -> bool:
    return bool(name) and os.sep not in name and "/" not in name and "*" not in name


TGlob = Annotated[NewType("TGlob", str), Predicate(_is_glob)]
TExtension = Annotated[NewType("TExtension", str), Predicate(_is_extension)]

TExclusion = TPath | TGlob
"""
TExclusion is a union of:
- TPath: A file or directory name (matched against every path component), or a
  relative path containing '/' (matched against the whole relative path).
- TGlob: Either of the above with one or more '*' wildcards.
"""


def describe_exclusion(pattern: TExclusion) -> str:
    if "/" in pattern:
        kind = "paths matching" if _is_glob(pattern) else "the path"
    else:
        kind = "names matching" if _is_glob(pattern) else "entries named"
    return f"{kind} {pattern!r}"
