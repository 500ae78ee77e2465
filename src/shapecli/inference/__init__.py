"""Best-effort annotations derived from canonical operations.

* :mod:`~shapecli.inference.pagination` -- pagination descriptors, explicit
  or inferred from member names.
* :mod:`~shapecli.inference.resources` -- resource grouping by CRUD verb and
  noun.
"""

from shapecli.inference.pagination import detect_pagination, infer_pagination
from shapecli.inference.resources import derive_noun, infer_resources, singularize

__all__ = [
    "derive_noun",
    "detect_pagination",
    "infer_pagination",
    "infer_resources",
    "singularize",
]
