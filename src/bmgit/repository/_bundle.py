# pyright: reportAny=false, reportExplicitAny=false
"""Export bundle validation.

Import accepts any mapping that carries the ``repository``, ``commits`` and
``version`` fields and whose records parse. The only cross-record check is
that a non-null head resolves in the commit table; parent links are not
verified, and a broken chain simply ends history traversal early.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from bmgit.exceptions import ImportValidationError
from bmgit.repository._models import ExportBundle

REQUIRED_FIELDS = ("repository", "commits", "version")


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def validate_bundle(bundle: ExportBundle | Mapping[str, Any]) -> ExportBundle:
    """Validate an export bundle before it replaces any state.

    Args:
        bundle: A parsed bundle or its raw JSON-compatible form.

    Returns:
        The parsed bundle.

    Raises:
        ImportValidationError: If a required field is missing, a record does
            not parse, or the head does not resolve in the commit table.
    """
    if isinstance(bundle, ExportBundle):
        parsed = bundle
    else:
        if not isinstance(bundle, Mapping):
            msg = "Bundle must be a JSON object"
            raise ImportValidationError(msg)

        for field in REQUIRED_FIELDS:
            if _is_missing(bundle.get(field)):
                msg = f"Bundle is missing required field '{field}'"
                raise ImportValidationError(msg, field=field)

        try:
            parsed = ExportBundle.model_validate(dict(bundle))
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid bundle field '{location}': {first['msg']}"
            raise ImportValidationError(msg, field=location) from e

    head = parsed.repository.head
    if head is not None and head not in parsed.commits:
        msg = f"Repository head {head} is not in the commit table"
        raise ImportValidationError(msg, field="repository.head")

    return parsed
