"""Validation helper functions."""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import FieldError


def field_errors_from_pydantic(exc: ValidationError, prefix: str = "") -> List[FieldError]:
    """Flatten a pydantic ValidationError into field-scoped errors.

    Locations are joined with dots and use the camelCase wire names,
    e.g. ``configuration.expectedStatusCode``.
    """
    errors = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        if prefix:
            path = f"{prefix}.{path}" if path else prefix
        errors.append(FieldError(field=path, message=error["msg"]))
    return errors


def drop_blank(fields: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Remove unset form values (None or blank strings) so defaults apply."""
    if not fields:
        return {}
    return {
        key: value for key, value in fields.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }
