from typing import Any, Mapping, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fintrack.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def first_error_message(errors: Sequence[Mapping[str, Any]]) -> str:
    """Render the first pydantic error as "field: message"."""
    if not errors:
        return "Invalid input"
    first = errors[0]
    # pydantic prefixes messages raised from validators
    message = str(first.get("msg", "Invalid input")).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field else message


def validate_fields(schema: Type[SchemaT], fields: Mapping[str, Any]) -> SchemaT:
    """Build schema from fields, raising the domain ValidationError on failure."""
    try:
        return schema.model_validate(dict(fields))
    except PydanticValidationError as exc:
        raise ValidationError(first_error_message(exc.errors())) from exc
