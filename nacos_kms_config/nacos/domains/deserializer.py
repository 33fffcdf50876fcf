"""JSON parsing and mapping into the caller's target type."""
import json
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import ConfigParseError

T = TypeVar("T")


def parse_content(content: str, data_id: str) -> Any:
    """Parse config content as JSON."""
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Failed to parse config from nacos, data_id: {data_id}: {e}") from e


def describe_errors(error: ValidationError) -> str:
    """One "loc: msg" line per error, without the offending input values."""
    lines = []
    for item in error.errors(include_input=False, include_url=False):
        loc = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"{loc}: {item['msg']}")
    return "; ".join(lines)


def to_target(data: Any, target: Type[T], data_id: str) -> T:
    """
    Map parsed JSON into target.

    target can be anything pydantic validates: a dataclass, a BaseModel,
    a TypedDict, dict, list and so on. Validation is strict, so "30" does
    not fill an int field. The document is re-serialized and validated in
    JSON mode so objects still map onto dataclasses and models.

    Raises:
        ConfigParseError: On missing fields or wrong types
    """
    try:
        return TypeAdapter(target).validate_json(json.dumps(data), strict=True)
    except ValidationError as e:
        # Input values are left out: they hold decrypted secrets
        raise ConfigParseError(
            f"Config from nacos does not match {getattr(target, '__name__', target)}, "
            f"data_id: {data_id}: {e.error_count()} validation error(s): {describe_errors(e)}"
        ) from None
