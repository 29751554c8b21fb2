"""
bakery_api.pipeline.rules

Rule sets (pydantic models) and the validation wrapper the pipeline calls.

Responsibilities:
- Provide the `RuleSet` base every body/query/path model derives from
  (unknown keys dropped, camelCase wire names, immutable instances).
- Validate raw mappings into normalized plain dicts, strictly for JSON bodies and
  with string coercion for query/path slots.
- Translate pydantic errors into ordered, dotted-path field violations.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Annotated, Any

import pydantic
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from bakery_api.errors import ValidationError

# Query strings and path segments only; `int()` alone would also take "1_0" and non-ASCII digits.
_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def _ascii_integer(value: Any) -> Any:
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value) is None:
        raise PydanticCustomError("int_parsing", "Input should be a valid integer")
    return value


# Integer field that may arrive as text (query/path). Bodies validate strictly and never see text here.
QueryInt = Annotated[int, BeforeValidator(_ascii_integer)]


class RuleSet(BaseModel):
    """
    Base for every request rule set.

    Field order is declaration order, which is also the violation order.
    Optional fields without a default are omitted from the normalized value
    when absent (or null).
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        allow_inf_nan=False,
    )


@dataclass(frozen=True, slots=True)
class Violation:
    field: str
    message: str
    code: str = "value_error"

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    value: dict[str, Any] | None = None
    violations: tuple[Violation, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def missing(self) -> list[str]:
        return [v.field for v in self.violations if v.code == "missing"]


def _violation(error: Any) -> Violation:
    return Violation(
        field=".".join(str(part) for part in error["loc"]),
        message=error["msg"],
        code=error["type"],
    )


def validate(rule_set: type[RuleSet], raw: Any, *, coerce: bool = False) -> ValidationOutcome:
    """
    Validate `raw` against `rule_set`.

    Pure and deterministic. Either every field passes and the normalized value
    (wire names, defaults applied) is returned, or the outcome carries every
    violation and no value.
    """

    try:
        parsed = rule_set.model_validate(raw if raw is not None else {}, strict=not coerce)
    except pydantic.ValidationError as e:
        return ValidationOutcome(violations=tuple(_violation(err) for err in e.errors()))
    return ValidationOutcome(value=parsed.model_dump(by_alias=True, exclude_none=True))


def validate_or_raise(
    rule_set: type[RuleSet],
    raw: Any,
    *,
    coerce: bool = False,
    slot: str = "body",
) -> dict[str, Any]:
    outcome = validate(rule_set, raw, coerce=coerce)
    if outcome.ok:
        return outcome.value or {}

    missing = outcome.missing
    if missing:
        message = f"Missing required field(s): {', '.join(missing)}"
    else:
        message = f"Invalid request {slot}"
    raise ValidationError(message, violations=[v.to_dict() for v in outcome.violations])


# --- Module Notes -----------------------------------------------------------
# Only query and path slots validate with coerce=True; JSON bodies must already
# carry the right types (pydantic strict mode).
