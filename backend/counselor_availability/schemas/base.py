"""
Shared response base and field types.

Responses are camelCase on the wire; snake_case names still populate models.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import core_schema

CENT = Decimal("0.01")


class StandardizedModel(BaseModel):
    """Base model for API responses"""

    model_config = ConfigDict(
        use_enum_values=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Money(Decimal):
    """Price rounded to cents; JSON output is a float (3000.0, not "3000.00")."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def to_cents(value: Any) -> Decimal:
            try:
                amount = value if isinstance(value, Decimal) else Decimal(str(value))
            except InvalidOperation as exc:
                raise ValueError(f"{value!r} is not a monetary amount") from exc
            return amount.quantize(CENT, rounding=ROUND_HALF_UP)

        return core_schema.no_info_after_validator_function(
            to_cents,
            core_schema.union_schema(
                [
                    core_schema.is_instance_schema(Decimal),
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )
