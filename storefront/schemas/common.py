# storefront/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for request/response bodies.

    Python side uses snake_case; JSON side uses camelCase
    (`item_id` <-> `itemId`). Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


# upper bound of the 32-bit integer id and quantity columns
MAX_INT = 2**31 - 1
