"""Base schema for API request and response bodies."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    camelCase on the wire, snake_case in Python.

    Input accepts either spelling; responses are serialized by alias, so
    ``agent_id`` is rendered as ``agentId``. ``from_attributes`` lets
    responses be built straight from stored documents:

        ServiceResponse.model_validate(service)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )
