from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake case in Python, camelCase on the wire (both accepted as input)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
