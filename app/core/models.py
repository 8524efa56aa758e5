import re
from pydantic import BaseModel

def to_camel_case(snake_str):
    """Convert snake_case string to camelCase"""
    return re.sub(r'_([a-z])', lambda m: m.group(1).upper(), snake_str)

class CamelCaseModel(BaseModel):
    """Base model that converts all snake_case field names to camelCase in JSON output"""

    class Config:
        alias_generator = to_camel_case
        populate_by_name = True
        from_attributes = True
