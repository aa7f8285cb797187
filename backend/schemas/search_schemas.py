from pydantic import BaseModel, Field, field_validator

MAX_SEARCH_LIMIT = 10


class SearchRequest(BaseModel):
    q: str = Field(default='', max_length=200, description="Search query")
    limit: int = Field(default=MAX_SEARCH_LIMIT, description="Maximum number of results, clamped to 1..10")
    debug: bool = Field(default=False, description="Include scoring details")

    @field_validator('q', mode='before')
    def none_to_empty(cls, v):
        if v is None:
            return ''
        return v

    @field_validator('debug', mode='before')
    def empty_debug_to_false(cls, v):
        if v is None or v == '':
            return False
        return v

    @field_validator('limit', mode='before')
    def empty_limit_to_default(cls, v):
        if v is None or v == '':
            return MAX_SEARCH_LIMIT
        return v

    @field_validator('limit')
    def clamp_limit(cls, v):
        return min(max(v, 1), MAX_SEARCH_LIMIT)
