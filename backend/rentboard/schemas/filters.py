from pydantic import BaseModel, ConfigDict, Field, field_validator


FILTER_DIMENSIONS = ('fund', 'entity', 'country', 'city')


class FilterState(BaseModel):
    """Active filter selection for one page render. ``None`` means unrestricted."""

    model_config = ConfigDict(frozen=True)

    fund: tuple[str, ...] | None = None
    entity: tuple[str, ...] | None = None
    country: tuple[str, ...] | None = None
    city: tuple[str, ...] | None = None
    indexable_only: bool = False
    search: str | None = None

    def selected(self, dimension: str) -> tuple[str, ...]:
        return getattr(self, dimension) or ()

    def active_count(self) -> int:
        count = sum(len(self.selected(dim)) for dim in FILTER_DIMENSIONS)
        return count + (1 if self.search else 0) + (1 if self.indexable_only else 0)


class FilterOptions(BaseModel):
    fund: list[str] = Field(default_factory=list)
    entity: list[str] = Field(default_factory=list)
    country: list[str] = Field(default_factory=list)
    city: list[str] = Field(default_factory=list)

    @field_validator('fund', 'entity', 'country', 'city', mode='before')
    @classmethod
    def proper_sequence_only(cls, value: object):
        if not isinstance(value, list):
            return []
        return [str(v) for v in value if v is not None and str(v) != '']
