from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentboard.schemas.common import Amount, Count, Text
from rentboard.schemas.filters import FilterOptions, FilterState


class _Record(BaseModel):
    model_config = ConfigDict(extra='ignore')


class PortfolioMetrics(_Record):
    net_rent_month: Amount = 0.0
    net_rent_year: Amount = 0.0
    area_m2: Amount = 0.0
    wa_rent_eur_m2_month: Amount = 0.0
    walt_weighted_years: Amount = 0.0
    vacant_area_m2: Amount = 0.0
    vacant_units_count: Count = 0
    row_count: Count = 0


class MarketingKpis(_Record):
    tenants_count: Count = 0
    units_count: Count = 0
    top5_concentration: Amount = 0.0
    expiry_12m_net_rent_year: Amount = 0.0
    indexable_rent_share: Amount = 0.0


class TenantRent(_Record):
    tenant: Text = 'Unknown'
    net_rent_year: Amount = 0.0

    @field_validator('tenant', mode='before')
    @classmethod
    def unknown_when_null(cls, value: object) -> object:
        return 'Unknown' if value is None else value


class ExpiryYear(_Record):
    expiry_year: Count = 0
    net_rent_year: Amount = 0.0


class UpcomingExpiry(_Record):
    tenant: Text = ''
    city: Text = ''
    unit_id: Text = ''
    net_rent_year: Amount = 0.0
    next_possible_contract_end: Text = ''


class OverviewData(BaseModel):
    filters: FilterState
    options: FilterOptions
    metrics: PortfolioMetrics
    marketing: MarketingKpis
    top_tenants: list[TenantRent] = Field(default_factory=list)
    expiry: list[ExpiryYear] = Field(default_factory=list)
    upcoming: list[UpcomingExpiry] = Field(default_factory=list)
    vacancy_rate_area: float = 0.0
    vacancy_rate_units: float = 0.0
