from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentboard.schemas.common import Amount, Count, OptionalText, Text
from rentboard.schemas.filters import FilterOptions, FilterState

BUCKET_FIELDS = ('bucket_1_30', 'bucket_31_60', 'bucket_61_90', 'bucket_90_120', 'bucket_120_plus')


class _Record(BaseModel):
    model_config = ConfigDict(extra='ignore')


class ReceivablesMetrics(_Record):
    total_debt: Amount = 0.0
    risk_debt_90_plus: Amount = 0.0
    fresh_debt_30: Amount = 0.0
    row_count: Count = 0
    max_single_tenant_debt: Amount = 0.0


class AgingBucket(_Record):
    bucket: Text = ''
    amount: Amount = 0.0


class TopDebtor(_Record):
    # the remote procedure already puts the debtor group name in ``tenant``
    tenant: Text = 'Unknown'
    total_debt: Amount = 0.0

    @field_validator('tenant', mode='before')
    @classmethod
    def unknown_when_null(cls, value: object) -> object:
        return 'Unknown' if value is None else value


class DetailRow(_Record):
    """One open receivable line as delivered by ``receivables_list``."""

    tenant: Text = ''
    contact_name: OptionalText = None
    unit_id: Text = ''
    city: Text = ''
    invoice_date: Text = ''
    bucket_1_30: Amount = 0.0
    bucket_31_60: Amount = 0.0
    bucket_61_90: Amount = 0.0
    bucket_90_120: Amount = 0.0
    bucket_120_plus: Amount = 0.0
    total: Amount = 0.0

    @property
    def group_key(self) -> str:
        return self.contact_name or self.tenant

    @property
    def risk_amount(self) -> float:
        return self.bucket_90_120 + self.bucket_120_plus


class GroupSummary(BaseModel):
    """Consolidated exposure of one debtor group."""

    display_name: str
    city: str = ''
    count: int = 0
    bucket_1_30: float = 0.0
    bucket_31_60: float = 0.0
    bucket_61_90: float = 0.0
    bucket_90_120: float = 0.0
    bucket_120_plus: float = 0.0
    total: float = 0.0

    @property
    def risk_amount(self) -> float:
        return self.bucket_90_120 + self.bucket_120_plus


class ReceivablesData(BaseModel):
    filters: FilterState
    options: FilterOptions
    metrics: ReceivablesMetrics
    aging: list[AgingBucket] = Field(default_factory=list)
    top_debtors: list[TopDebtor] = Field(default_factory=list)
    rows: list[DetailRow] = Field(default_factory=list)
    risk_ratio: float = 0.0
