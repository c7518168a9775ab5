from __future__ import annotations

from rentboard.core.config import settings
from rentboard.schemas.filters import FilterState
from rentboard.schemas.portfolio import (
    ExpiryYear,
    MarketingKpis,
    OverviewData,
    PortfolioMetrics,
    TenantRent,
    UpcomingExpiry,
)
from rentboard.schemas.receivables import (
    AgingBucket,
    DetailRow,
    ReceivablesData,
    ReceivablesMetrics,
    TopDebtor,
)
from rentboard.services.filter_codec import to_rpc_params
from rentboard.services.gateway import (
    AggregationGateway,
    RpcRequest,
    as_records,
    decode_filter_options,
    first_record,
)
from rentboard.services.presentation import debt_risk_ratio, vacancy_rate_by_area, vacancy_rate_by_units


class OverviewService:
    @staticmethod
    def batch() -> list[RpcRequest]:
        return [
            RpcRequest('portfolio_metrics'),
            RpcRequest('portfolio_marketing_kpis'),
            RpcRequest('top_tenants', {'p_limit': settings.top_tenants_limit}),
            RpcRequest('expiry_exposure_yearly', {'p_years_ahead': settings.expiry_years_ahead}),
            RpcRequest('next_90_days_expiries', {'p_limit': settings.upcoming_expiries_limit}),
            RpcRequest('filter_options'),
        ]

    @staticmethod
    async def load(filters: FilterState, gateway: AggregationGateway | None = None) -> OverviewData:
        gateway = gateway or AggregationGateway()
        common = to_rpc_params(filters, include_indexable=True)
        res = await gateway.fetch_batch(common, OverviewService.batch())

        metrics = PortfolioMetrics.model_validate(first_record(res['portfolio_metrics']))
        return OverviewData(
            filters=filters,
            options=decode_filter_options(res['filter_options']),
            metrics=metrics,
            marketing=MarketingKpis.model_validate(first_record(res['portfolio_marketing_kpis'])),
            top_tenants=[TenantRent.model_validate(r) for r in as_records(res['top_tenants'])],
            expiry=[ExpiryYear.model_validate(r) for r in as_records(res['expiry_exposure_yearly'])],
            upcoming=[UpcomingExpiry.model_validate(r) for r in as_records(res['next_90_days_expiries'])],
            vacancy_rate_area=vacancy_rate_by_area(metrics.vacant_area_m2, metrics.area_m2),
            vacancy_rate_units=vacancy_rate_by_units(metrics.vacant_units_count, metrics.row_count),
        )


class ReceivablesService:
    @staticmethod
    def batch() -> list[RpcRequest]:
        return [
            RpcRequest('receivables_metrics'),
            RpcRequest('receivables_aging_breakdown'),
            RpcRequest('receivables_top_debtors', {'p_limit': settings.top_debtors_limit}),
            RpcRequest('receivables_list', {'p_limit': settings.receivables_list_limit}),
            RpcRequest('receivables_filter_options'),
        ]

    @staticmethod
    async def load(filters: FilterState, gateway: AggregationGateway | None = None) -> ReceivablesData:
        gateway = gateway or AggregationGateway()
        # receivables procedures take no indexable flag
        common = to_rpc_params(filters, include_indexable=False)
        res = await gateway.fetch_batch(common, ReceivablesService.batch())

        metrics = ReceivablesMetrics.model_validate(first_record(res['receivables_metrics']))
        return ReceivablesData(
            filters=filters,
            options=decode_filter_options(res['receivables_filter_options']),
            metrics=metrics,
            aging=[AgingBucket.model_validate(r) for r in as_records(res['receivables_aging_breakdown'])],
            top_debtors=[TopDebtor.model_validate(r) for r in as_records(res['receivables_top_debtors'])],
            rows=[DetailRow.model_validate(r) for r in as_records(res['receivables_list'])],
            risk_ratio=debt_risk_ratio(metrics.risk_debt_90_plus, metrics.total_debt),
        )
