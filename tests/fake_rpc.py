"""In-process stand-in for the aggregation RPC backend, built on httpx.MockTransport."""
import json
from typing import Any

import httpx

from rentboard.services.gateway import AggregationGateway

RPC_BASE = 'http://rpc.test'

OVERVIEW_PAYLOADS: dict[str, Any] = {
    'portfolio_metrics': [
        {
            'net_rent_month': '100000',
            'net_rent_year': 1200000,
            'area_m2': 10000,
            'wa_rent_eur_m2_month': 12.4,
            'walt_weighted_years': 2.5,
            'vacant_area_m2': 1500,
            'vacant_units_count': 3,
            'row_count': 20,
        }
    ],
    'portfolio_marketing_kpis': [
        {
            'tenants_count': 12,
            'units_count': 20,
            'top5_concentration': 0.62,
            'expiry_12m_net_rent_year': 80000,
            'indexable_rent_share': 0.4,
        }
    ],
    'top_tenants': [
        {'tenant': 'Acme Logistics', 'net_rent_year': 300000},
        {'tenant': None, 'net_rent_year': '150000'},
    ],
    'expiry_exposure_yearly': [
        {'expiry_year': 2027, 'net_rent_year': 200000},
        {'expiry_year': 2031, 'net_rent_year': 100000},
    ],
    'next_90_days_expiries': [
        {
            'tenant': 'Acme Logistics',
            'city': 'Berlin',
            'unit_id': 'U-101',
            'net_rent_year': 50000,
            'next_possible_contract_end': '2026-11-30',
        }
    ],
    'filter_options': [{'fund': ['Fund I', 'Fund II'], 'entity': None, 'country': [], 'city': ['Berlin']}],
}

RECEIVABLES_PAYLOADS: dict[str, Any] = {
    'receivables_metrics': [
        {
            'total_debt': 1000,
            'risk_debt_90_plus': 200,
            'fresh_debt_30': 300,
            'row_count': 3,
            'max_single_tenant_debt': 600,
        }
    ],
    'receivables_aging_breakdown': [
        {'bucket': '1-30', 'amount': 300},
        {'bucket': '31-60', 'amount': 250},
        {'bucket': '61-90', 'amount': 250},
        {'bucket': '90+', 'amount': 200},
    ],
    'receivables_top_debtors': [{'tenant': 'Holding North', 'total_debt': 600}],
    'receivables_list': [
        {
            'tenant': 'Shop A', 'contact_name': 'Holding North', 'unit_id': 'U-1', 'city': 'Hamburg',
            'invoice_date': '2026-08-01', 'bucket_1_30': 100, 'bucket_31_60': 0, 'bucket_61_90': 0,
            'bucket_90_120': 0, 'bucket_120_plus': 0, 'total': 100,
        },
        {
            'tenant': 'Shop B', 'contact_name': 'Holding North', 'unit_id': 'U-2', 'city': 'Munich',
            'invoice_date': '2026-05-01', 'bucket_1_30': 0, 'bucket_31_60': 300, 'bucket_61_90': 0,
            'bucket_90_120': 200, 'bucket_120_plus': 0, 'total': '500',
        },
        {
            'tenant': 'Cafe C', 'contact_name': None, 'unit_id': 'U-3', 'city': 'Cologne',
            'invoice_date': '2026-09-01', 'bucket_1_30': 200, 'bucket_31_60': 0, 'bucket_61_90': 200,
            'bucket_90_120': 0, 'bucket_120_plus': 0, 'total': 400,
        },
    ],
    'receivables_filter_options': {'fund': ['Fund I'], 'entity': ['Prop GmbH'], 'country': 'DE', 'city': []},
}


class FakeRpcBackend:
    """Answers ``POST /rest/v1/rpc/<name>`` from canned payloads and records every call."""

    def __init__(self, payloads: dict[str, Any] | None = None, fail: set[str] | None = None, down: set[str] | None = None):
        self.payloads = dict(payloads or {})
        self.fail = set(fail or ())
        self.down = set(down or ())
        self.calls: list[tuple[str, dict[str, Any], httpx.Headers]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit('/', 1)[-1]
        body = json.loads(request.content or b'null')
        self.calls.append((name, body, request.headers))
        if name in self.down:
            raise httpx.ConnectError('connection refused', request=request)
        if name in self.fail:
            return httpx.Response(500, json={'message': f'{name} exploded'})
        return httpx.Response(200, json=self.payloads.get(name))

    def gateway(self) -> AggregationGateway:
        return AggregationGateway(base_url=RPC_BASE, api_key='test-key', transport=httpx.MockTransport(self.handler))

    def params_for(self, name: str) -> dict[str, Any]:
        for call_name, body, _ in self.calls:
            if call_name == name:
                return body
        raise KeyError(name)
