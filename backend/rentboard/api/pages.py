"""Server-rendered dashboard pages."""
from __future__ import annotations

from pathlib import Path
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from rentboard.api.deps import get_gateway
from rentboard.core.logging_config import structured_log
from rentboard.schemas.filters import FILTER_DIMENSIONS, FilterOptions, FilterState
from rentboard.schemas.portfolio import OverviewData
from rentboard.schemas.receivables import ReceivablesData
from rentboard.services import presentation as fmt
from rentboard.services.dashboard_service import OverviewService, ReceivablesService
from rentboard.services.filter_codec import build_query_string, parse_query_params
from rentboard.services.gateway import AggregationError, AggregationGateway
from rentboard.services.row_aggregator import ArrearsTable, ViewMode, parse_view_mode

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / 'templates'

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters.update(
    eur=fmt.fmt_eur,
    eur_or_dash=fmt.fmt_eur_or_dash,
    num=fmt.fmt_num,
    pct=fmt.fmt_pct,
    compact=fmt.fmt_compact,
    initials=fmt.initials,
    urgency=fmt.expiry_urgency,
)

router = APIRouter()


def _card(title: str, value: str, subtitle: list[str] | None = None, icon: str = '', variant: str = 'default') -> dict:
    return {'title': title, 'value': value, 'subtitle': subtitle or [], 'icon': icon, 'variant': variant}


def _filter_bar(path: str, filters: FilterState, options: FilterOptions, show_indexable: bool, view: str | None = None) -> dict:
    dimensions = []
    for dim in FILTER_DIMENSIONS:
        selected = list(filters.selected(dim))
        available = list(getattr(options, dim))
        # keep active selections visible even when the backend no longer lists them
        choices = available + [v for v in selected if v not in available]
        dimensions.append({'name': dim, 'label': dim.capitalize(), 'choices': choices, 'selected': selected})
    return {
        'action': path,
        'dimensions': dimensions,
        'search': filters.search or '',
        'indexable_only': filters.indexable_only,
        'show_indexable': show_indexable,
        'active_count': filters.active_count(),
        'view': view,
    }


def _canonical_redirect(request: Request, filters: FilterState, **extra: str | None) -> RedirectResponse | None:
    """Redirect to the serialized form of the filters when the incoming query differs."""
    canonical = build_query_string(filters, **extra)
    if sorted(request.query_params.multi_items()) == sorted(parse_qsl(canonical)):
        return None
    url = request.url.path + (f'?{canonical}' if canonical else '')
    return RedirectResponse(url, status_code=302)


def _error_page(request: Request, page: str, message: str, exc: AggregationError) -> HTMLResponse:
    structured_log(
        'error', 'page_load_failed',
        trace_id=getattr(request.state, 'trace_id', None),
        endpoint=f'GET {request.url.path}',
        page=page,
        **exc.as_dict(),
    )
    return templates.TemplateResponse(request, 'error.html', {'page': page, 'message': message}, status_code=502)


def overview_context(data: OverviewData) -> dict:
    m, mk = data.metrics, data.marketing
    cards_primary = [
        _card('Net Rent / Month', fmt.fmt_eur(m.net_rent_month), ['Recurring monthly revenue'], 'wallet', 'primary'),
        _card(
            'Vacancy Rate (Units)',
            fmt.fmt_pct(data.vacancy_rate_units),
            [
                f'{m.vacant_units_count} / {m.row_count} units vacant',
                f'{fmt.fmt_pct(data.vacancy_rate_area)} by GLA ({fmt.fmt_num(m.vacant_area_m2)} m²)',
            ],
            'percent',
            fmt.vacancy_variant(data.vacancy_rate_units),
        ),
        _card('WALT', f'{fmt.fmt_num(m.walt_weighted_years)} Yrs', ['Weighted by Net Rent'], 'calendar', fmt.walt_variant(m.walt_weighted_years)),
        _card('WA Rent', fmt.fmt_eur(m.wa_rent_eur_m2_month), ['Avg. per m² / month'], 'scale'),
    ]
    cards_secondary = [
        _card('Total Lettable Area', fmt.fmt_num(m.area_m2), ['Square meters'], 'area'),
        _card('Top 5 Concentration', fmt.fmt_pct(mk.top5_concentration), ['Of total annual rent'], 'building', fmt.concentration_variant(mk.top5_concentration)),
        _card('12m Expiry Risk', fmt.fmt_eur(mk.expiry_12m_net_rent_year), ['Expiring next 12 months'], 'alert', fmt.expiry_risk_variant(mk.expiry_12m_net_rent_year)),
        _card('Indexation', fmt.fmt_pct(mk.indexable_rent_share), ['Rent linked to index'], 'trend'),
    ]
    expiry_series = fmt.bar_series(data.expiry, 'expiry_year', 'net_rent_year')
    for point, row in zip(expiry_series, data.expiry):
        point['tone'] = fmt.expiry_tone(row.expiry_year)
    return {
        'data': data,
        'card_rows': [cards_primary, cards_secondary],
        'tenants_series': fmt.bar_series(data.top_tenants, 'tenant', 'net_rent_year'),
        'expiry_series': expiry_series,
    }


def receivables_context(data: ReceivablesData, table: ArrearsTable) -> dict:
    m = data.metrics
    cards = [
        _card('Total Outstanding', fmt.fmt_eur(m.total_debt), ['Total arrears across portfolio'], 'banknote', 'primary'),
        _card('Severe Risk (>90d)', fmt.fmt_eur(m.risk_debt_90_plus), [f'{fmt.fmt_pct(data.risk_ratio)} of total debt'], 'alert', fmt.debt_risk_variant(data.risk_ratio)),
        _card('Fresh Debt (<30d)', fmt.fmt_eur(m.fresh_debt_30), ['Likely technical arrears'], 'shield'),
        _card('Top Group Exposure', fmt.fmt_eur(m.max_single_tenant_debt), ['Largest single debtor group'], 'user'),
    ]
    aging_series = fmt.bar_series(data.aging, 'bucket', 'amount')
    for index, point in enumerate(aging_series):
        point['tone'] = fmt.aging_tone(index)
    return {
        'data': data,
        'card_rows': [cards],
        'aging_series': aging_series,
        'debtors_series': fmt.bar_series(data.top_debtors, 'tenant', 'total_debt'),
        'table': table,
        'group_href': '?' + build_query_string(data.filters, view=ViewMode.GROUP.value),
        'line_href': '?' + build_query_string(data.filters, view=ViewMode.LINE.value),
        'export_href': '/api/v1/receivables/export/csv?' + build_query_string(data.filters, view=table.mode.value),
    }


@router.get('/', response_class=HTMLResponse)
async def overview_page(request: Request, gateway: AggregationGateway = Depends(get_gateway)):
    filters = parse_query_params(request.query_params)
    redirect = _canonical_redirect(request, filters)
    if redirect is not None:
        return redirect
    try:
        data = await OverviewService.load(filters, gateway)
    except AggregationError as exc:
        return _error_page(request, 'overview', 'Error loading dashboard data. Please refresh.', exc)
    ctx = overview_context(data)
    ctx['filter_bar'] = _filter_bar(request.url.path, filters, data.options, show_indexable=True)
    return templates.TemplateResponse(request, 'overview.html', ctx)


@router.get('/receivables', response_class=HTMLResponse)
async def receivables_page(request: Request, gateway: AggregationGateway = Depends(get_gateway)):
    filters = parse_query_params(request.query_params)
    mode = parse_view_mode(request.query_params.get('view'))
    view = mode.value if 'view' in request.query_params else None
    redirect = _canonical_redirect(request, filters, view=view)
    if redirect is not None:
        return redirect
    try:
        data = await ReceivablesService.load(filters, gateway)
    except AggregationError as exc:
        return _error_page(request, 'receivables', 'Error loading receivables data. Please refresh.', exc)
    ctx = receivables_context(data, ArrearsTable(data.rows, mode))
    ctx['filter_bar'] = _filter_bar(request.url.path, filters, data.options, show_indexable=False, view=view)
    return templates.TemplateResponse(request, 'receivables.html', ctx)
