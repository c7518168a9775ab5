from fastapi import APIRouter, Depends, Request, Response

from rentboard.api.deps import get_gateway
from rentboard.api.v1.endpoints.portfolio import aggregation_http_error
from rentboard.schemas.common import ErrorBody
from rentboard.services.dashboard_service import ReceivablesService
from rentboard.services.filter_codec import parse_query_params
from rentboard.services.gateway import AggregationError, AggregationGateway
from rentboard.services.row_aggregator import ArrearsTable, parse_view_mode

router = APIRouter()


async def _load_table(request: Request, gateway: AggregationGateway):
    filters = parse_query_params(request.query_params)
    try:
        data = await ReceivablesService.load(filters, gateway)
    except AggregationError as exc:
        raise aggregation_http_error(exc)
    return data, ArrearsTable(data.rows, parse_view_mode(request.query_params.get('view')))


@router.get('/summary', responses={502: {'model': ErrorBody}})
async def receivables_summary(request: Request, gateway: AggregationGateway = Depends(get_gateway)):
    data, table = await _load_table(request, gateway)
    out = data.model_dump(mode='json', exclude={'rows'})
    out['table'] = {
        'mode': table.mode.value,
        'rows': [item.model_dump(mode='json') for item in table.displayed],
    }
    return out


@router.get('/export/csv', responses={502: {'model': ErrorBody}})
async def receivables_export_csv(request: Request, gateway: AggregationGateway = Depends(get_gateway)):
    _, table = await _load_table(request, gateway)
    return Response(
        content=table.to_csv(),
        media_type='text/csv',
        headers={'content-disposition': f'attachment; filename="arrears_{table.mode.value}.csv"'},
    )
