from fastapi import APIRouter, Depends, HTTPException, Request

from rentboard.api.deps import get_gateway
from rentboard.schemas.common import ErrorBody
from rentboard.services.dashboard_service import OverviewService
from rentboard.services.filter_codec import parse_query_params
from rentboard.services.gateway import AggregationError, AggregationGateway

router = APIRouter()


def aggregation_http_error(exc: AggregationError) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail={
            'error_code': 'AGGREGATION_BACKEND_ERROR',
            'message': 'Could not load aggregated data',
            'details': exc.as_dict(),
        },
    )


@router.get('/overview', responses={502: {'model': ErrorBody}})
async def portfolio_overview(request: Request, gateway: AggregationGateway = Depends(get_gateway)):
    filters = parse_query_params(request.query_params)
    try:
        data = await OverviewService.load(filters, gateway)
    except AggregationError as exc:
        raise aggregation_http_error(exc)
    return data.model_dump(mode='json')
