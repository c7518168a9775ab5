from fastapi import APIRouter

from rentboard.api.v1.endpoints import health, portfolio, receivables

router = APIRouter(prefix='/api/v1')
router.include_router(health.router, tags=['health'])
router.include_router(portfolio.router, prefix='/portfolio', tags=['portfolio'])
router.include_router(receivables.router, prefix='/receivables', tags=['receivables'])
