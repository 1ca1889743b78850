from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from orderdesk.core.database import get_db
from orderdesk.repositories.analysis_repositories import AnalysisRepository
from orderdesk.schemas.analysis_schemas import AnalysisResult
from orderdesk.services.analysis_services import AnalysisService
from orderdesk.services.errors import InvalidInputError, StorageUnavailableError

router = APIRouter(tags=["analysis"])


def get_analysis_service(request: Request, db: Session = Depends(get_db)) -> AnalysisService:
    """Builds an AnalysisService with the date ranges configured on the app."""
    return AnalysisService(AnalysisRepository(db), request.app.state.settings.ANALYTICS_DATE_RANGES)


def _run(svc: AnalysisService, product: str, date: str) -> AnalysisResult:
    try:
        return svc.analyze(product=product, date=date)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/api/analysis", response_model=AnalysisResult)
def analysis(
    product: str = "all",
    date: str = "all",
    svc: AnalysisService = Depends(get_analysis_service),
):
    """Totals, channel split and hourly histogram for a product/date selection."""
    return _run(svc, product, date)


@router.get("/analysis/{product}", response_model=AnalysisResult)
def analysis_for_product(
    product: str,
    date: str = "all",
    svc: AnalysisService = Depends(get_analysis_service),
):
    """Same as /api/analysis with the product taken from the path (all, product1, product2)."""
    return _run(svc, product, date)
