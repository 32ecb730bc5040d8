from fastapi import APIRouter, Depends, Response, status
from typing import List, Optional
from ...core.security import TokenClaims, get_current_identity
from ...schemas import Review as ReviewSchema, ReviewCreate, ReviewWithReviewer
from ...services import ReviewService
from ..dependencies import get_review_service

router = APIRouter(prefix="/projects/{project_id}", tags=["reviews"])


@router.post("/reviews", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def submit_review(
    project_id: int,
    review_data: ReviewCreate,
    response: Response,
    identity: TokenClaims = Depends(get_current_identity),
    review_service: ReviewService = Depends(get_review_service)
):
    """Create the caller's review, or overwrite it if one exists (200)"""
    review, created = review_service.upsert_review(project_id, identity.user_id, review_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return review


@router.get("/reviews", response_model=List[ReviewWithReviewer])
def list_reviews(
    project_id: int,
    review_service: ReviewService = Depends(get_review_service)
):
    """List a project's reviews with reviewer details, newest first"""
    return review_service.list_reviews(project_id)


@router.get("/my-review", response_model=Optional[ReviewSchema])
def get_my_review(
    project_id: int,
    identity: TokenClaims = Depends(get_current_identity),
    review_service: ReviewService = Depends(get_review_service)
):
    """Get the caller's review of a project, or null"""
    return review_service.get_my_review(project_id, identity.user_id)
