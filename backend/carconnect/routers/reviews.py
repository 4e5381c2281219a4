from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import require_user
from ..db import get_db
from ..errors import not_found
from ..models import User
from ..schemas.content import CommentIn, CommentOut, CommentWithAuthorOut, ReviewDetailOut, ReviewOut
from ..services.reviews_service import ReviewsService

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewOut])
def list_reviews(db: Session = Depends(get_db)):
    return ReviewsService(db).list_reviews(published_only=True)


@router.get("/{slug}", response_model=ReviewDetailOut)
def get_review(slug: str, db: Session = Depends(get_db)):
    service = ReviewsService(db)
    review = service.get_by_slug(slug)
    if review is None or review.published_at is None:
        raise not_found("Resena")
    service.increment_views(review.id)
    return review.model_copy(update={"views": review.views + 1})


@router.get("/{review_id}/comments", response_model=List[CommentWithAuthorOut])
def list_comments(review_id: int, db: Session = Depends(get_db)):
    return ReviewsService(db).list_comments(review_id, approved_only=True)


@router.post("/{review_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    review_id: int,
    payload: CommentIn,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return ReviewsService(db).create_comment(review_id, payload, user)
