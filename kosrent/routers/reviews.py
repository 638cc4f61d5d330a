"""
Review routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from kosrent.database import get_db
from kosrent.models.ontology import User
from kosrent.models.schemas import ReviewCreate, ReviewReply, ReviewResponse, envelope
from kosrent.services.review_service import ReviewService
from kosrent.security.auth import require_owner, require_society, require_any_role

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("/kos/{kos_id}")
def list_reviews(kos_id: int, db: Session = Depends(get_db)):
    """Public reviews of a kos, newest first"""
    reviews = ReviewService(db).get_reviews_by_kos(kos_id)
    return envelope(
        [ReviewResponse.model_validate(r) for r in reviews],
        "Reviews retrieved successfully"
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_society)
):
    review = ReviewService(db).create_review(data, current_user)
    return envelope(ReviewResponse.model_validate(review), "Review created successfully")


@router.put("/{review_id}/reply")
def reply_review(
    review_id: int,
    data: ReviewReply,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_owner)
):
    review = ReviewService(db).reply(review_id, data.reply_content, current_user)
    return envelope(ReviewResponse.model_validate(review), "Reply added successfully")


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_any_role)
):
    deleted = ReviewService(db).delete_review(review_id, current_user)
    return envelope(deleted, "Review deleted successfully")
