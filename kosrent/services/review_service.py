"""
Review service
One review per renter and kos; the kos owner replies to a review, and a
later reply replaces the earlier one
"""
from datetime import datetime
from typing import List
import logging
from sqlalchemy.orm import Session

from kosrent.exceptions import Conflict, NotFound
from kosrent.models.ontology import Review, Kos, User
from kosrent.models.schemas import ReviewCreate, ReviewResponse
from kosrent.security.permissions import Capability, authorize, chain_for_review

logger = logging.getLogger(__name__)


class ReviewService:
    """Review service"""

    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> Review:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFound(f"Review with ID {review_id} not found")
        return review

    def get_reviews_by_kos(self, kos_id: int) -> List[Review]:
        if not self.db.query(Kos.id).filter(Kos.id == kos_id).first():
            raise NotFound(f"Kos with ID {kos_id} not found")
        return self.db.query(Review).filter(
            Review.kos_id == kos_id
        ).order_by(Review.created_at.desc(), Review.id.desc()).all()

    def create_review(self, data: ReviewCreate, author: User) -> Review:
        kos = self.db.query(Kos).filter(Kos.id == data.kos_id).first()
        if not kos:
            raise NotFound("Kos not found")

        existing = self.db.query(Review).filter(
            Review.user_id == author.id,
            Review.kos_id == kos.id
        ).first()
        if existing:
            raise Conflict("You have already reviewed this kos")

        review = Review(
            content=data.content,
            rating=data.rating,
            user_id=author.id,
            kos_id=kos.id,
        )
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        logger.info("Review %s on kos %s by user %s", review.id, kos.id, author.id)
        return review

    def reply(self, review_id: int, reply_content: str, caller: User) -> Review:
        """Owner reply; overwrites any earlier reply and records the replying owner and the time"""
        review = self.get_review(review_id)
        authorize(caller, chain_for_review(review), Capability.WRITE,
                  "You can only reply to reviews of your own kos")

        review.reply_content = reply_content
        review.reply_at = datetime.utcnow()
        review.owner_id = caller.id
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review_id: int, caller: User) -> ReviewResponse:
        """Removable by its author or the owner of the reviewed kos"""
        review = self.get_review(review_id)
        authorize(caller, chain_for_review(review), Capability.DELETE,
                  "You can only delete your own reviews or reviews of your kos")

        deleted = ReviewResponse.model_validate(review)
        self.db.delete(review)
        self.db.commit()
        logger.info("Review %s deleted by user %s", review_id, caller.id)
        return deleted
