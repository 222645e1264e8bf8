# app/repositories/review_repo.py
import uuid

from sqlmodel import Session, col, select

from app.models.product import Review


class ReviewRepository:
    """
    Data access layer for product reviews.

    NOTE:
      - No commits here; a review write and the product aggregate update
        are committed together by the service.
    """

    def list_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(col(Review.created_at), col(Review.id))
        )
        return session.exec(stmt).all()

    def get_for_user(
        self,
        session: Session,
        product_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Review | None:
        stmt = select(Review).where(
            Review.product_id == product_id, Review.user_id == user_id
        )
        return session.exec(stmt).first()

    def add(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.flush()
        return review

    def delete_for_product(self, session: Session, product_id: uuid.UUID) -> None:
        for row in self.list_for_product(session, product_id):
            session.delete(row)
        session.flush()
