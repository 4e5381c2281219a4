from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from ..errors import CarConnectError, ErrorKind, commit_unique, duplicate, not_found
from ..models import Comment, ReviewPost, User
from ..schemas.content import (
    CommentDetailOut,
    CommentIn,
    CommentOut,
    CommentWithAuthorOut,
    ReviewDetailOut,
    ReviewIn,
    ReviewOut,
    ReviewUpdate,
)
from ..schemas.user import UserOut
from .assembly import Assembler
from .catalog_service import apply_changes

logger = logging.getLogger(__name__)


class ReviewsService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _user(self, user_id: Optional[int]) -> Optional[UserOut]:
        user = self.db.get(User, user_id) if user_id is not None else None
        return UserOut.model_validate(user) if user else None

    def list_reviews(self, published_only: bool = False) -> List[ReviewPost]:
        stmt = select(ReviewPost)
        if published_only:
            stmt = stmt.where(ReviewPost.published_at.is_not(None)).order_by(ReviewPost.published_at.desc())
        else:
            stmt = stmt.order_by(ReviewPost.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def get(self, review_id: int) -> ReviewPost:
        review = self.db.get(ReviewPost, review_id)
        if review is None:
            raise not_found("Resena")
        return review

    def get_by_slug(self, slug: str) -> Optional[ReviewDetailOut]:
        review = self.db.execute(select(ReviewPost).where(ReviewPost.slug == slug)).scalars().first()
        if review is None:
            return None
        return ReviewDetailOut(
            **ReviewOut.model_validate(review).model_dump(),
            author=self._user(review.author_id),
            car=Assembler(self.db).car(review.car_id),
        )

    def create(self, payload: ReviewIn, author: User) -> ReviewPost:
        if self.db.execute(select(ReviewPost.id).where(ReviewPost.slug == payload.slug)).first():
            raise duplicate(f"Ya existe una resena con slug {payload.slug}")
        review = ReviewPost(**payload.model_dump(), author_id=author.id, views=0, published_at=None)
        self.db.add(review)
        commit_unique(self.db, f"Ya existe una resena con slug {payload.slug}")
        self.db.refresh(review)
        logger.info("review_created id=%s slug=%s", review.id, review.slug)
        return review

    def update(self, review_id: int, payload: ReviewUpdate) -> ReviewPost:
        review = self.get(review_id)
        apply_changes(review, payload)
        commit_unique(self.db, f"Ya existe una resena con slug {payload.slug}")
        self.db.refresh(review)
        return review

    def publish(self, review_id: int) -> ReviewPost:
        review = self.get(review_id)
        review.published_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(review)
        logger.info("review_published id=%s", review.id)
        return review

    def unpublish(self, review_id: int) -> ReviewPost:
        review = self.get(review_id)
        review.published_at = None
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete(self, review_id: int) -> None:
        review = self.get(review_id)
        self.db.execute(delete(Comment).where(Comment.post_id == review_id))
        self.db.delete(review)
        self.db.commit()
        logger.info("review_deleted id=%s", review_id)

    def increment_views(self, review_id: int) -> None:
        self.db.execute(
            update(ReviewPost).where(ReviewPost.id == review_id).values(views=ReviewPost.views + 1)
        )
        self.db.commit()

    # comments

    def list_comments(self, post_id: int, approved_only: bool = True) -> List[CommentWithAuthorOut]:
        stmt = select(Comment).where(Comment.post_id == post_id).order_by(Comment.id.asc())
        if approved_only:
            stmt = stmt.where(Comment.is_approved.is_(True))
        return [
            CommentWithAuthorOut(**CommentOut.model_validate(c).model_dump(), author=self._user(c.author_id))
            for c in self.db.execute(stmt).scalars().all()
        ]

    def list_all_comments(self) -> List[CommentDetailOut]:
        comments = self.db.execute(select(Comment).order_by(Comment.id.desc())).scalars().all()
        result = []
        for c in comments:
            post = self.db.get(ReviewPost, c.post_id)
            result.append(
                CommentDetailOut(
                    **CommentOut.model_validate(c).model_dump(),
                    author=self._user(c.author_id),
                    post=ReviewOut.model_validate(post) if post else None,
                )
            )
        return result

    def get_comment(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise not_found("Comentario")
        return comment

    def create_comment(self, post_id: int, payload: CommentIn, author: User) -> Comment:
        self.get(post_id)
        if payload.parent_id is not None:
            parent = self.db.get(Comment, payload.parent_id)
            if parent is None:
                raise not_found("Comentario")
            if parent.post_id != post_id:
                raise CarConnectError(ErrorKind.INVALID, "El comentario padre pertenece a otra resena")
        comment = Comment(
            post_id=post_id,
            author_id=author.id,
            parent_id=payload.parent_id,
            content=payload.content,
            is_approved=False,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info("comment_created id=%s post_id=%s author_id=%s", comment.id, post_id, author.id)
        return comment

    def approve_comment(self, comment_id: int) -> Comment:
        comment = self.get_comment(comment_id)
        comment.is_approved = True
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def reject_comment(self, comment_id: int) -> None:
        # rejected comments are not kept
        self.delete_comment(comment_id)

    def delete_comment(self, comment_id: int) -> None:
        comment = self.get_comment(comment_id)
        self.db.delete(comment)
        self.db.commit()
        logger.info("comment_deleted id=%s", comment_id)
