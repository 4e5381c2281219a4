from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..errors import commit_unique, duplicate, not_found
from ..models import Brand, CarModel, Community, CommunityMember, CommunityPost, User
from ..schemas.content import (
    CommunityIn,
    CommunityOut,
    CommunityPostDetailOut,
    CommunityPostIn,
    CommunityPostOut,
    CommunityPostUpdate,
    CommunityUpdate,
)
from ..schemas.user import UserOut
from .catalog_service import apply_changes

logger = logging.getLogger(__name__)


class CommunitiesService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_communities(self) -> List[Community]:
        return list(self.db.execute(select(Community).order_by(Community.member_count.desc(), Community.id.asc())).scalars().all())

    def get(self, community_id: int) -> Community:
        community = self.db.get(Community, community_id)
        if community is None:
            raise not_found("Comunidad")
        return community

    def get_by_slug(self, slug: str) -> Optional[Community]:
        return self.db.execute(select(Community).where(Community.slug == slug)).scalars().first()

    def create(self, payload: CommunityIn) -> Community:
        if payload.brand_id is not None and self.db.get(Brand, payload.brand_id) is None:
            raise not_found("Marca")
        if payload.model_id is not None and self.db.get(CarModel, payload.model_id) is None:
            raise not_found("Modelo")
        if self.get_by_slug(payload.slug):
            raise duplicate(f"Ya existe una comunidad con slug {payload.slug}")
        community = Community(**payload.model_dump(), member_count=0)
        self.db.add(community)
        commit_unique(self.db, f"Ya existe una comunidad con slug {payload.slug}")
        self.db.refresh(community)
        logger.info("community_created id=%s slug=%s", community.id, community.slug)
        return community

    def update(self, community_id: int, payload: CommunityUpdate) -> Community:
        community = self.get(community_id)
        apply_changes(community, payload)
        commit_unique(self.db, f"Ya existe una comunidad con slug {payload.slug}")
        self.db.refresh(community)
        return community

    def delete(self, community_id: int) -> None:
        community = self.get(community_id)
        self.db.execute(delete(CommunityPost).where(CommunityPost.community_id == community_id))
        self.db.execute(delete(CommunityMember).where(CommunityMember.community_id == community_id))
        self.db.delete(community)
        self.db.commit()
        logger.info("community_deleted id=%s", community_id)

    # membership

    def _membership(self, community_id: int, user_id: int) -> Optional[CommunityMember]:
        return self.db.execute(
            select(CommunityMember).where(
                CommunityMember.community_id == community_id,
                CommunityMember.user_id == user_id,
            )
        ).scalars().first()

    def is_member(self, community_id: int, user: User) -> bool:
        return self._membership(community_id, user.id) is not None

    def my_memberships(self, user: User) -> List[CommunityOut]:
        stmt = (
            select(Community)
            .join(CommunityMember, CommunityMember.community_id == Community.id)
            .where(CommunityMember.user_id == user.id)
            .order_by(CommunityMember.id.desc())
        )
        return [CommunityOut.model_validate(c) for c in self.db.execute(stmt).scalars().all()]

    def join(self, community_id: int, user: User) -> Community:
        community = self.get(community_id)
        if self._membership(community_id, user.id):
            return community
        self.db.add(CommunityMember(community_id=community_id, user_id=user.id))
        community.member_count = (community.member_count or 0) + 1
        commit_unique(self.db, "Ya eres miembro de esta comunidad")
        self.db.refresh(community)
        logger.info("community_joined id=%s user_id=%s members=%s", community_id, user.id, community.member_count)
        return community

    def leave(self, community_id: int, user: User) -> Community:
        community = self.get(community_id)
        membership = self._membership(community_id, user.id)
        if membership is None:
            return community
        self.db.delete(membership)
        community.member_count = max((community.member_count or 0) - 1, 0)
        self.db.commit()
        self.db.refresh(community)
        return community

    # posts

    def list_posts(self, community_id: Optional[int] = None) -> List[CommunityPostDetailOut]:
        stmt = select(CommunityPost).order_by(CommunityPost.id.desc())
        if community_id is not None:
            stmt = stmt.where(CommunityPost.community_id == community_id)
        return [self._detail(post) for post in self.db.execute(stmt).scalars().all()]

    def _detail(self, post: CommunityPost) -> CommunityPostDetailOut:
        author = self.db.get(User, post.author_id) if post.author_id is not None else None
        community = self.db.get(Community, post.community_id)
        return CommunityPostDetailOut(
            **CommunityPostOut.model_validate(post).model_dump(),
            author=UserOut.model_validate(author) if author else None,
            community=CommunityOut.model_validate(community) if community else None,
        )

    def get_post(self, post_id: int) -> CommunityPost:
        post = self.db.get(CommunityPost, post_id)
        if post is None:
            raise not_found("Publicacion")
        return post

    def get_post_detail(self, post_id: int) -> CommunityPostDetailOut:
        return self._detail(self.get_post(post_id))

    def create_post(self, community_id: int, payload: CommunityPostIn, author: User) -> CommunityPost:
        self.get(community_id)
        post = CommunityPost(
            community_id=community_id,
            author_id=author.id,
            title=payload.title,
            content=payload.content,
            images=payload.images,
            upvotes=0,
            downvotes=0,
            comment_count=0,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info("community_post_created id=%s community_id=%s author_id=%s", post.id, community_id, author.id)
        return post

    def update_post(self, post_id: int, payload: CommunityPostUpdate) -> CommunityPost:
        post = self.get_post(post_id)
        apply_changes(post, payload)
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int) -> None:
        post = self.get_post(post_id)
        self.db.delete(post)
        self.db.commit()

    def vote(self, post_id: int, vote_type: str) -> CommunityPost:
        post = self.get_post(post_id)
        if vote_type == "up":
            post.upvotes = (post.upvotes or 0) + 1
        else:
            post.downvotes = (post.downvotes or 0) + 1
        self.db.commit()
        self.db.refresh(post)
        return post
