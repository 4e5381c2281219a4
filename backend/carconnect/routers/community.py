from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import get_current_user, require_user
from ..db import get_db
from ..errors import forbidden, not_found
from ..models import User
from ..schemas.content import (
    CommunityOut,
    CommunityPostDetailOut,
    CommunityPostIn,
    CommunityPostOut,
    CommunityPostUpdate,
    VoteIn,
)
from ..services.communities_service import CommunitiesService

router = APIRouter(prefix="/api/communities", tags=["community"])


@router.get("", response_model=List[CommunityOut])
def list_communities(db: Session = Depends(get_db)):
    return CommunitiesService(db).list_communities()


@router.get("/posts", response_model=List[CommunityPostDetailOut])
def list_posts(community_id: Optional[int] = Query(default=None), db: Session = Depends(get_db)):
    return CommunitiesService(db).list_posts(community_id)


@router.get("/posts/{post_id}", response_model=CommunityPostDetailOut)
def get_post(post_id: int, db: Session = Depends(get_db)):
    return CommunitiesService(db).get_post_detail(post_id)


@router.patch("/posts/{post_id}", response_model=CommunityPostOut)
def update_post(
    post_id: int,
    payload: CommunityPostUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    service = CommunitiesService(db)
    if service.get_post(post_id).author_id != user.id:
        raise forbidden("Solo el autor puede editar la publicacion")
    return service.update_post(post_id, payload)


@router.delete("/posts/{post_id}")
def delete_post(post_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    service = CommunitiesService(db)
    if service.get_post(post_id).author_id != user.id and user.role != "admin":
        raise forbidden("Solo el autor puede borrar la publicacion")
    service.delete_post(post_id)
    return {"ok": True}


@router.post("/posts/{post_id}/vote", response_model=CommunityPostOut)
def vote_post(post_id: int, payload: VoteIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return CommunitiesService(db).vote(post_id, payload.type)


@router.get("/{slug}")
def get_community(
    slug: str,
    user: User | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = CommunitiesService(db)
    community = service.get_by_slug(slug)
    if community is None:
        raise not_found("Comunidad")
    return {
        "community": CommunityOut.model_validate(community),
        "is_member": service.is_member(community.id, user) if user else False,
        "posts": service.list_posts(community.id),
    }


@router.post("/{community_id}/join", response_model=CommunityOut)
def join(community_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return CommunitiesService(db).join(community_id, user)


@router.post("/{community_id}/leave", response_model=CommunityOut)
def leave(community_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return CommunitiesService(db).leave(community_id, user)


@router.post("/{community_id}/posts", response_model=CommunityPostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    community_id: int,
    payload: CommunityPostIn,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return CommunitiesService(db).create_post(community_id, payload, user)
