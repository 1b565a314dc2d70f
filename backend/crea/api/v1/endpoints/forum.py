"""
Forum topics, posts, likes and comments.

Topics are managed by admins; any signed-in member can post, like and
comment. ForumTopic.replies tracks the number of posts in the topic.
"""
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.forum import ForumTopic, ForumPost
from crea.models.notification import NotificationType
from crea.models.user import User
from crea.modules.auth.dependencies import get_current_user, get_current_admin, ensure_owner_or_admin
from crea.schemas.common import SuccessResponse
from crea.schemas.forum import (
    TopicCreate,
    TopicUpdate,
    TopicResponse,
    PostCreate,
    PostResponse,
    CommentCreate,
    CommentResponse,
    LikeResponse,
)
from crea.services.crud import CRUDService
from crea.services.notification_service import notify_user

router = APIRouter()

topics = CRUDService(ForumTopic, "Topic")
posts = CRUDService(ForumPost, "Post", default_order=ForumPost.created_at.asc())


# ==================== Topics ====================

@router.get("/topics", response_model=List[TopicResponse])
async def list_topics(db: AsyncSession = Depends(get_db)):
    return await topics.list(db)


@router.post("/topics", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    data: TopicCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await topics.create(db, {
        "title": data.title,
        "author": data.author or admin.name,
        "author_id": admin.id,
    })


@router.put("/topics/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: str,
    data: TopicUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    return await topics.update(db, topic_id, changes)


@router.delete("/topics/{topic_id}", response_model=SuccessResponse)
async def delete_topic(
    topic_id: str,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a topic together with its posts"""
    topic = await topics.get(db, topic_id)
    await db.execute(delete(ForumPost).where(ForumPost.topic_id == topic.id))
    await db.delete(topic)
    await db.commit()
    return SuccessResponse(message="Topic removed")


# ==================== Posts ====================

@router.get("/topics/{topic_id}/posts", response_model=List[PostResponse])
async def list_posts(topic_id: str, db: AsyncSession = Depends(get_db)):
    """Posts of a topic, oldest first"""
    topic = await topics.get(db, topic_id)
    return await posts.list(db, ForumPost.topic_id == topic.id)


@router.post("/topics/{topic_id}/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    topic_id: str,
    data: PostCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    topic = await topics.get(db, topic_id)

    post = ForumPost(
        topic_id=topic.id,
        author=current_user.name,
        author_id=current_user.id,
        content=data.content,
        liked_by=[],
        comments=[],
    )
    db.add(post)
    topic.replies = (topic.replies or 0) + 1

    if topic.author_id and str(topic.author_id) != str(current_user.id):
        await notify_user(
            db,
            topic.author_id,
            NotificationType.FORUM,
            "New reply in your topic",
            f"{current_user.name} replied to \"{topic.title}\"",
            link="/forum",
            metadata={"topicId": str(topic.id)},
        )

    await db.commit()
    await db.refresh(post)
    return post


async def _get_post(db: AsyncSession, post_id: str) -> ForumPost:
    return await posts.get(db, post_id)


@router.post("/posts/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Like the post, or remove the like if already given"""
    post = await _get_post(db, post_id)
    user_id = str(current_user.id)
    liked_by = list(post.liked_by or [])

    if user_id in liked_by:
        liked_by.remove(user_id)
        liked = False
    else:
        liked_by.append(user_id)
        liked = True

    post.liked_by = liked_by
    await db.commit()
    return LikeResponse(likes_count=len(liked_by), liked=liked)


@router.post("/posts/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    content = (data.content or "").strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Content required")

    post = await _get_post(db, post_id)
    comment = {
        "author": current_user.name,
        "author_id": str(current_user.id),
        "content": content,
        "created_at": datetime.utcnow().isoformat(),
    }
    post.comments = [*(post.comments or []), comment]
    await db.commit()
    return CommentResponse(**comment)


@router.delete("/posts/{post_id}", response_model=SuccessResponse)
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Authors and admins may delete a post"""
    post = await _get_post(db, post_id)
    ensure_owner_or_admin(current_user, post.author_id, "Not allowed to delete this post")

    topic = await db.get(ForumTopic, str(post.topic_id))
    if topic is not None:
        topic.replies = max(0, (topic.replies or 0) - 1)

    await db.delete(post)
    await db.commit()
    return SuccessResponse(message="Post removed")


@router.delete("/posts/{post_id}/comments/{index}", response_model=SuccessResponse)
async def delete_comment(
    post_id: str,
    index: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Comment author, post author or an admin may remove a comment"""
    post = await _get_post(db, post_id)
    comments = list(post.comments or [])
    if index < 0 or index >= len(comments):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    comment = comments[index]
    allowed = (
        current_user.is_admin
        or str(comment.get("author_id")) == str(current_user.id)
        or str(post.author_id) == str(current_user.id)
    )
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to delete this comment")

    del comments[index]
    post.comments = comments
    await db.commit()
    return SuccessResponse(message="Comment removed")
