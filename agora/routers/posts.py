from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request

from agora.core.utils import now_iso
from agora.routers import deps
from agora.schemas import AuthorOnly, CommentCreate, PostCreate, PostUpdate

router = APIRouter(prefix="/api", tags=["posts"])


@router.get("/posts")
def list_posts(
    request: Request,
    author: Optional[str] = None,
    tag: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
):
    posts = deps.posts(request).list_posts(author=author, tag=tag, status=status, search=search)
    return {"success": True, "posts": posts, "count": len(posts), "timestamp": now_iso()}


@router.get("/posts/{post_id}")
def get_post(post_id: str, request: Request):
    post = deps.posts(request).view_post(post_id)
    return {"success": True, "post": post, "timestamp": now_iso()}


@router.post("/posts")
def create_post(payload: PostCreate, request: Request):
    who = deps.caller(request, payload.author)
    post = deps.posts(request).create_post(who, payload.title, payload.content, payload.tags)
    return {
        "success": True,
        "message": "Post created successfully!",
        "post": post,
        "id": post["id"],
        "timestamp": now_iso(),
    }


@router.put("/posts/{post_id}")
def update_post(post_id: str, payload: PostUpdate, request: Request):
    who = deps.caller(request, payload.author)
    post = deps.posts(request).update_post(who, post_id, payload.updates)
    return {"success": True, "message": "Post updated successfully", "post": post}


@router.delete("/posts/{post_id}")
def delete_post(post_id: str, request: Request, payload: Optional[AuthorOnly] = None):
    who = deps.caller(request, payload.author if payload else None)
    deps.posts(request).delete_post(who, post_id)
    return {"success": True, "message": "Post deleted successfully"}


@router.post("/posts/{post_id}/like")
def like_post(post_id: str, request: Request):
    likes = deps.posts(request).like_post(post_id)
    return {"success": True, "likes": likes, "message": "Post liked!"}


@router.post("/posts/{post_id}/comments")
def add_comment(post_id: str, payload: CommentCreate, request: Request):
    who = deps.caller(request, payload.author)
    comment = deps.posts(request).add_comment(post_id, who.name, payload.content)
    return {"success": True, "comment": comment, "message": "Comment added successfully"}


@router.get("/stats")
def stats(request: Request):
    return {"success": True, "stats": deps.posts(request).stats(), "timestamp": now_iso()}
