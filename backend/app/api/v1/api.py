"""API v1: aggregates all routers under a single prefix."""

from fastapi import APIRouter

from app.api.v1.routers import chat, pitch_deck

router = APIRouter()
router.include_router(chat.router)
router.include_router(pitch_deck.router)
