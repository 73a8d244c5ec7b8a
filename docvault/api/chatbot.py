"""Chatbot endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import get_current_user
from docvault.db.database import get_db
from docvault.db.models import User
from docvault.schemas.chatbot import (
    ChatbotChatResponse,
    ChatbotQueryResponse,
    ChatbotRequest,
    ChatModelsResponse,
    ContentHitResponse,
    DataFound,
)
from docvault.services.chatbot_service import ChatbotService

router = APIRouter()


@router.post("/query", response_model=ChatbotQueryResponse)
async def chatbot_query(
    data: ChatbotRequest, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Answer a question and report what the search found."""
    answer = await ChatbotService(db, get_settings()).answer(current_user, data.message, data.model)
    results = answer.results
    return ChatbotQueryResponse(
        query=data.message,
        keywords=results.keywords,
        response=answer.response,
        data_found=DataFound(
            users=len(results.users),
            documents=len(results.documents),
            document_content=len(results.content_hits),
        ),
        content_hits=[
            ContentHitResponse(
                document_id=hit.document.id,
                original_name=hit.document.original_name,
                snippet=hit.snippet,
            )
            for hit in results.content_hits
        ],
    )


@router.post("/chat", response_model=ChatbotChatResponse)
async def chatbot_chat(
    data: ChatbotRequest, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    answer = await ChatbotService(db, get_settings()).answer(current_user, data.message, data.model)
    return ChatbotChatResponse(
        query=data.message,
        response=answer.response,
        model=answer.model,
        used_llm=answer.used_llm,
        timestamp=datetime.utcnow(),
    )


@router.get("/models", response_model=ChatModelsResponse)
async def list_models():
    """List the chat models the chatbot accepts."""
    return {"models": ChatbotService.list_models()}
