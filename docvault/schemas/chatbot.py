"""Chatbot schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatbotRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
    model: str | None = None


class DataFound(BaseModel):
    users: int
    documents: int
    document_content: int


class ContentHitResponse(BaseModel):
    document_id: str
    original_name: str
    snippet: str


class ChatbotQueryResponse(BaseModel):
    query: str
    keywords: list[str]
    response: str
    data_found: DataFound
    content_hits: list[ContentHitResponse] = []


class ChatbotChatResponse(BaseModel):
    query: str
    response: str
    model: str
    used_llm: bool
    timestamp: datetime


class ChatModel(BaseModel):
    id: str
    name: str
    provider: str


class ChatModelsResponse(BaseModel):
    models: list[ChatModel]
