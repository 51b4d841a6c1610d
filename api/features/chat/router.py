"""Router for the Chat feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.chat.controller import ChatController
from api.features.chat.dtos import ChatRequest, ChatResponse, HistoryResponse
from api.shared.db import get_db_session
from api.shared.dtos import HealthCheckResponse
from api.shared.response import ResponseModel
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.get("/health", response_model=ResponseModel[HealthCheckResponse])
async def health_check():
    return ResponseModel.success(
        data=HealthCheckResponse(
            status="healthy", dependencies={"database": "ok", "llm": "ok"}
        ),
        message="Chat service is healthy",
    )


@router.post("/message", response_model=ChatResponse)
@inject
async def send_message(
    request: ChatRequest,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Store the visitor's message, generate a reply and store it too."""
    return await controller.send_message(request, db_session)


@router.get("/history/{session_id}", response_model=HistoryResponse)
@inject
async def get_history(
    session_id: str,
    controller: ChatController = Depends(
        Provide[DependencyContainer.controllers.chat_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Return every message of a session in chronological order."""
    return await controller.get_history(session_id, db_session)
