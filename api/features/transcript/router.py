"""Router for the Transcript feature."""
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.examples.dtos import ExampleDTO
from api.features.transcript.controller import TranscriptController
from api.features.transcript.dtos import (
    AppendFeedbackRequest,
    AppendFeedbackResponse,
    AppendMessageRequest,
    AppendMessageResponse,
    StatsResponse,
)
from api.shared.db import get_db_session
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
@inject
async def get_stats(
    controller: TranscriptController = Depends(
        Provide[DependencyContainer.controllers.transcript_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Counts of model turns and of each rating."""
    return await controller.get_stats(db_session=db_session)


@router.post("/messages", response_model=AppendMessageResponse)
@inject
async def append_message(
    request: AppendMessageRequest,
    controller: TranscriptController = Depends(
        Provide[DependencyContainer.controllers.transcript_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Record a user or model turn."""
    return await controller.append_message(request, db_session=db_session)


@router.post("/feedback", response_model=AppendFeedbackResponse)
@inject
async def append_feedback(
    request: AppendFeedbackRequest,
    controller: TranscriptController = Depends(
        Provide[DependencyContainer.controllers.transcript_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Rate a model turn."""
    return await controller.append_feedback(request, db_session=db_session)


@router.get("/best-examples", response_model=List[ExampleDTO])
@inject
async def get_best_examples(
    controller: TranscriptController = Depends(
        Provide[DependencyContainer.controllers.transcript_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Highest rated exchanges, newest rating first."""
    return await controller.get_examples(db_session=db_session)
