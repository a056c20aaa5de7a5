"""Router for the Generation feature."""
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.generation.controller import GenerationController
from api.features.generation.dtos import GenerateRequest, GenerateResponse
from api.shared.db import get_db_session
from di.container import ApplicationContainer as DependencyContainer

router = APIRouter()


@router.post("/generate", response_model=GenerateResponse)
@inject
async def generate_reply(
    request: GenerateRequest,
    controller: GenerationController = Depends(
        Provide[DependencyContainer.controllers.generation_controller]
    ),
    db_session: AsyncSession = Depends(get_db_session),
):
    """Generate the next model turn. Does not persist anything."""
    return await controller.generate(request, db_session=db_session)
