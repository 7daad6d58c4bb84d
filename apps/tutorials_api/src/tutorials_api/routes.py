from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from tutorials_core.logging import get_logger
from tutorials_db import ping

from .controller import TutorialController, get_controller
from .schemas import (
    DeleteAllResponse,
    HealthResponse,
    MessageResponse,
    TutorialCreate,
    TutorialRead,
    TutorialUpdate,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/tutorials", tags=["tutorials"])


@router.post(
    "",
    response_model=TutorialRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_tutorial(
    payload: TutorialCreate,
    controller: TutorialController = Depends(get_controller),
):
    return await controller.create(payload)


@router.get("", response_model=list[TutorialRead])
async def list_tutorials(
    title: str | None = Query(default=None, description="Case-insensitive substring"),
    published: bool | None = Query(default=None),
    controller: TutorialController = Depends(get_controller),
):
    return await controller.list(title=title, published=published)


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_tutorials(
    controller: TutorialController = Depends(get_controller),
):
    count = await controller.delete_all()
    return DeleteAllResponse(
        message=f"{count} Tutorials were deleted successfully!",
        deleted_count=count,
    )


# Declared before "/{tutorial_id}" so "published" is not taken as an id
@router.get("/published", response_model=list[TutorialRead])
async def list_published_tutorials(
    controller: TutorialController = Depends(get_controller),
):
    return await controller.list_published()


@router.get("/{tutorial_id}", response_model=TutorialRead)
async def read_tutorial(
    tutorial_id: str,
    controller: TutorialController = Depends(get_controller),
):
    return await controller.read(tutorial_id)


@router.put("/{tutorial_id}", response_model=TutorialRead)
async def update_tutorial(
    tutorial_id: str,
    payload: TutorialUpdate,
    controller: TutorialController = Depends(get_controller),
):
    return await controller.update(tutorial_id, payload)


@router.delete("/{tutorial_id}", response_model=MessageResponse)
async def delete_tutorial(
    tutorial_id: str,
    controller: TutorialController = Depends(get_controller),
):
    await controller.delete(tutorial_id)
    return MessageResponse(message="Tutorial was deleted successfully!")


service_router = APIRouter(tags=["service"])


@service_router.get("/", response_model=MessageResponse)
async def welcome():
    return MessageResponse(message="Welcome to the tutorials API.")


@service_router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health():
    try:
        await ping()
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return HealthResponse(status="ok")
