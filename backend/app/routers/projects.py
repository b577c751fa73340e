"""
Projects router — create and list portfolio projects.

POST /api/projects/create
  1. Parses the request into a JSON or multipart submission.
  2. Validates and stores the cover image, if one was uploaded.
  3. Decodes the remaining fields (permissively).
  4. Persists the project and returns it with 201 Created.

GET /api/projects
  Every project, newest first. No pagination.

Failures are caught here, at the route boundary: upload problems become
400 with the validation message, broken multipart framing keeps the
framework's 400, store failures and everything else a generic 500.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.database import get_db_session
from app.core.errors import InternalServiceError, PortfolioError, StoreError
from app.models.project import Project
from app.schemas.project import ProjectCreatedOut, ProjectOut, ProjectSubmission
from app.services.submissions import read_submission
from app.services.uploads import ImageStore, save_cover_image

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])


def get_image_store(request: Request) -> ImageStore:
    """The process-wide image store built by create_app()."""
    return request.app.state.image_store


# Type aliases for cleaner signatures
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Images = Annotated[ImageStore, Depends(get_image_store)]


@router.post(
    "/create",
    response_model=ProjectCreatedOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    description=(
        "Accepts either multipart/form-data (optional 'coverImage' file plus "
        "a JSON string of the other fields under 'data') or a JSON body. "
        "An uploaded image takes precedence over a supplied coverImageUrl."
    ),
)
async def create_project(
    request: Request,
    session: DbSession,
    images: Images,
) -> ProjectCreatedOut:
    try:
        submission = await read_submission(request)

        # ── 1. Cover image (validated before anything else is decoded)
        cover_image_path: str | None = None
        cover_image_url: str | None = None
        if submission.cover_image is not None:
            cover_image_path = await save_cover_image(submission.cover_image, images)
            cover_image_url = str(request.base_url).rstrip("/") + cover_image_path

        # ── 2. Remaining fields ─────────────────────────────
        fields = ProjectSubmission.model_validate(submission.payload())
        if cover_image_url is None:
            cover_image_url = fields.cover_image_url or None

        # ── 3. Build the ORM record ─────────────────────────
        project = Project(
            title=fields.title,
            cover_image_url=cover_image_url,
            cover_image_path=cover_image_path,
            live_link=fields.live_link,
            description=fields.description,
            tech_stack=fields.tech_stack,
            price=fields.price,
            details=fields.details,
        )
    except (PortfolioError, StarletteHTTPException):
        # upload rejections and malformed multipart framing stay 400
        raise
    except Exception as exc:
        logger.exception("Error creating project")
        raise InternalServiceError() from exc

    # ── 4. Persist ──────────────────────────────────────────
    try:
        session.add(project)
        await session.commit()
        await session.refresh(project)
    except Exception as exc:
        await session.rollback()
        logger.exception("Failed to persist project")
        raise StoreError() from exc

    logger.info("Created project %s", project.id)
    return ProjectCreatedOut(
        message="Project created successfully",
        project=ProjectOut.model_validate(project),
    )


@router.get(
    "",
    response_model=list[ProjectOut],
    summary="List all projects",
    description="Returns every project ordered by createdAt, most recent first.",
)
async def list_projects(session: DbSession) -> list[Project]:
    stmt = select(Project).order_by(Project.created_at.desc())

    try:
        result = await session.execute(stmt)
        return list(result.scalars().all())
    except Exception as exc:
        logger.exception("Error listing projects")
        raise StoreError() from exc
