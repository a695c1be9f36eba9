"""Question router - FastAPI endpoints for the topic tree"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile, Question
from . import board
from .schemas import (
    BoardPosition,
    BoardPositionsUpdate,
    BoardResponse,
    FormAnswerRequest,
    FormAnswerResponse,
    FormSettingsUpdate,
    ImagePositioning,
    QuestionCreate,
    QuestionResponse,
    QuestionUpdate,
    ViewportResponse,
)
from .service import QuestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["Questions"])


def get_question_service(db: Session = Depends(get_db)) -> QuestionService:
    """Dependency injection for QuestionService"""
    return QuestionService(db)


def to_responses(questions: list[Question], service: QuestionService) -> list[QuestionResponse]:
    counts = service.subtopic_counts(questions)
    responses = []
    for question in questions:
        response = QuestionResponse.model_validate(question)
        response.subtopic_count = counts.get(question.id, 0)
        responses.append(response)
    return responses


def to_response(question: Question, service: QuestionService) -> QuestionResponse:
    return to_responses([question], service)[0]


# ============================================================================
# TREE
# ============================================================================


@router.get("", response_model=list[QuestionResponse])
async def get_questions(
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """All topics, newest first"""
    return to_responses(service.get_questions(), service)


@router.get("/top-level", response_model=list[QuestionResponse])
async def get_top_level_questions(
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_responses(service.get_top_level(), service)


@router.post("", response_model=QuestionResponse, status_code=201)
async def create_question(
    data: QuestionCreate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Add a topic, or a sub-topic when parent_id is given"""
    return to_response(service.create_question(data, current_user), service)


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: int,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_response(service.get_question(question_id), service)


@router.patch("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    data: QuestionUpdate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_response(service.update_question(question_id, data), service)


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Delete a topic with all of its sub-topics"""
    return service.delete_question(question_id, current_user)


@router.get("/{question_id}/subtopics", response_model=list[QuestionResponse])
async def get_subtopics(
    question_id: int,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_responses(service.get_subtopics(question_id), service)


@router.get("/{question_id}/path", response_model=list[QuestionResponse])
async def get_question_path(
    question_id: int,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Breadcrumbs from the top-level topic to this one"""
    return to_responses(service.get_path(question_id), service)


# ============================================================================
# BOARD
# ============================================================================


@router.get("/{question_id}/board", response_model=BoardResponse)
async def get_board(
    question_id: int,
    viewport_width: Optional[float] = Query(None, gt=board.FIT_PADDING),
    viewport_height: Optional[float] = Query(None, gt=board.FIT_PADDING),
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Sub-topic cards of a topic; with a viewport size, also a fit-to-screen view"""
    parent, cards, positions = service.get_board(question_id)

    card_responses = to_responses(cards, service)
    for response in card_responses:
        response.board_position = BoardPosition(**positions[response.id])

    viewport = None
    if viewport_width and viewport_height:
        fitted = board.fit_to_screen(list(positions.values()), viewport_width, viewport_height)
        if fitted:
            viewport = ViewportResponse(zoom=fitted.zoom, pan_x=fitted.pan_x, pan_y=fitted.pan_y)

    return BoardResponse(parent=to_response(parent, service), cards=card_responses, viewport=viewport)


@router.put("/{question_id}/board", response_model=list[QuestionResponse])
async def save_board_positions(
    question_id: int,
    data: BoardPositionsUpdate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Persist card positions after a drag or resize"""
    return to_responses(service.save_board_positions(question_id, data), service)


# ============================================================================
# FORMS
# ============================================================================


@router.put("/{question_id}/form", response_model=QuestionResponse)
async def update_form_settings(
    question_id: int,
    data: FormSettingsUpdate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_response(service.update_form_settings(question_id, data), service)


@router.post("/{question_id}/form/answer", response_model=FormAnswerResponse)
async def answer_form(
    question_id: int,
    data: FormAnswerRequest,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    """Fill the topic's answer template with the submitted values"""
    return FormAnswerResponse(answer=service.answer_form(question_id, data.values))


# ============================================================================
# IMAGES
# ============================================================================


@router.post("/{question_id}/image", response_model=QuestionResponse)
async def upload_question_image(
    question_id: int,
    file: UploadFile = File(...),
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    logger.info(f"📤 Uploading image for question {question_id}")
    contents = await file.read()
    question = service.set_image(question_id, contents, file.filename, file.content_type)
    return to_response(question, service)


@router.delete("/{question_id}/image", response_model=QuestionResponse)
async def remove_question_image(
    question_id: int,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_response(service.remove_image(question_id), service)


@router.put("/{question_id}/image-positioning", response_model=QuestionResponse)
async def update_image_positioning(
    question_id: int,
    data: ImagePositioning,
    current_user: Profile = Depends(get_current_user),
    service: QuestionService = Depends(get_question_service),
):
    return to_response(service.set_image_positioning(question_id, data), service)
