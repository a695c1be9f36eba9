"""Question service - Business logic for the topic tree"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ... import storage
from ...models import Profile, Question
from ...security_utils import sanitize_text
from . import board, forms
from .repository import QuestionRepository
from .schemas import (
    BoardPositionsUpdate,
    FormSettingsUpdate,
    ImagePositioning,
    QuestionCreate,
    QuestionUpdate,
)

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 1000
MAX_DESCRIPTION_LENGTH = 10000


def _clean(value: Optional[str], max_length: int) -> str:
    try:
        return sanitize_text(value, max_length=max_length)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


class QuestionService:
    """Service layer for topic business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = QuestionRepository()

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def get_questions(self) -> list[Question]:
        return self.repo.get_questions(self.db)

    def get_top_level(self) -> list[Question]:
        return self.repo.get_children(self.db, None)

    def get_question(self, question_id: int) -> Question:
        question = self.repo.get_question_by_id(self.db, question_id)
        if not question:
            raise HTTPException(status_code=404, detail="Question not found")
        return question

    def get_subtopics(self, question_id: int) -> list[Question]:
        self.get_question(question_id)
        return self.repo.get_children(self.db, question_id)

    def subtopic_counts(self, questions: list[Question]) -> dict[int, int]:
        return self.repo.count_children(self.db, [q.id for q in questions])

    def get_path(self, question_id: int) -> list[Question]:
        """Breadcrumbs from the top-level topic down to this one"""
        path = []
        seen = set()
        current = self.get_question(question_id)
        while current is not None:
            if current.id in seen:
                logger.error(f"❌ Cycle in topic tree at question {current.id}")
                raise HTTPException(status_code=500, detail="Topic tree is corrupted")
            seen.add(current.id)
            path.append(current)
            current = (
                self.repo.get_question_by_id(self.db, current.parent_id)
                if current.parent_id is not None
                else None
            )
        path.reverse()
        return path

    def create_question(self, data: QuestionCreate, user: Profile) -> Question:
        content = _clean(data.content, MAX_CONTENT_LENGTH)
        if not content:
            raise HTTPException(status_code=400, detail="Question content is required")

        if data.parent_id is not None:
            self.get_question(data.parent_id)

        question_data = {
            "content": content,
            "description": _clean(data.description, MAX_DESCRIPTION_LENGTH),
            "parent_id": data.parent_id,
            "user_id": user.id,
            "has_form": False,
            "form_fields": [],
            "answer_template": "",
            "image_url": None,
            "image_positioning": None,
            # Sub-topics appear on their parent's board
            "board_position": board.default_position() if data.parent_id is not None else None,
        }

        try:
            question = self.repo.create_question(self.db, **question_data)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error adding question: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to add question. Please try again.") from e

        logger.info(f"📥 Question {question.id} created by {user.id} under {data.parent_id}")
        return question

    def update_question(self, question_id: int, data: QuestionUpdate) -> Question:
        question = self.get_question(question_id)

        updates = {}
        if data.content is not None:
            content = _clean(data.content, MAX_CONTENT_LENGTH)
            if not content:
                raise HTTPException(status_code=400, detail="Question content is required")
            updates["content"] = content
        if data.description is not None:
            updates["description"] = _clean(data.description, MAX_DESCRIPTION_LENGTH)

        if not updates:
            return question
        return self._update(question, "Failed to update question. Please try again.", **updates)

    def delete_question(self, question_id: int, user: Profile) -> dict:
        """Delete a topic together with its sub-topics and their images"""
        self.get_question(question_id)
        subtree_ids = self.repo.get_subtree_ids(self.db, question_id)

        image_keys = [
            storage.key_from_url(q.image_url)
            for q in self.db.query(Question).filter(Question.id.in_(subtree_ids)).all()
            if q.image_url
        ]

        try:
            deleted = self.repo.delete_questions(self.db, subtree_ids)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error deleting question {question_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to delete question. Please try again.") from e

        # Rows are gone; images are only cleaned up after the commit
        storage.discard_objects(image_keys)

        logger.info(f"🗑️ User {user.id} deleted question {question_id} ({deleted} topic(s))")
        return {"message": "Question deleted", "deletedCount": deleted}

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    def get_board(self, question_id: int) -> tuple[Question, list[Question], dict[int, dict]]:
        """Board topic, its cards, and every card's position (defaults filled in, not saved)"""
        parent = self.get_question(question_id)
        cards = self.repo.get_children(self.db, question_id)
        positions = {card.id: card.board_position or board.default_position() for card in cards}
        return parent, cards, positions

    def save_board_positions(self, question_id: int, data: BoardPositionsUpdate) -> list[Question]:
        self.get_question(question_id)
        cards = {card.id: card for card in self.repo.get_children(self.db, question_id)}

        unknown = [p.id for p in data.positions if p.id not in cards]
        if unknown:
            raise HTTPException(
                status_code=400,
                detail=f"Questions {unknown} are not on this board",
            )

        for position in data.positions:
            cards[position.id].board_position = board.clamp_position(
                position.x, position.y, position.width, position.height
            )

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error saving board positions for {question_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to save board positions") from e

        return self.repo.get_children(self.db, question_id)

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def update_form_settings(self, question_id: int, data: FormSettingsUpdate) -> Question:
        question = self.get_question(question_id)
        return self._update(
            question,
            "Failed to update form settings",
            form_fields=[f.model_dump(exclude_none=True) for f in data.form_fields],
            answer_template=data.answer_template,
            has_form=True,
        )

    def answer_form(self, question_id: int, values: dict[str, str]) -> str:
        question = self.get_question(question_id)
        if not question.has_form:
            raise HTTPException(status_code=400, detail="This question has no form")

        missing = forms.missing_required_fields(question.form_fields or [], values)
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Please fill in the following fields: {', '.join(missing)}",
            )

        return forms.render_answer(question.answer_template, values)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def set_image(
        self, question_id: int, contents: bytes, filename: Optional[str], content_type: str
    ) -> Question:
        question = self.get_question(question_id)
        previous_key = storage.key_from_url(question.image_url)

        url = storage.upload_image(contents, filename, content_type)
        question = self._update(question, "Failed to update topic image. Please try again.", image_url=url)

        if previous_key:
            storage.discard_objects([previous_key])
        return question

    def remove_image(self, question_id: int) -> Question:
        question = self.get_question(question_id)
        key = storage.key_from_url(question.image_url)
        if not key:
            raise HTTPException(status_code=404, detail="Question has no image")

        storage.remove_objects([key])
        return self._update(question, "Failed to remove topic image", image_url=None)

    def set_image_positioning(self, question_id: int, data: ImagePositioning) -> Question:
        question = self.get_question(question_id)
        if not question.image_url:
            raise HTTPException(status_code=400, detail="Question has no image to position")
        return self._update(
            question,
            "Failed to update image positioning. Please try again.",
            image_positioning=data.model_dump(),
        )

    def _update(self, question: Question, error_message: str, **updates) -> Question:
        try:
            return self.repo.update_question(self.db, question, **updates)
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ {error_message} (question {question.id}): {str(e)}")
            raise HTTPException(status_code=500, detail=error_message) from e
