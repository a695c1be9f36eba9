"""Question repository - Database operations for topics"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Question


class QuestionRepository:
    """Repository for topic database operations"""

    @staticmethod
    def get_questions(db: Session) -> list[Question]:
        """All topics, newest first"""
        return db.query(Question).order_by(Question.created_at.desc(), Question.id.desc()).all()

    @staticmethod
    def get_children(db: Session, parent_id: Optional[int]) -> list[Question]:
        query = db.query(Question)
        if parent_id is None:
            query = query.filter(Question.parent_id.is_(None))
        else:
            query = query.filter(Question.parent_id == parent_id)
        return query.order_by(Question.created_at.desc(), Question.id.desc()).all()

    @staticmethod
    def get_question_by_id(db: Session, question_id: int) -> Optional[Question]:
        return db.query(Question).filter(Question.id == question_id).first()

    @staticmethod
    def count_children(db: Session, parent_ids: list[int]) -> dict[int, int]:
        """Number of direct sub-topics per parent id"""
        if not parent_ids:
            return {}
        rows = (
            db.query(Question.parent_id, func.count(Question.id))
            .filter(Question.parent_id.in_(parent_ids))
            .group_by(Question.parent_id)
            .all()
        )
        return {parent_id: count for parent_id, count in rows}

    @staticmethod
    def get_subtree_ids(db: Session, root_id: int) -> list[int]:
        """The topic and all of its descendants, breadth first"""
        ids = [root_id]
        frontier = [root_id]
        while frontier:
            children = [
                row[0]
                for row in db.query(Question.id).filter(Question.parent_id.in_(frontier)).all()
            ]
            frontier = [c for c in children if c not in ids]
            ids.extend(frontier)
        return ids

    @staticmethod
    def create_question(db: Session, **question_data) -> Question:
        question = Question(**question_data)
        db.add(question)
        db.commit()
        db.refresh(question)
        return question

    @staticmethod
    def update_question(db: Session, question: Question, **updates) -> Question:
        """Update a topic; None clears nullable columns"""
        for key, value in updates.items():
            if hasattr(question, key):
                setattr(question, key, value)

        db.commit()
        db.refresh(question)
        return question

    @staticmethod
    def delete_questions(db: Session, question_ids: list[int]) -> int:
        deleted = (
            db.query(Question)
            .filter(Question.id.in_(question_ids))
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
