from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from formshare.errors import DuplicateKeyError, StorageError
from formshare.models import Base, FormModel, QuestionModel, ResponseModel
from formshare.utils import dumps_json, ensure_aware, loads_json

FORM_COLUMNS = {
    "edit_key",
    "share_id",
    "title",
    "description",
    "header_image_url",
    "questions",
    "updated_at",
}


class SQLiteFormRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        try:
            with self._Session() as session:
                row = session.get(FormModel, form_id)
                return self._to_dict(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def get_form_by_share_id(self, share_id: str) -> dict[str, Any] | None:
        try:
            with self._Session() as session:
                row = (
                    session.query(FormModel)
                    .filter(FormModel.share_id == share_id)
                    .first()
                )
                return self._to_dict(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def create_form(self, form: dict[str, Any]) -> None:
        try:
            with self._Session() as session:
                row = FormModel(
                    id=form["form_id"],
                    edit_key=form["edit_key"],
                    share_id=form["share_id"],
                    title=form["title"],
                    description=form["description"],
                    header_image_url=form.get("header_image_url"),
                    questions_json=dumps_json(form["questions"]),
                    created_at=form["created_at"],
                    updated_at=form["updated_at"],
                )
                session.add(row)
                session.commit()
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def update_form(self, form_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        try:
            with self._Session() as session:
                row = session.get(FormModel, form_id)
                if not row:
                    raise KeyError(form_id)
                for key, value in updates.items():
                    if key not in FORM_COLUMNS:
                        continue
                    if key == "questions":
                        row.questions_json = dumps_json(value)
                    else:
                        setattr(row, key, value)
                session.commit()
                session.refresh(row)
                return self._to_dict(row)
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _to_dict(row: FormModel) -> dict[str, Any]:
        return {
            "form_id": row.id,
            "edit_key": row.edit_key,
            "share_id": row.share_id,
            "title": row.title or "",
            "description": row.description or "",
            "header_image_url": row.header_image_url,
            "questions": loads_json(row.questions_json) or [],
            "created_at": ensure_aware(row.created_at),
            "updated_at": ensure_aware(row.updated_at),
        }


class SQLiteResponseRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        try:
            with self._Session() as session:
                rows = (
                    session.query(ResponseModel)
                    .filter(ResponseModel.form_id == form_id)
                    .order_by(ResponseModel.seq.asc())
                    .all()
                )
                return [self._to_dict(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def count_responses(self, form_id: str) -> int:
        try:
            with self._Session() as session:
                return (
                    session.query(func.count(ResponseModel.seq))
                    .filter(ResponseModel.form_id == form_id)
                    .scalar()
                    or 0
                )
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def create_response(self, response: dict[str, Any]) -> None:
        try:
            with self._Session() as session:
                row = ResponseModel(
                    id=response["id"],
                    form_id=response["form_id"],
                    answers_json=dumps_json(response["answers"]),
                    submitted_at=response["submitted_at"],
                )
                session.add(row)
                session.commit()
        except IntegrityError as exc:
            raise DuplicateKeyError(str(exc)) from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _to_dict(row: ResponseModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "form_id": row.form_id,
            "answers": loads_json(row.answers_json),
            "submitted_at": ensure_aware(row.submitted_at),
        }


class SQLiteQuestionRepo:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._Session = session_factory

    def list_questions(self) -> list[dict[str, Any]]:
        try:
            with self._Session() as session:
                rows = session.query(QuestionModel).order_by(QuestionModel.seq.asc()).all()
                return [self._to_dict(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    def create_question(self, question: dict[str, Any]) -> None:
        try:
            with self._Session() as session:
                row = QuestionModel(
                    id=question["id"],
                    type=question["type"],
                    title=question.get("title", ""),
                    content=question.get("content", ""),
                    options_json=dumps_json(question.get("options") or []),
                    correct_answer_json=dumps_json(question.get("correct_answer")),
                    image_url=question.get("image_url"),
                    created_at=question["created_at"],
                    updated_at=question["updated_at"],
                )
                session.add(row)
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _to_dict(row: QuestionModel) -> dict[str, Any]:
        return {
            "id": row.id,
            "type": row.type,
            "title": row.title or "",
            "content": row.content or "",
            "options": loads_json(row.options_json) or [],
            "correct_answer": loads_json(row.correct_answer_json),
            "image_url": row.image_url,
            "created_at": ensure_aware(row.created_at),
            "updated_at": ensure_aware(row.updated_at),
        }


class SQLiteStorage:
    def __init__(self, database_url: str) -> None:
        connect_args = (
            {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        )
        self._engine = create_engine(database_url, future=True, connect_args=connect_args)
        self._Session = sessionmaker(self._engine, expire_on_commit=False)
        Base.metadata.create_all(self._engine)
        self.forms = SQLiteFormRepo(self._Session)
        self.responses = SQLiteResponseRepo(self._Session)
        self.questions = SQLiteQuestionRepo(self._Session)

    def close(self) -> None:
        self._engine.dispose()
