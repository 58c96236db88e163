from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class FormModel(Base):
    __tablename__ = "forms"

    id = Column(String, primary_key=True)
    edit_key = Column(String, nullable=False)
    share_id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String)
    description = Column(Text)
    header_image_url = Column(Text, nullable=True)
    questions_json = Column(Text)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))


class ResponseModel(Base):
    __tablename__ = "responses"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, nullable=False)
    form_id = Column(String, index=True)
    answers_json = Column(Text)
    submitted_at = Column(DateTime(timezone=True))


class QuestionModel(Base):
    __tablename__ = "questions"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False)
    type = Column(String, nullable=False)
    title = Column(String)
    content = Column(Text)
    options_json = Column(Text)
    correct_answer_json = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))
