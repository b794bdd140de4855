"""
Question-related data structures
"""
from typing import List

from pydantic import BaseModel, Field


class Question(BaseModel):
    id: int
    text: str
    category: str = ""


class OrderedQuestionsResponse(BaseModel):
    questions: List[Question] = Field(default_factory=list)


class QuestionOrderRequest(BaseModel):
    order: List[int] = Field(default_factory=list)


class QuestionOrderResponse(BaseModel):
    order: List[int]


class MoveQuestionRequest(BaseModel):
    source: int
    destination: int


class QuestionTextRequest(BaseModel):
    text: str


class QuestionAnswerCount(BaseModel):
    question_id: int
    position: int
    answers: int


class QuestionAnswerCountsResponse(BaseModel):
    counts: List[QuestionAnswerCount] = Field(default_factory=list)
