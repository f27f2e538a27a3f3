from pydantic import BaseModel
from typing import List


FEEDBACK_CATEGORIES = (
    "Communication Skills",
    "Technical Knowledge",
    "Problem-Solving",
    "Cultural & Role Fit",
    "Confidence & Clarity",
)


class CategoryScore(BaseModel):
    name: str
    score: int
    comment: str


class FeedbackReport(BaseModel):
    total_score: int
    category_scores: List[CategoryScore]
    strengths: List[str]
    areas_for_improvement: List[str]
    final_assessment: str
