"""Question domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FormField(BaseModel):
    """One input of a topic's answer form"""

    id: str = Field(..., min_length=1, max_length=100)
    label: str = ""
    type: Literal["text", "number", "date", "select"] = "text"
    options: Optional[list[str]] = None
    required: bool = False


class ImagePositioning(BaseModel):
    """How a topic's image is laid out next to its text"""

    position: Literal["top", "bottom", "left", "right", "center"] = "left"
    alignment: Literal["start", "center", "end"] = "start"
    width: int = Field(300, gt=0)
    height: int = Field(200, gt=0)
    margin: int = Field(16, ge=0)
    text_wrap: bool = True


class BoardPosition(BaseModel):
    x: float
    y: float
    width: float
    height: float


class QuestionCreate(BaseModel):
    """Schema for creating a topic or sub-topic"""

    content: str
    parent_id: Optional[int] = None
    description: Optional[str] = None


class QuestionUpdate(BaseModel):
    """Schema for editing a topic's text"""

    content: Optional[str] = None
    description: Optional[str] = None


class FormSettingsUpdate(BaseModel):
    form_fields: list[FormField] = []
    answer_template: str = ""

    @model_validator(mode="after")
    def unique_field_ids(self):
        ids = [f.id for f in self.form_fields]
        if len(ids) != len(set(ids)):
            raise ValueError("Form field ids must be unique")
        return self


class FormAnswerRequest(BaseModel):
    values: dict[str, str] = {}


class FormAnswerResponse(BaseModel):
    answer: str


class BoardCardPosition(BoardPosition):
    id: int


class BoardPositionsUpdate(BaseModel):
    positions: list[BoardCardPosition]


class QuestionResponse(BaseModel):
    """Schema for topic response"""

    id: int
    content: str
    description: str = ""
    parent_id: Optional[int] = None
    user_id: Optional[str] = None
    has_form: bool = False
    form_fields: list[FormField] = []
    answer_template: str = ""
    image_url: Optional[str] = None
    image_positioning: Optional[ImagePositioning] = None
    board_position: Optional[BoardPosition] = None
    created_at: Optional[datetime] = None
    subtopic_count: int = 0

    class Config:
        from_attributes = True

    @field_validator("form_fields", mode="before")
    @classmethod
    def default_fields(cls, v):
        return v or []


class ViewportResponse(BaseModel):
    zoom: float
    pan_x: float
    pan_y: float


class BoardResponse(BaseModel):
    parent: QuestionResponse
    cards: list[QuestionResponse]
    viewport: Optional[ViewportResponse] = None
