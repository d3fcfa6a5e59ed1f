from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

OPTION_IDS = ('a', 'b', 'c', 'd')


class QuestionOption(BaseModel):
    id: str
    text: str

    model_config = ConfigDict(extra="ignore")

    @field_validator('id')
    @classmethod
    def normalize_id(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator('text')
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class QuestionContent(BaseModel):
    """Question payload shared by the admin JSON API and the bulk importer."""
    question: str
    options: List[QuestionOption]
    correct_id: str
    date: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator('question')
    @classmethod
    def question_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('question text is required')
        return value

    @field_validator('correct_id')
    @classmethod
    def normalize_correct_id(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode='after')
    def check_options(self):
        filled = [option for option in self.options if option.text]
        if len(filled) < 2:
            raise ValueError('at least two answer options are required')
        if self.correct_id not in {option.id for option in filled}:
            raise ValueError('correct_id must match one of the options')
        self.options = filled
        return self

    def options_json(self):
        return [option.model_dump() for option in self.options]
