"""Structured intents the model may reply with."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, StringConstraints, TypeAdapter

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CommandIntent(BaseModel):
    """A shell command the operator may choose to run."""

    type: Literal["command"] = "command"
    command: NonBlank = Field(description="Shell command to run")


class QuestionIntent(BaseModel):
    """A clarifying question for the operator."""

    type: Literal["question"] = "question"
    question: NonBlank = Field(description="Question to ask the user")


class AnswerIntent(BaseModel):
    """A direct answer that needs no command."""

    type: Literal["answer"] = "answer"
    answer: NonBlank = Field(description="Answer to show the user")


ParsedIntent = Annotated[
    CommandIntent | QuestionIntent | AnswerIntent,
    Field(discriminator="type"),
]

INTENT_ADAPTER: TypeAdapter[CommandIntent | QuestionIntent | AnswerIntent] = TypeAdapter(
    ParsedIntent
)
