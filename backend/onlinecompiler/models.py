from typing import Optional
from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

# Judge0 status ids that mean the submission is not finished yet
STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
PENDING_STATUS_IDS = (STATUS_IN_QUEUE, STATUS_PROCESSING)


class ExecutionRequest(SQLModel):
    model_config = ConfigDict(frozen=True)

    source_text: str
    language_id: int
    stdin: Optional[str] = None


class SubmissionHandle(SQLModel):
    model_config = ConfigDict(frozen=True)

    token: str


class SubmissionStatus(SQLModel):
    model_config = ConfigDict(frozen=True)

    id: int
    description: str = ""


class ExecutionResult(SQLModel):
    model_config = ConfigDict(frozen=True)

    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    status: SubmissionStatus


class Language(SQLModel):
    id: int
    name: str


# Wire models for the /compile endpoint, field names match the editor client


class CompileRequest(SQLModel):
    code: Optional[str] = None
    languageId: Optional[int] = None
    input: Optional[str] = None


class CompileResponse(SQLModel):
    output: Optional[str] = None
    error: Optional[str] = None
    compileOutput: Optional[str] = None
    status: SubmissionStatus

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "CompileResponse":
        return cls(
            output=result.stdout,
            error=result.stderr,
            compileOutput=result.compile_output,
            status=result.status,
        )


class ErrorResponse(SQLModel):
    error: str = Field(description="Human readable failure message")
