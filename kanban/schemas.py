from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kanban.models import Task, TaskStatus

T = TypeVar("T")

INVALID_STATUS_MESSAGE = f"Invalid task status. Must be one of: {', '.join(TaskStatus.values())}"


# ===== Envelope =====


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope. ``data`` is always present, ``null`` when nothing matched."""

    status: Literal["success"] = "success"
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope. Never carries ``data``."""

    status: Literal["error"] = "error"
    message: str


# ===== Auth =====


class LoginRequest(BaseModel):
    username: str = Field(..., description="Username for login")
    password: str = Field(..., description="Password for login")

    @field_validator("username")
    @classmethod
    def username_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password is required")
        return v


class UserResponse(BaseModel):
    id: int = Field(..., description="User unique identifier")
    username: str = Field(..., description="Username")
    name: str = Field(..., description="Display name")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LoginResponseData(BaseModel):
    token: str = Field(..., description="JWT bearer token")
    user: UserResponse


# ===== Teams =====


class TeamResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ===== Tasks =====


class AttachmentSimple(BaseModel):
    name: str = Field(..., description="Original file name")
    url: str = Field(..., description="HTTPS download URL")


class TaskRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    status: TaskStatus
    external_link: str | None = None
    created_by: int
    teams: list[str] = Field(default_factory=list)
    attachments: list[AttachmentSimple] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, task: Task) -> "TaskRead":
        """Build the read model; ``team_associations.team`` and ``attachments`` must be loaded."""
        return cls(
            id=task.id,
            name=task.name,
            description=task.description,
            status=TaskStatus(task.status),
            external_link=task.external_link,
            created_by=task.created_by,
            teams=sorted(assoc.team.name for assoc in task.team_associations),
            attachments=[
                AttachmentSimple(name=a.file_name, url=a.cloudinary_secure_url)
                for a in task.attachments
            ],
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


def _check_name(v: Any) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError("Task name is required")
    return v.strip()


def _check_status(v: Any) -> TaskStatus:
    if isinstance(v, TaskStatus):
        return v
    if isinstance(v, str) and v in TaskStatus.values():
        return TaskStatus(v)
    raise ValueError(INVALID_STATUS_MESSAGE)


def _check_teams(v: Any) -> list[str]:
    if not isinstance(v, list) or not all(isinstance(name, str) for name in v):
        raise ValueError("Teams must be a list of team names")
    # Keep first occurrence order, drop duplicates
    return list(dict.fromkeys(name.strip() for name in v))


class CreateTaskRequest(BaseModel):
    name: str = Field(..., description="Task title")
    description: str | None = None
    status: TaskStatus = Field(
        default=TaskStatus.TO_DO, description="TO_DO, DOING or DONE"
    )
    external_link: str | None = None
    teams: list[str] = Field(default_factory=list, description="Team names")

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _check_name(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> TaskStatus:
        if v is None:
            return TaskStatus.TO_DO
        return _check_status(v)

    @field_validator("teams", mode="before")
    @classmethod
    def validate_teams(cls, v: Any) -> list[str]:
        if v is None:
            return []
        return _check_teams(v)


class UpdateTaskRequest(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    ``model_fields_set`` tells an omitted field apart from an explicit ``null``.
    """

    name: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    external_link: str | None = None
    teams: list[str] | None = None

    @model_validator(mode="before")
    @classmethod
    def reject_null_required_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for field, message in (
                ("name", "Task name is required"),
                ("status", INVALID_STATUS_MESSAGE),
                ("teams", "Teams must be a list of team names"),
            ):
                if field in data and data[field] is None:
                    raise ValueError(message)
        return data

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return _check_name(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> TaskStatus:
        return _check_status(v)

    @field_validator("teams", mode="before")
    @classmethod
    def validate_teams(cls, v: Any) -> list[str]:
        return _check_teams(v)

    def changes(self) -> dict[str, Any]:
        """Column changes to apply, without ``teams``."""
        return {
            field: getattr(self, field)
            for field in self.model_fields_set
            if field != "teams"
        }

    @property
    def replaces_teams(self) -> bool:
        return "teams" in self.model_fields_set
