"""GitHub CLI（gh）--json 输出对应的数据模型。

字段名与 gh 输出保持一致（camelCase），Python 侧用 snake_case 访问。
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GhIssueField(str, enum.Enum):
    """可通过 `gh issue ... --json` 请求的字段。"""

    ASSIGNEES = "assignees"
    AUTHOR = "author"
    BODY = "body"
    CLOSED = "closed"
    CLOSED_AT = "closedAt"
    CLOSED_BY_PULL_REQUESTS_REFERENCES = "closedByPullRequestsReferences"
    COMMENTS = "comments"
    CREATED_AT = "createdAt"
    ID = "id"
    IS_PINNED = "isPinned"
    LABELS = "labels"
    MILESTONE = "milestone"
    NUMBER = "number"
    PROJECT_CARDS = "projectCards"
    PROJECT_ITEMS = "projectItems"
    REACTION_GROUPS = "reactionGroups"
    STATE = "state"
    STATE_REASON = "stateReason"
    TITLE = "title"
    UPDATED_AT = "updatedAt"
    URL = "url"


# 足以唯一标识 issue 的最小字段集
SUMMARY_FIELDS: frozenset[GhIssueField] = frozenset({
    GhIssueField.NUMBER, GhIssueField.TITLE, GhIssueField.STATE, GhIssueField.URL,
})

# 查看单个 issue 时的默认字段
DETAIL_FIELDS: frozenset[GhIssueField] = SUMMARY_FIELDS | {
    GhIssueField.BODY, GhIssueField.STATE_REASON, GhIssueField.LABELS, GhIssueField.MILESTONE,
}

GH_ISSUE_OPEN = "open"
GH_ISSUE_CLOSED = "closed"


def normalize_issue_state(value: object) -> object:
    """open/closed 不区分大小写归一为小写，其他取值原样保留。"""
    if isinstance(value, str) and value.lower() in (GH_ISSUE_OPEN, GH_ISSUE_CLOSED):
        return value.lower()
    return value


GhIssueState = Annotated[str, BeforeValidator(normalize_issue_state)]


class _GhModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GhActor(_GhModel):
    """issue 作者、指派人等。"""

    login: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None


class GhLabel(_GhModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class GhMilestone(_GhModel):
    title: Optional[str] = None
    number: Optional[int] = None
    description: Optional[str] = None
    state: Optional[str] = None
    due_on: Optional[datetime] = None
    url: Optional[str] = None


class GhIssue(_GhModel):
    """`gh issue view/list/create --json` 的统一表示；未请求的字段为 None。"""

    number: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None
    state: Optional[GhIssueState] = None
    state_reason: Optional[str] = None
    url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    closed: Optional[bool] = None
    labels: Optional[list[GhLabel]] = None
    milestone: Optional[GhMilestone] = None
    author: Optional[GhActor] = None
    assignees: Optional[list[GhActor]] = None

    @property
    def is_open(self) -> bool:
        return self.state == GH_ISSUE_OPEN


class GhIssueIdentifier(BaseModel):
    """命令行可用的 issue 引用：编号或 URL。"""

    model_config = ConfigDict(frozen=True)

    raw_value: str

    @classmethod
    def number(cls, number: int) -> GhIssueIdentifier:
        return cls(raw_value=str(number))

    @classmethod
    def url(cls, url: str) -> GhIssueIdentifier:
        return cls(raw_value=url)

    def __str__(self) -> str:
        return self.raw_value


class GhIssueCreateOptions(BaseModel):
    title: str
    body: str
    labels: list[str] = Field(default_factory=list)
    milestone: Optional[str] = None
    assignees: list[str] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)


GhIssueStateFilter = Literal["open", "closed", "all"]


class GhIssueListOptions(BaseModel):
    """`gh issue list` 的过滤条件。"""

    state: GhIssueStateFilter = "open"
    labels: list[str] = Field(default_factory=list)
    author: Optional[str] = None
    assignee: Optional[str] = None
    milestone: Optional[str] = None
    search_query: Optional[str] = None
    limit: Optional[int] = None
    mention: Optional[str] = None
    app: Optional[str] = None


class GhDecodingError(ValueError):
    """gh 的 --json 输出为空或不是合法 JSON。"""

    def __init__(
        self,
        kind: Literal["empty", "invalid_json"],
        command: list[str],
        raw_output: str,
        underlying: Exception | None = None,
    ):
        self.kind = kind
        self.command = command
        self.raw_output = raw_output
        self.underlying = underlying
        joined = " ".join(command)
        if kind == "empty":
            message = f"gh output was empty for command: {joined}"
        else:
            message = f"gh output could not be decoded as JSON for command: {joined}"
        super().__init__(message)
