"""
Chat bot schemas.

Transient value types passed between retrieval, prompt assembly, the model
invoker and the answer sanitizer.

Dependencies: pydantic, langchain_core
System role: Bot pipeline data contracts
"""

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, Field

TABLE_SOURCE = "table"


class ContextChunk(BaseModel):
    """One piece of retrieved context (never persisted on its own)."""

    title: str = Field(description="Display title of the source record")
    source: str = Field(description="Provenance tag, e.g. 'note', 'table', 'vector · task'")
    content: str = Field(description="Cleaned text content")
    ref: str = Field(
        default="",
        exclude=True,
        description="Identity of the source record, e.g. 'note:12'; not serialized",
    )

    @property
    def is_table(self) -> bool:
        return self.source == TABLE_SOURCE


class WebResult(BaseModel):
    """Snippet returned by the web search stage."""

    title: str
    url: str = ""
    snippet: str = ""


class HistoryTurn(BaseModel):
    """Role-labelled turn rendered into the prompt."""

    role: str
    content: str


class AssembledPrompt(BaseModel):
    """Model-ready request: fixed system text plus rendered user prompt."""

    system: str
    user_prompt: str

    def to_messages(self) -> list[BaseMessage]:
        """Convert to chat messages for a langchain chat model."""
        return [
            SystemMessage(content=self.system),
            HumanMessage(content=self.user_prompt),
        ]


class RetrievalResult(BaseModel):
    """Context assembled for one chat turn, with the prompt built from it."""

    context: list[ContextChunk] = Field(default_factory=list)
    web_results: list[WebResult] = Field(default_factory=list)
    prompt: AssembledPrompt | None = None

    @property
    def is_empty(self) -> bool:
        return not self.context and not self.web_results
