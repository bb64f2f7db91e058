from datetime import datetime
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    created_at: datetime
    accessed_at: datetime
    score: float = 0.0


class KeyEvent(BaseModel):
    """A single key press, named the way Textual names keys."""

    model_config = ConfigDict(frozen=True)

    key: str
    character: str | None = None


# Selection modes


class Browsing(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["browsing"] = "browsing"


class NamingNew(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["naming_new"] = "naming_new"
    buffer: str = ""


class ConfirmingDelete(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["confirming_delete"] = "confirming_delete"
    target: CatalogEntry


SelectionMode = Annotated[Union[Browsing, NamingNew, ConfirmingDelete], Field(discriminator="kind")]


# Terminal actions


class NoAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class EnterDirectory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["enter"] = "enter"
    path: Path


class CreateDirectory(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["create"] = "create"
    path: Path


class CloneRepository(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["clone"] = "clone"
    url: str
    path: Path


Action = Annotated[Union[NoAction, EnterDirectory, CreateDirectory, CloneRepository], Field(discriminator="kind")]


class SelectorState(BaseModel):
    """Complete value of the picker at one point in time.

    `entries` keeps scan order; `ranked` is what the cursor walks over. The
    cursor may equal len(ranked), which is the create/clone row.
    """

    model_config = ConfigDict(frozen=True)

    base_path: Path
    entries: tuple[CatalogEntry, ...] = ()
    query: str = ""
    ranked: tuple[CatalogEntry, ...] = ()
    cursor: int = 0
    mode: SelectionMode = Field(default_factory=Browsing)
    action: Action = Field(default_factory=NoAction)
    finished: bool = False
    status: str = ""

    @property
    def on_create_row(self) -> bool:
        return self.cursor == len(self.ranked)

    @property
    def selected_entry(self) -> CatalogEntry | None:
        if 0 <= self.cursor < len(self.ranked):
            return self.ranked[self.cursor]
        return None
