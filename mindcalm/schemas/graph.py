"""Knowledge graph schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

NodeGroup = Literal["root", "symptom", "med", "lifestyle", "cbt", "factor", "side-effect", "wellness"]
LinkType = Literal["structural", "correlation", "positive"]


class GraphNodeOut(BaseModel):
    id: str
    label: str
    group: NodeGroup
    val: float
    color: str
    x: float
    y: float


class GraphLinkOut(BaseModel):
    source: str
    target: str
    type: LinkType
    value: float


class GraphResponse(BaseModel):
    width: int
    height: int
    ticks: int
    displacement: float
    nodes: list[GraphNodeOut]
    links: list[GraphLinkOut]


class PinnedNode(BaseModel):
    id: str
    x: float
    y: float


class LayoutRequest(BaseModel):
    ticks: int = Field(default=300, ge=0, le=2000)
    seed: int | None = None
    pinned: list[PinnedNode] = Field(default_factory=list)
