"""Request bodies accepted by the editor API.

Fields are strictly typed so a wrong JSON type is rejected with 400
instead of being stored on the graph.
"""

from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr

ElementId = Union[StrictInt, StrictStr]


class RequestBody(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NodeFields(RequestBody):
    label: Optional[StrictStr] = None
    color: Optional[StrictStr] = None
    shape: Optional[StrictStr] = None


class PositionBody(RequestBody):
    x: float
    y: float


class EdgeCreate(RequestBody):
    source: ElementId
    target: ElementId
    label: Optional[StrictStr] = None


class EdgeFields(RequestBody):
    label: Optional[StrictStr] = None
    animated: Optional[StrictBool] = None


class SelectionBody(RequestBody):
    kind: Literal["node", "edge"]
    id: ElementId


class DraftFields(RequestBody):
    label: Optional[StrictStr] = None
    color: Optional[StrictStr] = None
    animated: Optional[StrictBool] = None


class ConnectBody(RequestBody):
    node_id: ElementId
