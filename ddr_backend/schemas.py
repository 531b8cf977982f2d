"""
Pydantic schemas for the site's document collections.

Every model lists the declared business fields of one collection. Unknown
fields are kept as-is, and payload values are coerced to the declared types.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

Number = Union[int, float]


def _to_text(value: Any) -> Any:
    # Booleans are stored as their lowercase text.
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _as_list(value: Any) -> Any:
    if value is None or isinstance(value, list):
        return value
    return [value]


Text = Annotated[str, BeforeValidator(_to_text)]


class DocumentModel(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class SiteSettings(DocumentModel):
    maintenanceMode: Optional[bool] = False
    flashMessage: Optional[Text] = "Bienvenue sur le site officiel de la DDR."
    flashActive: Optional[bool] = False


class TrustIndicator(DocumentModel):
    icon: Optional[Text] = None
    title: Optional[Text] = None
    text: Optional[Text] = None


class Campaign(DocumentModel):
    title: Optional[Text] = "Projet École"
    description: Optional[Text] = None
    targetAmount: Optional[Number] = 50000000
    currentAmount: Optional[Number] = 0
    imageUrl: Optional[Text] = None
    trustIndicators: Annotated[
        list[TrustIndicator], BeforeValidator(_as_list)
    ] = Field(default_factory=list)


class News(DocumentModel):
    title: Optional[Text] = None
    content: Optional[Text] = None
    imageUrl: Optional[Text] = None
    category: Optional[Text] = None
    createdAt: Optional[Text] = None
    author: Optional[Text] = None
    tags: Annotated[list[Text], BeforeValidator(_as_list)] = Field(default_factory=list)


class Debate(DocumentModel):
    title: Optional[Text] = None
    description: Optional[Text] = None
    videoUrl: Optional[Text] = None
    date: Optional[Text] = None
    speaker: Optional[Text] = None
    location: Optional[Text] = None
    thumbnailUrl: Optional[Text] = None


class Conversion(DocumentModel):
    name: Optional[Text] = None
    story: Optional[Text] = None
    date: Optional[Text] = None
    mediaUrl: Optional[Text] = None


class Appointment(DocumentModel):
    type: Optional[Text] = "contact"
    name: Optional[Text] = None
    phone: Optional[Text] = None
    subject: Optional[Text] = None
    opponentName: Optional[Text] = None
    topic: Optional[Text] = None
    requestedDate: Optional[Text] = None
    message: Optional[Text] = None
    status: Optional[Text] = "pending"
    createdAt: Optional[Text] = None


class Donation(DocumentModel):
    amount: Optional[Number] = None
    donorName: Optional[Text] = None
    donorPhone: Optional[Text] = None
    isAnonymous: Optional[bool] = None
    method: Optional[Text] = None
    status: Optional[Text] = None
    transactionId: Optional[Text] = None
    createdAt: Optional[Text] = None


class UploadResponse(BaseModel):
    url: str


class DeleteResponse(BaseModel):
    success: Literal[True] = True
