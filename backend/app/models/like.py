"""
Like model.

A like points at exactly one target. The target is a tagged union
(``LikeTarget``) rather than three optional fields, so a like without a
target, or with two, cannot be constructed.
"""
from enum import Enum

from bson import ObjectId
from pydantic import BaseModel, field_validator


class LikeTargetKind(str, Enum):
    """Kinds of entity that can be liked."""
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


class LikeTarget(BaseModel):
    """The single entity a like refers to."""
    kind: LikeTargetKind
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _valid_object_id(cls, value):
        if isinstance(value, ObjectId):
            return str(value)
        if not ObjectId.is_valid(str(value)):
            raise ValueError(f"invalid target id: {value!r}")
        return str(value)

    @classmethod
    def video(cls, video_id) -> "LikeTarget":
        return cls(kind=LikeTargetKind.VIDEO, id=video_id)

    @classmethod
    def comment(cls, comment_id) -> "LikeTarget":
        return cls(kind=LikeTargetKind.COMMENT, id=comment_id)

    @classmethod
    def tweet(cls, tweet_id) -> "LikeTarget":
        return cls(kind=LikeTargetKind.TWEET, id=tweet_id)

    @property
    def object_id(self) -> ObjectId:
        return ObjectId(self.id)

    def to_filter(self) -> dict:
        """Store fields identifying this target."""
        return {"target_kind": self.kind.value, "target_id": self.object_id}
