"""Signaling messages used to set up peer-to-peer connections."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Optional
from uuid import UUID


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


class SignalingContent:
    """Payload of a signaling message, tagged by a ``type`` field."""

    TYPE: ClassVar[str] = ""
    _variants: ClassVar[dict[str, type["SignalingContent"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        SignalingContent._variants[cls.TYPE] = cls

    def _to_fields(self) -> dict[str, Any]:
        raise NotImplementedError

    @classmethod
    def _decode(cls, data: dict) -> "SignalingContent":
        raise NotImplementedError

    @classmethod
    def _from_fields(cls, data: dict) -> "SignalingContent":
        variant = SignalingContent._variants.get(data.get("type"))
        if variant is None:
            raise ValueError(f"unknown signaling type: {data.get('type')!r}")
        return variant._decode(data)


@dataclass(frozen=True)
class Offer(SignalingContent):
    TYPE: ClassVar[str] = "offer"
    sdp: str

    def _to_fields(self) -> dict[str, Any]:
        return {"type": self.TYPE, "sdp": self.sdp}

    @classmethod
    def _decode(cls, data: dict) -> "Offer":
        return cls(_require_str(data, "sdp"))


@dataclass(frozen=True)
class Answer(SignalingContent):
    TYPE: ClassVar[str] = "answer"
    sdp: str

    def _to_fields(self) -> dict[str, Any]:
        return {"type": self.TYPE, "sdp": self.sdp}

    @classmethod
    def _decode(cls, data: dict) -> "Answer":
        return cls(_require_str(data, "sdp"))


@dataclass(frozen=True)
class IceCandidate(SignalingContent):
    TYPE: ClassVar[str] = "ice-candidate"
    candidate: str
    sdp_mid: Optional[str] = None
    sdp_mline_index: Optional[int] = None

    def __post_init__(self) -> None:
        index = self.sdp_mline_index
        if index is not None and (
            isinstance(index, bool) or not isinstance(index, int) or not 0 <= index <= 0xFFFF
        ):
            raise ValueError("sdp_mline_index must be an integer in 0..65535")

    def _to_fields(self) -> dict[str, Any]:
        return {
            "type": self.TYPE,
            "candidate": self.candidate,
            "sdp_mid": self.sdp_mid,
            "sdp_mline_index": self.sdp_mline_index,
        }

    @classmethod
    def _decode(cls, data: dict) -> "IceCandidate":
        sdp_mid = data.get("sdp_mid")
        if sdp_mid is not None and not isinstance(sdp_mid, str):
            raise ValueError("field 'sdp_mid' must be a string or null")
        return cls(_require_str(data, "candidate"), sdp_mid, data.get("sdp_mline_index"))


@dataclass(frozen=True)
class SignalingMessage:
    """A signaling payload routed from one client to another."""

    from_: UUID
    to: UUID
    content: SignalingContent

    def to_dict(self) -> dict[str, Any]:
        return {"from": str(self.from_), "to": str(self.to), **self.content._to_fields()}

    @classmethod
    def from_dict(cls, data: Any) -> "SignalingMessage":
        """Build a message from its flat JSON form; raise ValueError if malformed."""
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        try:
            sender = UUID(data["from"])
            recipient = UUID(data["to"])
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError("invalid 'from' or 'to' field") from exc
        return cls(sender, recipient, SignalingContent._from_fields(data))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "SignalingMessage":
        return cls.from_dict(json.loads(text))