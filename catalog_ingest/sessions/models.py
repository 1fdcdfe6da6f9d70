from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class SessionStatus(StrEnum):
    """Lifecycle states of a processing session."""

    PENDING = "PENDING"
    EXTRACTING_TEXT = "EXTRACTING_TEXT"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionStatus.COMPLETED, SessionStatus.FAILED)


@dataclass(frozen=True)
class ResultSummary:
    """What a materialization run wrote to the catalog."""

    products_created: int = 0
    product_ids: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    component_ids: list[str] = field(default_factory=list)
    needs_review: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "products_created": self.products_created,
            "product_ids": list(self.product_ids),
            "category_ids": list(self.category_ids),
            "component_ids": list(self.component_ids),
            "needs_review": self.needs_review,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ResultSummary":
        return cls(
            products_created=int(payload.get("products_created", 0)),
            product_ids=[str(i) for i in payload.get("product_ids", [])],
            category_ids=[str(i) for i in payload.get("category_ids", [])],
            component_ids=[str(i) for i in payload.get("component_ids", [])],
            needs_review=bool(payload.get("needs_review", False)),
        )


@dataclass(frozen=True)
class FailureReason:
    """Machine-readable code plus a human message."""

    code: str
    message: str

    def to_payload(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "FailureReason":
        return cls(code=str(payload["code"]), message=str(payload.get("message", "")))
