"""Domain models for the organization structure."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from orgcms.infra.records import relation_id


class PositionLevel(str, Enum):
	PROTECTOR = "pelindung"
	ADVISOR = "penasehat"
	CHAIR = "ketua"
	VICE_CHAIR = "wakil_ketua"
	SECRETARY = "sekretaris"
	TREASURER = "bendahara"
	COORDINATOR = "koordinator"
	MEMBER = "anggota"


@dataclass(slots=True)
class Period:
	id: str
	name: str
	start_date: Optional[str] = None
	end_date: Optional[str] = None
	is_active: bool = False
	theme: Optional[str] = None
	vision: Optional[str] = None
	mission: Optional[str] = None

	@classmethod
	def from_doc(cls, doc: Mapping[str, Any]) -> "Period":
		return cls(
			id=str(doc["id"]),
			name=str(doc.get("name") or ""),
			start_date=doc.get("startDate"),
			end_date=doc.get("endDate"),
			is_active=bool(doc.get("isActive", False)),
			theme=doc.get("theme"),
			vision=doc.get("vision"),
			mission=doc.get("mission"),
		)

	def to_dict(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"name": self.name,
			"startDate": self.start_date,
			"endDate": self.end_date,
			"isActive": self.is_active,
			"theme": self.theme,
			"vision": self.vision,
			"mission": self.mission,
		}


@dataclass(slots=True)
class Position:
	id: str
	title: str
	level: Optional[str]
	order: int
	period_id: Optional[str]
	department: Optional[str] = None
	description: Optional[str] = None
	# Populated when the store expanded the period relation
	period: Optional[Period] = None

	@classmethod
	def from_doc(cls, doc: Mapping[str, Any]) -> "Position":
		raw_period = doc.get("period")
		return cls(
			id=str(doc["id"]),
			title=str(doc.get("title") or ""),
			level=doc.get("level"),
			order=_as_order(doc.get("order")),
			period_id=relation_id(raw_period),
			department=doc.get("department"),
			description=doc.get("description"),
			period=Period.from_doc(raw_period) if isinstance(raw_period, Mapping) else None,
		)

	def to_dict(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"level": self.level,
			"department": self.department,
			"order": self.order,
			"period": self.period.to_dict() if self.period else self.period_id,
			"description": self.description,
		}


@dataclass(slots=True)
class Member:
	id: str
	name: str
	slug: str
	position_id: Optional[str]
	period_id: Optional[str]
	is_active: bool = True
	email: Optional[str] = None
	phone: Optional[str] = None
	bio: Any = None
	photo: Any = None
	join_date: Optional[str] = None
	social_media: dict[str, Optional[str]] = field(default_factory=dict)
	position: Optional[Position] = None

	@classmethod
	def from_doc(cls, doc: Mapping[str, Any]) -> "Member":
		raw_position = doc.get("position")
		return cls(
			id=str(doc["id"]),
			name=str(doc.get("name") or ""),
			slug=str(doc.get("slug") or ""),
			position_id=relation_id(raw_position),
			period_id=relation_id(doc.get("period")),
			is_active=bool(doc.get("isActive", True)),
			email=doc.get("email"),
			phone=doc.get("phone"),
			bio=doc.get("bio"),
			photo=doc.get("photo"),
			join_date=doc.get("joinDate"),
			social_media=dict(doc.get("socialMedia") or {}),
			position=Position.from_doc(raw_position) if isinstance(raw_position, Mapping) else None,
		)

	def to_dict(self, *, include_position: bool = True) -> dict[str, Any]:
		position: Any = self.position_id
		if include_position and self.position is not None:
			position = self.position.to_dict()
		return {
			"id": self.id,
			"name": self.name,
			"slug": self.slug,
			"position": position,
			"period": self.period_id,
			"isActive": self.is_active,
			"email": self.email,
			"phone": self.phone,
			"bio": self.bio,
			"photo": self.photo,
			"joinDate": self.join_date,
			"socialMedia": self.social_media,
		}


@dataclass(slots=True)
class StructureEntry:
	position: Position
	members: list[Member] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return {
			"position": self.position.to_dict(),
			"members": [member.to_dict(include_position=False) for member in self.members],
		}


@dataclass(slots=True)
class Structure:
	period: Optional[Period]
	hierarchy: list[StructureEntry] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return {
			"period": self.period.to_dict() if self.period else None,
			"hierarchy": [entry.to_dict() for entry in self.hierarchy],
		}


def _as_order(value: Any) -> int:
	try:
		return int(value)
	except (TypeError, ValueError):
		return 0
