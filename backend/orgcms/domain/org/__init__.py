"""Organization structure: periods, positions and members."""

from .models import Member, Period, Position, PositionLevel, Structure, StructureEntry
from .service import MemberDirectory, PeriodSelector, StructureAssembler

__all__ = [
	"Member",
	"MemberDirectory",
	"Period",
	"PeriodSelector",
	"Position",
	"PositionLevel",
	"Structure",
	"StructureAssembler",
	"StructureEntry",
]
