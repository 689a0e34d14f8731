"""
The fixed catalog of student union offices.

Everything here is data: adding an office, a level or a new restriction
between categories should only require editing these tables.
"""
import enum
import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from app.features.offices.errors import ValidationError


class RoleCategory(str, enum.Enum):
    """Top-level classification of an office."""
    EXECUTIVE = "Executive"
    SENATE = "Senate"
    CLASS_REP = "ClassRep"


ALL_LEVELS = "All"
STUDENT_LEVELS: Tuple[str, ...] = ("100", "200", "300", "400", "500")
LEVELS: Tuple[str, ...] = STUDENT_LEVELS + (ALL_LEVELS,)

EXECUTIVE_OFFICES: Tuple[str, ...] = (
    "President",
    "Vice President",
    "General Secretary",
    "Assistant General Secretary",
    "Financial Secretary",
    "Treasurer",
    "Public Relations Officer",
    "Sports Secretary",
    "Social Secretary",
    "Special Duties Officer",
)

SENATE_PRINCIPAL_OFFICES: Tuple[str, ...] = (
    "Senate President",
    "Deputy Senate President",
    "Clerk",
    "Chief Whip",
)

SENATOR_SEATS_PER_LEVEL = 3

CLASS_REP_OFFICES: Tuple[str, ...] = (
    "Class Representative",
    "Assistant Class Representative (Academic)",
    "Assistant Class Representative (Admin)",
)

# Categories a holder of each category may not hold in the same session
DEFAULT_RESTRICTIONS: Dict[RoleCategory, Tuple[RoleCategory, ...]] = {
    RoleCategory.EXECUTIVE: (RoleCategory.SENATE,),
    RoleCategory.SENATE: (RoleCategory.EXECUTIVE,),
    RoleCategory.CLASS_REP: (),
}

# Student attribute caching "holds an active role of this category"
CATEGORY_FLAGS: Dict[RoleCategory, str] = {
    RoleCategory.EXECUTIVE: "is_executive",
    RoleCategory.SENATE: "is_senator",
}

_SENATOR_SEAT = re.compile(r"^(?P<level>\d{3})L Senator (?P<seat>\d+)$")


@dataclass(frozen=True)
class CatalogEntry:
    category: RoleCategory
    office: str
    level: str

    @property
    def restrictions(self) -> List[str]:
        return default_restrictions(self.category)


def senator_title(level: str, seat: int) -> str:
    return f"{level}L Senator {seat}"


def post_title(category: RoleCategory, office: str) -> str:
    """Title recorded in a student's post history."""
    return f"{RoleCategory(category).value} - {office}"


def default_restrictions(category: RoleCategory) -> List[str]:
    return [c.value for c in DEFAULT_RESTRICTIONS[RoleCategory(category)]]


def flag_for(category: RoleCategory) -> Optional[str]:
    return CATEGORY_FLAGS.get(RoleCategory(category))


def iter_catalog() -> Iterator[CatalogEntry]:
    """Yield every office of the catalog in seeding order."""
    for office in EXECUTIVE_OFFICES:
        yield CatalogEntry(RoleCategory.EXECUTIVE, office, ALL_LEVELS)

    for office in SENATE_PRINCIPAL_OFFICES:
        yield CatalogEntry(RoleCategory.SENATE, office, ALL_LEVELS)
    for level in STUDENT_LEVELS:
        for seat in range(1, SENATOR_SEATS_PER_LEVEL + 1):
            yield CatalogEntry(RoleCategory.SENATE, senator_title(level, seat), level)

    for level in STUDENT_LEVELS:
        for office in CLASS_REP_OFFICES:
            yield CatalogEntry(RoleCategory.CLASS_REP, office, level)


def validate_entry(category: str, office: str, level: Optional[str] = None) -> CatalogEntry:
    """
    Check an office/level/category combination against the catalog.
    
    Executive offices default to level "All". Senate and ClassRep offices
    require a level.
    
    Raises:
        ValidationError: if the combination does not exist in the catalog
    """
    try:
        category = RoleCategory(category)
    except ValueError:
        raise ValidationError(f"Unknown role category {category!r}")

    office = office.strip()
    if level is None and category is RoleCategory.EXECUTIVE:
        level = ALL_LEVELS
    if level is None:
        raise ValidationError(f"Level is required for {category.value} roles")
    if level not in LEVELS:
        raise ValidationError(f"Unknown level {level!r}")

    if category is RoleCategory.EXECUTIVE:
        if office not in EXECUTIVE_OFFICES:
            raise ValidationError(f"{office!r} is not an Executive office")
        if level != ALL_LEVELS:
            raise ValidationError("Executive offices are held at level 'All'")

    elif category is RoleCategory.SENATE:
        match = _SENATOR_SEAT.match(office)
        if office in SENATE_PRINCIPAL_OFFICES:
            if level != ALL_LEVELS:
                raise ValidationError(f"{office!r} is held at level 'All'")
        elif match:
            seat = int(match.group("seat"))
            if match.group("level") != level or not 1 <= seat <= SENATOR_SEATS_PER_LEVEL:
                raise ValidationError(f"{office!r} is not a senator seat for level {level}")
        else:
            raise ValidationError(f"{office!r} is not a Senate office")

    else:
        if office not in CLASS_REP_OFFICES:
            raise ValidationError(f"{office!r} is not a ClassRep office")
        if level == ALL_LEVELS:
            raise ValidationError("ClassRep offices are held per level")

    return CatalogEntry(category, office, level)
