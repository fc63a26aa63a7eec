"""
Report selection and report definitions.

The selectors are pure functions over already-loaded records; they never
touch the session. A ReportDefinition pairs a selector with the presentation
settings of one PDF listing.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..schemas.member import MemberStatus
from ..utils.dates import to_display
from .pdf import Column, ReportTable

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def _is_retiree(member) -> bool:
    return member.status in (MemberStatus.RETIREE, MemberStatus.RETIREE.value)


def _is_survivor(member) -> bool:
    return member.status in (MemberStatus.SURVIVOR, MemberStatus.SURVIVOR.value)


def active_members(members: Sequence) -> list:
    return [m for m in members if _is_retiree(m) and m.death_date is None and m.is_active_member]


def retirees(members: Sequence) -> list:
    return [m for m in members if _is_retiree(m) and m.death_date is None]


def survivors(members: Sequence) -> list:
    return [m for m in members if _is_survivor(m)]


def deceased(members: Sequence) -> list:
    """Records with a death date, most recent death first."""
    return sorted(
        (m for m in members if m.death_date is not None),
        key=lambda m: m.death_date,
        reverse=True,
    )


def birthday_match(members: Sequence, day: int, month: int) -> list:
    return [
        m for m in members
        if m.birth_date is not None and m.birth_date.month == month and m.birth_date.day == day
    ]


def _yes_no(value) -> str:
    return "Yes" if value else "No"


def _text(value) -> str:
    return "" if value is None else str(value)


# key -> (header label, cell formatter)
COLUMN_CATALOG: Dict[str, Tuple[str, Callable]] = {
    "full_name": ("Full Name", _text),
    "national_id": ("National ID", _text),
    "status": ("Status", lambda v: getattr(v, "value", _text(v))),
    "is_active_member": ("Member", _yes_no),
    "deceased_name": ("Deceased Name", _text),
    "birth_date": ("Birth Date", to_display),
    "death_date": ("Death Date", to_display),
    "phone": ("Phone", _text),
}
INDEX_COLUMN = "index"


@dataclass(frozen=True)
class ReportDefinition:
    title: str
    selector: Callable[[Sequence], list]
    exclude_columns: Tuple[str, ...] = ()
    landscape: bool = True
    font_size: float = 10
    proportions: Dict[str, float] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)

    def columns(self) -> List[Column]:
        keys = [INDEX_COLUMN] + [k for k in COLUMN_CATALOG if k not in self.exclude_columns]
        columns = []
        for key in keys:
            default_header = "#" if key == INDEX_COLUMN else COLUMN_CATALOG[key][0]
            columns.append(Column(
                key=key,
                header=self.headers.get(key, default_header),
                weight=self.proportions.get(key, 1),
            ))
        return columns

    def build_table(self, members: Sequence, title_lines: Sequence[str] = ()) -> ReportTable:
        """Select rows and format their cells; numbering starts at 1."""
        selected = self.selector(members)
        columns = self.columns()
        rows = []
        for position, member in enumerate(selected, start=1):
            row = []
            for column in columns:
                if column.key == INDEX_COLUMN:
                    row.append(str(position))
                else:
                    row.append(COLUMN_CATALOG[column.key][1](getattr(member, column.key)))
            rows.append(row)
        return ReportTable(title_lines=[*title_lines, self.title], columns=columns, rows=rows)


REPORTS: Dict[str, ReportDefinition] = {
    "active-members": ReportDefinition(
        title="Active Members Report",
        selector=active_members,
        exclude_columns=("death_date", "deceased_name"),
    ),
    "retirees": ReportDefinition(
        title="Retirees Report",
        selector=retirees,
        exclude_columns=("death_date", "deceased_name"),
    ),
    "survivors": ReportDefinition(
        title="Survivors Report",
        selector=survivors,
        exclude_columns=("status", "birth_date", "is_active_member"),
        font_size=11,
        proportions={
            "index": 2,
            "full_name": 25,
            "national_id": 10,
            "deceased_name": 25,
            "death_date": 10,
            "phone": 10,
        },
    ),
    "deceased": ReportDefinition(
        title="Deceased Report",
        selector=deceased,
        exclude_columns=("status", "is_active_member", "phone"),
    ),
}


def birthday_report(day: int, month: int) -> ReportDefinition:
    return ReportDefinition(
        title=f"Birthdays on {day} {MONTH_NAMES[month - 1]}",
        selector=lambda members: birthday_match(members, day, month),
    )


def get_report_definition(report_type: str, day_month: Optional[Tuple[int, int]] = None) -> Optional[ReportDefinition]:
    if report_type == "birthdays":
        if day_month is None:
            return None
        return birthday_report(*day_month)
    return REPORTS.get(report_type)
