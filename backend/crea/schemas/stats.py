from typing import List

from crea.schemas.common import CreaSchema


class MemberCount(CreaSchema):
    division: str
    count: int


class Totals(CreaSchema):
    divisions: int
    members: int
    court_cases: int


class StatsSummary(CreaSchema):
    member_counts: List[MemberCount]
    totals: Totals
