from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.database import get_db
from crea.models.document import CourtCase
from crea.models.user import User
from crea.schemas.stats import StatsSummary, MemberCount, Totals

router = APIRouter()

UNKNOWN_DIVISION = "Unknown"


@router.get("/summary", response_model=StatsSummary)
async def stats_summary(db: AsyncSession = Depends(get_db)):
    """Registered users per division plus headline totals"""
    division = func.coalesce(User.division, UNKNOWN_DIVISION)
    result = await db.execute(
        select(division.label("division"), func.count(User.id)).group_by(division).order_by(division)
    )
    member_counts = [MemberCount(division=name, count=count) for name, count in result.all()]

    court_cases = await db.execute(select(func.count(CourtCase.id)))

    return StatsSummary(
        member_counts=member_counts,
        totals=Totals(
            divisions=len(member_counts),
            members=sum(item.count for item in member_counts),
            court_cases=court_cases.scalar() or 0,
        ),
    )
