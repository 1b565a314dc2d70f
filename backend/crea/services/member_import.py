"""
Bulk member import from CSV / Excel sheets.

Expected columns (header spelling is forgiving: case, spaces and underscores
are ignored):
    name, email, designation, division, department, mobile,
    membershipType (Ordinary | Lifetime), memberId (optional)

Rows are matched to accounts by email: existing users are updated, new ones
are created without a password (they sign in through the OTP flow).
"""
import io
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crea.core.exceptions import ValidationError
from crea.core.logging_config import logger
from crea.models.user import User, MembershipType
from crea.schemas.membership import BulkUploadResult
from crea.services.membership_service import next_member_id

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

COLUMN_ALIASES = {
    "name": "name",
    "fullname": "name",
    "email": "email",
    "emailid": "email",
    "designation": "designation",
    "division": "division",
    "department": "department",
    "mobile": "mobile",
    "phone": "mobile",
    "membershiptype": "membership_type",
    "type": "membership_type",
    "memberid": "member_id",
}

PROFILE_FIELDS = ("name", "designation", "division", "department", "mobile")


def _normalize_header(header: Any) -> str:
    key = re.sub(r"[\s_\-]", "", str(header)).lower()
    return COLUMN_ALIASES.get(key, key)


def read_sheet(content: bytes, filename: str) -> pd.DataFrame:
    """Parse an uploaded sheet into a DataFrame of strings"""
    extension = Path(filename).suffix.lower()
    buffer = io.BytesIO(content)
    try:
        if extension == ".csv":
            df = pd.read_csv(buffer, dtype=str)
        else:
            df = pd.read_excel(buffer, dtype=str)
    except (ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError(f"Could not read spreadsheet: {e}", field="file")

    df = df.rename(columns=_normalize_header)
    if "email" not in df.columns or "name" not in df.columns:
        raise ValidationError("Spreadsheet must have 'name' and 'email' columns", field="file")
    return df.fillna("")


def _parse_membership_type(value: str) -> Optional[MembershipType]:
    value = value.strip().lower()
    if not value:
        return None
    if value.startswith("life"):
        return MembershipType.LIFETIME
    if value.startswith("ord"):
        return MembershipType.ORDINARY
    return None


async def import_members(db: AsyncSession, df: pd.DataFrame) -> BulkUploadResult:
    result = BulkUploadResult()
    errors: List[Dict[str, Any]] = []
    seen = set()

    for index, row in df.iterrows():
        row_number = int(index) + 2  # header is row 1
        values = {k: str(v).strip() for k, v in row.items()}
        email = values.get("email", "").lower()

        if not EMAIL_RE.match(email):
            errors.append({"row": row_number, "message": "Invalid or missing email"})
            result.skipped += 1
            continue
        if email in seen:
            errors.append({"row": row_number, "message": f"Duplicate email {email} in file"})
            result.skipped += 1
            continue
        seen.add(email)

        membership_type = _parse_membership_type(values.get("membership_type", ""))
        if values.get("membership_type") and membership_type is None:
            errors.append({"row": row_number, "message": f"Unknown membership type '{values['membership_type']}'"})
            result.skipped += 1
            continue

        query = await db.execute(select(User).where(User.email == email))
        user = query.scalar_one_or_none()
        created = user is None
        if created:
            if not values.get("name"):
                errors.append({"row": row_number, "message": "Name is required for new members"})
                result.skipped += 1
                continue
            user = User(email=email, name=values["name"])
            db.add(user)

        for field in PROFILE_FIELDS:
            if values.get(field):
                setattr(user, field, values[field])

        if membership_type is not None:
            user.membership_type = membership_type
            user.is_member = True
            member_id = values.get("member_id")
            if member_id:
                clash = await db.execute(
                    select(User.id).where(User.member_id == member_id, User.email != email)
                )
                if clash.scalar_one_or_none() is not None:
                    errors.append({"row": row_number, "message": f"Member ID {member_id} already in use"})
                    member_id = None
            if not member_id and not user.member_id:
                await db.flush()
                member_id = await next_member_id(db, membership_type)
            if member_id:
                user.member_id = member_id

        await db.flush()
        if created:
            result.created += 1
        else:
            result.updated += 1

    await db.commit()
    result.errors = errors
    logger.info(
        f"[BulkImport] created={result.created} updated={result.updated} skipped={result.skipped}"
    )
    return result
