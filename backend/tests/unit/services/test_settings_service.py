"""
Unit Tests for default portal settings
"""
import pytest
from sqlalchemy import select

from crea.core.config import settings
from crea.models.setting import Setting
from crea.services.membership_service import ORDINARY_PRICE_KEY, LIFETIME_PRICE_KEY, membership_price
from crea.models.membership import MembershipPlan
from crea.services.settings_service import ensure_default_settings


class TestEnsureDefaultSettings:

    @pytest.mark.asyncio
    async def test_creates_missing_defaults(self, db_session):
        created = await ensure_default_settings(db_session)

        assert sorted(created) == sorted([ORDINARY_PRICE_KEY, LIFETIME_PRICE_KEY])
        rows = (await db_session.execute(select(Setting))).scalars().all()
        values = {s.key: s.value for s in rows}
        assert values[ORDINARY_PRICE_KEY] == settings.MEMBERSHIP_ORDINARY_PRICE
        assert values[LIFETIME_PRICE_KEY] == settings.MEMBERSHIP_LIFETIME_PRICE

    @pytest.mark.asyncio
    async def test_existing_values_kept(self, db_session):
        db_session.add(Setting(key=ORDINARY_PRICE_KEY, value=750, category='membership'))
        await db_session.commit()

        created = await ensure_default_settings(db_session)
        assert created == [LIFETIME_PRICE_KEY]
        assert await membership_price(db_session, MembershipPlan.ORDINARY) == 750

        assert await ensure_default_settings(db_session) == []
