"""Tests for demo data seeding."""

from sqlalchemy import func, select

from cse_whiteboard.audit.models import CustomerAuditLogModel
from cse_whiteboard.common.database import DatabaseManager
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.seed import DEMO_CUSTOMERS, seed_demo_data

from tests.conftest import USER_A, make_settings


async def test_seed_demo_data(tmp_path):
    settings = make_settings(db_url=f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}")
    customers, notes = await seed_demo_data(settings, USER_A)
    assert customers == len(DEMO_CUSTOMERS)
    assert notes == sum(len(s["notes"]) for s in DEMO_CUSTOMERS)

    db = DatabaseManager(settings)
    await db.init()
    try:
        async with db.get_session() as session:
            names = (await session.execute(
                select(CustomerModel.name).where(CustomerModel.user_id == USER_A)
            )).scalars().all()
            note_count = (await session.execute(
                select(func.count()).select_from(CustomerNoteModel)
            )).scalar()
            creates = (await session.execute(
                select(func.count()).select_from(CustomerAuditLogModel)
                .where(CustomerAuditLogModel.action == "create")
            )).scalar()
    finally:
        await db.close()

    assert set(names) == {s["customer"]["name"] for s in DEMO_CUSTOMERS}
    assert note_count == notes
    assert creates == customers
