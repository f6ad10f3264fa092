"""Demo data for a fresh database.

Goes through the services rather than raw inserts so every seeded row gets
its audit history.
"""

from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.database import DatabaseManager
from cse_whiteboard.audit.service import AuditService
from cse_whiteboard.customers.service import CustomerService
from cse_whiteboard.notes.service import NoteService

DEMO_CUSTOMERS = [
    {
        "customer": {
            "name": "TechStart Solutions",
            "last_patch_date": "2024-01-15",
            "topology": "prod",
            "dumbledore_stage": 5,
            "patch_frequency": "monthly",
        },
        "notes": [
            "<p>Initial setup completed. Customer is on LTS version 2.4. All systems operational.</p>",
            "<p>Quarterly review conducted. Discussed upgrade path to version 3.0. "
            "Customer satisfied with current performance.</p>",
            "<p>Security patch applied successfully. No downtime reported. "
            "Customer confirmed all services running smoothly.</p>",
        ],
    },
    {
        "customer": {
            "name": "Global Enterprises Inc",
            "last_patch_date": "2024-01-20",
            "topology": "stage",
            "dumbledore_stage": 3,
            "patch_frequency": "quarterly",
        },
        "notes": [
            "<p>Migration planning meeting held. Target go-live next quarter.</p>",
            "<p>Staging environment validated against the new release.</p>",
        ],
    },
    {
        "customer": {
            "name": "Innovate Labs",
            "last_patch_date": "2024-01-10",
            "topology": "qa",
            "dumbledore_stage": 2,
            "patch_frequency": "monthly",
            "temperament": "concerned",
        },
        "notes": [
            "<p>Performance issues reported in QA. Investigating with support.</p>",
        ],
    },
    {
        "customer": {
            "name": "DataFlow Systems",
            "topology": "dev",
            "dumbledore_stage": 1,
            "patch_frequency": "quarterly",
            "temperament": "happy",
        },
        "notes": [],
    },
]


async def seed_demo_data(settings: WhiteboardSettings, user_id: str) -> tuple[int, int]:
    """Create the demo customers and notes for ``user_id``. Returns (customers, notes)."""
    db = DatabaseManager(settings)
    await db.init()
    await db.create_all()

    audit = AuditService(settings)
    customers = CustomerService(settings, audit_service=audit)
    notes = NoteService(settings, audit_service=audit)

    customer_count = note_count = 0
    try:
        for seed in DEMO_CUSTOMERS:
            async with db.get_session() as session:
                customer = await customers.create_customer(session, user_id, seed["customer"])
                customer_count += 1
                for body in seed["notes"]:
                    await notes.add_note(
                        session, user_id, {"customer_id": customer.id, "note": body},
                    )
                    note_count += 1
    finally:
        await db.close()
    return customer_count, note_count
