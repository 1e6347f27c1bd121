"""Starting data: the staff roster and a small sample catalogue.

Must be called inside an active domain context. Expiry dates are offsets from
``today`` so the sample catalogue always shows a spread of expiry statuses.
"""

from datetime import timedelta

import structlog
from protean.utils.globals import current_domain

from pharmacy.medicine.registration import AddMedicine
from pharmacy.staff.staff import StaffMember, StaffRole

logger = structlog.get_logger(__name__)

ROSTER = [
    ("Dr. Sarah Nakimuli", "sarah.nakimuli@mpigi.ug", StaffRole.DOCTOR, "Pediatrics"),
    ("Dr. James Musoke", "james.musoke@mpigi.ug", StaffRole.DOCTOR, "Internal Medicine"),
    ("Florence Namukasa", "florence.namukasa@mpigi.ug", StaffRole.PHARMACIST, "Pharmacy"),
    ("Administrator", "admin@mpigi.ug", StaffRole.ADMIN, "Administration"),
]

SAMPLE_MEDICINES = [
    {
        "name": "Paracetamol 500mg",
        "generic_name": "Acetaminophen",
        "category": "Analgesic",
        "manufacturer": "Cipla Uganda",
        "batch_number": "PAR2024001",
        "expires_in_days": 420,
        "quantity_in_stock": 500,
        "minimum_stock_level": 100,
        "unit_price": 150,
        "location": "Shelf A1",
        "description": "Pain relief and fever reduction",
    },
    {
        "name": "Amoxicillin 250mg",
        "generic_name": "Amoxicillin",
        "category": "Antibiotic",
        "manufacturer": "Quality Chemicals",
        "batch_number": "AMX2024002",
        "expires_in_days": 240,
        "quantity_in_stock": 75,
        "minimum_stock_level": 50,
        "unit_price": 800,
        "location": "Shelf B2",
        "description": "Broad spectrum antibiotic",
    },
    {
        "name": "Insulin Glargine",
        "generic_name": "Insulin Glargine",
        "category": "Antidiabetic",
        "manufacturer": "Novo Nordisk",
        "batch_number": "INS2024003",
        "expires_in_days": 60,
        "quantity_in_stock": 25,
        "minimum_stock_level": 20,
        "unit_price": 15000,
        "location": "Refrigerator R1",
        "description": "Long-acting insulin",
    },
    {
        "name": "Panadol Extra",
        "generic_name": "Paracetamol + Caffeine",
        "category": "Analgesic",
        "manufacturer": "GSK",
        "batch_number": "PAN2023015",
        "expires_in_days": 20,
        "quantity_in_stock": 200,
        "minimum_stock_level": 75,
        "unit_price": 250,
        "location": "Shelf A2",
        "description": "Enhanced pain relief",
    },
]


def seed_roster():
    repo = current_domain.repository_for(StaffMember)
    for name, email, role, department in ROSTER:
        repo.add(StaffMember.enrol(name=name, email=email, role=role.value, department=department))


def seed_catalogue(today):
    for sample in SAMPLE_MEDICINES:
        fields = {key: value for key, value in sample.items() if key != "expires_in_days"}
        expiry = today + timedelta(days=sample["expires_in_days"])
        current_domain.process(
            AddMedicine(expiry_date=expiry.isoformat(), **fields),
            asynchronous=False,
        )


def seed_all(today):
    seed_roster()
    seed_catalogue(today)
    logger.info("Seeded sample data", staff=len(ROSTER), medicines=len(SAMPLE_MEDICINES))
