"""Module: seed_data."""

import csv
import random
import string
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from faker import Faker
from sqlalchemy import delete
from sqlalchemy.orm import Session

from petvet.core.security import hash_password
from petvet.db.init_db import init_db
from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import PATIENT_STATUSES, VetPatient
from petvet.db.models.vet_record import VetRecord
from petvet.db.session import SessionLocal

fake = Faker("en_US")

DOG_BREEDS = [
    "Labrador Retriever",
    "German Shepherd",
    "Golden Retriever",
    "French Bulldog",
    "Poodle",
    "Beagle",
    "Dachshund",
    "Border Collie",
    "Siberian Husky",
    "Boxer",
]

CAT_BREEDS = [
    "Domestic Shorthair",
    "Domestic Longhair",
    "Maine Coon",
    "Ragdoll",
    "Persian",
    "Siamese",
    "Bengal",
]

VISIT_REASONS = ["Annual check-up", "Vaccination", "Skin irritation", "Limping", "Dental", "Weight check"]
DIAGNOSES = ["Healthy", "Mild dermatitis", "Soft tissue strain", "Periodontal disease", "Ear infection"]
TREATMENTS = ["None required", "Topical cream", "Rest and NSAIDs", "Dental scale and polish", "Ear drops"]


@dataclass
class SeedSummary:
    users: int
    pets: int
    patients: int
    records: int
    offices: int
    links: int


# Shared helpers used by multiple seed builders.
def generate_password(length: int = 12) -> str:
    chars = string.ascii_letters + string.digits
    return "".join(random.choice(chars) for _ in range(length))


def export_credentials(credentials: list[tuple[User, str]], out_path: Path | None = None) -> Path:
    out_path = out_path or Path(__file__).resolve().parent / "seeded_user_credentials.csv"
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["user_id", "username", "password", "role", "type"])
        for user, password in credentials:
            writer.writerow([str(user.id), user.username, password, user.role, user.type])
    return out_path


def reset_db(session: Session) -> None:
    # Children first so the delete order never trips a foreign key.
    for model in (
        VetRecord,
        VetPatient,
        PreferredVetOffice,
        VetOfficeMember,
        Pet,
        PartneredVetOffice,
        User,
    ):
        session.execute(delete(model))
    session.commit()


def seed_users(session: Session, owners: int = 20, vets: int = 5) -> list[tuple[User, str]]:
    # One known admin plus generated owners and vets; plaintext passwords only go to the CSV.
    credentials: list[tuple[User, str]] = [(User(username="admin", role="admin", type="owner"), "admin1234")]
    for type_, n in (("owner", owners), ("vet", vets)):
        for _ in range(n):
            credentials.append((User(username=fake.unique.user_name(), role="user", type=type_), generate_password()))

    for user, password in credentials:
        user.password_hash = hash_password(password)
    session.add_all([user for user, _ in credentials])
    session.commit()
    return credentials


def seed_pets(session: Session, owners: list[User], per_owner: int = 2) -> list[Pet]:
    # Mixed dog/cat population with the owner's contact details copied onto each pet.
    pets: list[Pet] = []
    for owner in owners:
        owner_name = fake.name()
        for _ in range(random.randint(1, per_owner)):
            species = random.choice(["Dog", "Cat"])
            pets.append(Pet(
                owner_id=owner.id,
                name=fake.first_name(),
                species=species,
                breed=random.choice(DOG_BREEDS if species == "Dog" else CAT_BREEDS),
                birth_date=fake.date_between(start_date="-14y", end_date="today"),
                weight=round(max(1.5, random.gauss(mu=10.0 if species == "Dog" else 4.5, sigma=2.0)), 1),
                color=fake.safe_color_name(),
                microchip_id="".join(random.choice(string.digits) for _ in range(15)),
                owner_name=owner_name,
                owner_phone=fake.phone_number(),
                owner_email=fake.email(),
            ))
    session.add_all(pets)
    session.commit()
    return pets


def seed_patients(session: Session, pets: list[Pet], vets: list[User]) -> list[VetPatient]:
    # Each pet is assigned to at most one random vet; a vet never holds the same pet twice.
    patients: list[VetPatient] = []
    if not vets:
        return patients
    for pet in pets:
        if random.random() < 0.25:
            continue
        patients.append(VetPatient(
            vet_id=random.choice(vets).id,
            pet_id=pet.id,
            assigned_date=fake.date_between(start_date="-2y", end_date="today"),
            status=random.choices(PATIENT_STATUSES, weights=[0.8, 0.15, 0.05], k=1)[0],
            notes=fake.sentence(nb_words=8) if random.random() < 0.3 else None,
        ))
    session.add_all(patients)
    session.commit()
    return patients


def seed_records(session: Session, patients: list[VetPatient]) -> list[VetRecord]:
    # Records are only written against active assignments, mirroring the API rule.
    today = date.today()
    records: list[VetRecord] = []
    for patient in patients:
        if patient.status != "active":
            continue
        for _ in range(random.randint(1, 3)):
            visit_date = today - timedelta(days=random.randint(0, 365))
            records.append(VetRecord(
                pet_id=patient.pet_id,
                vet_id=patient.vet_id,
                visit_date=visit_date,
                reason=random.choice(VISIT_REASONS),
                diagnosis=random.choice(DIAGNOSES),
                treatment=random.choice(TREATMENTS),
                next_visit_date=today + timedelta(days=random.randint(1, 60)) if random.random() < 0.4 else None,
                notes=fake.sentence(nb_words=10),
            ))
    session.add_all(records)
    session.commit()
    return records


def seed_offices(session: Session, n: int = 5) -> list[PartneredVetOffice]:
    offices = [
        PartneredVetOffice(
            name=f"{fake.last_name()} Veterinary Clinic",
            address=fake.address().replace("\n", ", "),
            external_id=fake.bothify(text="VL-#####"),
        )
        for _ in range(n)
    ]
    session.add_all(offices)
    session.commit()
    return offices


def seed_office_links(
    session: Session,
    offices: list[PartneredVetOffice],
    owners: list[User],
    vets: list[User],
) -> int:
    links: list[PreferredVetOffice | VetOfficeMember] = []
    if not offices:
        return 0
    for owner in owners:
        for office in random.sample(offices, k=random.randint(0, min(2, len(offices)))):
            links.append(PreferredVetOffice(user_id=owner.id, vet_office_id=office.id))
    for vet in vets:
        for office in random.sample(offices, k=random.randint(1, min(2, len(offices)))):
            links.append(VetOfficeMember(vet_user_id=vet.id, vet_office_id=office.id))
    session.add_all(links)
    session.commit()
    return len(links)


def seed(session: Session, owners: int = 20, vets: int = 5, offices: int = 5) -> tuple[SeedSummary, list[tuple[User, str]]]:
    """Reset and repopulate every table; returns counts and the generated credentials."""
    reset_db(session)
    credentials = seed_users(session, owners=owners, vets=vets)
    users = [user for user, _ in credentials]
    owner_users = [u for u in users if u.type == "owner" and u.role == "user"]
    vet_users = [u for u in users if u.type == "vet"]

    pets = seed_pets(session, owner_users)
    patients = seed_patients(session, pets, vet_users)
    records = seed_records(session, patients)
    office_rows = seed_offices(session, offices)
    link_n = seed_office_links(session, office_rows, owner_users, vet_users)

    summary = SeedSummary(
        users=len(users),
        pets=len(pets),
        patients=len(patients),
        records=len(records),
        offices=len(office_rows),
        links=link_n,
    )
    return summary, credentials


if __name__ == "__main__":
    # Full reseed pipeline: python -m petvet.scripts.seed_data
    init_db()
    session = SessionLocal()
    try:
        print("Seeding users, pets, assignments, records and offices...")
        summary, credentials = seed(session)
        creds_path = export_credentials(credentials)
        print(
            f"Done. users={summary.users}, pets={summary.pets}, patients={summary.patients}, "
            f"records={summary.records}, offices={summary.offices}, office_links={summary.links}"
        )
        print(f"Credentials export: {creds_path}")
    finally:
        session.close()
