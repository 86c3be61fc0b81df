import csv

from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.db.models.pet import Pet
from petvet.db.models.user import User
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord
from petvet.scripts.seed_data import export_credentials, seed


def test_seed_populates_every_table(db, tmp_path):
    summary, credentials = seed(db, owners=4, vets=2, offices=3)

    assert summary.users == 7 == db.query(User).count()
    assert summary.pets == db.query(Pet).count() > 0
    assert summary.patients == db.query(VetPatient).count()
    assert summary.records == db.query(VetRecord).count()
    assert db.query(PartneredVetOffice).count() == 3
    assert summary.links == db.query(PreferredVetOffice).count() + db.query(VetOfficeMember).count()
    assert db.query(User).filter_by(role="admin").count() == 1

    # Records only exist for active assignments.
    active = {(p.vet_id, p.pet_id) for p in db.query(VetPatient).filter_by(status="active")}
    assert all((r.vet_id, r.pet_id) in active for r in db.query(VetRecord))

    out = export_credentials(credentials, tmp_path / "creds.csv")
    rows = list(csv.DictReader(out.open(encoding="utf-8")))
    assert len(rows) == 7
    assert {"admin"} <= {r["username"] for r in rows}


def test_seed_is_repeatable(db):
    seed(db, owners=2, vets=1, offices=1)
    summary, _ = seed(db, owners=2, vets=1, offices=1)
    assert db.query(User).count() == summary.users == 4
