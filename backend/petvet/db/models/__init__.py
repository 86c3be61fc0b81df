# backend/petvet/db/models/__init__.py

from petvet.db.models.user import User
from petvet.db.models.pet import Pet
from petvet.db.models.vet_patient import VetPatient
from petvet.db.models.vet_record import VetRecord

from petvet.db.models.partnered_vet_office import PartneredVetOffice
from petvet.db.models.office_link import PreferredVetOffice, VetOfficeMember
