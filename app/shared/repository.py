"""
Ownership-scoped document access.

Every patient-scoped read or write goes through a repository here so the
"belongs to this doctor" condition is written once. A document that exists
but belongs to another doctor is indistinguishable from a missing one.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, Type, TypeVar

from beanie import Document, PydanticObjectId
from bson.errors import InvalidId

from app.shared.exceptions import NotFoundException


DocumentT = TypeVar("DocumentT", bound=Document)


def parse_object_id(value: Any) -> Optional[PydanticObjectId]:
    """Parse a path/body id, returning None when it is not a valid ObjectId."""
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None


class ScopedRepository(ABC, Generic[DocumentT]):
    """Base repository restricting every lookup to one doctor's documents."""

    def __init__(self, model: Type[DocumentT], label: str):
        self.model = model
        self.label = label

    @abstractmethod
    async def is_owned(self, document: DocumentT, doctor_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def owner_criteria(self, doctor_id: str) -> dict:
        raise NotImplementedError

    async def find_owned(self, document_id: Any, doctor_id: str) -> Optional[DocumentT]:
        """Fetch a document by id if, and only if, the doctor owns it."""
        object_id = parse_object_id(document_id)
        if object_id is None:
            return None

        document = await self.model.get(object_id)
        if document is None or not await self.is_owned(document, doctor_id):
            return None

        return document

    async def get_owned(self, document_id: Any, doctor_id: str) -> DocumentT:
        """Like find_owned, raising NotFoundException instead of returning None."""
        document = await self.find_owned(document_id, doctor_id)
        if document is None:
            raise NotFoundException(f"{self.label} not found")
        return document

    async def list_owned(
        self,
        doctor_id: str,
        *criteria,
        sort: Optional[list] = None,
        limit: Optional[int] = None,
    ) -> List[DocumentT]:
        query = self.model.find(await self.owner_criteria(doctor_id), *criteria)
        if sort:
            query = query.sort(sort)
        if limit:
            query = query.limit(limit)
        return await query.to_list()

    async def count_owned(self, doctor_id: str, *criteria) -> int:
        return await self.model.find(await self.owner_criteria(doctor_id), *criteria).count()


class DoctorOwnedRepository(ScopedRepository[DocumentT]):
    """Documents that carry the owning doctor's id themselves (patients)."""

    async def is_owned(self, document: DocumentT, doctor_id: str) -> bool:
        return document.doctor_id == doctor_id

    async def owner_criteria(self, doctor_id: str) -> dict:
        return {"doctor_id": doctor_id}

    async def owned_patient_ids(self, doctor_id: str) -> List[str]:
        documents = await self.model.find({"doctor_id": doctor_id}).to_list()
        return [str(document.id) for document in documents]


class PatientOwnedRepository(ScopedRepository[DocumentT]):
    """Documents owned transitively through their patient."""

    def __init__(self, model: Type[DocumentT], label: str, patients: DoctorOwnedRepository):
        super().__init__(model, label)
        self.patients = patients

    async def is_owned(self, document: DocumentT, doctor_id: str) -> bool:
        patient = await self.patients.find_owned(document.patient_id, doctor_id)
        return patient is not None

    async def owner_criteria(self, doctor_id: str) -> dict:
        patient_ids = await self.patients.owned_patient_ids(doctor_id)
        return {"patient_id": {"$in": patient_ids}}
