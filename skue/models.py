"""
Base model for resources exposed over the CRUD surface.
"""

from typing import Any, ClassVar, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class Resource(BaseModel):
    """
    A domain entity persisted in one collection and addressed by one id.

    Attributes travel on the wire under their PascalCase alias
    (``first_name`` -> ``FirstName``). Subclasses set ``collection`` and,
    when the id is not the document's ``_id``, ``id_attribute`` and
    ``id_field``.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)

    collection: ClassVar[str]
    id_attribute: ClassVar[str] = "id"
    id_field: ClassVar[str] = "_id"

    @property
    def resource_id(self) -> str:
        return getattr(self, self.id_attribute)

    def with_id(self, resource_id: str) -> "Resource":
        """Return a copy addressed by ``resource_id``."""
        return self.model_copy(update={self.id_attribute: resource_id})

    @classmethod
    def id_alias(cls) -> str:
        field = cls.model_fields[cls.id_attribute]
        return field.alias or cls.id_attribute

    @classmethod
    def storage_id(cls, resource_id: str) -> Any:
        """
        Convert a public id into the value stored under ``id_field``.

        Raises ``ValueError`` when ``resource_id`` can never match a document.
        """
        return resource_id

    @classmethod
    def public_id(cls, stored_id: Any) -> str:
        return str(stored_id)

    def to_document(self) -> Dict[str, Any]:
        """Dump the resource as a store document keyed by ``id_field``."""
        document = self.model_dump(by_alias=True)
        document[self.id_field] = self.storage_id(document.pop(self.id_alias()))
        return document

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Resource":
        data = dict(document)
        if cls.id_field in data:
            data[cls.id_alias()] = cls.public_id(data.pop(cls.id_field))
        # Driver-generated _id on collections keyed by another field
        data.pop("_id", None)
        return cls.model_validate(data)
