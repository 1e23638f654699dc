"""
Soccer resources: players and teams.
"""

from typing import ClassVar, List

from bson import ObjectId
from pydantic import Field, field_validator

from skue.models import Resource


def new_object_id() -> str:
    return str(ObjectId())


class Player(Resource):
    """A soccer player, stored under a MongoDB ObjectId."""

    collection: ClassVar[str] = "players"

    id: str = Field(default_factory=new_object_id, description="24 character hex ObjectId")
    first_name: str = ""
    last_name: str = ""
    nationality: str = ""
    age: int = 0
    position: str = ""
    height: str = ""
    weight: str = ""
    foot: str = ""

    @field_validator("id")
    @classmethod
    def _check_object_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError("Id must be a 24 character hex string")
        return str(ObjectId(value))

    @classmethod
    def storage_id(cls, resource_id: str) -> ObjectId:
        if not ObjectId.is_valid(resource_id):
            raise ValueError(f"{resource_id!r} is not an ObjectId")
        return ObjectId(resource_id)


class Team(Resource):
    """A soccer team, addressed by a caller supplied ``TeamId``."""

    collection: ClassVar[str] = "teams"
    id_attribute: ClassVar[str] = "team_id"
    id_field: ClassVar[str] = "TeamId"

    team_id: str = Field(min_length=1)
    name: str = ""
    complete_name: str = ""
    logo: str = ""
    country: str = ""
    founded: int = 0
    website: str = ""
    players: List[Player] = Field(default_factory=list)
