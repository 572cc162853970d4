from sqlalchemy import ForeignKey, LargeBinary, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from typing import Any
from uuid import UUID, uuid4
from datetime import datetime, timezone

from ..validation import (
    UserCreate, RecipeCreate, FileCreate, RecipeStepCreate,
    StepIngredientCreate, TagCreate, RecipeTagCreate, ConnectionCreate
)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

# SQLAlchemy ORM models

class OrmBase(DeclarativeBase):
    pass

class User(OrmBase):
    __tablename__ = 'users'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_seen: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __init__(self, c: UserCreate):
        self.uuid = uuid4()
        self.email = c.email
        self.name = c.name
        self.created_at = utcnow()
        self.last_seen = None

    def serialize(self) -> dict[str, Any]:
        return {
            'uuid': str(self.uuid),
            'email': self.email,
            'name': self.name,
            'created_at': self.created_at.isoformat(),
            'last_seen': self.last_seen.isoformat() if self.last_seen is not None else None
        }

class Recipe(OrmBase):
    __tablename__ = 'recipes'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(nullable=False)
    user_uuid: Mapped[UUID] = mapped_column(ForeignKey('users.uuid'), nullable=False, index=True)
    tag_string: Mapped[str] = mapped_column(nullable=False, default='')
    source: Mapped[str | None] = mapped_column(nullable=True)
    is_public: Mapped[bool] = mapped_column(nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    def __init__(self, c: RecipeCreate):
        self.uuid = uuid4()
        self.name = c.name
        self.user_uuid = c.user_uuid
        self.tag_string = c.tag_string
        self.source = c.source
        self.is_public = c.is_public
        self.created_at = utcnow()

    def serialize(self, owner_email: str) -> dict[str, Any]:
        return {
            'uuid': str(self.uuid),
            'name': self.name,
            'user_uuid': str(self.user_uuid),
            'owner_email': owner_email,
            'tag_string': self.tag_string,
            'source': self.source,
            'is_public': self.is_public,
            'created_at': self.created_at.isoformat()
        }

class File(OrmBase):
    __tablename__ = 'files'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    recipe_uuid: Mapped[UUID] = mapped_column(ForeignKey('recipes.uuid'), nullable=False, index=True)
    page_number: Mapped[int] = mapped_column(nullable=False)
    content_type: Mapped[str] = mapped_column(nullable=False)
    image: Mapped[bool] = mapped_column(nullable=False)
    # Loaded only when the file itself is downloaded
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, deferred=True)

    def __init__(self, c: FileCreate):
        self.uuid = uuid4()
        self.recipe_uuid = c.recipe_uuid
        self.page_number = c.page_number
        self.content_type = c.content_type
        self.image = c.image
        self.data = c.data

    @property
    def url(self) -> str:
        return f'/api/files/{self.uuid}'

    def serialize(self) -> dict[str, Any]:
        return {
            'uuid': str(self.uuid),
            'recipe_uuid': str(self.recipe_uuid),
            'url': self.url,
            'page_number': self.page_number,
            'image': self.image
        }

class RecipeStep(OrmBase):
    __tablename__ = 'recipe_steps'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    recipe_uuid: Mapped[UUID] = mapped_column(ForeignKey('recipes.uuid'), nullable=False, index=True)
    step_number: Mapped[int] = mapped_column(nullable=False)
    instruction: Mapped[str] = mapped_column(nullable=False, default='')

    def __init__(self, c: RecipeStepCreate):
        self.uuid = uuid4()
        self.recipe_uuid = c.recipe_uuid
        self.step_number = c.step_number
        self.instruction = c.instruction

class StepIngredient(OrmBase):
    __tablename__ = 'step_ingredients'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    recipe_step_uuid: Mapped[UUID] = mapped_column(ForeignKey('recipe_steps.uuid'), nullable=False, index=True)
    position: Mapped[int] = mapped_column(nullable=False)
    text: Mapped[str] = mapped_column(nullable=False)

    def __init__(self, c: StepIngredientCreate):
        self.uuid = uuid4()
        self.recipe_step_uuid = c.recipe_step_uuid
        self.position = c.position
        self.text = c.text

class Tag(OrmBase):
    __tablename__ = 'tags'

    uuid: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(nullable=False, unique=True)

    def __init__(self, c: TagCreate):
        self.uuid = uuid4()
        self.name = c.name

    def serialize(self) -> dict[str, Any]:
        return {
            'uuid': str(self.uuid),
            'name': self.name
        }

# Associations tables for the many-to-many relationships

class RecipeTag(OrmBase):
    __tablename__ = 'recipe_tags'

    recipe_uuid: Mapped[UUID] = mapped_column(ForeignKey('recipes.uuid'), primary_key=True, nullable=False)
    tag_uuid: Mapped[UUID] = mapped_column(ForeignKey('tags.uuid'), primary_key=True, nullable=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    def __init__(self, c: RecipeTagCreate):
        self.recipe_uuid = c.recipe_uuid
        self.tag_uuid = c.tag_uuid
        self.position = c.position

class Connection(OrmBase):
    """Directed edge: `source` shares its recipes with `target`."""

    __tablename__ = 'user_connections'

    source_user_uuid: Mapped[UUID] = mapped_column(ForeignKey('users.uuid'), primary_key=True, nullable=False)
    target_user_uuid: Mapped[UUID] = mapped_column(ForeignKey('users.uuid'), primary_key=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __init__(self, c: ConnectionCreate):
        self.source_user_uuid = c.source_user_uuid
        self.target_user_uuid = c.target_user_uuid
        self.created_at = utcnow()
