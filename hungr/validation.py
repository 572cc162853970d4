from pydantic import BaseModel, Field, StrictBool, field_validator

from typing import Literal
from uuid import UUID

import re

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

def normalize_email(value: str) -> str:
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError('invalid email')
    return email

# Database entity creation models

class UserCreate(BaseModel):
    email: str
    name: str

class RecipeCreate(BaseModel):
    name: str
    user_uuid: UUID
    tag_string: str = ''
    source: str | None = None
    is_public: bool = False

class FileCreate(BaseModel):
    recipe_uuid: UUID
    page_number: int = Field(ge=0)
    content_type: str
    image: bool
    data: bytes

class RecipeStepCreate(BaseModel):
    recipe_uuid: UUID
    step_number: int = Field(ge=1)
    instruction: str

class StepIngredientCreate(BaseModel):
    recipe_step_uuid: UUID
    position: int = Field(ge=0)
    text: str

class TagCreate(BaseModel):
    name: str

class RecipeTagCreate(BaseModel):
    recipe_uuid: UUID
    tag_uuid: UUID
    position: int = 0

class ConnectionCreate(BaseModel):
    source_user_uuid: UUID
    target_user_uuid: UUID

# Request and response models (for `spectree`)

class ErrorResponse(BaseModel):
    error: str

class SuccessResponse(BaseModel):
    success: bool

# Users

class UserData(BaseModel):
    uuid: UUID
    email: str
    name: str
    created_at: str
    last_seen: str | None = None

class UserResponse(BaseModel):
    success: bool
    user: UserData

class LoginRequest(BaseModel):
    email: str

    normalize_email_field = field_validator('email')(normalize_email)

class UserLookupParams(BaseModel):
    uuid: UUID | None = None
    email: str | None = None

class UserIdParams(BaseModel):
    uuid: UUID

class UserCreateRequest(BaseModel):
    email: str
    name: str = Field(min_length=1)

    normalize_email_field = field_validator('email')(normalize_email)

class UserUpdateRequest(BaseModel):
    name: str = Field(min_length=1)

# Recipes

class RecipeData(BaseModel):
    uuid: UUID
    name: str
    user_uuid: UUID
    owner_email: str
    tag_string: str
    source: str | None
    is_public: bool
    created_at: str

class FileData(BaseModel):
    uuid: UUID
    recipe_uuid: UUID
    url: str
    page_number: int
    image: bool

class TagData(BaseModel):
    uuid: UUID
    name: str

class RecipesResponse(BaseModel):
    recipeData: list[RecipeData]
    fileData: list[FileData]

class UploadResponse(BaseModel):
    success: bool
    recipe: RecipeData
    tags: list[TagData]

class FileUploadResponse(BaseModel):
    success: bool
    files: list[FileData]

class TagsResponse(BaseModel):
    tags: list[TagData]

class RecipeListParams(BaseModel):
    email: str = Field(min_length=1)

class RecipeCreateParams(BaseModel):
    email: str = Field(min_length=1)
    name: str = Field(min_length=1)
    tagString: str = ''
    source: str | None = None

class RecipeDeleteParams(BaseModel):
    uuid: UUID

class PatchRecipeRequest(BaseModel):
    tagString: str | None = None
    source: str | None = None
    isPublic: StrictBool | None = None

# Steps

class RecipeStepData(BaseModel):
    instruction: str = ''
    ingredients: list[str] = []

class RecipeStepsResponse(BaseModel):
    steps: list[RecipeStepData]

class RecipeStepsRequest(BaseModel):
    steps: list[RecipeStepData]

class PublicRecipeResponse(BaseModel):
    recipe: RecipeData
    files: list[FileData]
    steps: list[RecipeStepData]
    tags: list[str]

# Connections

class ConnectionListParams(BaseModel):
    user_uuid: UUID
    direction: Literal['outgoing', 'incoming'] = 'outgoing'

class ConnectionAuthParams(BaseModel):
    email: str = Field(min_length=1)

class ConnectionDeleteParams(BaseModel):
    email: str = Field(min_length=1)
    target_user_uuid: UUID
    bidirectional: bool = False

class CreateConnectionRequest(BaseModel):
    target_user_uuid: UUID

class ConnectionsResponse(BaseModel):
    success: bool
    connections: list[UserData]

# Extraction

class ExtractURLRequest(BaseModel):
    url: str = Field(min_length=1)

class ExtractTextRequest(BaseModel):
    text: str = Field(min_length=1)

class ExtractedRecipe(BaseModel):
    steps: list[RecipeStepData]
    tags: list[str] = []
