"""Strict models for every response body the client accepts.

Nothing is coerced: a number where a string is expected is a contract
violation, not something to repair."""

from pydantic import BaseModel, ConfigDict

class Guard(BaseModel):
    model_config = ConfigDict(strict=True, extra='ignore')

class Recipe(Guard):
    uuid: str
    name: str
    user_uuid: str
    owner_email: str
    tag_string: str
    source: str | None = None
    is_public: bool = False
    created_at: str

class File(Guard):
    uuid: str
    recipe_uuid: str
    url: str
    page_number: int
    image: bool

class Tag(Guard):
    uuid: str
    name: str

class User(Guard):
    uuid: str
    email: str
    name: str
    created_at: str
    last_seen: str | None = None

class RecipeStep(Guard):
    instruction: str
    ingredients: list[str]

class RecipesResponse(Guard):
    recipeData: list[Recipe]
    fileData: list[File]

class UploadResponse(Guard):
    success: bool
    recipe: Recipe
    tags: list[Tag]

class FileUploadResponse(Guard):
    success: bool
    files: list[File]

class RecipeStepsResponse(Guard):
    steps: list[RecipeStep]

class ExtractedRecipe(Guard):
    steps: list[RecipeStep]
    tags: list[str] = []

class PublicRecipeResponse(Guard):
    recipe: Recipe
    files: list[File]
    steps: list[RecipeStep]
    tags: list[str]

class TagsResponse(Guard):
    tags: list[Tag]

class UserResponse(Guard):
    success: bool
    user: User

class ConnectionsResponse(Guard):
    success: bool
    connections: list[User]

def get_error_message(value: object) -> str | None:
    if not isinstance(value, dict):
        return None
    error = value.get('error')
    return error if isinstance(error, str) else None
