from sqlalchemy import select, delete, func, or_, and_
from sqlalchemy.orm import Session

from uuid import UUID

from .models import User, Recipe, File, RecipeStep, StepIngredient, Tag, RecipeTag, Connection
from ..validation import (
    TagCreate, RecipeTagCreate, RecipeStepCreate, StepIngredientCreate, RecipeStepData
)

MAX_RECIPES = 100

# Users

def user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))

def purge_user(db: Session, user: User):
    db.execute(delete(Connection).where(
        or_(Connection.source_user_uuid == user.uuid, Connection.target_user_uuid == user.uuid)
    ))

    for recipe_uuid in db.scalars(select(Recipe.uuid).where(Recipe.user_uuid == user.uuid)).all():
        purge_recipe(db, recipe_uuid)

    db.delete(user)

# Recipes

def visible_recipes(db: Session, viewer: User) -> list[tuple[Recipe, str]]:
    """Recipes the viewer may browse, newest first, paired with the owner's
    email: their own plus those of owners sharing with them."""

    shared_with_viewer = select(Connection.source_user_uuid).where(
        Connection.target_user_uuid == viewer.uuid
    )

    rows = db.execute(
        select(Recipe, User.email)
        .join(User, User.uuid == Recipe.user_uuid)
        .where(or_(Recipe.user_uuid == viewer.uuid, Recipe.user_uuid.in_(shared_with_viewer)))
        .order_by(Recipe.created_at.desc())
        .limit(MAX_RECIPES)
    ).all()

    return [(recipe, email) for recipe, email in rows]

def owner_email(db: Session, recipe: Recipe) -> str:
    return db.scalar(select(User.email).where(User.uuid == recipe.user_uuid))

def purge_recipe(db: Session, recipe_uuid: UUID):
    step_uuids = select(RecipeStep.uuid).where(RecipeStep.recipe_uuid == recipe_uuid)

    db.execute(delete(StepIngredient).where(StepIngredient.recipe_step_uuid.in_(step_uuids)))
    db.execute(delete(RecipeStep).where(RecipeStep.recipe_uuid == recipe_uuid))
    db.execute(delete(File).where(File.recipe_uuid == recipe_uuid))
    db.execute(delete(RecipeTag).where(RecipeTag.recipe_uuid == recipe_uuid))
    db.execute(delete(Recipe).where(Recipe.uuid == recipe_uuid))

# Files

def recipe_files(db: Session, recipe_uuids: list[UUID]) -> list[File]:
    if not recipe_uuids:
        return []

    return list(db.scalars(
        select(File)
        .where(File.recipe_uuid.in_(recipe_uuids))
        .order_by(File.recipe_uuid, File.page_number)
    ).all())

def next_page_number(db: Session, recipe_uuid: UUID) -> int:
    last = db.scalar(select(func.max(File.page_number)).where(File.recipe_uuid == recipe_uuid))
    return 0 if last is None else last + 1

# Tags

def split_tag_string(tag_string: str) -> list[str]:
    return [name.strip() for name in tag_string.split(',') if name.strip()]

def join_tag_names(names: list[str]) -> str:
    return ', '.join(names)

def link_tags(db: Session, recipe_uuid: UUID, names: list[str]) -> list[Tag]:
    """Replaces the recipe's tag links with `names`, creating missing tags.
    A name listed twice is linked once."""

    db.execute(delete(RecipeTag).where(RecipeTag.recipe_uuid == recipe_uuid))

    tags = []
    for name in dict.fromkeys(names):
        tag = db.scalar(select(Tag).where(Tag.name == name))
        if tag is None:
            tag = Tag(TagCreate(name=name))
            db.add(tag)
            db.flush()

        db.add(RecipeTag(RecipeTagCreate(
            recipe_uuid=recipe_uuid,
            tag_uuid=tag.uuid,
            position=len(tags)
        )))
        tags.append(tag)

    db.flush()
    return tags

def recipe_tag_names(db: Session, recipe_uuid: UUID) -> list[str]:
    return list(db.scalars(
        select(Tag.name)
        .join(RecipeTag, RecipeTag.tag_uuid == Tag.uuid)
        .where(RecipeTag.recipe_uuid == recipe_uuid)
        .order_by(RecipeTag.position)
    ).all())

# Steps

def load_steps(db: Session, recipe_uuid: UUID) -> list[RecipeStepData]:
    steps = db.scalars(
        select(RecipeStep)
        .where(RecipeStep.recipe_uuid == recipe_uuid)
        .order_by(RecipeStep.step_number)
    ).all()

    result = []
    for step in steps:
        ingredients = db.scalars(
            select(StepIngredient.text)
            .where(StepIngredient.recipe_step_uuid == step.uuid)
            .order_by(StepIngredient.position)
        ).all()
        result.append(RecipeStepData(instruction=step.instruction, ingredients=list(ingredients)))

    return result

def replace_steps(db: Session, recipe_uuid: UUID, steps: list[RecipeStepData]):
    step_uuids = select(RecipeStep.uuid).where(RecipeStep.recipe_uuid == recipe_uuid)
    db.execute(delete(StepIngredient).where(StepIngredient.recipe_step_uuid.in_(step_uuids)))
    db.execute(delete(RecipeStep).where(RecipeStep.recipe_uuid == recipe_uuid))

    for number, data in enumerate(steps, start=1):
        step = RecipeStep(RecipeStepCreate(
            recipe_uuid=recipe_uuid,
            step_number=number,
            instruction=data.instruction
        ))
        db.add(step)
        db.flush()

        for position, text in enumerate(data.ingredients):
            db.add(StepIngredient(StepIngredientCreate(
                recipe_step_uuid=step.uuid,
                position=position,
                text=text
            )))

    db.flush()

# Connections

def connection(db: Session, source_uuid: UUID, target_uuid: UUID) -> Connection | None:
    return db.get(Connection, (source_uuid, target_uuid))

def connected_users(db: Session, user_uuid: UUID, incoming: bool) -> list[User]:
    if incoming:
        edge = and_(Connection.source_user_uuid == User.uuid, Connection.target_user_uuid == user_uuid)
    else:
        edge = and_(Connection.target_user_uuid == User.uuid, Connection.source_user_uuid == user_uuid)

    return list(db.scalars(select(User).join(Connection, edge).order_by(User.name)).all())
