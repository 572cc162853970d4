from .guards import Recipe, File, RecipeStep

def normalize_steps(steps: list[RecipeStep]) -> list[RecipeStep]:
    """Trims steps and drops the empty ones. The first step may hold only
    ingredients, so it is kept as long as it has any."""

    normalized = []
    for step in steps:
        instruction = step.instruction.strip()
        ingredients = [text.strip() for text in step.ingredients if text.strip()]

        if not instruction and not ingredients:
            continue

        normalized.append(RecipeStep(instruction=instruction, ingredients=ingredients))

    return normalized

def parse_tags(tag_string: str) -> list[str]:
    return [tag.strip() for tag in tag_string.split(',') if tag.strip()]

def filter_recipes(recipes: list[Recipe], tags: list[str]) -> list[Recipe]:
    """Keeps the recipes whose tag string contains every selected tag,
    ignoring case."""

    wanted = [tag.lower() for tag in tags]
    return [r for r in recipes if all(tag in r.tag_string.lower() for tag in wanted)]

def files_for_recipe(files: list[File], recipe_uuid: str) -> list[File]:
    return sorted((f for f in files if f.recipe_uuid == recipe_uuid), key=lambda f: f.page_number)
