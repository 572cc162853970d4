from hungr.client.browse import normalize_steps, filter_recipes, files_for_recipe, parse_tags
from hungr.client.guards import Recipe, File, RecipeStep

def recipe(name: str, tag_string: str) -> Recipe:
    return Recipe(
        uuid=f'uuid-{name}',
        name=name,
        user_uuid='owner',
        owner_email='owner@example.com',
        tag_string=tag_string,
        created_at='2026-01-01T00:00:00'
    )

def file(uuid: str, recipe_uuid: str, page_number: int) -> File:
    return File(uuid=uuid, recipe_uuid=recipe_uuid, url=f'/api/files/{uuid}', page_number=page_number, image=True)

def test_filter_is_case_insensitive_substring():
    recipes = [recipe('Curry', 'Dinner, Quick'), recipe('Pancakes', 'breakfast, quick'), recipe('Stew', 'dinner')]

    assert [r.name for r in filter_recipes(recipes, ['dinner'])] == ['Curry', 'Stew']
    assert [r.name for r in filter_recipes(recipes, ['QUICK', 'dinner'])] == ['Curry']
    assert [r.name for r in filter_recipes(recipes, ['din'])] == ['Curry', 'Stew']

def test_no_selected_tags_keeps_everything():
    recipes = [recipe('Curry', 'dinner'), recipe('Plain', '')]

    assert filter_recipes(recipes, []) == recipes

def test_files_for_recipe_are_ordered():
    files = [file('c', 'r1', 2), file('x', 'r2', 0), file('a', 'r1', 0), file('b', 'r1', 1)]

    assert [f.uuid for f in files_for_recipe(files, 'r1')] == ['a', 'b', 'c']
    assert files_for_recipe(files, 'r3') == []

def test_normalize_keeps_ingredients_holder():
    steps = [
        RecipeStep(instruction=' ', ingredients=[' 2 cups flour ', '', '1 tsp salt']),
        RecipeStep(instruction=' Mix ', ingredients=['  ']),
        RecipeStep(instruction='', ingredients=[])
    ]

    assert normalize_steps(steps) == [
        RecipeStep(instruction='', ingredients=['2 cups flour', '1 tsp salt']),
        RecipeStep(instruction='Mix', ingredients=[])
    ]

def test_normalize_drops_empty_first_step():
    steps = [RecipeStep(instruction='', ingredients=['']), RecipeStep(instruction='Bake', ingredients=[])]

    assert normalize_steps(steps) == [RecipeStep(instruction='Bake', ingredients=[])]

def test_parse_tags():
    assert parse_tags(' dinner ,, quick ,') == ['dinner', 'quick']
