import pytest
from falcon.testing import TestClient

from uuid import uuid4

@pytest.fixture
def recipe_uuid(login, create_recipe) -> str:
    login('alice@example.com')
    return create_recipe('alice@example.com', 'Bread')['recipe']['uuid']

def test_new_recipe_has_no_steps(client: TestClient, recipe_uuid):
    resp = client.simulate_get(f'/api/recipes/{recipe_uuid}/steps')

    assert resp.status_code == 200
    assert resp.json == {'steps': []}

def test_three_steps_round_trip_in_order(client: TestClient, recipe_uuid):
    steps = [
        {'instruction': 'Mix the dough', 'ingredients': ['500 g flour', '10 g salt']},
        {'instruction': 'Let it rise for 2 hours', 'ingredients': []},
        {'instruction': 'Bake at 230°C for 35 minutes', 'ingredients': []}
    ]

    resp = client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': steps})
    assert resp.status_code == 200
    assert resp.json == {'success': True}

    assert client.simulate_get(f'/api/recipes/{recipe_uuid}/steps').json['steps'] == steps

def test_ingredients_only_first_step_survives(client: TestClient, recipe_uuid):
    steps = [
        {'instruction': '', 'ingredients': ['2 cups flour', '1 tsp salt']},
        {'instruction': 'Mix', 'ingredients': []}
    ]

    resp = client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': steps})
    assert resp.status_code == 200

    saved = client.simulate_get(f'/api/recipes/{recipe_uuid}/steps').json['steps']
    assert len(saved) == 2
    assert saved[0] == {'instruction': '', 'ingredients': ['2 cups flour', '1 tsp salt']}
    assert saved[1] == {'instruction': 'Mix', 'ingredients': []}

def test_steps_are_replaced(client: TestClient, recipe_uuid):
    client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': 'One', 'ingredients': ['a']},
        {'instruction': 'Two', 'ingredients': ['b']}
    ]})
    client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': 'Only', 'ingredients': []}
    ]})

    saved = client.simulate_get(f'/api/recipes/{recipe_uuid}/steps').json['steps']
    assert saved == [{'instruction': 'Only', 'ingredients': []}]

def test_later_step_needs_instruction(client: TestClient, recipe_uuid):
    resp = client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': 'Mix', 'ingredients': []},
        {'instruction': '  ', 'ingredients': ['1 egg']}
    ]})

    assert resp.status_code == 400
    assert resp.json['error'] == 'step 2: instruction is required'

def test_empty_first_step_is_rejected(client: TestClient, recipe_uuid):
    resp = client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': '', 'ingredients': []}
    ]})

    assert resp.status_code == 400
    assert resp.json['error'] == 'step 1: instruction or ingredients are required'

def test_rejected_steps_keep_previous_ones(client: TestClient, recipe_uuid):
    client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': 'Keep me', 'ingredients': []}
    ]})
    client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': [
        {'instruction': 'Fine', 'ingredients': []},
        {'instruction': '', 'ingredients': []}
    ]})

    saved = client.simulate_get(f'/api/recipes/{recipe_uuid}/steps').json['steps']
    assert saved == [{'instruction': 'Keep me', 'ingredients': []}]

def test_steps_of_unknown_recipe(client: TestClient):
    missing = uuid4()

    assert client.simulate_get(f'/api/recipes/{missing}/steps').status_code == 404
    assert client.simulate_put(f'/api/recipes/{missing}/steps', json={'steps': []}).status_code == 404

def test_steps_body_is_validated(client: TestClient, recipe_uuid):
    resp = client.simulate_put(f'/api/recipes/{recipe_uuid}/steps', json={'steps': 'nope'})

    assert resp.status_code == 400
    assert resp.json['error'].startswith('invalid request')
