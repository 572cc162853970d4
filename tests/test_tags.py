from falcon.testing import TestClient
from sqlalchemy import text

from hungr.database.database import new_engine

def test_tags_start_empty(client: TestClient):
    resp = client.simulate_get('/api/tags')

    assert resp.status_code == 200
    assert resp.json == {'tags': []}

def test_tags_are_listed_once_by_name(client: TestClient, login, create_recipe):
    login('alice@example.com')
    create_recipe('alice@example.com', 'Pancakes', 'quick, breakfast')
    create_recipe('alice@example.com', 'Curry', 'dinner, quick')

    tags = client.simulate_get('/api/tags').json['tags']

    assert [tag['name'] for tag in tags] == ['breakfast', 'dinner', 'quick']

def test_storage_failure(client: TestClient, db_url: str):
    engine = new_engine(db_url)
    with engine.begin() as conn:
        conn.execute(text('DROP TABLE recipe_tags'))
        conn.execute(text('DROP TABLE tags'))
    engine.dispose()

    resp = client.simulate_get('/api/tags')

    assert resp.status_code == 500
    assert resp.json == {'error': 'storage failure: no such table: tags'}
