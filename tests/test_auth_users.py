import falcon
import pytest
from falcon.testing import TestClient
from pydantic import ValidationError

from uuid import uuid4

from hungr.util import handle_validation_error
from hungr.validation import LoginRequest

def test_login_creates_user(client: TestClient):
    resp = client.simulate_post('/api/auth/login', json={'email': '  Alice@Example.com '})

    assert resp.status_code == 200
    assert resp.json['success'] is True
    assert resp.json['user']['email'] == 'alice@example.com'
    assert resp.json['user']['name'] == 'alice@example.com'
    assert resp.headers['X-Request-ID']

def test_login_is_an_upsert(client: TestClient, login):
    first = login('alice@example.com')
    second = login('ALICE@example.com')

    assert first['uuid'] == second['uuid']
    assert first['last_seen'] is not None
    assert second['last_seen'] is not None

def test_login_rejects_invalid_email(client: TestClient):
    resp = client.simulate_post('/api/auth/login', json={'email': 'not-an-email'})

    assert resp.status_code == 400
    assert 'invalid email' in resp.json['error']

def test_login_requires_email(client: TestClient):
    resp = client.simulate_post('/api/auth/login', json={})

    assert resp.status_code == 400
    assert resp.json['error'].startswith('invalid request')

def test_login_rejects_malformed_json(client: TestClient):
    resp = client.simulate_post('/api/auth/login', body='{not json', content_type=falcon.MEDIA_JSON)

    assert resp.status_code == 400
    assert 'JSON' in resp.json['error']

def test_validation_hook_takes_model_adapter():
    with pytest.raises(ValidationError) as excinfo:
        LoginRequest.model_validate({})

    resp = falcon.Response()
    handle_validation_error(None, resp, excinfo.value, None, object())

    assert resp.status == falcon.HTTP_400
    assert resp.media == {'error': 'invalid request: email: Field required'}

def test_get_user_by_email_and_uuid(client: TestClient, login):
    user = login('bob@example.com')

    by_email = client.simulate_get('/api/users', params={'email': 'Bob@Example.com'})
    assert by_email.status_code == 200
    assert by_email.json['user']['uuid'] == user['uuid']

    by_uuid = client.simulate_get('/api/users', params={'uuid': user['uuid']})
    assert by_uuid.status_code == 200
    assert by_uuid.json['user']['email'] == 'bob@example.com'

def test_get_unknown_user(client: TestClient):
    resp = client.simulate_get('/api/users', params={'email': 'ghost@example.com'})

    assert resp.status_code == 404
    assert resp.json['error'] == 'user not found'

def test_get_user_requires_a_key(client: TestClient):
    resp = client.simulate_get('/api/users')

    assert resp.status_code == 400
    assert resp.json['error'] == 'uuid or email is required'

def test_create_user(client: TestClient):
    resp = client.simulate_post('/api/users', json={'email': 'carol@example.com', 'name': 'Carol'})

    assert resp.status_code == 201
    assert resp.json['user']['name'] == 'Carol'
    assert resp.json['user']['last_seen'] is None

    duplicate = client.simulate_post('/api/users', json={'email': 'Carol@example.com', 'name': 'Other'})
    assert duplicate.status_code == 409
    assert duplicate.json['error'] == 'user already exists'

def test_rename_user(client: TestClient, login):
    user = login('dave@example.com')

    resp = client.simulate_put('/api/users', params={'uuid': user['uuid']}, json={'name': 'Dave'})
    assert resp.status_code == 200
    assert resp.json['user']['name'] == 'Dave'

    missing = client.simulate_put('/api/users', params={'uuid': str(uuid4())}, json={'name': 'Nobody'})
    assert missing.status_code == 404

def test_delete_user_removes_recipes_and_connections(client: TestClient, login, create_recipe):
    erin = login('erin@example.com')
    frank = login('frank@example.com')

    client.simulate_post('/api/connections', params={'email': 'frank@example.com'},
                         json={'target_user_uuid': erin['uuid']})
    recipe = create_recipe('erin@example.com', 'Soup')['recipe']

    resp = client.simulate_delete('/api/users', params={'uuid': erin['uuid']})
    assert resp.status_code == 200
    assert resp.json == {'success': True}

    assert client.simulate_get('/api/users', params={'uuid': erin['uuid']}).status_code == 404
    assert client.simulate_get(f'/api/recipes/{recipe["uuid"]}/steps').status_code == 404

    outgoing = client.simulate_get('/api/connections', params={'user_uuid': frank['uuid']})
    assert outgoing.json['connections'] == []

def test_health(client: TestClient):
    resp = client.simulate_get('/health')

    assert resp.status_code == 200
    assert resp.text == 'OK'
