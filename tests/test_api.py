import importlib

import pytest

from phishshield import api


def test_health(client):
    rv = client.get('/health')
    assert rv.status_code == 200
    assert rv.get_json()['status'] == 'ok'


def test_scan_returns_verdict_and_stats(client):
    rv = client.post('/scan', json={'url': 'https://192.168.1.1/admin/login.php'})
    assert rv.status_code == 200
    d = rv.get_json()
    assert d['url'] == 'https://192.168.1.1/admin/login.php'
    assert d['verdict']['riskScore'] == 70
    assert d['verdict']['tier'] == 'red'
    assert [f['points'] for f in d['verdict']['factors']] == [35, 15, 20]
    assert d['blocked'] is True
    assert d['stats'] == {'checked': 1, 'blocked': 1, 'protection_rate': 100}


@pytest.mark.parametrize("body", [None, {}, {'link': 'https://x.com'}, {'url': 42}, {'url': '   '}])
def test_scan_rejects_bad_input(client, body):
    if body is None:
        rv = client.post('/scan', data='not json', content_type='text/plain')
    else:
        rv = client.post('/scan', json=body)
    assert rv.status_code == 400
    assert 'error' in rv.get_json()


def test_bad_input_does_not_count(client):
    client.post('/scan', json={'url': ''})
    assert client.get('/stats').get_json() == {'checked': 0, 'blocked': 0, 'protection_rate': 0}


def test_stats_track_scans(client):
    client.post('/scan', json={'url': 'https://www.google.com'})
    client.post('/scan', json={'url': 'http://accounts-verification-security-update.com/login'})
    client.post('/scan', json={'url': 'https://192.168.1.1/admin/login.php'})
    rv = client.get('/stats')
    assert rv.status_code == 200
    assert rv.get_json() == {'checked': 3, 'blocked': 1, 'protection_rate': 33}


def test_examples(client):
    rv = client.get('/examples')
    assert rv.status_code == 200
    assert rv.get_json()['examples'][0] == 'https://www.google.com'
    assert len(rv.get_json()['examples']) == 4


def test_storage_failure_is_a_500(client, monkeypatch):
    def broken():
        raise RuntimeError("disk gone")
    monkeypatch.setattr(api.store, 'load', broken)
    rv = client.post('/scan', json={'url': 'https://www.google.com'})
    assert rv.status_code == 500
    assert rv.get_json()['error'] == 'scan_failed'
    assert 'detail' not in rv.get_json()


def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(api, 'API_KEY', 'sekrit')
    assert client.get('/stats').status_code == 401
    assert client.get('/stats', headers={'X-API-Key': 'wrong'}).status_code == 401
    assert client.get('/stats', headers={'X-API-Key': 'sekrit'}).status_code == 200
    assert client.get('/examples?api_key=sekrit').status_code == 200
    # health stays open
    assert client.get('/health').status_code == 200


def test_scan_rate_limit(client, monkeypatch):
    monkeypatch.setattr(api.limiter, "enabled", True)
    api.limiter.reset()
    codes = [client.post('/scan', json={'url': 'https://www.google.com'}).status_code
             for _ in range(31)]
    assert codes[:30] == [200] * 30
    assert codes[-1] == 429


def test_default_rate_limit(client, monkeypatch):
    monkeypatch.setattr(api.limiter, "enabled", True)
    api.limiter.reset()
    codes = [client.get('/stats').status_code for _ in range(61)]
    assert codes[:60] == [200] * 60
    assert codes[-1] == 429
    # health is exempt
    assert client.get('/health').status_code == 200


@pytest.mark.parametrize("redis_url", ["redis://127.0.0.1:1/0", "not-a-redis-url"])
def test_unusable_redis_falls_back_to_memory_limiter(monkeypatch, redis_url):
    monkeypatch.setenv("REDIS_URL", redis_url)
    try:
        module = importlib.reload(api)
        assert module.REDIS_URL == redis_url
        with module.app.test_client() as c:
            assert c.get('/health').status_code == 200
    finally:
        monkeypatch.delenv("REDIS_URL", raising=False)
        importlib.reload(api)
