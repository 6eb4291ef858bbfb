"""Tests for the RAWG proxy routes."""

GAMES = {'count': 1, 'results': [{'id': 3328, 'slug': 'the-witcher-3-wild-hunt'}]}


def test_search_defaults_page_size(client, upstream, cache):
    upstream.reply(GAMES)

    resp = client.get('/api/rawg/search?query=witcher')
    assert resp.status_code == 200
    assert resp.get_json() == GAMES
    assert upstream.last['url'] == 'https://api.rawg.io/api/games'
    assert upstream.last['params'] == {'key': 'rawg-test-key', 'search': 'witcher', 'page_size': 10}
    assert 'rawg:search:witcher:10' in cache


def test_search_clamps_page_size(client, upstream, cache):
    client.get('/api/rawg/search?query=zelda&page_size=500')
    assert upstream.last['params']['page_size'] == 40
    client.get('/api/rawg/search?query=zelda&page_size=-3')
    assert upstream.last['params']['page_size'] == 1
    assert 'rawg:search:zelda:40' in cache
    assert 'rawg:search:zelda:1' in cache


def test_search_reads_leading_digits_of_page_size(client, upstream):
    client.get('/api/rawg/search?query=doom&page_size=20abc')
    assert upstream.last['params']['page_size'] == 20


def test_page_size_is_part_of_the_key(client, upstream):
    client.get('/api/rawg/search?query=zelda&page_size=5')
    client.get('/api/rawg/search?query=zelda&page_size=6')
    client.get('/api/rawg/search?query=zelda&page_size=5')
    assert len(upstream.calls) == 2


def test_search_requires_query(client, upstream):
    resp = client.get('/api/rawg/search')
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Query required'}
    assert upstream.calls == []


def test_details_by_slug(client, upstream, cache):
    client.get('/api/rawg/details/the-witcher-3-wild-hunt')
    assert upstream.last['url'] == 'https://api.rawg.io/api/games/the-witcher-3-wild-hunt'
    assert upstream.last['params'] == {'key': 'rawg-test-key'}
    assert 'rawg:details:the-witcher-3-wild-hunt' in cache


def test_details_rejects_bad_id(client, upstream):
    resp = client.get('/api/rawg/details/bad.id')
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Invalid ID'}
    assert upstream.calls == []


def test_upstream_failure(client, upstream, cache):
    upstream.reply({'detail': 'Not found.'}, status_code=404)
    resp = client.get('/api/rawg/details/3328')
    assert resp.status_code == 500
    assert resp.get_json() == {'error': 'Failed to fetch details from RAWG'}
    assert len(cache) == 0


def test_action_dispatch(client, upstream):
    resp = client.post('/api/rawg', json={'action': 'rawg_search', 'query': 'hades', 'page_size': '20'})
    assert resp.status_code == 200
    assert upstream.last['params']['page_size'] == 20

    client.post('/api/rawg?action=rawg_details', json={'id': 3328})
    assert upstream.last['url'] == 'https://api.rawg.io/api/games/3328'

    resp = client.post('/api/rawg', json={})
    assert resp.status_code == 400
