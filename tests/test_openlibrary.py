"""Tests for the OpenLibrary passthrough."""

BOOKS = {'numFound': 1, 'docs': [{'title': 'Dune'}]}


def test_passthrough_forwards_path_and_query(client, upstream, cache):
    upstream.reply(BOOKS)

    resp = client.get('/api/openlibrary/search.json?q=dune&limit=5')
    assert resp.status_code == 200
    assert resp.get_json() == BOOKS
    assert upstream.last['url'] == 'https://openlibrary.org/search.json?q=dune&limit=5'
    assert 'ol:search.json:q=dune&limit=5' in cache


def test_passthrough_without_query(client, upstream, cache):
    client.get('/api/openlibrary/works/OL45804W.json')
    assert upstream.last['url'] == 'https://openlibrary.org/works/OL45804W.json'
    assert 'ol:works/OL45804W.json:' in cache


def test_query_order_changes_the_key(client, upstream):
    client.get('/api/openlibrary/search.json?q=dune&limit=5')
    client.get('/api/openlibrary/search.json?limit=5&q=dune')
    client.get('/api/openlibrary/search.json?q=dune&limit=5')
    assert len(upstream.calls) == 2


def test_rejects_unsafe_paths(client, upstream):
    resp = client.get('/api/openlibrary/works/%2E%2E/admin')
    assert resp.status_code in (400, 404)
    resp = client.post('/api/openlibrary', json={'action': 'openlibrary_proxy', 'path': 'works/../admin'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Invalid path'}
    resp = client.post('/api/openlibrary', json={'action': 'openlibrary_proxy', 'path': 'a b'})
    assert resp.status_code == 400
    assert upstream.calls == []


def test_upstream_failure(client, upstream, cache):
    upstream.reply_malformed()
    resp = client.get('/api/openlibrary/search.json?q=dune')
    assert resp.status_code == 500
    assert resp.get_json() == {'error': 'Failed to fetch from OpenLibrary'}
    assert len(cache) == 0


def test_action_dispatch(client, upstream, cache):
    upstream.reply(BOOKS)
    resp = client.post('/api/openlibrary', json={
        'action': 'openlibrary_proxy', 'path': 'search.json', 'query': 'title=dune',
    })
    assert resp.get_json() == BOOKS
    assert upstream.last['url'] == 'https://openlibrary.org/search.json?title=dune'
    assert 'ol:search.json:title=dune' in cache


def test_unknown_action(client):
    resp = client.post('/api/openlibrary', json={'action': 'tmdb_search'})
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Unknown action'}
