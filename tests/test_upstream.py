from unittest.mock import Mock

import pytest
import requests

from services.errors import MalformedUpstreamPayload, UpstreamUnavailable
from services.upstream import UpstreamClient


def _response(status_code=200, payload=None, json_error=False):
    r = Mock()
    r.status_code = status_code
    if json_error:
        r.json.side_effect = ValueError('not json')
    else:
        r.json.return_value = payload
    return r


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session):
    return UpstreamClient(base_url='https://pokeapi.test/api/v2/', timeout=3, session=session)


def test_fetch_json_success(client, session):
    session.get.return_value = _response(payload={'id': 25})
    assert client.fetch_json('https://pokeapi.test/api/v2/pokemon/25') == {'id': 25}
    session.get.assert_called_once_with('https://pokeapi.test/api/v2/pokemon/25', params=None, timeout=3)


def test_non_2xx_raises_upstream_unavailable(client, session):
    session.get.return_value = _response(status_code=404)
    with pytest.raises(UpstreamUnavailable) as exc:
        client.get_pokemon(99999)
    assert exc.value.status_code == 404
    assert session.get.call_count == 1  # no retry


def test_transport_error_raises_upstream_unavailable(client, session):
    session.get.side_effect = requests.ConnectionError('boom')
    with pytest.raises(UpstreamUnavailable):
        client.get_species(1)
    assert session.get.call_count == 1


def test_invalid_json_is_malformed(client, session):
    session.get.return_value = _response(json_error=True)
    with pytest.raises(MalformedUpstreamPayload):
        client.get_type('fire')


def test_non_object_json_is_malformed(client, session):
    session.get.return_value = _response(payload=[1, 2, 3])
    with pytest.raises(MalformedUpstreamPayload):
        client.get_type('fire')


def test_list_entities_parses_window(client, session):
    session.get.return_value = _response(payload={
        'count': 1302,
        'results': [
            {'name': 'bulbasaur', 'url': 'https://pokeapi.test/api/v2/pokemon/1/'},
            {'name': 'ivysaur', 'url': 'https://pokeapi.test/api/v2/pokemon/2/'},
        ],
    })
    count, items = client.list_entities(offset=0, limit=2)
    assert count == 1302
    assert [(i.display_key, i.entity_id) for i in items] == [('bulbasaur', '1'), ('ivysaur', '2')]
    session.get.assert_called_once_with(
        'https://pokeapi.test/api/v2/pokemon', params={'offset': 0, 'limit': 2}, timeout=3)


def test_list_entities_without_count_is_malformed(client, session):
    session.get.return_value = _response(payload={'results': []})
    with pytest.raises(MalformedUpstreamPayload):
        client.list_entities()


def test_get_species_accepts_full_url(client, session):
    session.get.return_value = _response(payload={'names': []})
    client.get_species('https://pokeapi.test/api/v2/pokemon-species/25/')
    client.get_species(25)
    urls = [c.args[0] for c in session.get.call_args_list]
    assert urls == [
        'https://pokeapi.test/api/v2/pokemon-species/25/',
        'https://pokeapi.test/api/v2/pokemon-species/25',
    ]
