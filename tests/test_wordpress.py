import base64

import pytest
import requests

from conftest import FakeResponse, FakeSession
from local_pages.repository import RepositoryError
from local_pages.wordpress import WordPressRepository


def _item(page_id, region, city=None, **extra):
    meta = {"_local_page_state": region, "_local_page_city": city or "", "_genesis_title": "SEO title"}
    item = {
        "id": page_id,
        "slug": f"page-{page_id}",
        "parent": extra.pop("parent", 0),
        "title": {"raw": f"Title {page_id}", "rendered": "ignored"},
        "content": {"raw": "<p>Body</p>"},
        "excerpt": {"rendered": "<p>Excerpt</p>"},
        "meta": meta,
    }
    item.update(extra)
    return item


def _repository(responses):
    session = FakeSession(responses)
    return WordPressRepository("https://example.com/", "admin", "app pass", session=session), session


def test_requests_use_basic_auth_and_post_type_endpoint():
    repository, session = _repository([FakeResponse(200, [], headers={"X-WP-TotalPages": "1"})])

    repository.list_all()

    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == "https://example.com/wp-json/wp/v2/local"
    token = base64.b64encode(b"admin:app pass").decode("utf-8")
    assert kwargs["headers"]["Authorization"] == f"Basic {token}"
    assert kwargs["params"]["per_page"] == 100


def test_list_all_paginates_and_maps_records():
    repository, session = _repository(
        [
            FakeResponse(200, [_item(1, "Iowa")], headers={"X-WP-TotalPages": "2"}),
            FakeResponse(200, [_item(2, "Iowa", "Ames", parent=1), {"id": 9, "meta": {}}], headers={"X-WP-TotalPages": "2"}),
        ]
    )

    records = repository.list_all()

    assert [record.id for record in records] == [1, 2]
    region, city = records
    assert region.sub_region is None and region.parent_id is None
    assert region.title == "Title 1"
    assert region.meta == {"seo_title": "SEO title"}
    assert city.sub_region == "Ames" and city.parent_id == 1
    assert city.excerpt == "<p>Excerpt</p>"
    assert [call[2]["params"]["page"] for call in session.calls] == [1, 2]


def test_list_all_stops_on_out_of_range_page():
    repository, _ = _repository(
        [FakeResponse(200, [_item(1, "Iowa")], headers={"X-WP-TotalPages": "5"}), FakeResponse(400, text="rest_post_invalid_page_number")]
    )

    assert [record.id for record in repository.list_all()] == [1]


def test_find_matches_region_and_sub_region():
    pages = [_item(1, "Iowa"), _item(2, "Iowa", "Ames")]
    repository, _ = _repository([FakeResponse(200, pages, headers={"X-WP-TotalPages": "1"})] * 2)

    assert repository.find("Iowa").id == 1
    assert repository.find("Iowa", "Ames").id == 2


def test_create_maps_fields_to_payload():
    repository, session = _repository([FakeResponse(201, {"id": 42})])

    page_id = repository.create(
        {
            "region": "Iowa",
            "sub_region": "Ames",
            "title": "Ames",
            "body": "<p>Body</p>",
            "excerpt": "Short",
            "slug": "ames",
            "parent_id": 7,
            "meta": {"seo_title": "T", "structured_data": "{}"},
        }
    )

    assert page_id == 42
    payload = session.calls[0][2]["json"]
    assert payload["status"] == "publish"
    assert payload["content"] == "<p>Body</p>"
    assert payload["parent"] == 7
    assert payload["meta"] == {
        "_local_page_state": "Iowa",
        "_local_page_city": "Ames",
        "_genesis_title": "T",
        "schema": "{}",
    }


def test_update_failure_raises_repository_error():
    repository, _ = _repository([FakeResponse(403, text="rest_cannot_edit")])

    with pytest.raises(RepositoryError) as excinfo:
        repository.update(5, {"title": "x"})

    assert excinfo.value.status_code == 403


def test_network_error_becomes_repository_error():
    repository, _ = _repository([requests.exceptions.ConnectionError("Connection refused")])

    with pytest.raises(RepositoryError):
        repository.delete(5)


def test_delete_uses_force_and_treats_missing_as_false():
    repository, session = _repository([FakeResponse(200, {"deleted": True}), FakeResponse(404, text="gone")])

    assert repository.delete(5) is True
    assert repository.delete(6) is False
    method, url, kwargs = session.calls[0]
    assert method == "DELETE" and url.endswith("/local/5")
    assert kwargs["params"] == {"force": "true"}
