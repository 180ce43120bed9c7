"""Search Routes — verifies paging across books, members and librarians, and suggestions."""

import pytest


@pytest.fixture
async def ada_everywhere(make_book, member, make_librarian):
    """One match per source for the term "ada"."""
    book = await make_book("9780000000001", "Ada Programming", "John Barnes")
    librarian = await make_librarian("ADA-01")
    return book, member, librarian


async def _search(client, **params):
    return await client.get("/api/v1/search/global", params=params)


async def test_global_search_spans_every_source(client, ada_everywhere):
    book, member, librarian = ada_everywhere

    res = await _search(client, query="ada")
    assert res.status_code == 200
    body = res.json()
    assert body["query"] == "ada"
    assert body["totalCount"] == 3
    assert [(hit["type"], hit["id"]) for hit in body["items"]] == [
        ("Book", book.id), ("Member", member.id), ("Librarian", librarian.id),
    ]
    first = body["items"][0]
    assert first["title"] == "Ada Programming"
    assert first["description"] == "by John Barnes"
    assert first["metadata"]["isbn"] == "9780000000001"
    assert body["items"][1]["title"] == "Ada Lovelace"
    assert body["items"][2]["metadata"]["employeeNumber"] == "ADA-01"


async def test_global_search_pages_across_sources(client, ada_everywhere):
    second = (await _search(client, query="ADA", page=2, pageSize=2)).json()
    assert second["totalCount"] == 3
    assert (second["page"], second["pageSize"]) == (2, 2)
    assert [hit["type"] for hit in second["items"]] == ["Librarian"]

    middle = (await _search(client, query="ada", page=2, pageSize=1)).json()
    assert [hit["type"] for hit in middle["items"]] == ["Member"]

    past_end = (await _search(client, query="ada", page=5, pageSize=2)).json()
    assert past_end["items"] == []
    assert past_end["totalCount"] == 3


async def test_global_search_filtered_to_one_source(client, ada_everywhere):
    body = (await _search(client, query="ada", type="Members")).json()
    assert body["totalCount"] == 1
    assert [hit["type"] for hit in body["items"]] == ["Member"]


async def test_global_search_rules(client):
    blank = await _search(client, query="   ")
    assert blank.status_code == 400
    assert blank.json()["errors"]["Query"] == ["'Query' is required."]

    missing = await client.get("/api/v1/search/global")
    assert missing.status_code == 400
    assert "Query" in missing.json()["errors"]

    unknown = await _search(client, query="ada", type="authors")
    assert unknown.status_code == 400
    assert "Type" in unknown.json()["errors"]


async def test_suggestions_rank_titles_over_categories(client, make_category, make_book):
    saga = await make_category("Dune Universe")
    await make_book("9780000000001", "Dune", "Frank Herbert", category=saga)
    await make_book("9780000000002", "Dune Messiah", "Frank Herbert", category=saga)

    res = await client.get("/api/v1/search/suggestions", params={"query": "dune"})
    assert res.status_code == 200
    assert res.json() == [
        {"text": "Dune", "type": "Title", "relevance": 100},
        {"text": "Dune Messiah", "type": "Title", "relevance": 100},
        {"text": "Dune Universe", "type": "Category", "relevance": 80},
    ]

    authors = (
        await client.get("/api/v1/search/suggestions", params={"query": "frank"})
    ).json()
    assert authors == [{"text": "Frank Herbert", "type": "Author", "relevance": 90}]


async def test_suggestions_rules(client):
    res = await client.get(
        "/api/v1/search/suggestions", params={"query": "", "maxResults": 0},
    )
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"Query", "MaxResults"}
