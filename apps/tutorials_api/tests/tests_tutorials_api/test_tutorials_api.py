import uuid

import pytest

pytestmark = pytest.mark.asyncio

BASE = "/api/tutorials"


class TestCreate:
    async def test_create_assigns_id_and_starts_unpublished(self, client):
        response = await client.post(
            BASE, json={"title": "Learn X", "description": "desc"}
        )

        assert response.status_code == 201
        body = response.json()
        assert uuid.UUID(body["id"])
        assert body["title"] == "Learn X"
        assert body["description"] == "desc"
        assert body["published"] is False
        assert body["created_at"] is not None

    async def test_create_ignores_client_supplied_published(self, client):
        response = await client.post(BASE, json={"title": "Sneaky", "published": True})
        assert response.status_code == 201
        assert response.json()["published"] is False

    async def test_create_description_is_optional(self, client):
        response = await client.post(BASE, json={"title": "No description"})
        assert response.status_code == 201
        assert response.json()["description"] is None

    @pytest.mark.parametrize(
        "payload",
        [{}, {"description": "only"}, {"title": ""}, {"title": "   "}, {"title": None}],
    )
    async def test_create_requires_title(self, client, payload):
        response = await client.post(BASE, json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["message"].startswith("title:")
        assert body["errors"]

    async def test_created_record_can_be_read_back(self, client, make_tutorial):
        created = await make_tutorial("Round trip", "same text")

        response = await client.get(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        fetched = response.json()
        assert fetched["id"] == created["id"]
        assert fetched["title"] == "Round trip"
        assert fetched["description"] == "same text"
        assert fetched["published"] is False


class TestRead:
    async def test_unknown_id_is_not_found(self, client):
        missing = uuid.uuid4()
        response = await client.get(f"{BASE}/{missing}")

        assert response.status_code == 404
        assert response.json() == {
            "message": f"Tutorial with id={missing} was not found"
        }

    async def test_malformed_id_is_not_found(self, client):
        response = await client.get(f"{BASE}/not-an-id")
        assert response.status_code == 404
        assert "not-an-id" in response.json()["message"]


class TestList:
    async def test_empty_collection_lists_nothing(self, client):
        response = await client.get(BASE)
        assert response.status_code == 200
        assert response.json() == []

    async def test_lists_every_record_without_filter(self, client, make_tutorial):
        for title in ("One", "Two", "Three"):
            await make_tutorial(title)

        response = await client.get(BASE)
        assert {t["title"] for t in response.json()} == {"One", "Two", "Three"}

    async def test_title_filter_is_case_insensitive_substring(
        self, client, make_tutorial
    ):
        for title in ("Node Basics", "Advanced node", "Angular", "NODEJS tips"):
            await make_tutorial(title)

        response = await client.get(BASE, params={"title": "node"})

        assert response.status_code == 200
        assert {t["title"] for t in response.json()} == {
            "Node Basics",
            "Advanced node",
            "NODEJS tips",
        }

    async def test_title_filter_folds_accented_case(self, client, make_tutorial):
        for title in ("Émile Durkheim", "ÜBER Python", "Emile Zola"):
            await make_tutorial(title)

        emile = await client.get(BASE, params={"title": "émile"})
        uber = await client.get(BASE, params={"title": "über"})

        assert [t["title"] for t in emile.json()] == ["Émile Durkheim"]
        assert [t["title"] for t in uber.json()] == ["ÜBER Python"]

    async def test_empty_title_filter_lists_everything(self, client, make_tutorial):
        await make_tutorial("A")
        await make_tutorial("B")

        response = await client.get(BASE, params={"title": ""})
        assert len(response.json()) == 2

    async def test_title_and_published_filters_combine(self, client, make_tutorial):
        first = await make_tutorial("Python one")
        await make_tutorial("Python two")
        await make_tutorial("Go one")
        await client.put(f"{BASE}/{first['id']}", json={"published": True})

        published = await client.get(BASE, params={"title": "python", "published": True})
        drafts = await client.get(BASE, params={"title": "python", "published": False})

        assert [t["title"] for t in published.json()] == ["Python one"]
        assert [t["title"] for t in drafts.json()] == ["Python two"]

    async def test_invalid_published_flag_is_rejected(self, client):
        response = await client.get(BASE, params={"published": "maybe"})
        assert response.status_code == 400
        assert response.json()["message"].startswith("query.published:")


class TestUpdate:
    async def test_partial_update_merges_fields(self, client, make_tutorial):
        created = await make_tutorial("Original", "keep me")

        response = await client.put(
            f"{BASE}/{created['id']}", json={"title": "Renamed"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "Renamed"
        assert body["description"] == "keep me"
        assert body["published"] is False
        assert body["updated_at"] is not None

    async def test_id_in_payload_is_ignored(self, client, make_tutorial):
        created = await make_tutorial()
        other = str(uuid.uuid4())

        response = await client.put(
            f"{BASE}/{created['id']}", json={"id": other, "description": "new"}
        )

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert (await client.get(f"{BASE}/{other}")).status_code == 404

    async def test_empty_update_is_rejected(self, client, make_tutorial):
        created = await make_tutorial()

        response = await client.put(f"{BASE}/{created['id']}", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "Data to update can not be empty!"

    async def test_null_title_is_not_an_update(self, client, make_tutorial):
        created = await make_tutorial()
        response = await client.put(f"{BASE}/{created['id']}", json={"title": None})
        assert response.status_code == 400

    async def test_update_unknown_id_is_not_found(self, client):
        response = await client.put(f"{BASE}/{uuid.uuid4()}", json={"title": "x"})
        assert response.status_code == 404

    async def test_publishing_moves_record_into_published_listing(
        self, client, make_tutorial
    ):
        created = await make_tutorial("Learn X", "desc")
        await make_tutorial("Draft")

        before = await client.get(f"{BASE}/published")
        assert before.json() == []

        response = await client.put(f"{BASE}/{created['id']}", json={"published": True})
        assert response.json()["published"] is True

        after = await client.get(f"{BASE}/published")
        assert [t["title"] for t in after.json()] == ["Learn X"]

        await client.put(f"{BASE}/{created['id']}", json={"published": False})
        assert (await client.get(f"{BASE}/published")).json() == []


class TestDelete:
    async def test_delete_then_read_is_not_found(self, client, make_tutorial):
        created = await make_tutorial()

        response = await client.delete(f"{BASE}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Tutorial was deleted successfully!"}
        assert (await client.get(f"{BASE}/{created['id']}")).status_code == 404

    async def test_delete_unknown_id_is_not_found(self, client):
        response = await client.delete(f"{BASE}/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_delete_all_clears_collection(self, client, make_tutorial):
        for title in ("a", "b", "c"):
            await make_tutorial(title)

        response = await client.delete(BASE)

        assert response.status_code == 200
        assert response.json() == {
            "message": "3 Tutorials were deleted successfully!",
            "deleted_count": 3,
        }
        assert (await client.get(BASE)).json() == []

    async def test_delete_all_on_empty_collection(self, client):
        response = await client.delete(BASE)
        assert response.json()["deleted_count"] == 0
