"""Integration tests for the movie endpoints using FastAPI TestClient.

MongoDB is replaced by mongomock, so tests run without a database server.
"""

import math
from unittest.mock import MagicMock, PropertyMock, patch

from bson import ObjectId
from pymongo.errors import PyMongoError

from conftest import USER_CREDENTIALS, make_movie
from moviecatalog.main import app
from moviecatalog.services.database import DatabaseService


class TestHealth:
    def test_health_returns_200(self, client):
        with patch.object(app.state.db, "health_check", return_value=True):
            resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "healthy", "database": True}

    def test_health_degraded(self, client):
        with patch.object(app.state.db, "health_check", return_value=False):
            resp = client.get("/health")
        assert resp.json()["status"] == "degraded"


class TestCreateMovie:
    def test_create_dune(self, admin_client):
        resp = admin_client.post(
            "/movies", json={"title": "Dune", "year": 2021, "genres": ["Sci-Fi", "Adventure"]}
        )
        assert resp.status_code == 201
        body = resp.json()
        assert ObjectId.is_valid(body["id"])
        assert body["genre"] == "Sci-Fi"
        assert body["genres"] == ["Sci-Fi", "Adventure"]
        assert body["rating"] is None
        assert body["director"] is None
        assert body["poster"] is None
        assert body["posterUrl"] is None
        assert body["createdAt"]
        assert "updatedAt" not in body

    def test_create_stores_canonical_fields_only(self, admin_client, db):
        body = make_movie(admin_client, posterUrl="http://img/dune.jpg")
        stored = db.movies.find_one({"_id": ObjectId(body["id"])})
        assert stored["poster"] == "http://img/dune.jpg"
        assert "posterUrl" not in stored
        assert "genre" not in stored
        assert body["posterUrl"] == "http://img/dune.jpg"

    def test_validation_errors_aggregated(self, admin_client, db):
        resp = admin_client.post("/movies", json={"title": "", "year": 1500, "rating": 42})
        assert resp.status_code == 400
        body = resp.json()
        assert body["detail"] == "Validation error"
        assert len(body["errors"]) == 4
        assert db.movies.count_documents({}) == 0

    def test_requires_session(self, client):
        resp = client.post("/movies", json={"title": "Dune", "year": 2021, "genres": ["Sci-Fi"]})
        assert resp.status_code == 401

    def test_non_object_body_is_bad_request(self, admin_client, db):
        resp = admin_client.post("/movies", json=[{"title": "Dune"}])
        assert resp.status_code == 400
        body = resp.json()
        assert body["detail"] == "Validation error"
        assert body["errors"]
        assert db.movies.count_documents({}) == 0

    def test_requires_admin(self, user_client, db):
        resp = user_client.post("/movies", json={"title": "Dune", "year": 2021, "genres": ["Sci-Fi"]})
        assert resp.status_code == 403
        assert db.movies.count_documents({}) == 0


class TestGetMovie:
    def test_get_by_id(self, admin_client):
        created = make_movie(admin_client)
        resp = admin_client.get(f"/movies/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["title"] == "Dune"

    def test_invalid_id(self, client):
        resp = client.get("/movies/not-an-id")
        assert resp.status_code == 400
        assert resp.json() == {"detail": "Invalid id"}

    def test_not_found(self, client):
        resp = client.get(f"/movies/{ObjectId()}")
        assert resp.status_code == 404

    def test_legacy_document_presented_with_compat_fields(self, client, db):
        oid = db.movies.insert_one(
            {"title": "Old", "year": 1990, "genre": "Drama", "posterUrl": "p.jpg"}
        ).inserted_id
        body = client.get(f"/movies/{oid}").json()
        assert body["genre"] == "Drama"
        assert body["poster"] == "p.jpg"
        assert body["posterUrl"] == "p.jpg"


class TestListMovies:
    def _seed(self, client):
        make_movie(client, title="Alien", year=1979, genres=["Horror", "Sci-Fi"], rating=8.5)
        make_movie(client, title="Aliens", year=1986, genres=["Action"], rating=8.4)
        make_movie(client, title="Heat", year=1995, genres=["Crime"], rating=8.3)

    def test_envelope_and_default_sort(self, admin_client):
        self._seed(admin_client)
        body = admin_client.get("/movies").json()
        assert body["page"] == 1
        assert body["limit"] == 12
        assert body["total"] == 3
        assert body["totalPages"] == 1
        assert [m["year"] for m in body["items"]] == [1979, 1986, 1995]

    def test_empty_catalog(self, client):
        body = client.get("/movies").json()
        assert body == {"items": [], "page": 1, "limit": 12, "total": 0, "totalPages": 0}

    def test_title_substring_case_insensitive(self, admin_client):
        self._seed(admin_client)
        body = admin_client.get("/movies?title=ALIEN").json()
        assert sorted(m["title"] for m in body["items"]) == ["Alien", "Aliens"]

    def test_genre_matches_list_and_legacy(self, admin_client, db):
        self._seed(admin_client)
        db.movies.insert_one({"title": "Legacy", "year": 1980, "genre": "Sci-Fi"})
        body = admin_client.get("/movies?genre=Sci-Fi").json()
        assert sorted(m["title"] for m in body["items"]) == ["Alien", "Legacy"]

    def test_year_filter(self, admin_client):
        self._seed(admin_client)
        body = admin_client.get("/movies?year=1995").json()
        assert [m["title"] for m in body["items"]] == ["Heat"]

    def test_year_below_bound_rejected(self, client):
        resp = client.get("/movies?year=1700")
        assert resp.status_code == 400

    def test_year_not_integer_rejected(self, client):
        resp = client.get("/movies?year=nineteen")
        assert resp.status_code == 400
        assert resp.json()["errors"] == ["Year must be an integer"]

    def test_sort_desc(self, admin_client):
        self._seed(admin_client)
        body = admin_client.get("/movies?sort=rating:desc").json()
        assert [m["title"] for m in body["items"]] == ["Alien", "Aliens", "Heat"]

    def test_projection_keeps_identity(self, admin_client):
        self._seed(admin_client)
        items = admin_client.get("/movies?fields=title").json()["items"]
        assert all(set(m) == {"id", "title"} for m in items)

    def test_projection_genre_alias(self, admin_client):
        self._seed(admin_client)
        items = admin_client.get("/movies?fields=genre&sort=year").json()["items"]
        assert items[0]["genre"] == "Horror"
        assert "title" not in items[0]

    def test_pagination_clamps_and_counts(self, admin_client):
        for i in range(5):
            make_movie(admin_client, title=f"Film {i}", year=2000 + i)
        body = admin_client.get("/movies?page=0&limit=100").json()
        assert (body["page"], body["limit"], body["total"]) == (1, 50, 5)

        body = admin_client.get("/movies?page=2&limit=2").json()
        assert [m["year"] for m in body["items"]] == [2002, 2003]
        assert body["totalPages"] == math.ceil(5 / 2)

    def test_ids_lookup(self, admin_client):
        first = make_movie(admin_client, title="One")
        make_movie(admin_client, title="Two")
        body = admin_client.get(f"/movies?ids={first['id']}&title=Two").json()
        assert [m["title"] for m in body["items"]] == ["One"]

    def test_blank_ids_lists_normally(self, admin_client):
        make_movie(admin_client)
        body = admin_client.get("/movies?ids=").json()
        assert body["total"] == 1

    def test_ids_bad_and_missing_give_empty_200(self, admin_client):
        make_movie(admin_client)
        resp = admin_client.get(f"/movies?ids=bad,{ObjectId()}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["items"] == []
        assert body["total"] == 0

    def test_store_failure_is_generic_500(self, client):
        broken = MagicMock()
        broken.find.side_effect = PyMongoError("boom")
        with patch.object(DatabaseService, "movies", new_callable=PropertyMock, return_value=broken):
            resp = client.get("/movies")
        assert resp.status_code == 500
        assert "boom" not in resp.text


class TestUpdateMovie:
    def test_partial_update(self, admin_client):
        created = make_movie(admin_client, rating=7)
        resp = admin_client.put(f"/movies/{created['id']}", json={"rating": 8.1})
        assert resp.status_code == 200
        body = resp.json()
        assert body["rating"] == 8.1
        assert body["title"] == "Dune"
        assert body["updatedAt"]
        assert body["createdAt"]

    def test_genres_change_rederives_genre(self, admin_client):
        created = make_movie(admin_client)
        body = admin_client.put(f"/movies/{created['id']}", json={"genres": ["Drama"]}).json()
        assert body["genre"] == "Drama"

    def test_genres_update_drops_legacy_field(self, admin_client, db):
        oid = db.movies.insert_one({"title": "Old", "year": 1990, "genre": "Drama"}).inserted_id
        admin_client.put(f"/movies/{oid}", json={"genres": ["Comedy"]})
        stored = db.movies.find_one({"_id": oid})
        assert "genre" not in stored
        body = admin_client.get("/movies?genre=Drama").json()
        assert body["total"] == 0

    def test_empty_body_is_bad_request(self, admin_client, db):
        created = make_movie(admin_client)
        resp = admin_client.put(f"/movies/{created['id']}", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No fields to update"
        stored = db.movies.find_one({"_id": ObjectId(created["id"])})
        assert "updatedAt" not in stored

    def test_unchanged_values_still_update(self, admin_client):
        created = make_movie(admin_client)
        resp = admin_client.put(f"/movies/{created['id']}", json={"title": "Dune"})
        assert resp.status_code == 200
        assert resp.json()["updatedAt"]

    def test_invalid_field(self, admin_client):
        created = make_movie(admin_client)
        resp = admin_client.put(f"/movies/{created['id']}", json={"year": "soon"})
        assert resp.status_code == 400
        assert resp.json()["errors"]

    def test_not_found(self, admin_client):
        resp = admin_client.put(f"/movies/{ObjectId()}", json={"title": "X"})
        assert resp.status_code == 404

    def test_invalid_id(self, admin_client):
        resp = admin_client.put("/movies/123", json={"title": "X"})
        assert resp.status_code == 400


class TestDeleteMovie:
    def test_delete(self, admin_client):
        created = make_movie(admin_client)
        resp = admin_client.delete(f"/movies/{created['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Movie deleted successfully", "id": created["id"]}
        assert admin_client.get(f"/movies/{created['id']}").status_code == 404

    def test_delete_missing(self, admin_client):
        assert admin_client.delete(f"/movies/{ObjectId()}").status_code == 404

    def test_delete_invalid_id(self, admin_client):
        assert admin_client.delete("/movies/nope").status_code == 400

    def test_non_admin_forbidden(self, admin_client):
        created = make_movie(admin_client)
        admin_client.post("/auth/logout")
        admin_client.post("/auth/register", json=USER_CREDENTIALS)

        resp = admin_client.delete(f"/movies/{created['id']}")
        assert resp.status_code == 403
        assert admin_client.get(f"/movies/{created['id']}").status_code == 200

    def test_anonymous_unauthenticated(self, client):
        assert client.delete(f"/movies/{ObjectId()}").status_code == 401
