"""
Tests for authors, posts, comments and the post listings.
"""
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from storefront.services.blog import build_posts_pipeline
from tests.conftest import make_cursor


@pytest.fixture
def author_doc(now):
    return {
        "_id": ObjectId(),
        "name": "Ada",
        "email": "ada@example.com",
        "bio": "Writes about engines",
        "avatar": None,
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def post_doc(now, author_doc):
    return {
        "_id": ObjectId(),
        "title": "Hello World",
        "slug": "hello-world",
        "content": "First post",
        "author_id": str(author_doc["_id"]),
        "tags": ["intro"],
        "published": True,
        "views": 0,
        "comments": [],
        "created_at": now,
        "updated_at": now,
    }


def test_posts_pipeline_orders_pages_and_joins_author():
    pipeline = build_posts_pipeline({"published": True}, {"created_at": -1}, 20, 10)

    assert pipeline[:4] == [
        {"$match": {"published": True}},
        {"$sort": {"created_at": -1}},
        {"$skip": 20},
        {"$limit": 10},
    ]
    lookup = pipeline[4]["$lookup"]
    assert lookup["from"] == "authors"
    assert lookup["as"] == "author"
    assert lookup["let"]["ref_id"]["$convert"]["input"] == "$author_id"
    assert pipeline[5]["$unwind"]["preserveNullAndEmptyArrays"] is True


class TestAuthors:
    def test_create_author(self, client, mock_db, author_doc):
        mock_db.authors.find_one.side_effect = [None, author_doc]
        mock_db.authors.insert_one.return_value = MagicMock(inserted_id=author_doc["_id"])

        response = client.post("/authors", json={"name": "Ada", "email": "ADA@example.com"})

        assert response.status_code == 201
        assert mock_db.authors.insert_one.call_args.args[0]["email"] == "ada@example.com"

    def test_malformed_author_email(self, client, mock_db):
        response = client.post("/authors", json={"name": "Ada", "email": "ada@exa..mple.com"})
        assert response.status_code == 422
        mock_db.authors.insert_one.assert_not_called()

    def test_duplicate_author_email(self, client, mock_db, author_doc):
        mock_db.authors.find_one.return_value = author_doc
        response = client.post("/authors", json={"name": "Ada", "email": "ada@example.com"})
        assert response.status_code == 409


class TestPosts:
    def test_create_post_generates_slug(self, client, mock_db, author_doc, post_doc):
        mock_db.authors.find_one.side_effect = [{"_id": author_doc["_id"]}, author_doc]
        mock_db.posts.find_one.side_effect = [None, dict(post_doc, published=False)]
        mock_db.posts.insert_one.return_value = MagicMock(inserted_id=post_doc["_id"])

        response = client.post("/posts", json={
            "title": "Hello   World",
            "content": "First post",
            "author_id": str(author_doc["_id"]),
        })

        assert response.status_code == 201
        inserted = mock_db.posts.insert_one.call_args.args[0]
        assert inserted["slug"] == "hello-world"
        assert inserted["published"] is False
        assert inserted["views"] == 0
        assert inserted["comments"] == []
        assert response.json()["author"]["name"] == "Ada"

    def test_create_post_unknown_author(self, client, mock_db):
        mock_db.authors.find_one.return_value = None

        response = client.post("/posts", json={"title": "Hi", "author_id": str(ObjectId())})

        assert response.status_code == 404
        mock_db.posts.insert_one.assert_not_called()

    def test_slug_clash_is_409(self, client, mock_db, author_doc, post_doc):
        mock_db.authors.find_one.return_value = {"_id": author_doc["_id"]}
        mock_db.posts.find_one.return_value = {"_id": post_doc["_id"]}

        response = client.post("/posts", json={"title": "Hello World", "author_id": str(author_doc["_id"])})

        assert response.status_code == 409

    @pytest.mark.parametrize("title", ["   ", "\t\n"])
    def test_blank_title_rejected(self, client, mock_db, title):
        response = client.post("/posts", json={"title": title, "author_id": str(ObjectId())})

        assert response.status_code == 422
        mock_db.posts.insert_one.assert_not_called()

    def test_blank_retitle_rejected(self, client, post_doc):
        response = client.patch(f"/posts/{post_doc['_id']}", json={"title": "  "})
        assert response.status_code == 422

    @pytest.mark.parametrize("title", ["Search", "  popular "])
    def test_route_slugs_are_reserved(self, client, mock_db, author_doc, title):
        mock_db.authors.find_one.return_value = {"_id": author_doc["_id"]}
        mock_db.posts.find_one.return_value = None

        response = client.post("/posts", json={"title": title, "author_id": str(author_doc["_id"])})

        assert response.status_code == 409
        assert "reserved" in response.json()["detail"]
        mock_db.posts.insert_one.assert_not_called()

    def test_retitle_regenerates_slug(self, client, mock_db, author_doc, post_doc):
        mock_db.posts.find_one.return_value = None
        mock_db.posts.find_one_and_update.return_value = dict(post_doc, title="New Title", slug="new-title")
        mock_db.authors.find_one.return_value = author_doc

        response = client.patch(f"/posts/{post_doc['_id']}", json={"title": "New Title"})

        assert response.status_code == 200
        update = mock_db.posts.find_one_and_update.call_args.args[1]["$set"]
        assert update["slug"] == "new-title"

    def test_publish(self, client, mock_db, author_doc, post_doc):
        mock_db.posts.find_one_and_update.return_value = post_doc
        mock_db.authors.find_one.return_value = author_doc

        response = client.post(f"/posts/{post_doc['_id']}/publish")

        assert response.status_code == 200
        assert mock_db.posts.find_one_and_update.call_args.args[1]["$set"]["published"] is True

    def test_read_post_counts_view(self, client, mock_db, author_doc, post_doc):
        mock_db.posts.find_one_and_update.return_value = dict(post_doc, views=1)
        mock_db.authors.find_one.return_value = author_doc

        response = client.get("/posts/hello-world")

        assert response.status_code == 200
        assert response.json()["views"] == 1
        query, update = mock_db.posts.find_one_and_update.call_args.args
        assert query == {"slug": "hello-world"}
        assert update == {"$inc": {"views": 1}}

    def test_read_missing_post(self, client, mock_db):
        mock_db.posts.find_one_and_update.return_value = None
        response = client.get("/posts/nope")
        assert response.status_code == 404

    def test_add_comment(self, client, mock_db, author_doc, post_doc, now):
        commented = dict(post_doc, comments=[{"user": "bo", "text": "Nice!", "created_at": now}])
        mock_db.posts.find_one_and_update.return_value = commented
        mock_db.authors.find_one.return_value = author_doc

        response = client.post(f"/posts/{post_doc['_id']}/comments", json={"user": "bo", "text": "Nice!"})

        assert response.status_code == 201
        assert response.json()["comments"][0]["text"] == "Nice!"
        pushed = mock_db.posts.find_one_and_update.call_args.args[1]["$push"]["comments"]
        assert pushed["user"] == "bo"
        assert "created_at" in pushed


class TestListings:
    def test_published_posts_paging(self, client, mock_db, author_doc, post_doc):
        mock_db.posts.count_documents.return_value = 21
        joined = dict(post_doc, author={"_id": author_doc["_id"], "name": "Ada", "avatar": None})
        mock_db.posts.aggregate.return_value = make_cursor([joined])

        response = client.get("/posts", params={"page": 3, "limit": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["total_pages"] == 3
        assert data["posts"][0]["author"]["_id"] == str(author_doc["_id"])
        pipeline = mock_db.posts.aggregate.call_args.args[0]
        assert {"$skip": 20} in pipeline

    def test_popular_posts_sorted_by_views(self, client, mock_db):
        response = client.get("/posts/popular")

        assert response.status_code == 200
        pipeline = mock_db.posts.aggregate.call_args.args[0]
        assert {"$sort": {"views": -1}} in pipeline
        assert {"$limit": 5} in pipeline

    def test_search_only_published(self, client, mock_db, post_doc):
        hit = {k: post_doc[k] for k in ("_id", "title", "slug", "created_at")}
        mock_db.posts.find.return_value = make_cursor([hit])

        response = client.get("/posts/search", params={"q": "hello"})

        assert response.status_code == 200
        assert response.json()[0]["slug"] == "hello-world"
        query = mock_db.posts.find.call_args.args[0]
        assert query == {"$text": {"$search": "hello"}, "published": True}

    def test_author_posts_unknown_author(self, client, mock_db):
        mock_db.authors.find_one.return_value = None
        response = client.get(f"/authors/{ObjectId()}/posts")
        assert response.status_code == 404
