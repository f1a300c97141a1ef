"""Tests for scribe.services.post_store against an in-memory SQLite database."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from scribe.core.errors import ImageTooLarge, NotFound, StoreError, ValidationFailed
from scribe.services.post_store import PostStore, validate_post_fields
from scribe.services.users import create_user
from tests.support import DatabaseTestCase

BODY = "This is a sufficiently long body."


class TickingClock:
    """Each call returns a time one minute after the previous one."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


class TestValidatePostFields(unittest.TestCase):
    def _full(self, **overrides) -> dict:
        fields = {"title": "Hello", "description": BODY, "category": "Food"}
        fields.update(overrides)
        return fields

    def test_title_boundaries(self) -> None:
        with self.assertRaises(ValidationFailed):
            validate_post_fields(self._full(title="ab"), partial=False)
        self.assertEqual(validate_post_fields(self._full(title="abc"), partial=False)["title"], "abc")
        self.assertEqual(len(validate_post_fields(self._full(title="t" * 200), partial=False)["title"]), 200)
        with self.assertRaises(ValidationFailed):
            validate_post_fields(self._full(title="t" * 201), partial=False)

    def test_description_boundaries(self) -> None:
        with self.assertRaises(ValidationFailed):
            validate_post_fields(self._full(description="d" * 9), partial=False)
        cleaned = validate_post_fields(self._full(description="d" * 10), partial=False)
        self.assertEqual(cleaned["description"], "d" * 10)

    def test_whitespace_is_trimmed_before_length_check(self) -> None:
        with self.assertRaises(ValidationFailed):
            validate_post_fields(self._full(title="  ab  "), partial=False)
        self.assertEqual(validate_post_fields(self._full(title="  abc "), partial=False)["title"], "abc")

    def test_missing_required_fields_listed_together(self) -> None:
        with self.assertRaises(ValidationFailed) as ctx:
            validate_post_fields({}, partial=False)
        self.assertIn("Blog title is required", ctx.exception.message)
        self.assertIn("Blog description is required", ctx.exception.message)

    def test_category_defaults_to_general(self) -> None:
        cleaned = validate_post_fields({"title": "Hello", "description": BODY}, partial=False)
        self.assertEqual(cleaned["category"], "General")

    def test_unknown_category_rejected(self) -> None:
        with self.assertRaises(ValidationFailed) as ctx:
            validate_post_fields(self._full(category="Gardening"), partial=False)
        self.assertIn("Gardening", ctx.exception.message)

    def test_category_is_case_sensitive(self) -> None:
        with self.assertRaises(ValidationFailed):
            validate_post_fields(self._full(category="technology"), partial=False)

    def test_partial_checks_only_supplied_keys(self) -> None:
        self.assertEqual(validate_post_fields({"title": "New title"}, partial=True), {"title": "New title"})
        self.assertEqual(validate_post_fields({}, partial=True), {})

    def test_partial_null_title_rejected(self) -> None:
        with self.assertRaises(ValidationFailed):
            validate_post_fields({"title": None}, partial=True)

    def test_image_ceiling(self) -> None:
        ok = validate_post_fields(self._full(image="x" * 1024), partial=False, max_image_bytes=1024)
        self.assertEqual(len(ok["image"]), 1024)
        with self.assertRaises(ImageTooLarge) as ctx:
            validate_post_fields(self._full(image="x" * 1025), partial=False, max_image_bytes=1024)
        self.assertEqual(ctx.exception.code, "image_too_large")
        self.assertIsInstance(ctx.exception, ValidationFailed)

    def test_empty_image_stored_as_none(self) -> None:
        self.assertIsNone(validate_post_fields(self._full(image=""), partial=False)["image"])

    def test_non_string_fields_are_validation_errors(self) -> None:
        with self.assertRaises(ValidationFailed) as ctx:
            validate_post_fields(self._full(title=123, description=["x"] * 20, category=7), partial=False)
        message = ctx.exception.message
        self.assertIn("Title must be a string", message)
        self.assertIn("Description must be a string", message)
        self.assertIn("`7` is not a valid category", message)


class TestPostStoreCrud(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.clock = TickingClock()
        self.store = PostStore(self.db, max_image_bytes=2048, clock=self.clock)
        self.alice = create_user(self.db, "alice", "alice@example.com", "password123")
        self.bob = create_user(self.db, "bob", "bob@example.com", "password123")

    def _create(self, author=None, **fields):
        author = author or self.alice
        values = {"title": "Hello World", "description": BODY, "category": "Technology"}
        values.update(fields)
        return self.store.create(author.id, author.username, values)

    def test_round_trip(self) -> None:
        created = self._create()
        fetched = self.store.find_by_id(created.id)
        self.assertEqual(fetched.title, "Hello World")
        self.assertEqual(fetched.description, BODY)
        self.assertEqual(fetched.category, "Technology")
        self.assertEqual(fetched.author_id, self.alice.id)
        self.assertEqual(fetched.author_name, "alice")
        self.assertIsNotNone(fetched.created_at)
        self.assertIsNone(fetched.image)

    def test_create_stores_image_as_sent(self) -> None:
        image = "data:image/png;base64,iVBORw0KGgo="
        self.assertEqual(self._create(image=image).image, image)

    def test_create_rejects_before_writing(self) -> None:
        with self.assertRaises(ValidationFailed):
            self._create(title="ab")
        with self.assertRaises(ImageTooLarge):
            self._create(image="x" * 2049)
        self.assertEqual(self.store.list_posts(), [])

    def test_create_requires_existing_author(self) -> None:
        with self.assertRaises(ValidationFailed):
            self.store.create(9999, "ghost", {"title": "Hello", "description": BODY})
        self.assertEqual(self.store.list_posts(), [])

    def test_find_missing_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.store.find_by_id(12345)

    def test_ids_outside_integer_range_are_absent(self) -> None:
        self._create()
        for post_id in (0, -1, 2**31, 10**20):
            with self.assertRaises(NotFound):
                self.store.find_by_id(post_id)
            with self.assertRaises(NotFound):
                self.store.update(post_id, {"title": "Whatever"})
            with self.assertRaises(NotFound):
                self.store.delete(post_id)
            self.assertEqual(self.store.list_by_author(post_id), [])

    def test_create_rejects_non_string_title(self) -> None:
        with self.assertRaises(ValidationFailed):
            self._create(title=12345)
        with self.assertRaises(ValidationFailed):
            self.store.update(self._create().id, {"description": 42})

    def test_update_changes_only_supplied_fields(self) -> None:
        post = self._create(image="data:image/png;base64,AAAA")
        created_at, updated_before = post.created_at, post.updated_at
        updated = self.store.update(
            post.id,
            {
                "title": "Edited title",
                "author_id": self.bob.id,
                "author_name": "bob",
                "id": 777,
                "created_at": datetime(2000, 1, 1, tzinfo=UTC),
            },
        )
        self.assertEqual(updated.id, post.id)
        self.assertEqual(updated.title, "Edited title")
        self.assertEqual(updated.description, BODY)
        self.assertEqual(updated.category, "Technology")
        self.assertEqual(updated.image, "data:image/png;base64,AAAA")
        self.assertEqual(updated.author_id, self.alice.id)
        self.assertEqual(updated.author_name, "alice")
        self.assertEqual(updated.created_at, created_at)
        self.assertGreater(updated.updated_at, updated_before)

    def test_update_null_image_removes_it(self) -> None:
        post = self._create(image="data:image/png;base64,AAAA")
        self.assertIsNone(self.store.update(post.id, {"image": None}).image)

    def test_update_validates_before_writing(self) -> None:
        post = self._create()
        with self.assertRaises(ValidationFailed):
            self.store.update(post.id, {"title": "Fine title", "description": "short"})
        self.assertEqual(self.store.find_by_id(post.id).title, "Hello World")

    def test_update_missing_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.store.update(4242, {"title": "Whatever"})

    def test_delete_then_not_found(self) -> None:
        post = self._create()
        self.assertIsNone(self.store.delete(post.id))
        with self.assertRaises(NotFound):
            self.store.delete(post.id)
        with self.assertRaises(NotFound):
            self.store.find_by_id(post.id)


class TestPostStoreListing(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = PostStore(self.db, clock=TickingClock())
        self.alice = create_user(self.db, "alice", "alice@example.com", "password123")
        self.bob = create_user(self.db, "bob", "bob@example.com", "password123")
        self.tech = self.store.create(
            self.alice.id, "alice", {"title": "Rust tips", "description": "Say hello to the borrow checker.", "category": "Technology"}
        )
        self.food = self.store.create(
            self.bob.id, "bob", {"title": "Pasta night", "description": "Boil water, add salt and pasta.", "category": "Food"}
        )
        self.travel = self.store.create(
            self.alice.id, "alice", {"title": "100% Lisbon", "description": "Trams, tiles and pastel de nata.", "category": "Travel"}
        )

    def _ids(self, posts) -> list[int]:
        return [p.id for p in posts]

    def test_newest_first(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts()), [self.travel.id, self.food.id, self.tech.id])

    def test_category_filter(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts(category="Technology")), [self.tech.id])
        self.assertEqual(self.store.list_posts(category="Sports"), [])

    def test_all_category_means_no_filter(self) -> None:
        self.assertEqual(len(self.store.list_posts(category="All")), 3)
        self.assertEqual(len(self.store.list_posts(category="")), 3)

    def test_search_matches_description_only(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts(search="hello")), [self.tech.id])

    def test_search_is_case_insensitive(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts(search="PASTA")), [self.food.id])

    def test_search_matches_category(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts(search="travel")), [self.travel.id])

    def test_search_is_literal(self) -> None:
        self.assertEqual(self._ids(self.store.list_posts(search="100%")), [self.travel.id])
        self.assertEqual(self.store.list_posts(search="%"), [self.travel])
        self.assertEqual(self.store.list_posts(search="_"), [])

    def test_search_and_category_combine(self) -> None:
        self.assertEqual(self.store.list_posts(search="pasta", category="Technology"), [])
        self.assertEqual(self._ids(self.store.list_posts(search="pas", category="Food")), [self.food.id])

    def test_list_by_author(self) -> None:
        self.assertEqual(self._ids(self.store.list_by_author(self.alice.id)), [self.travel.id, self.tech.id])
        self.assertEqual(self.store.list_by_author(9999), [])

    def test_distinct_categories_sorted(self) -> None:
        self.store.create(self.bob.id, "bob", {"title": "More food", "description": BODY, "category": "Food"})
        self.assertEqual(self.store.distinct_categories(), ["Food", "Technology", "Travel"])


class TestPostStoreFailures(unittest.TestCase):
    def test_database_error_becomes_store_error(self) -> None:
        db = MagicMock()
        db.get.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
        store = PostStore(db)
        with self.assertRaises(StoreError) as ctx:
            store.find_by_id(1)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.code, "store_error")
        self.assertEqual(ctx.exception.message, "Failed to fetch blog")
        db.rollback.assert_called_once()

    def test_categories_failure_message(self) -> None:
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
        with self.assertRaises(StoreError) as ctx:
            PostStore(db).distinct_categories()
        self.assertEqual(ctx.exception.message, "Failed to fetch categories")


if __name__ == "__main__":
    unittest.main()
