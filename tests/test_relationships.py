"""Relationship uniqueness and admin-only writes."""

from pydantic import ValidationError

from app.models import Relationship, Role
from app.schemas.members import RelationshipCreate
from app.services.members import MemberReferenceError
from app.services.relationships import DuplicateRelationshipError, create_relationship
from tests.support import API, ApiTestCase


class TestCreateRelationship(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.a = self.create_member("A")
        self.b = self.create_member("B")

    def _create(self, relationship_type: str = "sibling", person1_id: int | None = None, person2_id: int | None = None):
        return create_relationship(
            self.db,
            RelationshipCreate(
                person1_id=person1_id or self.a.id,
                person2_id=person2_id or self.b.id,
                relationship_type=relationship_type,
            ),
        )

    def test_duplicate_triple_rejected(self) -> None:
        self._create()
        with self.assertRaises(DuplicateRelationshipError):
            self._create()
        self.assertEqual(self.db.query(Relationship).count(), 1)

    def test_same_people_different_type_allowed(self) -> None:
        self._create("sibling")
        self._create("cousin")
        self.assertEqual(self.db.query(Relationship).count(), 2)

    def test_reversed_order_is_a_distinct_triple(self) -> None:
        self._create("sibling")
        self._create("sibling", person1_id=self.b.id, person2_id=self.a.id)
        self.assertEqual(self.db.query(Relationship).count(), 2)

    def test_session_usable_after_duplicate(self) -> None:
        self._create()
        with self.assertRaises(DuplicateRelationshipError):
            self._create()
        created = self._create("spouse")
        self.assertIsNotNone(created.id)

    def test_missing_member(self) -> None:
        with self.assertRaises(MemberReferenceError):
            self._create(person2_id=999)

    def test_same_person_twice_invalid(self) -> None:
        with self.assertRaises(ValidationError):
            RelationshipCreate(person1_id=1, person2_id=1, relationship_type="other")


class TestRelationshipApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.create_user("admin@example.com", role=Role.ADMIN)
        self.a = self.create_member("A")
        self.b = self.create_member("B")
        self.body = {"person1_id": self.a.id, "person2_id": self.b.id, "relationship_type": "sibling"}

    def test_duplicate_returns_409(self) -> None:
        headers = self.auth_headers(self.admin)
        first = self.client.post(f"{API}/relationships", json=self.body, headers=headers)
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["message"], "Relationship added successfully")

        second = self.client.post(f"{API}/relationships", json=self.body, headers=headers)
        self.assertEqual(second.status_code, 409)

    def test_requires_admin(self) -> None:
        user = self.create_user("user@example.com")
        res = self.client.post(f"{API}/relationships", json=self.body, headers=self.auth_headers(user))
        self.assertEqual(res.status_code, 403)

    def test_unknown_type_rejected(self) -> None:
        body = dict(self.body, relationship_type="friend")
        res = self.client.post(f"{API}/relationships", json=body, headers=self.auth_headers(self.admin))
        self.assertEqual(res.status_code, 422)

    def test_delete(self) -> None:
        headers = self.auth_headers(self.admin)
        created = self.client.post(f"{API}/relationships", json=self.body, headers=headers).json()["data"]
        res = self.client.delete(f"{API}/relationships/{created['id']}", headers=headers)
        self.assertEqual(res.status_code, 200)
        missing = self.client.delete(f"{API}/relationships/{created['id']}", headers=headers)
        self.assertEqual(missing.status_code, 404)
