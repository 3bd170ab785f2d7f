"""Tests for card API endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from models.card import CardModel
from models.user_card_state import UserCardStateModel


class TestCardAuth:
    """Every card endpoint requires a bearer token."""

    def test_list_without_token(self, client: TestClient) -> None:
        response = client.get("/cards")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error"]["category"] == "unauthorized"

    def test_create_without_token(self, client: TestClient, db_session: Session) -> None:
        response = client.post("/cards", json={"question": "Q", "answer": "A"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert db_session.query(CardModel).count() == 0


class TestCreateCard:
    """Test suite for POST /cards."""

    def test_create_card_success(
        self, client: TestClient, db_session: Session, make_user, auth_headers
    ) -> None:
        teacher = make_user(role="teacher")

        response = client.post(
            "/cards",
            json={"question": "2 + 2?", "answer": "4", "class_scope": "ALL"},
            headers=auth_headers(teacher),
        )

        assert response.status_code == status.HTTP_201_CREATED
        card = response.json()
        assert card["question"] == "2 + 2?"
        assert card["owner_teacher_id"] == teacher.id
        assert card["class_scope"] == "ALL"
        assert card["is_active"] is True

        state = db_session.get(UserCardStateModel, (teacher.id, card["id"]))
        assert state is not None
        assert state.is_active is True

    def test_create_card_empty_question(
        self, client: TestClient, db_session: Session, make_user, auth_headers
    ) -> None:
        user = make_user()

        response = client.post(
            "/cards", json={"question": "   ", "answer": "A"}, headers=auth_headers(user)
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["category"] == "validation_error"
        assert db_session.query(CardModel).count() == 0


class TestListCards:
    """Test suite for GET /cards."""

    def test_student_inherits_teacher_cards(
        self, client: TestClient, make_user, auth_headers, assign
    ) -> None:
        teacher = make_user(role="teacher")
        student = make_user()
        assign(teacher, "Y", student)
        for scope in ("ALL", "X", "Y"):
            client.post(
                "/cards",
                json={"question": f"Q {scope}", "answer": "A", "class_scope": scope},
                headers=auth_headers(teacher),
            )

        response = client.get("/cards", headers=auth_headers(student))

        assert response.status_code == status.HTTP_200_OK
        scopes = sorted(card["class_scope"] for card in response.json())
        assert scopes == ["ALL", "Y"]
        assert all(card["is_active"] for card in response.json())

    def test_active_only(self, client: TestClient, make_user, auth_headers) -> None:
        user = make_user()
        headers = auth_headers(user)
        first = client.post("/cards", json={"question": "Q1", "answer": "A"}, headers=headers)
        client.post("/cards", json={"question": "Q2", "answer": "A"}, headers=headers)
        client.patch(
            f"/cards/{first.json()['id']}/archive", json={"is_active": False}, headers=headers
        )

        everything = client.get("/cards", headers=headers).json()
        active = client.get("/cards", params={"active_only": True}, headers=headers).json()

        assert len(everything) == 2
        assert [card["question"] for card in active] == ["Q2"]


class TestUpdateCard:
    """Test suite for PUT /cards/:id."""

    def test_update_success(self, client: TestClient, make_user, auth_headers) -> None:
        user = make_user()
        headers = auth_headers(user)
        card = client.post("/cards", json={"question": "Q", "answer": "A"}, headers=headers).json()

        response = client.put(
            f"/cards/{card['id']}", json={"question": "Q2", "answer": "A2"}, headers=headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["question"] == "Q2"
        assert response.json()["answer"] == "A2"

    def test_update_not_found(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.put(
            "/cards/99999",
            json={"question": "Q", "answer": "A"},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["category"] == "not_found"


class TestArchive:
    """Test suite for PATCH /cards/:id/archive and POST /cards/archive/batch."""

    def test_toggle_archive(
        self, client: TestClient, db_session: Session, make_user, auth_headers
    ) -> None:
        user = make_user()
        headers = auth_headers(user)
        card = client.post("/cards", json={"question": "Q", "answer": "A"}, headers=headers).json()

        response = client.patch(
            f"/cards/{card['id']}/archive", json={"is_active": False}, headers=headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "card_id": card["id"], "is_active": False}
        listed = client.get("/cards", headers=headers).json()
        assert listed[0]["is_active"] is False

    def test_batch_archive(self, client: TestClient, make_user, auth_headers) -> None:
        user = make_user()
        headers = auth_headers(user)
        ids = [
            client.post("/cards", json={"question": f"Q{i}", "answer": "A"}, headers=headers).json()["id"]
            for i in range(3)
        ]

        response = client.post(
            "/cards/archive/batch",
            json={"updates": [{"card_id": i, "is_active": False} for i in ids[:2]]},
            headers=headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["updated"] == 2
        flags = {card["id"]: card["is_active"] for card in client.get("/cards", headers=headers).json()}
        assert flags == {ids[0]: False, ids[1]: False, ids[2]: True}

    def test_batch_archive_empty(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.post(
            "/cards/archive/batch", json={"updates": []}, headers=auth_headers(make_user())
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["category"] == "validation_error"

    def test_batch_archive_unknown_card_rolls_back(
        self, client: TestClient, make_user, auth_headers
    ) -> None:
        user = make_user()
        headers = auth_headers(user)
        card = client.post("/cards", json={"question": "Q", "answer": "A"}, headers=headers).json()

        response = client.post(
            "/cards/archive/batch",
            json={
                "updates": [
                    {"card_id": card["id"], "is_active": False},
                    {"card_id": 424242, "is_active": False},
                ]
            },
            headers=headers,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["category"] == "not_found"
        assert client.get("/cards", headers=headers).json()[0]["is_active"] is True

    def test_toggle_missing_card(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.patch(
            "/cards/999/archive", json={"is_active": False}, headers=auth_headers(make_user())
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["category"] == "not_found"

    def test_batch_archive_oversized_id(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.post(
            "/cards/archive/batch",
            json={"updates": [{"card_id": 2**64, "is_active": False}]},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 422


class TestOversizedCardId:
    """Test suite for card ids beyond the 64-bit key range."""

    OVERSIZED = "99999999999999999999"

    def test_update(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.put(
            f"/cards/{self.OVERSIZED}",
            json={"question": "Q", "answer": "A"},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 422

    def test_toggle_archive(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.patch(
            f"/cards/{self.OVERSIZED}/archive",
            json={"is_active": False},
            headers=auth_headers(make_user()),
        )

        assert response.status_code == 422

    def test_zero_id(self, client: TestClient, make_user, auth_headers) -> None:
        response = client.patch(
            "/cards/0/archive", json={"is_active": False}, headers=auth_headers(make_user())
        )

        assert response.status_code == 422
