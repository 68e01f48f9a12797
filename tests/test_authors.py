import uuid

from fastapi import status
from sqlalchemy import text

from authors_api.repos.author_repo import AuthorRepository


class TestAuthorEndpoints:
    """Test author management endpoints."""

    def test_root(self, test_client):
        response = test_client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["endpoints"]["authors"] == "/api/v1/authors"

    def test_create_author_success(self, test_client, author_payload):
        response = test_client.post("/api/v1/authors", json=author_payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["authorUsername"] == author_payload["authorUsername"]
        assert data["authorEmail"] == author_payload["authorEmail"]
        assert uuid.UUID(data["authorId"])

    def test_create_author_hides_secrets(self, test_client, author_payload):
        response = test_client.post("/api/v1/authors", json=author_payload)
        data = response.json()

        assert set(data) == {"authorId", "authorAvatarUrl", "authorEmail", "authorUsername"}
        assert author_payload["authorHash"] not in response.text

    def test_create_author_stores_pending_token(self, test_client, author_payload, db_session):
        test_client.post("/api/v1/authors", json=author_payload)

        record = AuthorRepository.get_by_email(db_session, author_payload["authorEmail"])
        assert record is not None
        assert record.is_pending_activation

    def test_create_author_trim_username(self, test_client, author_payload):
        author_payload["authorUsername"] = "  Trimmed Name  "
        response = test_client.post("/api/v1/authors", json=author_payload)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["authorUsername"] == "Trimmed Name"

    def test_create_author_duplicate_email(self, test_client, sample_author, author_payload):
        author_payload["authorUsername"] = "different_name"
        response = test_client.post("/api/v1/authors", json=author_payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error"]["type"] == "duplicate_resource"

    def test_create_author_invalid_email(self, test_client, author_payload):
        author_payload["authorEmail"] = "invalid-email"
        response = test_client.post("/api/v1/authors", json=author_payload)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"]["type"] == "validation_error"

    def test_author_fields_validation(self, test_client, author_payload):
        """Test various field validations for author creation."""
        test_cases = [
            ({}, 422),
            ({**author_payload, "authorUsername": "u" * 33}, 422),
            ({**author_payload, "authorUsername": "   "}, 422),
            ({**author_payload, "authorHash": author_payload["authorHash"][:-1]}, 422),
            ({**author_payload, "authorAvatarUrl": "a" * 256}, 422),
            ({**author_payload, "authorUsername": "José María"}, 201),
        ]

        for author_data, expected_status in test_cases:
            response = test_client.post("/api/v1/authors", json=author_data)
            assert response.status_code == expected_status, author_data

    def test_list_authors_empty(self, test_client):
        response = test_client.get("/api/v1/authors")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_authors_with_data(self, test_client, sample_author):
        response = test_client.get("/api/v1/authors")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == [sample_author]

    def test_list_authors_search(self, test_client, author_payload):
        for name in ("poet_ann", "poet_bob", "novelist"):
            payload = {
                **author_payload,
                "authorUsername": name,
                "authorEmail": f"{name}@example.com",
            }
            assert test_client.post("/api/v1/authors", json=payload).status_code == 201

        response = test_client.get("/api/v1/authors", params={"q": "poet"})
        assert [a["authorUsername"] for a in response.json()] == ["poet_ann", "poet_bob"]

        response = test_client.get("/api/v1/authors", params={"limit": 1, "offset": 2})
        assert [a["authorUsername"] for a in response.json()] == ["poet_bob"]

    def test_list_authors_bad_pagination(self, test_client):
        response = test_client.get("/api/v1/authors", params={"limit": 0})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_get_author(self, test_client, sample_author):
        response = test_client.get(f"/api/v1/authors/{sample_author['authorId']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == sample_author

    def test_get_author_not_found(self, test_client):
        response = test_client.get(f"/api/v1/authors/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["type"] == "not_found"

    def test_get_author_invalid_id(self, test_client):
        response = test_client.get("/api/v1/authors/not-a-uuid")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_get_author_by_email(self, test_client, sample_author):
        response = test_client.get(f"/api/v1/authors/by-email/{sample_author['authorEmail']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["authorId"] == sample_author["authorId"]

    def test_get_author_by_malformed_email(self, test_client):
        response = test_client.get("/api/v1/authors/by-email/not-an-email")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        error = response.json()["error"]
        assert error["details"] == {"field": "email", "kind": "empty_or_insecure"}

    def test_update_author(self, test_client, sample_author):
        response = test_client.patch(
            f"/api/v1/authors/{sample_author['authorId']}",
            json={"authorUsername": "new_name"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["authorUsername"] == "new_name"
        assert data["authorEmail"] == sample_author["authorEmail"]

    def test_update_author_invalid(self, test_client, sample_author):
        response = test_client.patch(
            f"/api/v1/authors/{sample_author['authorId']}",
            json={"authorUsername": "u" * 33},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    def test_update_author_not_found(self, test_client):
        response = test_client.patch(
            f"/api/v1/authors/{uuid.uuid4()}", json={"authorUsername": "x"}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_author(self, test_client, sample_author):
        response = test_client.delete(f"/api/v1/authors/{sample_author['authorId']}")
        assert response.status_code == status.HTTP_204_NO_CONTENT

        response = test_client.get(f"/api/v1/authors/{sample_author['authorId']}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_author_not_found(self, test_client):
        response = test_client.delete(f"/api/v1/authors/{uuid.uuid4()}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_activate_author(self, test_client, sample_author, db_session):
        record = AuthorRepository.get_by_email(db_session, sample_author["authorEmail"])
        token = record.activation_token

        response = test_client.post(f"/api/v1/authors/activate/{token}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == sample_author

        response = test_client.post(f"/api/v1/authors/activate/{token}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_activate_author_malformed_token(self, test_client):
        response = test_client.post("/api/v1/authors/activate/ZZZZ")

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
        assert response.json()["error"]["details"]["kind"] == "invalid_format"

    def test_corrupt_stored_row_is_storage_error(self, test_client, sample_author, db_session):
        db_session.execute(text('UPDATE author SET "authorActivationToken" = \'abc123\''))
        db_session.commit()

        response = test_client.get("/api/v1/authors")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["error"]["type"] == "storage_error"

        response = test_client.get(f"/api/v1/authors/{sample_author['authorId']}")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
