import pytest
from fastapi import status

from project_catalog.models import Review
from project_catalog.repositories import ReviewRepository


@pytest.fixture
def project_id(alice, create_project):
    return create_project(alice["headers"]).json()["id"]


def test_create_review(client, bob, project_id):
    response = client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 5, "comment": "Great tuning"},
        headers=bob["headers"],
    )
    assert response.status_code == status.HTTP_201_CREATED
    review = response.json()
    assert review["project_id"] == project_id
    assert review["reviewer_id"] == bob["id"]
    assert review["rating"] == 5
    assert review["comment"] == "Great tuning"


def test_review_requires_auth(client, project_id):
    response = client.post(f"/projects/{project_id}/reviews", json={"rating": 3})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.parametrize("payload", [{"rating": 0}, {"rating": 6}, {}, {"comment": "no rating"}])
def test_review_rating_out_of_range(client, bob, project_id, payload):
    response = client.post(f"/projects/{project_id}/reviews", json=payload, headers=bob["headers"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Rating must be between 1 and 5"
    assert client.get(f"/projects/{project_id}").json()["review_count"] == 0


def test_review_rating_not_a_number(client, bob, project_id):
    response = client.post(f"/projects/{project_id}/reviews", json={"rating": "five"}, headers=bob["headers"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_review_missing_project(client, bob):
    response = client.post("/projects/999/reviews", json={"rating": 3}, headers=bob["headers"])
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_resubmit_overwrites_in_place(client, bob, project_id):
    first = client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 4, "comment": "Solid"},
        headers=bob["headers"],
    ).json()
    second = client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 2},
        headers=bob["headers"],
    )
    assert second.status_code == status.HTTP_200_OK
    assert second.json()["id"] == first["id"]
    assert second.json()["rating"] == 2
    assert second.json()["comment"] is None

    reviews = client.get(f"/projects/{project_id}/reviews").json()
    assert len(reviews) == 1


def test_average_across_reviewers(client, register, alice, bob, project_id):
    carol = register("carol")
    client.post(f"/projects/{project_id}/reviews", json={"rating": 5}, headers=bob["headers"])
    client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 2},
        headers={"Authorization": f"Bearer {carol['access_token']}"},
    )
    # Authors may review their own projects
    client.post(f"/projects/{project_id}/reviews", json={"rating": 5}, headers=alice["headers"])

    project = client.get(f"/projects/{project_id}").json()
    assert project["review_count"] == 3
    assert project["avg_rating"] == pytest.approx(4.0)


def test_list_reviews_with_reviewer(client, register, bob, project_id):
    carol = register("carol")
    client.post(f"/projects/{project_id}/reviews", json={"rating": 4}, headers=bob["headers"])
    client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 3, "comment": "Needs docs"},
        headers={"Authorization": f"Bearer {carol['access_token']}"},
    )

    response = client.get(f"/projects/{project_id}/reviews")
    assert response.status_code == status.HTTP_200_OK
    reviews = response.json()
    assert [r["username"] for r in reviews] == ["carol", "bob"]
    assert reviews[0]["comment"] == "Needs docs"
    assert reviews[0]["profile_picture"] is None


def test_list_reviews_missing_project(client):
    response = client.get("/projects/999/reviews")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_my_review(client, bob, project_id):
    response = client.get(f"/projects/{project_id}/my-review", headers=bob["headers"])
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None

    client.post(f"/projects/{project_id}/reviews", json={"rating": 3}, headers=bob["headers"])
    response = client.get(f"/projects/{project_id}/my-review", headers=bob["headers"])
    assert response.json()["rating"] == 3
    assert response.json()["reviewer_id"] == bob["id"]


def test_my_review_requires_auth(client, project_id):
    response = client.get(f"/projects/{project_id}/my-review")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_average_of_three_and_five(client, alice, bob, project_id):
    client.post(f"/projects/{project_id}/reviews", json={"rating": 3}, headers=alice["headers"])
    client.post(f"/projects/{project_id}/reviews", json={"rating": 5}, headers=bob["headers"])

    project = client.get(f"/projects/{project_id}").json()
    assert project["avg_rating"] == 4
    assert project["review_count"] == 2
    assert client.get("/projects").json()[0]["avg_rating"] == 4


def test_rating_must_be_an_integer(client, bob, project_id):
    for rating in (True, "4", 4.5):
        response = client.post(f"/projects/{project_id}/reviews", json={"rating": rating}, headers=bob["headers"])
        assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert client.get(f"/projects/{project_id}").json()["review_count"] == 0


def test_concurrent_first_review_becomes_overwrite(client, db, bob, project_id, monkeypatch):
    first = client.post(f"/projects/{project_id}/reviews", json={"rating": 4}, headers=bob["headers"]).json()

    # The lookup misses once, as if another request inserted the row in between
    lookup = ReviewRepository.get_by_project_and_reviewer
    calls = []

    def stale_lookup(self, project_id, reviewer_id):
        calls.append(reviewer_id)
        if len(calls) == 1:
            return None
        return lookup(self, project_id, reviewer_id)
    monkeypatch.setattr(ReviewRepository, "get_by_project_and_reviewer", stale_lookup)

    response = client.post(
        f"/projects/{project_id}/reviews",
        json={"rating": 1, "comment": "Changed my mind"},
        headers=bob["headers"],
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == first["id"]
    assert response.json()["rating"] == 1
    assert len(calls) == 2
    assert db.query(Review).filter(Review.project_id == project_id).count() == 1
