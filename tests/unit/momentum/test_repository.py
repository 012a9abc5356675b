"""Tests for lifeos/momentum/repository.py

SQLite-backed task and user storage:
- Tasks keep insertion order and a single owner
- User creation is find-or-create
- Streak updates are an atomic read-modify-write
"""

import threading
from datetime import date

import pytest

from lifeos.errors import NotFoundError
from lifeos.momentum.repository import SQLiteUserRepository


@pytest.fixture
def task_repo(repositories):
    return repositories[0]


@pytest.fixture
def user_repo(repositories):
    return repositories[1]


@pytest.fixture
def user(user_repo, mock_user_id):
    user_repo.create(mock_user_id, email="test@example.com")
    return user_repo.get(mock_user_id)


# ─────────────────────────────────────────────────────────────────────────────
# Task Repository
# ─────────────────────────────────────────────────────────────────────────────


class TestTaskRepository:
    def test_add_and_get(self, task_repo, user):
        task = task_repo.add(user.id, "Call caseworker", "admin", is_urgent=True)

        stored = task_repo.get(task.id)
        assert stored == task
        assert stored.is_completed is False
        assert stored.is_urgent is True

    def test_get_missing_returns_none(self, task_repo):
        assert task_repo.get("missing") is None

    def test_list_keeps_insertion_order(self, task_repo, user):
        titles = ["first", "second", "third"]
        for title in titles:
            task_repo.add(user.id, title, "health")

        assert [t.title for t in task_repo.list_for_user(user.id)] == titles

    def test_list_only_returns_own_tasks(self, task_repo, user_repo, user, other_user_id):
        user_repo.create(other_user_id)
        task_repo.add(user.id, "mine", "admin")
        task_repo.add(other_user_id, "theirs", "admin")

        assert [t.title for t in task_repo.list_for_user(user.id)] == ["mine"]

    def test_rejects_invalid_category(self, task_repo, user):
        with pytest.raises(ValueError, match="Invalid category"):
            task_repo.add(user.id, "Meditate", "spiritual")

    def test_add_many_is_all_or_nothing(self, task_repo, user):
        with pytest.raises(ValueError):
            task_repo.add_many(user.id, [("ok", "admin", False), ("bad", "nope", False)])

        assert task_repo.list_for_user(user.id) == []

    def test_set_completed(self, task_repo, user):
        task = task_repo.add(user.id, "Journal", "health")

        task_repo.set_completed(task.id, True)
        assert task_repo.get(task.id).is_completed is True

        task_repo.set_completed(task.id, False)
        assert task_repo.get(task.id).is_completed is False

    def test_set_completed_missing_task(self, task_repo):
        with pytest.raises(NotFoundError):
            task_repo.set_completed("missing", True)


# ─────────────────────────────────────────────────────────────────────────────
# User Repository
# ─────────────────────────────────────────────────────────────────────────────


class TestUserRepository:
    def test_create_reports_whether_inserted(self, user_repo, mock_user_id):
        assert user_repo.create(mock_user_id) is True
        assert user_repo.create(mock_user_id) is False

    def test_new_user_defaults(self, user):
        assert user.current_streak == 0
        assert user.last_active_date is None
        assert user.currency == "USD"
        assert user.time_zone == "UTC"
        assert user.email == "test@example.com"

    def test_get_missing_returns_none(self, user_repo):
        assert user_repo.get("nobody") is None

    def test_update_streak_persists(self, user_repo, user):
        updated = user_repo.update_streak(user.id, lambda streak, last: (streak + 1, date(2024, 3, 10)))

        assert updated.current_streak == 1
        stored = user_repo.get(user.id)
        assert stored.current_streak == 1
        assert stored.last_active_date == date(2024, 3, 10)

    def test_update_streak_passes_current_values(self, user_repo, user):
        user_repo.update_streak(user.id, lambda s, last: (5, date(2024, 3, 9)))
        seen = []

        def update(streak, last_active):
            seen.append((streak, last_active))
            return streak, last_active

        user_repo.update_streak(user.id, update)
        assert seen == [(5, date(2024, 3, 9))]

    def test_update_streak_rolls_back_on_error(self, user_repo, user):
        def explode(streak, last_active):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            user_repo.update_streak(user.id, explode)

        # Database stays usable and unchanged
        assert user_repo.get(user.id).current_streak == 0
        user_repo.update_streak(user.id, lambda s, last: (1, date(2024, 3, 10)))
        assert user_repo.get(user.id).current_streak == 1


    def test_update_streak_missing_user(self, user_repo):
        with pytest.raises(NotFoundError):
            user_repo.update_streak("nobody", lambda s, last: (1, date(2024, 3, 10)))

    def test_update_streak_concurrent_writers_lose_nothing(self, temp_db, user_repo, user):
        writers = 8
        barrier = threading.Barrier(writers)
        errors = []

        def increment():
            repo = SQLiteUserRepository(temp_db)
            barrier.wait()
            try:
                repo.update_streak(user.id, lambda s, d: (s + 1, d or date(2024, 3, 10)))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=increment) for _ in range(writers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert user_repo.get(user.id).current_streak == writers

    def test_update_profile(self, user_repo, user):
        updated = user_repo.update_profile(user.id, name="Sam", currency="EUR", time_zone=None)

        assert updated.name == "Sam"
        assert updated.currency == "EUR"
        assert updated.time_zone == "UTC"

    def test_update_profile_rejects_unknown_fields(self, user_repo, user):
        with pytest.raises(ValueError, match="Unknown profile fields"):
            user_repo.update_profile(user.id, current_streak=100)

    def test_user_to_dict_serializes_date(self, user_repo, user):
        user_repo.update_streak(user.id, lambda s, last: (1, date(2024, 3, 10)))
        assert user_repo.get(user.id).to_dict()["last_active_date"] == "2024-03-10"
