"""
Tests for the in-memory profile and job indexes.
"""
import pytest

from conftest import make_job, make_worker
from workbridge.domain import JobStatus
from workbridge.services.indexes import (
    JobIndex,
    ProfileIndex,
    job_matches_query,
    profile_matches_country,
    profile_matches_trade,
)


class TestJobPredicates:
    """Tests for job text search."""

    def test_empty_query_matches_everything(self):
        assert job_matches_query(None)(make_job())
        assert job_matches_query("  ")(make_job())

    def test_matches_title_case_insensitively(self):
        assert job_matches_query("ELECTRIC")(make_job())

    def test_matches_description(self):
        assert job_matches_query("fit-out")(make_job())

    def test_matches_skill(self):
        assert job_matches_query("panel")(make_job())

    def test_no_match(self):
        assert not job_matches_query("plumber")(make_job())


class TestProfilePredicates:
    """Tests for worker trade and country filters."""

    def test_trade_substring(self):
        worker = make_worker(trade_or_skill="Master Electrician")
        assert profile_matches_trade("electrician")(worker)
        assert not profile_matches_trade("welder")(worker)

    def test_country_of_origin_matches(self):
        worker = make_worker(country_of_origin="Mexico", experience_years=3, experience_in_country=0)
        assert profile_matches_country("mex")(worker)

    def test_country_filter_is_inclusive_or(self):
        """Any in-country experience passes, whatever the country."""
        worker = make_worker(country_of_origin="Poland", experience_years=4, experience_in_country=1)
        assert profile_matches_country("USA")(worker)

    def test_country_filter_excludes_no_experience_elsewhere(self):
        worker = make_worker(country_of_origin="Poland", experience_years=4, experience_in_country=0)
        assert not profile_matches_country("USA")(worker)


class TestJobIndex:
    """Tests for JobIndex."""

    @pytest.fixture
    def index(self):
        return JobIndex([
            make_job(id="a", title="Electrician"),
            make_job(id="b", title="Electrical Apprentice", status=JobStatus.CLOSED),
            make_job(id="c", title="Plumber", required_skills=(), employer_id="employer-2"),
        ])

    def test_public_search_excludes_non_active(self, index):
        ids = [job.id for job in index.public_search("electric")]
        assert ids == ["a"]

    def test_public_search_without_query(self, index):
        assert [job.id for job in index.public_search()] == ["a", "c"]

    def test_search_by_employer(self, index):
        assert [job.id for job in index.search(employer_id="employer-2")] == ["c"]

    def test_search_combines_filters(self, index):
        assert [job.id for job in index.search(status=JobStatus.CLOSED, query="electric")] == ["b"]
        assert index.search(status=JobStatus.CLOSED, employer_id="employer-2") == []
        assert [job.id for job in index.search()] == ["a", "b", "c"]

    def test_upsert_replaces(self, index):
        index.upsert(make_job(id="a", title="Lead Electrician"))
        assert len(index) == 3
        assert index.get("a").title == "Lead Electrician"

    def test_delete(self, index):
        assert index.delete("a") is True
        assert index.delete("a") is False
        assert "a" not in index


class TestProfileIndex:
    """Tests for ProfileIndex."""

    def test_search_by_trade_and_country(self):
        index = ProfileIndex([
            make_worker(id="w1", user_id="u1", trade_or_skill="Electrician", country_of_origin="USA"),
            make_worker(id="w2", user_id="u2", trade_or_skill="Welder", country_of_origin="USA"),
            make_worker(
                id="w3", user_id="u3", trade_or_skill="Electrician",
                country_of_origin="Canada", experience_years=2, experience_in_country=0,
            ),
        ])

        assert [p.id for p in index.search(trade="electric", country="usa")] == ["w1"]

    def test_search_by_user_sorted_by_id(self):
        index = ProfileIndex([
            make_worker(id="w2", user_id="u2"),
            make_worker(id="w1", user_id="u1"),
        ])
        assert [p.id for p in index.search()] == ["w1", "w2"]
        assert [p.id for p in index.search(user_id="u2")] == ["w2"]

    def test_for_user(self):
        index = ProfileIndex([make_worker(id="w1", user_id="u1")])
        assert index.for_user("u1").id == "w1"
        assert index.for_user("u2") is None
