"""Tests for the in-memory job store."""

import threading
from datetime import timedelta

import pytest

from app.models.job import JobStatus
from app.services.job_store import DuplicateJobError, InvalidTransitionError


class TestCreate:
    def test_create_registers_processing_job(self, store, clock):
        job = store.create("job-1")

        assert job.status is JobStatus.PROCESSING
        assert job.created_at == clock.now
        assert job.result_url is None
        assert job.completed_at is None
        assert store.get("job-1") == job

    def test_create_rejects_duplicate_id(self, store):
        store.create("job-1")

        with pytest.raises(DuplicateJobError):
            store.create("job-1")

    def test_unknown_id_is_not_found(self, store):
        assert store.get("missing") is None


class TestUpdate:
    def test_completed_transition_sets_url_and_timestamp(self, store, clock):
        store.create("job-1")
        clock.advance(minutes=2)

        assert store.update("job-1", JobStatus.COMPLETED, "https://cdn/x.png") is True

        job = store.get("job-1")
        assert job.status is JobStatus.COMPLETED
        assert job.result_url == "https://cdn/x.png"
        assert job.completed_at == clock.now
        assert job.created_at == clock.now - timedelta(minutes=2)

    def test_failed_transition_has_no_url(self, store, clock):
        store.create("job-1")

        store.update("job-1", JobStatus.FAILED)

        job = store.get("job-1")
        assert job.status is JobStatus.FAILED
        assert job.result_url is None
        assert job.completed_at == clock.now

    def test_update_of_unknown_job_is_silent_noop(self, store):
        assert store.update("evicted", JobStatus.COMPLETED, "https://cdn/x.png") is False
        assert store.get("evicted") is None
        assert store.all_jobs() == {}

    def test_cannot_return_to_processing(self, store):
        store.create("job-1")

        with pytest.raises(InvalidTransitionError):
            store.update("job-1", JobStatus.PROCESSING)

    def test_second_terminal_transition_is_rejected(self, store):
        store.create("job-1")
        store.update("job-1", JobStatus.COMPLETED, "https://cdn/x.png")

        with pytest.raises(InvalidTransitionError):
            store.update("job-1", JobStatus.FAILED)
        assert store.get("job-1").status is JobStatus.COMPLETED

    def test_completed_requires_url(self, store):
        store.create("job-1")

        with pytest.raises(InvalidTransitionError):
            store.update("job-1", JobStatus.COMPLETED)
        assert store.get("job-1").status is JobStatus.PROCESSING

    def test_failed_rejects_url(self, store):
        store.create("job-1")

        with pytest.raises(InvalidTransitionError):
            store.update("job-1", JobStatus.FAILED, "https://cdn/x.png")

    def test_snapshots_are_not_mutated_by_later_updates(self, store):
        store.create("job-1")
        before = store.get("job-1")

        store.update("job-1", JobStatus.COMPLETED, "https://cdn/x.png")

        assert before.status is JobStatus.PROCESSING
        assert before.result_url is None


class TestRemoveOlderThan:
    def test_removes_only_entries_before_cutoff(self, store, clock):
        store.create("old")
        clock.advance(hours=1)
        store.create("boundary")
        clock.advance(hours=1)
        store.create("new")

        removed = store.remove_older_than(clock.now - timedelta(hours=1))

        assert removed == 1
        assert store.get("old") is None
        assert store.get("boundary") is not None
        assert store.get("new") is not None

    def test_removes_regardless_of_status(self, store, clock):
        store.create("processing")
        store.create("completed")
        store.create("failed")
        store.update("completed", JobStatus.COMPLETED, "https://cdn/x.png")
        store.update("failed", JobStatus.FAILED)
        clock.advance(days=2)

        assert store.remove_older_than(clock.now - timedelta(hours=24)) == 3
        assert store.all_jobs() == {}


def test_concurrent_readers_never_see_torn_records(store):
    job_ids = [f"job-{i}" for i in range(200)]
    for job_id in job_ids:
        store.create(job_id)

    violations = []
    done = threading.Event()

    def reader():
        while not done.is_set():
            for job_id in job_ids:
                job = store.get(job_id)
                if job is None:
                    continue
                if job.status is JobStatus.COMPLETED and job.result_url != f"https://cdn/{job_id}.png":
                    violations.append(job)
                if job.status is JobStatus.PROCESSING and (job.result_url or job.completed_at):
                    violations.append(job)

    def writer(ids):
        for job_id in ids:
            store.update(job_id, JobStatus.COMPLETED, f"https://cdn/{job_id}.png")

    readers = [threading.Thread(target=reader) for _ in range(4)]
    writers = [threading.Thread(target=writer, args=(job_ids[i::4],)) for i in range(4)]
    for thread in readers + writers:
        thread.start()
    for thread in writers:
        thread.join()
    done.set()
    for thread in readers:
        thread.join()

    assert violations == []
    assert all(store.get(job_id).status is JobStatus.COMPLETED for job_id in job_ids)
