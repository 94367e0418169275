# =============================================================================
# tests/test_workers.py - Background Worker Tests
# =============================================================================
# The rating reconcile loop must survive a failing pass and keep running.
# =============================================================================

import asyncio

import pytest

import workers.rating_reconcile_worker as worker


class TestRatingReconcileWorker:

    async def test_failed_pass_does_not_stop_loop(self, db, monkeypatch, caplog):
        passes = []

        async def broken(db):
            passes.append(db)
            raise RuntimeError("unexpected document shape")

        monkeypatch.setattr(worker, "reconcile_all_ratings", broken)
        monkeypatch.setattr(worker, "get_db", lambda: db)
        monkeypatch.setattr(worker, "RATING_RECONCILE_INTERVAL_SECONDS", 0)

        task = asyncio.create_task(worker.rating_reconcile_worker())
        for _ in range(20):
            await asyncio.sleep(0)

        assert len(passes) > 1
        assert not task.done()
        assert "RATING_RECONCILE_ERROR" in caplog.text

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    async def test_repairs_are_applied_each_pass(self, db, monkeypatch):
        passes = []

        async def counting(db):
            passes.append(db)
            return 1

        monkeypatch.setattr(worker, "reconcile_all_ratings", counting)
        monkeypatch.setattr(worker, "get_db", lambda: db)
        monkeypatch.setattr(worker, "RATING_RECONCILE_INTERVAL_SECONDS", 0)

        task = asyncio.create_task(worker.rating_reconcile_worker())
        for _ in range(10):
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(passes) > 1
        assert all(p is db for p in passes)
