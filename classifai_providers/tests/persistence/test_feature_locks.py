"""FeatureLocks: one re-entrant lock per feature id."""

from __future__ import annotations

import threading

from classifai_providers.persistence.locks import FeatureLocks


def test_same_feature_shares_lock() -> None:
    locks = FeatureLocks()
    assert locks.get("classification") is locks.get("classification")  # nosec B101
    assert locks.get("classification") is not locks.get("speech_to_text")  # nosec B101


def test_hold_is_reentrant() -> None:
    locks = FeatureLocks()
    with locks.hold("classification"):
        with locks.hold("classification"):
            entered = True
    assert entered  # nosec B101


def test_hold_blocks_other_threads() -> None:
    locks = FeatureLocks()
    acquired = []
    with locks.hold("classification"):
        worker = threading.Thread(
            target=lambda: acquired.append(locks.get("classification").acquire(timeout=0.05))
        )
        worker.start()
        worker.join()
    assert acquired == [False]  # nosec B101
