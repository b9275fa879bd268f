# Area: Tests
"""Shared fixtures for impostor_session tests."""

import logging
import random

import pytest


class ScriptedRandom:
    """
    RandomSource with predictable game draws.

    The first word pair is drawn, ``impostor`` becomes the impostor and
    the speaking order is the join order. Room codes stay random so
    several sessions can share one database.
    """

    def __init__(self, impostor: str = "p2"):
        self.impostor = impostor
        self._codes = random.Random(0)

    def randrange(self, stop):
        return 0

    def choice(self, items):
        if isinstance(items, str):
            return self._codes.choice(items)
        return next(p for p in items if p.participant_id == self.impostor)

    def permutation(self, items):
        return list(items)


@pytest.fixture
def scripted_rng():
    """Deterministic draws; set ``.impostor`` before starting the round."""
    return ScriptedRandom()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog keeps seeing package records."""
    yield
    pkg_logger = logging.getLogger("impostor_session")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
