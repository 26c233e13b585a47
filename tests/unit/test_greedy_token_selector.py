import pytest
import torch

from llama_runner.domain.entities.logits import ScoreVector
from llama_runner.infrastructure.selection import GreedyTokenSelector


@pytest.fixture
def selector():
    return GreedyTokenSelector()


@pytest.mark.parametrize(
    "scores, expected",
    [
        ([0.1, 5.0, 3.0], 1),
        ([2.0, 2.0, 1.0], 0),
        ([-3.0, -1.0, -2.0], 1),
        ([7.0], 0),
    ],
)
def test_select_returns_first_maximum(selector, scores, expected):
    assert selector.select(scores) == expected


def test_select_empty_returns_none(selector):
    assert selector.select([]) is None
    assert selector.select(ScoreVector(torch.tensor([]), 0)) is None


def test_select_from_score_vector(selector):
    scores = ScoreVector(torch.tensor([0.0, 1.0, 9.5, 9.0]), sequence_position=3)

    assert selector.select(scores) == 2


def test_select_returns_python_int(selector):
    token_id = selector.select(torch.tensor([0.5, 0.25]))

    assert type(token_id) is int


def test_select_tie_across_wide_vocabulary(selector):
    scores = torch.zeros(32000)
    scores[31999] = 4.0
    scores[17] = 4.0

    assert selector.select(scores) == 17
