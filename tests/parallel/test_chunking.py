# tests/parallel/test_chunking.py
from __future__ import annotations

import math

import pytest

from gw2_market.parallel.chunking import chunk_ids, num_chunks


def test_450_ids_in_chunks_of_200():
    ids = list(range(1, 451))
    chunks = chunk_ids(ids, 200)

    assert [len(c) for c in chunks] == [200, 200, 50]
    assert chunks[0][0] == 1
    assert chunks[-1][-1] == 450


@pytest.mark.parametrize("n, size", [(0, 1), (1, 1), (7, 3), (9, 3), (199, 200), (200, 200), (401, 200)])
def test_chunk_sizes_and_concatenation(n, size):
    ids = list(range(1000, 1000 + n))
    chunks = chunk_ids(ids, size)

    assert len(chunks) == math.ceil(n / size) == num_chunks(n, size)
    for chunk in chunks[:-1]:
        assert len(chunk) == size
    if chunks:
        expected_last = n % size or size
        assert len(chunks[-1]) == expected_last

    flat = [i for chunk in chunks for i in chunk]
    assert flat == ids


def test_empty_input_gives_no_chunks():
    assert chunk_ids([], 200) == []


@pytest.mark.parametrize("size", [0, -1])
def test_non_positive_chunk_size_rejected(size):
    with pytest.raises(ValueError):
        chunk_ids([1, 2, 3], size)


def test_chunks_are_independent_lists():
    ids = (1, 2, 3)
    chunks = chunk_ids(ids, 2)
    assert chunks == [[1, 2], [3]]
    chunks[0].append(99)
    assert ids == (1, 2, 3)
