from __future__ import annotations

import pytest

from ho_quanta import HOQuantaTable


def test_shell_two_enumeration_order() -> None:
    table = HOQuantaTable(2)
    triples = [table.quanta(i) for i in range(len(table))]
    assert triples == [
        (2, 0, 0),
        (1, 1, 0),
        (1, 0, 1),
        (0, 2, 0),
        (0, 1, 1),
        (0, 0, 2),
    ]


@pytest.mark.parametrize("n", [0, 1, 2, 3, 5])
def test_size_and_quanta_sum(n: int) -> None:
    table = HOQuantaTable(n)
    assert table.size == (n + 1) * (n + 2) // 2
    assert table.table.shape == (3, table.size)
    assert (table.table.sum(axis=0) == n).all()
    assert (table.table >= 0).all()


def test_generate_rebuilds_table() -> None:
    table = HOQuantaTable()
    assert table.size == 0
    table.generate(3)
    assert table.n == 3 and table.size == 10
    table.generate(1)
    assert table.n == 1 and table.size == 3
    assert table.column(2).tolist() == [0, 0, 1]


def test_negative_shell_rejected() -> None:
    with pytest.raises(ValueError):
        HOQuantaTable(-1)
