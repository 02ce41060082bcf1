from __future__ import annotations

from itertools import permutations

import pytest

from irrep_labels import ReductionRequest, u3_irrep_dimension
from lowering_steps import LoweringStepCache
from u3_reduction import U3Irrep, UNtoU3, main, reduce_irrep


@pytest.fixture(scope="module")
def cache() -> LoweringStepCache:
    return LoweringStepCache()


@pytest.fixture(scope="module")
def gen_10401(cache: LoweringStepCache) -> UNtoU3:
    gen = UNtoU3(cache)
    gen.generate_xyz(2)
    gen.generate_u3_weights([1, 0, 4, 0, 1], 6)
    return gen


def test_end_to_end_total_dimension_is_405(gen_10401: UNtoU3) -> None:
    total = 0
    for weight in gen_10401.mult_map:
        D_l = gen_10401.level_dimensionality(weight)
        if D_l:
            total += D_l * u3_irrep_dimension(weight)
    assert total == 405
    assert gen_10401.total_dimension() == 405


def test_map_total_equals_number_of_descent_paths(gen_10401: UNtoU3) -> None:
    assert sum(gen_10401.mult_map.values()) == 405


def test_weights_carry_n_times_label_sum(gen_10401: UNtoU3) -> None:
    # n = 2, labels [4,2,2,2,2,0] sum to 12
    assert all(sum(w) == 24 for w in gen_10401.mult_map)


def test_weight_multiplicities_are_permutation_symmetric(gen_10401: UNtoU3) -> None:
    mult = gen_10401.mult_map
    for weight, count in mult.items():
        for perm in permutations(weight):
            assert mult.get(perm, 0) == count


def test_irreps_are_dominant_with_positive_multiplicity(gen_10401: UNtoU3) -> None:
    irreps = gen_10401.u3_irreps()
    assert irreps
    for irrep in irreps:
        f1, f2, f3 = irrep.weight
        assert f1 >= f2 >= f3
        assert irrep.multiplicity > 0
    assert irreps == sorted(irreps, key=lambda i: i.weight, reverse=True)


def test_non_dominant_weight_has_zero_level_dimensionality(gen_10401: UNtoU3) -> None:
    assert gen_10401.level_dimensionality((0, 12, 12)) == 0
    assert gen_10401.level_dimensionality((12, 0, 12)) == 0
    assert gen_10401.level_dimensionality((1, 2, 3)) == 0


def test_absent_dominant_weight_is_a_caller_error(gen_10401: UNtoU3) -> None:
    with pytest.raises(AssertionError):
        gen_10401.level_dimensionality((100, 0, 0))


def test_single_particle_has_one_path(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    gen.generate_xyz(0)
    mult = gen.generate_u3_weights([0, 0, 0, 0, 1], 1)
    assert mult == {(0, 0, 0): 1}
    assert gen.level_dimensionality((0, 0, 0)) == 1


def test_empty_row_counts_running_weight(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    assert len(cache.lookup_by_pattern([0, 0, 0, 0, 0])) == 0
    gen.reduce([0, 0, 0, 0, 0], 0, (3, 2, 1))
    assert gen.mult_map == {(3, 2, 1): 1}


def test_fundamental_irrep_of_p_shell(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    gen.generate_xyz(1)
    mult = gen.generate_u3_weights([0, 0, 0, 1, 2], 3)
    assert mult == {(1, 0, 0): 1, (0, 1, 0): 1, (0, 0, 1): 1}
    assert [i.weight for i in gen.u3_irreps()] == [(1, 0, 0)]
    assert gen.level_dimensionality((1, 0, 0)) == 1


def test_symmetric_irrep_of_p_shell_is_itself(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    gen.generate_xyz(1)
    gen.generate_u3_weights([1, 0, 0, 0, 2], 3)
    irreps = gen.u3_irreps()
    assert [(i.weight, i.multiplicity) for i in irreps] == [((4, 0, 0), 1)]
    assert irreps[0].dimension == 15


def test_closed_shell_is_scalar(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    gen.generate_xyz(2)
    assert gen.generate_u3_weights([0, 0, 0, 6, 0], 6) == {(4, 4, 4): 1}
    assert gen.level_dimensionality((4, 4, 4)) == 1


def test_generate_resets_map(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    gen.generate_xyz(1)
    first = dict(gen.generate_u3_weights([1, 0, 0, 0, 2], 3))
    second = gen.generate_u3_weights([1, 0, 0, 0, 2], 3)
    assert first == second
    assert sum(second.values()) == 15


def test_preconditions_are_asserted(cache: LoweringStepCache) -> None:
    gen = UNtoU3(cache)
    with pytest.raises(AssertionError):
        gen.generate_u3_weights([1, 0, 4, 0, 1], 6)  # no quanta table yet
    gen.generate_xyz(2)
    with pytest.raises(AssertionError):
        gen.generate_u3_weights([1, 0, 4, 0, 1], 5)
    gen.generate_xyz(3)
    with pytest.raises(AssertionError):
        gen.generate_u3_weights([1, 0, 4, 0, 1], 6)


def test_reduce_irrep_checks_against_analytic_dimension(cache: LoweringStepCache) -> None:
    result = reduce_irrep(ReductionRequest(2, [1, 0, 4, 0, 1]), cache=cache)
    assert result.un_dimension == 405
    assert result.total_dimension == 405
    assert result.consistent
    assert all(isinstance(i, U3Irrep) for i in result.irreps)


def test_reduce_irrep_larger_shell(cache: LoweringStepCache) -> None:
    result = reduce_irrep(ReductionRequest(3, [1, 0, 0, 0, 9]), cache=cache)
    assert result.un_dimension == 715
    assert result.consistent


def test_reduce_irrep_rejects_mismatched_request(cache: LoweringStepCache) -> None:
    with pytest.raises(ValueError, match="mismatch"):
        reduce_irrep(ReductionRequest(3, [1, 0, 4, 0, 1]), cache=cache)


def test_main_prints_totals(capsys: pytest.CaptureFixture[str]) -> None:
    main(["2", "1", "0", "4", "0", "1"])
    out = capsys.readouterr().out
    assert "U(N) irrep dim = 405" in out
    assert "U(3) irreps total dim = 405" in out
