import numpy as np

from pegrid.core import (
    HostAtomSet,
    UnitCell,
    energies_from_images,
    is_near_singular,
    kelvin_to_kj_per_mol,
    kj_per_mol_to_kelvin,
    lj_energy_at_point,
    nearest_image_distance,
    periodic_images,
    replication_factors,
)


EPS_CH4 = 148.0
SIGMA_CH4 = 3.73


def _cubic_cell(a: float) -> UnitCell:
    return UnitCell(a=a, b=a, c=a, f_to_cartesian=np.eye(3) * a)


def _single_atom(eps: float = EPS_CH4, sigma: float = SIGMA_CH4) -> HostAtomSet:
    return HostAtomSet(
        fractional_positions=np.zeros((1, 3)),
        epsilons=np.array([eps]),
        sigmas=np.array([sigma]),
    )


def test_point_beyond_cutoff_of_every_image_has_zero_energy() -> None:
    cell = _cubic_cell(30.0)
    rep = replication_factors(cell, 12.5)
    energy = lj_energy_at_point([0.5, 0.5, 0.5], cell, _single_atom(), rep, 12.5)
    assert energy == 0.0


def test_energy_vanishes_at_sigma_and_is_minus_epsilon_at_well_bottom() -> None:
    a = 30.0
    cell = _cubic_cell(a)
    rep = replication_factors(cell, 12.5)
    atoms = _single_atom()

    at_sigma = lj_energy_at_point([SIGMA_CH4 / a, 0.0, 0.0], cell, atoms, rep, 12.5)
    assert np.isclose(at_sigma, 0.0, atol=1e-9)

    r_min = 2.0 ** (1.0 / 6.0) * SIGMA_CH4
    at_min = lj_energy_at_point([0.0, r_min / a, 0.0], cell, atoms, rep, 12.5)
    assert np.isclose(at_min, -EPS_CH4, rtol=1e-12)


def test_hard_cutoff_has_no_tail() -> None:
    a = 30.0
    cell = _cubic_cell(a)
    rep = replication_factors(cell, 12.5)
    atoms = _single_atom()
    inside = lj_energy_at_point([0.0, 0.0, 12.4 / a], cell, atoms, rep, 12.5)
    outside = lj_energy_at_point([0.0, 0.0, 12.6 / a], cell, atoms, rep, 12.5)
    sr6 = (SIGMA_CH4 / 12.4) ** 6
    assert np.isclose(inside, 4.0 * EPS_CH4 * (sr6 * sr6 - sr6), rtol=1e-12)
    assert outside == 0.0


def test_pair_at_exactly_the_cutoff_distance_is_counted() -> None:
    # 12.5 / 32 is exact in binary, so r^2 == cutoff^2 with no rounding.
    a = 32.0
    cell = _cubic_cell(a)
    rep = replication_factors(cell, 12.5)
    energy = lj_energy_at_point([0.0, 0.0, 12.5 / a], cell, _single_atom(), rep, 12.5)
    sr6 = (SIGMA_CH4 / 12.5) ** 6
    assert energy != 0.0
    assert np.isclose(energy, 4.0 * EPS_CH4 * (sr6 * sr6 - sr6), rtol=1e-12)


def test_all_periodic_images_within_cutoff_contribute() -> None:
    a = 10.0
    cell = _cubic_cell(a)
    cutoff = 12.5
    rep = replication_factors(cell, cutoff)
    point = np.array([0.5, 0.5, 0.5])
    energy = lj_energy_at_point(point, cell, _single_atom(), rep, cutoff)

    expected = 0.0
    for dx in range(-3, 4):
        for dy in range(-3, 4):
            for dz in range(-3, 4):
                r = np.linalg.norm((np.array([dx, dy, dz]) - point) * a)
                if r <= cutoff:
                    sr6 = (SIGMA_CH4 / r) ** 6
                    expected += 4.0 * EPS_CH4 * (sr6 * sr6 - sr6)
    assert np.isclose(energy, expected, rtol=1e-12)


def test_energy_is_additive_over_atoms() -> None:
    cell = _cubic_cell(12.0)
    rep = replication_factors(cell, 10.0)
    pos = np.array([[0.1, 0.2, 0.3], [0.7, 0.6, 0.2]])
    eps = np.array([50.0, 120.0])
    sig = np.array([3.0, 3.5])
    both = HostAtomSet(fractional_positions=pos, epsilons=eps, sigmas=sig)
    first = HostAtomSet(fractional_positions=pos[:1], epsilons=eps[:1], sigmas=sig[:1])
    second = HostAtomSet(fractional_positions=pos[1:], epsilons=eps[1:], sigmas=sig[1:])
    point = [0.4, 0.45, 0.8]
    total = lj_energy_at_point(point, cell, both, rep, 10.0)
    parts = lj_energy_at_point(point, cell, first, rep, 10.0) + lj_energy_at_point(point, cell, second, rep, 10.0)
    assert np.isclose(total, parts, rtol=1e-12)


def test_near_singular_points_are_extreme_but_not_clamped() -> None:
    a = 30.0
    cell = _cubic_cell(a)
    rep = replication_factors(cell, 12.5)
    atoms = _single_atom()

    close = [1e-3 / a, 0.0, 0.0]
    energy = lj_energy_at_point(close, cell, atoms, rep, 12.5)
    assert np.isfinite(energy)
    assert energy > 1e20
    assert np.isclose(nearest_image_distance(close, cell, atoms, rep), 1e-3)
    assert is_near_singular(close, cell, atoms, rep)
    assert not is_near_singular([0.5, 0.5, 0.5], cell, atoms, rep)

    on_top = lj_energy_at_point([0.0, 0.0, 0.0], cell, atoms, rep, 12.5)
    assert np.isposinf(on_top)


def test_batch_evaluation_matches_single_points() -> None:
    cell = UnitCell(
        a=10.0,
        b=11.0,
        c=9.0,
        f_to_cartesian=np.array([[10.0, 2.0, 1.0], [0.0, 10.8, 0.5], [0.0, 0.0, 8.9]]),
    )
    atoms = HostAtomSet(
        fractional_positions=np.array([[0.1, 0.2, 0.3], [0.5, 0.5, 0.9]]),
        epsilons=np.array([30.0, 80.0]),
        sigmas=np.array([3.1, 3.4]),
    )
    rep = replication_factors(cell, 8.0)
    images = periodic_images(cell, atoms, rep)
    assert images.size == atoms.n_atoms * rep.n_images

    frac = np.array([[0.0, 0.0, 0.0], [0.3, 0.7, 0.1], [0.9, 0.4, 0.6]])
    batch = energies_from_images(cell.to_cartesian(frac), images, 8.0)
    single = [lj_energy_at_point(p, cell, atoms, rep, 8.0) for p in frac]
    assert np.allclose(batch, single, rtol=1e-12, atol=0.0)


def test_empty_host_gives_zero_energy() -> None:
    cell = _cubic_cell(10.0)
    atoms = HostAtomSet(fractional_positions=np.zeros((0, 3)), epsilons=np.zeros(0), sigmas=np.zeros(0))
    rep = replication_factors(cell, 12.5)
    assert lj_energy_at_point([0.2, 0.2, 0.2], cell, atoms, rep, 12.5) == 0.0
    assert nearest_image_distance([0.2, 0.2, 0.2], cell, atoms, rep) == float("inf")


def test_kelvin_kj_per_mol_conversion() -> None:
    assert np.isclose(kelvin_to_kj_per_mol(1000.0), 8.314)
    assert np.isclose(kelvin_to_kj_per_mol(-EPS_CH4), -1.230472)
    values = np.array([-50.0, 0.0, 12.5])
    assert np.allclose(kj_per_mol_to_kelvin(kelvin_to_kj_per_mol(values)), values)
