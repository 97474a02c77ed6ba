import numpy as np
import pytest

import simulation
from conftest import FakeClock, StubRng
from constants import GLYPH_BLANK, GLYPH_LIGHT
from simulation import ConfigurationError, ParticleParams, ParticleSystem
from steam import SteamMotion, SteamRespawn, make_steam_system, steam_glyph


def _params(**overrides):
    values = dict(
        max_lifetime=1000, max_speed=1.0, particle_count=10,
        width=9, height=4, scale=1.0,
        motion=SteamMotion(), respawn=SteamRespawn(), glyphs=steam_glyph,
        rng=np.random.default_rng(0), clock=FakeClock(),
    )
    values.update(overrides)
    return ParticleParams(**values)


def test_even_width_fails_before_pool_is_allocated(monkeypatch):
    allocated = []
    monkeypatch.setattr(simulation, "ParticlePool", lambda n: allocated.append(n))

    with pytest.raises(ConfigurationError, match="width must be odd"):
        ParticleSystem(_params(width=8))
    assert allocated == []


@pytest.mark.parametrize("overrides", [
    {"height": 0},
    {"particle_count": 0},
    {"max_speed": -1.0},
])
def test_other_invalid_parameters_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        ParticleSystem(_params(**overrides))


def test_update_requires_start():
    system = ParticleSystem(_params())
    with pytest.raises(RuntimeError):
        system.update()


def test_start_only_once():
    system = ParticleSystem(_params())
    system.start()
    with pytest.raises(RuntimeError):
        system.start()


def test_update_burns_exactly_the_elapsed_time(clock, rng):
    system = make_steam_system(width=21, height=1000, scale=3.0, particle_count=200,
                               max_lifetime=1_000_000, max_speed=0.5, rng=rng, clock=clock)
    system.start()
    before = system.pool.lifetimes.copy()

    clock.advance(137)
    respawned = system.update()

    survivors = before > 137
    assert respawned == np.count_nonzero(~survivors)
    assert (system.pool.lifetimes[survivors] == before[survivors] - 137).all()


def test_first_update_measures_from_construction():
    clock = FakeClock(start=500)
    system = make_steam_system(width=5, height=3, scale=0.0, particle_count=1,
                               max_lifetime=10_000, max_speed=2.0, rng=StubRng(), clock=clock)
    clock.advance(300)
    system.start()
    clock.advance(200)
    system.update()
    assert system.pool[0].lifetime == 5000 - 500


def test_particles_leaving_the_top_are_respawned(clock):
    system = make_steam_system(width=5, height=3, scale=0.0, particle_count=1,
                               max_lifetime=100_000, max_speed=2.0, rng=StubRng(), clock=clock)
    system.start()

    # speed 1.0 cell per 2s: three cells after 6 seconds
    clock.advance(6000)
    assert system.update() == 1
    assert system.pool[0].y == 0.0
    assert system.total_respawned == 1


def test_every_particle_eventually_respawns(clock, rng):
    max_lifetime, delta = 1000, 100
    system = make_steam_system(width=15, height=1000, scale=2.0, particle_count=50,
                               max_lifetime=max_lifetime, max_speed=0.1, rng=rng, clock=clock)
    system.start()

    seen = np.zeros(50, dtype=bool)
    for _ in range(max_lifetime // delta + 1):
        expected = system.pool.lifetimes - delta
        clock.advance(delta)
        system.update()
        seen |= system.pool.lifetimes != expected
    assert seen.all()


def test_display_shape_holds_across_ticks(clock, rng):
    system = make_steam_system(width=31, height=6, scale=4.0, particle_count=300,
                               max_speed=10.0, rng=rng, clock=clock)
    system.start()
    for _ in range(40):
        clock.advance(100)
        system.update()
        lines = system.display().split("\n")
        assert len(lines) == 6
        assert all(len(line) == 31 for line in lines)
        assert (system.pool.xs >= 0).all() and (system.pool.xs < 31).all()


def test_display_does_not_mutate_particles(clock, rng):
    system = make_steam_system(width=11, height=4, particle_count=30, rng=rng, clock=clock)
    system.start()
    before = system.pool.positions.copy()
    system.display()
    assert (system.pool.positions == before).all()


def test_single_particle_rises_one_row():
    clock = FakeClock()
    system = make_steam_system(width=5, height=3, scale=0.0, particle_count=1,
                               max_lifetime=10_000, max_speed=2.0, rng=StubRng(), clock=clock)
    system.start()
    assert (system.pool[0].x, system.pool[0].y) == (2.0, 0.0)

    clock.advance(2000)
    system.update()
    assert system.pool[0].y == pytest.approx(1.0)
    assert system.pool[0].lifetime == 3000

    assert system.display().split("\n") == [
        GLYPH_BLANK * 5,
        GLYPH_BLANK * 2 + GLYPH_LIGHT + GLYPH_BLANK * 2,
        GLYPH_BLANK * 5,
    ]


def test_stats_track_ticks(clock, rng):
    system = make_steam_system(width=11, height=4, particle_count=30, rng=rng, clock=clock)
    system.start()
    for _ in range(3):
        clock.advance(100)
        system.update()
    stats = system.get_stats()
    assert stats["ticks"] == 3
    assert stats["particles"] == 30
