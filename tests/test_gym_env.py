import numpy as np
import pytest

from broadside.board import CellState
from broadside.gym_env import BroadsideEnv


def _ship_actions(env):
    return [c.y * env.size + c.x for c in sorted(env.board.occupied(), key=lambda c: (c.y, c.x))]


def test_reset_returns_empty_observation():
    env = BroadsideEnv()
    obs, info = env.reset(seed=1)
    assert obs.shape == (2, 10, 10)
    assert obs.dtype == np.float32
    assert not obs.any()
    assert info == {}
    assert len(env.board.ships) == 5
    assert env.observation_space.contains(obs)


def test_seeded_resets_are_reproducible():
    a, b = BroadsideEnv(), BroadsideEnv()
    a.reset(seed=11)
    b.reset(seed=11)
    assert a.board == b.board


def test_step_before_reset_raises():
    with pytest.raises(RuntimeError):
        BroadsideEnv().step(0)


def test_miss_then_repeat_is_penalised():
    env = BroadsideEnv()
    env.reset(seed=2)
    water = next(a for a in range(100) if a not in set(_ship_actions(env)))
    obs, reward, done, truncated, info = env.step(water)
    assert (reward, done, truncated) == (-1.0, False, False)
    assert info == {"result": CellState.MISS.value, "shots": 1}
    y, x = divmod(water, 10)
    assert obs[1, y, x] == 1.0

    board_before = env.board
    obs2, reward, done, _, info = env.step(water)
    assert reward == -10.0
    assert info == {"result": "repeat"}
    assert env.board == board_before
    assert np.array_equal(obs, obs2)
    assert not env.action_masks()[water]


def test_sinking_whole_fleet_ends_episode():
    env = BroadsideEnv(reward_dict={"win": 1000.0})
    env.reset(seed=3)
    actions = _ship_actions(env)
    rewards = []
    done = False
    for action in actions:
        _, reward, done, _, info = env.step(action)
        rewards.append(reward)
    assert done
    assert rewards[-1] == 1000.0
    # Four ships sunk before the last one: each sinking adds the bonus
    assert sum(1 for r in rewards[:-1] if r == 25.0) == 4
    assert info["shots"] == 17
    assert env.action_masks().sum() == 100 - 17


def test_render_shows_shots():
    env = BroadsideEnv(size=6)
    env.reset(seed=4)
    env.step(_ship_actions(env)[0])
    rows = env.render().splitlines()
    assert len(rows) == 6
    assert "X" in env.render() or "#" in env.render()
