import random

import pytest

from upmsp.mechanisms import LearningAutomata, UniformMechanism, build_mechanism


def test_probabilities_start_proportional_to_priority() -> None:
    la = LearningAutomata([1, 1, 2], rng=random.Random(0))
    assert la.probabilities.tolist() == pytest.approx([0.25, 0.25, 0.5])


def test_reward_and_penalty_keep_a_distribution() -> None:
    la = LearningAutomata([1, 1, 1, 1], learning_rate=0.1, rng=random.Random(0))
    for step in range(200):
        action = la.next_action()
        assert 0 <= action < 4
        before = la.probabilities[action]
        reward = 1.0 if step % 3 else 0.0
        la.update(reward)
        assert la.probabilities.sum() == pytest.approx(1.0)
        assert (la.probabilities >= 0).all()
        if reward:
            assert la.probabilities[action] > before
        else:
            assert la.probabilities[action] < before


def test_rewarded_action_dominates() -> None:
    la = LearningAutomata([1, 1, 1], learning_rate=0.05, rng=random.Random(1))
    for _ in range(300):
        if la.next_action() == 2:
            la.update(1.0)
    assert la.probabilities.argmax() == 2


def test_single_move_is_left_alone() -> None:
    la = LearningAutomata([3], rng=random.Random(0))
    assert la.next_action() == 0
    la.update(0.0)
    assert la.probabilities.tolist() == [1.0]


def test_reset_forgets_learning() -> None:
    la = LearningAutomata([1, 1], learning_rate=0.5, rng=random.Random(0))
    la.next_action()
    la.update(1.0)
    la.reset([1, 1])
    assert la.probabilities.tolist() == [0.5, 0.5]


def test_learning_parameter_checks() -> None:
    with pytest.raises(ValueError):
        LearningAutomata([1, 0])
    with pytest.raises(ValueError):
        LearningAutomata([1], learning_rate=0.0)
    with pytest.raises(ValueError):
        LearningAutomata([1, 1]).update(1.0)


def test_uniform_covers_every_action() -> None:
    mech = UniformMechanism([1, 5, 1], rng=random.Random(0))
    seen = {mech.next_action() for _ in range(200)}
    assert seen == {0, 1, 2}
    with pytest.raises(ValueError):
        UniformMechanism([]).next_action()


def test_factory() -> None:
    assert isinstance(build_mechanism("uniform", [1]), UniformMechanism)
    la = build_mechanism("learning", [1, 1], learning_rate=0.2, epsilon=0.5)
    assert isinstance(la, LearningAutomata)
    assert la.penalty_rate == pytest.approx(0.1)
    with pytest.raises(TypeError):
        build_mechanism("uniform", [1], learning_rate=0.1)
    with pytest.raises(ValueError):
        build_mechanism("bandit", [1])
