import random

import pytest

from minesolver.errors import BadIndex, CapabilityFault
from minesolver.field import DETONATED, NativeMinefield, Outcome
from minesolver.scripted import ScriptedFieldBuilder, ScriptedMinefield


class TestOutcome:
    def test_cleared_carries_count(self):
        outcome = Outcome.cleared(3)
        assert not outcome.detonated
        assert outcome.count == 3

    def test_detonated(self):
        assert DETONATED.detonated

    def test_count_out_of_range(self):
        with pytest.raises(ValueError):
            Outcome.cleared(9)


class TestNativeMinefield:
    def test_rejects_invalid_configuration(self):
        with pytest.raises(ValueError):
            NativeMinefield(0, 5, 1)
        with pytest.raises(ValueError):
            NativeMinefield(5, 5, -1)
        with pytest.raises(ValueError):
            NativeMinefield(3, 3, 9)

    def test_mines_placed_lazily_on_first_sweep(self):
        field = NativeMinefield(10, 10, 10, rng=random.Random(1))

        assert not field.is_placed
        assert field.mines == set()

        field.sweep(4, 4)

        assert field.is_placed
        assert len(field.mines) == 10
        assert (4, 4) not in field.mines

    @pytest.mark.parametrize("seed", range(25))
    def test_first_sweep_at_origin_never_detonates(self, seed):
        # 99 mines on 100 cells: every cell but the first swept one is a mine
        field = NativeMinefield(10, 10, 99, rng=random.Random(seed))

        outcome = field.sweep(0, 0)

        assert outcome == Outcome.cleared(3)
        assert (0, 0) not in field.mines

    def test_same_seed_same_placement(self):
        a = NativeMinefield(16, 16, 40, rng=random.Random(7))
        b = NativeMinefield(16, 16, 40, rng=random.Random(7))
        a.sweep(0, 0)
        b.sweep(0, 0)

        assert a.mines == b.mines

    def test_counts_neighbouring_mines(self, four_by_four_field):
        assert four_by_four_field.sweep(0, 0) == Outcome.cleared(0)
        assert four_by_four_field.sweep(1, 2) == Outcome.cleared(2)
        assert four_by_four_field.sweep(3, 2) == Outcome.cleared(2)
        assert four_by_four_field.sweep(2, 1) == DETONATED

    def test_from_mines_rejects_out_of_bounds(self):
        with pytest.raises(BadIndex):
            NativeMinefield.from_mines(3, 3, [(3, 0)])

    def test_sweep_out_of_bounds(self):
        field = NativeMinefield(3, 3, 1)
        with pytest.raises(BadIndex):
            field.sweep(-1, 0)


class _FakeScript:
    class ExplosionException(Exception):
        pass

    def __init__(self, answers):
        self.answers = answers

    def sweep_cell(self, column, row):
        answer = self.answers[(column, row)]
        if isinstance(answer, Exception):
            raise answer
        return answer


class TestScriptedMinefield:
    def test_maps_results_and_explosions(self):
        script = _FakeScript({
            (0, 0): 2,
            (1, 0): _FakeScript.ExplosionException(),
        })
        field = ScriptedMinefield(script, 2, 1, 1)

        assert field.sweep(0, 0) == Outcome.cleared(2)
        assert field.sweep(1, 0) == DETONATED

    def test_other_failures_are_capability_faults(self):
        field = ScriptedMinefield(_FakeScript({(0, 0): RuntimeError("boom")}), 1, 1, 0)

        with pytest.raises(CapabilityFault) as excinfo:
            field.sweep(0, 0)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("answer", ["many", True, 2.7, 2.0, 9, -1, None])
    def test_nonsense_answer_is_capability_fault(self, answer):
        field = ScriptedMinefield(_FakeScript({(0, 0): answer}), 1, 1, 0)

        with pytest.raises(CapabilityFault):
            field.sweep(0, 0)

    def test_sweep_out_of_bounds(self):
        field = ScriptedMinefield(_FakeScript({}), 2, 2, 1)
        with pytest.raises(BadIndex):
            field.sweep(2, 0)


class TestScriptedFieldBuilder:
    def test_bundled_script_presets(self):
        builder = ScriptedFieldBuilder.bundled()

        assert builder.presets["beginner"][:3] == (10, 10, 10)
        assert builder.presets["intermediate"][:3] == (16, 16, 40)
        assert builder.presets["expert"][:3] == (30, 16, 99)

    def test_bundled_field_first_sweep_is_safe(self):
        builder = ScriptedFieldBuilder.bundled()

        for seed in range(10):
            field = builder.build("expert", seed=seed)
            assert (field.width, field.height, field.mine_count) == (30, 16, 99)
            assert not field.sweep(0, 0).detonated

    def test_unknown_preset(self):
        with pytest.raises(CapabilityFault):
            ScriptedFieldBuilder.bundled().build("nightmare")

    def test_script_without_field_class(self, tmp_path):
        script = tmp_path / "empty_field.py"
        script.write_text("BEGINNER_FIELD = {'width': 2, 'height': 2, 'number_of_mines': 1}\n")

        with pytest.raises(CapabilityFault):
            ScriptedFieldBuilder.from_source(script)

    def test_script_that_fails_to_execute(self, tmp_path):
        script = tmp_path / "broken_field.py"
        script.write_text("raise RuntimeError('cannot start')\n")

        with pytest.raises(CapabilityFault):
            ScriptedFieldBuilder.from_source(script)

    def test_malformed_preset(self, tmp_path):
        script = tmp_path / "odd_field.py"
        script.write_text(
            "class MineField:\n"
            "    pass\n"
            "BEGINNER_FIELD = {'width': 2}\n"
        )

        with pytest.raises(CapabilityFault):
            ScriptedFieldBuilder.from_source(script)
