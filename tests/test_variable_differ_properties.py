"""Property-based tests for the variable differ and the full reconciliation pass.

**Property 6: Summary counts add up to the number of changes**
**Property 7: Reconciliation is idempotent**
**Property 8: Deletion gating**
**Property 9: Per-mode updates**
**Property 10: Duplicate names never raise**
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tokensync.models.config import ReconciliationSettings
from tokensync.models.variable import (
    AliasRef,
    LiteralValue,
    LocalVariable,
    RemoteCollection,
    RemoteMode,
    RemoteModeValue,
    RemoteVariable,
    RGBColor,
    VariableType,
)
from tokensync.sync.aggregator import calculate_diff
from tokensync.sync.models import ChangeType
from tokensync.sync.variable_differ import VariableDiffer

MODE_NAMES = ["light", "dark", "desktop", "mobile"]
VARIABLE_NAMES = [
    "brand/primary",
    "brand/secondary",
    "spacing/sm",
    "spacing/md",
    "typography/page/hero/fontSize",
    "legacy/spacing",
]

channels = st.floats(min_value=0.0, max_value=1.0, allow_nan=False, allow_infinity=False)
colors = st.builds(RGBColor, r=channels, g=channels, b=channels)
literal_values = st.one_of(
    st.booleans(),
    st.integers(min_value=-500, max_value=500),
    st.floats(min_value=-500, max_value=500, allow_nan=False, allow_infinity=False),
    st.text(alphabet="abcdef -_", max_size=10),
    colors,
)
token_values = st.one_of(
    literal_values.map(lambda v: LiteralValue(value=v)),
    st.sampled_from(VARIABLE_NAMES).map(lambda n: AliasRef(name=n)),
)


@st.composite
def local_variable_strategy(draw: st.DrawFn, name: str | None = None) -> LocalVariable:
    """Generate a random LocalVariable."""
    if name is None:
        name = draw(st.sampled_from(VARIABLE_NAMES))
    modes = draw(st.lists(st.sampled_from(MODE_NAMES), unique=True, min_size=1))
    alias_target = draw(st.none() | st.sampled_from(VARIABLE_NAMES))
    return LocalVariable(
        name=name,
        type=VariableType.COLOR,
        mode_values={mode: draw(token_values) for mode in modes},
        alias_target=alias_target,
    )


@st.composite
def remote_variable_strategy(draw: st.DrawFn, name: str | None = None) -> RemoteVariable:
    """Generate a random RemoteVariable."""
    if name is None:
        name = draw(st.sampled_from(VARIABLE_NAMES))
    modes = draw(st.lists(st.sampled_from(MODE_NAMES), unique=True))
    mode_values = []
    for mode in modes:
        if draw(st.booleans()):
            target = draw(st.sampled_from(VARIABLE_NAMES))
            mode_values.append(
                RemoteModeValue(
                    mode_id=f"1:{mode}",
                    mode_name=mode,
                    alias_id=f"VariableID:{target}",
                    alias_name=target,
                )
            )
        else:
            mode_values.append(
                RemoteModeValue(mode_id=f"1:{mode}", mode_name=mode, value=draw(literal_values))
            )
    return RemoteVariable(
        id=f"VariableID:{draw(st.integers(min_value=1, max_value=10_000))}",
        name=name,
        resolved_type=VariableType.COLOR,
        collection_id="VariableCollectionId:1:1",
        collection_name="Tokens",
        mode_values=mode_values,
    )


settings_strategy = st.builds(
    ReconciliationSettings,
    include_deletes=st.booleans(),
    preserve_unmanaged=st.booleans(),
)


def make_collection(modes: list[str]) -> RemoteCollection:
    return RemoteCollection(
        id="VariableCollectionId:1:1",
        name="Tokens",
        modes=[RemoteMode(mode_id=f"1:{mode}", name=mode) for mode in modes],
        default_mode_id=f"1:{modes[0]}" if modes else "",
    )


def color_local(name: str, **modes: RGBColor) -> LocalVariable:
    return LocalVariable(name=name, type=VariableType.COLOR, mode_values=modes)


def color_remote(name: str, variable_id: str = "VariableID:1", **modes: RGBColor) -> RemoteVariable:
    return RemoteVariable(
        id=variable_id,
        name=name,
        resolved_type=VariableType.COLOR,
        collection_id="VariableCollectionId:1:1",
        collection_name="Tokens",
        mode_values=[
            RemoteModeValue(mode_id=f"1:{mode}", mode_name=mode, value=value)
            for mode, value in modes.items()
        ],
    )


class TestSummaryCounts:
    """Test Property 6: Summary counts add up to the number of changes."""

    @given(
        local=st.lists(local_variable_strategy(), max_size=6),
        remote=st.lists(remote_variable_strategy(), max_size=6),
        reconciliation=settings_strategy,
    )
    @settings(max_examples=100)
    def test_summary_matches_changes(
        self,
        local: list[LocalVariable],
        remote: list[RemoteVariable],
        reconciliation: ReconciliationSettings,
    ) -> None:
        """Test that per-type counts always sum to len(changes)."""
        diff = calculate_diff("Tokens", local, make_collection(MODE_NAMES), remote, reconciliation)

        summary = diff.summary
        assert summary.add + summary.update + summary.delete + summary.unchanged == len(
            diff.changes
        )
        for change_type in ChangeType:
            assert getattr(summary, change_type.value) == len(diff.changes_of(change_type))

    @given(
        local=st.lists(local_variable_strategy(), max_size=6),
        remote=st.lists(remote_variable_strategy(), max_size=6),
    )
    @settings(max_examples=50)
    def test_every_local_variable_is_classified(
        self, local: list[LocalVariable], remote: list[RemoteVariable]
    ) -> None:
        """Test that each local variable yields one ADD, one UNCHANGED, or UPDATEs."""
        changes = VariableDiffer().diff(local, remote)

        per_variable = [c for c in changes if c.type != ChangeType.DELETE]
        add_or_unchanged = [
            c for c in per_variable if c.type in (ChangeType.ADD, ChangeType.UNCHANGED)
        ]
        variables_with_updates = {
            id(c.local_variable) for c in per_variable if c.type == ChangeType.UPDATE
        }
        assert len(add_or_unchanged) + len(variables_with_updates) == len(local)


class TestIdempotence:
    """Test Property 7: Reconciliation is idempotent."""

    @given(
        local=st.lists(local_variable_strategy(), max_size=5),
        remote=st.lists(remote_variable_strategy(), max_size=5),
        reconciliation=settings_strategy,
    )
    @settings(max_examples=50)
    def test_same_inputs_same_diff(
        self,
        local: list[LocalVariable],
        remote: list[RemoteVariable],
        reconciliation: ReconciliationSettings,
    ) -> None:
        """Test that two passes over identical inputs serialize identically."""
        collection = make_collection(["light", "dark"])

        first = calculate_diff("Tokens", local, collection, remote, reconciliation)
        second = calculate_diff("Tokens", local, collection, remote, reconciliation)

        assert first.model_dump_json() == second.model_dump_json()

    def test_inputs_are_not_mutated(self) -> None:
        """Test that a pass leaves its input lists untouched."""
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        remote = [color_remote("legacy/spacing", light=RGBColor(r=0, g=0, b=0))]
        local_before = list(local)
        remote_before = list(remote)

        calculate_diff(
            "Tokens",
            local,
            None,
            remote,
            ReconciliationSettings(include_deletes=True, preserve_unmanaged=False),
        )

        assert local == local_before
        assert remote == remote_before


class TestDeletionGating:
    """Test Property 8: Deletion gating.

    Only include_deletes=True with preserve_unmanaged=False produces DELETE
    changes.
    """

    @given(
        remote=st.lists(remote_variable_strategy(), min_size=1, max_size=5),
        reconciliation=settings_strategy,
    )
    @settings(max_examples=100)
    def test_delete_only_in_permitting_configuration(
        self, remote: list[RemoteVariable], reconciliation: ReconciliationSettings
    ) -> None:
        """Test that DELETE appears iff deletes are enabled and unmanaged are not kept."""
        diff = calculate_diff("Tokens", [], make_collection(MODE_NAMES), remote, reconciliation)

        deletes = diff.changes_of(ChangeType.DELETE)
        if reconciliation.include_deletes and not reconciliation.preserve_unmanaged:
            assert [c.variable_name for c in deletes] == [r.name for r in remote]
        else:
            assert deletes == []

    def test_include_deletes_false_never_deletes(self) -> None:
        remote = [color_remote("legacy/spacing", light=RGBColor(r=0, g=0, b=0))]

        diff = calculate_diff(
            "Tokens",
            [],
            make_collection(["light"]),
            remote,
            ReconciliationSettings(include_deletes=False, preserve_unmanaged=False),
        )

        assert diff.summary.delete == 0

    def test_preserve_unmanaged_wins_over_include_deletes(self) -> None:
        """Test the documented conflict: preserve_unmanaged suppresses deletions."""
        remote = [color_remote("legacy/spacing", light=RGBColor(r=0, g=0, b=0))]

        diff = calculate_diff(
            "Tokens",
            [],
            make_collection(["light"]),
            remote,
            ReconciliationSettings(include_deletes=True, preserve_unmanaged=True),
        )

        assert diff.summary.delete == 0
        assert diff.changes == []

    def test_remote_only_variable_deleted_when_permitted(self) -> None:
        """Test that legacy/spacing yields exactly one DELETE with its remote values."""
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        remote = [
            color_remote("brand/primary", "VariableID:1", light=RGBColor(r=1, g=0, b=0)),
            color_remote("legacy/spacing", "VariableID:2", light=RGBColor(r=0, g=0, b=0)),
        ]

        diff = calculate_diff(
            "Tokens",
            local,
            make_collection(["light"]),
            remote,
            ReconciliationSettings(include_deletes=True, preserve_unmanaged=False),
        )

        deletes = diff.changes_of(ChangeType.DELETE)
        assert len(deletes) == 1
        assert deletes[0].variable_name == "legacy/spacing"
        assert deletes[0].remote_id == "VariableID:2"
        assert deletes[0].mode_name is None
        assert deletes[0].old_value == {"light": LiteralValue(value=RGBColor(r=0, g=0, b=0))}
        assert diff.changes[-1] == deletes[0]

    def test_mode_removals_hidden_without_include_deletes(self) -> None:
        """Test that modes_to_remove is reported only when include_deletes is on."""
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        collection = make_collection(["light", "dark"])

        hidden = calculate_diff("Tokens", local, collection, [], ReconciliationSettings())
        shown = calculate_diff(
            "Tokens", local, collection, [], ReconciliationSettings(include_deletes=True)
        )

        assert hidden.modes_to_remove == []
        assert shown.modes_to_remove == ["dark"]


class TestPerModeUpdates:
    """Test Property 9: Per-mode updates."""

    def test_first_sync_adds_everything(self) -> None:
        """Test that with no remote collection every local variable is an ADD."""
        local = [
            color_local(
                "brand/primary",
                light=RGBColor(r=1, g=0, b=0),
                dark=RGBColor(r=0, g=0, b=1),
            )
        ]

        diff = calculate_diff("Tokens", local, None, [])

        assert len(diff.changes) == 1
        change = diff.changes[0]
        assert change.type == ChangeType.ADD
        assert change.variable_name == "brand/primary"
        assert change.mode_name is None
        assert set(change.new_value) == {"light", "dark"}
        assert diff.modes_to_add == ["light", "dark"]
        assert diff.modes_to_remove == []
        assert diff.collection_id is None

    def test_identical_color_is_unchanged(self) -> None:
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        remote = [color_remote("brand/primary", light=RGBColor(r=1, g=0, b=0))]

        diff = calculate_diff("Tokens", local, make_collection(["light"]), remote)

        assert diff.summary.unchanged == 1
        assert diff.summary.update == 0
        assert diff.changes[0].remote_id == "VariableID:1"

    def test_changed_color_yields_one_update(self) -> None:
        local = [color_local("brand/primary", light=RGBColor(r=0.5, g=0.5, b=0.5))]
        remote = [color_remote("brand/primary", light=RGBColor(r=0.6, g=0.5, b=0.5))]

        diff = calculate_diff("Tokens", local, make_collection(["light"]), remote)

        assert diff.summary.update == 1
        change = diff.changes[0]
        assert change.type == ChangeType.UPDATE
        assert change.mode_name == "light"
        assert change.old_value == LiteralValue(value=RGBColor(r=0.6, g=0.5, b=0.5))
        assert change.new_value == LiteralValue(value=RGBColor(r=0.5, g=0.5, b=0.5))

    def test_three_changed_modes_yield_three_updates(self) -> None:
        """Test that updates are never aggregated across modes."""
        local = [
            LocalVariable(
                name="spacing/md",
                type=VariableType.NUMBER,
                mode_values={"desktop": 24, "tablet": 20, "mobile": 16},
            )
        ]
        remote = [
            RemoteVariable(
                id="VariableID:9",
                name="spacing/md",
                resolved_type="FLOAT",
                mode_values=[
                    RemoteModeValue(mode_id="1:0", mode_name="desktop", value=20),
                    RemoteModeValue(mode_id="1:1", mode_name="tablet", value=16),
                    RemoteModeValue(mode_id="1:2", mode_name="mobile", value=12),
                ],
            )
        ]

        changes = VariableDiffer().diff(local, remote)

        assert [c.type for c in changes] == [ChangeType.UPDATE] * 3
        assert [c.mode_name for c in changes] == ["desktop", "tablet", "mobile"]
        assert all(c.remote_id == "VariableID:9" for c in changes)

    def test_mode_missing_remotely_is_an_update(self) -> None:
        """Test that a mode present locally but absent remotely is an UPDATE from None."""
        local = [
            color_local(
                "brand/primary",
                light=RGBColor(r=1, g=0, b=0),
                dark=RGBColor(r=0, g=0, b=1),
            )
        ]
        remote = [color_remote("brand/primary", light=RGBColor(r=1, g=0, b=0))]

        changes = VariableDiffer().diff(local, remote)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.UPDATE
        assert changes[0].mode_name == "dark"
        assert changes[0].old_value is None

    def test_remote_mode_without_value_is_an_update(self) -> None:
        """Test that a recorded mode with no value compares unequal."""
        local = [LocalVariable(name="flag/on", type="BOOLEAN", mode_values={"light": True})]
        remote = [
            RemoteVariable(
                id="VariableID:3",
                name="flag/on",
                resolved_type="BOOLEAN",
                mode_values=[RemoteModeValue(mode_id="1:0", mode_name="light")],
            )
        ]

        changes = VariableDiffer().diff(local, remote)

        assert changes[0].type == ChangeType.UPDATE
        assert changes[0].old_value is None

    def test_variable_alias_overrides_mode_literals(self) -> None:
        """Test that alias_target is what gets compared in every mode."""
        local = [
            LocalVariable(
                name="button/bg",
                type=VariableType.COLOR,
                mode_values={"light": {"r": 1, "g": 1, "b": 1}},
                alias_target="brand/primary",
            )
        ]
        remote = [
            RemoteVariable(
                id="VariableID:4",
                name="button/bg",
                resolved_type=VariableType.COLOR,
                mode_values=[
                    RemoteModeValue(
                        mode_id="1:0",
                        mode_name="light",
                        alias_id="VariableID:1",
                        alias_name="brand/primary",
                    )
                ],
            )
        ]

        changes = VariableDiffer().diff(local, remote)

        assert [c.type for c in changes] == [ChangeType.UNCHANGED]

    def test_alias_retarget_is_an_update(self) -> None:
        local = [
            LocalVariable(
                name="button/bg",
                type=VariableType.COLOR,
                mode_values={"light": "{brand/secondary}"},
            )
        ]
        remote = [
            RemoteVariable(
                id="VariableID:4",
                name="button/bg",
                resolved_type=VariableType.COLOR,
                mode_values=[
                    RemoteModeValue(
                        mode_id="1:0",
                        mode_name="light",
                        alias_id="VariableID:1",
                        alias_name="brand/primary",
                    )
                ],
            )
        ]

        changes = VariableDiffer().diff(local, remote)

        assert changes[0].type == ChangeType.UPDATE
        assert changes[0].old_value == AliasRef(name="brand/primary")
        assert changes[0].new_value == AliasRef(name="brand/secondary")

    def test_remote_only_modes_are_ignored_per_variable(self) -> None:
        """Test that extra remote modes do not produce updates."""
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        remote = [
            color_remote(
                "brand/primary",
                light=RGBColor(r=1, g=0, b=0),
                dark=RGBColor(r=0, g=0, b=0),
            )
        ]

        changes = VariableDiffer().diff(local, remote)

        assert [c.type for c in changes] == [ChangeType.UNCHANGED]

    def test_change_order_follows_inputs(self) -> None:
        """Test local-order results first, then deletes in remote order."""
        local = [
            color_local("b/new", light=RGBColor(r=0, g=0, b=0)),
            color_local("a/same", light=RGBColor(r=1, g=1, b=1)),
        ]
        remote = [
            color_remote("z/old", "VariableID:3", light=RGBColor(r=0, g=0, b=0)),
            color_remote("a/same", "VariableID:2", light=RGBColor(r=1, g=1, b=1)),
            color_remote("y/old", "VariableID:4", light=RGBColor(r=0, g=0, b=0)),
        ]

        changes = VariableDiffer(
            ReconciliationSettings(include_deletes=True, preserve_unmanaged=False)
        ).diff(local, remote)

        assert [(c.type, c.variable_name) for c in changes] == [
            (ChangeType.ADD, "b/new"),
            (ChangeType.UNCHANGED, "a/same"),
            (ChangeType.DELETE, "z/old"),
            (ChangeType.DELETE, "y/old"),
        ]


class TestDuplicateNames:
    """Test Property 10: Duplicate names never raise.

    Remote lookups are keyed by name alone, so the last remote variable with
    a given name is the one compared.
    """

    def test_duplicate_remote_names_last_write_wins(self) -> None:
        local = [color_local("brand/primary", light=RGBColor(r=1, g=0, b=0))]
        remote = [
            color_remote("brand/primary", "VariableID:old", light=RGBColor(r=0, g=0, b=0)),
            color_remote("brand/primary", "VariableID:new", light=RGBColor(r=1, g=0, b=0)),
        ]

        changes = VariableDiffer().diff(local, remote)

        assert len(changes) == 1
        assert changes[0].type == ChangeType.UNCHANGED
        assert changes[0].remote_id == "VariableID:new"

    def test_duplicate_remote_names_all_deleted_when_unmatched(self) -> None:
        """Test that every remote entry of an unmatched name gets its own DELETE."""
        remote = [
            color_remote("legacy/spacing", "VariableID:1", light=RGBColor(r=0, g=0, b=0)),
            color_remote("legacy/spacing", "VariableID:2", light=RGBColor(r=0, g=0, b=0)),
        ]

        changes = VariableDiffer(
            ReconciliationSettings(include_deletes=True, preserve_unmanaged=False)
        ).diff([], remote)

        assert [c.remote_id for c in changes] == ["VariableID:1", "VariableID:2"]

    def test_duplicate_local_names_are_each_classified(self) -> None:
        local = [
            color_local("brand/primary", light=RGBColor(r=1, g=0, b=0)),
            color_local("brand/primary", light=RGBColor(r=0, g=1, b=0)),
        ]
        remote = [color_remote("brand/primary", light=RGBColor(r=1, g=0, b=0))]

        changes = VariableDiffer().diff(local, remote)

        assert [c.type for c in changes] == [ChangeType.UNCHANGED, ChangeType.UPDATE]


class TestContractViolations:
    """Tests for inputs that are not lists at all."""

    def test_non_list_local_variables_raise(self) -> None:
        with pytest.raises(TypeError, match="local_variables must be a list"):
            VariableDiffer().diff("brand/primary", [])  # type: ignore[arg-type]

    def test_non_list_remote_variables_raise(self) -> None:
        with pytest.raises(TypeError, match="remote_variables must be a list"):
            VariableDiffer().diff([], None)  # type: ignore[arg-type]


class TestNonFiniteChannels:
    """Tests for remote colors carrying NaN or infinite channels."""

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_remote_channel_is_an_update(self, bad: float) -> None:
        local = [color_local("brand/primary", light=RGBColor(r=0.5, g=0, b=0))]
        remote = [color_remote("brand/primary", light=RGBColor(r=bad, g=0, b=0))]

        changes = VariableDiffer().diff(local, remote)

        assert [c.type for c in changes] == [ChangeType.UPDATE]
        assert changes[0].mode_name == "light"
