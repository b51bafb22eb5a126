"""Tests for closure discovery and topological leveling."""

import pytest

from weft.core.errors import CyclicDependencyError, GraphConfigurationError
from weft.core.graph import assign_levels, build_closure, collect_dependencies, flatten_tree
from weft.core.task import Task
from weft.core.tree import DependencyTree


def noop(opts):
    return None


class TestFlattenTree:
    """Tests for flatten_tree."""

    def test_flattens_nested_and_dedupes(self):
        """Test a shared task reached through two paths appears once."""
        a = Task(noop)
        b = Task(noop)
        tree = DependencyTree.coerce({"first": a, "second": {"third": {"fourth": a}}, "b": b})

        flat = flatten_tree(tree)

        assert set(flat) == {a.id, b.id}
        assert flat[a.id] is a

    def test_empty_tree(self):
        """Test an empty tree flattens to nothing."""
        assert flatten_tree(DependencyTree()) == {}

    def test_only_direct_entries(self):
        """Test flatten does not follow dependencies of dependencies."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        assert set(flatten_tree(DependencyTree({"b": b}))) == {b.id}


class TestCollectDependencies:
    """Tests for transitive discovery."""

    def test_transitive(self):
        """Test dependencies of dependencies are discovered."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        c = Task(noop, {"b": b})

        found = collect_dependencies(DependencyTree({"c": c}))
        assert set(found) == {a.id, b.id, c.id}

    def test_diamond_discovered_once(self):
        """Test a diamond's shared base is discovered once."""
        base = Task(noop)
        left = Task(noop, {"base": base})
        right = Task(noop, {"base": base})

        found = collect_dependencies(DependencyTree({"l": left, "r": right}))
        assert list(found).count(base.id) == 1
        assert len(found) == 3

    def test_terminates_on_cycle(self):
        """Test discovery halts even when the graph has a cycle."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        a.dependencies = DependencyTree({"b": b})

        found = collect_dependencies(DependencyTree({"a": a}))
        assert set(found) == {a.id, b.id}


class TestAssignLevels:
    """Tests for assign_levels."""

    def test_chain_levels(self):
        """Test a chain gets consecutive levels."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        c = Task(noop, {"b": b})

        levels = assign_levels({t.id: t for t in (a, b, c)})
        assert levels == {a.id: 0, b.id: 1, c.id: 2}

    def test_level_is_one_more_than_max_dependency(self):
        """Test a task sits one above its deepest dependency."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        c = Task(noop, {"b": b})
        d = Task(noop, {"a": a, "nested": {"c": c}})

        levels = assign_levels({t.id: t for t in (d, c, b, a)})
        assert levels[d.id] == 3

    def test_independent_tasks_level_zero(self):
        """Test tasks without dependencies sit at level 0."""
        tasks = [Task(noop) for _ in range(3)]
        levels = assign_levels({t.id: t for t in tasks})
        assert set(levels.values()) == {0}

    def test_cycle_raises(self):
        """Test a cycle raises CyclicDependencyError instead of looping."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        a.dependencies = DependencyTree({"b": b})

        with pytest.raises(CyclicDependencyError) as exc_info:
            assign_levels({a.id: a, b.id: b})

        assert set(exc_info.value.task_ids) == {a.id, b.id}
        assert "Cyclic dependency" in str(exc_info.value)

    def test_cycle_error_is_configuration_error(self):
        """Test the cycle error is a GraphConfigurationError and ValueError."""
        a = Task(noop)
        a.dependencies = DependencyTree({"self": a})

        with pytest.raises(GraphConfigurationError):
            assign_levels({a.id: a})
        with pytest.raises(ValueError):
            assign_levels({a.id: a})

    def test_missing_dependency_raises(self):
        """Test a dependency outside the map can never be leveled."""
        a = Task(noop)
        b = Task(noop, {"a": a})

        with pytest.raises(CyclicDependencyError):
            assign_levels({b.id: b})


class TestBuildClosure:
    """Tests for build_closure."""

    def test_includes_root_at_max_level(self):
        """Test the closure contains the root at its maximum level."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        root = Task(noop, {"b": b, "a": a})

        closure = build_closure(root)

        assert root.id in closure
        assert closure.root is root
        assert closure.levels[root.id] == max(closure.levels.values())
        assert closure.depth == 3

    def test_root_without_dependencies(self):
        """Test a lone root is a one-task closure at level 0."""
        root = Task(noop)
        closure = build_closure(root)

        assert len(closure) == 1
        assert closure.levels == {root.id: 0}
        assert closure.direct_dependencies == {root.id: []}

    def test_ordered_respects_levels(self):
        """Test ordered() never puts a task before its dependencies."""
        a = Task(noop)
        b = Task(noop, {"a": a})
        c = Task(noop)
        d = Task(noop, {"b": b, "c": c})
        root = Task(noop, {"d": d, "a": a})

        closure = build_closure(root)
        order = [task.id for task in closure.ordered()]

        for task_id, deps in closure.direct_dependencies.items():
            for dep_id in deps:
                assert order.index(dep_id) < order.index(task_id)
        assert order[-1] == root.id

    def test_by_level_groups(self):
        """Test by_level yields one group per level."""
        a = Task(noop)
        b = Task(noop)
        root = Task(noop, {"a": a, "b": b})

        groups = list(build_closure(root).by_level())

        assert [level for level, _ in groups] == [0, 1]
        assert {t.id for t in groups[0][1]} == {a.id, b.id}
        assert [t.id for t in groups[1][1]] == [root.id]

    def test_deep_chain(self):
        """Test a long chain resolves without recursion trouble."""
        task = Task(noop)
        first = task
        for _ in range(2000):
            task = Task(noop, {"prev": task})

        closure = build_closure(task)

        assert len(closure) == 2001
        assert closure.levels[first.id] == 0
        assert closure.levels[task.id] == 2000

    def test_self_dependency_raises(self):
        """Test a root depending on itself is a cycle."""
        root = Task(noop)
        root.dependencies = DependencyTree({"me": root})

        with pytest.raises(CyclicDependencyError):
            build_closure(root)
