import itertools

from detective_quest import ledger
from detective_quest.ledger import ClueNode


def build(clues):
    root = None
    for clue in clues:
        root = ledger.insert(root, clue)
    return root


def test_insert_into_empty_ledger_returns_new_root():
    root = ledger.insert(None, "glove")
    assert isinstance(root, ClueNode)
    assert root.clue == "glove"
    assert root.count == 1


def test_insert_keeps_root():
    root = ledger.insert(None, "m")
    assert ledger.insert(root, "a") is root
    assert ledger.insert(root, "z") is root
    assert ledger.insert(root, "m") is root


def test_inorder_is_sorted_for_every_insertion_order():
    clues = ["tea", "glove", "rope", "ash", "knife"]
    for order in itertools.permutations(clues):
        listed = [clue for clue, _ in ledger.inorder(build(order))]
        assert listed == sorted(clues)


def test_repeated_clue_is_counted_in_one_node():
    root = build(["glove"] * 4)
    assert ledger.size(root) == 1
    assert list(ledger.inorder(root)) == [("glove", 4)]
    assert ledger.total(root) == 4


def test_distinct_clues_make_distinct_nodes():
    root = build(["b", "a", "c", "a", "d"])
    assert ledger.size(root) == 4
    assert ledger.find(root, "a").count == 2
    assert ledger.find(root, "e") is None


def test_comparison_is_case_sensitive():
    root = build(["glove", "Glove"])
    assert list(ledger.inorder(root)) == [("Glove", 1), ("glove", 1)]


def test_inorder_is_restartable():
    root = build(["b", "a", "c"])
    first = list(ledger.inorder(root))
    assert list(ledger.inorder(root)) == first
    assert list(ledger.inorder(None)) == []


def test_count_matching_sums_every_matching_node():
    root = build(["B", "A", "C", "A"])
    suspects = {"A": "X", "B": "Y", "C": "X"}
    assert ledger.count_matching(root, "X", suspects.get) == 3
    assert ledger.count_matching(root, "Y", suspects.get) == 1
    assert ledger.count_matching(root, "Z", suspects.get) == 0


def test_count_matching_ignores_unresolved_clues():
    root = build(["A", "orphan", "orphan"])
    assert ledger.count_matching(root, "X", {"A": "X"}.get) == 1
    assert ledger.count_matching(None, "X", {"A": "X"}.get) == 0


def test_teardown_releases_each_node_once():
    root = build(["m", "c", "x", "a", "e", "m"])
    left = root.left
    assert ledger.teardown(root) == 5
    assert root.left is None and root.right is None
    assert left.left is None and left.right is None
    assert ledger.teardown(None) == 0


def test_degenerate_ledger_does_not_hit_recursion_limit():
    clues = [f"clue-{i:05d}" for i in range(3000)]
    root = build(clues)
    assert ledger.size(root) == 3000
    assert ledger.teardown(root) == 3000
