from __future__ import annotations

from taskdown.domain.board import Board, Card, ChecklistItem, Epic
from taskdown.serializer import SerializerOptions, serialize


def _board_with(card: Card) -> Board:
    return Board(epics=[Epic(id="EPIC-001", title="Test Epic", cards=[card])])


def test_serializes_board_title() -> None:
    result = serialize(Board(title="My Board Title"))

    assert result == "# My Board Title\n"


def test_empty_board_serializes_to_empty_string() -> None:
    assert serialize(Board()) == ""


def test_exact_layout_of_single_card() -> None:
    board = Board(
        title="B",
        epics=[Epic(id="E-1", title="Epic", cards=[Card(id="C-1", title="Card", type="Story")])],
    )

    assert serialize(board) == (
        "# B\n"
        "\n"
        "## Epic: Epic (E-1)\n"
        "\n"
        "\n"
        "### C-1: Card\n"
        "\n"
        "**Type**: Story  \n"
        "\n"
        "\n"
        "**Dependencies**: None  \n"
        "**Blocks**: None\n"
    )


def test_multiple_epics_are_separated_by_two_blank_lines() -> None:
    board = Board(
        epics=[
            Epic(id="EPIC-001", title="First Epic"),
            Epic(id="EPIC-002", title="Second Epic"),
        ]
    )

    assert serialize(board) == (
        "## Epic: First Epic (EPIC-001)\n\n\n\n## Epic: Second Epic (EPIC-002)\n"
    )


def test_card_metadata_in_fixed_order() -> None:
    card = Card(
        id="CARD-001",
        title="Test Card",
        sprint="Sprint 1",
        story_points=5,
        priority="High",
        type="Story",
    )

    lines = serialize(_board_with(card)).split("\n")
    metadata = [line for line in lines if line.startswith("**") and "Depend" not in line]

    assert metadata[:4] == [
        "**Type**: Story  ",
        "**Priority**: High  ",
        "**Story Points**: 5  ",
        "**Sprint**: Sprint 1  ",
    ]


def test_zero_story_points_render_as_number() -> None:
    result = serialize(_board_with(Card(id="C", title="T", story_points=0)))

    assert "**Story Points**: 0  " in result


def test_unset_metadata_is_omitted_by_default() -> None:
    result = serialize(_board_with(Card(id="C", title="T")))

    assert "**Type**" not in result
    assert "**Story Points**" not in result
    assert "**Description**" not in result


def test_include_empty_fields_renders_blank_values() -> None:
    result = serialize(
        _board_with(Card(id="C", title="T")),
        SerializerOptions(include_empty_fields=True),
    )

    for label in ("Type", "Priority", "Story Points", "Sprint"):
        assert f"**{label}**:   " in result
    assert "**Description**" not in result


def test_description_line() -> None:
    card = Card(id="C", title="T", description="This is a test card description.")

    assert "\n\n**Description**: This is a test card description.\n\n" in serialize(
        _board_with(card)
    )


def test_checklists_render_markers_and_labels() -> None:
    card = Card(
        id="C",
        title="T",
        acceptance_criteria=[
            ChecklistItem(text="A"),
            ChecklistItem(text="B (done)", completed=True),
        ],
        technical_tasks=[ChecklistItem(text="Wire it up")],
    )

    result = serialize(_board_with(card))

    assert "\n**Acceptance Criteria**:\n\n- [ ] A\n\n- [x] B (done)\n\n" in result
    assert "\n**Technical Tasks**:\n\n- [ ] Wire it up\n\n" in result
    assert result.index("Acceptance Criteria") < result.index("Technical Tasks")


def test_empty_checklists_are_omitted() -> None:
    result = serialize(_board_with(Card(id="C", title="T")))

    assert "Acceptance Criteria" not in result
    assert "Technical Tasks" not in result


def test_dependencies_and_blocks_trailer() -> None:
    card = Card(id="C", title="T", dependencies=["CARD-002", "CARD-003"], blocks=["CARD-004"])

    result = serialize(_board_with(card))

    assert result.endswith("**Dependencies**: CARD-002, CARD-003  \n**Blocks**: CARD-004\n")


def test_empty_and_unset_references_render_none() -> None:
    for dependencies, blocks in ((None, None), ([], [])):
        card = Card(id="C", title="T", dependencies=dependencies, blocks=blocks)
        result = serialize(_board_with(card), SerializerOptions(include_empty_fields=False))
        assert "**Dependencies**: None  \n**Blocks**: None" in result


def test_cards_separated_by_horizontal_rule_by_default() -> None:
    board = Board(
        epics=[Epic(id="E", title="E", cards=[Card(id="C-1", title="One"), Card(id="C-2", title="Two")])]
    )

    assert "**Blocks**: None\n\n\n---\n\n### C-2: Two" in serialize(board)


def test_cards_without_horizontal_rule() -> None:
    board = Board(
        epics=[Epic(id="E", title="E", cards=[Card(id="C-1", title="One"), Card(id="C-2", title="Two")])]
    )

    result = serialize(board, SerializerOptions(separate_cards_with_hr=False))

    assert "---" not in result
    assert "**Blocks**: None\n\n\n### C-2: Two" in result


def test_indent_size_has_no_effect() -> None:
    card = Card(id="C", title="T", technical_tasks=[ChecklistItem(text="x")])
    board = _board_with(card)

    assert serialize(board, SerializerOptions(indent_size=8)) == serialize(board)


def test_serialize_does_not_mutate_board() -> None:
    card = Card(id="C", title="T", dependencies=["A"])
    board = _board_with(card)
    before = board.to_dict()

    serialize(board, SerializerOptions(include_empty_fields=True))

    assert board.to_dict() == before
