"""Unit tests for the line grammar and the work-type classifier."""

import pytest

from src.coaching_engine.plan_grammar import find_sections, header_kind, parse_sections, tag_line
from src.coaching_engine.work_types import classify_work_type


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, expected",
    [
        ("**Top 3:**", "top3"),
        ("## Your Top 3:", "top3"),
        ("Here's your plan for Tuesday:", "top3"),
        ("Plan for today:", "top3"),
        ("**Admin Batch:**", "admin_batch"),
        ("Quick hits:", "admin_batch"),
        ("Here's what I'm capturing:", "summary"),
        ("Meetings today:", "meetings"),
        ("Follow-ups:", "follow_ups"),
        ("Top 3 for you", None),
        ("My top 3: deck, standup, inbox", None),
    ],
)
def test_header_spellings(line, expected):
    assert header_kind(line) == expected


@pytest.mark.unit
def test_tag_line_kinds():
    assert tag_line("1. Write spec").kind == "numbered_item"
    assert tag_line("2) Standup").text == "Standup"
    assert tag_line("- Reply to Sam").kind == "bullet_item"
    assert tag_line("* Reply to Sam").text == "Reply to Sam"
    assert tag_line("   ").kind == "blank"
    assert tag_line("Just chatting").kind == "text"
    # bold headers must not be read as bullets
    assert tag_line("**Top 3:**").kind == "header"


@pytest.mark.unit
def test_sections_end_at_blank_line_or_next_header():
    text = "Top 3:\n\n1. One\n2. Two\n\nNot part of it\n3. Stray\nAdmin batch:\n- Email"
    sections = parse_sections(text)
    assert [section.kind for section in sections] == ["top3", "admin_batch"]
    assert sections[0].numbered_items() == ["One", "Two"]
    assert sections[1].bullet_items() == ["Email"]


@pytest.mark.unit
def test_find_sections_filters_by_kind():
    text = "Meetings:\n- 1:1 with Dana\n\nTop 3:\n1. Deck"
    assert len(find_sections(text, "meetings")) == 1
    assert find_sections(text, "admin_batch") == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Write technical spec (deep focus - needs 2 hours)", "deep_focus"),
        ("Team standup at 10am (meeting)", "meeting"),
        ("Clear email inbox (admin - 15 min batch)", "admin"),
        ("Sync with design on deck", "meeting"),
        ("Quick Slack replies", "admin"),
        ("Prototype 3 hours", "deep_focus"),
        ("Think about pricing", "deep_focus"),
        ("Lunch with Jo at 1:30 pm", "meeting"),
    ],
)
def test_classify_work_type_priority(text, expected):
    assert classify_work_type(text) == expected
