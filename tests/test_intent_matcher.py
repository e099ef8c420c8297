import sys
import os
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")

from app.schemas.chat import PanelTag, ResponseRule
from app.services.intent_matcher import match_intent, rule_matches
from app.services.responses import RESPONSE_TABLE, FALLBACK_RULE, FALLBACK_REPLY


def test_first_matching_rule_wins():
    # "game" also appears in the second rule, but the first one is checked first
    rule = match_intent("I want to make a game")
    assert rule is RESPONSE_TABLE[0]
    assert rule.reply.startswith("That sounds cool!")


def test_matching_is_case_insensitive():
    assert match_intent("YES please") is RESPONSE_TABLE[2]
    assert match_intent("About three MONTHS") is RESPONSE_TABLE[3]


def test_milestones_unlock_project_setup():
    rule = match_intent("Let's add milestones for texture and animation")
    assert rule.ui == PanelTag.PROJECT_SETUP


def test_team_rule():
    rule = match_intent("team members please")
    assert rule.ui == PanelTag.TEAM_SETUP


def test_tools_rule():
    assert match_intent("can you compare software options").ui == PanelTag.TOOLS_COMPARISON


def test_extra_panels():
    assert match_intent("where do I upload assets").ui == PanelTag.FILE_MANAGEMENT
    assert match_intent("show the revision log").ui == PanelTag.VERSION_CONTROL
    assert match_intent("show me a chart").ui == PanelTag.PROGRESS_GRAPHS
    assert match_intent("which export formats are there").ui == PanelTag.IMPORT_EXPORT


def test_no_match_returns_fallback():
    rule = match_intent("hello there")
    assert rule is FALLBACK_RULE
    assert rule.reply == FALLBACK_REPLY
    assert rule.ui is None


def test_surrounding_whitespace_is_ignored():
    assert match_intent("   setup   ") is RESPONSE_TABLE[2]


def test_custom_table():
    table = [
        ResponseRule(triggers=[r"^hi$"], reply="hello"),
        ResponseRule(triggers=[r"bye", r"later"], reply="see you"),
    ]
    assert match_intent("hi", table).reply == "hello"
    assert match_intent("catch you later", table).reply == "see you"
    assert match_intent("hi there", table) is FALLBACK_RULE


def test_rule_matches_any_trigger():
    rule = ResponseRule(triggers=[r"alpha", r"beta"], reply="x")
    assert rule_matches(rule, "BETA test")
    assert not rule_matches(rule, "gamma")
