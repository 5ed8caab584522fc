"""Client runner helpers that need no display"""

import json

from main import load_survey, parse_args


def test_survey_file_builds_the_token(tmp_path):
    path = tmp_path / "survey.json"
    path.write_text(json.dumps({
        'rankings': {'Rap': 3, 'Country': 6, 'Rock': 1, 'Classical': 2, 'Pop': 4, 'EDM': 5},
        'ratings': {'Rap': 5, 'Country': 1, 'Rock': 5, 'Classical': 4, 'Pop': 3, 'EDM': 2},
    }))
    token = load_survey(str(path))
    assert token.choices() == ['Rock', 'Country', 'Pop']


def test_unusable_survey_file_is_ignored(tmp_path):
    path = tmp_path / "survey.json"
    path.write_text('{"rankings": {}}')
    assert load_survey(str(path)) is None
    assert load_survey(str(tmp_path / "missing.json")) is None


def test_offline_flag():
    args = parse_args(["--offline", "--subject", "S07", "--survey", "answers.json"])
    assert args.offline
    assert args.subject == "S07"
    assert args.survey == "answers.json"
